"""
visual.py

Screenshot baselines for visual regression checks. A page or locator is
captured and compared pixel by pixel against ``snapshots/<name>``; on a
mismatch the actual capture and a diff image are written next to the baseline.
"""
import io
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image, ImageChops

from config import settings
from utils import logger


class SnapshotMismatchError(AssertionError):
    """Raised when a capture differs from its baseline beyond the allowed pixels."""


def count_diff_pixels(baseline: Image.Image, actual: Image.Image) -> int:
    """Number of pixels that differ in any channel. Sizes must match."""
    if baseline.size != actual.size:
        raise ValueError(f"size mismatch: baseline {baseline.size} vs actual {actual.size}")
    changed = _changed_mask(baseline, actual)
    return changed.size[0] * changed.size[1] - changed.histogram()[0]


def _changed_mask(baseline: Image.Image, actual: Image.Image) -> Image.Image:
    """L-mode mask, 255 wherever any RGBA channel differs."""
    diff = ImageChops.difference(baseline.convert("RGBA"), actual.convert("RGBA"))
    bands = diff.split()
    widest = bands[0]
    for band in bands[1:]:
        widest = ImageChops.lighter(widest, band)
    return widest.point(lambda v: 255 if v else 0)


def _diff_image(baseline: Image.Image, actual: Image.Image) -> Image.Image:
    # differing pixels in solid red over black
    mask = _changed_mask(baseline, actual)
    red = Image.new("RGB", mask.size, (255, 0, 0))
    return Image.composite(red, Image.new("RGB", mask.size), mask)


def assert_snapshot(
    target,
    name: str,
    max_diff_pixels: int = 0,
    mask: Optional[Sequence] = None,
    snapshot_dir: Optional[str] = None,
) -> Path:
    """Compare a screenshot of ``target`` (a Page or Locator) with its baseline.

    A missing baseline is written and accepted, except under CI where it is a
    failure. ``settings.update_snapshots`` rewrites the baseline unconditionally.
    """
    directory = Path(snapshot_dir or settings.snapshot_dir)
    directory.mkdir(parents=True, exist_ok=True)
    baseline_path = directory / name
    actual_path = baseline_path.with_name(f"{baseline_path.stem}-actual.png")
    diff_path = baseline_path.with_name(f"{baseline_path.stem}-diff.png")

    png = target.screenshot(mask=list(mask or []))

    if not baseline_path.exists() and settings.ci:
        actual_path.write_bytes(png)
        raise SnapshotMismatchError(
            f"No baseline for {name}; actual capture written to {actual_path}"
        )
    if settings.update_snapshots or not baseline_path.exists():
        baseline_path.write_bytes(png)
        logger.info("Baseline written to %s", baseline_path)
        return baseline_path

    with Image.open(baseline_path) as baseline, Image.open(io.BytesIO(png)) as actual:
        if baseline.size != actual.size:
            actual.save(actual_path)
            raise SnapshotMismatchError(
                f"{name}: size {actual.size} differs from baseline {baseline.size}"
            )
        differing = count_diff_pixels(baseline, actual)
        if differing > max_diff_pixels:
            actual.save(actual_path)
            _diff_image(baseline, actual).save(diff_path)
            raise SnapshotMismatchError(
                f"{name}: {differing} pixels differ (allowed {max_diff_pixels}); see {diff_path}"
            )
    return baseline_path

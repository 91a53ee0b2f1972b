import json
import logging
import math
import re
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field
from tenacity import (
    Retrying,
    before_sleep_log,
    stop_after_attempt,
    wait_fixed,
)

from config import settings


logging.basicConfig(
    level=settings.log_level.upper(),
    format="[%(levelname)s] %(asctime)s - %(message)s",
)
logger = logging.getLogger("robot")

_NUMBER = re.compile(r"\d+(?:\.\d+)?|\.\d+")


class RetryPolicy(BaseModel):
    """How often and how patiently a single UI action is retried."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default_factory=lambda: settings.retry_attempts, ge=1)
    visible_timeout_ms: int = Field(
        default_factory=lambda: settings.retry_visible_timeout_ms, ge=0
    )
    backoff_ms: int = Field(default_factory=lambda: settings.retry_backoff_ms, ge=0)


def _resolve_policy(max_retries: Optional[int], policy: Optional[RetryPolicy]) -> RetryPolicy:
    policy = policy or RetryPolicy()
    if max_retries is None:
        return policy
    if max_retries < 1:
        raise ValueError(f"max_retries must be >= 1, got {max_retries}")
    return policy.model_copy(update={"max_attempts": max_retries})


def _retrying(page, policy: RetryPolicy) -> Retrying:
    # Backoff goes through Playwright so it is bounded by the test timeout.
    return Retrying(
        reraise=True,
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_fixed(policy.backoff_ms / 1000),
        sleep=lambda seconds: page.wait_for_timeout(seconds * 1000),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def _with_retry(page, selector: str, action: Callable[[Any], None], policy: RetryPolicy) -> None:
    def attempt():
        locator = page.locator(selector)
        locator.wait_for(state="visible", timeout=policy.visible_timeout_ms)
        action(locator)

    _retrying(page, policy)(attempt)


def click_with_retry(
    page,
    selector: str,
    max_retries: Optional[int] = None,
    policy: Optional[RetryPolicy] = None,
) -> None:
    """Wait for ``selector`` to be visible and click it, retrying transient failures.

    The final attempt's exception is re-raised once the attempts run out.
    """
    policy = _resolve_policy(max_retries, policy)
    _with_retry(page, selector, lambda loc: loc.click(), policy)


def fill_with_retry(
    page,
    selector: str,
    value: str,
    max_retries: Optional[int] = None,
    policy: Optional[RetryPolicy] = None,
) -> None:
    """Wait for ``selector`` to be visible and fill it with ``value``, retrying."""
    policy = _resolve_policy(max_retries, policy)
    _with_retry(page, selector, lambda loc: loc.fill(value), policy)


def wait_for_element(page, selector: str, timeout: int = 10000) -> None:
    page.locator(selector).wait_for(state="visible", timeout=timeout)


def get_all_text_content(page, selector: str) -> list[str]:
    return page.locator(selector).all_text_contents()


def scroll_into_view(page, selector: str) -> None:
    page.locator(selector).scroll_into_view_if_needed()


def take_screenshot(page, file_name: str, screenshot_dir: Optional[str] = None) -> Path:
    """Save a viewport PNG as ``<screenshot_dir>/<file_name>.png``."""
    directory = Path(screenshot_dir or settings.screenshot_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{file_name}.png"
    page.screenshot(path=str(path))
    logger.info("Screenshot saved to %s", path)
    return path


def handle_dialog(page, accept: bool = True) -> None:
    """Accept (or dismiss) every dialog the page raises from now on."""

    def _on_dialog(dialog):
        if accept:
            dialog.accept()
        else:
            dialog.dismiss()

    page.on("dialog", _on_dialog)


def extract_number(text: Optional[str]) -> float:
    match = _NUMBER.search(text or "")
    return float(match.group(0)) if match else 0


def _js_value(value: Any) -> Any:
    # JSON.stringify writes 1.0 as 1 and non-finite numbers as null
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value) if value.is_integer() else value
    if isinstance(value, dict):
        return {k: _js_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_js_value(v) for v in value]
    return value


def to_json(value: Any, default: Callable[[Any], Any] = str) -> str:
    """Compact JSON the way JSON.stringify writes it: no spaces, raw unicode."""
    return json.dumps(
        _js_value(value),
        separators=(",", ":"),
        ensure_ascii=False,
        default=default,
    )


def are_arrays_equal(first: list, second: list) -> bool:
    return to_json(first) == to_json(second)


def wait_for_api_response(page, url_pattern: str, timeout: int = 10000) -> Any:
    """Wait for the next response whose URL contains ``url_pattern``; return its JSON."""
    response = page.wait_for_event(
        "response",
        predicate=lambda r: url_pattern in r.url,
        timeout=timeout,
    )
    return response.json()


def get_cookie(page, cookie_name: str) -> Optional[str]:
    for cookie in page.context.cookies():
        if cookie["name"] == cookie_name:
            return cookie["value"]
    return None


def clear_cookies(page) -> None:
    page.context.clear_cookies()

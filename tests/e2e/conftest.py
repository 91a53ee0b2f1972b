# tests/e2e/conftest.py

import time

import pytest
from playwright.sync_api import Error as PlaywrightError

from config import settings
from pages import (
    CartPage,
    CheckoutCompletePage,
    CheckoutOverviewPage,
    CheckoutPage,
    InventoryPage,
    LoginPage,
)
from runlog import create_logger
from utils import logger, take_screenshot


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    # expose each phase's report to fixtures as item.rep_setup / rep_call / rep_teardown
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest.fixture(scope="session")
def browser_type_launch_args(browser_type_launch_args):
    """Apply HEADLESS / SLOW_MO on top of pytest-playwright's own CLI options."""
    return {
        **browser_type_launch_args,
        "headless": browser_type_launch_args.get("headless", True) and settings.headless,
        "slow_mo": browser_type_launch_args.get("slow_mo") or settings.slow_mo,
    }


@pytest.fixture
def page(page):
    page.set_default_timeout(settings.element_timeout_ms)
    page.set_default_navigation_timeout(settings.nav_timeout_ms)
    return page


@pytest.fixture
def run_logger(request):
    """Per-test RunLogger; grabs a screenshot if the test body failed."""
    run_log = create_logger(request.node.name)
    yield run_log

    report = getattr(request.node, "rep_call", None)
    page = request.node.funcargs.get("page")
    if report is not None and report.failed and page is not None:
        try:
            shot = take_screenshot(page, f"{request.node.name}-failure-{int(time.time() * 1000)}")
        except PlaywrightError as e:
            # the page may already be gone; the test failure itself is reported by pytest
            run_log.warn("Failure screenshot not captured", e)
        else:
            run_log.info(f"Screenshot captured: {shot}")


@pytest.fixture
def login_page(page):
    return LoginPage(page)


@pytest.fixture
def inventory_page(page):
    return InventoryPage(page)


@pytest.fixture
def cart_page(page):
    return CartPage(page)


@pytest.fixture
def checkout_page(page):
    return CheckoutPage(page)


@pytest.fixture
def overview_page(page):
    return CheckoutOverviewPage(page)


@pytest.fixture
def complete_page(page):
    return CheckoutCompletePage(page)


@pytest.fixture
def authenticated_page(page, run_logger):
    """A page already logged in as the standard user and parked on the inventory."""
    try:
        run_logger.step(1, "Navigating to login page")
        login = LoginPage(page)
        login.goto()

        run_logger.step(2, "Logging in with valid credentials")
        login.login(settings.username, settings.password)

        run_logger.step(3, "Verifying authentication success")
        page.goto(settings.url("inventory.html"))
        page.wait_for_url(settings.url("inventory.html"))
        run_logger.success("Authentication successful")
    except Exception as e:
        run_logger.error("Authentication failed", e)
        logger.error("Could not log in as %s: %s", settings.username, e)
        raise
    return page


@pytest.fixture
def api_request(playwright):
    """An APIRequestContext rooted at the site, for plain HTTP checks."""
    context = playwright.request.new_context(base_url=settings.url())
    yield context
    context.dispose()

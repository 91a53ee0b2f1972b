# tests/e2e/test_security_session.py

import pytest
from playwright.sync_api import Page, expect

from config import settings
from pages import InventoryPage, LoginPage
from utils import clear_cookies, get_cookie

pytestmark = pytest.mark.e2e

SESSION_COOKIE = "session-username"


def test_tc22_product_page_requires_login(page: Page):
    page.goto(settings.url("inventory.html"))

    expect(page).to_have_url(settings.url())
    expect(page.locator(LoginPage.LOGO)).to_be_visible()


def test_tc23_refresh_after_logout_stays_logged_out(authenticated_page: Page):
    InventoryPage(authenticated_page).logout()

    authenticated_page.reload()

    expect(authenticated_page).to_have_url(settings.url())
    expect(authenticated_page.locator(LoginPage.LOGO)).to_be_visible()


def test_session_cookie_set_on_login_and_cleared_on_logout(authenticated_page: Page):
    assert get_cookie(authenticated_page, SESSION_COOKIE) == settings.username

    InventoryPage(authenticated_page).logout()

    assert get_cookie(authenticated_page, SESSION_COOKIE) is None


def test_clearing_cookies_drops_the_session(authenticated_page: Page):
    clear_cookies(authenticated_page)

    authenticated_page.goto(settings.url("inventory.html"))

    expect(authenticated_page).to_have_url(settings.url())

# tests/e2e/test_api.py

import pytest
from playwright.sync_api import APIRequestContext, Page, expect

from config import settings
from pages import InventoryPage, LoginPage

pytestmark = pytest.mark.e2e

# SauceDemo is a static SPA with no real API; these check the pages are served.


@pytest.mark.parametrize("path", ["", "inventory.html", "checkout-step-one.html"])
def test_page_is_served(api_request: APIRequestContext, path):
    response = api_request.get(settings.url(path))

    assert response.status == 200


def test_login_page_is_swag_labs(api_request: APIRequestContext):
    response = api_request.get(settings.url())

    assert response.ok
    assert "Swag Labs" in response.text()


def test_ui_login_then_inventory_is_served(page: Page, login_page: LoginPage, api_request: APIRequestContext):
    login_page.goto()
    login_page.login(settings.username, settings.password)
    page.wait_for_url(settings.url("inventory.html"))

    assert api_request.get(settings.url("inventory.html")).status == 200

    products = page.locator(InventoryPage.ITEM)
    expect(products.first).to_be_visible()
    assert products.count() > 0

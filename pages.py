# pages.py
from typing import List, Optional

from config import settings
from utils import (
    click_with_retry,
    extract_number,
    fill_with_retry,
    get_all_text_content,
    logger,
)


SORT_OPTIONS = ("az", "za", "lohi", "hilo")


class BasePage:
    """Base class for all Page Objects."""

    path = ""

    def __init__(self, page):
        self.page = page

    def goto(self, path: Optional[str] = None):
        url = settings.url(self.path if path is None else path)
        self.page.goto(url)
        logger.info("Navigated to %s", url)

    @property
    def url(self) -> str:
        return self.page.url

    def error_message(self) -> Optional[str]:
        return self.page.locator('[data-test="error"]').text_content()


class LoginPage(BasePage):
    USERNAME = '[data-test="username"]'
    PASSWORD = '[data-test="password"]'
    LOGIN_BUTTON = '[data-test="login-button"]'
    LOGO = ".login_logo"

    def fill_username(self, username: str):
        fill_with_retry(self.page, self.USERNAME, username)

    def fill_password(self, password: str):
        fill_with_retry(self.page, self.PASSWORD, password)

    def click_login(self):
        click_with_retry(self.page, self.LOGIN_BUTTON)

    def get_error_message(self) -> Optional[str]:
        return self.error_message()

    def login(self, username: str, password: str):
        self.fill_username(username)
        self.fill_password(password)
        self.click_login()
        logger.info("Submitted login for %s", username)

    def is_logo_visible(self) -> bool:
        return self.page.locator(self.LOGO).is_visible()


class InventoryPage(BasePage):
    path = "inventory.html"

    ITEM = ".inventory_item"
    ITEM_NAME = ".inventory_item_name"
    ITEM_PRICE = ".inventory_item_price"
    CART_BADGE = ".shopping_cart_badge"
    CART_LINK = ".shopping_cart_link"
    SORT_SELECT = ".product_sort_container"
    MENU_BUTTON = "#react-burger-menu-btn"
    LOGOUT_LINK = "#logout_sidebar_link"

    def get_product_count(self) -> int:
        return self.page.locator(self.ITEM).count()

    def add_product_to_cart(self, index: int = 0):
        self.page.locator("button", has_text="Add to cart").nth(index).click()

    def remove_product_from_cart(self, index: int = 0):
        self.page.locator("button", has_text="Remove").nth(index).click()

    def get_cart_badge_count(self) -> int:
        badge = self.page.locator(self.CART_BADGE)
        if badge.count() == 0:
            return 0
        return int(badge.text_content() or "0")

    def go_to_cart(self):
        self.page.locator(self.CART_LINK).click()

    def sort_by(self, option: str):
        if option not in SORT_OPTIONS:
            raise ValueError(f"Unknown sort option {option!r}; expected one of {SORT_OPTIONS}")
        self.page.locator(self.SORT_SELECT).select_option(option)

    def get_sort_value(self) -> str:
        return self.page.locator(self.SORT_SELECT).input_value()

    def get_product_prices(self) -> List[float]:
        return [extract_number(p) for p in get_all_text_content(self.page, self.ITEM_PRICE)]

    def get_product_names(self) -> List[str]:
        return get_all_text_content(self.page, self.ITEM_NAME)

    def open_menu(self):
        click_with_retry(self.page, self.MENU_BUTTON)

    def logout(self):
        self.open_menu()
        # the sidebar slides in, so the link is not clickable right away
        click_with_retry(self.page, self.LOGOUT_LINK)
        logger.info("Logged out")


class CartPage(BasePage):
    path = "cart.html"

    ITEM = ".cart_item"
    CHECKOUT_BUTTON = '[data-test="checkout"]'
    CONTINUE_SHOPPING = '[data-test="continue-shopping"]'

    def get_cart_item_count(self) -> int:
        return self.page.locator(self.ITEM).count()

    def remove_item(self, index: int = 0):
        self.page.locator("button", has_text="Remove").nth(index).click()

    def continue_shopping(self):
        click_with_retry(self.page, self.CONTINUE_SHOPPING)

    def checkout(self):
        click_with_retry(self.page, self.CHECKOUT_BUTTON)


class CheckoutPage(BasePage):
    path = "checkout-step-one.html"

    FIRST_NAME = '[data-test="firstName"]'
    LAST_NAME = '[data-test="lastName"]'
    ZIP_CODE = '[data-test="postalCode"]'
    CONTINUE_BUTTON = '[data-test="continue"]'

    def fill_first_name(self, first_name: str):
        fill_with_retry(self.page, self.FIRST_NAME, first_name)

    def fill_last_name(self, last_name: str):
        fill_with_retry(self.page, self.LAST_NAME, last_name)

    def fill_zip_code(self, zip_code: str):
        fill_with_retry(self.page, self.ZIP_CODE, zip_code)

    def fill_checkout_info(self, first_name: str, last_name: str, zip_code: str):
        self.fill_first_name(first_name)
        self.fill_last_name(last_name)
        self.fill_zip_code(zip_code)

    def click_continue(self):
        click_with_retry(self.page, self.CONTINUE_BUTTON)

    def get_error_message(self) -> Optional[str]:
        return self.error_message()


class CheckoutOverviewPage(BasePage):
    path = "checkout-step-two.html"

    SUBTOTAL = ".summary_subtotal_label"
    TAX = ".summary_tax_label"
    TOTAL = ".summary_total_label"
    FINISH_BUTTON = '[data-test="finish"]'

    def _amount(self, selector: str) -> float:
        return extract_number(self.page.locator(selector).text_content())

    def get_subtotal(self) -> float:
        return self._amount(self.SUBTOTAL)

    def get_tax(self) -> float:
        return self._amount(self.TAX)

    def get_total(self) -> float:
        return self._amount(self.TOTAL)

    def finish(self):
        click_with_retry(self.page, self.FINISH_BUTTON)


class CheckoutCompletePage(BasePage):
    path = "checkout-complete.html"

    HEADER = ".complete-header"

    def get_success_message(self) -> Optional[str]:
        return self.page.locator(self.HEADER).text_content()

    def is_order_complete(self) -> bool:
        return self.page.get_by_text("Thank you for your order").is_visible()

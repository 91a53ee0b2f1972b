# main.py
import sys
import time
import argparse
from playwright.sync_api import sync_playwright, TimeoutError as PWTimeout

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
from utils import take_screenshot


ITEMS_TO_BUY = 2
RUN_NAME = "smoke-checkout"


def _checkout(page, username: str, run_log) -> str:
    run_log.step(1, "Logging in")
    login = LoginPage(page)
    login.goto()
    login.login(username, settings.password)
    page.wait_for_url(settings.url("inventory.html"))
    run_log.success("Login completed", {"username": username})

    run_log.step(2, "Adding products to cart")
    inventory = InventoryPage(page)
    items = min(ITEMS_TO_BUY, inventory.get_product_count())
    for _ in range(items):
        # the first "Add to cart" button flips to "Remove" once clicked
        inventory.add_product_to_cart(0)
    run_log.success(f"{items} products added to cart")

    run_log.step(3, "Proceeding to checkout")
    inventory.go_to_cart()
    CartPage(page).checkout()

    run_log.step(4, "Filling checkout information")
    checkout = CheckoutPage(page)
    checkout.fill_checkout_info(
        settings.checkout_first_name,
        settings.checkout_last_name,
        settings.checkout_zip_code,
    )
    checkout.click_continue()
    page.wait_for_url("**/checkout-step-two.html")

    run_log.step(5, "Verifying order total")
    overview = CheckoutOverviewPage(page)
    subtotal, tax, total = overview.get_subtotal(), overview.get_tax(), overview.get_total()
    run_log.info("Order summary", {"subtotal": subtotal, "tax": tax, "total": total})
    if abs(total - (subtotal + tax)) > 0.05:
        raise AssertionError(f"Total {total} != subtotal {subtotal} + tax {tax}")

    run_log.step(6, "Completing purchase")
    overview.finish()
    page.wait_for_url("**/checkout-complete.html")
    message = CheckoutCompletePage(page).get_success_message()
    run_log.success("Purchase completed", {"message": message})

    return f'Success! {username} bought {items} items for ${total:.2f}'


def _record_failure(page, run_log, err: str) -> None:
    print(err)
    run_log.error(err)
    try:
        shot = take_screenshot(page, f"{RUN_NAME}-failure-{int(time.time() * 1000)}")
    except Exception as e:
        # a dead page or browser is the usual reason we got here
        run_log.warn("Failure screenshot not captured", e)
    else:
        run_log.info(f"Screenshot saved: {shot}")
    run_log.test_end(RUN_NAME, "FAILED")


def run(username: str) -> str:
    run_log = create_logger(RUN_NAME)
    run_log.test_start(RUN_NAME)
    run_log.info("Checkout smoke run", {"username": username})

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=settings.headless, slow_mo=settings.slow_mo)
        context = browser.new_context(
            viewport={"width": 1440, "height": 900},
            locale="en-US",
        )
        page = context.new_page()
        page.set_default_navigation_timeout(settings.nav_timeout_ms)
        page.set_default_timeout(settings.element_timeout_ms)

        try:
            msg = _checkout(page, username, run_log)
            print(msg)
            run_log.test_end(RUN_NAME, "PASSED")
            return msg

        except PWTimeout as te:
            err = f"Timeout while interacting with SauceDemo: {te}"
            _record_failure(page, run_log, err)
            return err
        except Exception as e:
            err = f"Run failed: {e}"
            _record_failure(page, run_log, err)
            return err
        finally:
            context.close()
            browser.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="SauceDemo checkout smoke robot")
    parser.add_argument("--user", default=settings.username, help="SauceDemo username")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    args = parser.parse_args(argv)

    if args.headed:
        settings.headless = False

    return 0 if run(args.user).startswith("Success!") else 1


if __name__ == "__main__":
    sys.exit(main())

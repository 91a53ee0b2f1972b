from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    # Target site (SauceDemo: public demo store)
    base_url: str = Field(default="https://www.saucedemo.com")

    # Demo credentials (publicly provided by SauceDemo)
    username: str = Field(default="standard_user", alias="TEST_USER_VALID_USERNAME")
    password: str = Field(default="secret_sauce", alias="TEST_USER_VALID_PASSWORD")
    locked_out_user: str = Field(default="locked_out_user", alias="TEST_USER_LOCKED_OUT")
    performance_user: str = Field(
        default="performance_glitch_user", alias="TEST_USER_PERFORMANCE"
    )
    problem_user: str = Field(default="problem_user", alias="TEST_USER_PROBLEM")

    # Checkout form data
    checkout_first_name: str = Field(default="John", alias="TEST_CHECKOUT_FIRST_NAME")
    checkout_last_name: str = Field(default="Doe", alias="TEST_CHECKOUT_LAST_NAME")
    checkout_zip_code: str = Field(default="12345", alias="TEST_CHECKOUT_ZIP_CODE")

    # Timeouts (ms)
    default_timeout_ms: int = Field(default=30000, alias="DEFAULT_TIMEOUT")
    nav_timeout_ms: int = Field(default=30000, alias="NAVIGATION_TIMEOUT")
    element_timeout_ms: int = Field(default=10000, alias="ELEMENT_TIMEOUT")

    # Retry policy for flaky clicks/fills
    retry_attempts: int = Field(default=3, ge=1)
    retry_visible_timeout_ms: int = 5000
    retry_backoff_ms: int = 500

    # Playwright
    headless: bool = True
    slow_mo: int = 0

    # Artifacts
    log_level: str = "INFO"
    log_dir: str = "logs"
    screenshot_dir: str = "screenshots"
    snapshot_dir: str = "snapshots"
    update_snapshots: bool = False

    ci: bool = False

    def url(self, path: str = "") -> str:
        """Join a site path (``inventory.html``, ``/cart.html``) onto the base URL."""
        base = self.base_url.rstrip("/")
        path = path.lstrip("/")
        return f"{base}/{path}" if path else f"{base}/"


settings = Settings()

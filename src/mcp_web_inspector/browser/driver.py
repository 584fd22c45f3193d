"""WebDriver creation and shutdown."""

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.options import Options

from ..context import BrowserSession

import logging
logger = logging.getLogger(__name__)


def build_chrome_options(config: dict) -> Options:
    """
    Translate the environment config into Chrome options.

    Performance logging is always on: the network log is read from the
    ``performance`` log (DevTools ``Network.*`` events).
    """
    options = Options()
    chrome_path = config.get("chrome_path")
    if chrome_path:
        options.binary_location = chrome_path
    if config.get("headless", True):
        options.add_argument("--headless=new")
    options.add_argument(
        f"--window-size={config.get('window_width', 1280)},{config.get('window_height', 720)}"
    )
    user_data_dir = config.get("user_data_dir")
    if user_data_dir:
        options.add_argument(f"--user-data-dir={user_data_dir}")
    options.add_argument("--no-first-run")
    options.add_argument("--no-default-browser-check")
    options.set_capability("goog:loggingPrefs", {"performance": "ALL"})
    return options


def create_webdriver(config: dict) -> webdriver.Chrome:
    options = build_chrome_options(config)
    driver = webdriver.Chrome(options=options)
    driver.set_page_load_timeout(config.get("page_load_timeout", 30.0))
    driver.set_script_timeout(config.get("script_timeout", 30.0))
    try:
        driver.execute_cdp_cmd("Network.enable", {})
    except WebDriverException as e:
        logger.debug("Network.enable failed (non-critical): %s", e.msg)
    return driver


def ensure_driver(session: BrowserSession) -> webdriver.Chrome:
    """Launch Chrome for ``session`` unless a driver is already attached."""
    if session.driver is None:
        logger.info("Launching Chrome (headless=%s)", session.config.get("headless", True))
        session.driver = create_webdriver(session.config)
        session.clear_network_log()
    return session.driver


def close_driver(session: BrowserSession) -> bool:
    """Quit the session's browser. Returns False when none was running."""
    driver = session.driver
    if driver is None:
        return False
    session.driver = None
    session.clear_network_log()
    try:
        driver.quit()
    except WebDriverException as e:
        logger.warning("Error while closing browser: %s", e.msg)
    return True


__all__ = [
    "build_chrome_options",
    "create_webdriver",
    "ensure_driver",
    "close_driver",
]

"""
Headless browser lifecycle for the Playwright renderer.

Chromium is launched lazily and reused while it stays connected.
Playwright's sync API binds its objects to the thread that started it, so
each worker thread gets its own Playwright driver and browser.
"""

import logging
import os
import sys
import threading
from typing import Callable, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from core.services.exceptions import BrowserUnavailable


logger = logging.getLogger(__name__)

# Flags for containers and sandboxed hosts without a usable setuid sandbox or /dev/shm
DEFAULT_LAUNCH_ARGS = (
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-dev-shm-usage',
    '--disable-gpu',
    '--no-zygote',
    '--single-process',
)

COMMON_BROWSER_PATHS = {
    'linux': (
        '/usr/bin/chromium',
        '/usr/bin/chromium-browser',
        '/usr/bin/google-chrome',
        '/usr/bin/google-chrome-stable',
        '/snap/bin/chromium',
    ),
    'darwin': (
        '/Applications/Google Chrome.app/Contents/MacOS/Google Chrome',
        '/Applications/Chromium.app/Contents/MacOS/Chromium',
    ),
    'win32': (
        r'C:\Program Files\Google\Chrome\Application\chrome.exe',
        r'C:\Program Files (x86)\Google\Chrome\Application\chrome.exe',
    ),
}


class BrowserManager:
    """
    Lazily launches and reuses one headless Chromium per thread.

    Executable resolution order:
    1. ``executable_path`` (explicit override)
    2. ``system_browser_path`` (system browser override)
    3. First existing entry of COMMON_BROWSER_PATHS for the platform
    4. None, letting Playwright use its bundled Chromium

    ``close()`` releases the calling thread's browser; browsers of other
    threads end with their driver processes at interpreter exit.
    """

    def __init__(
        self,
        executable_path: Optional[str] = None,
        system_browser_path: Optional[str] = None,
        launch_args: Optional[tuple] = None,
        platform: Optional[str] = None,
        playwright_factory: Callable = sync_playwright,
    ):
        self.executable_path = executable_path
        self.system_browser_path = system_browser_path
        self.launch_args = list(launch_args or DEFAULT_LAUNCH_ARGS)
        self.platform = platform or sys.platform
        self._playwright_factory = playwright_factory
        self._local = threading.local()

    @property
    def _playwright(self):
        return getattr(self._local, 'playwright', None)

    @_playwright.setter
    def _playwright(self, value):
        self._local.playwright = value

    @property
    def _browser(self):
        return getattr(self._local, 'browser', None)

    @_browser.setter
    def _browser(self, value):
        self._local.browser = value

    def resolve_executable_path(self) -> Optional[str]:
        if self.executable_path:
            return self.executable_path
        if self.system_browser_path:
            return self.system_browser_path

        platform_key = 'linux' if self.platform.startswith('linux') else self.platform
        for candidate in COMMON_BROWSER_PATHS.get(platform_key, ()):
            if os.path.exists(candidate):
                return candidate
        return None

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    def get_browser(self):
        """
        Return the live browser, launching a new one if needed.

        Raises:
            BrowserUnavailable: If Chromium cannot be launched
        """
        if self.is_running:
            return self._browser

        executable = self.resolve_executable_path()
        try:
            if self._playwright is None:
                self._playwright = self._playwright_factory().start()
            self._browser = self._playwright.chromium.launch(
                headless=True,
                args=self.launch_args,
                executable_path=executable,
            )
        except PlaywrightError as e:
            logger.error(f"Failed to launch headless browser: {e}", exc_info=True)
            raise BrowserUnavailable(f"Failed to launch headless browser: {e}") from e

        logger.info(f"Launched headless browser ({executable or 'bundled Chromium'})")
        return self._browser

    def close(self) -> None:
        """Close the browser and stop Playwright. Safe to call repeatedly."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None

        if browser is not None:
            try:
                browser.close()
            except PlaywrightError as e:
                logger.debug(f"Ignoring error while closing browser: {e}")
        if playwright is not None:
            try:
                playwright.stop()
            except PlaywrightError as e:
                logger.debug(f"Ignoring error while stopping Playwright: {e}")

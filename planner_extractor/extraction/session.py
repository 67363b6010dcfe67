"""Browser session: one browser process and one page for one extraction.

The pipeline talks to the browser through the small :class:`PageController`
capability (navigate, wait for a selector, click, read text, close).
:class:`PlaywrightPageController` is the production implementation; tests
drive :class:`BrowserSession` with fakes.

Timeouts raised by a controller are the builtin :class:`TimeoutError`;
``BrowserSession`` turns them into the phase-specific pipeline errors.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Protocol

from planner_extractor.config import Settings
from planner_extractor.extraction.errors import (
    LaunchFailed,
    ModalTimeout,
    NavigationFailed,
    NavigationTimeout,
)
from planner_extractor.extraction.models import LocatedContent, RowHandle

logger = logging.getLogger(__name__)

# Content discovery modes, chosen by the parsing strategy.
MODAL = "modal"
FULL_PAGE = "full_page"


class PageController(Protocol):
    """Minimal remote page capability the extraction pipeline depends on."""

    def goto(self, url: str, *, wait_until: str, timeout_ms: float) -> None: ...

    def wait_for_selector(
        self, selector: str, *, timeout_ms: float, frame: Optional[str] = None
    ) -> None: ...

    def click(
        self, selector: str, *, timeout_ms: float, frame: Optional[str] = None
    ) -> None: ...

    def query_all(self, selector: str, *, frame: Optional[str] = None) -> List[RowHandle]: ...

    def pause(self, ms: float) -> None: ...

    def inner_text(self) -> str: ...

    def content(self) -> str: ...

    def close(self) -> None: ...


Launcher = Callable[..., PageController]


# ---------------------------------------------------------------------------
# Playwright implementation
# ---------------------------------------------------------------------------

@contextmanager
def _translate_timeouts() -> Iterator[None]:
    from playwright.sync_api import TimeoutError as PlaywrightTimeoutError  # noqa: PLC0415

    try:
        yield
    except PlaywrightTimeoutError as exc:
        raise TimeoutError(str(exc)) from exc


class PlaywrightPageController:
    """Headless Chromium page driven through Playwright's sync API.

    Playwright is imported lazily so the rest of the package (and the test
    suite) can be imported without a browser installed.
    """

    def __init__(self, playwright: Any, browser: Any, page: Any) -> None:
        self._playwright = playwright
        self._browser = browser
        self._page = page

    @classmethod
    def launch(cls, *, headless: bool = True, locale: str = "fr-FR") -> "PlaywrightPageController":
        from playwright.sync_api import sync_playwright  # noqa: PLC0415

        playwright = sync_playwright().start()
        try:
            browser = playwright.chromium.launch(headless=headless)
            context = browser.new_context(locale=locale)
            page = context.new_page()
        except Exception:
            playwright.stop()
            raise
        return cls(playwright, browser, page)

    def _scope(self, frame: Optional[str]) -> Any:
        return self._page.frame_locator(frame).first if frame else self._page

    def goto(self, url: str, *, wait_until: str, timeout_ms: float) -> None:
        with _translate_timeouts():
            self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)

    def wait_for_selector(
        self, selector: str, *, timeout_ms: float, frame: Optional[str] = None
    ) -> None:
        with _translate_timeouts():
            if frame:
                self._scope(frame).locator(selector).first.wait_for(
                    state="attached", timeout=timeout_ms
                )
            else:
                self._page.wait_for_selector(selector, state="attached", timeout=timeout_ms)

    def click(self, selector: str, *, timeout_ms: float, frame: Optional[str] = None) -> None:
        with _translate_timeouts():
            self._scope(frame).locator(selector).first.click(timeout=timeout_ms)

    def query_all(self, selector: str, *, frame: Optional[str] = None) -> List[RowHandle]:
        locator = self._scope(frame).locator(selector)
        return [locator.nth(i) for i in range(locator.count())]

    def pause(self, ms: float) -> None:
        self._page.wait_for_timeout(ms)

    def inner_text(self) -> str:
        return self._page.inner_text("body")

    def content(self) -> str:
        return self._page.content()

    def close(self) -> None:
        try:
            self._browser.close()
        finally:
            self._playwright.stop()


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class BrowserSession:
    """Single-use, timeboxed browser session.

    Use as a context manager: entering opens the browser, leaving closes it on
    every exit path.  A failed :meth:`open` closes whatever it had allocated
    before raising :class:`LaunchFailed`.
    """

    def __init__(self, settings: Settings, launcher: Launcher | None = None) -> None:
        self._settings = settings
        self._launcher: Launcher = launcher or PlaywrightPageController.launch
        self._controller: PageController | None = None
        self._opened = False
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "BrowserSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> "BrowserSession":
        if self._opened:
            raise RuntimeError("BrowserSession cannot be reopened")
        self._opened = True
        try:
            self._controller = self._launcher(
                headless=self._settings.headless, locale=self._settings.browser_locale
            )
        except Exception as exc:
            self.close()
            raise LaunchFailed(f"Browser failed to start: {exc}") from exc
        logger.debug("Browser session opened (locale=%s)", self._settings.browser_locale)
        return self

    def _page(self) -> PageController:
        if self._controller is None or self._closed:
            raise RuntimeError("BrowserSession is not open")
        return self._controller

    def navigate(self, url: str, wait_until: str = "networkidle") -> None:
        """Load *url* and wait for the page to settle within the navigation timeout."""
        page = self._page()
        timeout_ms = self._settings.navigation_timeout_ms
        try:
            page.goto(url, wait_until=wait_until, timeout_ms=timeout_ms)
        except TimeoutError as exc:
            raise NavigationTimeout(
                f"Page did not reach '{wait_until}' within {timeout_ms} ms"
            ) from exc
        except Exception as exc:
            raise NavigationFailed(f"Navigation failed: {exc}") from exc

    def locate_content(self, mode: str) -> LocatedContent:
        """Return the item rows of the planner modal, or a full-page snapshot."""
        if mode == MODAL:
            return self._open_item_modal()
        if mode == FULL_PAGE:
            return self._snapshot_page()
        raise ValueError(f"Unknown content mode {mode!r}")

    def _open_item_modal(self) -> LocatedContent:
        page = self._page()
        s = self._settings
        try:
            page.wait_for_selector(s.frame_selector, timeout_ms=s.iframe_timeout_ms)
            page.click(
                s.list_button_selector,
                frame=s.frame_selector,
                timeout_ms=s.modal_timeout_ms,
            )
        except TimeoutError as exc:
            raise ModalTimeout(f"Item list modal did not appear: {exc}") from exc

        page.pause(s.settle_delay_ms)
        rows = page.query_all(s.item_row_selector, frame=s.frame_selector)
        logger.debug("Item modal opened with %d candidate rows", len(rows))
        return LocatedContent(rows=rows, modal_found=True)

    def _snapshot_page(self) -> LocatedContent:
        page = self._page()
        try:
            text = page.inner_text()
        except Exception as exc:
            logger.warning("Could not read page text: %s", exc)
            text = ""
        try:
            html = page.content()
        except Exception as exc:
            logger.warning("Could not serialise page markup: %s", exc)
            html = ""
        return LocatedContent(text=text or "", html=html or "")

    def close(self) -> None:
        """Release the browser; later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        controller, self._controller = self._controller, None
        if controller is None:
            return
        try:
            controller.close()
        except Exception as exc:
            logger.warning("Error while closing browser: %s", exc)
        else:
            logger.debug("Browser session closed")

import logging
from contextlib import ExitStack
from typing import Any, Callable

from scrapling.fetchers import StealthySession

from .base import PageLoadError, PageSource
from .models import ScraperConfig

# suppress scrapling logging - https://github.com/D4Vinci/Scrapling/issues/31)
logging.getLogger("scrapling").setLevel(logging.CRITICAL)

logger = logging.getLogger(__name__)

_COUNT_ABOVE_JS = "([sel, n]) => document.querySelectorAll(sel).length > n"


def _wait_for_count(
    selector: str, min_count: int, timeout_ms: int
) -> Callable[[Any], Any]:
    def action(page: Any) -> Any:
        page.wait_for_function(
            _COUNT_ABOVE_JS, arg=[selector, min_count], timeout=timeout_ms
        )
        return page

    return action


class BrowserPageSource(PageSource):
    def __init__(self, config: ScraperConfig):
        self.config = config
        self._stack: ExitStack | None = None
        self._session: Any = None

    def open(self) -> None:
        stack = ExitStack()
        try:
            self._session = stack.enter_context(
                StealthySession(
                    headless=self.config.headless,
                    network_idle=True,
                    timeout=self.config.timeout_ms,
                )
            )
        except Exception as e:
            stack.close()
            raise PageLoadError(f"failed to launch browser: {e}") from e
        self._stack = stack
        logger.debug("browser session started (headless=%s)", self.config.headless)

    def close(self) -> None:
        if self._stack is not None:
            self._stack.close()
        self._stack = None
        self._session = None

    def fetch_html(self, url: str, selector: str, min_count: int) -> str:
        if self._session is None:
            raise PageLoadError("browser session is not open")
        try:
            page = self._session.fetch(
                url,
                page_action=_wait_for_count(
                    selector, min_count, self.config.timeout_ms
                ),
            )
        except Exception as e:
            raise PageLoadError(f"failed to load {url}: {e}") from e
        html = page.html_content
        if not html:
            raise PageLoadError(f"empty page at {url}")
        return html

from abc import ABC, abstractmethod
from types import TracebackType


class PageLoadError(Exception):
    pass


class RowParseError(Exception):
    pass


class PageSource(ABC):
    """Turns a URL into rendered HTML, reusing one page across calls."""

    @abstractmethod
    def fetch_html(self, url: str, selector: str, min_count: int) -> str: ...

    def open(self) -> None:
        return None

    def close(self) -> None:
        return None

    def __enter__(self) -> "PageSource":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

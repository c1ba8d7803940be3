from pathlib import Path

import pytest

from problemset.base import PageLoadError, PageSource
from problemset.models import ScraperConfig

FIX = Path(__file__).resolve().parent / "fixtures"

FOLDER_URL = "https://www.dropbox.com/sh/test-folder?dl=0"


@pytest.fixture
def fixture_text():
    def _load(name: str) -> str:
        p = FIX / name
        return p.read_text(encoding="utf-8")

    return _load


class FakePageSource(PageSource):
    """Serves canned HTML by URL and records every navigation."""

    def __init__(self, pages: dict[str, str]):
        self.pages = pages
        self.visited: list[str] = []
        self.opened = False
        self.closed = False

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def fetch_html(self, url: str, selector: str, min_count: int) -> str:
        self.visited.append(url)
        if url not in self.pages:
            raise PageLoadError(f"failed to load {url}: no fixture")
        return self.pages[url]


@pytest.fixture
def config(tmp_path):
    return ScraperConfig(
        folder_url=FOLDER_URL,
        output_path=str(tmp_path / "problems.csv"),
    )


@pytest.fixture
def fake_source(fixture_text):
    def _make(extra: dict[str, str] | None = None) -> FakePageSource:
        pages = {
            FOLDER_URL: fixture_text("dropbox_folder.html"),
            "https://www.dropbox.com/contest/abc100": fixture_text(
                "dropbox_abc100.html"
            ),
        }
        pages.update(extra or {})
        return FakePageSource(pages)

    return _make


@pytest.fixture
def page_source():
    return FakePageSource

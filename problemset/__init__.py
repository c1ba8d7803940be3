from .base import PageLoadError, PageSource, RowParseError
from .dropbox import DropboxProblemsetScraper, classify_contest
from .models import ContestType, Problem, ScraperConfig

__all__ = [
    "ContestType",
    "DropboxProblemsetScraper",
    "PageLoadError",
    "PageSource",
    "Problem",
    "RowParseError",
    "ScraperConfig",
    "classify_contest",
]

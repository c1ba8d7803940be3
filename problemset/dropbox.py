#!/usr/bin/env python3

import logging
import re
import sys
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .base import PageLoadError, PageSource, RowParseError
from .models import (
    MAX_CONTEST_ID,
    ContestKey,
    ContestType,
    Problem,
    ProblemsetResult,
    ScraperConfig,
)
from .store import CsvFormatError, known_contests, read_problems, write_problems

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


def classify_contest(name: str) -> ContestKey | None:
    key = name.lower()
    if len(key) < 3:
        return None
    try:
        contest_type = ContestType(key[:3])
    except ValueError:
        return None
    suffix = key[3:]
    if not _DIGITS.fullmatch(suffix) or int(suffix) > MAX_CONTEST_ID:
        logger.warning("skipping %s: invalid contest id %r", name, suffix)
        return None
    return contest_type, int(suffix)


def _parse_folder_links(html: str) -> dict[str, str]:
    soup = BeautifulSoup(html, "html.parser")
    body = soup.find("div", class_="dig-Table-body")
    if not body:
        return {}
    out: dict[str, str] = {}
    for row in body.find_all("div", class_="dig-Table-row"):
        a = row.find("a")
        if not a:
            continue
        href = a.get("href")
        if not isinstance(href, str):
            continue
        out[a.get_text(strip=True)] = href
    return out


def _parse_problem_rows(html: str) -> list[tuple[str, str]]:
    soup = BeautifulSoup(html, "html.parser")
    rows = soup.find_all("div", class_="dig-Table-row")
    out: list[tuple[str, str]] = []
    # the first row is the column header
    for i, row in enumerate(rows[1:], start=1):
        a = row.find("a")
        if not a:
            raise RowParseError(f"row {i} has no link")
        href = a.get("href")
        if not isinstance(href, str):
            raise RowParseError(f"row {i} link has no href")
        out.append((a.get_text(strip=True), href))
    return out


class DropboxProblemsetScraper:
    def __init__(self, source: PageSource, config: ScraperConfig | None = None):
        self.source = source
        self.config = config or ScraperConfig()

    @property
    def platform_name(self) -> str:
        return "dropbox"

    def _create_problemset_error(self, error_msg: str) -> ProblemsetResult:
        return ProblemsetResult(
            success=False,
            error=f"{self.platform_name}: {error_msg}",
            output_path=self.config.output_path,
        )

    def collect_contest_links(self) -> dict[str, str]:
        html = self.source.fetch_html(
            self.config.folder_url,
            self.config.folder_row_selector,
            self.config.folder_min_rows,
        )
        links = _parse_folder_links(html)
        logger.info("folder rows = %d", len(links))
        return links

    def scrape_contest(
        self, contest_type: ContestType, contest_id: int, url: str
    ) -> list[Problem]:
        html = self.source.fetch_html(
            urljoin(self.config.folder_url, url),
            self.config.contest_selector,
            self.config.contest_min_elements,
        )
        return [
            Problem(
                contest_type=contest_type,
                contest_id=contest_id,
                problem_id=problem_id,
                link=link,
            )
            for problem_id, link in _parse_problem_rows(html)
        ]

    def scrape(self, existing: list[Problem] | None = None) -> ProblemsetResult:
        existing = existing or []
        known = known_contests(existing)
        problems = list(existing)
        scraped: list[str] = []
        skipped: list[str] = []
        failed: list[str] = []

        try:
            links = self.collect_contest_links()
        except PageLoadError as e:
            return self._create_problemset_error(str(e))

        for name, url in links.items():
            key = classify_contest(name)
            if key is None:
                skipped.append(name)
                continue
            if key in known:
                skipped.append(name)
                continue
            try:
                found = self.scrape_contest(key[0], key[1], url)
            except (PageLoadError, RowParseError) as e:
                logger.warning("skipping %s: %s", name, e)
                failed.append(name)
                continue
            problems.extend(found)
            known.add(key)
            scraped.append(name)
            logger.info("%s: %d problems", name.lower(), len(found))

        return ProblemsetResult(
            success=True,
            error="",
            output_path=self.config.output_path,
            problem_count=len(problems),
            scraped_contests=scraped,
            skipped_contests=skipped,
            failed_contests=failed,
            problems=problems,
        )


def run(config: ScraperConfig, source: PageSource | None = None) -> ProblemsetResult:
    if source is None:
        from .browser import BrowserPageSource

        source = BrowserPageSource(config)
    scraper = DropboxProblemsetScraper(source, config)

    try:
        existing = read_problems(config.output_path) if config.skip_existing else []
    except (CsvFormatError, OSError) as e:
        return scraper._create_problemset_error(str(e))

    try:
        with source:
            result = scraper.scrape(existing)
    except PageLoadError as e:
        return scraper._create_problemset_error(str(e))
    if not result.success:
        return result

    try:
        write_problems(config.output_path, result.problems)
    except OSError as e:
        return scraper._create_problemset_error(
            f"failed to write {config.output_path}: {e}"
        )
    return result


def main_cli(argv: list[str]) -> int:
    if len(argv) < 2 or argv[1] not in ("problems", "refresh") or len(argv) > 3:
        result = ProblemsetResult(
            success=False,
            error="Usage: dropbox.py problems [csv_path] OR dropbox.py refresh [csv_path]",
        )
        print(result.model_dump_json())
        return 1

    config = ScraperConfig(skip_existing=argv[1] == "problems")
    if len(argv) == 3:
        config.output_path = argv[2]

    result = run(config)
    print(result.model_dump_json())
    return 0 if result.success else 1


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    sys.exit(main_cli(sys.argv))


if __name__ == "__main__":
    main()

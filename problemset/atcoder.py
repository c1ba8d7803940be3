#!/usr/bin/env python3

import logging
import re
import sys
import time

import backoff
import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .dropbox import classify_contest
from .models import DetailResult, Problem, ProblemDetail
from .store import CsvFormatError, read_problems

logger = logging.getLogger(__name__)

MIB_TO_MB = 1.048576
BASE_URL = "https://atcoder.jp"
TIMEOUT_SECONDS = 30
HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
}
RETRY_STATUS = {429, 502, 503, 504}
FATAL_STATUS = {400, 401, 403, 404, 410}

_session = requests.Session()
_adapter = HTTPAdapter(max_retries=Retry(total=0))
_session.mount("https://", _adapter)
_session.mount("http://", _adapter)


def _give_up_requests(exc: Exception) -> bool:
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return exc.response.status_code in FATAL_STATUS
    return False


def _retry_after_requests(details):
    exc = details.get("exception")
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        ra = exc.response.headers.get("Retry-After")
        if ra:
            try:
                time.sleep(max(0.0, float(ra)))
            except ValueError:
                pass


@backoff.on_exception(
    backoff.expo,
    (requests.ConnectionError, requests.Timeout, requests.HTTPError),
    max_tries=5,
    jitter=backoff.full_jitter,
    giveup=_give_up_requests,
    on_backoff=_retry_after_requests,
)
def _fetch(url: str) -> str:
    r = _session.get(url, headers=HEADERS, timeout=TIMEOUT_SECONDS)
    if r.status_code in RETRY_STATUS:
        raise requests.HTTPError(response=r)
    r.raise_for_status()
    return r.text


def task_url(problem: Problem) -> str:
    contest = f"{problem.contest_type.value}{problem.contest_id:03d}"
    slug = problem.problem_id.lower()
    # the eighth problem is labelled "Ex" but its task slug is "h"
    if slug == "ex":
        slug = "h"
    return f"{BASE_URL}/contests/{contest}/tasks/{contest}_{slug}"


def _extract_title(soup: BeautifulSoup) -> str:
    h = soup.select_one("span.h2") or soup.select_one(".h2")
    if not h:
        return ""
    return h.get_text(" ", strip=True).split("Editorial", 1)[0].strip()


def _extract_problem_info(soup: BeautifulSoup) -> tuple[int, float, bool]:
    txt = soup.get_text(" ", strip=True)
    timeout_ms = 0
    memory_mb = 0.0
    ts = re.search(r"Time\s*Limit:\s*([\d.]+)\s*sec", txt, flags=re.I)
    if ts:
        timeout_ms = int(float(ts.group(1)) * 1000)
    ms = re.search(r"Memory\s*Limit:\s*(\d+)\s*MiB", txt, flags=re.I)
    if ms:
        memory_mb = float(ms.group(1)) * MIB_TO_MB
    div = soup.select_one("#problem-statement")
    txt = div.get_text(" ", strip=True) if div else txt
    interactive = "This is an interactive" in txt
    return timeout_ms, memory_mb, interactive


def _parse_problem_detail(html: str, problem: Problem) -> ProblemDetail:
    soup = BeautifulSoup(html, "html.parser")
    timeout_ms, memory_mb, interactive = _extract_problem_info(soup)
    statement = soup.select_one(".lang-en")
    return ProblemDetail(
        contest_type=problem.contest_type,
        contest_id=problem.contest_id,
        problem_id=problem.problem_id,
        title=_extract_title(soup),
        url=task_url(problem),
        time_limit_ms=timeout_ms,
        memory_mb=memory_mb,
        interactive=interactive,
        statement_html=statement.decode_contents().strip() if statement else "",
        test_cases_link=problem.link,
    )


def scrape_problem_detail(problem: Problem) -> DetailResult:
    url = task_url(problem)
    try:
        html = _fetch(url)
    except requests.RequestException as e:
        return DetailResult(
            success=False,
            error=f"atcoder: {e}",
            problem_id=problem.problem_id,
            url=url,
        )
    detail = _parse_problem_detail(html, problem)
    if not detail.title:
        return DetailResult(
            success=False,
            error=f"atcoder: no problem title at {url}",
            problem_id=problem.problem_id,
            url=url,
        )
    return DetailResult(
        success=True, error="", problem_id=problem.problem_id, url=url, detail=detail
    )


def main_cli(argv: list[str]) -> int:
    if len(argv) not in (3, 4) or argv[1] != "details":
        result = DetailResult(
            success=False, error="Usage: atcoder.py details <contest> [csv_path]"
        )
        print(result.model_dump_json())
        return 1

    key = classify_contest(argv[2])
    if key is None:
        result = DetailResult(
            success=False, error=f"atcoder: unrecognized contest {argv[2]!r}"
        )
        print(result.model_dump_json())
        return 1

    path = argv[3] if len(argv) == 4 else "problems.csv"
    try:
        problems = [p for p in read_problems(path) if p.contest_key == key]
    except (CsvFormatError, OSError) as e:
        print(DetailResult(success=False, error=f"atcoder: {e}").model_dump_json())
        return 1
    if not problems:
        result = DetailResult(
            success=False, error=f"atcoder: no problems for {argv[2]} in {path}"
        )
        print(result.model_dump_json())
        return 1

    ok = True
    for problem in problems:
        result = scrape_problem_detail(problem)
        if not result.success:
            logger.warning("%s", result.error)
            ok = False
        print(result.model_dump_json(), flush=True)
    return 0 if ok else 1


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    sys.exit(main_cli(sys.argv))


if __name__ == "__main__":
    main()

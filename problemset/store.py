import csv
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from .models import ContestKey, Problem

logger = logging.getLogger(__name__)

HEADER = ["contest_type", "contest_id", "problem_id", "link"]


class CsvFormatError(ValueError):
    pass


def read_problems(path: str | Path) -> list[Problem]:
    p = Path(path)
    if not p.exists():
        logger.info("%s does not exist yet, starting empty", p)
        return []
    with p.open(newline="", encoding="utf-8-sig") as f:
        rows = list(csv.reader(f))
    if not rows or rows[0] != HEADER:
        raise CsvFormatError(f"{p}:1: missing header")
    out: list[Problem] = []
    for lineno, row in enumerate(rows[1:], start=2):
        if not row:
            continue
        if len(row) != len(HEADER):
            raise CsvFormatError(
                f"{p}:{lineno}: expected {len(HEADER)} columns, got {len(row)}"
            )
        ct, cid, pid, link = row
        if not cid.isascii() or not cid.isdigit():
            raise CsvFormatError(f"{p}:{lineno}: invalid contest_id {cid!r}")
        try:
            out.append(
                Problem(contest_type=ct, contest_id=int(cid), problem_id=pid, link=link)
            )
        except ValidationError as e:
            raise CsvFormatError(f"{p}:{lineno}: {e}") from e
    return out


def known_contests(problems: Iterable[Problem]) -> set[ContestKey]:
    return {p.contest_key for p in problems}


def write_problems(path: str | Path, problems: Iterable[Problem]) -> int:
    target = Path(path)
    # rows go to a sibling temp file so a failed write keeps the old csv
    fd, tmp_name = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
    )
    n = 0
    try:
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(HEADER)
            for p in problems:
                writer.writerow(
                    [p.contest_type.value, str(p.contest_id), p.problem_id, p.link]
                )
                n += 1
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return n

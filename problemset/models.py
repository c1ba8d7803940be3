from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

MAX_CONTEST_ID = 65535
DEFAULT_FOLDER_URL = (
    "https://www.dropbox.com/sh/nx3tnilzqz7df8a/AAAYlTq2tiEHl5hsESw6-yfLa?dl=0"
)


class ContestType(str, Enum):
    ABC = "abc"
    ARC = "arc"
    AGC = "agc"
    AHC = "ahc"


ContestKey = tuple[ContestType, int]


class Problem(BaseModel):
    contest_type: ContestType
    contest_id: int = Field(ge=0, le=MAX_CONTEST_ID)
    problem_id: str
    link: str

    model_config = ConfigDict(extra="forbid")

    @property
    def contest_key(self) -> ContestKey:
        return self.contest_type, self.contest_id


class ProblemDetail(BaseModel):
    contest_type: ContestType
    contest_id: int = Field(ge=0, le=MAX_CONTEST_ID)
    problem_id: str
    title: str
    url: str
    time_limit_ms: int
    memory_mb: float
    interactive: bool = False
    statement_html: str = ""
    test_cases_link: str = ""

    model_config = ConfigDict(extra="forbid")


class ScrapingResult(BaseModel):
    success: bool
    error: str

    model_config = ConfigDict(extra="forbid")


class ProblemsetResult(ScrapingResult):
    output_path: str = ""
    problem_count: int = 0
    scraped_contests: list[str] = Field(default_factory=list)
    skipped_contests: list[str] = Field(default_factory=list)
    failed_contests: list[str] = Field(default_factory=list)
    problems: list[Problem] = Field(default_factory=list, exclude=True)

    model_config = ConfigDict(extra="forbid")


class DetailResult(ScrapingResult):
    problem_id: str = ""
    url: str = ""
    detail: ProblemDetail | None = None

    model_config = ConfigDict(extra="forbid")


class ScraperConfig(BaseModel):
    folder_url: str = DEFAULT_FOLDER_URL
    output_path: str = "problems.csv"
    headless: bool = True
    skip_existing: bool = True
    folder_row_selector: str = "div.dig-Table-row"
    folder_min_rows: int = 485
    contest_selector: str = "div"
    contest_min_elements: int = 5
    timeout_ms: int = 30000

    model_config = ConfigDict(extra="forbid")

import pytest


def _rows(rows: tuple[tuple[str, str], ...]) -> str:
    return "\n".join(
        f'<div class="dig-Table-row"><a href="{href}">{name}</a></div>'
        for name, href in rows
    )


@pytest.fixture
def folder_html():
    def _build(*rows: tuple[str, str]) -> str:
        return f'<div class="dig-Table-body">{_rows(rows)}</div>'

    return _build


@pytest.fixture
def contest_html():
    def _build(*rows: tuple[str, str]) -> str:
        header = '<div class="dig-Table-row"><span>Name</span></div>'
        return f"<div>{header}{_rows(rows)}</div>"

    return _build


@pytest.fixture
def mock_atcoder_html():
    return """
    <span class="h2">B - Ringo's Favorite Numbers <a href="#">Editorial</a></span>
    <p>Time Limit: 2.5 sec / Memory Limit: 256 MiB</p>
    <div id="problem-statement">This is an interactive task.</div>
    <span class="lang-en"><p>Statement</p></span>
    """

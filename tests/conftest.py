from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from newsletter.api.main import app


SIMPLE_DOCUMENT = (
    '<html><head><style>.a{color:red}</style></head>'
    '<body><div id="i1" class="a"></div></body></html>'
)

NEWSLETTER_DOCUMENT = """<!DOCTYPE html>
<html>
<head>
<style>
body { margin: 0; }
.title { font-size: 24px; color: #333333; }
.cta { background-color: #0066cc; }
@media (max-width: 600px) { .title { font-size: 18px; } }
</style>
</head>
<body>
<h1 id="i7" class="title">Weekly update</h1>
<a id="keep-me" href="#i7">Back to top</a>
<form>
<label for="i9">Email</label>
<input id="i9" type="email">
</form>
<a class="cta" href="https://example.com/#i7">Read more</a>
</body>
</html>
"""


@pytest.fixture()
def simple_document() -> str:
    """Minimal document with one class rule and one generated id."""
    return SIMPLE_DOCUMENT


@pytest.fixture()
def newsletter_document() -> str:
    """Builder-style document with media queries, links and labels."""
    return NEWSLETTER_DOCUMENT


@pytest.fixture()
def template_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write a template and point TEMPLATE_PATH at it."""
    path = tmp_path / "template.html"
    path.write_text(SIMPLE_DOCUMENT, encoding="utf-8")
    monkeypatch.setenv("TEMPLATE_PATH", str(path))
    return path


@pytest.fixture()
def missing_template(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point TEMPLATE_PATH at a file that does not exist."""
    path = tmp_path / "missing.html"
    monkeypatch.setenv("TEMPLATE_PATH", str(path))
    return path


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)

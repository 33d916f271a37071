from pathlib import Path

import pytest

from newsletter.api.models.config import APIConfig
from newsletter.api.services.template_loader import TemplateLoader, TemplateNotFoundError


class TestLoad:
    def test_reads_template_text(self, tmp_path: Path) -> None:
        path = tmp_path / "template.html"
        path.write_text("<p>café</p>", encoding="utf-8")
        loader = TemplateLoader(APIConfig(template_path=str(path)))

        assert loader.load() == "<p>café</p>"

    def test_relative_path_resolves_against_working_directory(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "template.html").write_text("<p>x</p>", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        loader = TemplateLoader(APIConfig())

        assert loader.template_path == tmp_path.resolve() / "template.html"
        assert loader.load() == "<p>x</p>"


class TestLoadRaisesWhenMissing:
    def test_raises_template_not_found(self, tmp_path: Path) -> None:
        loader = TemplateLoader(APIConfig(template_path=str(tmp_path / "nope.html")))

        with pytest.raises(TemplateNotFoundError, match="nope.html"):
            loader.load()

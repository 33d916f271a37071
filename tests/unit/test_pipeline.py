import re

import pytest
from bs4 import BeautifulSoup

from newsletter.core.errors import InvalidInputError, ProcessingError
from newsletter.core.inliner import StyleInliner
from newsletter.core.pipeline import TransformPipeline


class TestRunProducesTransformedDocument:
    def test_simple_document(self, simple_document: str) -> None:
        result = TransformPipeline().run(simple_document)
        div = BeautifulSoup(result.html, "html.parser").find("div")

        assert "<style" not in result.html
        assert div["style"] == "color: red;"
        assert div["id"].startswith("id-")
        assert div["id"] != "i1"
        assert result.id_map == {"i1": div["id"]}
        assert result.styled_elements == 1

    def test_id_selectors_match_before_remapping(self) -> None:
        html = '<style>#i3 { color: red }</style><div id="i3"></div>'

        result = TransformPipeline().run(html)
        div = BeautifulSoup(result.html, "html.parser").find("div")

        assert div["style"] == "color: red;"
        assert div["id"].startswith("id-")

    def test_newsletter_document(self, newsletter_document: str) -> None:
        result = TransformPipeline().run(newsletter_document)
        soup = BeautifulSoup(result.html, "html.parser")

        heading = soup.find("h1")
        assert heading["style"] == "font-size: 24px; color: #333333;"
        assert soup.find("a", id="keep-me")["href"] == "#" + heading["id"]
        assert soup.find("label")["for"] == soup.find("input")["id"]
        assert soup.find("a", class_="cta")["href"] == "https://example.com/#i7"
        assert "@media" in result.html
        assert result.html.startswith("<!DOCTYPE html>")


class TestInvalidInput:
    @pytest.mark.parametrize("html", [None, "", "   \n\t"])
    def test_empty_input_rejected(self, html) -> None:
        with pytest.raises(InvalidInputError, match="required"):
            TransformPipeline().run(html)

    def test_non_text_input_rejected(self) -> None:
        with pytest.raises(InvalidInputError, match="bytes"):
            TransformPipeline().run(b"<p>x</p>")


class TestProcessingFailure:
    def test_malformed_css_raises(self) -> None:
        with pytest.raises(ProcessingError, match="Invalid CSS"):
            TransformPipeline().run("<style>.a { color: red }}</style><p id='i1'>x</p>")

    def test_library_errors_are_wrapped(self) -> None:
        class ExplodingInliner(StyleInliner):
            def apply(self, soup):
                raise RuntimeError("parser exploded")

        pipeline = TransformPipeline(inliner=ExplodingInliner())

        with pytest.raises(ProcessingError, match="parser exploded"):
            pipeline.run("<p>x</p>")


class TestIdempotence:
    def test_remapping_is_not_idempotent(self, simple_document: str) -> None:
        pipeline = TransformPipeline()
        once = pipeline.run(simple_document).html

        twice = pipeline.run(once).html

        first_id = re.search(r'id="([^"]+)"', once).group(1)
        second_id = re.search(r'id="([^"]+)"', twice).group(1)
        assert first_id != second_id

    def test_inline_styles_survive_second_run(self, simple_document: str) -> None:
        pipeline = TransformPipeline()
        once = pipeline.run(simple_document).html

        twice = pipeline.run(once).html

        assert BeautifulSoup(twice, "html.parser").find("div")["style"] == "color: red;"

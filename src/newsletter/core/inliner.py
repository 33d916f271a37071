"""
CSS inlining for embedded stylesheets.

This module moves the rules of every ``<style>`` block into the ``style``
attribute of the elements they match:
1. Stylesheet splitting into top-level statements (cssutils tokenizer)
2. Selector and declaration parsing (cssutils)
3. Selector matching (soupsieve) and cascade by importance, specificity
   and source order
4. Residual block rewriting for rules that cannot be inlined

Rules that cannot be inlined are kept in their original source form.
"""

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

import cssutils
import soupsieve
from bs4 import BeautifulSoup, Tag
from bs4.element import Stylesheet
from cssutils.tokenize2 import Tokenizer
from soupsieve import SelectorSyntaxError

from ..utils.config import Config
from .errors import ProcessingError


logger = logging.getLogger(__name__)

# cssutils logs parse problems instead of raising; route them somewhere we can collect
_cssutils_logger = logging.getLogger("newsletter.cssutils")
_cssutils_logger.setLevel(logging.ERROR)
_cssutils_logger.propagate = False
cssutils.log.setLog(_cssutils_logger)
cssutils.ser.prefs.minimizeColorHash = False

# Elements that never render and must not receive inline styles
NON_VISUAL_TAGS = frozenset({"head", "style", "script", "title", "meta", "link", "base", "noscript"})

# Pseudo-classes that depend on user interaction or history
DYNAMIC_PSEUDO_CLASSES = frozenset({
    "hover", "active", "focus", "focus-within", "focus-visible", "visited", "link", "target",
})

# Legacy single-colon spellings of pseudo-elements
LEGACY_PSEUDO_ELEMENTS = frozenset({"before", "after", "first-line", "first-letter"})

# Media types that apply when the document is shown on screen
SCREEN_MEDIA = frozenset({"", "all", "screen"})

Declaration = Tuple[str, str, bool]  # (name, value, important)

_IMPORTANT = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)


def _tokens(text: str) -> Iterator[Tuple[str, str, int]]:
    """Tokenize CSS text, yielding (type, value, offset into text)."""
    line_starts = [0] + [match.end() for match in re.finditer("\n", text)]

    for typ, value, line, col in Tokenizer().tokenize(text, fullsheet=True):
        if typ == "EOF":
            return
        yield typ, value, line_starts[line - 1] + col - 1


def _is_inlinable(selector: cssutils.css.Selector) -> bool:
    """Check whether a selector can be resolved against the document alone."""
    for item in selector.seq:
        if item.type == "pseudo-element":
            return False
        if item.type == "pseudo-class":
            name = item.value.lstrip(":").rstrip("(").lower()
            if name in DYNAMIC_PSEUDO_CLASSES or name in LEGACY_PSEUDO_ELEMENTS:
                return False
    return True


@dataclass
class CssBlock:
    """A top-level statement of a stylesheet, with its original source text."""
    text: str
    prelude: str
    body: Optional[str] = None
    nested: bool = False

    @property
    def is_at_rule(self) -> bool:
        return self.prelude.startswith("@")


@dataclass
class InlineRule:
    """A single selector of a stylesheet rule, ready to be applied."""
    selector: str
    matcher: soupsieve.SoupSieve
    declarations: List[Declaration]
    specificity: Tuple[int, ...]
    order: int


class _ParseErrorCollector(logging.Handler):
    """Collects error records emitted by cssutils while parsing."""

    def __init__(self):
        super().__init__(level=logging.ERROR)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@contextmanager
def _collect_parse_errors() -> Iterator[_ParseErrorCollector]:
    collector = _ParseErrorCollector()
    _cssutils_logger.addHandler(collector)
    try:
        yield collector
    finally:
        _cssutils_logger.removeHandler(collector)


class StyleInliner:
    """Inlines embedded stylesheet rules into element style attributes."""

    def __init__(self, config: Optional[Config] = None, embed_attribute: Optional[str] = None):
        """Initialize inliner with configuration."""
        self.config = config or Config()
        self.embed_attribute = embed_attribute or self.config.EMBED_ATTRIBUTE
        self.parser = cssutils.CSSParser(parseComments=False, validate=False)

    def split_stylesheet(self, css_text: str) -> List[CssBlock]:
        """
        Split stylesheet text into top-level statements.

        Statements keep their exact source text. Content that cssutils
        cannot model is not an error here; only a structure that cannot be
        recovered is.

        Raises:
            ProcessingError: On unbalanced braces or an unterminated rule
        """
        if css_text.startswith("\ufeff"):
            css_text = css_text[1:]

        blocks = []
        depth = 0
        start = body_start = None
        nested = False

        for typ, value, pos in _tokens(css_text):
            if typ in ("S", "COMMENT", "CDO", "CDC"):
                continue
            if start is None:
                start = pos

            if value == "{":
                depth += 1
                if depth == 1:
                    body_start = pos + 1
                    nested = False
                else:
                    nested = True
            elif value == "}":
                if depth == 0:
                    raise ProcessingError(
                        f"Invalid CSS: unexpected '}}' after {css_text[start:pos].strip()!r}"
                    )
                depth -= 1
                if depth == 0:
                    blocks.append(CssBlock(
                        text=css_text[start:pos + 1],
                        prelude=css_text[start:body_start - 1].strip(),
                        body=css_text[body_start:pos],
                        nested=nested
                    ))
                    start = None
            elif value == ";" and depth == 0:
                blocks.append(CssBlock(text=css_text[start:pos + 1], prelude=css_text[start:pos].strip()))
                start = None

        if depth:
            raise ProcessingError(
                f"Invalid CSS: unclosed block {css_text[start:body_start].strip()!r}"
            )
        if start is not None:
            trailing = css_text[start:].strip()
            if not trailing.startswith("@"):
                raise ProcessingError(f"Invalid CSS: rule without declaration block {trailing!r}")
            blocks.append(CssBlock(text=trailing, prelude=trailing))

        return blocks

    def parse_declarations(self, text: Optional[str]) -> List[Declaration]:
        """
        Parse a declaration list, such as a style attribute.

        Declarations cssutils cannot read (``*zoom``, ``progid:`` filters)
        are kept with their source name and value.
        """
        if not text or not text.strip():
            return []

        declarations = []
        start = parens = 0

        for typ, value, pos in _tokens(text):
            if typ == "FUNCTION" or value == "(":
                parens += 1
            elif value == ")" and parens:
                parens -= 1
            elif value == ";" and not parens:
                declarations.extend(self._parse_declaration(text[start:pos]))
                start = pos + 1

        declarations.extend(self._parse_declaration(text[start:]))
        return declarations

    def _parse_declaration(self, text: str) -> List[Declaration]:
        text = text.strip()
        if not text:
            return []

        with _collect_parse_errors() as collector:
            style = self.parser.parseStyle(text)
        properties = list(style)

        if not collector.messages and len(properties) == 1:
            prop = properties[0]
            return [(prop.name, prop.value, prop.priority == "important")]

        name, colon, value = text.partition(":")
        if not colon or not name.strip() or not value.strip():
            logger.warning("Dropping malformed declaration %r", text)
            return []

        important = bool(_IMPORTANT.search(value))
        value = _IMPORTANT.sub("", value).strip()
        logger.debug("Keeping declaration %r as written", text)
        return [(name.strip(), value, important)]

    def parse_selectors(self, prelude: str) -> Optional[List[cssutils.css.Selector]]:
        """Parse a selector list, returning None when cssutils cannot model it."""
        with _collect_parse_errors() as collector:
            sheet = self.parser.parseString(prelude + " {}")

        rules = [rule for rule in sheet.cssRules if rule.type == rule.STYLE_RULE]
        if collector.messages or len(rules) != 1:
            logger.debug("Unsupported selector %r: %s", prelude, "; ".join(collector.messages))
            return None

        return list(rules[0].selectorList)

    def collect_rules(self, blocks: List[CssBlock],
                      start_order: int = 0) -> Tuple[List[InlineRule], List[str]]:
        """
        Split stylesheet statements into inlinable rules and residual CSS.

        Args:
            blocks: Statements of one stylesheet
            start_order: Source order index of the first rule

        Returns:
            Tuple of (inlinable rules, residual CSS texts)
        """
        rules = []
        residual = []
        order = start_order

        for block in blocks:
            if block.is_at_rule:
                # @media, @supports, @font-face and friends only make sense in a stylesheet
                if not block.prelude.lower().startswith("@charset"):
                    residual.append(block.text)
                continue
            if block.body is None:
                if block.prelude:
                    logger.warning("Dropping statement without declaration block %r", block.text)
                continue

            selectors = None if block.nested else self.parse_selectors(block.prelude)
            if selectors is None:
                residual.append(block.text)
                continue

            declarations = self.parse_declarations(block.body)
            kept_selectors = []

            for selector in selectors:
                matcher = self._compile(selector) if _is_inlinable(selector) else None
                if matcher is None:
                    kept_selectors.append(selector.selectorText)
                    continue
                if declarations:
                    rules.append(InlineRule(
                        selector=selector.selectorText,
                        matcher=matcher,
                        declarations=declarations,
                        specificity=tuple(selector.specificity),
                        order=order
                    ))
                    order += 1

            if len(kept_selectors) == len(selectors):
                residual.append(block.text)
            elif kept_selectors:
                residual.append(f"{', '.join(kept_selectors)} {{{block.body}}}")

        return rules, residual

    def apply(self, soup: BeautifulSoup) -> int:
        """
        Inline all embedded stylesheets of a parsed document in place.

        Args:
            soup: Parsed document, modified in place

        Returns:
            Number of elements whose style attribute was written
        """
        rules: List[InlineRule] = []
        blocks: List[Tuple[Tag, List[str]]] = []

        for style_tag in soup.find_all("style"):
            if style_tag.has_attr(self.embed_attribute):
                continue
            if not self._applies_on_screen(style_tag):
                logger.debug("Keeping <style media=%r> as-is", style_tag.get("media"))
                continue

            statements = self.split_stylesheet(style_tag.get_text())
            block_rules, residual = self.collect_rules(statements, start_order=len(rules))
            rules.extend(block_rules)
            blocks.append((style_tag, residual))

        computed = self._cascade(soup, rules)

        for element, declarations in computed.values():
            self._write_style(element, declarations)

        for style_tag, residual in blocks:
            if residual:
                style_tag.string = Stylesheet("\n".join(residual))
            else:
                style_tag.decompose()

        logger.debug("Inlined %d rules into %d elements", len(rules), len(computed))
        return len(computed)

    @staticmethod
    def _applies_on_screen(style_tag: Tag) -> bool:
        media = style_tag.get("media") or ""
        return media.strip().lower() in SCREEN_MEDIA

    @staticmethod
    def _compile(selector: cssutils.css.Selector) -> Optional[soupsieve.SoupSieve]:
        try:
            return soupsieve.compile(selector.selectorText)
        except (SelectorSyntaxError, NotImplementedError) as e:
            logger.warning("Keeping selector %r in stylesheet: %s", selector.selectorText, e)
            return None

    def _cascade(self, soup: BeautifulSoup,
                 rules: List[InlineRule]) -> Dict[int, Tuple[Tag, Dict[str, Tuple[str, bool]]]]:
        """Resolve which declaration wins for every matched element."""
        computed: Dict[int, Tuple[Tag, Dict[str, Tuple[str, bool]]]] = {}

        for rule in sorted(rules, key=lambda r: (r.specificity, r.order)):
            for element in rule.matcher.select(soup):
                if element.name in NON_VISUAL_TAGS:
                    continue

                _, declarations = computed.setdefault(id(element), (element, {}))
                for name, value, important in rule.declarations:
                    current = declarations.get(name)
                    if current and current[1] and not important:
                        continue
                    declarations[name] = (value, important)

        return computed

    def _write_style(self, element: Tag, declarations: Dict[str, Tuple[str, bool]]) -> None:
        """Merge cascaded declarations with the element's own inline style."""
        merged = dict(declarations)

        for name, value, important in self.parse_declarations(element.get("style")):
            current = merged.get(name)
            if current and current[1] and not important:
                continue
            merged[name] = (value, important)

        element["style"] = " ".join(f"{name}: {value};" for name, (value, _) in merged.items())

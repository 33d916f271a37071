"""
HTML transform pipeline.

Runs the two transform stages over a single parsed document:
1. CSS inlining (embedded stylesheets into style attributes)
2. Identifier remapping (generated ids into uuid-based ids)

Inlining runs first so that id selectors still match the original ids.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from bs4 import BeautifulSoup

from ..utils.config import Config
from .errors import InvalidInputError, ProcessingError, TransformError
from .identifiers import IdentifierRemapper
from .inliner import StyleInliner


logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
    """Output of one pipeline run."""
    html: str
    id_map: Dict[str, str] = field(default_factory=dict)
    styled_elements: int = 0


class TransformPipeline:
    """Inlines styles and remaps identifiers of an HTML document."""

    def __init__(self, config: Optional[Config] = None,
                 inliner: Optional[StyleInliner] = None,
                 remapper: Optional[IdentifierRemapper] = None):
        """Initialize pipeline stages with configuration."""
        self.config = config or Config()
        self.inliner = inliner or StyleInliner(self.config)
        self.remapper = remapper or IdentifierRemapper(config=self.config)

    def run(self, html: Optional[str]) -> TransformResult:
        """
        Transform an HTML document.

        Args:
            html: HTML source text

        Returns:
            TransformResult with the complete transformed document

        Raises:
            InvalidInputError: If html is missing, empty or not text
            ProcessingError: If parsing or inlining fails
        """
        if html is None:
            raise InvalidInputError("HTML content is required")
        if not isinstance(html, str):
            raise InvalidInputError(f"HTML content must be text, got {type(html).__name__}")
        if not html.strip():
            raise InvalidInputError("HTML content is required")

        try:
            soup = BeautifulSoup(html, "html.parser")
            styled_elements = self.inliner.apply(soup)
            id_map = self.remapper.apply(soup)
            output = str(soup)
        except TransformError:
            raise
        except Exception as e:
            raise ProcessingError(str(e) or type(e).__name__) from e

        return TransformResult(html=output, id_map=id_map, styled_elements=styled_elements)

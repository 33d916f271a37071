"""Transform service that wraps the HTML pipeline for the API."""

import logging
import time
from typing import Optional

from ...core.identifiers import IdentifierRemapper
from ...core.pipeline import TransformPipeline
from ..models.config import APIConfig


logger = logging.getLogger(__name__)


class TransformService:
    """Service for processing HTML documents."""

    def __init__(self, config: APIConfig):
        self.config = config
        self.pipeline = TransformPipeline(
            remapper=IdentifierRemapper(
                id_prefix=config.id_prefix,
                new_id_prefix=config.new_id_prefix
            )
        )

    def process_html(self, html: Optional[str]) -> str:
        """
        Inline styles and remap identifiers of a document.

        Args:
            html: Raw HTML document

        Returns:
            The transformed HTML document

        Raises:
            InvalidInputError: If no HTML was given
            ProcessingError: If the document could not be processed
        """
        start_time = time.time()
        result = self.pipeline.run(html)
        processing_time = time.time() - start_time

        logger.info(
            "Processed document: %d chars in, %d chars out, %d elements styled, %d ids remapped in %.3fs",
            len(html), len(result.html), result.styled_elements, len(result.id_map), processing_time
        )
        return result.html

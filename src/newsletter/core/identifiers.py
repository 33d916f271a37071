"""
Identifier remapping for editor-generated element ids.

Visual builders stamp elements with short sequential ids (``i1``, ``i2``...)
that collide as soon as two exported documents end up in the same mailbox or
page. This module replaces them with uuid-based ids and rewrites every
fragment link (``href="#old"``) and label association (``for="old"``) that
pointed at them.
"""

import logging
import uuid
from typing import Dict, Optional

from bs4 import BeautifulSoup

from ..utils.config import Config


logger = logging.getLogger(__name__)


class IdentifierRemapper:
    """Replaces auto-generated ids with globally unique ones."""

    def __init__(self, id_prefix: Optional[str] = None, new_id_prefix: Optional[str] = None,
                 config: Optional[Config] = None):
        """Initialize remapper with the prefix to match and the prefix to emit."""
        self.config = config or Config()
        self.id_prefix = self.config.ID_PREFIX if id_prefix is None else id_prefix
        self.new_id_prefix = self.config.NEW_ID_PREFIX if new_id_prefix is None else new_id_prefix

        if not self.id_prefix:
            raise ValueError("id_prefix must not be empty")

    def generate_id(self) -> str:
        """Generate a fresh identifier."""
        return f"{self.new_id_prefix}{uuid.uuid4()}"

    def matches(self, value: Optional[str]) -> bool:
        """Check whether an id was produced by the upstream generator."""
        return isinstance(value, str) and value.startswith(self.id_prefix)

    def apply(self, soup: BeautifulSoup) -> Dict[str, str]:
        """
        Remap matching ids and their references in place.

        Args:
            soup: Parsed document, modified in place

        Returns:
            Mapping of old id to the new id its references now point to
        """
        # Collect targets up front; new ids may themselves match the prefix
        targets = soup.find_all(id=self.matches)
        id_map: Dict[str, str] = {}

        for element in targets:
            old_id = element["id"]
            new_id = self.generate_id()
            element["id"] = new_id
            # Duplicate ids each get their own new id; references follow the first one
            id_map.setdefault(old_id, new_id)

        if not id_map:
            return id_map

        rewritten = 0

        for attribute in self.config.FRAGMENT_ATTRIBUTES:
            for element in soup.find_all(attrs={attribute: True}):
                value = element[attribute]
                if isinstance(value, str) and value.startswith("#") and value[1:] in id_map:
                    element[attribute] = "#" + id_map[value[1:]]
                    rewritten += 1

        for attribute in self.config.LABEL_ATTRIBUTES:
            for element in soup.find_all(attrs={attribute: True}):
                value = element[attribute]
                if isinstance(value, str) and value in id_map:
                    element[attribute] = id_map[value]
                    rewritten += 1

        logger.debug("Remapped %d ids, rewrote %d references", len(targets), rewritten)
        return id_map

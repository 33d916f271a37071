"""Template loading for the browser preview and download endpoints."""

from pathlib import Path

from ..models.config import APIConfig


class TemplateNotFoundError(Exception):
    """Raised when the configured template file does not exist."""


class TemplateLoader:
    """Reads the local template document."""

    def __init__(self, config: APIConfig):
        self.config = config

    @property
    def template_path(self) -> Path:
        """Template path, relative paths resolved against the working directory."""
        return Path(self.config.template_path).resolve()

    def load(self) -> str:
        """Read the template as UTF-8 text."""
        template_path = self.template_path

        try:
            with open(template_path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError as e:
            raise TemplateNotFoundError(f"Template file not found: {template_path}") from e

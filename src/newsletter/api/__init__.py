"""
HTTP API for the newsletter HTML processor.

This module provides a FastAPI-based REST API around the transform pipeline,
enabling editors and build tools to turn builder exports into email-ready HTML.
"""

from .. import __version__

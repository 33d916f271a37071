"""Newsletter HTML processing: CSS inlining and identifier remapping."""

__version__ = "1.0.0"

"""pdfextract - PDF extraction tools for AI agents and HTTP clients."""

__version__ = "1.0.0"

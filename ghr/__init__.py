"""ghr: changelog generation and release publishing for GitHub repositories."""

__version__ = "0.1.0"

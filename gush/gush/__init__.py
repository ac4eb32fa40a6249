"""gush - GitHub workflow automation built on a small command harness."""

__version__ = "0.1.0"

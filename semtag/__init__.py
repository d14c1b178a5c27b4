"""semtag: infer a project's version and keep its floating git tags in sync."""

__version__ = "1.0.0"

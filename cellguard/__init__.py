"""Container and image stores, path and network rewrite rules, and access logging."""

__version__ = "0.1.0"
"""DocLookup - term search over Sphinx generated search indexes."""

__version__ = "0.1.0"

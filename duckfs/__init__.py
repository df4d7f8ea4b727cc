"""duckfs: browse a filesystem subtree over HTTP."""

__version__ = "0.1.0"

"""Movie metadata graph construction, similarity scoring and force layout."""

__version__ = "0.1.0"

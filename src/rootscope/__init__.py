"""RootScope - cross-functional market intelligence over the RootData API."""

__version__ = "0.2.0"

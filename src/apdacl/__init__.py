"""Access-request notification lookup for data consumers and providers."""

__version__ = "0.1.0"

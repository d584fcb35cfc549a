"""Freedom Wall: an anonymous message board."""

__version__ = "1.0.0"

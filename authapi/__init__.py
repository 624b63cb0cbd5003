"""Authentication and user API for the multi-tenant application skeleton."""

__version__ = "0.1.0"

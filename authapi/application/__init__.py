"""Command and query handlers used by the API routers."""

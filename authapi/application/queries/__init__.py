"""Query handlers."""

from authapi.application.queries.get_me import GetMeHandler, GetMeQuery

__all__ = ["GetMeHandler", "GetMeQuery"]

"""
HTTP status codes used by the download pipeline.

Names follow the RFC phrases so they read the same as the `http.HTTPStatus` members.
"""

from __future__ import annotations

__all__ = (
    "HTTP_200_OK",
    "HTTP_201_CREATED",
    "HTTP_204_NO_CONTENT",
    "HTTP_206_PARTIAL_CONTENT",
    "HTTP_304_NOT_MODIFIED",
    "HTTP_404_NOT_FOUND",
    "HTTP_405_METHOD_NOT_ALLOWED",
    "HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE",
    "HTTP_500_INTERNAL_SERVER_ERROR",
)

HTTP_200_OK = 200
HTTP_201_CREATED = 201
HTTP_204_NO_CONTENT = 204
HTTP_206_PARTIAL_CONTENT = 206
HTTP_304_NOT_MODIFIED = 304
HTTP_404_NOT_FOUND = 404
HTTP_405_METHOD_NOT_ALLOWED = 405
HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE = 416
HTTP_500_INTERNAL_SERVER_ERROR = 500

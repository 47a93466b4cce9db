from __future__ import annotations

from resumable.conf.enums import StrEnum


class ScopeType(StrEnum):
    HTTP = "http"


class HTTPMethod(StrEnum):
    GET = "GET"
    HEAD = "HEAD"


class MediaType(StrEnum):
    TEXT = "text/plain"
    OCTET = "application/octet-stream"


class ClientFamily(StrEnum):
    """
    Browser families that differ in how they expect a full download to be acknowledged.
    """

    LEGACY_IE = "legacy-ie-family"
    OTHER = "other"

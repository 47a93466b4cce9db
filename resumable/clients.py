"""
Status selection for full downloads, driven by the client's `User-Agent`.

Internet Explorer and the legacy Edge engine acknowledge a complete download with
`201 Created`, every other client gets `200 OK`. This is a browser quirk kept on
purpose, it does not change the content of the response.
"""

from __future__ import annotations

from types import MappingProxyType

from resumable import status
from resumable.enums import ClientFamily

LEGACY_CLIENT_TOKENS: tuple[str, ...] = ("MSIE", "TRIDENT", "EDGE")

FULL_CONTENT_STATUS = MappingProxyType(
    {
        ClientFamily.LEGACY_IE: status.HTTP_201_CREATED,
        ClientFamily.OTHER: status.HTTP_200_OK,
    }
)


def classify_user_agent(user_agent: bytes | str | None) -> ClientFamily:
    if isinstance(user_agent, bytes):
        user_agent = user_agent.decode("latin-1")
    signature = (user_agent or "").upper()
    if any(token in signature for token in LEGACY_CLIENT_TOKENS):
        return ClientFamily.LEGACY_IE
    return ClientFamily.OTHER


def full_content_status(family: ClientFamily) -> int:
    return FULL_CONTENT_STATUS[family]

from __future__ import annotations

from resumable import status


class HeaderHelper:
    @classmethod
    def has_body_message(cls, status_code: int) -> bool:
        """
        Based on the RFC specificiation the response status of 1XX, 204 and 304
        body and length **MUST NOT** be included.

        https://tools.ietf.org/html/rfc2616#section-4.4
        https://tools.ietf.org/html/rfc2616#section-4.3
        """
        return bool(
            status_code not in (status.HTTP_204_NO_CONTENT, status.HTTP_304_NOT_MODIFIED)
            and not (100 <= status_code < 200)
        )

    @classmethod
    def get_content_type(cls, charset: str, media_type: str | None = None) -> str | None:
        """
        Builds the content-type based on the media type and charset.
        """
        if media_type is not None and media_type.startswith("text/"):
            return f"{media_type}; charset={charset}"
        return media_type

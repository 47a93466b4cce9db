from __future__ import annotations

from urllib.parse import quote


def encode_filename(filename: str) -> str:
    """
    Percent encodes the UTF-8 bytes of `filename`, leaving only the RFC 3986
    unreserved characters untouched.
    """
    return quote(filename, safe="", encoding="utf-8")


def make_content_disposition_header(
    filename: str, *, content_disposition_type: str = "attachment"
) -> str:
    """
    Builds a `Content-Disposition` value understood by old and new browsers alike.

    The plain `filename` parameter is read by clients which ignore the extended
    syntax (older Internet Explorer decodes the percent escapes itself) while
    `filename*` carries the RFC 5987 form for everyone else.

    ```python
    make_content_disposition_header("résumé 2024.pdf")
    # attachment; filename="r%C3%A9sum%C3%A9%202024.pdf"; filename*=utf-8''r%C3%A9sum%C3%A9%202024.pdf
    ```
    """
    encoded = encode_filename(filename)
    return f"{content_disposition_type}; filename=\"{encoded}\"; filename*=utf-8''{encoded}"

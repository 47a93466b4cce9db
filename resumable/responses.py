from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NoReturn

from multidict import CIMultiDictProxy

from resumable import status
from resumable._internal._helpers import HeaderHelper
from resumable.clients import classify_user_agent, full_content_status
from resumable.conf import settings
from resumable.datastructures import Header
from resumable.disposition import make_content_disposition_header
from resumable.enums import HTTPMethod, MediaType
from resumable.exceptions import IOStreamError
from resumable.logging import logger
from resumable.ranges import ByteRange, parse_range_header
from resumable.requests import Request
from resumable.resources import FileResource
from resumable.types import Receive, Scope, Send


class Response:
    media_type: str | None = None
    status_code: int | None = None
    charset: str = "utf-8"
    headers: Header

    def __init__(
        self,
        content: Any = None,
        status_code: int = status.HTTP_200_OK,
        headers: Mapping[str, str] | None = None,
        media_type: str | None = None,
    ) -> None:
        if status_code is not None:
            self.status_code = status_code
        if media_type is not None:
            self.media_type = media_type
        self.body = self.make_response(content)
        self.make_headers(headers)

    def make_response(self, content: Any) -> bytes:
        """
        Makes the Response object type.
        """
        if content is None or content is NoReturn:
            return b""
        if isinstance(content, (bytearray, memoryview)):
            content = bytes(content)
        if isinstance(content, bytes):
            return content
        return str(content).encode(self.charset)

    def make_headers(
        self, content_headers: Mapping[str, str] | dict[str, str] | None = None
    ) -> None:
        """
        Initializes the headers based on RFC specifications by setting appropriate conditions and restrictions.

        Args:
            content_headers (Union[Mapping[str, str], Dict[str, str], None], optional): Additional headers to include (default is None).
        """
        headers: dict[str, str] = dict(content_headers or {})

        if HeaderHelper.has_body_message(self.status_code):
            headers.setdefault("content-length", str(len(self.body)))
            content_type = HeaderHelper.get_content_type(
                charset=self.charset, media_type=self.media_type
            )
            if content_type is not None:
                headers.setdefault("content-type", content_type)
        self.headers = Header(headers)

    @property
    def encoded_headers(self) -> list[tuple[bytes, bytes]]:
        return self.headers.get_encoded_multi_items()

    def message(self, prefix: str = "") -> dict[str, Any]:
        return {
            "type": prefix + "http.response.start",
            "status": self.status_code,
            "headers": self.encoded_headers,
        }

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await send(self.message())
        # don't interfere, in case of bodyless requests like head the message is ignored.
        await send({"type": "http.response.body", "body": self.body})

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(media_type={self.media_type}, status_code={self.status_code}, charset={self.charset})"


class PlainText(Response):
    media_type = MediaType.TEXT


@dataclass(frozen=True)
class ResponseDescriptor:
    """
    Everything needed to answer a download request: the status, the headers and the
    window of the resource to stream back.
    """

    status_code: int
    headers: CIMultiDictProxy[str]
    resource: FileResource
    byte_range: ByteRange

    @property
    def is_partial(self) -> bool:
        return self.status_code == status.HTTP_206_PARTIAL_CONTENT


def assemble_download(
    resource: FileResource,
    *,
    range_header: bytes | str | None = None,
    user_agent: bytes | str | None = None,
    filename: str | None = None,
) -> ResponseDescriptor:
    """
    Combines the resource, the client classification and the requested range into a
    `ResponseDescriptor`.

    Raises:
        MalformedRange: The `Range` header cannot be served.
    """
    byte_range, is_partial = parse_range_header(range_header, resource.total_length)
    if is_partial:
        status_code = status.HTTP_206_PARTIAL_CONTENT
    else:
        status_code = full_content_status(classify_user_agent(user_agent))

    headers = Header(
        {
            "content-type": MediaType.OCTET.value,
            "content-disposition": make_content_disposition_header(filename or resource.name),
            "content-length": str(byte_range.length),
            "accept-ranges": "bytes",
        }
    )
    if is_partial:
        headers["content-range"] = byte_range.content_range(resource.total_length)
    return ResponseDescriptor(
        status_code=status_code,
        headers=CIMultiDictProxy(headers),
        resource=resource,
        byte_range=byte_range,
    )


class DownloadResponse(Response):
    """
    Streams the window of a `ResponseDescriptor` to the client.

    The resource stream is opened when the response is sent and closed on every exit
    path, including the cancellation raised when the client goes away.
    """

    media_type = MediaType.OCTET

    def __init__(self, descriptor: ResponseDescriptor, *, chunk_size: int | None = None) -> None:
        self.descriptor = descriptor
        self.status_code = descriptor.status_code
        self.chunk_size = chunk_size or settings.download_chunk_size
        self.body = b""
        self.headers = Header(descriptor.headers.items())

    @classmethod
    def from_request(
        cls,
        request: Request,
        resource: FileResource,
        filename: str | None = None,
        **kwargs: Any,
    ) -> DownloadResponse:
        descriptor = assemble_download(
            resource,
            range_header=request.header("range"),
            user_agent=request.header("user-agent"),
            filename=filename,
        )
        return cls(descriptor, **kwargs)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await send(self.message())
        if scope.get("method", "").upper() == HTTPMethod.HEAD:
            await send({"type": "http.response.body", "body": b"", "more_body": False})
            return
        await self.stream(send)

    async def stream(self, send: Send) -> None:
        resource = self.descriptor.resource
        byte_range = self.descriptor.byte_range
        logger.debug(
            f"Sending {byte_range.length} bytes of '{resource.name}' starting at {byte_range.start}."
        )
        if byte_range.length == 0:
            await send({"type": "http.response.body", "body": b"", "more_body": False})
            return

        remaining = byte_range.length
        try:
            async with await resource.open() as file:
                if byte_range.start:
                    await file.seek(byte_range.start, os.SEEK_SET)
                while remaining > 0:
                    chunk = await file.read(min(self.chunk_size, remaining))
                    if not chunk:
                        raise IOStreamError(
                            detail=f"'{resource.name}' ended {remaining} bytes before the announced length."
                        )
                    remaining -= len(chunk)
                    await send(
                        {
                            "type": "http.response.body",
                            "body": chunk,
                            "more_body": remaining > 0,
                        }
                    )
        except IOStreamError:
            raise
        except OSError as exc:
            raise IOStreamError(detail=f"Failed streaming '{resource.name}': {exc}") from exc

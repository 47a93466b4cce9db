import io
import typing
from urllib.parse import unquote

import anyio
import pytest
from multidict import CIMultiDictProxy

from resumable.datastructures import Header
from resumable.exceptions import IOStreamError, MalformedRange
from resumable.ranges import ByteRange
from resumable.requests import Request
from resumable.resources import BytesResource, FileResource
from resumable.responses import (
    DownloadResponse,
    PlainText,
    Response,
    ResponseDescriptor,
    assemble_download,
)

pytestmark = pytest.mark.anyio


def make_scope(*headers: tuple[str, str], method: str = "GET") -> dict[str, typing.Any]:
    return {
        "type": "http",
        "method": method,
        "path": "/",
        "headers": [(key.encode(), value.encode()) for key, value in headers],
    }


async def send_response(
    response: Response, scope: dict[str, typing.Any]
) -> tuple[dict[str, typing.Any], Header, list[dict[str, typing.Any]]]:
    messages: list[dict[str, typing.Any]] = []

    async def send(message: typing.Any) -> None:
        messages.append(message)

    await response(scope, None, send)
    start, *bodies = messages
    return start, Header(start["headers"]), bodies


def test_assemble_partial(memory_resource):
    descriptor = assemble_download(memory_resource, range_header="bytes=500-699")

    assert descriptor.status_code == 206
    assert descriptor.is_partial
    assert descriptor.byte_range == ByteRange(500, 200)
    assert descriptor.headers["content-range"] == "bytes 500-699/1000"
    assert descriptor.headers["content-length"] == "200"
    assert descriptor.headers["accept-ranges"] == "bytes"
    assert descriptor.headers["content-type"] == "application/octet-stream"


@pytest.mark.parametrize(
    "user_agent,status_code",
    [
        ("Mozilla/5.0 Edge/18", 201),
        ("Mozilla/5.0 (Windows NT 6.1; Trident/7.0; rv:11.0) like Gecko", 201),
        ("Mozilla/5.0 (X11; Linux x86_64) Firefox/120.0", 200),
        (None, 200),
    ],
)
def test_assemble_full_status_follows_client(memory_resource, user_agent, status_code):
    descriptor = assemble_download(memory_resource, user_agent=user_agent)

    assert descriptor.status_code == status_code
    assert not descriptor.is_partial
    assert descriptor.byte_range == ByteRange(0, 1000)
    assert descriptor.headers["content-length"] == "1000"
    assert "content-range" not in descriptor.headers


def test_assemble_range_wins_over_client(memory_resource):
    descriptor = assemble_download(
        memory_resource, range_header="bytes=0-", user_agent="Mozilla/5.0 Edge/18"
    )

    assert descriptor.status_code == 206


def test_assemble_filename(memory_resource):
    default = assemble_download(memory_resource)
    custom = assemble_download(memory_resource, filename="下载 文件.bin")

    assert default.headers["content-disposition"] == (
        "attachment; filename=\"memory.bin\"; filename*=utf-8''memory.bin"
    )
    encoded = custom.headers["content-disposition"].partition("filename*=utf-8''")[2]
    assert unquote(encoded) == "下载 文件.bin"


def test_assemble_unsatisfiable(memory_resource):
    with pytest.raises(MalformedRange) as raised:
        assemble_download(memory_resource, range_header="bytes=1000-1010")

    assert raised.value.headers == {"content-range": "bytes */1000"}


def test_descriptor_is_frozen(memory_resource):
    descriptor = assemble_download(memory_resource)

    with pytest.raises(AttributeError):
        descriptor.status_code = 500  # type: ignore[misc]


@pytest.mark.parametrize(
    "range_header,start,end",
    [
        ("bytes=500-699", 500, 699),
        ("bytes=0-0", 0, 0),
        ("bytes=1-", 1, 999),
        ("bytes=0-999", 0, 999),
        ("bytes=744-", 744, 999),
    ],
)
async def test_download_response_streams_window(
    memory_resource, content, range_header, start, end
):
    response = DownloadResponse(
        assemble_download(memory_resource, range_header=range_header), chunk_size=64
    )

    start_message, headers, bodies = await send_response(
        response, make_scope(("range", range_header))
    )

    assert start_message["status"] == 206
    assert headers["content-range"] == f"bytes {start}-{end}/1000"
    assert int(headers["content-length"]) == end - start + 1
    assert b"".join(body["body"] for body in bodies) == content[start : end + 1]
    assert all(len(body["body"]) <= 64 for body in bodies)
    assert [body["more_body"] for body in bodies][-1] is False
    assert all(body["more_body"] for body in bodies[:-1])


async def test_download_response_full_from_file(locator, content):
    resource = await locator.resolve("report.bin")
    request = Request(make_scope(("user-agent", "Mozilla/5.0 Edge/18")))
    response = DownloadResponse.from_request(request, resource)

    start_message, headers, bodies = await send_response(response, request.scope)

    assert start_message["status"] == 201
    assert headers["content-length"] == "1000"
    assert b"".join(body["body"] for body in bodies) == content


async def test_download_response_uses_settings_chunk_size(memory_resource):
    response = DownloadResponse(assemble_download(memory_resource))

    _, _, bodies = await send_response(response, make_scope())

    # tests.settings.TestSettings.download_chunk_size
    assert response.chunk_size == 256
    assert [len(body["body"]) for body in bodies] == [256, 256, 256, 232]


async def test_download_response_head_sends_no_body(memory_resource):
    response = DownloadResponse(assemble_download(memory_resource, range_header="bytes=0-9"))

    start_message, headers, bodies = await send_response(response, make_scope(method="HEAD"))

    assert start_message["status"] == 206
    assert headers["content-length"] == "10"
    assert bodies == [{"type": "http.response.body", "body": b"", "more_body": False}]


async def test_download_response_empty_resource():
    resource = BytesResource(content=b"", name="empty.txt")
    response = DownloadResponse(assemble_download(resource))

    start_message, headers, bodies = await send_response(response, make_scope())

    assert start_message["status"] == 200
    assert headers["content-length"] == "0"
    assert bodies == [{"type": "http.response.body", "body": b"", "more_body": False}]


class ShrinkingResource(FileResource):
    """Announces more bytes than it can deliver."""

    name = "shrinking.bin"
    total_length = 100

    def __init__(self) -> None:
        self.buffer = io.BytesIO(b"x" * 10)

    async def open(self) -> anyio.AsyncFile[bytes]:
        return anyio.wrap_file(self.buffer)


async def test_download_response_short_read_raises():
    resource = ShrinkingResource()
    response = DownloadResponse(assemble_download(resource), chunk_size=8)

    with pytest.raises(IOStreamError):
        await send_response(response, make_scope())

    assert resource.buffer.closed


class BrokenResource(FileResource):
    name = "broken.bin"
    total_length = 10

    async def open(self) -> anyio.AsyncFile[bytes]:
        raise PermissionError("denied")


async def test_download_response_read_failure_is_stream_error():
    response = DownloadResponse(assemble_download(BrokenResource()))

    with pytest.raises(IOStreamError) as raised:
        await send_response(response, make_scope())

    assert isinstance(raised.value.__cause__, PermissionError)


async def test_download_response_closes_stream_on_disconnect(content):
    class TrackedResource(FileResource):
        name = "tracked.bin"
        total_length = len(content)

        def __init__(self) -> None:
            self.buffer = io.BytesIO(content)

        async def open(self) -> anyio.AsyncFile[bytes]:
            return anyio.wrap_file(self.buffer)

    class Disconnect(Exception): ...

    resource = TrackedResource()
    response = DownloadResponse(assemble_download(resource), chunk_size=100)
    sent: list[typing.Any] = []

    async def send(message: typing.Any) -> None:
        if len(sent) == 2:
            raise Disconnect()
        sent.append(message)

    with pytest.raises(Disconnect):
        await response(make_scope(), None, send)

    assert len(sent) == 2
    assert resource.buffer.closed


def test_descriptor_fields(memory_resource):
    descriptor = ResponseDescriptor(
        status_code=206,
        headers=CIMultiDictProxy(Header({"content-length": "1"})),
        resource=memory_resource,
        byte_range=ByteRange(0, 1),
    )

    assert descriptor.is_partial


def test_descriptor_headers_are_read_only(memory_resource):
    descriptor = assemble_download(memory_resource, range_header="bytes=0-9")

    with pytest.raises(TypeError):
        descriptor.headers["content-length"] = "1000"
    with pytest.raises(AttributeError):
        descriptor.headers.add("content-range", "bytes 0-999/1000")

    assert descriptor.headers["content-length"] == "10"
    assert descriptor.headers.getall("content-range") == ["bytes 0-9/1000"]


async def test_plain_text_response():
    response = PlainText("The file cannot be found.", status_code=404)

    start_message, headers, bodies = await send_response(response, make_scope())

    assert start_message["status"] == 404
    assert headers["content-type"] == "text/plain; charset=utf-8"
    assert bodies[0]["body"] == b"The file cannot be found."


async def test_empty_error_response_keeps_headers():
    response = Response(status_code=416, headers={"content-range": "bytes */1000"})

    start_message, headers, bodies = await send_response(response, make_scope())

    assert start_message["status"] == 416
    assert headers["content-range"] == "bytes */1000"
    assert headers["content-length"] == "0"
    assert "content-type" not in headers
    assert bodies[0]["body"] == b""

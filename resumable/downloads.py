from __future__ import annotations

from resumable import status
from resumable._internal._path import get_route_path
from resumable.conf import settings
from resumable.enums import HTTPMethod, ScopeType
from resumable.exceptions import (
    HTTPException,
    ImproperlyConfigured,
    IOStreamError,
    MethodNotAllowed,
)
from resumable.logging import LoggingConfig, logger, setup_logging
from resumable.requests import Request
from resumable.resources import FileResource, PathLike, ResourceLocator
from resumable.responses import DownloadResponse, PlainText, Response
from resumable.types import Receive, Scope, Send

BODYLESS_ERROR_STATUS: frozenset[int] = frozenset(
    {
        status.HTTP_204_NO_CONTENT,
        status.HTTP_304_NOT_MODIFIED,
        status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE,
    }
)


async def download(
    request: Request,
    target: PathLike | FileResource,
    filename: str | None = None,
    *,
    locator: ResourceLocator | None = None,
) -> DownloadResponse:
    """
    Builds the response serving `target` to the client behind `request`.

    `target` can be a path or an already built `FileResource`. When `filename` is not
    given the client is offered the name of the resource, which is the base name of the
    path for files.

    **Example**

    ```python
    from resumable.downloads import download
    from resumable.requests import Request


    async def app(scope, receive, send):
        response = await download(Request(scope), "/srv/files/report.pdf")
        await response(scope, receive, send)
    ```

    Raises:
        ResourceNotFound: `target` cannot be found or read.
        MalformedRange: The `Range` header sent by the client cannot be served.
    """
    locator = locator or ResourceLocator()
    resource = await locator.resolve(target)
    return DownloadResponse.from_request(request, resource, filename=filename)


class Downloads:
    def __init__(
        self,
        *,
        directory: PathLike,
        follow_symlink: bool = False,
        check_dir: bool = True,
        logging_config: LoggingConfig | None = None,
    ) -> None:
        """
        ASGI application serving the files of `directory` as resumable downloads.

        Args:
            directory (str): Base directory for serving the files.
            follow_symlink (bool): Flag to follow symlinks pointing outside of the directory.
            check_dir (bool): Flag to check if the directory exists.
            logging_config (LoggingConfig | None): Logging setup, defaults to the one of the settings.
        """
        self.locator = ResourceLocator(
            directory, follow_symlink=follow_symlink, check_dir=check_dir
        )
        self.logging_config = (
            logging_config if logging_config is not None else settings.logging_config
        )
        setup_logging(self.logging_config)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """
        The ASGI entry point.
        """
        if scope["type"] != ScopeType.HTTP:
            raise ImproperlyConfigured(
                detail=f"Downloads only serves 'http' scopes, got '{scope['type']}'."
            )

        request = Request(scope, receive)
        try:
            response = await self.get_response(request)
        except HTTPException as exc:
            logger.info(f"Rejected download of '{request.path}': {exc}")
            response = self.http_exception(exc)

        try:
            await response(scope, receive, send)
        except IOStreamError as exc:
            logger.error(f"Download of '{request.path}' aborted: {exc}", exc_info=True)
            raise

    async def get_response(self, request: Request) -> Response:
        if request.method not in (HTTPMethod.GET, HTTPMethod.HEAD):
            raise MethodNotAllowed(headers={"allow": "GET, HEAD"})
        return await download(request, self.get_route_path(request), locator=self.locator)

    def get_route_path(self, request: Request) -> str:
        """
        The requested path without the prefix the application is mounted under.
        """
        return get_route_path(request.scope)

    def http_exception(self, exc: HTTPException) -> Response:
        if exc.status_code in BODYLESS_ERROR_STATUS:
            return Response(status_code=exc.status_code, headers=exc.headers)
        return PlainText(exc.detail, status_code=exc.status_code, headers=exc.headers)

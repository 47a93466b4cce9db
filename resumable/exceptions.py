from __future__ import annotations

import http
from typing import Any

from resumable import status


class ResumableException(Exception):
    def __init__(self, *args: Any, detail: str = ""):
        self.detail = detail
        super().__init__(*(str(arg) for arg in args if arg), self.detail)

    def __repr__(self) -> str:  # pragma: no cover
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return "".join(self.args).strip()


class HTTPException(ResumableException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        *args: Any,
        status_code: int | None = None,
        detail: str | None = None,
        headers: dict[str, str] | None = None,
        **extra: Any,
    ) -> None:
        detail = detail or getattr(self, "detail", None)
        status_code = status_code or getattr(self, "status_code", None)
        if not detail:
            detail = args[0] if args else http.HTTPStatus(status_code or self.status_code).phrase
            args = args[1:]
        self.status_code = status_code
        self.detail = detail
        self.headers = headers
        self.args = (f"{self.status_code}: {self.detail}", *args)
        self.extra = extra

    def __str__(self) -> str:
        return f"{self.status_code}: {self.detail}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        return f"{class_name}(status_code={self.status_code!r}, detail={self.detail!r})"


class ImproperlyConfigured(HTTPException, ValueError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class NotFound(HTTPException, ValueError):
    detail = "The resource cannot be found."
    status_code = status.HTTP_404_NOT_FOUND


class ResourceNotFound(NotFound):
    def __init__(self, *args: Any, identifier: Any = None) -> None:
        """The requested file does not exist or cannot be read."""
        self.identifier = identifier
        detail = (
            f"The file '{identifier}' cannot be found."
            if identifier is not None
            else "The file cannot be found."
        )
        super().__init__(*args, detail=detail)


class MethodNotAllowed(HTTPException):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED


class ContentRangeNotSatisfiable(HTTPException):
    status_code = status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE

    def __init__(self, *args: Any, range_def: tuple[int, int] | None = None, size: int, unit: str):
        """Requested range out of bounds."""
        self.unit = unit
        self.size = size
        self.range_def = range_def
        detail = (
            f"Requested range ({range_def[0]}-{range_def[1]}) is not satisfiable."
            if range_def
            else "Requested range is not satisfiable."
        )
        super().__init__(
            *args,
            detail=detail,
            headers={"content-range": f"{unit} */{size}"},
        )


class MalformedRange(ContentRangeNotSatisfiable):
    """
    The `Range` header could not be parsed or points outside of the resource.
    """

    def __init__(
        self,
        *args: Any,
        header_value: str | None = None,
        range_def: tuple[int, int] | None = None,
        size: int,
        unit: str = "bytes",
    ) -> None:
        self.header_value = header_value
        super().__init__(*args, range_def=range_def, size=size, unit=unit)


class IOStreamError(ResumableException, OSError):
    """
    Reading the resource failed after the response headers were committed.
    """

from __future__ import annotations

import io
import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

import anyio
import anyio.to_thread

from resumable.exceptions import ImproperlyConfigured, ResourceNotFound

PathLike = Union[str, "os.PathLike[str]"]


class FileResource(ABC):
    """
    A readable sequence of bytes with a known size.

    Every call to `open()` hands out a fresh stream positioned at the first byte.
    The caller owns that stream and must close it, preferably with `async with`.
    """

    name: str
    total_length: int

    @abstractmethod
    async def open(self) -> anyio.AsyncFile[bytes]:
        raise NotImplementedError("`open()` must be implemented in subclasses.")


@dataclass(frozen=True)
class PathResource(FileResource):
    path: str
    total_length: int
    name: str

    @classmethod
    def from_stat(
        cls, path: str, stat_result: os.stat_result, *, name: str | None = None
    ) -> PathResource:
        return cls(
            path=path,
            total_length=stat_result.st_size,
            name=name or os.path.basename(path),
        )

    async def open(self) -> anyio.AsyncFile[bytes]:
        return await anyio.open_file(self.path, mode="rb")


@dataclass(frozen=True)
class BytesResource(FileResource):
    content: bytes
    name: str

    @property
    def total_length(self) -> int:  # type: ignore[override]
        return len(self.content)

    async def open(self) -> anyio.AsyncFile[bytes]:
        return anyio.wrap_file(io.BytesIO(self.content))


class ResourceLocator:
    def __init__(
        self,
        directory: PathLike | None = None,
        *,
        follow_symlink: bool = False,
        check_dir: bool = True,
    ) -> None:
        """
        Resolves identifiers into `FileResource` objects.

        Args:
            directory (str | None): Base directory every identifier is resolved against.
                When `None`, identifiers are used as given.
            follow_symlink (bool): Allow symlinks inside `directory` pointing outside of it.
            check_dir (bool): Flag to check if the directory exists.
        """
        self.directory = os.fspath(directory) if directory is not None else None
        self.follow_symlink = follow_symlink
        if check_dir and self.directory is not None and not os.path.isdir(self.directory):
            raise ImproperlyConfigured(detail=f"Directory '{self.directory}' does not exist.")

    async def resolve(self, identifier: PathLike | FileResource) -> FileResource:
        """
        Returns the resource behind `identifier`. Nothing is cached, each call hits
        the filesystem again.

        Raises:
            ResourceNotFound: The file does not exist, is not a regular file or cannot be read.
        """
        if isinstance(identifier, FileResource):
            return identifier

        path = os.fspath(identifier)
        full_path, stat_result = await anyio.to_thread.run_sync(self.lookup_path, path)
        if stat_result is None or not stat.S_ISREG(stat_result.st_mode):
            raise ResourceNotFound(identifier=path)
        return PathResource.from_stat(full_path, stat_result, name=os.path.basename(path))

    def lookup_path(self, path: str) -> tuple[str, os.stat_result | None]:
        """
        Look up the full path and stat result for a given path.

        Returns:
            Tuple[str, os.stat_result | None]: Full path and stat result (or None if not
            found, outside of the directory or unreadable).
        """
        if "\x00" in path:
            return path, None

        if self.directory is None:
            full_path = os.path.abspath(path)
        else:
            joined_path = os.path.join(self.directory, os.path.normpath(path.lstrip("/\\")))
            full_path = self.get_full_path(joined_path)
            if not self.is_within_directory(full_path):
                return full_path, None

        stat_result = self.get_stat_result(full_path)
        if stat_result is not None and not os.access(full_path, os.R_OK):
            return full_path, None
        return full_path, stat_result

    def get_full_path(self, path: str) -> str:
        if self.follow_symlink:
            return os.path.abspath(path)
        return os.path.realpath(path)

    def is_within_directory(self, full_path: str) -> bool:
        base = self.get_full_path(self.directory)
        try:
            return os.path.commonpath([base, full_path]) == base
        except ValueError:
            # different drives on windows
            return False

    def get_stat_result(self, full_path: str) -> os.stat_result | None:
        try:
            return os.stat(full_path)
        except (FileNotFoundError, NotADirectoryError, PermissionError):
            return None

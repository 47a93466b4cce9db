from __future__ import annotations

import os
from typing import Annotated, Any, get_args, get_origin, get_type_hints

from resumable.logging import LoggingConfig, StandardLoggingConfig
from resumable.types import Doc


def safe_get_type_hints(cls: type) -> dict[str, Any]:
    """
    Safely get type hints for a class, falling back to the raw annotations
    when they cannot be resolved.
    """
    try:
        return get_type_hints(cls, include_extras=True)
    except Exception:
        return cls.__annotations__


class BaseSettings:
    """
    Base of all the settings for any system.
    """

    __type_hints__: Any = None
    __truthy__: set[str] = {"true", "1", "yes", "on", "y"}

    def __init__(self, **kwargs: Any) -> None:
        """
        Loads every annotated attribute from the environment variable with the
        same name in uppercase, casting it to the annotated type. Attributes
        without an environment variable keep their class default.
        """
        cls = self.__class__
        if cls.__dict__.get("__type_hints__") is None:
            cls.__type_hints__ = safe_get_type_hints(cls)

        if kwargs:
            for key, value in kwargs.items():
                setattr(self, key, value)

        for key, typ in cls.__type_hints__.items():
            if key.startswith("__"):
                continue
            base_type = self._extract_base_type(typ)

            env_value = os.getenv(key.upper(), None)
            if env_value is not None:
                value = self._cast(env_value, base_type)
            else:
                value = getattr(self, key, None)
            setattr(self, key, value)

        self.post_init()

    def post_init(self) -> None:
        """
        Post-initialization hook called after all settings have been loaded.
        """
        ...

    def _extract_base_type(self, typ: Any) -> Any:
        origin = get_origin(typ)
        if origin is Annotated:
            return get_args(typ)[0]
        return typ

    def _cast(self, value: str, typ: type[Any]) -> Any:
        """
        Casts the value to the specified type.
        If the type is `bool`, it checks for common truthy values.
        Raises a ValueError if the value cannot be cast to the type.
        """
        try:
            if typ is bool or str(typ) == "bool":
                return value.lower() in self.__truthy__
            return typ(value)
        except Exception:
            type_name = getattr(typ, "__name__", str(typ))
            raise ValueError(f"Cannot cast value '{value}' to type '{type_name}'") from None


class Settings(BaseSettings):
    debug: Annotated[
        bool,
        Doc(
            """
            Boolean indicating if the downloads should run in debug mode.
            In debug mode the logging level is forced to `DEBUG`.
            """
        ),
    ] = False
    logging_level: Annotated[
        str,
        Doc(
            """
            The logging level used by the default `StandardLoggingConfig`.
            """
        ),
    ] = "INFO"
    download_chunk_size: Annotated[
        int,
        Doc(
            """
            Maximum number of bytes read from a resource and sent to the client
            in a single `http.response.body` message.
            """
        ),
    ] = 64 * 1024

    def post_init(self) -> None:
        if self.download_chunk_size <= 0:
            raise ValueError("`download_chunk_size` must be a positive integer.")

    @property
    def logging_config(self) -> LoggingConfig | None:
        """
        The logging configuration applied by the `Downloads` application.
        """
        level = "DEBUG" if self.debug else self.logging_level
        return StandardLoggingConfig(level=level)

from __future__ import annotations

import os

os.environ.setdefault("RESUMABLE_SETTINGS_MODULE", "tests.settings.TestSettings")

import pytest  # noqa: E402

from resumable.resources import BytesResource, ResourceLocator  # noqa: E402

CONTENT = bytes(range(250)) * 4


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def content() -> bytes:
    return CONTENT


@pytest.fixture
def files_dir(tmp_path, content):
    (tmp_path / "report.bin").write_bytes(content)
    (tmp_path / "empty.bin").write_bytes(b"")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "résumé 2024.pdf").write_bytes(content[:100])
    return tmp_path


@pytest.fixture
def locator(files_dir) -> ResourceLocator:
    return ResourceLocator(files_dir)


@pytest.fixture
def memory_resource(content) -> BytesResource:
    return BytesResource(content=content, name="memory.bin")

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest


def _add_src_to_path() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_add_src_to_path()


@pytest.fixture(autouse=True)
def _isolate_process_state() -> Iterator[None]:
    from docnotes import ServiceContainer, reset_default_reader

    reset_default_reader()
    ServiceContainer.reset_containers()
    yield
    reset_default_reader()
    ServiceContainer.reset_containers()

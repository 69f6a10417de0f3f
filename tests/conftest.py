import logging
from pathlib import Path

import pytest


@pytest.fixture
def target(tmp_path: Path) -> Path:
    """Небольшой «двоичный» файл для патча."""
    path = tmp_path / "target.bin"
    path.write_bytes(b"HEAD\x00size=0010;mode=ro\x00TAIL")
    return path


@pytest.fixture(autouse=True)
def _no_debug_env(monkeypatch):
    # уровень логов в тестах не должен зависеть от окружения разработчика
    monkeypatch.delenv("SEWER_DEBUG", raising=False)


@pytest.fixture(autouse=True)
def _reset_sewer_logger():
    # main() вешает обработчик на поток stderr текущего теста
    yield
    log = logging.getLogger("sewer")
    for handler in list(log.handlers):
        log.removeHandler(handler)
    log.setLevel(logging.NOTSET)

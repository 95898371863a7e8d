from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger

from core.services.interfaces import ImportResult, ImportStatus


class _ImportTask(QRunnable):
    """QRunnable for background photo import.

    Emits `receiver.importFinished(result)` upon completion. The receiver is
    expected to own a Qt `Signal(object)` named `importFinished`.
    """

    def __init__(self, *, path: str, vm: Any, receiver: QObject) -> None:
        super().__init__()
        self._path = path
        self._vm = vm
        self._receiver = receiver

    def run(self) -> None:  # type: ignore[override]
        try:
            result = self._vm.import_photo(self._path)
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.error("Import task for {} failed: {}", self._path, ex)
            result = ImportResult(self._path, ImportStatus.UNREADABLE, message=str(ex))
        self._receiver.importFinished.emit(result)  # type: ignore[attr-defined]


class ImportTaskRunner:
    """Dispatches photo imports to the global thread pool."""

    def __init__(self, *, vm: Any, receiver: QObject) -> None:
        self._vm = vm
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()

    def request_import(self, path: str) -> None:
        """Import `path` off the UI thread."""
        logger.debug("Queueing import of {}", path)
        self._pool.start(_ImportTask(path=path, vm=self._vm, receiver=self._receiver))

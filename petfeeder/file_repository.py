"""JSON and static file storage rooted in a directory."""

from __future__ import annotations

import json
from enum import IntEnum
from pathlib import Path
from typing import IO, Any

from .logger import Logger


class FileRepoErr(IntEnum):
    NO_ERROR = 0
    INIT_ERROR = 1
    NOT_INITIALIZED_ERROR = 2
    FILE_NOT_FOUND_ERROR = 3
    FILE_OPEN_ERROR = 4
    FILE_READ_ERROR = 5
    DESERIALIZE_ERROR = 6


class FileRepoError(Exception):
    """Raised when a repository operation fails."""

    def __init__(self, code: FileRepoErr, detail: str = "") -> None:
        self.code = code
        self.detail = detail
        super().__init__(f"{code.name}: {detail}" if detail else code.name)


class FileRepo:
    """Stores files under a root directory, addressed by '/'-style paths."""

    def __init__(self, logger: Logger, root: str | Path = "data") -> None:
        self._logger = logger
        self._root = Path(root)
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _resolve(self, path: str) -> Path:
        return self._root / path.lstrip("/")

    def init(self) -> None:
        """Prepare the root directory; raises FileRepoError on failure."""
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self._logger.print("file repo initialization error")
            raise FileRepoError(FileRepoErr.INIT_ERROR, str(exc)) from exc
        self._logger.println("file repo is initialized")
        self._initialized = True

    def open_for_read(self, path: str) -> IO[bytes] | None:
        """Open a stored file for binary reading, or return None if unavailable."""
        if not self._initialized:
            self._logger.print("FileRepo not initialized on FileRepo.open_for_read: ")
            self._logger.println(path)
            return None
        target = self._resolve(path)
        if not target.is_file():
            return None
        try:
            return target.open("rb")
        except OSError:
            return None

    def read_json_file(self, path: str) -> Any:
        """Load and return the JSON document stored at path."""
        file = self.open_for_read(path)
        if file is None:
            raise FileRepoError(FileRepoErr.FILE_OPEN_ERROR, path)
        with file:
            data = file.read()
        try:
            return json.loads(data)
        except ValueError as exc:
            self._logger.print("file deserialize error: ")
            self._logger.println(str(exc))
            self._logger.print("file:")
            self._logger.println(path)
            raise FileRepoError(FileRepoErr.DESERIALIZE_ERROR, str(exc)) from exc

    def write_json_file(self, path: str, doc: Any) -> None:
        """Serialise doc as compact JSON and store it at path."""
        if not self._initialized:
            self._logger.print("FileRepo not initialized on FileRepo.write_json_file: ")
            self._logger.println(path)
            raise FileRepoError(FileRepoErr.NOT_INITIALIZED_ERROR, path)
        text = json.dumps(doc, separators=(",", ":"))
        try:
            with self._resolve(path).open("w", encoding="utf-8") as file:
                file.write(text)
        except OSError as exc:
            raise FileRepoError(FileRepoErr.FILE_OPEN_ERROR, str(exc)) from exc
"""Daily feeding schedule with five time slots."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from .file_repository import FileRepo, FileRepoError
from .logger import Logger

SLOT_COUNT = 5


class ScheduleErr(IntEnum):
    NO_ERROR = 0
    FILE_SCHEDULE_ERROR = 1
    NO_SCHEDULE_ERROR = 2
    JSON_PARSE_ERROR = 3


class ScheduleError(Exception):
    """Raised when the schedule cannot be loaded or saved."""

    def __init__(self, code: ScheduleErr, detail: str = "") -> None:
        self.code = code
        self.detail = detail
        super().__init__(f"{code.name}: {detail}" if detail else code.name)


@dataclass
class ScheduleTime:
    hour: int = 0
    minute: int = 0


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return 0


def _slot_field(doc: Any, index: int, key: str) -> int:
    if not isinstance(doc, list) or index >= len(doc):
        return 0
    entry = doc[index]
    if not isinstance(entry, dict):
        return 0
    return _as_int(entry.get(key))


class Schedule:
    """Five daily feeding times, each fired at most once until another fires."""

    FILE_PATH = "/schedule.json"

    def __init__(self, file_repo: FileRepo, logger: Logger) -> None:
        self._file_repo = file_repo
        self._logger = logger
        self._times = [ScheduleTime() for _ in range(SLOT_COUNT)]
        self._fed = [False] * SLOT_COUNT
        self._is_set = False

    @property
    def times(self) -> list[ScheduleTime]:
        return [ScheduleTime(t.hour, t.minute) for t in self._times]

    @property
    def is_set(self) -> bool:
        return self._is_set

    def init(self) -> None:
        """Load the saved schedule; raises ScheduleError if there is none."""
        try:
            doc = self._file_repo.read_json_file(self.FILE_PATH)
        except FileRepoError as exc:
            self._logger.print("Failed to read schedule: ")
            self._logger.println(int(exc.code))
            raise ScheduleError(ScheduleErr.FILE_SCHEDULE_ERROR, str(exc)) from exc
        if doc is None:
            raise ScheduleError(ScheduleErr.NO_SCHEDULE_ERROR)
        self.set_schedule(doc)

    def schedule_json(self) -> str:
        """Return the five slots as a compact JSON array."""
        slots = [{"hour": t.hour, "minute": t.minute} for t in self._times]
        return json.dumps(slots, separators=(",", ":"))

    def is_feeding_time(self, hour: int, minute: int) -> bool:
        """Report whether a not-yet-served slot matches, marking it as served."""
        if not self._is_set:
            return False
        for index, slot in enumerate(self._times):
            if slot.hour == hour and slot.minute == minute and not self._fed[index]:
                self._clean_fed()
                self._fed[index] = True
                return True
        return False

    def set_schedule(self, doc: Any) -> None:
        """Apply a JSON array of {hour, minute} objects and save it."""
        self._times = [
            ScheduleTime(_slot_field(doc, i, "hour"), _slot_field(doc, i, "minute"))
            for i in range(SLOT_COUNT)
        ]
        self._is_set = True
        self._clean_fed()

        try:
            self._file_repo.write_json_file(self.FILE_PATH, doc)
        except FileRepoError as exc:
            self._logger.print("Failed to save schedule: ")
            self._logger.println(int(exc.code))
            raise ScheduleError(ScheduleErr.FILE_SCHEDULE_ERROR, str(exc)) from exc
        self._logger.println("Schedule saved successfully!")

    def _clean_fed(self) -> None:
        self._fed = [False] * SLOT_COUNT
"""Local time keeping with a configurable POSIX time zone."""

from __future__ import annotations

import json
import os
import time
from enum import IntEnum
from typing import Callable

from .file_repository import FileRepo, FileRepoError
from .logger import Logger

DEFAULT_TZ = "EET-2EEST,M3.5.0/3,M10.5.0/4"
CONFIG_PATH = "/time.json"
TIMEZONE_KEY = "timezone"
SYNC_TIME_INTERVAL = 14400  # 4 hours
_ONE_DAY = 86400


class NtpTimeErr(IntEnum):
    NO_ERROR = 0
    CONFIG_READ_ERROR = 1
    TIME_SYNC_ERROR = 2


class NtpTimeError(Exception):
    """Raised when the time configuration cannot be loaded or synchronised."""

    def __init__(self, code: NtpTimeErr, detail: str = "") -> None:
        self.code = code
        self.detail = detail
        super().__init__(f"{code.name}: {detail}" if detail else code.name)


def is_time_valid(t: float) -> bool:
    """A clock reading is trusted once it is past the first day of the epoch."""
    return t > _ONE_DAY


def apply_posix_tz(tz: str) -> None:
    """Make tz the process-wide local time zone."""
    os.environ["TZ"] = tz
    if hasattr(time, "tzset"):
        time.tzset()


class NtpTime:
    """Keeps the current time zone, persists it and waits for a valid clock."""

    def __init__(
        self,
        file_repo: FileRepo,
        logger: Logger,
        *,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        apply_tz: Callable[[str], None] | None = None,
        localtime: Callable[[float], time.struct_time] = time.localtime,
        default_tz: str = DEFAULT_TZ,
    ) -> None:
        self._file_repo = file_repo
        self._logger = logger
        self._clock = clock
        self._sleep = sleep
        self._apply_tz = apply_tz if apply_tz is not None else apply_posix_tz
        self._localtime = localtime
        self._default_tz = default_tz
        self._current_tz = ""
        self._last_sync = 0.0

    @property
    def current_tz(self) -> str:
        return self._current_tz

    @property
    def last_sync(self) -> float:
        return self._last_sync

    def init(self) -> None:
        """Apply the saved time zone, falling back to the default one."""
        try:
            self._load_preserved_config()
        except NtpTimeError:
            self._logger.println("Failed to load preserved time config, fallback to default")

        try:
            self._try_sync(self._current_tz)
            return
        except NtpTimeError:
            self._logger.println(
                f"Failed to sync preserved time, tz: {self._current_tz}, fallback to default"
            )

        self._current_tz = self._default_tz
        try:
            self._try_sync(self._current_tz)
        except NtpTimeError:
            self._logger.println(f"Failed to sync default time, tz: {self._current_tz}")

    def set_time_zone(self, tz: str, max_timeout_secs: int = 10) -> None:
        """Switch to tz and save it; raises NtpTimeError if the clock stays invalid."""
        self._try_sync(tz, max_timeout_secs)
        self._current_tz = tz
        self._preserve_config()

    def get_time(self) -> time.struct_time:
        """Return the current local time."""
        return self._localtime(self._clock())

    def time_status_json(self) -> str:
        """Return the current time and time zone as compact JSON."""
        now = self.get_time()
        doc = {
            "hour": now.tm_hour,
            "minute": now.tm_min,
            "second": now.tm_sec,
            "timezone": self._current_tz,
        }
        return json.dumps(doc, separators=(",", ":"))

    def sync_time_loop(self) -> None:
        """Resynchronise when the last sync is older than the sync interval."""
        if self._clock() - self._last_sync > SYNC_TIME_INTERVAL:
            try:
                self._try_sync(self._current_tz)
            except NtpTimeError:
                pass

    def _preserve_config(self) -> None:
        try:
            self._file_repo.write_json_file(CONFIG_PATH, {TIMEZONE_KEY: self._current_tz})
        except FileRepoError as exc:
            self._logger.print("Failed to save time config: ")
            self._logger.println(int(exc.code))
            return
        self._logger.print("Saved time config: ")
        self._logger.println(self._current_tz)

    def _load_preserved_config(self) -> None:
        try:
            doc = self._file_repo.read_json_file(CONFIG_PATH)
        except FileRepoError as exc:
            self._logger.print("Failed to read time config: ")
            self._logger.println(int(exc.code))
            raise NtpTimeError(NtpTimeErr.CONFIG_READ_ERROR, str(exc)) from exc
        if doc is None:
            raise NtpTimeError(NtpTimeErr.CONFIG_READ_ERROR, "empty config")
        value = doc.get(TIMEZONE_KEY) if isinstance(doc, dict) else None
        self._current_tz = value if isinstance(value, str) else json.dumps(value)
        self._logger.print("Loaded time config: ")
        self._logger.println(self._current_tz)

    def _try_sync(self, tz: str, max_timeout_secs: int = 10) -> None:
        self._apply_tz(tz)
        self._logger.println("Waiting for NTP time sync...")

        now = self._clock()
        retries = max_timeout_secs
        while not is_time_valid(now) and retries > 0:
            self._sleep(1.0)
            self._logger.print(".")
            now = self._clock()
            retries -= 1
        self._logger.println()

        if not is_time_valid(now):
            self._logger.println("NTP time sync failed")
            raise NtpTimeError(NtpTimeErr.TIME_SYNC_ERROR, tz)

        self._last_sync = now
        self._logger.print("Current time: ")
        self._logger.println(time.asctime(self._localtime(now)))
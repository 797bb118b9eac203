"""Application wiring and main loop of the feeder controller."""

from __future__ import annotations

import argparse
import time
from typing import Callable, Protocol

from .feeder import Feeder, PinLevel
from .file_repository import FileRepo, FileRepoError
from .http_server import HttpServer
from .logger import Logger
from .ntp_time import NtpTime
from .schedule import Schedule, ScheduleError


class FeederUnit(Protocol):
    def init(self) -> None: ...

    def feed(self) -> None: ...


class _SimulatedMechanism:
    """Stands in for motor and probe: while running, the probe goes HIGH, LOW, HIGH."""

    PHASE = 0.15

    def __init__(self) -> None:
        self._started: float | None = None

    def set_motor(self, level: PinLevel) -> None:
        self._started = time.monotonic() if level is PinLevel.HIGH else None

    def read_probe(self) -> int:
        if self._started is None:
            return PinLevel.HIGH
        elapsed = time.monotonic() - self._started
        if self.PHASE <= elapsed < 2 * self.PHASE:
            return PinLevel.LOW
        return PinLevel.HIGH


class FeederApp:
    """Owns all components and runs setup and one iteration of the main loop."""

    def __init__(
        self,
        data_dir: str = "data",
        host: str = "0.0.0.0",
        port: int = 80,
        *,
        logger: Logger | None = None,
        feeder: FeederUnit | None = None,
        set_led: Callable[[PinLevel], None] | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        localtime: Callable[[float], time.struct_time] = time.localtime,
        apply_tz: Callable[[str], None] | None = None,
        poll_timeout: float = 0.0,
    ) -> None:
        self.logger = logger if logger is not None else Logger()
        self.file_repo = FileRepo(self.logger, data_dir)
        self.ntp_time = NtpTime(
            self.file_repo,
            self.logger,
            clock=clock,
            sleep=sleep,
            apply_tz=apply_tz,
            localtime=localtime,
        )
        self.schedule = Schedule(self.file_repo, self.logger)
        if feeder is None:
            mechanism = _SimulatedMechanism()
            feeder = Feeder(mechanism.set_motor, mechanism.read_probe)
        self.feeder = feeder
        self._set_led = set_led
        self.http_server = HttpServer(
            self.logger,
            self.file_repo,
            self.ntp_time,
            self.feeder,
            self.schedule,
            set_led=set_led,
            host=host,
            port=port,
            poll_timeout=poll_timeout,
        )

    def setup(self) -> None:
        """Initialise every component and start listening."""
        if self._set_led is not None:
            self._set_led(PinLevel.HIGH)
        self.logger.init()
        try:
            self.file_repo.init()
        except FileRepoError:
            pass
        self.ntp_time.init()
        try:
            self.schedule.init()
        except ScheduleError:
            pass
        self.feeder.init()
        self.http_server.init()

    def loop(self) -> None:
        """Serve requests, feed when a slot is due and keep the clock in sync."""
        self.http_server.process_requests()
        now = self.ntp_time.get_time()
        if self.schedule.is_feeding_time(now.tm_hour, now.tm_min):
            self.feeder.feed()
        self.ntp_time.sync_time_loop()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="petfeeder", description="Automatic pet feeder controller.")
    parser.add_argument("--data-dir", default="data", help="directory holding settings and web files")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=80, help="port to listen on")
    args = parser.parse_args(argv)

    app = FeederApp(args.data_dir, args.host, args.port, poll_timeout=0.05)
    app.setup()
    try:
        while True:
            app.loop()
    except KeyboardInterrupt:
        pass
    finally:
        app.http_server.close()
    return 0
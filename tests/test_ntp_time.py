import io
import json
import time

import pytest

from petfeeder.file_repository import FileRepo, FileRepoError
from petfeeder.logger import Logger
from petfeeder.ntp_time import (
    CONFIG_PATH,
    DEFAULT_TZ,
    SYNC_TIME_INTERVAL,
    NtpTime,
    NtpTimeErr,
    NtpTimeError,
    is_time_valid,
)

T = 1_700_000_000.0


class FakeClock:
    def __init__(self, now):
        self.now = now
        self.sleeps = 0

    def __call__(self):
        return self.now

    def sleep(self, _secs):
        self.sleeps += 1


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def repo(tmp_path, stream):
    repo = FileRepo(Logger(stream), tmp_path)
    repo.init()
    return repo


def make_ntp(repo, stream, clock, applied):
    return NtpTime(
        repo,
        Logger(stream),
        clock=clock,
        sleep=clock.sleep,
        apply_tz=applied.append,
        localtime=time.gmtime,
    )


def test_is_time_valid_threshold():
    assert is_time_valid(86400) is False
    assert is_time_valid(86401) is True
    assert is_time_valid(0) is False


def test_set_time_zone_applies_and_saves(repo, stream):
    clock = FakeClock(T)
    applied = []
    ntp = make_ntp(repo, stream, clock, applied)
    ntp.set_time_zone("UTC0")
    assert applied == ["UTC0"]
    assert ntp.current_tz == "UTC0"
    assert repo.read_json_file(CONFIG_PATH) == {"timezone": "UTC0"}
    assert ntp.last_sync == T


def test_set_time_zone_fails_when_clock_invalid(repo, stream):
    clock = FakeClock(0.0)
    applied = []
    ntp = make_ntp(repo, stream, clock, applied)
    with pytest.raises(NtpTimeError) as info:
        ntp.set_time_zone("UTC0", max_timeout_secs=3)
    assert info.value.code is NtpTimeErr.TIME_SYNC_ERROR
    assert clock.sleeps == 3
    assert ntp.current_tz == ""
    assert "NTP time sync failed" in stream.getvalue()
    with pytest.raises(FileRepoError):
        repo.read_json_file(CONFIG_PATH)


def test_init_loads_preserved_time_zone(repo, stream):
    repo.write_json_file(CONFIG_PATH, {"timezone": "UTC0"})
    clock = FakeClock(T)
    applied = []
    ntp = make_ntp(repo, stream, clock, applied)
    ntp.init()
    assert applied == ["UTC0"]
    assert json.loads(ntp.time_status_json())["timezone"] == "UTC0"


def test_init_falls_back_to_default_when_sync_fails(repo, stream):
    repo.write_json_file(CONFIG_PATH, {"timezone": "UTC0"})
    clock = FakeClock(0.0)
    applied = []
    ntp = make_ntp(repo, stream, clock, applied)
    ntp.init()
    assert applied == ["UTC0", DEFAULT_TZ]
    assert ntp.current_tz == DEFAULT_TZ


def test_init_without_config_reports_load_failure(repo, stream):
    clock = FakeClock(0.0)
    applied = []
    ntp = make_ntp(repo, stream, clock, applied)
    ntp.init()
    assert "Failed to load preserved time config, fallback to default" in stream.getvalue()
    assert applied[-1] == DEFAULT_TZ


def test_time_status_json_reports_local_time(repo, stream):
    clock = FakeClock(T)
    ntp = make_ntp(repo, stream, clock, [])
    ntp.set_time_zone("UTC0")
    expected = time.gmtime(T)
    assert json.loads(ntp.time_status_json()) == {
        "hour": expected.tm_hour,
        "minute": expected.tm_min,
        "second": expected.tm_sec,
        "timezone": "UTC0",
    }


def test_get_time_uses_clock(repo, stream):
    clock = FakeClock(T)
    ntp = make_ntp(repo, stream, clock, [])
    assert ntp.get_time() == time.gmtime(T)


def test_sync_time_loop_respects_interval(repo, stream):
    clock = FakeClock(T)
    applied = []
    ntp = make_ntp(repo, stream, clock, applied)
    ntp.set_time_zone("UTC0")
    clock.now = T + SYNC_TIME_INTERVAL
    ntp.sync_time_loop()
    assert applied == ["UTC0"]
    clock.now = T + SYNC_TIME_INTERVAL + 1
    ntp.sync_time_loop()
    assert applied == ["UTC0", "UTC0"]
    assert ntp.last_sync == T + SYNC_TIME_INTERVAL + 1
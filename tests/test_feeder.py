import pytest

from petfeeder.feeder import Feeder, PinLevel

HIGH = PinLevel.HIGH
LOW = PinLevel.LOW


class Rig:
    """Simulated motor, probe and clock; time advances 10 ms per idle call."""

    def __init__(self, probe_at, limit_ms=5000):
        self.ticks = 0
        self.limit_ms = limit_ms
        self.probe_at = probe_at
        self.motor = []

    @property
    def now(self):
        return self.ticks / 1000

    def clock(self):
        return self.now

    def set_motor(self, level):
        self.motor.append(level)

    def read(self):
        return self.probe_at(self.now)

    def idle(self):
        self.ticks += 10
        if self.ticks > self.limit_ms:
            raise TimeoutError


def test_init_turns_motor_off():
    rig = Rig(lambda t: HIGH)
    feeder = Feeder(rig.set_motor, rig.read, clock=rig.clock, idle=rig.idle)
    feeder.init()
    assert rig.motor == [LOW]


def test_full_rotation_stops_motor():
    def probe(t):
        if t < 0.2:
            return HIGH
        if t < 0.4:
            return LOW
        return HIGH

    rig = Rig(probe)
    feeder = Feeder(rig.set_motor, rig.read, clock=rig.clock, idle=rig.idle)
    feeder.feed()
    assert rig.motor == [HIGH, LOW]
    assert 0.4 <= rig.now < 1.0


def test_starting_low_waits_for_high_first():
    def probe(t):
        if t < 0.2:
            return LOW
        if t < 0.4:
            return HIGH
        if t < 0.6:
            return LOW
        return HIGH

    rig = Rig(probe)
    feeder = Feeder(rig.set_motor, rig.read, clock=rig.clock, idle=rig.idle)
    feeder.feed()
    assert rig.motor == [HIGH, LOW]
    assert rig.now >= 0.6


def test_short_glitch_is_ignored():
    def probe(t):
        if 0.3 <= t < 0.31:
            return LOW
        if 1.0 <= t < 1.2:
            return LOW
        return HIGH

    rig = Rig(probe)
    feeder = Feeder(rig.set_motor, rig.read, clock=rig.clock, idle=rig.idle)
    feeder.feed()
    assert rig.now >= 1.2
    assert rig.motor[-1] is LOW


def test_motor_off_when_interrupted():
    rig = Rig(lambda t: LOW, limit_ms=300)
    feeder = Feeder(rig.set_motor, rig.read, clock=rig.clock, idle=rig.idle)
    with pytest.raises(TimeoutError):
        feeder.feed()
    assert rig.motor == [HIGH, LOW]
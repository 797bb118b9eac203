"""Motor control for one feeding rotation."""

from __future__ import annotations

import time
from enum import IntEnum
from typing import Callable


class PinLevel(IntEnum):
    LOW = 0
    HIGH = 1


def _yield() -> None:
    time.sleep(0)


class Feeder:
    """Runs the feeder motor until the probe reports one full rotation.

    The probe is pulled to ground while the feeder is in its notch, so a
    rotation is a debounced HIGH -> LOW -> HIGH sequence on the probe.
    """

    DEBOUNCE_DELAY = 0.05

    def __init__(
        self,
        set_motor: Callable[[PinLevel], None],
        read_probe: Callable[[], int],
        clock: Callable[[], float] = time.monotonic,
        idle: Callable[[], None] = _yield,
        debounce_delay: float = DEBOUNCE_DELAY,
    ) -> None:
        self._set_motor = set_motor
        self._read_probe = read_probe
        self._clock = clock
        self._idle = idle
        self._debounce_delay = debounce_delay

    def init(self) -> None:
        """Make sure the motor is off."""
        self._set_motor(PinLevel.LOW)

    def feed(self) -> None:
        """Turn the motor on and stop it after one rotation."""
        self._set_motor(PinLevel.HIGH)
        try:
            probe_state = PinLevel.LOW
            last_reading = PinLevel.LOW
            last_debounce = 0.0
            saw_high = False
            saw_low = False

            while True:
                reading = PinLevel(self._read_probe())
                now = self._clock()
                if reading != last_reading:
                    last_debounce = now

                if now - last_debounce > self._debounce_delay and reading != probe_state:
                    probe_state = reading
                    if probe_state is PinLevel.HIGH:
                        if not saw_high:
                            saw_high = True
                        elif saw_low:
                            break
                    elif saw_high:
                        saw_low = True

                last_reading = reading
                self._idle()
        finally:
            self._set_motor(PinLevel.LOW)
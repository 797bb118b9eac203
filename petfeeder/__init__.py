"""Pet feeder controller: schedule, time zone, motor cycle and HTTP interface."""

__version__ = "0.1.0"
# petfeeder

Controller for an automatic pet feeder. It keeps a daily feeding schedule of
five times, keeps local time in a configurable POSIX time zone, runs the
feeder motor through one dispensing rotation, and serves a small HTTP
interface for feeding on demand and changing settings. Settings are stored
as JSON files in a data directory so they survive a restart.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running

```
petfeeder [--data-dir DIR] [--host HOST] [--port PORT]
```

| Option       | Default   | Meaning                                       |
|--------------|-----------|-----------------------------------------------|
| `--data-dir` | `data`    | Directory holding settings and web files      |
| `--host`     | `0.0.0.0` | Address to listen on                          |
| `--port`     | `80`      | Port to listen on                             |

Port 80 usually needs elevated privileges; pass `--port 8080` or similar
otherwise.

The command builds a `FeederApp`, calls `setup()` and then calls `loop()`
until interrupted with Ctrl-C. `setup()` creates the data directory, applies
the saved time zone (falling back to the default), loads the saved schedule
if there is one, and starts the HTTP server. Each `loop()` serves at most one
pending request, feeds if a scheduled time has come, and resynchronises the
clock when the last synchronisation is more than four hours old.

Settings files inside the data directory:

- `time.json` – `{"timezone": "<POSIX TZ string>"}`
- `schedule.json` – the last schedule that was set

## HTTP interface

| Method | Path          | What it does                                      |
|--------|---------------|---------------------------------------------------|
| any    | `/`           | Serves `index.html` from the data directory       |
| GET    | `/styles.css` | Serves `styles.css` from the data directory       |
| GET    | `/script.js`  | Serves `script.js` from the data directory        |
| any    | `/feed`       | Dispense one portion now; replies `Feeding completed` |
| GET    | `/time`       | `{"hour", "minute", "second", "timezone"}`        |
| POST   | `/time`       | Set the time zone, e.g. `{"timezone": "UTC0"}`    |
| GET    | `/schedule`   | The five feeding times                            |
| POST   | `/schedule`   | Replace the five feeding times                    |

A static file that is missing is answered with status 500 and
`File Not Found`; an unknown path gets 404.

POST bodies must be JSON of at most 400 characters. Replies to POST requests
are JSON objects with a `status` of `"success"` or `"error"` and a
`message`; failures after validation also carry a numeric `error` code, and
malformed JSON carries the parser's message. A time zone must be a
non-empty string of at most 50 characters.

A schedule is a list of five times:

```json
[
  {"hour": 7,  "minute": 0},
  {"hour": 12, "minute": 30},
  {"hour": 18, "minute": 0},
  {"hour": 21, "minute": 0},
  {"hour": 23, "minute": 45}
]
```

Missing or non-numeric entries count as `0`. A time fires once when the
clock matches it, and does not fire again until another time has fired or a
new schedule is set.

Time zones are POSIX TZ strings such as `EET-2EEST,M3.5.0/3,M10.5.0/4`,
which is also the default.

## Using it as a library

- `petfeeder.logger.Logger` writes diagnostic text to a stream (standard
  output by default) with `print` and `println`.
- `petfeeder.file_repository.FileRepo` stores files under a root directory:
  `init`, `open_for_read`, `read_json_file` and `write_json_file`, raising
  `FileRepoError` (with a `FileRepoErr` code) on failure.
- `petfeeder.schedule.Schedule` holds the feeding times: `init`,
  `set_schedule`, `schedule_json` and `is_feeding_time(hour, minute)`;
  failures raise `ScheduleError`.
- `petfeeder.ntp_time.NtpTime` keeps the time zone: `init`,
  `set_time_zone`, `get_time`, `time_status_json` and `sync_time_loop`;
  failures raise `NtpTimeError`. The clock, sleep, local-time and
  time-zone functions can be injected.
- `petfeeder.feeder.Feeder` takes a motor setter and a probe reader and, in
  `feed`, runs the motor until the probe shows a debounced HIGH → LOW → HIGH
  sequence, then turns it off.
- `petfeeder.http_server.HttpServer.handle(method, path, body)` answers a
  single request and returns a `Response` (`status`, `content_type`, `body`,
  `text`, `json_body()`), handy for testing without a network. `init`,
  `process_requests` and `close` manage the real listening socket.
- `petfeeder.app.FeederApp` wires everything together; `main` is the
  command's entry point.

## What it does not do

- It drives no real hardware. The `petfeeder` command uses a simulated motor
  and probe; to run a physical feeder, pass your own `Feeder` (built with
  your motor and probe functions) to `FeederApp`.
- It does not talk to time servers. `NtpTime` sets the process time zone
  and waits for the system clock to hold a plausible time; keeping the
  system clock correct is left to the host.
- It has no network (Wi-Fi) configuration of its own. `HttpServer` accepts
  an optional `wifi_conn` object with `reset_to(doc)` and `status_json()`,
  and only then answers `GET /wifi` and `POST /wifi`; the command does not
  supply one.
- It ships no web page. Put `index.html`, `styles.css` and `script.js` in
  the data directory yourself.
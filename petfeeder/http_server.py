"""HTTP interface for feeding, schedule, time and network settings."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Callable, Protocol
from urllib.parse import urlsplit

from .feeder import PinLevel
from .file_repository import FileRepo
from .logger import Logger
from .ntp_time import NtpTime, NtpTimeError
from .schedule import Schedule, ScheduleError

MAX_JSON_BODY = 400
MAX_SSID_LENGTH = 150
MAX_PWD_LENGTH = 200
MAX_TZ_LENGTH = 50

_ANY = "*"
_SSID_FIELD = "ssid"
_PHRASE_FIELD = "pwd"

_access_log = logging.getLogger(__name__)


class FeedAction(Protocol):
    def feed(self) -> None: ...


class WiFiControl(Protocol):
    """Network settings backend; reset_to raises an exception carrying `code` on failure."""

    def reset_to(self, doc: Any) -> None: ...

    def status_json(self) -> str: ...


@dataclass(frozen=True)
class Response:
    status: int
    content_type: str
    body: bytes

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def json_body(self) -> Any:
        return json.loads(self.body)


def _text(status: int, content_type: str, text: str) -> Response:
    return Response(status, content_type, text.encode("utf-8"))


def _json(status: int, doc: Any) -> Response:
    return _text(status, "application/json", json.dumps(doc, separators=(",", ":")))


def _string_field(doc: Any, key: str) -> str:
    if isinstance(doc, dict):
        value = doc.get(key)
        if isinstance(value, str):
            return value
    return ""


def _error_code(exc: Exception) -> Any:
    code = getattr(exc, "code", None)
    return int(code) if isinstance(code, int) else str(exc)


Handler = Callable[["bytes | str | None"], Response]


class HttpServer:
    """Routes requests to the feeder components and serves static files."""

    def __init__(
        self,
        logger: Logger,
        file_repo: FileRepo,
        ntp_time: NtpTime,
        feeder: FeedAction,
        schedule: Schedule,
        *,
        wifi_conn: WiFiControl | None = None,
        set_led: Callable[[PinLevel], None] | None = None,
        host: str = "0.0.0.0",
        port: int = 80,
        poll_timeout: float = 0.0,
    ) -> None:
        self._logger = logger
        self._file_repo = file_repo
        self._ntp_time = ntp_time
        self._feeder = feeder
        self._schedule = schedule
        self._wifi_conn = wifi_conn
        self._set_led = set_led
        self._host = host
        self._port = port
        self._poll_timeout = poll_timeout
        self._httpd: HTTPServer | None = None
        self._routes: dict[tuple[str, str], Handler] = {}
        self._register_routes()

    def _register_routes(self) -> None:
        self._routes[(_ANY, "/")] = self._static("/index.html", "text/html")
        self._routes[("GET", "/styles.css")] = self._static("/styles.css", "text/css")
        self._routes[("GET", "/script.js")] = self._static("/script.js", "text/javascript")
        self._routes[(_ANY, "/feed")] = self._handle_feed
        self._routes[("POST", "/time")] = self._json_route(self._post_time)
        self._routes[("POST", "/schedule")] = self._json_route(self._post_schedule)
        self._routes[("GET", "/time")] = lambda _body: _text(
            200, "application/json", self._ntp_time.time_status_json()
        )
        self._routes[("GET", "/schedule")] = lambda _body: _text(
            200, "application/json", self._schedule.schedule_json()
        )
        if self._wifi_conn is not None:
            wifi = self._wifi_conn
            self._routes[("POST", "/wifi")] = self._json_route(self._post_wifi)
            self._routes[("GET", "/wifi")] = lambda _body: _text(
                200, "application/json", wifi.status_json()
            )

    @property
    def address(self) -> tuple[str, int]:
        """The bound host and port; only available after init()."""
        if self._httpd is None:
            raise RuntimeError("HTTP server is not initialized")
        host, port = self._httpd.server_address[:2]
        return str(host), int(port)

    def init(self) -> None:
        """Bind the listening socket."""
        owner = self

        class _RequestHandler(BaseHTTPRequestHandler):
            def _dispatch(self) -> None:
                length = self.headers.get("Content-Length")
                body: bytes | None = None
                if length is not None:
                    try:
                        body = self.rfile.read(int(length))
                    except ValueError:
                        body = None
                response = owner.handle(self.command, urlsplit(self.path).path, body)
                self.send_response(response.status)
                self.send_header("Content-Type", response.content_type)
                self.send_header("Content-Length", str(len(response.body)))
                self.end_headers()
                if self.command != "HEAD":
                    self.wfile.write(response.body)

            do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = do_HEAD = _dispatch

            def log_message(self, format: str, *args: Any) -> None:
                _access_log.debug("%s " + format, self.address_string(), *args)

        self._httpd = HTTPServer((self._host, self._port), _RequestHandler)
        self._httpd.timeout = self._poll_timeout
        self._logger.println("HTTP server started")

    def process_requests(self) -> None:
        """Serve at most one pending request, waiting up to the poll timeout."""
        if self._httpd is None:
            raise RuntimeError("HTTP server is not initialized")
        self._httpd.handle_request()

    def close(self) -> None:
        """Release the listening socket."""
        if self._httpd is not None:
            self._httpd.server_close()
            self._httpd = None

    def handle(self, method: str, path: str, body: bytes | str | None = None) -> Response:
        """Route one request and return its response."""
        handler = self._routes.get((method.upper(), path)) or self._routes.get((_ANY, path))
        if handler is None:
            return _text(404, "text/plain", f"Not found: {path}")
        return handler(body)

    def _static(self, path: str, content_type: str) -> Handler:
        def serve(_body: bytes | str | None) -> Response:
            file = self._file_repo.open_for_read(path)
            if file is None:
                return _text(500, "text/plain", "File Not Found")
            with file:
                return Response(200, content_type, file.read())

        return serve

    def _json_route(self, handler: Callable[[Any], Response], max_length: int = MAX_JSON_BODY) -> Handler:
        def route(body: bytes | str | None) -> Response:
            text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
            if text is None or len(text) > max_length:
                return _json(
                    400,
                    {
                        "status": "error",
                        "message": f"Request too large or missing body (max {max_length} chars)",
                    },
                )
            try:
                doc = json.loads(text)
            except ValueError as exc:
                return _json(
                    400,
                    {"status": "error", "message": "Invalid JSON format", "error": str(exc)},
                )
            return handler(doc)

        return route

    def _handle_feed(self, _body: bytes | str | None) -> Response:
        if self._set_led is not None:
            self._set_led(PinLevel.LOW)
        try:
            self._feeder.feed()
        finally:
            if self._set_led is not None:
                self._set_led(PinLevel.HIGH)
        return _text(200, "text/plain", "Feeding completed")

    def _post_wifi(self, doc: Any) -> Response:
        ssid = _string_field(doc, _SSID_FIELD)
        phrase = _string_field(doc, _PHRASE_FIELD)
        self._logger.print("Received wifi config: ")
        self._logger.println(ssid)

        if not ssid or len(ssid) > MAX_SSID_LENGTH:
            return _json(
                400, {"status": "error", "message": "SSID is missing or too long (max 150)"}
            )
        if not phrase or len(phrase) > MAX_PWD_LENGTH:
            return _json(
                400, {"status": "error", "message": "Password is missing or too long (max 200)"}
            )
        assert self._wifi_conn is not None
        try:
            self._wifi_conn.reset_to(doc)
        except Exception as exc:
            return _json(
                500,
                {
                    "status": "error",
                    "message": "Failed to connect to wifi",
                    "error": _error_code(exc),
                },
            )
        return _json(200, {"status": "success", "message": "New wifi config applied"})

    def _post_schedule(self, doc: Any) -> Response:
        try:
            self._schedule.set_schedule(doc)
        except ScheduleError as exc:
            return _json(
                500,
                {"status": "error", "message": "Failed to set schedule", "error": int(exc.code)},
            )
        return _json(200, {"status": "success", "message": "New schedule applied"})

    def _post_time(self, doc: Any) -> Response:
        tz = _string_field(doc, "timezone")
        if not tz or len(tz) > MAX_TZ_LENGTH:
            return _json(400, {"status": "error", "message": "Timezone is invalid"})
        try:
            self._ntp_time.set_time_zone(tz)
        except NtpTimeError as exc:
            return _json(
                500,
                {"status": "error", "message": "Failed to set time", "error": int(exc.code)},
            )
        return _json(200, {"status": "success", "message": "New time config applied"})
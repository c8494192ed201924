"""Small JSON API over the schedule scraper.

Routes:
    GET     /                    API information
    GET     /api/anime-schedule  freshly scraped schedule
    OPTIONS /api/anime-schedule  CORS preflight

Each schedule request scrapes the page again; nothing is cached.
"""

from __future__ import annotations

import json
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable
from urllib.parse import urlsplit

from .config import ScheduleConfig, get_config
from .logging import get_logger
from .models import Schedule
from .schedule_fetch import fetch_schedule

logger = get_logger(__name__)

SCHEDULE_PATH = "/api/anime-schedule"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

Response = tuple[int, dict[str, str], bytes]


def _now() -> int:
    return int(time.time())


def _json(status: int, body: dict, headers: dict[str, str] | None = None) -> Response:
    out = {"Content-Type": "application/json; charset=utf-8"}
    if headers:
        out.update(headers)
    return status, out, json.dumps(body, ensure_ascii=False).encode("utf-8")


def api_info() -> dict:
    return {
        "message": "MyAnimeList Schedule Scraper API",
        "endpoints": {
            "GET /": "This information page",
            f"GET {SCHEDULE_PATH}": "Get the weekly anime schedule with ID, score, members, image, and day",
        },
        "description": "This API scrapes MyAnimeList to get the weekly anime schedule data.",
        "lastUpdated": _now(),
    }


def dispatch(
    method: str,
    path: str,
    scrape: Callable[[], Schedule],
) -> Response:
    """Route one request and build its (status, headers, body)."""
    route = urlsplit(path).path

    if route == "/":
        if method == "GET":
            return _json(200, api_info())
        return _json(405, {"error": "Method not allowed"})

    if route == SCHEDULE_PATH:
        if method == "OPTIONS":
            return 200, dict(CORS_HEADERS), b""
        if method == "GET":
            try:
                schedule = scrape()
            except Exception as e:
                logger.exception("schedule_request_failed", error=str(e))
                return _json(
                    500,
                    {"error": "Failed to fetch anime schedule", "details": str(e)},
                    CORS_HEADERS,
                )
            return _json(200, schedule.to_payload(_now()), CORS_HEADERS)
        return _json(405, {"error": "Method not allowed"}, CORS_HEADERS)

    return _json(404, {"error": "Not found"})


def make_handler(scrape: Callable[[], Schedule]) -> type[BaseHTTPRequestHandler]:
    """Build a request handler class bound to a scrape callable."""

    class ScheduleHandler(BaseHTTPRequestHandler):
        def _respond(self) -> None:
            status, headers, body = dispatch(self.command, self.path, scrape)
            self.send_response(status)
            for name, value in headers.items():
                self.send_header(name, value)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if body:
                self.wfile.write(body)

        def do_GET(self):
            self._respond()

        def do_POST(self):
            self._respond()

        def do_OPTIONS(self):
            self._respond()

        def log_message(self, format, *args):
            logger.info(
                "http_request",
                client=self.client_address[0],
                request=self.requestline,
                detail=format % args,
            )

    return ScheduleHandler


def create_server(config: ScheduleConfig | None = None) -> ThreadingHTTPServer:
    config = config or get_config()
    handler = make_handler(lambda: fetch_schedule(config))
    return ThreadingHTTPServer((config.host, config.port), handler)


def serve(config: ScheduleConfig | None = None) -> None:
    """Run the API server until interrupted."""
    config = config or get_config()
    server = create_server(config)
    host, port = server.server_address[:2]
    logger.info("server_started", host=host, port=port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("server_stopped")
    finally:
        server.server_close()

"""
Fetch the MyAnimeList seasonal schedule page and run it through the parser.

Workflow:
1. GET the schedule page with a browser User-Agent
2. Fail as a whole on any transport error or non-2xx status
3. Parse the page into day groups (see schedule_html)

No caching and no retries: every call fetches a fresh page.
"""
from __future__ import annotations

import requests

from .config import ScheduleConfig, get_config
from .errors import FetchError
from .logging import get_logger
from .models import Schedule
from .schedule_html import parse_schedule_html

logger = get_logger(__name__)


def fetch_schedule_html(
    config: ScheduleConfig | None = None,
    session: requests.Session | None = None,
) -> str:
    """
    Download the schedule page and return its HTML.

    :raises FetchError: on connection problems or a non-success status.
    """
    config = config or get_config()
    http = session or requests
    headers = {"User-Agent": config.user_agent}

    try:
        response = http.get(
            config.schedule_url, headers=headers, timeout=config.request_timeout
        )
    except requests.RequestException as e:
        logger.error("schedule_fetch_failed", url=config.schedule_url, error=str(e))
        raise FetchError(f"Failed to fetch schedule: {e}") from e

    if not 200 <= response.status_code < 300:
        logger.error(
            "schedule_fetch_failed",
            url=config.schedule_url,
            status=response.status_code,
        )
        raise FetchError(
            f"Failed to fetch schedule: {response.status_code}",
            status=response.status_code,
        )

    logger.info(
        "schedule_fetched",
        url=config.schedule_url,
        status=response.status_code,
        size=len(response.text),
    )
    return response.text


def fetch_schedule(
    config: ScheduleConfig | None = None,
    session: requests.Session | None = None,
) -> Schedule:
    """Fetch the live schedule page and extract its day groups."""
    config = config or get_config()
    html = fetch_schedule_html(config, session=session)
    return parse_schedule_html(
        html_content=html,
        origin=config.origin,
        image_format=config.image_format,
    )

"""
Parse the MyAnimeList seasonal schedule page HTML into day groups of
anime records.

The real HTML structure:
- One container per broadcast day, marked by a class
  ``js-seasonal-anime-list-key-<day>`` (monday … sunday, other, unknown).
- Inside it, one ``.seasonal-anime`` block per show:
    .title .link-title   → title text, href "/anime/<id>/<slug>"
    .js-score / .score   → "8.52", "N/A"
    .js-members          → "123,456"
    .image img           → data-src / src / data-lazy-src
    .info                → "Oct 6, 2025\\n 11 eps, 23 min"

Every field is optional on the page. A missing field becomes None; a show
without a title is dropped, and a day without shows is dropped.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag  # type: ignore[import]

from .errors import ExtractionError
from .logging import get_logger
from .models import FALLBACK_TITLE, Record, Schedule, ScheduleGroup

logger = get_logger(__name__)

DEFAULT_ORIGIN = "https://myanimelist.net"
DEFAULT_IMAGE_FORMAT = "webp"

# Bucket key → label, in output order
GROUP_KEYS: tuple[tuple[str, str], ...] = (
    ("monday", "Monday"),
    ("tuesday", "Tuesday"),
    ("wednesday", "Wednesday"),
    ("thursday", "Thursday"),
    ("friday", "Friday"),
    ("saturday", "Saturday"),
    ("sunday", "Sunday"),
    ("other", "Other"),
    ("unknown", "Unknown"),
)


@dataclass(frozen=True)
class Markers:
    """CSS selectors for each part of the page."""

    group_prefix: str = ".js-seasonal-anime-list-key-"
    entry: str = ".seasonal-anime"
    title_link: str = ".title .link-title"
    title: str = ".js-title"
    score: str = ".js-score"
    score_fallback: str = ".score"
    members: str = ".js-members"
    image: str = ".image img"
    info: str = ".info"

    def group(self, key: str) -> str:
        return f"{self.group_prefix}{key}"


DEFAULT_MARKERS = Markers()


# ──────────────────────────────────────────────────────────────────
#  Tree helpers
# ──────────────────────────────────────────────────────────────────

def _select_first(node: Tag, selector: str) -> Optional[Tag]:
    return node.select_one(selector)


def _select_all(node: Tag, selector: str) -> List[Tag]:
    return node.select(selector)


def _text(node: Optional[Tag]) -> str:
    """Trimmed text content of node, or '' when node is missing."""
    if node is None:
        return ""
    return node.get_text().strip()


def _attr(node: Optional[Tag], name: str) -> str:
    if node is None:
        return ""
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or ""


# ──────────────────────────────────────────────────────────────────
#  Field parsers
# ──────────────────────────────────────────────────────────────────

_ANIME_ID_RE = re.compile(r"/anime/(\d+)/")
_LEADING_FLOAT_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT_RE = re.compile(r"^[+-]?\d+")
_SCORE_PLACEHOLDERS = frozenset({"", "N/A", "?"})

_EPISODES_RE = re.compile(r"([\d?]+)\s+eps")
_DURATION_RE = re.compile(r"(\d+)\s+min")
_AIR_DATE_RE = re.compile(r"^[A-Za-z]{3}\s+\d{1,2},\s+\d{4}")
_RASTER_EXT_RE = re.compile(r"\.(jpg|jpeg|png|gif)(\?.*)?$")


def _parse_anime_id(href: str) -> str | None:
    """'/anime/59978/Sousou_no_Frieren' → '59978'."""
    m = _ANIME_ID_RE.search(href)
    return m.group(1) if m else None


def _parse_score(text: str) -> float | None:
    """
    Parse score text like '8.52'. Placeholders ('', 'N/A', '?'), text that does not start
    with a number, and overflowing values like '1e999' give None.
    """
    text = text.strip()
    if text in _SCORE_PLACEHOLDERS:
        return None
    m = _LEADING_FLOAT_RE.match(text)
    if not m:
        return None
    score = float(m.group(0))
    return score if math.isfinite(score) else None


def _parse_members(text: str) -> int | None:
    """'123,456' → 123456; '' → None."""
    text = text.strip().replace(",", "")
    if not text:
        return None
    m = _LEADING_INT_RE.match(text)
    return int(m.group(0)) if m else None


def normalize_image_url(
    url: str | None,
    origin: str = DEFAULT_ORIGIN,
    image_format: str = DEFAULT_IMAGE_FORMAT,
) -> str | None:
    """
    Make an image reference absolute and point it at the preferred format.

    '//cdn/x.png' → 'https://cdn/x.webp'
    '/images/anime/1.jpg' → '<origin>/images/anime/1.webp'
    Unknown extensions and relative paths without a leading slash are kept.
    """
    if not url:
        return None
    if not url.startswith("http"):
        if url.startswith("//"):
            url = "https:" + url
        elif url.startswith("/"):
            url = origin.rstrip("/") + url
    if f".{image_format}" not in url:
        url = _RASTER_EXT_RE.sub(f".{image_format}", url)
    return url


def _parse_info(text: str) -> tuple[str | None, str | None, str | None]:
    """
    Parse the info block into (air_date, episode_count, episode_duration).

    Lines look like "Oct 6, 2025" and "11 eps, 23 min". Every line is
    scanned, so a later match replaces an earlier one.
    """
    air_date = None
    episodes = None
    duration = None

    lines = [l.strip() for l in text.split("\n") if l.strip()]
    for line in lines:
        if "eps" in line:
            ep_match = _EPISODES_RE.search(line)
            if ep_match:
                episodes = ep_match.group(1)
            dur_match = _DURATION_RE.search(line)
            if dur_match:
                duration = f"{dur_match.group(1)} min"
        elif _AIR_DATE_RE.match(line):
            air_date = line

    return air_date, episodes, duration


# ──────────────────────────────────────────────────────────────────
#  Group locator
# ──────────────────────────────────────────────────────────────────

def locate_groups(
    soup: BeautifulSoup | Tag, markers: Markers = DEFAULT_MARKERS
) -> List[tuple[str, Tag]]:
    """Return (label, container) for each day bucket present, in bucket order."""
    found: List[tuple[str, Tag]] = []
    for key, label in GROUP_KEYS:
        container = _select_first(soup, markers.group(key))
        if container is None:
            logger.debug("group_skipped", group=label)
            continue
        found.append((label, container))
    return found


# ──────────────────────────────────────────────────────────────────
#  Record extractor
# ──────────────────────────────────────────────────────────────────

def _extract_record(
    entry: Tag,
    label: str,
    origin: str,
    image_format: str,
    markers: Markers,
) -> Record:
    title_link = _select_first(entry, markers.title_link)
    anime_id = _parse_anime_id(_attr(title_link, "href"))

    title = _text(title_link) or _text(_select_first(entry, markers.title)) or FALLBACK_TITLE

    score_text = _text(_select_first(entry, markers.score)) or _text(
        _select_first(entry, markers.score_fallback)
    )

    img = _select_first(entry, markers.image)
    raw_image = (
        _attr(img, "data-src") or _attr(img, "src") or _attr(img, "data-lazy-src")
    )

    air_date, episodes, duration = _parse_info(_text(_select_first(entry, markers.info)))

    return Record(
        id=anime_id,
        title=title,
        score=_parse_score(score_text),
        audience=_parse_members(_text(_select_first(entry, markers.members))),
        image_url=normalize_image_url(raw_image, origin, image_format),
        group=label,
        air_date=air_date,
        episode_count=episodes,
        episode_duration=duration,
    )


def extract_records(
    container: Tag,
    label: str,
    origin: str = DEFAULT_ORIGIN,
    image_format: str = DEFAULT_IMAGE_FORMAT,
    markers: Markers = DEFAULT_MARKERS,
) -> List[Record]:
    """Build one Record per entry in container, skipping entries without a title."""
    records: List[Record] = []
    for position, entry in enumerate(_select_all(container, markers.entry)):
        record = _extract_record(entry, label, origin, image_format, markers)
        if not record.has_title:
            logger.debug("entry_dropped", group=label, position=position, reason="no_title")
            continue
        records.append(record)
    return records


# ──────────────────────────────────────────────────────────────────
#  Aggregation
# ──────────────────────────────────────────────────────────────────

def build_schedule(groups: Iterable[tuple[str, List[Record]]]) -> Schedule:
    """Wrap records with their day label and drop days left empty."""
    kept = [
        ScheduleGroup(label=label, records=tuple(records))
        for label, records in groups
        if records
    ]
    return Schedule(groups=tuple(kept))


# ──────────────────────────────────────────────────────────────────
#  Public API
# ──────────────────────────────────────────────────────────────────

def parse_schedule_html(
    html_path: str | Path | None = None,
    html_content: str | None = None,
    origin: str = DEFAULT_ORIGIN,
    image_format: str = DEFAULT_IMAGE_FORMAT,
    markers: Markers = DEFAULT_MARKERS,
) -> Schedule:
    """
    Parse a schedule page from a saved HTML file or an HTML string.

    :param html_path: Path to the saved HTML file.
    :param html_content: Raw HTML string (alternative to html_path).
    :param origin: Prepended to root-relative image URLs.
    :param image_format: Extension raster image URLs are rewritten to.
    :param markers: CSS selectors, override for a different page layout.
    :returns: Schedule with non-empty day groups in Monday…Unknown order.
    """
    if html_content is not None:
        html = html_content
    elif html_path is not None:
        html = Path(html_path).read_text(encoding="utf-8", errors="ignore")
    else:
        raise ExtractionError("Provide either html_path or html_content.")

    soup = BeautifulSoup(html, "html.parser")

    schedule = build_schedule(
        (label, extract_records(container, label, origin, image_format, markers))
        for label, container in locate_groups(soup, markers)
    )
    logger.info(
        "schedule_parsed",
        groups=len(schedule.groups),
        total=schedule.total,
    )
    return schedule

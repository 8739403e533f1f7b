"""RSS feed fetching and episode extraction."""

import logging
import re
from html import unescape
from typing import Iterable, List, Optional, Union

import requests
from defusedxml.ElementTree import fromstring as safe_fromstring, ParseError as DefusedXMLParseError

from .exceptions import FeedError
from .models import Episode

logger = logging.getLogger(__name__)

ITUNES_NS = "{http://www.itunes.com/dtds/podcast-1.0.dtd}"
USER_AGENT = "podsync/0.1"
MAX_NEW_EPISODES = 25

_VPID_RE = re.compile(r"vpid/([^.]+)\.mp3")
_TAG_RE = re.compile(r"<[^>]*>")
# Boilerplate "listen to the podcast ..." footer appended to every description
_FOOTER_RE = re.compile(r"استمعوا إلى بودكاست[\s\S]*")


def fetch_feed(url: str, timeout: float = 60) -> bytes:
    """
    Downloads the raw RSS XML.

    Raises:
        FeedError: On connection problems or a non-2xx response.
    """
    logger.info(f"Fetching RSS feed: {url}")
    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Failed to fetch RSS feed {url}: {e}")
        raise FeedError(f"Failed to fetch RSS feed: {e}") from e
    return response.content


def extract_id_from_mp3_url(mp3_url: str) -> str:
    """'http://.../vpid/p0mcfcpy.mp3' -> 'p0mcfcpy'; '' if the URL has no vpid."""
    match = _VPID_RE.search(mp3_url or "")
    return match.group(1) if match else ""


def clean_text(text: Optional[str]) -> str:
    """Strips HTML tags and decodes entities."""
    if not text:
        return ""
    return unescape(_TAG_RE.sub("", text)).strip()


def clean_description(description: str) -> str:
    return _FOOTER_RE.sub("", description).strip()


def _child_text(item, tag: str) -> str:
    element = item.find(tag)
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def parse_item(item) -> Optional[Episode]:
    """Builds an Episode from one <item>, or None when a required field is missing."""
    title = clean_text(_child_text(item, "title"))
    description = clean_description(clean_text(_child_text(item, "description")))

    mp3_url = ""
    audio_type = "audio/mpeg"
    enclosure = item.find("enclosure")
    if enclosure is not None:
        mp3_url = enclosure.get("url", "")
        audio_type = enclosure.get("type") or audio_type

    published = _child_text(item, "pubDate")
    duration = _child_text(item, f"{ITUNES_NS}duration")
    if not duration.isdigit():
        duration = ""
    episode_id = extract_id_from_mp3_url(mp3_url)

    if not all((title, description, mp3_url, published, duration, episode_id)):
        logger.debug(f"Skipping incomplete feed item: {title[:40]!r}")
        return None
    return Episode(
        id=episode_id,
        title_arabic=title,
        description_arabic=description,
        mp3_url=mp3_url,
        published=published,
        duration_seconds=duration,
        audio_type=audio_type,
    )


def parse_feed(
    xml: Union[bytes, str],
    existing_episodes: Iterable[Episode] = (),
    max_new: int = MAX_NEW_EPISODES,
) -> List[Episode]:
    """
    Extracts episodes from the feed that are not already known.

    The feed lists episodes newest first, so parsing stops at the first
    episode already in `existing_episodes`.

    Args:
        xml: Raw RSS XML.
        existing_episodes: Episodes already stored.
        max_new: Upper bound on the number of episodes returned.

    Returns:
        New episodes, newest first.

    Raises:
        FeedError: If the XML cannot be parsed.
    """
    try:
        root = safe_fromstring(xml)
    except DefusedXMLParseError as e:
        raise FeedError(f"Invalid RSS XML: {e}") from e

    existing_ids = {ep.id or extract_id_from_mp3_url(ep.mp3_url) for ep in existing_episodes}
    episodes: List[Episode] = []
    for item in root.iter("item"):
        if len(episodes) >= max_new:
            break
        episode = parse_item(item)
        if episode is None:
            continue
        if episode.id in existing_ids:
            logger.info(f"Reached known episode {episode.id}, stopping")
            break
        episodes.append(episode)

    logger.info(f"Parsed {len(episodes)} new episode(s) from feed")
    return episodes

"""Directory of per-episode transcript tracks."""

import json
import logging
import os
import re
from typing import List

from .exceptions import StoreError, TranscriptNotFoundError
from .models import Track
from .utils import ensure_dir_exists, write_json

logger = logging.getLogger(__name__)

ARABIC = "arabic"
ENGLISH = "english"
LANGUAGES = (ARABIC, ENGLISH)


class TranscriptStore:
    """
    Stores tracks as `{id}_{language}_timestamps.json` plus a plain-text
    `{id}_arabic.txt` copy of the Arabic transcript.
    """

    def __init__(self, directory: str):
        self.directory = directory

    def track_path(self, episode_id: str, language: str) -> str:
        if language not in LANGUAGES:
            raise ValueError(f"Unsupported transcript language: {language!r}")
        return os.path.join(self.directory, f"{episode_id}_{language}_timestamps.json")

    def text_path(self, episode_id: str) -> str:
        return os.path.join(self.directory, f"{episode_id}_{ARABIC}.txt")

    def exists(self, episode_id: str, language: str = ARABIC) -> bool:
        return os.path.isfile(self.track_path(episode_id, language))

    def load(self, episode_id: str, language: str = ARABIC) -> Track:
        path = self.track_path(episode_id, language)
        if not os.path.isfile(path):
            raise TranscriptNotFoundError(f"{language.capitalize()} transcript for {episode_id!r} not found")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return Track.from_dict(json.load(f))
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Could not read transcript {path}: {e}", exc_info=True)
            raise StoreError(f"Could not read transcript {path}: {e}") from e

    def save(self, track: Track, language: str = ARABIC) -> str:
        ensure_dir_exists(self.directory)
        path = self.track_path(track.id, language)
        try:
            write_json(path, track.to_dict())
        except OSError as e:
            logger.error(f"Could not write transcript {path}: {e}", exc_info=True)
            raise StoreError(f"Could not write transcript {path}: {e}") from e
        logger.info(f"Saved {language} transcript ({len(track.segments)} segments) to {path}")
        return path

    def save_plain_text(self, track: Track) -> str:
        ensure_dir_exists(self.directory)
        path = self.text_path(track.id)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                f.write(track.plain_text())
        except OSError as e:
            raise StoreError(f"Could not write transcript text {path}: {e}") from e
        return path

    def list_ids(self, language: str = ARABIC) -> List[str]:
        """Returns the ids of all episodes that have a track in `language`, sorted."""
        if not os.path.isdir(self.directory):
            return []
        pattern = re.compile(rf"^(.+?)_{language}_timestamps\.json$")
        ids = []
        for filename in sorted(os.listdir(self.directory)):
            match = pattern.match(filename)
            if match:
                ids.append(match.group(1))
        return ids

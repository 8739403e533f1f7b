"""Flat JSON file holding the episode list, newest first."""

import json
import logging
import os
from typing import Iterable, List

from .exceptions import EpisodeNotFoundError, StoreError
from .models import Episode
from .utils import ensure_dir_exists, write_json

logger = logging.getLogger(__name__)


class EpisodeStore:
    """Reads and writes episode metadata, including each episode's playback offset."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> List[Episode]:
        """Returns all stored episodes. A missing file means no episodes yet."""
        if not os.path.exists(self.path):
            logger.debug(f"Episodes file {self.path} does not exist yet")
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read episodes file {self.path}: {e}", exc_info=True)
            raise StoreError(f"Could not read episodes file {self.path}: {e}") from e
        if not isinstance(raw, list):
            raise StoreError(f"Episodes file {self.path} must contain a JSON list")
        try:
            return [Episode.from_dict(item) for item in raw]
        except (TypeError, ValueError, AttributeError) as e:
            logger.error(f"Malformed episode entry in {self.path}: {e}")
            raise StoreError(f"Malformed episode entry in {self.path}: {e}") from e

    def save(self, episodes: Iterable[Episode]) -> None:
        ensure_dir_exists(os.path.dirname(os.path.abspath(self.path)))
        try:
            write_json(self.path, [episode.to_dict() for episode in episodes])
        except OSError as e:
            logger.error(f"Could not write episodes file {self.path}: {e}", exc_info=True)
            raise StoreError(f"Could not write episodes file {self.path}: {e}") from e

    def add(self, new_episodes: List[Episode]) -> None:
        """Prepends `new_episodes` to the stored list."""
        if not new_episodes:
            return
        self.save(list(new_episodes) + self.load())
        logger.info(f"Added {len(new_episodes)} episode(s) to {self.path}")

    def get(self, episode_id: str) -> Episode:
        for episode in self.load():
            if episode.id == episode_id:
                return episode
        raise EpisodeNotFoundError(f"Episode with ID {episode_id!r} not found")

    def update(self, updated: Episode) -> None:
        """Replaces the stored episode that has the same id as `updated`."""
        episodes = self.load()
        for index, episode in enumerate(episodes):
            if episode.id == updated.id:
                episodes[index] = updated
                self.save(episodes)
                return
        raise EpisodeNotFoundError(f"Episode with ID {updated.id!r} not found")

    def get_playback_offset(self, episode_id: str) -> float:
        return self.get(episode_id).playback_offset or 0.0

    def set_playback_offset(self, episode_id: str, seconds: float) -> None:
        episode = self.get(episode_id)
        episode.playback_offset = float(seconds)
        self.update(episode)
        logger.info(f"Playback offset for {episode_id} set to {seconds:.2f}s")

"""StoryStore — file-based CRUD for stories and features in a project directory."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from onep.storage.markdown import (
    feature_to_markdown,
    markdown_to_feature,
    markdown_to_story,
    story_to_markdown,
)
from onep.storage.models import BACKLOG, Feature, Story, now_iso

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._\-]*$")


def check_record_id(record_id: str) -> str:
    """Reject ids that are empty or would escape their directory.

    Raises ``ValueError`` for unsafe ids. Returns the id unchanged.
    """
    if not _SAFE_ID_RE.match(record_id) or ".." in record_id:
        msg = f"Invalid id {record_id!r}: use letters, digits, '.', '_' or '-'"
        raise ValueError(msg)
    return record_id


class StoryStore:
    """Stories and features stored as Markdown documents.

    Layout::

        <project>/features/<feature-id>/feature.md
        <project>/features/<feature-id>/stories/<story-id>.md

    Stories without a feature go under the ``backlog`` pseudo-feature.
    Writing a record whose id already exists overwrites it.

    All methods are synchronous; local file I/O is fast enough.
    """

    def __init__(self, project_path: Path) -> None:
        self._root = project_path

    @property
    def project_path(self) -> Path:
        return self._root

    # -- Path helpers ----------------------------------------------------------

    @property
    def features_dir(self) -> Path:
        return self._root / "features"

    def _feature_dir(self, feature_id: str) -> Path:
        return self.features_dir / check_record_id(feature_id)

    def _stories_dir(self, feature_id: str) -> Path:
        return self._feature_dir(feature_id) / "stories"

    def _story_path(self, feature_id: str, story_id: str) -> Path:
        return self._stories_dir(feature_id) / f"{check_record_id(story_id)}.md"

    def _feature_path(self, feature_id: str) -> Path:
        return self._feature_dir(feature_id) / "feature.md"

    def _feature_ids(self) -> list[str]:
        if not self.features_dir.exists():
            return []
        return sorted(
            p.name
            for p in self.features_dir.iterdir()
            if p.is_dir() and _SAFE_ID_RE.match(p.name)
        )

    # -- Stories ---------------------------------------------------------------

    def create_story(self, story: Story) -> Story:
        """Write a story under its feature (or the backlog)."""
        path = self._story_path(story.feature_id, story.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(story_to_markdown(story), encoding="utf-8")
        logger.info("Saved story %s in %s", story.id, story.feature_id)
        return story

    def update_story(self, story: Story) -> Story:
        """Rewrite a story with a fresh ``updatedAt``."""
        return self.create_story(story.model_copy(update={"updated_at": now_iso()}))

    def get_story(self, feature_id: str, story_id: str) -> Story | None:
        """Fetch a story, or None if it does not exist."""
        path = self._story_path(feature_id or BACKLOG, story_id)
        if not path.exists():
            return None
        return markdown_to_story(path.read_text("utf-8"))

    def list_stories(self, feature_id: str | None = None) -> list[Story]:
        """All stories, or only those of one feature. Unreadable files are skipped."""
        feature_ids = [feature_id] if feature_id else self._feature_ids()
        stories: list[Story] = []
        for fid in feature_ids:
            stories_dir = self._stories_dir(fid)
            if not stories_dir.exists():
                continue
            for path in sorted(stories_dir.glob("*.md")):
                try:
                    stories.append(markdown_to_story(path.read_text("utf-8")))
                except ValueError:
                    logger.warning("Skipping invalid story file %s", path, exc_info=True)
        return stories

    def delete_story(self, feature_id: str, story_id: str) -> bool:
        """Delete a story file. Returns True if deleted, False if not found."""
        path = self._story_path(feature_id, story_id)
        if not path.exists():
            return False
        path.unlink()
        return True

    def search_stories(self, query: str) -> list[Story]:
        """Case-insensitive substring search across every story's text fields."""
        needle = query.lower()
        return [s for s in self.list_stories() if needle in s.search_text()]

    # -- Features --------------------------------------------------------------

    def create_feature(self, feature: Feature) -> Feature:
        path = self._feature_path(feature.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(feature_to_markdown(feature), encoding="utf-8")
        logger.info("Saved feature %s", feature.id)
        return feature

    def get_feature(self, feature_id: str) -> Feature | None:
        path = self._feature_path(feature_id)
        if not path.exists():
            return None
        return markdown_to_feature(path.read_text("utf-8"))

    def list_features(self) -> list[Feature]:
        """All features that have a ``feature.md``. Unreadable files are skipped."""
        features: list[Feature] = []
        for fid in self._feature_ids():
            path = self._feature_path(fid)
            if not path.exists():
                continue
            try:
                features.append(markdown_to_feature(path.read_text("utf-8")))
            except ValueError:
                logger.warning("Skipping invalid feature file %s", path, exc_info=True)
        return features

"""Document store for stories and features."""

from onep.storage.models import AcceptanceCriterion, Feature, Story
from onep.storage.store import StoryStore

__all__ = [
    "AcceptanceCriterion",
    "Feature",
    "Story",
    "StoryStore",
]

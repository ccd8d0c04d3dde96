"""Catalogue of Claude models offered in the setup wizard."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelInfo:
    id: str
    name: str
    description: str


AVAILABLE_MODELS: tuple[ModelInfo, ...] = (
    ModelInfo(
        id="claude-opus-4-5-20251101",
        name="Claude Opus 4.5",
        description="Most capable model, best for complex analysis",
    ),
    ModelInfo(
        id="claude-sonnet-4-20250514",
        name="Claude Sonnet 4",
        description="Balanced performance and speed",
    ),
    ModelInfo(
        id="claude-3-5-sonnet-20241022",
        name="Claude 3.5 Sonnet",
        description="Fast and efficient for most tasks",
    ),
    ModelInfo(
        id="claude-3-5-haiku-20241022",
        name="Claude 3.5 Haiku",
        description="Fastest, good for simple tasks",
    ),
)

_BY_ID: dict[str, ModelInfo] = {m.id: m for m in AVAILABLE_MODELS}


def get_model_info(model_id: str) -> ModelInfo | None:
    """Look up a catalogue entry by model id."""
    return _BY_ID.get(model_id)


def friendly(model_id: str) -> str:
    """Return the display name for a model ID, or the ID itself."""
    info = _BY_ID.get(model_id)
    return info.name if info else model_id

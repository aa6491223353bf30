"""Configuration for the batch reporter."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml

from batchline.logging import get_logger
from batchline.types.base import FAIL_MARKER
from batchline.utils.yaml_utils import normalize_yaml_dict_keys

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReporterConfig:
    """Presentation and exit-status settings for a reporting session."""

    # Spinner animation, one frame per render
    spinner_frames: Tuple[str, ...] = ("/", "|", "\\", "-")

    # Status glyphs for success and failure lines
    good_glyph: str = "✓"
    bad_glyph: str = "✗"

    # Value of a leaf's ``result`` field that marks it as failed
    fail_marker: str = FAIL_MARKER

    # Treat agent and script errors as batch failures at completion
    errors_fail_batch: bool = False

    # Leading text of the status line
    status_prefix: str = "Testing..."

    def __post_init__(self) -> None:
        frames = self.spinner_frames
        if isinstance(frames, str) or not isinstance(frames, (list, tuple)):
            logger.error("spinner_frames must be a sequence of strings: %r", frames)
            raise TypeError("spinner_frames must be a sequence of strings")
        if not frames:
            raise ValueError("spinner_frames must contain at least one frame")
        if not all(isinstance(f, str) for f in frames):
            logger.error("spinner_frames must be a sequence of strings: %r", frames)
            raise TypeError("spinner_frames must be a sequence of strings")
        # Normalize lists coming from YAML to an immutable tuple
        object.__setattr__(self, "spinner_frames", tuple(frames))

        for name in ("good_glyph", "bad_glyph", "fail_marker", "status_prefix"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                logger.error("ReporterConfig.%s must be a non-empty string: %r", name, value)
                raise ValueError(f"ReporterConfig.{name} must be a non-empty string")
        if not isinstance(self.errors_fail_batch, bool):
            raise TypeError("ReporterConfig.errors_fail_batch must be a bool")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReporterConfig":
        """Build a config from a plain mapping, rejecting unknown keys.

        Raises:
            ValueError: If the mapping contains keys that are not config fields.
        """
        known = {f.name for f in fields(cls)}
        data = normalize_yaml_dict_keys(data)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown reporter config keys: {', '.join(unknown)}. "
                f"Valid keys are: {', '.join(sorted(known))}"
            )
        return cls(**data)


def load_config(path: Union[str, Path]) -> ReporterConfig:
    """Load a ``ReporterConfig`` from a YAML file.

    An empty file yields the default configuration. A top-level
    ``reporter:`` section is used when present.

    Raises:
        ValueError: If the YAML does not map to a dictionary.
    """
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if data is None:
        return ReporterConfig()
    if not isinstance(data, dict):
        raise ValueError("The reporter config YAML must map to a dictionary at top-level.")
    if "reporter" in data:
        data = data["reporter"] or {}
        if not isinstance(data, dict):
            raise ValueError("'reporter' must be a mapping")
    logger.debug("Loaded reporter config from %s", path)
    return ReporterConfig.from_dict(data)


# Global default configuration instance
DEFAULT_CONFIG = ReporterConfig()


__all__ = ["DEFAULT_CONFIG", "ReporterConfig", "load_config"]

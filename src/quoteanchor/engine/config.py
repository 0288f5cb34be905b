"""Anchoring configuration with plain-dict / JSON policy overrides."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from quoteanchor.engine.matcher import DEFAULT_MIN_LENGTH, DEFAULT_PREFIX_CHARS
from quoteanchor.engine.overlap import OVERLAP_POLICIES, OverlapPolicy
from quoteanchor.io_utils import load_json


@dataclass(frozen=True, slots=True)
class AnchorConfig:
    min_length: int = DEFAULT_MIN_LENGTH
    prefix_chars: int = DEFAULT_PREFIX_CHARS
    overlap_policy: OverlapPolicy = "clip"
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if self.min_length < 1:
            raise ValueError(f"min_length must be >= 1, got {self.min_length}")
        if self.prefix_chars < 1:
            raise ValueError(f"prefix_chars must be >= 1, got {self.prefix_chars}")
        if self.overlap_policy not in OVERLAP_POLICIES:
            raise ValueError(
                f"overlap_policy must be one of {OVERLAP_POLICIES}, "
                f"got {self.overlap_policy!r}",
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    @classmethod
    def from_policy(cls, policy: dict[str, Any] | None) -> AnchorConfig:
        """Build a config from a policy dict. Unknown keys are ignored."""
        policy = policy or {}
        kwargs: dict[str, Any] = {}
        for key in ("min_length", "prefix_chars"):
            if key in policy:
                kwargs[key] = _as_int(key, policy[key])
        if policy.get("max_workers") is not None:
            kwargs["max_workers"] = _as_int("max_workers", policy["max_workers"])
        if "overlap_policy" in policy:
            kwargs["overlap_policy"] = str(policy["overlap_policy"])
        return cls(**kwargs)

    def as_dict(self) -> dict[str, Any]:
        return {
            "min_length": self.min_length,
            "prefix_chars": self.prefix_chars,
            "overlap_policy": self.overlap_policy,
            "max_workers": self.max_workers,
        }


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc


def load_config(path: Path) -> AnchorConfig:
    """Load an AnchorConfig from a JSON object file."""
    data = load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"Invalid anchoring config in {path}")
    return AnchorConfig.from_policy(data)

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from valuation_engine.engine.result import AdjustmentEntry
from valuation_engine.models.company import AdjustmentProfile

QUALITY = "quality"
RISK = "risk"

AdjusterFn = Callable[[AdjustmentProfile], list[AdjustmentEntry]]

# Global registry -- maps adjuster_id -> AdjusterDefinition, in registration order
_REGISTRY: dict[str, AdjusterDefinition] = {}


@dataclass(frozen=True)
class AdjusterDefinition:
    """A named multiple adjuster in the library."""

    id: str
    label: str
    description: str
    kind: str  # QUALITY or RISK
    adjuster_fn: AdjusterFn


def register_adjuster(
    adjuster_id: str,
    label: str,
    description: str,
    kind: str,
) -> Callable[[AdjusterFn], AdjusterFn]:
    """Decorator to register a function as a quality adjuster or risk discount."""
    if kind not in (QUALITY, RISK):
        raise ValueError(f"kind must be '{QUALITY}' or '{RISK}', got {kind!r}")

    def decorator(fn: AdjusterFn) -> AdjusterFn:
        _REGISTRY[adjuster_id] = AdjusterDefinition(
            id=adjuster_id,
            label=label,
            description=description,
            kind=kind,
            adjuster_fn=fn,
        )
        return fn

    return decorator


def get_adjuster(adjuster_id: str) -> Optional[AdjusterDefinition]:
    """Look up an adjuster definition by ID."""
    return _REGISTRY.get(adjuster_id)


def get_adjusters(kind: str) -> list[AdjusterDefinition]:
    """All adjusters of one kind, in registration order."""
    return [d for d in _REGISTRY.values() if d.kind == kind]


def get_all_adjusters() -> dict[str, AdjusterDefinition]:
    """Return the full registry (read-only copy)."""
    return dict(_REGISTRY)

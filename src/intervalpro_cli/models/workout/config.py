"""Workout definitions and coercion of user-supplied durations."""

from __future__ import annotations

import math
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from intervalpro_cli.utils.logger import get_logger

logger = get_logger("workout")

DEFAULT_NAME = "Workout"
DEFAULT_COLOR = "#4CAF50"

# Used whenever a duration or count cannot be parsed.
FALLBACKS: dict[str, int] = {
    "work_duration": 30,
    "repeat_count": 0,
    "prep_time": 5,
    "pre_start_time": 3,
    "cycle_rest_time": 0,
    "cycle_count": 0,
}

# camelCase keys of the stored workout format
_STORED_KEYS = {
    "work_duration": "duration",
    "repeat_count": "repeatCount",
    "prep_time": "prepTime",
    "pre_start_time": "preStartTime",
    "cycle_rest_time": "cycleRestTime",
    "cycle_count": "cycleCount",
}


def coerce_seconds(value: Any, fallback: int, field_name: str = "value") -> int:
    """
    Coerce a duration or count to a non-negative integer.

    Accepts ints, floats (truncated toward zero) and numeric strings.
    Anything else - None, booleans, NaN, infinities, negative numbers,
    unparsable text - is replaced by *fallback*.
    """
    parsed: int | None = None

    if isinstance(value, bool) or value is None:
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        parsed = int(value) if math.isfinite(value) and value >= 0 else None
    elif isinstance(value, str):
        text = value.strip()
        try:
            parsed = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                parsed = None
            else:
                parsed = int(number) if math.isfinite(number) and number >= 0 else None

    if parsed is None or parsed < 0:
        logger.warning(
            "Invalid %s %r, falling back to %d", field_name, value, fallback
        )
        return fallback
    return parsed


@dataclass(frozen=True)
class WorkoutConfig:
    """An interval workout definition. Immutable for the duration of a run.

    ``repeat_count == 0`` means unlimited repetitions per set and
    ``cycle_count == 0`` means unlimited sets.
    """

    id: str
    name: str
    work_duration: int = FALLBACKS["work_duration"]
    repeat_count: int = FALLBACKS["repeat_count"]
    cycle_count: int = FALLBACKS["cycle_count"]
    prep_time: int = FALLBACKS["prep_time"]
    pre_start_time: int = FALLBACKS["pre_start_time"]
    cycle_rest_time: int = FALLBACKS["cycle_rest_time"]
    color: str = DEFAULT_COLOR

    def __post_init__(self) -> None:
        for name in FALLBACKS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")

    @property
    def unlimited_reps(self) -> bool:
        return self.repeat_count == 0

    @property
    def unlimited_sets(self) -> bool:
        return self.cycle_count == 0

    @property
    def repeat_label(self) -> str:
        """Repeat target for display, ``∞`` when unlimited."""
        return "∞" if self.unlimited_reps else str(self.repeat_count)

    @property
    def cycle_label(self) -> str:
        """Set target for display, ``∞`` when unlimited."""
        return "∞" if self.unlimited_sets else str(self.cycle_count)

    @property
    def planned_duration(self) -> int | None:
        """Total planned seconds for a finite workout, None when unlimited."""
        if self.unlimited_reps or self.unlimited_sets:
            return None
        per_set = (
            self.repeat_count * self.work_duration
            + (self.repeat_count - 1) * self.prep_time
        )
        return (
            self.pre_start_time
            + self.cycle_count * per_set
            + (self.cycle_count - 1) * self.cycle_rest_time
        )

    @classmethod
    def from_input(
        cls,
        name: Any = None,
        *,
        id: str | None = None,
        color: str | None = None,
        fallbacks: Mapping[str, int] | None = None,
        **values: Any,
    ) -> WorkoutConfig:
        """
        Build a config from loosely-typed input (CLI options, stored JSON).

        Every duration/count field passes through :func:`coerce_seconds`;
        missing fields take their fallback.

        Args:
            name: Display name, blank becomes ``"Workout"``
            id: Existing id, a new UUID4 is generated when omitted
            color: Card colour
            fallbacks: Overrides for :data:`FALLBACKS`
            **values: Field values keyed by attribute name
        """
        unknown = set(values) - set(FALLBACKS)
        if unknown:
            raise TypeError(f"Unknown workout fields: {', '.join(sorted(unknown))}")

        defaults = {**FALLBACKS, **(fallbacks or {})}
        coerced = {
            key: coerce_seconds(values[key], defaults[key], key)
            if key in values
            else defaults[key]
            for key in FALLBACKS
        }
        clean_name = str(name).strip() if name is not None else ""

        return cls(
            id=id or str(uuid.uuid4()),
            name=clean_name or DEFAULT_NAME,
            color=color or DEFAULT_COLOR,
            **coerced,
        )

    def with_changes(self, **changes: Any) -> WorkoutConfig:
        """Return a copy with *changes* applied through the same coercion."""
        allowed = {f.name for f in fields(self)} - {"id"}
        unknown = set(changes) - allowed
        if unknown:
            raise TypeError(f"Unknown workout fields: {', '.join(sorted(unknown))}")

        updates: dict[str, Any] = {}
        for key, value in changes.items():
            if value is None:
                continue
            if key in FALLBACKS:
                updates[key] = coerce_seconds(value, getattr(self, key), key)
            elif key == "name":
                updates[key] = str(value).strip() or self.name
            else:
                updates[key] = value
        return replace(self, **updates)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the stored (camelCase) representation."""
        data: dict[str, Any] = {"id": self.id, "name": self.name}
        for attr, key in _STORED_KEYS.items():
            data[key] = getattr(self, attr)
        data["backgroundColor"] = self.color
        return data

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], fallbacks: Mapping[str, int] | None = None
    ) -> WorkoutConfig:
        """Create from the stored representation, coercing bad values."""
        values = {
            attr: data[key] for attr, key in _STORED_KEYS.items() if key in data
        }
        return cls.from_input(
            data.get("name"),
            id=data.get("id") or None,
            color=data.get("backgroundColor"),
            fallbacks=fallbacks,
            **values,
        )

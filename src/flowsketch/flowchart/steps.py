"""Typed flow steps produced by the classifier."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

MAX_INDENT_LEVEL = 2


class StepType(str, Enum):
    START = "start"
    END = "end"
    IO = "io"
    PROCESS = "process"
    DECISION = "decision"
    BRANCH_LABEL = "branchLabel"
    PARALLEL = "parallel"
    LOOP = "loop"
    COMMENT = "comment"
    RAW = "raw"

    @classmethod
    def coerce(cls, value: Any) -> "StepType":
        if isinstance(value, cls):
            return value
        raw = str(value or "")
        for member in cls:
            if member.value == raw or member.value.lower() == raw.lower():
                return member
        # Older payloads spelled the label type with a dash.
        if raw.lower() == "branch-label":
            return cls.BRANCH_LABEL
        return cls.RAW


def indent_bucket(leading_spaces: int) -> int:
    """Map a count of leading whitespace characters to a nesting level.

    The mapping is a threshold classifier with three buckets, not a
    proportional one: ``<2`` is level 0, ``2..5`` level 1, ``>=6`` level 2.
    """
    if leading_spaces >= 6:
        return 2
    if leading_spaces >= 2:
        return 1
    return 0


def coerce_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _clamp_indent(value: Any) -> int:
    level = coerce_int(value)
    return max(0, min(MAX_INDENT_LEVEL, level))


@dataclass(frozen=True)
class Step:
    """One logical, non-blank line of a flow description."""

    id: int
    text: str
    type: StepType
    indent_level: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "type": self.type.value,
            "indentLevel": self.indent_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        return cls(
            id=coerce_int(data.get("id")),
            text=str(data.get("text") or ""),
            type=StepType.coerce(data.get("type")),
            indent_level=_clamp_indent(data.get("indentLevel", data.get("indent_level", 0))),
        )


def steps_to_dicts(steps: Iterable[Step]) -> List[Dict[str, Any]]:
    return [step.to_dict() for step in steps]


def steps_from_dicts(data: Iterable[Any]) -> List[Step]:
    return [Step.from_dict(item) for item in data if isinstance(item, dict)]

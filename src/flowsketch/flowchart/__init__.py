"""Flow description parsing and diagram layout."""

from .steps import Step, StepType, indent_bucket, steps_from_dicts, steps_to_dicts
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary, fold
from .classifier import classify
from .model import (
    Annotation,
    DiagramEdge,
    DiagramGraph,
    DiagramNode,
    LayoutParams,
    NodeType,
    Position,
)
from .layout import layout
from .pipeline import DiagramResult, build_diagram, diagram_from_topic
from .navigation import DiagramNavigator

__all__ = [
    "Step",
    "StepType",
    "indent_bucket",
    "steps_from_dicts",
    "steps_to_dicts",
    "DEFAULT_VOCABULARY",
    "Vocabulary",
    "fold",
    "classify",
    "Annotation",
    "DiagramEdge",
    "DiagramGraph",
    "DiagramNode",
    "LayoutParams",
    "NodeType",
    "Position",
    "layout",
    "DiagramResult",
    "build_diagram",
    "diagram_from_topic",
    "DiagramNavigator",
]

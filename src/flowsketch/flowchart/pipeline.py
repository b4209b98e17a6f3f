"""Text to diagram pipeline: classify, then lay out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from ..utils.logging import get_logger
from .classifier import classify
from .layout import layout
from .model import DiagramGraph, LayoutParams
from .steps import Step
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

if TYPE_CHECKING:
    from ..generation.describe import FlowDescriber

logger = get_logger(__name__)


@dataclass(frozen=True)
class DiagramResult:
    steps: Tuple[Step, ...]
    graph: DiagramGraph
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "steps": [step.to_dict() for step in self.steps],
            "graph": self.graph.to_dict(),
        }


def build_diagram(
    raw_text: Optional[str],
    params: Optional[LayoutParams] = None,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> DiagramResult:
    steps = classify(raw_text, vocabulary)
    graph = layout(steps, params)
    return DiagramResult(steps=tuple(steps), graph=graph, description=raw_text or "")


def diagram_from_topic(
    topic: str,
    describer: "FlowDescriber",
    params: Optional[LayoutParams] = None,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
) -> DiagramResult:
    """Ask the upstream describer for a flow description and diagram it.

    Describer failures propagate as ``GenerationError``; the diagramming
    itself cannot fail.
    """
    description = describer.describe(topic)
    result = build_diagram(description, params, vocabulary)
    logger.info(
        "Built diagram from topic",
        extra={"topic": topic[:80], "steps": len(result.steps), "nodes": len(result.graph.nodes)},
    )
    return result

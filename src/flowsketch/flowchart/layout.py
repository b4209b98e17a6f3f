"""Grid layout and connector construction for classified steps.

Nodes are placed on a deterministic grid: one row per emitted node, one
column per indent level. Consecutive nodes are joined by ``sequential``
edges unless a flowchart-drawing convention says the straight connector
would be misleading:

1. nothing leaves an ``end`` node;
2. the last node has no successor;
3. a non-decision node followed in the source text by a branch label at the
   same or a shallower indent closes a conditional block, and a decision
   followed by its branch labels fans out through those labels instead;
4. only a decision may connect straight into an ``end`` node;
5. a comment right before ``end`` is a terminal annotation.

Branch labels are never nodes. They are returned as annotations anchored to
the decision they most plausibly belong to.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..utils.logging import get_logger
from .model import (
    Annotation,
    DiagramEdge,
    DiagramGraph,
    DiagramNode,
    LayoutParams,
    NodeType,
    Position,
)
from .steps import Step, StepType

logger = get_logger(__name__)


def layout(steps: Sequence[Step], params: Optional[LayoutParams] = None) -> DiagramGraph:
    """Lay ``steps`` out as a :class:`DiagramGraph`. Never raises."""
    params = params or LayoutParams()
    if not steps:
        return DiagramGraph()

    nodes: List[DiagramNode] = []
    # Position of each emitted node's step in ``steps``.
    step_index: List[int] = []
    annotations: List[Annotation] = []

    for idx, step in enumerate(steps):
        if step.type == StepType.BRANCH_LABEL:
            annotations.append(
                Annotation(
                    step_id=step.id,
                    text=step.text,
                    kind=step.type,
                    indent_level=step.indent_level,
                    anchor=_anchor_for(steps, idx),
                )
            )
            continue

        nodes.append(
            DiagramNode(
                id=step.id,
                type=NodeType.for_step(step.type),
                label=step.text,
                position=Position(
                    x=params.origin_x + step.indent_level * params.horizontal_spacing,
                    y=params.origin_y + len(nodes) * params.vertical_spacing,
                ),
                step_type=step.type,
                indent_level=step.indent_level,
            )
        )
        step_index.append(idx)

    edges: List[DiagramEdge] = []
    suppressed = 0
    for pos in range(len(nodes) - 1):
        current, following = nodes[pos], nodes[pos + 1]
        if _suppress(steps, step_index[pos], current, following):
            suppressed += 1
            continue
        edges.append(
            DiagramEdge(
                id=f"edge-{current.id}-{following.id}",
                source=current.id,
                target=following.id,
            )
        )

    logger.debug(
        "Laid out diagram",
        extra={"nodes": len(nodes), "edges": len(edges), "suppressed": suppressed},
    )
    return DiagramGraph(nodes=tuple(nodes), edges=tuple(edges), annotations=tuple(annotations))


def _suppress(
    steps: Sequence[Step],
    current_idx: int,
    current: DiagramNode,
    following: DiagramNode,
) -> bool:
    if current.type == NodeType.END:
        return True

    is_decision = current.type == NodeType.DECISION
    next_step = steps[current_idx + 1] if current_idx + 1 < len(steps) else None

    if next_step is not None and next_step.type == StepType.BRANCH_LABEL:
        if is_decision or next_step.indent_level <= current.indent_level:
            return True

    if following.type == NodeType.END and not is_decision:
        return True

    if (
        current.type == NodeType.COMMENT
        and next_step is not None
        and next_step.type == StepType.END
    ):
        return True

    return False


def _anchor_for(steps: Sequence[Step], label_idx: int) -> Optional[int]:
    """Closest preceding decision at the label's indent or shallower."""
    label = steps[label_idx]
    for idx in range(label_idx - 1, -1, -1):
        candidate = steps[idx]
        if candidate.type == StepType.BRANCH_LABEL:
            continue
        if candidate.type == StepType.DECISION and candidate.indent_level <= label.indent_level:
            return candidate.id
        if candidate.type == StepType.END or candidate.indent_level < label.indent_level:
            return None
    return None

"""Diagram graph schema handed to renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from .steps import StepType, coerce_int

if TYPE_CHECKING:
    from ..config.settings import Settings


class NodeType(str, Enum):
    START = "start"
    END = "end"
    IO = "io"
    PROCESS = "process"
    DECISION = "decision"
    PARALLEL = "parallel"
    LOOP = "loop"
    COMMENT = "comment"

    @classmethod
    def for_step(cls, step_type: StepType) -> "NodeType":
        """Node type for a step; ``raw`` falls back to the generic process node."""
        try:
            return cls(step_type.value)
        except ValueError:
            return cls.PROCESS


EDGE_KIND_SEQUENTIAL = "sequential"


def _coerce_float(value: Any) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    return 0.0


def _list_of_dicts(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, dict)]


@dataclass(frozen=True)
class LayoutParams:
    origin_x: float = 400.0
    origin_y: float = 50.0
    vertical_spacing: float = 120.0
    horizontal_spacing: float = 250.0

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LayoutParams":
        return cls(
            origin_x=settings.origin_x,
            origin_y=settings.origin_y,
            vertical_spacing=settings.vertical_spacing,
            horizontal_spacing=settings.horizontal_spacing,
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], base: Optional["LayoutParams"] = None) -> "LayoutParams":
        """Overlay ``originX``-style keys (or snake_case) onto ``base``."""
        base = base or cls()
        data = data or {}
        keys = {
            "origin_x": ("originX", "origin_x"),
            "origin_y": ("originY", "origin_y"),
            "vertical_spacing": ("verticalSpacing", "vertical_spacing"),
            "horizontal_spacing": ("horizontalSpacing", "horizontal_spacing"),
        }
        values = {}
        for attr, aliases in keys.items():
            values[attr] = getattr(base, attr)
            for alias in aliases:
                if isinstance(data.get(alias), (int, float)):
                    values[attr] = float(data[alias])
                    break
        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        return {
            "originX": self.origin_x,
            "originY": self.origin_y,
            "verticalSpacing": self.vertical_spacing,
            "horizontalSpacing": self.horizontal_spacing,
        }


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class DiagramNode:
    id: int
    type: NodeType
    label: str
    position: Position
    step_type: StepType = StepType.PROCESS
    indent_level: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "label": self.label,
            "position": self.position.to_dict(),
            "stepType": self.step_type.value,
            "indentLevel": self.indent_level,
        }


@dataclass(frozen=True)
class DiagramEdge:
    id: str
    source: int
    target: int
    kind: str = EDGE_KIND_SEQUENTIAL

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "source": self.source, "target": self.target, "kind": self.kind}


@dataclass(frozen=True)
class Annotation:
    """A step rendered beside the graph instead of as a node.

    ``anchor`` is the id of the decision node the label sits under, inferred
    from proximity and indentation, or ``None`` when no decision precedes it.
    """

    step_id: int
    text: str
    kind: StepType
    indent_level: int
    anchor: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stepId": self.step_id,
            "text": self.text,
            "kind": self.kind.value,
            "indentLevel": self.indent_level,
            "anchor": self.anchor,
        }


@dataclass(frozen=True)
class DiagramGraph:
    nodes: Tuple[DiagramNode, ...] = ()
    edges: Tuple[DiagramEdge, ...] = ()
    annotations: Tuple[Annotation, ...] = field(default=())

    def node(self, node_id: int) -> Optional[DiagramNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def outgoing(self, node_id: int) -> List[DiagramEdge]:
        return [edge for edge in self.edges if edge.source == node_id]

    def incoming(self, node_id: int) -> List[DiagramEdge]:
        return [edge for edge in self.edges if edge.target == node_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "annotations": [annotation.to_dict() for annotation in self.annotations],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiagramGraph":
        data = data if isinstance(data, dict) else {}
        nodes_raw = _list_of_dicts(data.get("nodes"))
        edges_raw = _list_of_dicts(data.get("edges"))
        annotations_raw = _list_of_dicts(data.get("annotations"))

        nodes: List[DiagramNode] = []
        seen: set[int] = set()
        for node in nodes_raw:
            node_id = coerce_int(node.get("id"), None)
            if node_id is None or node_id in seen:
                continue
            seen.add(node_id)

            step_type = StepType.coerce(node.get("stepType") or node.get("type"))
            try:
                node_type = NodeType(str(node.get("type") or "process"))
            except ValueError:
                node_type = NodeType.for_step(step_type)

            position = node.get("position")
            if not isinstance(position, dict):
                position = {}
            nodes.append(
                DiagramNode(
                    id=node_id,
                    type=node_type,
                    label=str(node.get("label") or ""),
                    position=Position(
                        x=_coerce_float(position.get("x")),
                        y=_coerce_float(position.get("y")),
                    ),
                    step_type=step_type,
                    indent_level=coerce_int(node.get("indentLevel")),
                )
            )

        edges: List[DiagramEdge] = []
        for edge in edges_raw:
            source = coerce_int(edge.get("source", edge.get("from")), None)
            target = coerce_int(edge.get("target", edge.get("to")), None)
            if source not in seen or target not in seen:
                continue
            edges.append(
                DiagramEdge(
                    id=str(edge.get("id") or f"edge-{source}-{target}"),
                    source=source,
                    target=target,
                    kind=str(edge.get("kind") or EDGE_KIND_SEQUENTIAL),
                )
            )

        annotations = [
            Annotation(
                step_id=coerce_int(item.get("stepId")),
                text=str(item.get("text") or ""),
                kind=StepType.coerce(item.get("kind")),
                indent_level=coerce_int(item.get("indentLevel")),
                anchor=coerce_int(item.get("anchor"), None),
            )
            for item in annotations_raw
        ]

        return cls(nodes=tuple(nodes), edges=tuple(edges), annotations=tuple(annotations))

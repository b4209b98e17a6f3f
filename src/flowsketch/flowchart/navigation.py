"""Step-by-step navigation over a laid out diagram.

Consumers (a presenter view, a keyboard handler) drive a ``DiagramNavigator``
and receive the selected node through an explicit callback.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from .model import DiagramGraph, DiagramNode

SelectCallback = Callable[[DiagramNode], None]

KEY_BINDINGS: Dict[str, str] = {
    "ArrowDown": "next",
    "ArrowRight": "next",
    "j": "next",
    "ArrowUp": "previous",
    "ArrowLeft": "previous",
    "k": "previous",
    "Home": "first",
    "End": "last",
}


class DiagramNavigator:
    """Cursor over the nodes of a graph in layout order.

    ``on_select`` fires only when the cursor lands on a different node.
    """

    def __init__(self, graph: DiagramGraph, on_select: Optional[SelectCallback] = None):
        self.graph = graph
        self.on_select = on_select
        self._index: Optional[int] = 0 if graph.nodes else None

    @property
    def current(self) -> Optional[DiagramNode]:
        if self._index is None:
            return None
        return self.graph.nodes[self._index]

    @property
    def position(self) -> Optional[int]:
        return self._index

    def first(self) -> Optional[DiagramNode]:
        return self._move_to(0)

    def last(self) -> Optional[DiagramNode]:
        return self._move_to(len(self.graph.nodes) - 1)

    def next(self) -> Optional[DiagramNode]:
        if self._index is None:
            return None
        return self._move_to(min(self._index + 1, len(self.graph.nodes) - 1))

    def previous(self) -> Optional[DiagramNode]:
        if self._index is None:
            return None
        return self._move_to(max(self._index - 1, 0))

    def select(self, node_id: int) -> Optional[DiagramNode]:
        for idx, node in enumerate(self.graph.nodes):
            if node.id == node_id:
                return self._move_to(idx)
        return None

    def handle_key(self, key: str) -> Optional[DiagramNode]:
        action = KEY_BINDINGS.get(key)
        if action is None:
            return None
        return getattr(self, action)()

    def _move_to(self, index: int) -> Optional[DiagramNode]:
        if not self.graph.nodes:
            return None
        moved = index != self._index
        self._index = index
        node = self.graph.nodes[index]
        if moved and self.on_select is not None:
            self.on_select(node)
        return node

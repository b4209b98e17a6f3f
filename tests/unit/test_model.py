import pytest

from flowsketch.config.settings import Settings
from flowsketch.flowchart.model import (
    DiagramEdge,
    DiagramGraph,
    DiagramNode,
    LayoutParams,
    NodeType,
    Position,
)
from flowsketch.flowchart.steps import Step, StepType, steps_from_dicts, steps_to_dicts


def test_node_type_for_step_falls_back_to_process():
    assert NodeType.for_step(StepType.DECISION) == NodeType.DECISION
    assert NodeType.for_step(StepType.COMMENT) == NodeType.COMMENT
    assert NodeType.for_step(StepType.RAW) == NodeType.PROCESS


def test_step_to_dict_uses_camel_case_keys():
    step = Step(id=3, text="Veri topla", type=StepType.BRANCH_LABEL, indent_level=1)

    assert step.to_dict() == {"id": 3, "text": "Veri topla", "type": "branchLabel", "indentLevel": 1}


def test_steps_from_dicts_is_lenient():
    steps = steps_from_dicts(
        [
            {"id": 0, "text": "A", "type": "branch-label", "indentLevel": 7},
            "not a step",
            {"id": "1", "text": "B", "type": "mystery", "indent_level": "x"},
        ]
    )

    assert steps == [
        Step(0, "A", StepType.BRANCH_LABEL, 2),
        Step(1, "B", StepType.RAW, 0),
    ]
    assert steps_to_dicts(steps)[0]["type"] == "branchLabel"


def test_layout_params_from_dict_overlays_known_keys():
    params = LayoutParams.from_dict({"originX": 10, "vertical_spacing": 5, "originY": "oops"})

    assert params == LayoutParams(origin_x=10.0, origin_y=50.0, vertical_spacing=5.0, horizontal_spacing=250.0)
    assert params.to_dict()["originX"] == 10.0


def test_layout_params_from_settings():
    settings = Settings(_env_file=None, origin_x=0, horizontal_spacing=100)

    params = LayoutParams.from_settings(settings)

    assert params.origin_x == 0
    assert params.horizontal_spacing == 100
    assert params.vertical_spacing == 120


def test_graph_from_dict_drops_dangling_edges_and_duplicates():
    graph = DiagramGraph.from_dict(
        {
            "nodes": [
                {"id": 0, "type": "start", "label": "Start", "position": {"x": 1, "y": 2}},
                {"id": 0, "type": "process", "label": "Duplicate"},
                {"id": 1, "type": "weird", "stepType": "raw", "label": "Free text"},
                {"type": "process"},
            ],
            "edges": [
                {"id": "edge-0-1", "source": 0, "target": 1},
                {"from": 1, "to": 9},
            ],
            "annotations": [{"stepId": 2, "text": "EVET", "kind": "branchLabel", "anchor": "x"}],
        }
    )

    assert [node.label for node in graph.nodes] == ["Start", "Free text"]
    assert graph.nodes[0].position == Position(1.0, 2.0)
    assert graph.nodes[1].type == NodeType.PROCESS
    assert graph.nodes[1].step_type == StepType.RAW
    assert graph.edges == (DiagramEdge(id="edge-0-1", source=0, target=1),)
    assert graph.annotations[0].anchor is None


def test_graph_lookup_helpers():
    start = DiagramNode(0, NodeType.START, "Start", Position(0, 0), StepType.START)
    end = DiagramNode(1, NodeType.END, "End", Position(0, 120), StepType.END)
    edge = DiagramEdge("edge-0-1", 0, 1)
    graph = DiagramGraph(nodes=(start, end), edges=(edge,))

    assert graph.node(1) is end
    assert graph.node(5) is None
    assert graph.outgoing(0) == [edge]
    assert graph.incoming(0) == []
    assert graph.to_dict()["edges"] == [{"id": "edge-0-1", "source": 0, "target": 1, "kind": "sequential"}]


def test_step_from_dict_tolerates_bad_numbers():
    step = Step.from_dict({"id": "abc", "text": "A", "type": "process", "indentLevel": [1]})

    assert step == Step(0, "A", StepType.PROCESS, 0)


def test_graph_from_dict_tolerates_malformed_fields():
    graph = DiagramGraph.from_dict(
        {
            "nodes": [
                {"id": 1, "position": [1, 2], "indentLevel": "deep"},
                {"id": "2", "position": {"x": "left", "y": 3}},
                {"id": [3]},
            ],
            "edges": [
                {"source": [1], "target": 2},
                {"source": "1", "target": "2"},
                {"source": {"id": 1}, "target": None},
            ],
            "annotations": [{"stepId": "x", "indentLevel": None, "text": "EVET"}, 7],
        }
    )

    assert [node.id for node in graph.nodes] == [1, 2]
    assert graph.nodes[0].position == Position(0.0, 0.0)
    assert graph.nodes[0].indent_level == 0
    assert graph.nodes[1].position == Position(0.0, 3.0)
    assert [(edge.source, edge.target) for edge in graph.edges] == [(1, 2)]
    assert graph.annotations[0].step_id == 0
    assert graph.annotations[0].indent_level == 0


@pytest.mark.parametrize("payload", [{}, {"nodes": "oops", "edges": 5}, None, []])
def test_graph_from_dict_of_garbage_is_empty(payload):
    assert DiagramGraph.from_dict(payload) == DiagramGraph()

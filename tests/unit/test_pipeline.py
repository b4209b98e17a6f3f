import pytest

from flowsketch.core.exceptions import GenerationError
from flowsketch.flowchart.model import LayoutParams
from flowsketch.flowchart.pipeline import build_diagram, diagram_from_topic
from flowsketch.flowchart.vocabulary import Vocabulary
from flowsketch.generation.describe import StaticFlowDescriber


class FailingDescriber:
    def describe(self, topic):
        raise GenerationError("upstream unavailable", {"topic": topic})


def test_build_diagram_runs_both_stages(canonical_text):
    result = build_diagram(canonical_text)

    assert len(result.steps) == 6
    assert len(result.graph.nodes) == 4
    assert len(result.graph.edges) == 2
    assert result.description == canonical_text


def test_build_diagram_to_dict_shape(canonical_text):
    payload = build_diagram(canonical_text, LayoutParams(origin_x=0, origin_y=0)).to_dict()

    assert set(payload) == {"description", "steps", "graph"}
    assert payload["steps"][3]["type"] == "branchLabel"
    assert payload["graph"]["nodes"][0]["position"] == {"x": 0, "y": 0}
    assert payload["graph"]["annotations"][0]["anchor"] == 2


def test_build_diagram_of_nothing():
    result = build_diagram(None)

    assert result.steps == ()
    assert result.graph.nodes == ()
    assert result.description == ""


def test_custom_vocabulary_is_used():
    vocabulary = Vocabulary(start=("ANFANG",), end=("ENDE",))

    result = build_diagram("ANFANG\nENDE", vocabulary=vocabulary)

    assert [step.type.value for step in result.steps] == ["start", "end"]
    assert [step.text for step in result.steps] == ["ANFANG", "ENDE"]


def test_diagram_from_topic_uses_describer(canonical_text):
    result = diagram_from_topic("Veri doğrulama", StaticFlowDescriber(canonical_text))

    assert result.description == canonical_text
    assert len(result.graph.nodes) == 4


def test_diagram_from_topic_propagates_generation_errors():
    with pytest.raises(GenerationError) as exc_info:
        diagram_from_topic("Veri doğrulama", FailingDescriber())

    assert exc_info.value.context == {"topic": "Veri doğrulama"}

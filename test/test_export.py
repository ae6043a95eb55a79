import json

import pytest
from pydantic import ValidationError

from dfa_engine import (
    DFAFormatError,
    collection_from_json,
    from_json,
    load_dfa,
    save_dfa,
    to_dict,
    to_dot,
    to_json,
)
from dfa_engine.models import DFA, DFAState, DFATransition

EDITOR_JSON = """
{
  "id": "example-binary-01",
  "name": "Binary Strings Ending in 01",
  "description": "Accepts any binary string that ends with \\"01\\"",
  "alphabet": ["0", "1"],
  "states": [
    {"id": "q0", "label": "q0", "isInitial": true, "isAccepting": false, "x": 150, "y": 200},
    {"id": "q1", "label": "q1", "isInitial": false, "isAccepting": true, "x": 350, "y": 200},
    {"id": "q2", "label": "q2", "isInitial": false, "isAccepting": false, "x": 550, "y": 200}
  ],
  "transitions": [
    {"id": "t1", "fromStateId": "q0", "toStateId": "q1", "symbol": "0"},
    {"id": "t2", "fromStateId": "q0", "toStateId": "q0", "symbol": "1"},
    {"id": "t3", "fromStateId": "q1", "toStateId": "q1", "symbol": "0"},
    {"id": "t4", "fromStateId": "q1", "toStateId": "q2", "symbol": "1"},
    {"id": "t5", "fromStateId": "q2", "toStateId": "q1", "symbol": "0"},
    {"id": "t6", "fromStateId": "q2", "toStateId": "q0", "symbol": "1"}
  ],
  "initialStateId": "q0",
  "acceptingStateIds": ["q2"],
  "createdAt": "2024-01-01T00:00:00.000Z"
}
"""


def test_from_json_reads_editor_shape():
    dfa = from_json(EDITOR_JSON)
    assert dfa.transitions[3].from_state_id == "q1"
    assert dfa.accepting_state_ids == ["q2"]
    assert dfa.created_at.year == 2024


def test_state_flags_follow_accepting_set():
    # the stale isAccepting flag on q1 is ignored
    dfa = from_json(EDITOR_JSON)
    assert dfa.is_accepting("q2") is True
    assert dfa.is_accepting("q1") is False

    states = {s["id"]: s for s in to_dict(dfa)["states"]}
    assert states["q1"]["isAccepting"] is False
    assert states["q2"]["isAccepting"] is True
    assert states["q0"]["isInitial"] is True


def test_json_uses_camel_case(ending_in_01):
    data = json.loads(to_json(ending_in_01))
    assert data["initialStateId"] == "q0"
    assert data["acceptingStateIds"] == ["q2"]
    assert data["transitions"][0]["fromStateId"] == "q0"
    assert "from_state_id" not in data["transitions"][0]


def test_json_round_trip(contains_aba):
    assert from_json(to_json(contains_aba)) == contains_aba


def test_saved_entry_is_unwrapped(ending_in_01):
    wrapped = json.dumps({"id": "dfa-1", "name": "saved", "description": "", "dfa": to_dict(ending_in_01)})
    assert from_json(wrapped) == ending_in_01


def test_collection_from_json(ending_in_01, a_or_b):
    text = json.dumps([to_dict(ending_in_01), {"dfa": to_dict(a_or_b)}])
    assert collection_from_json(text) == [ending_in_01, a_or_b]


def test_collection_requires_array(ending_in_01):
    with pytest.raises(DFAFormatError):
        collection_from_json(to_json(ending_in_01))


def test_malformed_json_raises_format_error():
    with pytest.raises(DFAFormatError, match="Malformed JSON"):
        from_json("{not json")


def test_missing_fields_raise_format_error():
    with pytest.raises(DFAFormatError) as exc:
        from_json('{"id": "x", "name": "x"}')
    assert isinstance(exc.value, ValueError)
    assert isinstance(exc.value.__cause__, ValidationError)


def test_multi_character_symbol_rejected():
    with pytest.raises(ValidationError):
        DFATransition(id="t", from_state_id="a", to_state_id="b", symbol="ab")


def test_save_and_load(tmp_path, ending_in_01):
    path = save_dfa(ending_in_01, tmp_path / "nested" / "dfa.json")
    assert path.exists()
    assert load_dfa(path) == ending_in_01


def test_to_dot(ending_in_01):
    dot = to_dot(ending_in_01)
    assert dot.startswith("// Binary Strings Ending in 01")
    assert "rankdir=LR" in dot
    assert "q2 [label=q2 shape=doublecircle]" in dot
    assert "q0 [label=q0 shape=circle]" in dot
    assert "__start__ -> q0" in dot
    assert "q1 -> q2 [label=1]" in dot


def test_to_dot_groups_symbols(length_div_3):
    dot = to_dot(length_div_3)
    assert 'q0 -> q1 [label="0,1"]' in dot
    assert dot.count("q0 -> q1") == 1


def test_load_non_utf8_file_raises_format_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_bytes(b"\xff\xfe{")
    with pytest.raises(DFAFormatError, match="not valid UTF-8"):
        load_dfa(path)


def test_label_defaults_to_id():
    dfa = DFA(id="d", name="d", states=[DFAState(id="q1")], initial_state_id="q1")
    assert dfa.states[0].label == "q1"
    assert to_dict(dfa)["states"][0]["label"] == "q1"


def test_blank_label_in_json_defaults_to_id():
    dfa = from_json('{"id": "d", "name": "d", "initialStateId": "s", "states": [{"id": "s", "label": ""}]}')
    assert dfa.states[0].label == "s"


def test_explicit_label_kept():
    assert DFAState(id="even", label="Even").label == "Even"
    assert "q0 [label=q0 shape=circle]" in to_dot(
        DFA(id="d", name="d", states=[DFAState(id="q0")], initial_state_id="q0")
    )

"""
Import/export for DFA definitions.

JSON uses the camelCase shape the editor stores (`fromStateId`,
`acceptingStateIds`, ...). Saved-collection entries that wrap the
automaton under a `dfa` key are unwrapped on import.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import structlog
from graphviz import Digraph
from pydantic import ValidationError

from .errors import DFAFormatError
from .models import DFA

log = structlog.get_logger(__name__)


def to_dict(dfa: DFA) -> Dict[str, Any]:
    data = dfa.model_dump(mode="json", by_alias=True)
    # per-state flags are derived, never read back
    for state in data["states"]:
        state["isInitial"] = dfa.is_initial(state["id"])
        state["isAccepting"] = dfa.is_accepting(state["id"])
    return data


def to_json(dfa: DFA, indent: int = 2) -> str:
    return json.dumps(to_dict(dfa), indent=indent)


def from_dict(data: Dict[str, Any]) -> DFA:
    if not isinstance(data, dict):
        raise DFAFormatError(f"Expected a JSON object, got {type(data).__name__}")
    if isinstance(data.get("dfa"), dict):
        data = data["dfa"]
    try:
        return DFA.model_validate(data)
    except ValidationError as e:
        raise DFAFormatError(f"Invalid DFA definition: {e.error_count()} problem(s)\n{e}") from e


def from_json(text: str) -> DFA:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DFAFormatError(f"Malformed JSON: {e}") from e
    return from_dict(data)


def collection_from_json(text: str) -> List[DFA]:
    """Decode an exported collection (a JSON array of DFAs or saved entries)."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DFAFormatError(f"Malformed JSON: {e}") from e
    if not isinstance(data, list):
        raise DFAFormatError("Expected a JSON array of DFAs")
    return [from_dict(item) for item in data]


def load_dfa(path: Union[str, Path]) -> DFA:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DFAFormatError(f"File is not valid UTF-8: {e}") from e
    dfa = from_json(text)
    log.info("dfa_loaded", path=str(path), dfa_id=dfa.id, states=len(dfa.states))
    return dfa


def save_dfa(dfa: DFA, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(dfa), encoding="utf-8")
    log.info("dfa_saved", path=str(path), dfa_id=dfa.id)
    return path


def to_digraph(dfa: DFA) -> Digraph:
    dot = Digraph(name="DFA", comment=dfa.name)
    dot.attr(rankdir="LR")

    # Start pointer
    dot.node("__start__", "", shape="point")
    dot.edge("__start__", dfa.initial_state_id)

    for state in dfa.states:
        shape = "doublecircle" if dfa.is_accepting(state.id) else "circle"
        dot.node(state.id, state.label, shape=shape)

    # Group symbols sharing the same source and destination
    grouped: Dict[tuple, List[str]] = {}
    for t in dfa.transitions:
        grouped.setdefault((t.from_state_id, t.to_state_id), []).append(t.symbol)
    for (src, dest), symbols in grouped.items():
        dot.edge(src, dest, label=",".join(symbols))
    return dot


def to_dot(dfa: DFA) -> str:
    return to_digraph(dfa).source

"""
Data Model for the DFA Engine
Pydantic records for automata, execution results and validation reports.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Symbol = Annotated[str, Field(min_length=1, max_length=1)]


class DFAModel(BaseModel):
    """Immutable record that reads and writes the camelCase JSON shape."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Outcome(str, Enum):
    """How a run over an input string ended."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    INVALID_SYMBOLS = "INVALID_SYMBOLS"
    MISSING_TRANSITION = "MISSING_TRANSITION"

    @property
    def is_failure(self) -> bool:
        return self in (Outcome.INVALID_SYMBOLS, Outcome.MISSING_TRANSITION)


class DFAState(DFAModel):
    id: str = Field(..., min_length=1)
    label: str = Field(default="", description="Display text, independent of the id; defaults to the id")
    x: float = Field(default=0.0, description="Canvas position, unused by execution")
    y: float = Field(default=0.0)

    @model_validator(mode="before")
    @classmethod
    def default_label(cls, data):
        if isinstance(data, dict) and not data.get("label"):
            data = {**data, "label": data.get("id", "")}
        return data


class DFATransition(DFAModel):
    id: str = Field(..., min_length=1)
    from_state_id: str
    to_state_id: str
    symbol: Symbol


class DFA(DFAModel):
    """
    A complete automaton definition.

    Structural integrity (dangling ids, duplicates, non-determinism) is not
    enforced here; run the validator for that. Whether a state is initial or
    accepting is answered from initial_state_id / accepting_state_ids only.
    """
    id: str
    name: str
    description: Optional[str] = None
    alphabet: List[Symbol] = Field(default_factory=list)
    states: List[DFAState] = Field(default_factory=list)
    transitions: List[DFATransition] = Field(default_factory=list)
    initial_state_id: str
    accepting_state_ids: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_initial(self, state_id: str) -> bool:
        return state_id == self.initial_state_id

    def is_accepting(self, state_id: str) -> bool:
        return state_id in self.accepting_state_ids

    def state_ids(self) -> List[str]:
        return [s.id for s in self.states]

    def get_state(self, state_id: str) -> Optional[DFAState]:
        for state in self.states:
            if state.id == state_id:
                return state
        return None


class ProcessingResult(DFAModel):
    """
    Verdict for one input string.
    `error` is None exactly when the string was accepted.
    """
    accepted: bool
    outcome: Outcome
    input_string: str
    path: List[str] = Field(default_factory=list, description="State ids visited, in order")
    current_state: str
    remaining_input: str = ""
    error: Optional[str] = None


class SimulationStep(DFAModel):
    state_id: str
    symbol: Optional[str] = None  # None for the initial step
    remaining_input: str
    step_number: int = Field(..., ge=0)


class SimulationTrace(DFAModel):
    """Step sequence plus the status the walk ended with."""
    input_string: str
    steps: List[SimulationStep]
    outcome: Outcome
    error: Optional[str] = None

    @property
    def completed(self) -> bool:
        return not self.outcome.is_failure


class ValidationResult(DFAModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

"""
DFA Engine.
Execution and structural validation for Deterministic Finite Automata.
"""

__version__ = "1.0.0"

from .models import (
    DFA,
    DFAState,
    DFATransition,
    Outcome,
    ProcessingResult,
    SimulationStep,
    SimulationTrace,
    ValidationResult,
)

from .engine import DFAEngine
from .validator import StructuralValidator, validate_dfa

from .helpers import (
    IdProvider,
    UUIDProvider,
    create_empty_dfa,
    generate_state_id,
    generate_transition_id,
)

from .errors import DFAEngineError, DFAFormatError

from .export import (
    to_dict,
    to_json,
    from_dict,
    from_json,
    collection_from_json,
    load_dfa,
    save_dfa,
    to_digraph,
    to_dot,
)

__all__ = [
    # Models
    "DFA",
    "DFAState",
    "DFATransition",
    "Outcome",
    "ProcessingResult",
    "SimulationStep",
    "SimulationTrace",
    "ValidationResult",
    # Engine
    "DFAEngine",
    "StructuralValidator",
    "validate_dfa",
    # Helpers
    "IdProvider",
    "UUIDProvider",
    "create_empty_dfa",
    "generate_state_id",
    "generate_transition_id",
    # Errors
    "DFAEngineError",
    "DFAFormatError",
    # Import / export
    "to_dict",
    "to_json",
    "from_dict",
    "from_json",
    "collection_from_json",
    "load_dfa",
    "save_dfa",
    "to_digraph",
    "to_dot",
]

"""
Structural Validator for DFA definitions.
Reports fatal errors (malformed automaton) and warnings (legal but incomplete).
"""

from typing import Dict, List, Tuple

import structlog

from .models import DFA, ValidationResult

log = structlog.get_logger(__name__)

TransitionKey = Tuple[str, str]


class StructuralValidator:
    """
    Audits a DFA once, independently of any input string.
    Every check runs; none short-circuits another.
    """

    def validate(self, dfa: DFA) -> ValidationResult:
        errors: List[str] = []
        warnings: List[str] = []
        known_ids = set(dfa.state_ids())

        # 1. At least one state
        if not dfa.states:
            errors.append("DFA must have at least one state")

        # 2. Initial state resolves
        if dfa.initial_state_id not in known_ids:
            errors.append(f"Initial state '{dfa.initial_state_id}' not found in states")

        # 3. Accepting states resolve
        for accepting_id in dfa.accepting_state_ids:
            if accepting_id not in known_ids:
                errors.append(f"Accepting state '{accepting_id}' not found in states")

        # 4. Alphabet
        if not dfa.alphabet:
            warnings.append("Alphabet is empty - DFA can only accept empty string")

        # 5. Duplicate state ids
        seen = set()
        for state in dfa.states:
            if state.id in seen:
                errors.append(f"Duplicate state ID: '{state.id}'")
            seen.add(state.id)

        # 6 + 7. Transition references and symbols
        alphabet = set(dfa.alphabet)
        for t in dfa.transitions:
            if t.from_state_id not in known_ids:
                errors.append(f"Transition '{t.id}' references non-existent from state '{t.from_state_id}'")
            if t.to_state_id not in known_ids:
                errors.append(f"Transition '{t.id}' references non-existent to state '{t.to_state_id}'")
            if t.symbol not in alphabet:
                errors.append(f"Transition '{t.id}' uses symbol '{t.symbol}' not in alphabet")

        # 8. Determinism. First transition for a (source, symbol) pair is kept.
        table = self.transition_table(dfa, errors)

        # 9. Completeness
        for state in dfa.states:
            for symbol in dfa.alphabet:
                if (state.id, symbol) not in table:
                    warnings.append(f"Incomplete: state '{state.id}' has no transition for symbol '{symbol}'")

        result = ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
        log.info(
            "dfa_validated",
            dfa_id=dfa.id,
            is_valid=result.is_valid,
            errors=len(errors),
            warnings=len(warnings),
        )
        return result

    @staticmethod
    def transition_table(dfa: DFA, errors: List[str]) -> Dict[TransitionKey, str]:
        table: Dict[TransitionKey, str] = {}
        for t in dfa.transitions:
            key = (t.from_state_id, t.symbol)
            if key in table:
                errors.append(
                    f"Non-deterministic: multiple transitions from state '{t.from_state_id}' "
                    f"with symbol '{t.symbol}' (destinations '{table[key]}' and '{t.to_state_id}')"
                )
                continue
            table[key] = t.to_state_id
        return table


_validator = StructuralValidator()


def validate_dfa(dfa: DFA) -> ValidationResult:
    return _validator.validate(dfa)

"""
DFA Engine
Deterministic single-pass interpretation of an automaton against input strings.
"""

from typing import Dict, List, Optional, Tuple

import structlog

from .models import (
    DFA,
    Outcome,
    ProcessingResult,
    SimulationStep,
    SimulationTrace,
    ValidationResult,
)
from .validator import validate_dfa

log = structlog.get_logger(__name__)


class DFAEngine:
    """
    Interpreter for a single DFA definition.

    The engine never mutates the definition and keeps no state between
    calls, so repeated calls with the same input give identical results.
    No structural checks happen here: feed it a malformed automaton and
    you get "no transition" failures, not exceptions.

    The alphabet, transition table and accepting set are copied at
    construction; later edits to the definition's lists are not seen.
    """

    def __init__(self, dfa: DFA):
        self.dfa = dfa
        self._alphabet = set(dfa.alphabet)
        self._accepting = frozenset(dfa.accepting_state_ids)
        self._table: Dict[Tuple[str, str], str] = {}
        for t in dfa.transitions:
            # first match wins, same as a linear scan
            self._table.setdefault((t.from_state_id, t.symbol), t.to_state_id)

    def get_next_state(self, current_state_id: str, symbol: str) -> Optional[str]:
        return self._table.get((current_state_id, symbol))

    def get_invalid_symbols(self, input_string: str) -> List[str]:
        """Symbols missing from the alphabet, each once, in first-seen order."""
        invalid: List[str] = []
        for symbol in input_string:
            if symbol not in self._alphabet and symbol not in invalid:
                invalid.append(symbol)
        return invalid

    def is_valid_string(self, input_string: str) -> bool:
        return not self.get_invalid_symbols(input_string)

    def process_string(self, input_string: str) -> ProcessingResult:
        """
        Run the whole string and return a verdict.

        Alphabet membership is checked before any transition is taken. A
        missing transition stops the walk and keeps the partial path.
        """
        initial = self.dfa.initial_state_id

        invalid = self.get_invalid_symbols(input_string)
        if invalid:
            result = ProcessingResult(
                accepted=False,
                outcome=Outcome.INVALID_SYMBOLS,
                input_string=input_string,
                path=[],
                current_state=initial,
                remaining_input=input_string,
                error=f"Invalid symbols in input: {', '.join(invalid)}",
            )
            self._log_result(result)
            return result

        current = initial
        path = [current]
        for i, symbol in enumerate(input_string):
            next_state = self.get_next_state(current, symbol)
            if next_state is None:
                result = ProcessingResult(
                    accepted=False,
                    outcome=Outcome.MISSING_TRANSITION,
                    input_string=input_string,
                    path=path,
                    current_state=current,
                    remaining_input=input_string[i:],
                    error=f"No transition found from state '{current}' with symbol '{symbol}'",
                )
                self._log_result(result)
                return result
            current = next_state
            path.append(current)

        accepted = current in self._accepting
        result = ProcessingResult(
            accepted=accepted,
            outcome=Outcome.ACCEPTED if accepted else Outcome.REJECTED,
            input_string=input_string,
            path=path,
            current_state=current,
            remaining_input="",
            error=None if accepted else f"String rejected: ended in non-accepting state '{current}'",
        )
        self._log_result(result)
        return result

    def get_simulation_steps(self, input_string: str) -> List[SimulationStep]:
        """
        Step-by-step trace for replay. Starts with the initial state and
        silently stops at the first symbol that has no transition, whether
        or not that symbol is in the alphabet.
        """
        steps, _ = self._walk(input_string)
        return steps

    def get_simulation_trace(self, input_string: str) -> SimulationTrace:
        """Same walk as get_simulation_steps, but says how it ended."""
        invalid = self.get_invalid_symbols(input_string)
        if invalid:
            steps = [self._initial_step(input_string)]
            return SimulationTrace(
                input_string=input_string,
                steps=steps,
                outcome=Outcome.INVALID_SYMBOLS,
                error=f"Invalid symbols in input: {', '.join(invalid)}",
            )

        steps, stuck_at = self._walk(input_string)
        final = steps[-1].state_id
        if stuck_at is not None:
            outcome = Outcome.MISSING_TRANSITION
            error = f"No transition found from state '{final}' with symbol '{input_string[stuck_at]}'"
        elif final in self._accepting:
            outcome, error = Outcome.ACCEPTED, None
        else:
            outcome = Outcome.REJECTED
            error = f"String rejected: ended in non-accepting state '{final}'"
        return SimulationTrace(input_string=input_string, steps=steps, outcome=outcome, error=error)

    @staticmethod
    def validate_dfa(dfa: DFA) -> ValidationResult:
        return validate_dfa(dfa)

    def _initial_step(self, input_string: str) -> SimulationStep:
        return SimulationStep(
            state_id=self.dfa.initial_state_id,
            symbol=None,
            remaining_input=input_string,
            step_number=0,
        )

    def _walk(self, input_string: str) -> Tuple[List[SimulationStep], Optional[int]]:
        # returns the steps and the index of the symbol that had no transition
        steps = [self._initial_step(input_string)]
        current = self.dfa.initial_state_id
        for i, symbol in enumerate(input_string):
            next_state = self.get_next_state(current, symbol)
            if next_state is None:
                return steps, i
            current = next_state
            steps.append(SimulationStep(
                state_id=current,
                symbol=symbol,
                remaining_input=input_string[i + 1:],
                step_number=i + 1,
            ))
        return steps, None

    def _log_result(self, result: ProcessingResult) -> None:
        log.debug(
            "string_processed",
            dfa_id=self.dfa.id,
            outcome=result.outcome.value,
            input_length=len(result.input_string),
            path_length=len(result.path),
        )

"""
Identifier helpers and the empty automaton factory.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol, Sequence

from .models import DFA, DFAState


class IdProvider(Protocol):
    def new_id(self) -> str:
        ...


class UUIDProvider:
    """Default provider backed by uuid4."""

    def new_id(self) -> str:
        return str(uuid.uuid4())


_default_provider = UUIDProvider()


def generate_state_id(existing_states: Sequence[DFAState]) -> str:
    """
    Return `q<N>` with N starting at len(existing_states), bumped until the
    id is not taken.
    """
    taken = {s.id for s in existing_states}
    index = len(existing_states)
    state_id = f"q{index}"
    while state_id in taken:
        index += 1
        state_id = f"q{index}"
    return state_id


def generate_transition_id(provider: Optional[IdProvider] = None) -> str:
    provider = provider or _default_provider
    return f"t-{provider.new_id()}"


def create_empty_dfa(name: str = "New DFA", id_provider: Optional[IdProvider] = None) -> DFA:
    """Blank automaton with a single initial, non-accepting state q0."""
    provider = id_provider or _default_provider
    now = datetime.now(timezone.utc)
    return DFA(
        id=provider.new_id(),
        name=name,
        description="",
        alphabet=[],
        states=[DFAState(id="q0", label="q0", x=300, y=200)],
        transitions=[],
        initial_state_id="q0",
        accepting_state_ids=[],
        created_at=now,
        updated_at=now,
    )

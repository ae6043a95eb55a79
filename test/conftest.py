import os
import sys

import pytest

# Make the repository root importable when running without installation
HERE = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(HERE, ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from dfa_engine.models import DFA, DFAState, DFATransition


def build_dfa(dfa_id, alphabet, state_ids, transitions, initial, accepting, name=None):
    """transitions: list of (from, symbol, to) triples, ids assigned t1, t2, ..."""
    return DFA(
        id=dfa_id,
        name=name or dfa_id,
        alphabet=list(alphabet),
        states=[DFAState(id=s, label=s) for s in state_ids],
        transitions=[
            DFATransition(id=f"t{i}", from_state_id=src, symbol=sym, to_state_id=dst)
            for i, (src, sym, dst) in enumerate(transitions, start=1)
        ],
        initial_state_id=initial,
        accepting_state_ids=list(accepting),
    )


def create_binary_ending_in_01():
    return build_dfa(
        "example-binary-01", "01", ["q0", "q1", "q2"],
        [
            ("q0", "0", "q1"), ("q0", "1", "q0"),
            ("q1", "0", "q1"), ("q1", "1", "q2"),
            ("q2", "0", "q1"), ("q2", "1", "q0"),
        ],
        "q0", ["q2"], name="Binary Strings Ending in 01",
    )


def create_even_number_of_zeros():
    return build_dfa(
        "example-even-zeros", "01", ["even", "odd"],
        [
            ("even", "0", "odd"), ("even", "1", "even"),
            ("odd", "0", "even"), ("odd", "1", "odd"),
        ],
        "even", ["even"], name="Even Number of 0s",
    )


def create_contains_aba():
    return build_dfa(
        "example-contains-aba", "ab", ["q0", "q1", "q2", "q3"],
        [
            ("q0", "a", "q1"), ("q0", "b", "q0"),
            ("q1", "a", "q1"), ("q1", "b", "q2"),
            ("q2", "a", "q3"), ("q2", "b", "q0"),
            ("q3", "a", "q3"), ("q3", "b", "q3"),
        ],
        "q0", ["q3"], name='Contains "aba"',
    )


def create_length_divisible_by_3():
    return build_dfa(
        "example-length-div-3", "01", ["q0", "q1", "q2"],
        [
            ("q0", "0", "q1"), ("q0", "1", "q1"),
            ("q1", "0", "q2"), ("q1", "1", "q2"),
            ("q2", "0", "q0"), ("q2", "1", "q0"),
        ],
        "q0", ["q0"], name="Length Divisible by 3",
    )


def create_simple_a_or_b():
    return build_dfa(
        "example-simple-a-or-b", "ab", ["start", "accept", "reject"],
        [
            ("start", "a", "accept"), ("start", "b", "accept"),
            ("accept", "a", "reject"), ("accept", "b", "reject"),
            ("reject", "a", "reject"), ("reject", "b", "reject"),
        ],
        "start", ["accept"], name='Accepts "a" or "b"',
    )


class CountingIdProvider:
    """Deterministic stand-in for the uuid provider."""

    def __init__(self, prefix="id"):
        self.prefix = prefix
        self.count = 0

    def new_id(self):
        self.count += 1
        return f"{self.prefix}-{self.count}"


@pytest.fixture
def ending_in_01():
    return create_binary_ending_in_01()


@pytest.fixture
def even_zeros():
    return create_even_number_of_zeros()


@pytest.fixture
def contains_aba():
    return create_contains_aba()


@pytest.fixture
def length_div_3():
    return create_length_divisible_by_3()


@pytest.fixture
def a_or_b():
    return create_simple_a_or_b()


@pytest.fixture
def id_provider():
    return CountingIdProvider()

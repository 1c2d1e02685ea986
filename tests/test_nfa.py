import io

import pytest
from loguru import logger

from lambdanfa.automata.alphabet import Alphabet
from lambdanfa.automata.builders import sample_nfa
from lambdanfa.automata.nfa import LambdaNFA, StateCountError


def chain_nfa():
    # 1 -a-> 2 -b-> 3, plus a lambda shortcut 1 -> 3
    nfa = LambdaNFA(3, 1, [3])
    assert nfa.add_transition(1, 2, "a")
    assert nfa.add_transition(2, 3, "b")
    assert nfa.add_transition(1, 3, "~")
    return nfa


def capture_logs(level):
    messages = []
    logger.enable("lambdanfa")
    handler_id = logger.add(messages.append, level=level, format="{message}")
    return messages, handler_id


def release_logs(handler_id):
    logger.remove(handler_id)
    logger.disable("lambdanfa")


def test_construction():
    nfa = LambdaNFA(4, 2, [3, 4])
    assert len(nfa) == 4
    assert nfa.state_count == 4
    assert nfa.start == 2
    assert nfa.accepting_states == {3, 4}
    assert [s.number for s in nfa.states] == [1, 2, 3, 4]
    assert nfa.state(3).accepting
    assert nfa.dirty
    assert repr(nfa) == "<LambdaNFA states=4 start=2 accepting=[3, 4]>"


def test_construction_needs_a_state():
    with pytest.raises(StateCountError):
        LambdaNFA(0, 1, [1])
    with pytest.raises(ValueError):
        LambdaNFA(-3, 1)
    assert LambdaNFA(1, 1, [1]).state_count == 1


def test_out_of_range_accepting_ids_are_ignored():
    # Construction drops unknown accepting identifiers instead of failing
    nfa = LambdaNFA(3, 1, [0, 3, 4, 3])
    assert nfa.accepting_states == {3}
    assert LambdaNFA(2, 1, []).accepting_states == frozenset()


def test_out_of_range_start_is_ignored():
    # Construction drops an unknown start identifier instead of failing; the
    # automaton is left without a start state and accepts nothing
    nfa = LambdaNFA(3, 7, [1, 2, 3])
    assert nfa.start is None
    assert nfa.add_transition(1, 2, "a")
    assert not nfa.accepts("")
    assert not nfa.accepts("a")
    assert nfa.longest_accepted_prefix("a") is None


def test_out_of_range_ids_are_logged():
    messages, handler_id = capture_logs("WARNING")
    try:
        LambdaNFA(3, 7, [3, 9])
    finally:
        release_logs(handler_id)
    assert any("start state 7" in m for m in messages)
    assert any("accepting state 9" in m for m in messages)


def test_add_accepting_state():
    nfa = LambdaNFA(3, 1)
    assert not nfa.accepts("")
    assert nfa.add_accepting_state(1)
    assert nfa.add_accepting_state(1)
    assert not nfa.add_accepting_state(4)
    assert nfa.accepting_states == {1}
    assert nfa.accepts("")


def test_valid_transitions():
    nfa = LambdaNFA(3, 1, [3])
    assert nfa.is_valid_transition(1, 3, "a")
    assert nfa.is_valid_transition(3, 3, "z")
    assert nfa.is_valid_transition(2, 1, "~")
    assert not nfa.is_valid_transition(0, 1, "a")
    assert not nfa.is_valid_transition(1, 4, "a")
    assert not nfa.is_valid_transition(1, 2, "A")
    assert not nfa.is_valid_transition(1, 2, "ab")
    assert not nfa.is_valid_transition(1, 2, "")
    assert not nfa.is_valid_transition("1", 2, "a")
    assert not nfa.is_valid_transition(True, 2, "a")
    # The predicate never changes the automaton
    assert nfa.render() == ""


def test_add_transition():
    nfa = LambdaNFA(3, 1, [3])
    assert nfa.add_transition(1, 2, "a")
    assert nfa.add_transition(1, 2, "a")
    assert nfa.add_transition(1, 3, "a")
    assert nfa.targets(1, "a") == [2, 2, 3]
    assert nfa.targets(2, "a") == []


def test_refused_transition_leaves_automaton_untouched():
    nfa = chain_nfa()
    nfa.accepts("ab")
    assert not nfa.dirty
    before = nfa.render()

    assert not nfa.add_transition(5, 1, "a")
    assert not nfa.add_transition(1, 1, "%")
    assert nfa.render() == before
    assert not nfa.dirty


def test_adding_marks_dirty():
    nfa = chain_nfa()
    assert nfa.dirty
    assert nfa.epsilon_closure(1) == {3}
    assert not nfa.dirty

    nfa.add_transition(3, 2, "~")
    assert nfa.dirty
    assert nfa.epsilon_closure(1) == {2, 3}
    assert nfa.epsilon_closure(3) == {2}
    assert not nfa.dirty


def test_chain_scenarios():
    nfa = chain_nfa()
    assert nfa.accepts("ab")
    assert nfa.accepts("")
    assert not nfa.accepts("a")
    assert not nfa.accepts("b")
    assert not nfa.accepts("abb")
    assert nfa.longest_accepted_prefix("ab") == "ab"
    assert nfa.longest_accepted_prefix("abab") == "ab"
    # Only the empty prefix is accepted
    assert nfa.longest_accepted_prefix("ba") == ""
    assert nfa.longest_accepted_prefix("") == ""


def test_no_prefix():
    nfa = LambdaNFA(3, 1, [3])
    nfa.add_transition(1, 2, "a")
    nfa.add_transition(2, 3, "b")
    assert nfa.longest_accepted_prefix("") is None
    assert nfa.longest_accepted_prefix("a") is None
    assert nfa.longest_accepted_prefix("ba") is None
    assert nfa.longest_accepted_prefix("abc") == "ab"


def test_bad_words():
    nfa = chain_nfa()
    assert not nfa.accepts(None)
    assert not nfa.accepts("aB")
    assert not nfa.accepts("a b")
    assert nfa.longest_accepted_prefix(None) is None
    assert nfa.longest_accepted_prefix("ab!") is None


def test_empty_word():
    nfa = LambdaNFA(3, 1, [3])
    assert not nfa.accepts("")
    nfa.add_transition(1, 2, "~")
    assert not nfa.accepts("")
    nfa.add_transition(2, 3, "~")
    assert nfa.accepts("")

    assert LambdaNFA(1, 1, [1]).accepts("")


def test_epsilon_cycles():
    nfa = LambdaNFA(4, 1, [4])
    nfa.add_transition(1, 2, "~")
    nfa.add_transition(2, 1, "~")
    nfa.add_transition(2, 2, "~")
    nfa.add_transition(2, 3, "a")
    nfa.add_transition(3, 1, "~")
    nfa.add_transition(3, 4, "b")

    assert nfa.epsilon_closure(1) == {2}
    assert nfa.epsilon_closure(2) == {1}
    assert nfa.epsilon_closure(3) == {1, 2}
    assert nfa.accepts("ab")
    assert nfa.accepts("aaab")
    assert not nfa.accepts("aaa")
    assert nfa.longest_accepted_prefix("aabab") == "aab"


def test_self_loops():
    nfa = LambdaNFA(2, 1, [2])
    nfa.add_transition(1, 1, "a")
    nfa.add_transition(1, 2, "b")
    nfa.add_transition(2, 2, "b")
    assert nfa.accepts("b")
    assert nfa.accepts("aaabbb")
    assert not nfa.accepts("aaa")
    assert not nfa.accepts("ba")
    assert nfa.longest_accepted_prefix("aabbab") == "aabb"


def test_nondeterminism():
    # Words ending in "ab"
    nfa = LambdaNFA(3, 1, [3])
    for c in "ab":
        nfa.add_transition(1, 1, c)
    nfa.add_transition(1, 2, "a")
    nfa.add_transition(2, 3, "b")
    assert nfa.accepts("ab")
    assert nfa.accepts("bbaab")
    assert not nfa.accepts("aba")
    assert nfa.longest_accepted_prefix("abaabba") == "abaab"


def test_epsilon_symbol_in_word_follows_epsilon_edges():
    # The epsilon symbol is part of the alphabet, so a word may contain it
    nfa = LambdaNFA(2, 1, [2])
    nfa.add_transition(1, 2, "~")
    assert nfa.accepts("")
    assert nfa.accepts("~")
    assert not nfa.accepts("~~")


def test_closure_is_transitive_and_excludes_self():
    nfa = sample_nfa()
    for state in nfa.states:
        closure = nfa.epsilon_closure(state.number)
        assert state.number not in closure
        for other in closure:
            assert nfa.epsilon_closure(other) - {state.number} <= closure


def test_targets_after_add():
    nfa = LambdaNFA(5, 1, [5])
    triples = [(1, 2, "a"), (2, 2, "~"), (5, 1, "z"), (3, 4, "a"), (3, 5, "a")]
    for src, dest, label in triples:
        nfa.add_transition(src, dest, label)
        assert dest in nfa.targets(src, label)


def test_adding_transitions_is_monotone():
    nfa = LambdaNFA(4, 1, [4])
    words = ["", "a", "ab", "ba", "abc", "c", "cc"]
    additions = [(1, 2, "a"), (2, 4, "b"), (1, 3, "~"), (3, 4, "c"), (4, 3, "~")]

    accepted = set()
    for src, dest, label in additions:
        nfa.add_transition(src, dest, label)
        now = {w for w in words if nfa.accepts(w)}
        assert accepted <= now
        accepted = now
    assert accepted == {"ab", "abc", "c", "cc"}


def test_prefix_is_longest_accepted():
    nfa = sample_nfa()
    for word in ["", "a", "ab", "aba", "abz", "aunx", "amax", "b", "clue"]:
        prefix = nfa.longest_accepted_prefix(word)
        accepted = [word[:k] for k in range(len(word) + 1) if nfa.accepts(word[:k])]
        if accepted:
            assert prefix == accepted[-1]
        else:
            assert prefix is None


def test_queries_are_repeatable():
    nfa = sample_nfa()
    results = [(nfa.accepts("aun"), nfa.longest_accepted_prefix("abaz")) for _ in range(3)]
    assert results == [(True, "aba")] * 3


def test_render():
    nfa = LambdaNFA(3, 1, [3])
    assert nfa.render() == ""
    nfa.add_transition(2, 3, "b")
    nfa.add_transition(1, 3, "~")
    nfa.add_transition(1, 2, "a")
    nfa.add_transition(1, 3, "a")
    assert nfa.render() == "(1, 2) a\n(1, 3) a\n(1, 3) ~\n(2, 3) b"
    assert str(nfa) == nfa.render()
    assert [tuple(t) for t in nfa.transitions()] == [
        (1, 2, "a"),
        (1, 3, "a"),
        (1, 3, "~"),
        (2, 3, "b"),
    ]

    stream = io.StringIO()
    nfa.dump(stream)
    assert stream.getvalue() == nfa.render() + "\n"


def test_custom_alphabet():
    ab = Alphabet("0", "1", "e")
    nfa = LambdaNFA(2, 1, [2], alphabet=ab)
    assert not nfa.add_transition(1, 2, "a")
    assert not nfa.add_transition(1, 2, "~")
    assert nfa.add_transition(1, 2, "1")
    assert nfa.add_transition(2, 1, "0")
    assert nfa.add_transition(2, 2, "e")
    assert nfa.accepts("101")
    assert not nfa.accepts("10")
    assert not nfa.accepts("ab")
    assert nfa.render() == "(1, 2) 1\n(2, 1) 0\n(2, 2) e"


def test_query_logging():
    messages, handler_id = capture_logs("DEBUG")
    try:
        nfa = chain_nfa()
        nfa.add_transition(9, 1, "a")
        nfa.accepts("ab")
        nfa.accepts("a?")
    finally:
        release_logs(handler_id)
    assert any("Refused transition (9, 1)" in m for m in messages)
    assert any("Recomputing epsilon closures of 3 states" in m for m in messages)
    assert any("accepts('ab') -> True" in m for m in messages)
    assert any("refusing word 'a?'" in m for m in messages)


def test_unknown_state_numbers():
    nfa = LambdaNFA(3, 1, [3])
    nfa.add_transition(3, 1, "a")
    nfa.add_transition(3, 2, "~")
    assert nfa.targets(3, "a") == [1]
    assert nfa.epsilon_closure(3) == {2}

    # Negative and zero identifiers must not wrap around to the last states
    for number in (0, -1, -3, 4, "1", None):
        assert nfa.targets(number, "a") == []
        assert nfa.epsilon_closure(number) == frozenset()
        with pytest.raises(IndexError):
            nfa.state(number)
    assert nfa.state(3).number == 3

"""Ready-made automata, mostly for demonstrations and tests."""

from lambdanfa.automata.alphabet import DEFAULT_ALPHABET
from lambdanfa.automata.nfa import LambdaNFA

# (source, target, label) triples of the demonstration automaton
SAMPLE_TRANSITIONS = (
    (1, 2, "~"),
    (2, 2, "~"),
    (2, 4, "~"),
    (2, 3, "a"),
    (3, 4, "b"),
    (3, 4, "~"),
    (4, 5, "a"),
    (4, 1, "~"),
    (5, 10, "~"),
    (5, 6, "c"),
    (6, 7, "l"),
    (7, 6, "a"),
    (7, 8, "e"),
    (8, 6, "~"),
    (7, 9, "u"),
    (9, 10, "n"),
    (10, 7, "~"),
    (5, 6, "~"),
    (9, 7, "r"),
    (7, 7, "d"),
    (7, 3, "m"),
    (5, 9, "~"),
)


def sample_nfa():
    """
    Builds the ten state demonstration automaton used by the shell's GENERATE
    command. State 1 is the start and state 10 the only accepting state; it
    has epsilon cycles (``2 -> 2``, ``1 -> 2 -> 4 -> 1``) and parallel edges.
    """
    nfa = LambdaNFA(10, 1, [10])
    for source, target, label in SAMPLE_TRANSITIONS:
        nfa.add_transition(source, target, label)
    return nfa


def string_nfa(word, alphabet=DEFAULT_ALPHABET):
    """
    Creates an automaton that accepts exactly ``word``.

    States ``1`` to ``len(word) + 1`` form a chain, state ``i`` moving to
    ``i + 1`` on ``word[i - 1]``; the last state is accepting.

    Args:
        word (str): The word to recognize. Every character must be a real
            symbol of ``alphabet``.
        alphabet (Alphabet): The alphabet of the new automaton.

    Raises:
        ValueError: If ``word`` contains a character that is not a symbol of
            ``alphabet``.
    """
    if not alphabet.valid_word(word, allow_epsilon=False):
        raise ValueError(f"{word!r} is not a word over {alphabet!r}")

    nfa = LambdaNFA(len(word) + 1, 1, [len(word) + 1], alphabet=alphabet)
    for i, label in enumerate(word, 1):
        nfa.add_transition(i, i + 1, label)
    return nfa

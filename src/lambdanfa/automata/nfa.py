import sys

from loguru import logger

from lambdanfa.automata.alphabet import DEFAULT_ALPHABET
from lambdanfa.automata.state import State
from lambdanfa.automata.transition import Transition

MINIMUM_STATES = 1


class StateCountError(ValueError):
    """Raised when an automaton is created with fewer than one state."""


class LambdaNFA:
    """
    A nondeterministic finite automaton with epsilon (lambda) transitions.

    The automaton owns a fixed, dense list of states numbered ``1`` to
    ``state_count``. Transitions refer to states by number, so epsilon cycles
    and self loops create no reference cycles between objects.

    Epsilon closures are cached on the states. Adding any transition marks the
    whole automaton dirty, and the next query that needs closures recomputes
    them for every state at once.

    Identifiers outside ``1..state_count`` given as ``start`` or in
    ``accepting`` are dropped without an error. An automaton whose start was
    dropped has no start state and accepts nothing.

    Args:
        state_count (int): Number of states, at least 1.
        start (int): Identifier of the start state.
        accepting (iterable): Identifiers of the accepting states.
        alphabet (Alphabet): The legal labels. Defaults to ``a``-``z`` with ``~``
            as epsilon.

    Raises:
        StateCountError: If ``state_count`` is less than 1.

    Example:
        >>> nfa = LambdaNFA(3, 1, [3])
        >>> nfa.add_transition(1, 2, "a")
        True
        >>> nfa.add_transition(2, 3, "b")
        True
        >>> nfa.accepts("ab")
        True
        >>> nfa.longest_accepted_prefix("abba")
        'ab'
    """

    def __init__(self, state_count, start=1, accepting=(), alphabet=DEFAULT_ALPHABET):
        if state_count < MINIMUM_STATES:
            raise StateCountError(
                f"An automaton needs at least {MINIMUM_STATES} state, got {state_count}"
            )

        self.alphabet = alphabet
        self.states = [State(n, alphabet=alphabet) for n in range(1, state_count + 1)]
        self.start = None
        self.dirty = True

        if self.in_range(start):
            self.start = start
        else:
            logger.warning("Ignoring out-of-range start state {}", start)
        for number in accepting:
            if not self.add_accepting_state(number):
                logger.warning("Ignoring out-of-range accepting state {}", number)

    def __len__(self):
        return len(self.states)

    def __repr__(self):
        return (
            f"<{self.__class__.__name__} states={len(self.states)} "
            f"start={self.start} accepting={sorted(self.accepting_states)}>"
        )

    def __str__(self):
        return self.render()

    @property
    def state_count(self):
        return len(self.states)

    @property
    def accepting_states(self):
        return frozenset(s.number for s in self.states if s.accepting)

    def in_range(self, number):
        return (
            isinstance(number, int)
            and not isinstance(number, bool)
            and MINIMUM_STATES <= number <= len(self.states)
        )

    def state(self, number):
        """
        Returns the :class:`State` with the given identifier.

        Raises:
            IndexError: If ``number`` is not in ``1..state_count``.
        """
        if not self.in_range(number):
            raise IndexError(
                f"No state {number!r} in an automaton of {len(self.states)} states"
            )
        return self.states[number - 1]

    def add_accepting_state(self, number):
        """
        Marks a state as accepting. Marking a state twice is harmless.

        Returns:
            bool: False (and no change) if ``number`` is out of range.
        """
        if not self.in_range(number):
            return False
        self.state(number).accepting = True
        return True

    # Construction

    def is_valid_transition(self, source, target, label):
        """
        Returns True if ``add_transition(source, target, label)`` would succeed:
        both identifiers are in range and the label is a symbol of the alphabet
        or its epsilon symbol.
        """
        return (
            self.in_range(source)
            and self.in_range(target)
            and self.alphabet.in_alphabet(label)
        )

    def add_transition(self, source, target, label):
        """
        Adds the edge ``source --label--> target``.

        Invalid requests are refused without raising and leave the automaton
        untouched, including its dirty flag.

        Returns:
            bool: True if the transition was added.
        """
        if not self.is_valid_transition(source, target, label):
            logger.debug("Refused transition ({}, {}) {!r}", source, target, label)
            return False

        transition = Transition(source, target, label, epsilon=self.alphabet.epsilon)
        self.state(source).add_outgoing(transition)
        self.dirty = True
        return True

    def _precompute_closures(self):
        if self.dirty:
            logger.debug("Recomputing epsilon closures of {} states", len(self.states))
            for state in self.states:
                state.compute_epsilon_closure(self.state)
            self.dirty = False

    # Inspection

    def epsilon_closure(self, number):
        """
        Returns the identifiers reachable from ``number`` by epsilon edges alone,
        not including ``number`` itself. Unknown identifiers have an empty
        closure.
        """
        if not self.in_range(number):
            return frozenset()
        self._precompute_closures()
        return self.state(number).epsilon_closure

    def targets(self, number, label):
        if not self.in_range(number):
            return []
        return self.state(number).targets_for(label)

    def transitions(self):
        """Yields every transition, state by state, in display order."""
        for state in self.states:
            yield from state.ordered_transitions()

    def render(self):
        """
        Returns one ``(source, target) label`` line per transition, states in
        ascending order and each state's transitions sorted by target then label.
        """
        return "\n".join(str(t) for t in self.transitions())

    def dump(self, stream=sys.stdout):
        text = self.render()
        if text:
            print(text, file=stream)

    # Queries

    def _expand(self, numbers):
        # A set of states together with everything in their epsilon closures
        expanded = set(numbers)
        for number in numbers:
            expanded.update(self.state(number).epsilon_closure)
        return expanded

    def _step(self, active, label):
        # Active set for the next cursor position
        reached = set()
        for number in active:
            reached.update(self.state(number).targets_for(label))
        return self._expand(reached)

    def _is_final(self, active):
        return any(self.state(number).accepting for number in active)

    def _initial(self, word, query):
        if not self.alphabet.valid_word(word):
            logger.debug("{}: refusing word {!r}", query, word)
            return None
        if self.start is None:
            logger.debug("{}: automaton has no start state", query)
            return None
        self._precompute_closures()
        return self._expand([self.start])

    def accepts(self, word):
        """
        Returns True if the automaton accepts ``word``.

        All paths are followed at once: the set of active states for each
        cursor position is built from the previous one, with epsilon closures
        already folded in, and the word is accepted if an accepting state is
        active once every character has been consumed.

        ``None`` and words with characters outside the alphabet are not
        accepted.
        """
        active = self._initial(word, "accepts")
        if active is None:
            return False

        for c in word:
            active = self._step(active, c)
            if not active:
                break

        result = self._is_final(active)
        logger.debug("accepts({!r}) -> {}", word, result)
        return result

    def longest_accepted_prefix(self, word):
        """
        Returns the longest prefix of ``word`` that the automaton accepts.

        The active set reached after ``k`` characters is reused to compute the
        set for ``k + 1``, so every prefix length from 0 to ``len(word)`` is
        checked in a single pass.

        Returns:
            str or None: The prefix (possibly ``""``), or None if no prefix is
            accepted, the word is None, or it contains a character outside the
            alphabet.
        """
        active = self._initial(word, "longest_accepted_prefix")
        if active is None:
            return None

        best = None
        for k in range(len(word) + 1):
            if self._is_final(active):
                best = word[:k]
            if k == len(word):
                break
            active = self._step(active, word[k])
            if not active:
                break

        logger.debug("longest_accepted_prefix({!r}) -> {!r}", word, best)
        return best

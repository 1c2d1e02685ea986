from functools import total_ordering

from lambdanfa.automata.alphabet import DEFAULT_ALPHABET


@total_ordering
class Transition:
    """
    An edge of a lambda NFA: ``source --label--> target``.

    States are referred to by their integer identifiers, never by object, so a
    transition holds no reference into the state graph. Transitions are
    immutable and hashable.

    Transitions are ordered for display only: first by target identifier, then
    by label, with the epsilon label sorting after every real symbol. Two
    transitions with the same target and label are equal in this order.

    Args:
        source (int): Identifier of the state the edge leaves.
        target (int): Identifier of the state the edge enters.
        label (str): A real symbol or the epsilon symbol.
        epsilon (str): The epsilon symbol of the owning automaton's alphabet.
    """

    __slots__ = ("_source", "_target", "_label", "_epsilon")

    def __init__(self, source, target, label, epsilon=DEFAULT_ALPHABET.epsilon):
        object.__setattr__(self, "_source", source)
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_label", label)
        object.__setattr__(self, "_epsilon", epsilon)

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    @property
    def source(self):
        return self._source

    @property
    def target(self):
        return self._target

    @property
    def label(self):
        return self._label

    @property
    def is_epsilon(self):
        return self._label == self._epsilon

    def matches(self, c):
        return self._label == c

    def sort_key(self):
        return self._target, self.is_epsilon, self._label

    def __eq__(self, other):
        if not isinstance(other, Transition):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other):
        if not isinstance(other, Transition):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self):
        return hash(self.sort_key())

    def __iter__(self):
        # Allows ``src, dest, label = transition``
        return iter((self._source, self._target, self._label))

    def __repr__(self):
        return (
            f"{self.__class__.__name__}({self._source!r}, {self._target!r}, "
            f"{self._label!r})"
        )

    def __str__(self):
        return f"({self._source}, {self._target}) {self._label}"

from collections import deque

from lambdanfa.automata.alphabet import DEFAULT_ALPHABET


class State:
    """
    A node of a lambda NFA.

    Outgoing transitions are kept in one bucket per label, in the dense slot
    order given by :meth:`Alphabet.label_index`. Several transitions may share a
    label (that is what makes the automaton nondeterministic) and all of them are
    kept, in insertion order.

    ``epsilon_closure`` is the frozenset of identifiers reachable from this state
    through one or more epsilon transitions. It never contains the state's own
    identifier, even on an epsilon cycle back to itself; traversals always add
    the state itself separately. The owning automaton fills it in with
    :meth:`compute_epsilon_closure`.

    Attributes:
        number (int): The state's identifier, stable for the automaton's life.
        accepting (bool): True if the state is an accepting (end) state.
    """

    def __init__(self, number, accepting=False, alphabet=DEFAULT_ALPHABET):
        self.number = number
        self.accepting = accepting
        self.alphabet = alphabet
        self.epsilon_closure = frozenset()
        self._buckets = [[] for _ in range(alphabet.size + 1)]

    def __repr__(self):
        end = " accepting" if self.accepting else ""
        return f"<{self.__class__.__name__} {self.number}{end}>"

    def add_outgoing(self, transition):
        """
        Appends a transition to the bucket of its label.

        No validation happens here beyond the label having a slot; checking the
        identifiers is the automaton's job.
        """
        self._buckets[self.alphabet.label_index(transition.label)].append(transition)

    def outgoing(self, label):
        """Returns the list of transitions leaving this state with ``label``."""
        if not self.alphabet.in_alphabet(label):
            return []
        return list(self._buckets[self.alphabet.label_index(label)])

    def targets_for(self, label):
        """
        Returns the identifiers of every state one ``label`` step away.

        A target appears once per transition, so parallel edges yield repeated
        identifiers. Labels outside the alphabet have no targets.
        """
        return [t.target for t in self.outgoing(label)]

    def compute_epsilon_closure(self, resolve):
        """
        Recomputes and stores :attr:`epsilon_closure`.

        This is a breadth-first search over epsilon edges with an explicit
        visited set, so it terminates on epsilon cycles.

        Args:
            resolve (callable): Maps a state identifier to its :class:`State`.

        Returns:
            frozenset: The new closure (identifiers, excluding this state).
        """
        epsilon = self.alphabet.epsilon
        visited = {self.number}
        queue = deque([self])
        closure = set()
        while queue:
            state = queue.popleft()
            for number in state.targets_for(epsilon):
                if number not in visited:
                    visited.add(number)
                    closure.add(number)
                    queue.append(resolve(number))

        self.epsilon_closure = frozenset(closure)
        return self.epsilon_closure

    def ordered_transitions(self):
        """All outgoing transitions, sorted by target then label (epsilon last)."""
        return sorted(t for bucket in self._buckets for t in bucket)

    def render(self):
        return "\n".join(str(t) for t in self.ordered_transitions())

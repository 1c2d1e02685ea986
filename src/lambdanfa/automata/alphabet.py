from cached_property import cached_property


class Alphabet:
    """
    A contiguous range of input symbols plus one epsilon (lambda) symbol.

    Alphabets are immutable, so they can be shared between automata.

    Labels are stored densely: a real symbol ``c`` lives in slot
    ``ord(c) - ord(first)`` and the epsilon symbol in the slot right after the
    last real symbol, so a state's outgoing index is a list of ``size + 1``
    buckets.

    Args:
        first (str): The first real symbol of the range.
        last (str): The last real symbol of the range (inclusive).
        epsilon (str): The symbol that labels epsilon transitions. It must lie
            outside the range.

    Raises:
        ValueError: If a bound is not a single character, the range is empty,
            or the epsilon symbol is part of the range.

    Example:
        >>> ab = Alphabet("a", "c")
        >>> ab.symbols
        'abc'
        >>> ab.label_index("~")
        3
    """

    def __init__(self, first="a", last="z", epsilon="~"):
        for name, value in (("first", first), ("last", last), ("epsilon", epsilon)):
            if not isinstance(value, str) or len(value) != 1:
                raise ValueError(f"{name} must be a single character, not {value!r}")
        if first > last:
            raise ValueError(f"Empty symbol range {first!r}-{last!r}")
        if first <= epsilon <= last:
            raise ValueError(f"Epsilon symbol {epsilon!r} is inside the symbol range")

        object.__setattr__(self, "first", first)
        object.__setattr__(self, "last", last)
        object.__setattr__(self, "epsilon", epsilon)

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{self.__class__.__name__} is immutable")

    def __repr__(self):
        return f"{self.__class__.__name__}({self.first!r}, {self.last!r}, {self.epsilon!r})"

    def __eq__(self, other):
        return (
            type(self) is type(other)
            and self.first == other.first
            and self.last == other.last
            and self.epsilon == other.epsilon
        )

    def __hash__(self):
        return hash((self.first, self.last, self.epsilon))

    def __contains__(self, c):
        return self.in_alphabet(c)

    @cached_property
    def size(self):
        """The number of real (non-epsilon) symbols."""
        return ord(self.last) - ord(self.first) + 1

    @cached_property
    def symbols(self):
        """All real symbols in ascending order, as a string."""
        start = ord(self.first)
        return "".join(chr(start + i) for i in range(self.size))

    @property
    def epsilon_index(self):
        return self.size

    def is_symbol(self, c):
        """Returns True if ``c`` is a real symbol of the range (not epsilon)."""
        return isinstance(c, str) and len(c) == 1 and self.first <= c <= self.last

    def is_epsilon(self, c):
        return c == self.epsilon

    def in_alphabet(self, c):
        """Returns True if ``c`` is a real symbol or the epsilon symbol."""
        return self.is_symbol(c) or self.is_epsilon(c)

    def label_index(self, c):
        """
        Maps a label to its dense storage slot.

        Args:
            c (str): A real symbol or the epsilon symbol.

        Returns:
            int: ``ord(c) - ord(first)`` for real symbols, ``size`` for epsilon.

        Raises:
            ValueError: If ``c`` is not in the alphabet.
        """
        if self.is_epsilon(c):
            return self.epsilon_index
        if not self.is_symbol(c):
            raise ValueError(f"{c!r} is not in {self!r}")
        return ord(c) - ord(self.first)

    def valid_word(self, word, allow_epsilon=True):
        """
        Returns True if ``word`` is a string made only of alphabet labels.

        ``None`` is never valid. With ``allow_epsilon=False`` the epsilon symbol
        is refused as well, which is how user-facing input is checked.
        """
        if not isinstance(word, str):
            return False
        check = self.in_alphabet if allow_epsilon else self.is_symbol
        return all(check(c) for c in word)


DEFAULT_ALPHABET = Alphabet("a", "z", "~")

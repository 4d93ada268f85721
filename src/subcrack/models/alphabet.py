from dataclasses import dataclass, field
from typing import Iterable, Tuple

from subcrack.errors import InvalidSymbolError


@dataclass(frozen=True, slots=True)
class Alphabet:
    """Ordered, case folded symbol set shared by ciphertext and plaintext."""

    symbols: str
    _index: dict = field(init=False, repr=False, compare=False)
    _letters: frozenset = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.symbols:
            raise ValueError("Alphabet must not be empty")
        if self.symbols != self.symbols.lower():
            raise ValueError("Alphabet symbols must be lowercase")
        if len(set(self.symbols)) != len(self.symbols):
            raise ValueError(f"Alphabet has repeated symbols: {self.symbols!r}")
        object.__setattr__(self, "_index", {s: i for i, s in enumerate(self.symbols)})
        # Same characters as the Key translate tables: symbols and their single character capitals.
        capitals = (s.upper() for s in self.symbols)
        object.__setattr__(self, "_letters", frozenset(self.symbols).union(c for c in capitals if len(c) == 1))

    @property
    def size(self) -> int:
        return len(self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._index

    def is_letter(self, char: str) -> bool:
        """True for a symbol or its capital, the characters a key translates."""
        return char in self._letters

    def index(self, symbol: str) -> int:
        """Position of a lowercase symbol. Raises InvalidSymbolError if foreign."""
        try:
            return self._index[symbol]
        except KeyError:
            raise InvalidSymbolError(symbol, self.symbols) from None

    def encode(self, word: str) -> Tuple[int, ...]:
        return tuple(self.index(c) for c in word.lower())

    def decode(self, indices: Iterable[int]) -> str:
        return "".join(self.symbols[i] for i in indices)

    def is_word(self, word: str) -> bool:
        """True for non-empty strings made only of alphabet symbols (any case)."""
        return bool(word) and all(self.is_letter(c) for c in word)


LATIN = Alphabet("abcdefghijklmnopqrstuvwxyz")

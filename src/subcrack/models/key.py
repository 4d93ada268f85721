import secrets
from random import Random
from typing import Iterable, Iterator, Optional, Tuple

from subcrack.errors import KeyConflictError
from subcrack.models.alphabet import LATIN, Alphabet

UNSET = "."


class Key:
    """Partial substitution key with a cipher->plain and a plain->cipher view.

    Both views are updated together by ``assign`` and ``unassign`` only, so for
    every assigned cipher symbol ``c``: ``cipher_for(plain_for(c)) == c``.
    Symbols are alphabet positions; the ``*_symbol`` helpers take characters.
    """

    __slots__ = ("alphabet", "_forward", "_inverse", "_count")

    def __init__(self, alphabet: Alphabet = LATIN):
        self.alphabet = alphabet
        self._forward: list[Optional[int]] = [None] * alphabet.size
        self._inverse: list[Optional[int]] = [None] * alphabet.size
        self._count = 0

    @classmethod
    def random(cls, alphabet: Alphabet = LATIN, rng: Optional[Random] = None) -> "Key":
        """A complete random key, for enciphering."""
        rng = rng or secrets.SystemRandom()
        ciphers = list(range(alphabet.size))
        rng.shuffle(ciphers)
        key = cls(alphabet)
        for plain, cipher in enumerate(ciphers):
            key.assign(cipher, plain)
        return key

    @classmethod
    def from_cipher_alphabet(cls, cipher_alphabet: str, alphabet: Alphabet = LATIN) -> "Key":
        """Parse the cipher letter for each plain letter in alphabet order, ``.`` for unknown.

        ``"bcd...za"`` enciphers ``a`` as ``b``, ``b`` as ``c`` and so on.
        """
        if len(cipher_alphabet) != alphabet.size:
            raise ValueError(
                f"Cipher alphabet must have {alphabet.size} symbols, got {len(cipher_alphabet)}"
            )
        key = cls(alphabet)
        for plain, cipher_symbol in enumerate(cipher_alphabet.lower()):
            if cipher_symbol == UNSET:
                continue
            key.assign(alphabet.index(cipher_symbol), plain)
        return key

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]], alphabet: Alphabet = LATIN) -> "Key":
        """Build a key from ``(cipher_symbol, plain_symbol)`` pairs."""
        key = cls(alphabet)
        for cipher_symbol, plain_symbol in pairs:
            key.assign_symbol(cipher_symbol, plain_symbol)
        return key

    # ---- Mutators ----

    def assign(self, cipher: int, plain: int) -> None:
        if self._forward[cipher] is not None:
            raise KeyConflictError(
                f"{self.alphabet.symbols[cipher]!r} already decodes to "
                f"{self.alphabet.symbols[self._forward[cipher]]!r}"
            )
        if self._inverse[plain] is not None:
            raise KeyConflictError(
                f"{self.alphabet.symbols[plain]!r} is already the decoding of "
                f"{self.alphabet.symbols[self._inverse[plain]]!r}"
            )
        self._forward[cipher] = plain
        self._inverse[plain] = cipher
        self._count += 1

    def unassign(self, cipher: int) -> None:
        plain = self._forward[cipher]
        if plain is None:
            return
        self._forward[cipher] = None
        self._inverse[plain] = None
        self._count -= 1

    def assign_symbol(self, cipher_symbol: str, plain_symbol: str) -> None:
        """Assign by character. Re-assigning an identical pair is a no-op."""
        cipher = self.alphabet.index(cipher_symbol.lower())
        plain = self.alphabet.index(plain_symbol.lower())
        if self._forward[cipher] == plain:
            return
        self.assign(cipher, plain)

    # ---- Queries ----

    def plain_for(self, cipher: int) -> Optional[int]:
        return self._forward[cipher]

    def cipher_for(self, plain: int) -> Optional[int]:
        return self._inverse[plain]

    def covers(self, symbols: Iterable[int]) -> bool:
        """True when every cipher symbol already has a plain symbol."""
        forward = self._forward
        return all(forward[s] is not None for s in symbols)

    def decode(self, symbols: Iterable[int], unknown: str = UNSET) -> str:
        """Decode cipher symbols, rendering unassigned ones as ``unknown``."""
        letters = self.alphabet.symbols
        return "".join(
            unknown if self._forward[s] is None else letters[self._forward[s]] for s in symbols
        )

    def is_consistent(self) -> bool:
        """Check that the forward and inverse views describe the same bijection."""
        assigned = 0
        for cipher, plain in enumerate(self._forward):
            if plain is None:
                continue
            assigned += 1
            if self._inverse[plain] != cipher:
                return False
        inverse_assigned = sum(1 for cipher in self._inverse if cipher is not None)
        return assigned == inverse_assigned == self._count

    def items(self) -> Iterator[Tuple[str, str]]:
        """Assigned ``(cipher_symbol, plain_symbol)`` pairs in cipher alphabet order."""
        letters = self.alphabet.symbols
        for cipher, plain in enumerate(self._forward):
            if plain is not None:
                yield letters[cipher], letters[plain]

    def cipher_alphabet(self) -> str:
        """Inverse of ``from_cipher_alphabet``."""
        letters = self.alphabet.symbols
        return "".join(UNSET if c is None else letters[c] for c in self._inverse)

    def is_complete(self) -> bool:
        return self._count == self.alphabet.size

    # ---- str.translate tables ----

    def decipher_table(self, unknown: Optional[str] = None) -> dict[int, str]:
        """Translation table cipher->plain for both cases.

        Unassigned cipher letters map to ``unknown`` when given and are otherwise
        left out of the table, so they pass through unchanged like any character
        outside the alphabet.
        """
        return self._table(self._forward, unknown)

    def encipher_table(self) -> dict[int, str]:
        """Translation table plain->cipher for both cases.

        Plain letters without a cipher letter are left as they are, which is only
        reversible while no assigned plain letter enciphers to them; otherwise
        KeyConflictError is raised.
        """
        letters = self.alphabet.symbols
        for plain, cipher in enumerate(self._inverse):
            if cipher is None and self._forward[plain] is not None:
                raise KeyConflictError(
                    f"{letters[plain]!r} has no cipher letter and would be left as is, "
                    f"but {letters[self._forward[plain]]!r} already enciphers to it"
                )
        return self._table(self._inverse, None)

    def _table(self, mapping: list[Optional[int]], unknown: Optional[str]) -> dict[int, str]:
        letters = self.alphabet.symbols
        table: dict[int, str] = {}
        for source, target in enumerate(mapping):
            symbol = letters[source]
            if target is None:
                if unknown is None:
                    continue
                lower = upper = unknown
            else:
                lower = letters[target]
                upper = lower.upper()
            table[ord(symbol)] = lower
            capital = symbol.upper()
            if len(capital) == 1 and capital != symbol:
                table[ord(capital)] = upper
        return table

    # ---- Dunder ----

    def copy(self) -> "Key":
        clone = Key(self.alphabet)
        clone._forward = self._forward[:]
        clone._inverse = self._inverse[:]
        clone._count = self._count
        return clone

    def __len__(self) -> int:
        return self._count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self.alphabet == other.alphabet and self._forward == other._forward

    __hash__ = None

    def __repr__(self) -> str:
        return f"Key({self.cipher_alphabet()!r})"

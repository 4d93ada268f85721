from dataclasses import dataclass
from typing import List, Optional

from subcrack.models.alphabet import LATIN, Alphabet
from subcrack.models.key import Key


@dataclass(frozen=True, slots=True)
class Token:
    """A maximal run of alphabet symbols and where it starts in the source text."""

    text: str
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def normalized(self) -> str:
        return self.text.lower()


def tokenize(text: str, alphabet: Alphabet = LATIN) -> List[Token]:
    tokens = []
    start = None
    for i, char in enumerate(text):
        if alphabet.is_letter(char):
            if start is None:
                start = i
        elif start is not None:
            tokens.append(Token(text[start:i], start))
            start = None
    if start is not None:
        tokens.append(Token(text[start:], start))
    return tokens


def apply_key(ciphertext: str, key: Key, unknown: Optional[str] = None) -> str:
    """Decipher text, keeping case, separators and foreign characters as they are."""
    return ciphertext.translate(key.decipher_table(unknown))


def encipher(plaintext: str, key: Key) -> str:
    """Forward substitution through the key's plain->cipher view."""
    return plaintext.translate(key.encipher_table())

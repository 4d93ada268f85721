from collections import Counter
from dataclasses import dataclass, field
from typing import Literal, Tuple

from subcrack.errors import UnknownLanguageError
from subcrack.models.alphabet import LATIN, Alphabet

type GuessOrder = Literal["aligned", "frequency"]


@dataclass(frozen=True, slots=True)
class FrequencyModel:
    """Alphabet symbols of a language, most frequent first."""

    language: str
    order: str
    alphabet: Alphabet = LATIN
    ranked: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if sorted(self.order) != sorted(self.alphabet.symbols):
            raise ValueError(
                f"Frequency order for {self.language} must be a permutation of {self.alphabet.symbols!r}"
            )
        object.__setattr__(self, "ranked", self.alphabet.encode(self.order))

    def aligned_order(self, start_rank: int) -> Tuple[int, ...]:
        """Plain symbols fanning out from ``start_rank``: r, r-1, r+1, r-2, r+2, ...

        Once one side runs out the other side continues on its own.
        """
        size = len(self.ranked)
        start_rank = min(max(start_rank, 0), size - 1)
        order = [self.ranked[start_rank]]
        for distance in range(1, size):
            if start_rank - distance >= 0:
                order.append(self.ranked[start_rank - distance])
            if start_rank + distance < size:
                order.append(self.ranked[start_rank + distance])
        return tuple(order)


ENGLISH = FrequencyModel("english", "etaonihsrdluwmcfgypbkvjxqz")
FRENCH = FrequencyModel("french", "easitnrulodcpmvqfbghjxyzwk")
GERMAN = FrequencyModel("german", "enisratdhulcgmobwfkzpvjyxq")
SPANISH = FrequencyModel("spanish", "eaosrnidlctumpbgvyqhfzjxwk")

LANGUAGES = {model.language: model for model in (ENGLISH, FRENCH, GERMAN, SPANISH)}


def get_language(name: str) -> FrequencyModel:
    try:
        return LANGUAGES[name.lower()]
    except KeyError:
        raise UnknownLanguageError(
            f"Unknown language {name!r}, expected one of: {', '.join(sorted(LANGUAGES))}"
        ) from None


def observed_order(text: str, alphabet: Alphabet = LATIN) -> Tuple[int, ...]:
    """Alphabet symbols ranked by how often they occur in text.

    Ties, including symbols that never occur, keep alphabet order.
    """
    counts = Counter(c.lower() for c in text if alphabet.is_letter(c))
    return tuple(
        sorted(range(alphabet.size), key=lambda s: -counts[alphabet.symbols[s]])
    )


def guess_table(
    model: FrequencyModel,
    ciphertext: str,
    strategy: GuessOrder = "aligned",
) -> Tuple[Tuple[int, ...], ...]:
    """Candidate plain symbols to try, in order, for every cipher symbol."""
    if strategy == "frequency":
        return tuple(model.ranked for _ in range(model.alphabet.size))
    if strategy != "aligned":
        raise ValueError(f"Invalid guess order: {strategy}")

    table: list[Tuple[int, ...]] = [()] * model.alphabet.size
    for rank, cipher in enumerate(observed_order(ciphertext, model.alphabet)):
        table[cipher] = model.aligned_order(rank)
    return tuple(table)

import math
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Tuple

import structlog

from subcrack.models.alphabet import LATIN, Alphabet
from subcrack.text import Token

log = structlog.get_logger()

TARGET_DISTINCT = 7
SKIP_FRACTION = 0.10


@dataclass(frozen=True, slots=True)
class CipherWord:
    text: str
    symbols: Tuple[int, ...]
    distinct: int
    occurrences: int = 1

    def __len__(self) -> int:
        return len(self.symbols)


@dataclass(frozen=True, slots=True)
class Plan:
    words: Tuple[CipherWord, ...]
    skip_budget: int


def skip_budget(word_count: int, skip_fraction: float = SKIP_FRACTION) -> int:
    if not 0.0 <= skip_fraction <= 1.0:
        raise ValueError(f"skip_fraction must be within [0, 1], got {skip_fraction}")
    # Guard against 0.1 * 30 == 3.0000000000000004 style float noise in both directions.
    return math.floor(skip_fraction * word_count + 1e-9)


def plan(
    tokens: Iterable[Token],
    alphabet: Alphabet = LATIN,
    *,
    target_distinct: int = TARGET_DISTINCT,
    skip_fraction: float = SKIP_FRACTION,
) -> Plan:
    """Order the distinct cipher words so the most informative ones are resolved first.

    Words whose distinct letter count is close to ``target_distinct`` constrain the
    key the most without branching too widely. Ties go to longer words, then to
    words that occur more often, then to the cipher word itself, so the plan only
    depends on which words occur and how often.
    """
    occurrences = Counter(token.normalized for token in tokens)

    words = []
    for text, count in occurrences.items():
        symbols = alphabet.encode(text)
        words.append(CipherWord(text, symbols, len(set(symbols)), count))

    words.sort(
        key=lambda w: (abs(w.distinct - target_distinct), -len(w.symbols), -w.occurrences, w.text)
    )
    budget = skip_budget(len(words), skip_fraction)

    log.debug("planned words", words=len(words), skip_budget=budget, first=[w.text for w in words[:5]])
    return Plan(tuple(words), budget)

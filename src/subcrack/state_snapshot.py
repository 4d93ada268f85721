from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True, slots=True)
class SearchSnapshot:
    """Minimal immutable snapshot of the key search."""

    state_version: int
    complete: bool
    steps: int
    word_index: int
    word_count: int
    skips_used: int
    skip_budget: int

    key: str = ""
    cipher_words: Tuple[str, ...] = field(default_factory=tuple)
    decoded_words: Tuple[str, ...] = field(default_factory=tuple)
    skipped_words: Tuple[str, ...] = field(default_factory=tuple)

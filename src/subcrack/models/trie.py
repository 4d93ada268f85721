"""
Prefix tree over dictionary words, stored as an index arena.

Every node owns one fixed-width row of child slots in a single flat list, so the
child of ``node`` for alphabet position ``s`` lives at ``links[node * width + s]``.
A slot holds the child's node index or ``NO_NODE``. Terminal flags sit in a
parallel list. Nodes are only ever appended; the dictionary is read-only once
loaded.

The engine walks nodes directly through ``child`` and ``is_terminal``; the string
methods ``contains`` and ``has_prefix`` are the same walk for callers that hold
plain words.
"""
from typing import Iterable, Sequence

import structlog

from subcrack.models.alphabet import LATIN, Alphabet

log = structlog.get_logger()

ROOT = 0
NO_NODE = -1


class Trie:
    __slots__ = ("alphabet", "_width", "_links", "_terminal", "_word_count")

    def __init__(self, alphabet: Alphabet = LATIN):
        self.alphabet = alphabet
        self._width = alphabet.size
        self._links: list[int] = [NO_NODE] * self._width
        self._terminal: list[bool] = [False]
        self._word_count = 0

    @classmethod
    def from_words(cls, words: Iterable[str], alphabet: Alphabet = LATIN) -> "Trie":
        """Build a dictionary, skipping words with symbols outside the alphabet."""
        trie = cls(alphabet)
        rejected = 0
        for word in words:
            word = word.strip().lower()
            if not word:
                continue
            if not alphabet.is_word(word):
                rejected += 1
                continue
            trie.insert(word)
        if rejected:
            log.warning("dictionary words rejected", rejected=rejected, alphabet=alphabet.symbols)
        log.debug("dictionary loaded", words=trie._word_count, nodes=trie.node_count)
        return trie

    def _create(self) -> int:
        self._links.extend([NO_NODE] * self._width)
        self._terminal.append(False)
        return len(self._terminal) - 1

    # ---- Index level, used by the search ----

    def child(self, node: int, symbol: int) -> int:
        return self._links[node * self._width + symbol]

    def is_terminal(self, node: int) -> bool:
        return self._terminal[node]

    def walk(self, symbols: Sequence[int], node: int = ROOT) -> int:
        """Follow symbols from node. Returns NO_NODE as soon as the path leaves the trie."""
        links = self._links
        width = self._width
        for symbol in symbols:
            node = links[node * width + symbol]
            if node == NO_NODE:
                return NO_NODE
        return node

    # ---- Word level ----

    def insert(self, word: str) -> bool:
        """Insert a word. Returns False for the empty word and for words already present."""
        symbols = self.alphabet.encode(word)
        if not symbols:
            return False

        node = ROOT
        for symbol in symbols:
            slot = node * self._width + symbol
            next_node = self._links[slot]
            if next_node == NO_NODE:
                next_node = self._create()
                self._links[slot] = next_node
            node = next_node

        if self._terminal[node]:
            return False
        self._terminal[node] = True
        self._word_count += 1
        return True

    def _find(self, word: str) -> int:
        if not all(c in self.alphabet for c in word):
            return NO_NODE
        return self.walk(self.alphabet.encode(word))

    def contains(self, word: str) -> bool:
        node = self._find(word.lower())
        return node != NO_NODE and self._terminal[node]

    def has_prefix(self, prefix: str) -> bool:
        if self._word_count == 0:
            return False
        return self._find(prefix.lower()) != NO_NODE

    def __contains__(self, word: str) -> bool:
        return self.contains(word)

    def __len__(self) -> int:
        return self._word_count

    @property
    def word_count(self) -> int:
        return self._word_count

    @property
    def node_count(self) -> int:
        return len(self._terminal)

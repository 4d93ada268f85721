"""
Depth-first key search over the planned cipher words.

Two choice points interleave: the next word to resolve (fixed by the plan) and the
plain symbol for the next unassigned cipher symbol inside that word. A decoded
prefix that leaves the trie is abandoned at once. Each assignment is undone on
every failing path, so a frame never sees key state left behind by a sibling.

Recursion only happens where the search branches (one frame per tentative
assignment and per word that introduces new cipher symbols, plus one per skipped
word); words the key already decodes fully are checked in a loop.
"""
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import structlog

from subcrack.algorithm.planner import CipherWord
from subcrack.errors import SearchAbortedError
from subcrack.models.key import Key
from subcrack.models.trie import NO_NODE, ROOT, Trie
from subcrack.state_queue import SingleSlotQueue
from subcrack.state_snapshot import SearchSnapshot

log = structlog.get_logger()

# Deadline and cancellation are polled every CHECK_EVERY steps.
CHECK_EVERY = 1024
PUBLISH_EVERY = 512


@dataclass(frozen=True, slots=True)
class SearchResult:
    key: Key
    skipped: Tuple[CipherWord, ...]
    steps: int


class BacktrackingEngine:
    def __init__(
        self,
        trie: Trie,
        guesses: Sequence[Sequence[int]],
        *,
        max_steps: Optional[int] = None,
        time_limit: Optional[float] = None,
        state_queue: Optional[SingleSlotQueue[SearchSnapshot]] = None,
        publish_every: int = PUBLISH_EVERY,
    ):
        if len(guesses) != trie.alphabet.size:
            raise ValueError("Need one guess order per alphabet symbol")
        self._trie = trie
        self._guesses = guesses
        self._max_steps = max_steps
        self._time_limit = time_limit
        self._state_queue = state_queue
        self._publish_every = publish_every

        self._words: Tuple[CipherWord, ...] = ()
        self._key = Key(trie.alphabet)
        self._trail: List[int] = []
        self._skipped: List[CipherWord] = []
        self._skip_budget = 0
        self._steps = 0
        self._version = 0
        self._deadline: Optional[float] = None

    @property
    def steps(self) -> int:
        return self._steps

    def solve(
        self,
        words: Sequence[CipherWord],
        skip_budget: int,
        key: Optional[Key] = None,
    ) -> Optional[SearchResult]:
        """Find the first key that decodes every word but at most ``skip_budget`` of them.

        ``key`` seeds the search with known assignments. It is extended during the
        search and handed back exactly as it came in, whatever the outcome; a
        success is returned as a copy in the result. Returns None when the search
        space is exhausted and raises SearchAbortedError when a budget runs out.
        """
        self._words = tuple(words)
        self._key = key if key is not None else Key(self._trie.alphabet)
        self._trail = []
        self._skipped = []
        self._skip_budget = skip_budget
        self._steps = 0
        self._deadline = time.monotonic() + self._time_limit if self._time_limit else None

        log.debug("search started", words=len(self._words), skip_budget=skip_budget, seeded=len(self._key))
        try:
            found = self._solve(0, skip_budget)
            if not found:
                log.debug("search exhausted", steps=self._steps)
                return None
            result = SearchResult(self._key.copy(), tuple(self._skipped), self._steps)
            self._publish(len(self._words), complete=True)
            log.debug("search succeeded", steps=self._steps, skipped=len(result.skipped))
            return result
        finally:
            self._unwind()

    def _unwind(self) -> None:
        while self._trail:
            self._key.unassign(self._trail.pop())

    def _solve(self, position: int, skips_left: int) -> bool:
        """Resolve words[position:] with at most ``skips_left`` of them skipped."""
        words = self._words
        key = self._key
        trie = self._trie
        skipped_before = len(self._skipped)

        # A fully decoded word cannot branch: it is a dictionary word or it costs a skip.
        while position < len(words) and key.covers(words[position].symbols):
            word = words[position]
            self._tick(position)
            node = trie.walk([key.plain_for(s) for s in word.symbols])
            if node == NO_NODE or not trie.is_terminal(node):
                if skips_left == 0:
                    del self._skipped[skipped_before:]
                    return False
                skips_left -= 1
                self._skipped.append(word)
            position += 1

        if position == len(words):
            return True

        word = words[position]
        if self._resolve(word, 0, ROOT, position, skips_left):
            return True

        if skips_left > 0:
            self._skipped.append(word)
            if self._solve(position + 1, skips_left - 1):
                return True

        del self._skipped[skipped_before:]
        return False

    def _resolve(self, word: CipherWord, letter: int, node: int, position: int, skips_left: int) -> bool:
        """Decode word from ``letter`` on, starting at trie ``node``, then continue with the next word."""
        symbols = word.symbols
        key = self._key
        trie = self._trie

        while letter < len(symbols):
            plain = key.plain_for(symbols[letter])
            if plain is None:
                break
            node = trie.child(node, plain)
            if node == NO_NODE:
                return False
            letter += 1
        else:
            return trie.is_terminal(node) and self._solve(position + 1, skips_left)

        cipher = symbols[letter]
        for plain in self._guesses[cipher]:
            if key.cipher_for(plain) is not None:
                continue
            child = trie.child(node, plain)
            if child == NO_NODE:
                continue

            self._tick(position)
            key.assign(cipher, plain)
            self._trail.append(cipher)
            if self._resolve(word, letter + 1, child, position, skips_left):
                return True
            self._trail.pop()
            key.unassign(cipher)

        return False

    def _tick(self, position: int) -> None:
        self._steps += 1
        if self._max_steps is not None and self._steps > self._max_steps:
            raise SearchAbortedError("step budget exhausted", self._steps)
        if self._steps % self._publish_every == 0:
            self._publish(position)
        if self._steps % CHECK_EVERY:
            return
        if self._deadline is not None and time.monotonic() > self._deadline:
            raise SearchAbortedError("time limit reached", self._steps)
        if self._state_queue is not None and self._state_queue.closed:
            raise SearchAbortedError("cancelled", self._steps)

    def _publish(self, position: int, complete: bool = False) -> None:
        if self._state_queue is None:
            return
        self._version += 1
        snapshot = SearchSnapshot(
            state_version=self._version,
            complete=complete,
            steps=self._steps,
            word_index=position,
            word_count=len(self._words),
            skips_used=len(self._skipped),
            skip_budget=self._skip_budget,
            key=self._key.cipher_alphabet(),
            cipher_words=tuple(w.text for w in self._words),
            decoded_words=tuple(self._key.decode(w.symbols) for w in self._words),
            skipped_words=tuple(w.text for w in self._skipped),
        )
        self._state_queue.publish(snapshot)

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple, Union

import structlog

from subcrack.algorithm.backtrack import BacktrackingEngine, SearchResult
from subcrack.algorithm.planner import plan
from subcrack.config import DecryptConfig
from subcrack.errors import EmptyDictionaryError, NoKeyFoundError
from subcrack.models.alphabet import LATIN, Alphabet
from subcrack.models.frequency import ENGLISH, FrequencyModel, guess_table
from subcrack.models.key import Key
from subcrack.models.trie import Trie
from subcrack.state_queue import SingleSlotQueue
from subcrack.state_snapshot import SearchSnapshot
from subcrack.text import apply_key, encipher, tokenize

log = structlog.get_logger()

Dictionary = Union[Trie, Iterable[str]]


@dataclass(frozen=True, slots=True)
class Solution:
    plaintext: str
    key: Key
    skipped: Tuple[str, ...]
    word_count: int
    skip_budget: int
    steps: int
    language: str


def build_dictionary(words: Dictionary, alphabet: Alphabet = LATIN) -> Trie:
    """Load words into a trie. An already built trie is used as is."""
    if isinstance(words, Trie):
        if words.alphabet != alphabet:
            raise ValueError("Dictionary alphabet does not match the language alphabet")
        return words
    return Trie.from_words(words, alphabet)


def solve_ciphertext(
    ciphertext: str,
    dictionary: Dictionary,
    language: FrequencyModel = ENGLISH,
    *,
    config: Optional[DecryptConfig] = None,
    hints: Optional[Mapping[str, str]] = None,
    state_queue: Optional[SingleSlotQueue[SearchSnapshot]] = None,
) -> Solution:
    """
    Recover the key of a monoalphabetic substitution and decipher the text.
    - dictionary: words of the plaintext language, or a prebuilt Trie
    - hints: known cipher letter -> plain letter pairs to seed the key with
    - state_queue: receives search snapshots; closed when this returns
    Raises EmptyDictionaryError before searching when no word is usable, and
    NoKeyFoundError (SearchAbortedError on budget or cancel) when no key is found.
    """
    config = config or DecryptConfig()
    alphabet = language.alphabet

    try:
        trie = build_dictionary(dictionary, alphabet)
        if len(trie) == 0:
            raise EmptyDictionaryError("No usable words in the dictionary")

        tokens = tokenize(ciphertext, alphabet)
        word_plan = plan(
            tokens,
            alphabet,
            target_distinct=config.target_distinct,
            skip_fraction=config.skip_fraction,
        )
        seed = Key.from_pairs((hints or {}).items(), alphabet)
        engine = BacktrackingEngine(
            trie,
            guess_table(language, ciphertext, config.guess_order),
            max_steps=config.max_steps,
            time_limit=config.time_limit,
            state_queue=state_queue,
            publish_every=config.publish_every,
        )
        log.info(
            "decrypting",
            language=language.language,
            tokens=len(tokens),
            words=len(word_plan.words),
            skip_budget=word_plan.skip_budget,
            dictionary_words=len(trie),
        )

        if config.escalate_skips:
            budgets = range(word_plan.skip_budget + 1)
        else:
            budgets = (word_plan.skip_budget,)

        result: Optional[SearchResult] = None
        steps = 0
        for budget in budgets:
            result = engine.solve(word_plan.words, budget, key=seed)
            steps += engine.steps
            if result is not None:
                break
            log.info("no key within skip budget", skip_budget=budget, steps=engine.steps)

        if result is None:
            raise NoKeyFoundError(
                f"No key decodes the ciphertext with at most {word_plan.skip_budget} "
                f"of {len(word_plan.words)} distinct words skipped"
            )
    finally:
        if state_queue is not None:
            state_queue.close()

    plaintext = apply_key(ciphertext, result.key, config.unknown_marker)
    skipped = tuple(word.text for word in result.skipped)
    log.info("solved", steps=steps, skipped=len(skipped), key=result.key.cipher_alphabet())

    return Solution(
        plaintext=plaintext,
        key=result.key,
        skipped=skipped,
        word_count=len(word_plan.words),
        skip_budget=word_plan.skip_budget,
        steps=steps,
        language=language.language,
    )


def decrypt(
    ciphertext: str,
    dictionary: Dictionary,
    language: FrequencyModel = ENGLISH,
    **kwargs,
) -> str:
    """Decipher text without a key. See solve_ciphertext for the options."""
    return solve_ciphertext(ciphertext, dictionary, language, **kwargs).plaintext


def encrypt(plaintext: str, key: Key) -> str:
    return encipher(plaintext, key)

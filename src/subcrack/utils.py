from typing import Iterable, Iterator, List, Optional, Tuple

import requests

from subcrack.errors import DictionarySourceError, TextFileError
from subcrack.models.alphabet import LATIN, Alphabet
from subcrack.text import tokenize

DOWNLOAD_TIMEOUT = 20


def normalize_words(lines: Iterable[str], alphabet: Alphabet = LATIN) -> Iterator[str]:
    """Split lines into lowercase words on every character outside the alphabet."""
    for line in lines:
        for token in tokenize(line, alphabet):
            yield token.normalized


def read_wordlist(path: str, alphabet: Alphabet = LATIN) -> List[str]:
    """Load a word list file, one or more words per line."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return list(normalize_words(f, alphabet))
    except OSError as e:
        raise DictionarySourceError(f"Cannot read word list {path}: {e}") from e


def fetch_wordlist(url: str, alphabet: Alphabet = LATIN, *, timeout: float = DOWNLOAD_TIMEOUT) -> List[str]:
    """Download a word list, e.g. a raw words_alpha.txt."""
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise DictionarySourceError(f"Failed to get {url}: {e}") from e
    if response.status_code != 200:
        raise DictionarySourceError(f"Failed to get {url}: {response.status_code} {response.text[:200]}")
    return list(normalize_words(response.text.splitlines(), alphabet))


def read_text(path: Optional[str], stream) -> str:
    """Read the whole input from a file path, or from stream when no path is given."""
    if path is None:
        return stream.read()
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise TextFileError(f"Cannot read input {path}: {e}") from e


def write_text(path: str, text: str) -> None:
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise TextFileError(f"Cannot write output {path}: {e}") from e


def parse_hint(value: str) -> Tuple[str, str]:
    """Parse ``c=p``: cipher letter c is known to decode to plain letter p."""
    cipher, sep, plain = value.partition("=")
    if not sep or len(cipher.strip()) != 1 or len(plain.strip()) != 1:
        raise ValueError(f"Hint must look like 'x=e', got {value!r}")
    return cipher.strip().lower(), plain.strip().lower()

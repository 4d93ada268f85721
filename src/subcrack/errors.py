class SubcrackError(Exception):
    pass


class InvalidSymbolError(SubcrackError, ValueError):
    """A character outside the alphabet was used where a strict mapping is required."""

    def __init__(self, symbol: str, alphabet: str):
        super().__init__(f"Symbol {symbol!r} is not in the alphabet {alphabet!r}")
        self.symbol = symbol


class KeyConflictError(SubcrackError, ValueError):
    """An assignment would map two symbols onto the same symbol."""


class UnknownLanguageError(SubcrackError, KeyError):
    pass


class EmptyDictionaryError(SubcrackError, RuntimeError):
    pass


class NoKeyFoundError(SubcrackError, RuntimeError):
    pass


class SearchAbortedError(NoKeyFoundError):
    """The search hit its step budget, its time limit, or was cancelled."""

    def __init__(self, reason: str, steps: int):
        super().__init__(f"Search aborted after {steps} steps: {reason}")
        self.reason = reason
        self.steps = steps


class DictionarySourceError(SubcrackError, RuntimeError):
    pass


class TextFileError(SubcrackError, RuntimeError):
    """The input text could not be read or the result could not be written."""

from typing import List

from pydantic import BaseModel


class DecryptReport(BaseModel):
    plaintext: str
    key: str
    language: str
    skipped_words: List[str]
    word_count: int
    skip_budget: int
    steps: int

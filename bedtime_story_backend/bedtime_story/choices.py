"""
Normalization of free-text choice lists returned by the language model.

The model is asked for three numbered choices but nothing guarantees the
shape of its answer, so the raw text is cleaned up rather than parsed.
"""
import re
from typing import Iterable, List, Union

from .settings import CHOICE_MAX_WORDS

MAX_CHOICES = 3

_ORDINAL_PREFIX = re.compile(r"^\d+\.\s*")

def count_words(text: str) -> int:
    return len(text.split())

def normalize_choices(
    raw: Union[str, Iterable[str]],
    limit: int = MAX_CHOICES,
    max_words: int = CHOICE_MAX_WORDS,
) -> List[str]:
    """
    trim -> drop blank -> strip "<n>. " -> drop over-length -> keep `limit` -> renumber.

    Never raises on malformed input; the worst case is an empty list.
    """
    lines = raw.split("\n") if isinstance(raw, str) else list(raw)
    kept: List[str] = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        choice = _ORDINAL_PREFIX.sub("", line).strip()
        # A bare "2." leaves nothing worth offering
        if not choice or count_words(choice) > max_words:
            continue
        kept.append(choice)
        if len(kept) == limit:
            break
    return [f"{i}. {choice}" for i, choice in enumerate(kept, start=1)]

# Normalizers (sentence -> sentence) and the tokenizer shared by training and search
from __future__ import annotations
from collections import Counter
from typing import Callable, List, Optional

from vsm_engine.application.services.errors import NormalizationError

# Any callable str -> str. Raising means "this sentence can't be tokenized".
Normalizer = Callable[[str], str]

# characters with the Unicode "Hyphen" property
HYPHENS = (
    "\u002d\u00ad\u058a\u1806\u2010\u2011"
    "\u2e17\u30fb\ufe63\uff0d\uff65"
)


def identity(sentence: str) -> str:
    return sentence


def map_chars(chars: str, to: str = " ") -> Normalizer:
    """Build a normalizer replacing every character in `chars` by the first char of `to`.

    An empty `to` leaves the sentence untouched.
    """
    if not chars or not to:
        return identity
    table = str.maketrans({ch: to[0] for ch in chars})

    def _map(sentence: str) -> str:
        return sentence.translate(table)

    return _map


# "Shipment-of-gold" -> "Shipment of gold"
replace_hyphens: Normalizer = map_chars(HYPHENS, " ")


def chain(*normalizers: Optional[Normalizer]) -> Normalizer:
    """Apply normalizers left to right, skipping None entries."""
    steps = [n for n in normalizers if n is not None]
    if not steps:
        return identity
    if len(steps) == 1:
        return steps[0]

    def _chained(sentence: str) -> str:
        for step in steps:
            sentence = step(sentence)
        return sentence

    return _chained


def normalize(normalizer: Optional[Normalizer], sentence: str) -> str:
    """Run `normalizer` over `sentence`, wrapping any failure in NormalizationError."""
    if normalizer is None:
        # If no normalizer is set, returns the plain sentence.
        return sentence
    try:
        result = normalizer(sentence)
    except NormalizationError:
        raise
    except Exception as e:
        raise NormalizationError(sentence, f"{type(e).__name__}: {e}") from e
    if not isinstance(result, str):
        raise NormalizationError(sentence, f"normalizer returned {type(result).__name__}, not str")
    return result


def tokenize(sentence: str) -> List[str]:
    # split on single spaces; repeated spaces give "" tokens, which are kept as-is
    # "Gold  Truck." -> ["gold", "", "truck."]
    return [tok.strip().lower() for tok in sentence.split(" ")]


def term_frequencies(tokens: List[str]) -> Counter:
    # term frequency vector stored as a Counter: {term: count}
    return Counter(tokens)

"""
Numeric Tokenizer

Flattens extracted document text into the ordered list of numbers it
contains. Order of appearance is the only structure the decoder relies on,
so nothing is filtered, deduplicated or reordered.
"""

import re
from typing import List

# ASCII digits only: Arabic-Indic and other Unicode digits in labels and
# dates are text, not figures. Unsigned, no thousands separators, no exponent.
NUMBER_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+)?")


def tokenize(text: str) -> List[float]:
    """Return every number in *text*, in order of appearance."""
    if not text:
        return []
    return [float(m.group()) for m in NUMBER_PATTERN.finditer(text)]

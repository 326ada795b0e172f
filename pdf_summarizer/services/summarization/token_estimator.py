"""Character-based token estimation.

The estimate is a routing signal for strategy selection, not a billing-accurate
count: a fixed ratio of 4 characters per token is applied regardless of model
or language, which undercounts for many non-English texts and newer tokenizers.
"""

import math
from typing import Optional

CHARS_PER_TOKEN = 4


def estimate_tokens(text: Optional[str]) -> int:
    """Estimate the model tokens in ``text`` as ``ceil(len(text) / 4)``.

    Example:
        >>> estimate_tokens("Policy Number: 12345")
        5
    """
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)

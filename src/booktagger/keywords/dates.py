"""Year extraction from raw document text."""

from __future__ import annotations

import re
from typing import Set

from booktagger.config import DEFAULT_MAX_YEAR, DEFAULT_MIN_YEAR

# Four ASCII digits with no word character on either side: "1984" but not
# "19845", "1984a" or the tail of "ISBN0451524934".
YEAR_RE = re.compile(r"(?<!\w)[0-9]{4}(?!\w)")


def extract_years(
    text: str, *, min_year: int = DEFAULT_MIN_YEAR, max_year: int = DEFAULT_MAX_YEAR
) -> Set[str]:
    """Return the distinct plausible years mentioned in ``text``.

    Both bounds are inclusive. Scanning raw text rather than tokens keeps
    years that the tokenizer drops as pure numbers.
    """
    return {
        match.group(0)
        for match in YEAR_RE.finditer(text)
        if min_year <= int(match.group(0)) <= max_year
    }

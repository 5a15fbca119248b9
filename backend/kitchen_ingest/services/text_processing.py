"""Text normalisation and tokenisation for raw OCR output.

Both functions are total: any string, including the empty string, is
accepted and nothing is raised. Line structure survives normalisation
so that the tokenizer can still split on line and blank-line
boundaries.
"""

from __future__ import annotations

import re
from typing import List

from kitchen_ingest.models.enums import Domain

# Bullet / decoration runs produced by list markers and OCR noise
_BULLETS = re.compile(r"[-•*]+")
_MULTI_SPACE = re.compile(r"\s{2,}")
_NEWLINES = re.compile(r"\r\n?")

_GROCERY_SPLIT = re.compile(r"\n|,|;")
_BLANK_LINES = re.compile(r"\n{2,}")

# "x2", "x 3", "16oz", "2 lbs", "500g" ... removed from item names
_QUANTITY_TOKEN = re.compile(r"\b(x\s*\d+|\d+\s?(oz|lb|lbs|g|kg|ml|l))\b", re.IGNORECASE)


def _clean_line(line: str) -> str:
    line = _BULLETS.sub(" ", line)
    return _MULTI_SPACE.sub(" ", line).strip()


def normalize(raw: str) -> str:
    """Strip bullet noise, collapse whitespace and trim every line."""
    if not raw:
        return ""
    text = _NEWLINES.sub("\n", raw)
    return "\n".join(_clean_line(line) for line in text.split("\n"))


def strip_quantities(line: str) -> str:
    """Remove quantity and size tokens from a single item line."""
    return _MULTI_SPACE.sub(" ", _QUANTITY_TOKEN.sub("", line)).strip()


def split_chunks(text: str) -> List[str]:
    """Split text into blank-line separated chunks (recipe cards)."""
    chunks = (chunk.strip() for chunk in _BLANK_LINES.split(text))
    return [chunk for chunk in chunks if chunk]


def tokenize(domain: Domain, text: str) -> List[str]:
    """Split normalised text into candidate lines for ``domain``.

    Grocery text is split on newlines, commas and semicolons, pantry text
    on newlines only; quantity/size tokens are removed from both. Recipe
    text is split into chunks. Order follows the source text and empty
    pieces are dropped.
    """
    if not text:
        return []
    domain = Domain(domain)
    if domain is Domain.RECIPE:
        return split_chunks(text)
    if domain is Domain.PANTRY:
        pieces = (strip_quantities(line) for line in text.split("\n"))
    else:
        pieces = (strip_quantities(piece) for piece in _GROCERY_SPLIT.split(text))
    return [piece for piece in pieces if piece]

"""Per-domain parsers turning candidate lines into records.

Each parser is a pure function of the tokenizer output plus the job's
household id. Parsers are registered per :class:`Domain`; supporting a
new document type means adding a record schema and a ``DomainParser``
subclass here, the orchestrator looks parsers up through
:func:`get_parser` and never branches on the domain itself.

Supported domains:

* ``grocery`` – every candidate line becomes one ``GroceryItem``.
* ``pantry`` – every candidate line becomes one ``PantryItem`` for the
  household. Quantity and size tokens were already removed from the
  line by the tokenizer and are not recovered as structured fields.
* ``recipe`` – the blank-line separated chunks of a recipe card are
  folded into a single ``Recipe``. The title comes from the first
  chunk, a short summary from the second one, and the ingredient and
  instruction sections from the first chunk mentioning the matching
  heading word. A card without headings still yields a recipe with an
  empty ingredient list and empty instructions.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from kitchen_ingest.models.enums import Domain
from kitchen_ingest.models.schemas import GroceryItem, PantryItem, ParsedRecord, Recipe

DEFAULT_RECIPE_TITLE = "Scanned Recipe"
MAX_TITLE_LENGTH = 120
MAX_SUMMARY_LENGTH = 240

_INGREDIENTS_HEADING = re.compile(r"ingredients", re.IGNORECASE)
_INSTRUCTIONS_HEADING = re.compile(r"instructions|method|directions", re.IGNORECASE)
# A second chunk carrying one of these words is a section, not a summary
_SECTION_WORDS = re.compile(r"ingredients|instructions|method", re.IGNORECASE)


class DomainParser(ABC):
    """Convert tokenizer output into zero or more records."""

    domain: Domain

    @abstractmethod
    def parse(self, tokens: Sequence[str], context_id: Optional[str] = None) -> List[ParsedRecord]:
        raise NotImplementedError


class GroceryParser(DomainParser):
    domain = Domain.GROCERY

    def parse(self, tokens: Sequence[str], context_id: Optional[str] = None) -> List[ParsedRecord]:
        return [GroceryItem(name=line) for line in tokens]


class PantryParser(DomainParser):
    domain = Domain.PANTRY

    def parse(self, tokens: Sequence[str], context_id: Optional[str] = None) -> List[ParsedRecord]:
        return [PantryItem(name=line, household_id=context_id) for line in tokens]


def _first_match(chunks: Sequence[str], pattern: re.Pattern[str]) -> int:
    """Index of the first chunk matching ``pattern`` or -1."""
    for idx, chunk in enumerate(chunks):
        if pattern.search(chunk):
            return idx
    return -1


def _section_body(chunk: str) -> List[str]:
    """Lines of a section chunk without its heading line."""
    return chunk.split("\n")[1:]


class RecipeParser(DomainParser):
    domain = Domain.RECIPE

    def parse(self, tokens: Sequence[str], context_id: Optional[str] = None) -> List[ParsedRecord]:
        chunks = list(tokens)
        first_line = chunks[0].split("\n")[0] if chunks else ""
        title = first_line[:MAX_TITLE_LENGTH] or DEFAULT_RECIPE_TITLE

        ingredients: List[str] = []
        ing_idx = _first_match(chunks, _INGREDIENTS_HEADING)
        if ing_idx >= 0:
            body = (line.strip() for line in _section_body(chunks[ing_idx]))
            ingredients = [line for line in body if line]

        instructions = ""
        ins_idx = _first_match(chunks, _INSTRUCTIONS_HEADING)
        if ins_idx >= 0:
            instructions = "\n".join(_section_body(chunks[ins_idx]))

        summary = ""
        if len(chunks) > 1 and not _SECTION_WORDS.search(chunks[1]):
            summary = chunks[1][:MAX_SUMMARY_LENGTH]

        return [
            Recipe(
                title=title,
                summary=summary,
                ingredients=ingredients,
                instructions=instructions,
                household_id=context_id,
            )
        ]


PARSERS: Dict[Domain, DomainParser] = {
    parser.domain: parser
    for parser in (GroceryParser(), PantryParser(), RecipeParser())
}


def get_parser(domain: Domain) -> DomainParser:
    return PARSERS[Domain(domain)]


def parse(domain: Domain, tokens: Sequence[str], context_id: Optional[str] = None) -> List[ParsedRecord]:
    """Parse ``tokens`` with the parser registered for ``domain``."""
    return get_parser(domain).parse(tokens, context_id)

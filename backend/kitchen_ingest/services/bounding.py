"""Output bounding for parsed records."""

from __future__ import annotations

from typing import List, Sequence

from kitchen_ingest.models.schemas import DEFAULT_MAX_RECORDS, ParsedRecord


def bound(records: Sequence[ParsedRecord], max_records: int = DEFAULT_MAX_RECORDS) -> List[ParsedRecord]:
    """Drop records without a name/title and keep the first ``max_records``.

    Order is preserved. An empty result means nothing was recognised and
    is not an error.
    """
    kept = [record for record in records if record.label.strip()]
    return kept[: max(0, max_records)]

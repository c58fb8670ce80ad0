"""Chart datasets derived from the loaded row list.

Every function recomputes from scratch and never raises: absent fields fall
into the "Unknown" bucket or count as zero ageing.
"""

from __future__ import annotations

import math
import numbers
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from core.fields import AGEING, CURRENT_STAGE, PRIORITY, PROJECT_NAME, SIZE, display_value, resolve_field
from core.settings import DashboardSettings

Pair = Tuple[str, int]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def group_count(rows: Sequence[Mapping[str, Any]], candidates: Sequence[str], unknown: str = "Unknown") -> List[Pair]:
    """Count rows per resolved field value, in first-seen order."""
    counts: Counter = Counter()
    for row in rows:
        counts[display_value(resolve_field(row, candidates), unknown)] += 1
    return list(counts.items())


def parse_ageing(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, numbers.Real):
        value = float(value)
        return int(value) if math.isfinite(value) else 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def ageing_label(name: Any, length: int = 15, unknown: str = "Unknown") -> str:
    text = display_value(name, "")
    if not text:
        return unknown
    return text[:length] + "..."


def top_by_ageing(
    rows: Sequence[Mapping[str, Any]],
    n: int = 10,
    label_length: int = 15,
    unknown: str = "Unknown",
) -> List[Pair]:
    """Rank rows by ageing, highest first; equal values keep row order."""
    ranked = [
        (ageing_label(resolve_field(row, PROJECT_NAME), label_length, unknown), parse_ageing(resolve_field(row, AGEING)))
        for row in rows
    ]
    # sorted() stays stable with reverse=True
    ranked = sorted(ranked, key=lambda pair: pair[1], reverse=True)
    return ranked[: max(0, n)]


@dataclass(frozen=True)
class DerivedDatasets:
    priority: List[Pair] = field(default_factory=list)
    stage: List[Pair] = field(default_factory=list)
    size: List[Pair] = field(default_factory=list)
    ageing: List[Pair] = field(default_factory=list)


def compute_datasets(rows: Sequence[Mapping[str, Any]], settings: Optional[DashboardSettings] = None) -> DerivedDatasets:
    settings = settings or DashboardSettings()
    unknown = settings.unknown_label
    return DerivedDatasets(
        priority=group_count(rows, PRIORITY, unknown),
        stage=group_count(rows, CURRENT_STAGE, unknown),
        size=group_count(rows, SIZE, unknown),
        ageing=top_by_ageing(rows, settings.top_n, settings.label_length, unknown),
    )

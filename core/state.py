from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.aggregations import DerivedDatasets, compute_datasets
from core.data import DashboardError, decode_workbook
from core.fields import PROJECT_NAME, display_value, resolve_field
from core.settings import DashboardSettings


logger = logging.getLogger(__name__)

Row = Mapping[str, Any]


class SelectionMiss(DashboardError):
    """Raised when a select request names no loaded project."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No project named {name!r} is loaded.")
        self.name = name


@dataclass(frozen=True)
class Snapshot:
    rows: Tuple[Row, ...] = ()
    datasets: DerivedDatasets = field(default_factory=DerivedDatasets)
    selected: Optional[Row] = None
    file_name: str = ""


def project_name(row: Optional[Row]) -> str:
    return display_value(resolve_field(row, PROJECT_NAME), "")


class ProjectSelection:
    """Loaded row list, its chart datasets, and the selected row.

    Each transition builds a new Snapshot and swaps it in with a single
    assignment, so readers see either the old state or the new one.
    Transitions that derive from the current snapshot run under a lock so
    a concurrent load is never overwritten by a stale select.
    """

    def __init__(self, settings: Optional[DashboardSettings] = None) -> None:
        self.settings = settings or DashboardSettings()
        self._snapshot = Snapshot()
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def rows(self) -> Tuple[Row, ...]:
        return self._snapshot.rows

    @property
    def selected(self) -> Optional[Row]:
        return self._snapshot.selected

    @property
    def datasets(self) -> DerivedDatasets:
        return self._snapshot.datasets

    @property
    def file_name(self) -> str:
        return self._snapshot.file_name

    @property
    def project_count(self) -> int:
        return len(self._snapshot.rows)

    def project_names(self) -> List[str]:
        return [project_name(r) for r in self._snapshot.rows]

    def load(self, rows: Sequence[Dict[str, Any]], file_name: str = "") -> Snapshot:
        rows = tuple(rows)
        loaded = self._with_default_selection(
            Snapshot(rows=rows, datasets=compute_datasets(rows, self.settings), file_name=file_name)
        )
        with self._lock:
            self._snapshot = loaded
        logger.info("loaded %d projects from %s", len(rows), file_name or "<upload>")
        return loaded

    def load_bytes(self, content: bytes, file_name: str = "") -> Snapshot:
        # decode before touching state; a failure leaves the previous snapshot in place
        try:
            rows = decode_workbook(content, file_name)
        except DashboardError:
            logger.warning("rejected upload %s; keeping %d loaded projects", file_name or "<upload>", self.project_count)
            raise
        return self.load(rows, file_name)

    @staticmethod
    def _with_default_selection(snapshot: Snapshot) -> Snapshot:
        return replace(snapshot, selected=snapshot.rows[0] if snapshot.rows else None)

    def reset_selection(self) -> Optional[Row]:
        """Select the first loaded row, or nothing when no rows are loaded."""
        with self._lock:
            self._snapshot = self._with_default_selection(self._snapshot)
            return self._snapshot.selected

    def select(self, name: str) -> Row:
        """Select the first row whose Project Name equals `name`.

        On a miss the selection is cleared and SelectionMiss is raised.
        """
        with self._lock:
            current = self._snapshot
            for row in current.rows:
                if project_name(row) == name:
                    self._snapshot = replace(current, selected=row)
                    return row
            self._snapshot = replace(current, selected=None)
        logger.warning("selection miss: %r", name)
        raise SelectionMiss(name)

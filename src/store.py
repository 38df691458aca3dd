import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

LOG = logging.getLogger(__name__)

# identifiers that must stay text when the store is a CSV export
ID_COLUMNS = ["externalRecordId", "employeeNumber", "month", "name",
              "companyName", "companyShortName", "status", "socialInsuranceGrade", "department"]


class LedgerStore:
    """Read-only view of the persisted monthly payroll records."""

    def __init__(self, df: Optional[pd.DataFrame] = None, loader: Optional[Callable[[], pd.DataFrame]] = None):
        self._df = df
        self._loader = loader

    @property
    def df(self) -> pd.DataFrame:
        if self._df is None:
            self._df = self._loader() if self._loader else pd.DataFrame()
        return self._df

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "LedgerStore":
        return cls(pd.DataFrame(list(records)))

    @classmethod
    def from_path(cls, path: str) -> "LedgerStore":
        """JSON list of records (or {"records": [...]}) or a CSV export; read on first query."""
        return cls(loader=lambda: load_records(path))

    def find(self, **filters: Any) -> List[Dict[str, Any]]:
        """
        Equality filters on record fields; a list/tuple/set value matches any member.
        Records missing a filtered field never match.
        """
        df = self.df
        if df.empty:
            return []
        mask = pd.Series(True, index=df.index)
        for col, wanted in filters.items():
            if col not in df.columns:
                return []
            values = list(wanted) if isinstance(wanted, (list, tuple, set)) else [wanted]
            mask &= df[col].isin(values)

        hits = df.loc[mask]
        if "updatedAt" in hits.columns:
            hits = hits.sort_values("updatedAt", kind="stable", na_position="first")
        hits = hits.astype(object).where(pd.notna(hits), None)
        return hits.to_dict(orient="records")


def load_records(path: str) -> pd.DataFrame:
    if path.lower().endswith(".csv"):
        df = pd.read_csv(path, dtype={c: str for c in ID_COLUMNS})
    else:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if isinstance(raw, dict):
            raw = raw.get("records", list(raw.values()))
        df = pd.DataFrame(raw)
    LOG.debug("Loaded %d ledger records from %s", len(df), path)
    return df

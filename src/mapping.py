import logging
from typing import Callable, Dict, List, Optional, Sequence

from errors import MissingRequiredColumn
from fields import FieldDef
from ingest import CellMatrix
from utils import cell_text, strip_spaces

LOG = logging.getLogger(__name__)

NAME_FIELD = FieldDef("name", "氏名", "text")
EMPLOYEE_NUMBER_FIELD = FieldDef("employeeNumber", "社員番号", "text")

IDENTITY_ALIASES: Dict[str, List[str]] = {
    "name": ["氏名", "従業員名", "社員名", "名前", "name"],
    "employeeNumber": ["社員番号", "従業員番号", "社員No", "社員NO", "従業員コード", "No."],
}

HEADER_BLOCK_ROWS = 3

ColumnMapping = Dict[str, Optional[int]]
Strategy = Callable[[List[str], FieldDef, Dict[str, str]], Optional[int]]


def _norm(s: str) -> str:
    return strip_spaces(str(s)).casefold()


def build_header_strings(rows: CellMatrix, block_rows: int = HEADER_BLOCK_ROWS) -> List[str]:
    """One label per column: trimmed header-block cells concatenated top to bottom."""
    block = rows[:min(block_rows, len(rows))]
    width = max((len(r) for r in block), default=0)
    headers = []
    for col in range(width):
        headers.append("".join(cell_text(r[col]) if col < len(r) else "" for r in block))
    return headers


def _find_column(headers: Sequence[str], candidates: Sequence[str]) -> Optional[int]:
    normed = [_norm(h) for h in headers]
    keys = [_norm(c) for c in candidates if c and _norm(c)]
    for key in keys:
        for idx, h in enumerate(normed):
            if h and h == key:
                return idx
    for key in keys:
        for idx, h in enumerate(normed):
            if h and (key in h or h in key):
                return idx
    return None


def by_saved_hint(headers: List[str], field: FieldDef, hints: Dict[str, str]) -> Optional[int]:
    hint = hints.get(field.key)
    return _find_column(headers, [hint]) if hint else None


def by_label(headers: List[str], field: FieldDef, hints: Dict[str, str]) -> Optional[int]:
    return _find_column(headers, [field.label])


def by_identity_alias(headers: List[str], field: FieldDef, hints: Dict[str, str]) -> Optional[int]:
    aliases = IDENTITY_ALIASES.get(field.key)
    return _find_column(headers, aliases) if aliases else None


STRATEGIES: List[Strategy] = [by_saved_hint, by_label, by_identity_alias]


def resolve_column(headers: List[str], field: FieldDef, hints: Dict[str, str]) -> Optional[int]:
    for strategy in STRATEGIES:
        idx = strategy(headers, field, hints)
        if idx is not None:
            LOG.debug("%s -> column %d (%s: %r)", field.key, idx, strategy.__name__, headers[idx])
            return idx
    return None


def resolve_columns(rows: CellMatrix,
                    fields: Sequence[FieldDef],
                    saved_mapping: Optional[Dict[str, str]] = None,
                    block_rows: int = HEADER_BLOCK_ROWS) -> ColumnMapping:
    """
    Returns field key -> column index (or None) for name, employeeNumber and every
    active field. Raises MissingRequiredColumn when the name column cannot be found.
    """
    hints = {k: v for k, v in (saved_mapping or {}).items() if v and str(v).strip()}
    headers = build_header_strings(rows, block_rows)

    mapping: ColumnMapping = {}
    for field in [NAME_FIELD, EMPLOYEE_NUMBER_FIELD, *fields]:
        mapping[field.key] = resolve_column(headers, field, hints)

    if mapping["name"] is None:
        raise MissingRequiredColumn(
            "Could not locate the employee name column. "
            "Save a column mapping hint for 'name' with the spreadsheet's header label."
        )

    unresolved = [k for k, v in mapping.items() if v is None]
    if unresolved:
        LOG.info("Unmapped fields: %s", ", ".join(unresolved))
    return mapping

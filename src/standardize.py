from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from fields import FieldDef
from ingest import Cell, CellMatrix
from mapping import ColumnMapping
from utils import cell_text, is_blank, parse_number, strip_spaces

NAME_HEADER_WORDS = ["氏名", "名前", "従業員名", "社員名", "name"]
HEADER_SCAN_ROWS = 5


@dataclass
class SheetEmployee:
    name: str
    employee_number: str
    values: Dict[str, Cell] = field(default_factory=dict)
    row_index: int = 0


def _looks_like_name_header(value: Cell) -> bool:
    text = strip_spaces(cell_text(value)).casefold()
    if not text:
        return True
    return any(text == w or w in text for w in NAME_HEADER_WORDS)


def _cell(row: Sequence[Cell], col: Optional[int]) -> Cell:
    if col is None or col >= len(row):
        return None
    return row[col]


def detect_header_rows(rows: CellMatrix, name_col: int, scan_rows: int = HEADER_SCAN_ROWS) -> int:
    """Index of the first row whose name cell looks like data (at least 1)."""
    count = 0
    for row in rows[:scan_rows]:
        if not _looks_like_name_header(_cell(row, name_col)):
            break
        count += 1
    return max(count, 1)


def coerce_value(value: Cell, fdef: FieldDef) -> Cell:
    if is_blank(value):
        return None
    if fdef.is_text:
        return cell_text(value)
    return parse_number(value)


def extract_employees(rows: CellMatrix,
                      mapping: ColumnMapping,
                      fields: Sequence[FieldDef],
                      header_rows: Optional[int] = None) -> List[SheetEmployee]:
    name_col = mapping["name"]
    emp_col = mapping.get("employeeNumber")
    if header_rows is None:
        header_rows = detect_header_rows(rows, name_col)

    out: List[SheetEmployee] = []
    for idx in range(header_rows, len(rows)):
        row = rows[idx]
        raw_name = _cell(row, name_col)
        # separator / trailing rows
        if not isinstance(raw_name, str) or not raw_name.strip():
            continue

        values = {f.key: coerce_value(_cell(row, mapping.get(f.key)), f) for f in fields}
        out.append(SheetEmployee(
            name=raw_name.strip(),
            employee_number=cell_text(_cell(row, emp_col)),
            values=values,
            row_index=idx,
        ))
    return out

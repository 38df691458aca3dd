import io
import logging
from typing import List, Optional, Union

import pandas as pd

from errors import InvalidInput

LOG = logging.getLogger(__name__)

Cell = Union[str, int, float, None]
CellMatrix = List[List[Cell]]

MIN_ROWS = 2
CSV_SUFFIXES = (".csv", ".txt")


def _clean_cell(value) -> Cell:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, (int, float, str)):
        return value
    # dates and other openpyxl types are compared by their text form
    return str(value)


def frame_to_matrix(df: pd.DataFrame) -> CellMatrix:
    return [[_clean_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]


def load_workbook(source: Union[str, bytes, io.BytesIO], filename: Optional[str] = None) -> CellMatrix:
    """
    Reads the first sheet of a spreadsheet into a cell matrix (rows of str/number/None).
    `source` is a path or the raw file bytes; `filename` picks the reader for bytes.
    """
    name = filename or (source if isinstance(source, str) else "")
    if isinstance(source, bytes):
        source = io.BytesIO(source)

    if str(name).lower().endswith(CSV_SUFFIXES):
        try:
            df = pd.read_csv(source, header=None, dtype=object, skip_blank_lines=False)
        except pd.errors.EmptyDataError:
            df = pd.DataFrame()
    else:
        engine = None if str(name).lower().endswith(".xls") else "openpyxl"
        df = pd.read_excel(source, sheet_name=0, header=None, dtype=object, engine=engine)

    rows = frame_to_matrix(df)
    LOG.debug("Loaded %d rows x %d columns from %s", len(rows), df.shape[1], name or "<bytes>")
    if len(rows) < MIN_ROWS:
        raise InvalidInput(f"Spreadsheet has too little data ({len(rows)} row(s); at least {MIN_ROWS} required)")
    return rows

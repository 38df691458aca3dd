import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from config import ReconConfig
from ledger import LedgerEmployee
from standardize import SheetEmployee
from utils import strip_spaces

LOG = logging.getLogger(__name__)

RETIRED_STATUSES = ReconConfig().retired_statuses


def normalize_name(name: str) -> str:
    """Drops every whitespace variant (ASCII, full-width, ideographic) so spellings compare equal."""
    return strip_spaces(name or "").strip()


@dataclass
class MatchResult:
    pairs: List[Tuple[SheetEmployee, Optional[LedgerEmployee]]] = field(default_factory=list)
    matched_keys: Set[str] = field(default_factory=set)
    match_types: List[Optional[str]] = field(default_factory=list)
    missing_from_sheet: List[str] = field(default_factory=list)
    new_in_sheet: List[str] = field(default_factory=list)


def by_employee_number(emp: SheetEmployee,
                       ledger: Dict[str, LedgerEmployee],
                       skip: Set[str]) -> Optional[str]:
    if not emp.employee_number:
        return None
    for key, app in ledger.items():
        if key in skip:
            continue
        if app.employee_number and app.employee_number == emp.employee_number:
            return key
    return None


def by_normalized_name(emp: SheetEmployee,
                       ledger: Dict[str, LedgerEmployee],
                       skip: Set[str]) -> Optional[str]:
    target = normalize_name(emp.name)
    for key, app in ledger.items():
        if key in skip:
            continue
        if normalize_name(app.name) == target:
            return key
    return None


def is_active(emp: LedgerEmployee, retired_statuses: Iterable[str] = RETIRED_STATUSES) -> bool:
    return emp.status not in set(retired_statuses) and emp.current is not None


def match_employees(sheet: List[SheetEmployee],
                    ledger: Dict[str, LedgerEmployee],
                    exclusive: bool = False,
                    retired_statuses: Iterable[str] = RETIRED_STATUSES) -> MatchResult:
    """
    Pairs each spreadsheet row with a ledger identity: employee number first, then
    normalized name. With `exclusive` a ledger identity matched by an earlier row is
    not offered to later rows.
    """
    result = MatchResult()
    consumed: Set[str] = set()
    new_names: List[str] = []

    for emp in sheet:
        skip = consumed if exclusive else set()
        key = by_employee_number(emp, ledger, skip)
        how = "employee_number"
        if key is None:
            key = by_normalized_name(emp, ledger, skip)
            how = "name"

        if key is None:
            result.pairs.append((emp, None))
            result.match_types.append(None)
            if emp.name not in new_names:
                new_names.append(emp.name)
            continue

        consumed.add(key)
        result.match_types.append(how)
        result.pairs.append((emp, ledger[key]))

    result.matched_keys = consumed
    result.new_in_sheet = new_names
    result.missing_from_sheet = [
        app.name for key, app in ledger.items()
        if key not in consumed and is_active(app, retired_statuses)
    ]
    LOG.info("Matched %d of %d spreadsheet rows | missing from spreadsheet: %d | new in spreadsheet: %d",
             sum(1 for _, app in result.pairs if app is not None), len(sheet),
             len(result.missing_from_sheet), len(result.new_in_sheet))
    return result

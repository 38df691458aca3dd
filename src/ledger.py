import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from errors import InvalidInput
from fields import ALL_FIELD_KEYS, ALLOWANCE_KEYS, TEXT_FIELD_KEYS
from utils import cell_text, is_blank, parse_number

LOG = logging.getLogger(__name__)

PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")

FieldMap = Dict[str, Any]


@dataclass
class LedgerEmployee:
    key: str
    name: str
    employee_number: str
    status: str
    current: Optional[FieldMap] = None
    previous: Optional[FieldMap] = None


def parse_period(period: str) -> Tuple[int, int]:
    m = PERIOD_RE.match(str(period or "").strip())
    if not m or not 1 <= int(m.group(2)) <= 12:
        raise InvalidInput(f"Period must be YYYY-MM, got {period!r}")
    return int(m.group(1)), int(m.group(2))


def previous_period(period: str) -> str:
    year, month = parse_period(period)
    if month == 1:
        return f"{year - 1}-12"
    return f"{year}-{month - 1:02d}"


def company_name_variants(company_name: str, aliases: Dict[str, str]) -> Set[str]:
    """Every raw company name that displays as `company_name`, itself included."""
    names = {company_name}
    names.update(raw for raw, display in aliases.items() if display == company_name)
    return names


def _raw_company(record: Dict[str, Any]) -> str:
    return str(record.get("companyShortName") or record.get("companyName") or "")


def select_company_records(records: Iterable[Dict[str, Any]],
                           company_name: str,
                           aliases: Dict[str, str]) -> List[Dict[str, Any]]:
    variants = company_name_variants(company_name, aliases)
    out = []
    for d in records:
        raw = _raw_company(d)
        if raw in variants or aliases.get(raw, raw) == company_name:
            out.append(d)
    return out


def identity_key(record: Dict[str, Any]) -> str:
    for k in ("externalRecordId", "employeeNumber", "name"):
        v = cell_text(record.get(k))
        if v:
            return v
    return ""


def record_allowance_names(records: Iterable[Dict[str, Any]], period: str) -> Dict[str, str]:
    names: Dict[str, str] = {}
    for d in records:
        if d.get("month") != period:
            continue
        for key in ALLOWANCE_KEYS:
            label = d.get(f"{key}Name")
            if isinstance(label, str) and label.strip():
                names[key] = label.strip()
    return names


def _clean_value(key: str, value: Any) -> Any:
    if is_blank(value):
        return None
    if key in TEXT_FIELD_KEYS:
        return cell_text(value)
    return parse_number(value)


def derive_unit_price(fields: FieldMap, standard_working_hours: float) -> None:
    """Fills unitPrice from (base salary + allowances) / hours when it is zero or missing."""
    if parse_number(fields.get("unitPrice")):
        return
    if not standard_working_hours or standard_working_hours <= 0:
        return
    total = parse_number(fields.get("baseSalary")) + sum(parse_number(fields.get(k)) for k in ALLOWANCE_KEYS)
    fields["unitPrice"] = round(total / standard_working_hours, 2)


def build_snapshots(records: Iterable[Dict[str, Any]],
                    period: str,
                    standard_working_hours: float) -> Dict[str, LedgerEmployee]:
    """
    Groups current/previous period records by identity key. Later records override
    earlier ones field by field. Status comes from the latest current-period record;
    a previous-period status only fills it while it is still empty.
    """
    prev = previous_period(period)
    employees: Dict[str, LedgerEmployee] = {}

    for d in records:
        name = cell_text(d.get("name"))
        month = d.get("month")
        if not name or not month or month not in (period, prev):
            continue

        key = identity_key(d)
        emp = employees.get(key)
        if emp is None:
            emp = LedgerEmployee(key=key, name=name,
                                 employee_number=cell_text(d.get("employeeNumber")),
                                 status="")
            employees[key] = emp
        status = cell_text(d.get("status"))
        # current-period status decides whether the employee is active now
        if status and (month == period or not emp.status):
            emp.status = status
        if not emp.employee_number:
            emp.employee_number = cell_text(d.get("employeeNumber"))

        bucket = "current" if month == period else "previous"
        fields = getattr(emp, bucket)
        if fields is None:
            fields = {k: None for k in ALL_FIELD_KEYS}
            setattr(emp, bucket, fields)
        for k in ALL_FIELD_KEYS:
            v = _clean_value(k, d.get(k))
            if v is not None:
                fields[k] = v

    for emp in employees.values():
        for fields in (emp.current, emp.previous):
            if fields is not None:
                derive_unit_price(fields, standard_working_hours)

    LOG.info("Ledger snapshot: %d employees (%d with %s records)",
             len(employees), sum(e.current is not None for e in employees.values()), period)
    return employees


def load_ledger_snapshot(store,
                         company_name: str,
                         period: str,
                         aliases: Dict[str, str],
                         standard_working_hours: float) -> Tuple[Dict[str, LedgerEmployee], List[Dict[str, Any]]]:
    """Reads both periods from the store and returns (snapshots, company records)."""
    records = store.find(month=[period, previous_period(period)])
    company_records = select_company_records(records, company_name, aliases)
    LOG.debug("%d of %d records belong to %s", len(company_records), len(records), company_name)
    return build_snapshots(company_records, period, standard_working_hours), company_records

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from fields import FieldDef
from ledger import LedgerEmployee
from standardize import SheetEmployee
from utils import cell_text, format_number, is_blank, parse_number

OK = "ok"
MISMATCH = "mismatch"
CHANGED = "changed"
WARNING = "warning"
NO_DATA = "no_data"
STATUSES = (OK, MISMATCH, CHANGED, WARNING, NO_DATA)

MSG_OK = "matches"
MSG_NOT_IN_LEDGER = "not present in ledger"
MSG_NOT_IN_SHEET = "not present in spreadsheet"


@dataclass
class CheckItem:
    field: str
    label: str
    excel_value: Any
    app_value: Any
    prev_month_value: Any
    status: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "label": self.label,
            "excelValue": self.excel_value,
            "appValue": self.app_value,
            "prevMonthValue": self.prev_month_value,
            "status": self.status,
            "message": self.message,
        }


@dataclass
class EmployeeResult:
    name: str
    employee_number: str
    checks: List[CheckItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "employeeNumber": self.employee_number,
            "checks": [c.to_dict() for c in self.checks],
        }


def _is_zero_or_blank(value: Any) -> bool:
    if is_blank(value):
        return True
    return isinstance(value, (int, float)) and value == 0


def _mismatch_message(excel_text: str, app_text: str) -> str:
    return f"mismatch (spreadsheet: {excel_text} / ledger: {app_text})"


def compare_field(fdef: FieldDef, excel_val: Any, app_val: Any, prev_val: Any) -> Optional[CheckItem]:
    """Classifies one value pair; None when there is nothing to report."""
    if is_blank(excel_val) and is_blank(app_val):
        return None

    def item(status: str, message: str) -> CheckItem:
        return CheckItem(fdef.key, fdef.label, excel_val, app_val, prev_val, status, message)

    if is_blank(excel_val):
        if _is_zero_or_blank(app_val):
            return None
        return item(NO_DATA, MSG_NOT_IN_SHEET)

    if is_blank(app_val):
        return item(NO_DATA, MSG_NOT_IN_LEDGER)

    if fdef.key == "department":
        ex, app = cell_text(excel_val), cell_text(app_val)
        if ex == app or ex in app or app in ex:
            return item(OK, MSG_OK)
        return item(MISMATCH, _mismatch_message(ex, app))

    if fdef.is_text:
        ex, app = cell_text(excel_val), cell_text(app_val)
        if ex == app:
            return item(OK, MSG_OK)
        return item(MISMATCH, _mismatch_message(ex, app))

    ex_num, app_num = parse_number(excel_val), parse_number(app_val)
    if ex_num != app_num:
        return item(MISMATCH, _mismatch_message(format_number(ex_num), format_number(app_num)))

    if not is_blank(prev_val):
        prev_num = parse_number(prev_val)
        if prev_num > 0 and prev_num != ex_num:
            delta = ex_num - prev_num
            return item(CHANGED, "changed since previous period: "
                                 f"{format_number(prev_num)} → {format_number(ex_num)} "
                                 f"({format_number(delta, signed=True)})")
    return item(OK, MSG_OK)


def compare_employee(emp: SheetEmployee,
                     app: Optional[LedgerEmployee],
                     fields: Sequence[FieldDef]) -> EmployeeResult:
    current = (app.current if app else None) or {}
    previous = (app.previous if app else None) or {}

    checks = []
    for fdef in fields:
        check = compare_field(fdef, emp.values.get(fdef.key), current.get(fdef.key), previous.get(fdef.key))
        if check is not None:
            checks.append(check)

    number = (app.employee_number if app else "") or emp.employee_number
    return EmployeeResult(name=emp.name, employee_number=number, checks=checks)

import os
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from compare import STATUSES, EmployeeResult

CHECK_COLUMNS = ["name", "employeeNumber", "field", "label", "excelValue",
                 "appValue", "prevMonthValue", "status", "message"]


@dataclass
class ReconciliationReport:
    period: str
    previous_period: str
    column_mapping: Dict[str, Optional[int]]
    header_row_count: int
    results: List[EmployeeResult] = field(default_factory=list)
    missing_from_spreadsheet: List[str] = field(default_factory=list)
    new_in_spreadsheet: List[str] = field(default_factory=list)
    suggestions: List[Dict[str, Any]] = field(default_factory=list)

    def status_counts(self) -> Dict[str, int]:
        counts = {s: 0 for s in STATUSES}
        for r in self.results:
            for c in r.checks:
                counts[c.status] = counts.get(c.status, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "previousPeriod": self.previous_period,
            "columnMapping": dict(self.column_mapping),
            "headerRowCount": self.header_row_count,
            "results": [r.to_dict() for r in self.results],
            "missingFromSpreadsheet": list(self.missing_from_spreadsheet),
            "newInSpreadsheet": list(self.new_in_spreadsheet),
            "summary": self.status_counts(),
            "suggestions": list(self.suggestions),
        }


def build_report(period: str,
                 previous_period: str,
                 column_mapping: Dict[str, Optional[int]],
                 header_row_count: int,
                 results: List[EmployeeResult],
                 missing: List[str],
                 new: List[str],
                 suggestions: Optional[pd.DataFrame] = None) -> ReconciliationReport:
    return ReconciliationReport(
        period=period,
        previous_period=previous_period,
        column_mapping=dict(column_mapping),
        header_row_count=header_row_count,
        results=list(results),
        missing_from_spreadsheet=list(missing),
        new_in_spreadsheet=list(new),
        suggestions=suggestions.to_dict(orient="records") if suggestions is not None and len(suggestions) else [],
    )


def checks_frame(report: ReconciliationReport) -> pd.DataFrame:
    rows = []
    for r in report.results:
        for c in r.checks:
            rows.append({"name": r.name, "employeeNumber": r.employee_number, **c.to_dict()})
    return pd.DataFrame(rows, columns=CHECK_COLUMNS)


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def write_outputs(outputs_dir: str, report: ReconciliationReport) -> None:
    ensure_dir(outputs_dir)

    with open(os.path.join(outputs_dir, "data_check.json"), "w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False, default=str)

    checks_frame(report).to_csv(os.path.join(outputs_dir, "checks.csv"), index=False)

    summary = {
        "period": report.period,
        "employees_checked": int(len(report.results)),
        "missing_from_spreadsheet": int(len(report.missing_from_spreadsheet)),
        "new_in_spreadsheet": int(len(report.new_in_spreadsheet)),
        "status_breakdown": report.status_counts(),
    }

    with open(os.path.join(outputs_dir, "data_check_summary.json"), "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2, ensure_ascii=False)

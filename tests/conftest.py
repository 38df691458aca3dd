import pytest
from openpyxl import Workbook

from store import LedgerStore


@pytest.fixture
def write_xlsx(tmp_path):
    """Writes rows to the first sheet of a new workbook and returns its path."""
    def _write(rows, name="payroll.xlsx"):
        wb = Workbook()
        ws = wb.active
        for row in rows:
            ws.append(list(row))
        path = tmp_path / name
        wb.save(path)
        return str(path)
    return _write


@pytest.fixture
def ledger_records():
    return [
        {"externalRecordId": "101", "employeeNumber": "1001", "name": "山田 太郎", "companyShortName": "A社",
         "month": "2025-05", "status": "在籍", "baseSalary": 250000},
        {"externalRecordId": "102", "employeeNumber": "1002", "name": "鈴木 一郎", "companyShortName": "A社",
         "month": "2025-05", "status": "在籍", "baseSalary": 220000},
        {"externalRecordId": "103", "employeeNumber": "1003", "name": "高橋 次郎", "companyShortName": "A社",
         "month": "2025-05", "status": "退社", "baseSalary": 200000},
        {"externalRecordId": "201", "employeeNumber": "2001", "name": "田中 三郎", "companyShortName": "B社",
         "month": "2025-05", "status": "在籍", "baseSalary": 300000},
    ]


@pytest.fixture
def ledger_store(ledger_records):
    return LedgerStore.from_records(ledger_records)

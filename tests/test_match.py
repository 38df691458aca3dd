from ledger import LedgerEmployee
from match import is_active, match_employees, normalize_name
from standardize import SheetEmployee


def _app(key, name, number="", status="在籍", current=True):
    return LedgerEmployee(key=key, name=name, employee_number=number, status=status,
                          current={"baseSalary": 1} if current else None)


def _sheet(name, number="", row=1):
    return SheetEmployee(name=name, employee_number=number, values={}, row_index=row)


def test_normalize_name_ignores_whitespace_variants():
    assert normalize_name("山田 太郎") == normalize_name("山田　太郎") == normalize_name("山田太郎")
    assert normalize_name(" 山田　\t太郎 ") == "山田太郎"
    assert normalize_name("山田太郎") != normalize_name("山田次郎")


def test_employee_number_takes_precedence_over_name():
    ledger = {
        "a": _app("a", "山田太郎", "1001"),
        "b": _app("b", "山田太郎", "2002"),
    }
    result = match_employees([_sheet("山田太郎", "2002")], ledger)
    assert result.pairs[0][1].key == "b"
    assert result.match_types == ["employee_number"]
    assert result.missing_from_sheet == ["山田太郎"]


def test_unknown_number_falls_back_to_name():
    ledger = {"a": _app("a", "山田 太郎", "1001")}
    result = match_employees([_sheet("山田太郎", "9999")], ledger)
    assert result.pairs[0][1].key == "a"
    assert result.match_types == ["name"]
    assert result.new_in_sheet == []


def test_blank_ledger_number_never_matches_by_number():
    ledger = {"a": _app("a", "鈴木", ""), "b": _app("b", "山田", "")}
    result = match_employees([_sheet("山田", "")], ledger)
    assert result.pairs[0][1].key == "b"


def test_people_diff_excludes_retired_and_previous_only():
    ledger = {
        "a": _app("a", "山田"),
        "b": _app("b", "鈴木"),
        "c": _app("c", "高橋", status="退社"),
        "d": _app("d", "田中", current=False),
    }
    result = match_employees([_sheet("山田"), _sheet("佐藤", row=2), _sheet("佐藤", row=3)], ledger)
    assert result.missing_from_sheet == ["鈴木"]
    assert result.new_in_sheet == ["佐藤"]
    assert result.matched_keys == {"a"}
    assert [app is None for _, app in result.pairs] == [False, True, True]


def test_duplicate_rows_reuse_identity_unless_exclusive():
    ledger = {"a": _app("a", "山田")}
    rows = [_sheet("山田", row=1), _sheet("山田", row=2)]

    shared = match_employees(rows, ledger)
    assert [app.key for _, app in shared.pairs] == ["a", "a"]
    assert shared.new_in_sheet == []

    exclusive = match_employees(rows, ledger, exclusive=True)
    assert exclusive.pairs[0][1].key == "a"
    assert exclusive.pairs[1][1] is None
    assert exclusive.new_in_sheet == ["山田"]
    assert exclusive.missing_from_sheet == []


def test_is_active_defaults_to_configured_retired_statuses():
    assert is_active(_app("a", "山田"))
    assert not is_active(_app("b", "高橋", status="退社"))
    assert not is_active(_app("c", "田中", status="inactive"))
    assert not is_active(_app("d", "佐藤", current=False))

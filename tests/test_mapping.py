import pytest

from errors import MissingRequiredColumn
from fields import BASE_FIELDS, FieldDef, build_active_fields
from mapping import build_header_strings, by_identity_alias, by_label, by_saved_hint, resolve_columns

BASE_SALARY = FieldDef("baseSalary", "基本給")


def test_two_row_header_collapses_per_column():
    rows = [
        ["社員番号", "氏名", "通勤", None],
        [None, None, "手当", "基本給"],
        ["1001", "山田 太郎", 12000, 250000],
        ["1002", "鈴木 一郎", 8000, 220000],
    ]
    headers = build_header_strings(rows)
    assert headers == ["社員番号1001", "氏名山田 太郎", "通勤手当12000", "基本給250000"]

    mapping = resolve_columns(rows, BASE_FIELDS)
    assert mapping["employeeNumber"] == 0
    assert mapping["name"] == 1
    assert mapping["commutingAllowance"] == 2
    assert mapping["baseSalary"] == 3
    assert mapping["bonus"] is None


def test_header_block_is_at_most_three_rows():
    rows = [["氏名"], [None], [None], ["基本給"]]
    assert build_header_strings(rows) == ["氏名"]


def test_saved_hint_wins_over_label():
    headers = ["氏名", "支給額", "賞与"]
    bonus = FieldDef("bonus", "賞与")
    assert by_saved_hint(headers, bonus, {"bonus": "支給額"}) == 1
    assert by_label(headers, bonus, {}) == 2

    rows = [headers, ["山田", 1, 2]]
    assert resolve_columns(rows, [bonus], {"bonus": "支給額"})["bonus"] == 1
    assert resolve_columns(rows, [bonus])["bonus"] == 2


def test_substring_match_in_both_directions():
    assert by_label(["基本給（円）"], BASE_SALARY, {}) == 0
    assert by_saved_hint(["健康保険"], FieldDef("socialInsuranceGrade", "社保等級", "text"),
                         {"socialInsuranceGrade": "健康保険_標準額"}) == 0


def test_exact_header_beats_earlier_substring():
    rows = [["氏名", "交通費単価", "単価"], [None, None, None], [None, None, None], ["山田", 1000, 1500]]
    mapping = resolve_columns(rows, BASE_FIELDS)
    assert mapping["commutingUnitPrice"] == 1
    assert mapping["unitPrice"] == 2


def test_identity_aliases_only_for_name_and_number():
    headers = ["従業員コード", "社員名"]
    assert by_identity_alias(headers, FieldDef("name", "氏名", "text"), {}) == 1
    assert by_identity_alias(headers, FieldDef("employeeNumber", "社員番号", "text"), {}) == 0
    assert by_identity_alias(headers, BASE_SALARY, {}) is None


def test_empty_headers_never_match():
    assert by_label(["", "基本給"], BASE_SALARY, {}) == 1


def test_missing_name_column_raises():
    rows = [["Code", "Amount"], ["A1", 100]]
    with pytest.raises(MissingRequiredColumn, match="name"):
        resolve_columns(rows, BASE_FIELDS)


def test_resolution_is_idempotent():
    rows = [["氏名", "所属", "基本給", "住民税"], ["山田", "営業", 250000, 12000]]
    fields = build_active_fields({"allowance2": "役職手当"})
    hints = {"residentTax": "住民税"}
    assert resolve_columns(rows, fields, hints) == resolve_columns(rows, fields, hints)


def test_active_fields_include_named_or_hinted_allowances():
    fields = build_active_fields({"allowance1": "職務手当"}, {"allowance3": "資格手当", "allowance4": "  "})
    keys = [f.key for f in fields]
    assert keys[:len(BASE_FIELDS)] == [f.key for f in BASE_FIELDS]
    assert keys[len(BASE_FIELDS):] == ["allowance1", "allowance3"]
    labels = {f.key: f.label for f in fields}
    assert labels["allowance1"] == "職務手当"
    assert labels["allowance3"] == "手当3"
    kinds = {f.key: f.kind for f in fields}
    assert kinds["department"] == "text"
    assert kinds["socialInsuranceGrade"] == "text"
    assert kinds["allowance1"] == "numeric"

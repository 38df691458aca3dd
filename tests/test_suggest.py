from ledger import LedgerEmployee
from suggest import build_suggestions


def _app(key, name, number=""):
    return LedgerEmployee(key=key, name=name, employee_number=number, status="在籍", current={})


def test_close_names_are_ranked():
    ledger = {
        "1": _app("1", "山田 太郎", "1001"),
        "2": _app("2", "山田 次郎", "1002"),
        "3": _app("3", "鈴木 一郎", "1003"),
    }
    df = build_suggestions(["山田太朗"], ledger, ["1", "2", "3"], min_similarity=40, top_k=3)

    assert list(df["candidate"]) == ["山田 太郎", "山田 次郎"]
    assert list(df["rank"]) == [1, 2]
    assert df.iloc[0]["candidateEmployeeNumber"] == "1001"
    assert list(df["similarity"]) == [75, 50]


def test_only_open_candidates_are_considered():
    ledger = {"1": _app("1", "山田 太郎")}
    df = build_suggestions(["山田太朗"], ledger, [], min_similarity=0, top_k=3)
    assert df.empty
    assert list(df.columns) == ["name", "rank", "candidate", "candidateEmployeeNumber", "similarity"]


def test_top_k_limits_rows():
    ledger = {str(i): _app(str(i), f"山田{i}") for i in range(5)}
    df = build_suggestions(["山田"], ledger, list(ledger), min_similarity=0, top_k=2)
    assert len(df) == 2

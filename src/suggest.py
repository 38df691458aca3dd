import pandas as pd
from rapidfuzz import fuzz
from typing import Dict, Iterable, List

from ledger import LedgerEmployee
from match import normalize_name

SUGGESTION_COLUMNS = ["name", "rank", "candidate", "candidateEmployeeNumber", "similarity"]


def build_suggestions(new_names: List[str],
                      ledger: Dict[str, LedgerEmployee],
                      candidate_keys: Iterable[str],
                      min_similarity: int,
                      top_k: int) -> pd.DataFrame:
    """
    For spreadsheet names with no ledger match, ranks still-unmatched ledger employees
    by name similarity. Informational only: nothing here feeds back into matching.
    """
    candidates = [ledger[k] for k in candidate_keys if k in ledger]
    if not new_names or not candidates:
        return pd.DataFrame(columns=SUGGESTION_COLUMNS)

    rows = []
    for name in new_names:
        target = normalize_name(name)
        scored = []
        for app in candidates:
            similarity = fuzz.ratio(target, normalize_name(app.name))
            if similarity >= min_similarity:
                scored.append((similarity, app))

        scored.sort(key=lambda s: -s[0])
        for rank, (similarity, app) in enumerate(scored[:top_k], start=1):
            rows.append({
                "name": name,
                "rank": rank,
                "candidate": app.name,
                "candidateEmployeeNumber": app.employee_number,
                "similarity": int(round(similarity)),
            })

    return pd.DataFrame(rows, columns=SUGGESTION_COLUMNS)

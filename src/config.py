from dataclasses import dataclass
from typing import Tuple

@dataclass(frozen=True)
class ReconConfig:
    ledger_path: str = "data/raw/monthly_payroll.json"
    aliases_path: str = "config/company_aliases.json"
    settings_path: str = "config/company_settings.json"
    column_map_path: str = "config/excel_mappings.json"
    outputs_dir: str = "outputs"

    default_working_hours: float = 160.0   # used when company settings carry none
    header_block_rows: int = 3             # rows concatenated into column labels
    header_scan_rows: int = 5              # rows inspected when locating the first data row
    retired_statuses: Tuple[str, ...] = ("退社", "retired", "inactive")

    exclusive_matching: bool = False       # skip ledger identities already matched
    min_similarity: int = 60               # 0-100 RapidFuzz threshold for suggestions
    top_k_suggestions: int = 3

from dataclasses import dataclass
from typing import Dict, List, Optional

NUMERIC = "numeric"
TEXT = "text"

ALLOWANCE_COUNT = 6
ALLOWANCE_KEYS = [f"allowance{i}" for i in range(1, ALLOWANCE_COUNT + 1)]


@dataclass(frozen=True)
class FieldDef:
    key: str
    label: str
    kind: str = NUMERIC

    @property
    def is_text(self) -> bool:
        return self.kind == TEXT


BASE_FIELDS: List[FieldDef] = [
    FieldDef("department", "所属", TEXT),
    FieldDef("baseSalary", "基本給"),
    FieldDef("commutingAllowance", "通勤手当"),
    FieldDef("commutingUnitPrice", "交通費単価"),
    FieldDef("deemedOvertimePay", "みなし残業手当"),
    FieldDef("residentTax", "住民税"),
    FieldDef("unitPrice", "単価"),
    FieldDef("socialInsuranceGrade", "社保等級", TEXT),
    FieldDef("bonus", "賞与"),
]

TEXT_FIELD_KEYS = {f.key for f in BASE_FIELDS if f.is_text}
ALL_FIELD_KEYS = [f.key for f in BASE_FIELDS] + ALLOWANCE_KEYS


def build_active_fields(allowance_names: Optional[Dict[str, str]] = None,
                        saved_mapping: Optional[Dict[str, str]] = None) -> List[FieldDef]:
    """Base fields plus each allowance that is either named for the company or has a saved column hint."""
    allowance_names = allowance_names or {}
    saved_mapping = saved_mapping or {}

    fields = list(BASE_FIELDS)
    for i, key in enumerate(ALLOWANCE_KEYS, start=1):
        name = (allowance_names.get(key) or "").strip()
        hint = (saved_mapping.get(key) or "").strip()
        if name or hint:
            fields.append(FieldDef(key, name or f"手当{i}", NUMERIC))
    return fields

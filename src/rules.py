import json
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional


@dataclass(frozen=True)
class CompanyRules:
    standard_working_hours: float
    allowance_names: Dict[str, str] = field(default_factory=dict)


def _load_json(path: str, default: Any) -> Any:
    if not path or not os.path.exists(path):
        return default
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_company_aliases(path: str = "config/company_aliases.json") -> Dict[str, str]:
    """Raw company name -> display name. Accepts {"mappings": {...}} or a flat map."""
    raw = _load_json(path, {})
    if isinstance(raw, dict) and isinstance(raw.get("mappings"), dict):
        raw = raw["mappings"]
    return {str(k): str(v) for k, v in raw.items() if v}


def load_company_settings(path: str = "config/company_settings.json") -> List[Dict[str, Any]]:
    raw = _load_json(path, [])
    if isinstance(raw, dict):
        raw = list(raw.values())
    return [dict(cs) for cs in raw]


def load_saved_mapping(company_name: str, path: str = "config/excel_mappings.json") -> Dict[str, str]:
    """Saved spreadsheet-column hints for one company (field key -> header label)."""
    raw: Dict[str, Any] = _load_json(path, {})
    hints = raw.get(company_name) or {}
    return {str(k): str(v).strip() for k, v in hints.items() if v and str(v).strip()}


def resolve_company_rules(settings: Iterable[Dict[str, Any]],
                          company_name: str,
                          name_variants: Iterable[str],
                          default_hours: float = 160.0) -> CompanyRules:
    """
    Picks standard working hours and configured allowance names from every settings
    entry whose shortName/officialName is one of the company's name variants or starts
    with the display name.
    """
    variants = set(name_variants)
    hours = default_hours
    allowance_names: Dict[str, str] = {}

    for cs in settings:
        sn = str(cs.get("shortName") or "")
        on = str(cs.get("officialName") or "")
        hit = (sn in variants or on in variants
               or (sn and sn.startswith(company_name)) or (on and on.startswith(company_name)))
        if not hit:
            continue
        configured = cs.get("standardWorkingHours")
        if configured and float(configured) != default_hours:
            hours = float(configured)
        for key, label in (cs.get("allowanceNames") or {}).items():
            if label and str(label).strip():
                allowance_names[str(key)] = str(label).strip()

    return CompanyRules(standard_working_hours=hours, allowance_names=allowance_names)


class AliasCache:
    """Holds the alias table until `expires_at`; the caller supplies the clock."""

    def __init__(self, ttl_seconds: float = 300.0):
        self.ttl_seconds = ttl_seconds
        self.expires_at = 0.0
        self._mappings: Optional[Dict[str, str]] = None

    def get(self, now: float, load: Callable[[], Dict[str, str]]) -> Dict[str, str]:
        if self._mappings is not None and now < self.expires_at:
            return self._mappings
        self._mappings = load()
        self.expires_at = now + self.ttl_seconds
        return self._mappings

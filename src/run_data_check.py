import argparse
import logging
import sys
import time
from typing import Dict, List, Optional

from compare import compare_employee
from config import ReconConfig
from errors import InvalidInput, ReconError, UnexpectedFailure
from fields import build_active_fields
from ingest import load_workbook
from ledger import company_name_variants, load_ledger_snapshot, parse_period, previous_period, record_allowance_names
from mapping import resolve_columns
from match import is_active, match_employees
from report import ReconciliationReport, build_report, write_outputs
from rules import AliasCache, load_company_aliases, load_company_settings, load_saved_mapping, resolve_company_rules
from standardize import detect_header_rows, extract_employees
from store import LedgerStore
from suggest import build_suggestions

LOG = logging.getLogger(__name__)


def _check_inputs(workbook, company_name: str, period: str) -> None:
    missing = [label for label, value in (("file", workbook), ("companyName", company_name), ("month", period))
               if not value]
    if missing:
        raise InvalidInput(f"Required inputs missing: {', '.join(missing)}")
    parse_period(period)


def _run(workbook, company_name, period, store, aliases, company_settings,
         saved_mapping, allowance_names, cfg, filename) -> ReconciliationReport:
    rows = load_workbook(workbook, filename=filename)

    variants = company_name_variants(company_name, aliases)
    rules = resolve_company_rules(company_settings, company_name, variants, cfg.default_working_hours)
    ledger, company_records = load_ledger_snapshot(store, company_name, period, aliases,
                                                   rules.standard_working_hours)

    names = dict(rules.allowance_names)
    names.update(record_allowance_names(company_records, period))
    names.update(allowance_names or {})
    fields = build_active_fields(names, saved_mapping)

    mapping = resolve_columns(rows, fields, saved_mapping, block_rows=cfg.header_block_rows)
    header_rows = detect_header_rows(rows, mapping["name"], scan_rows=cfg.header_scan_rows)
    employees = extract_employees(rows, mapping, fields, header_rows=header_rows)
    LOG.info("Extracted %d spreadsheet employees (header rows: %d)", len(employees), header_rows)

    matched = match_employees(employees, ledger, exclusive=cfg.exclusive_matching,
                              retired_statuses=cfg.retired_statuses)
    # columns absent from the export are not reported per employee
    compared = [f for f in fields if mapping.get(f.key) is not None]
    results = [compare_employee(emp, app, compared) for emp, app in matched.pairs]

    open_keys = [k for k, app in ledger.items()
                 if k not in matched.matched_keys and is_active(app, cfg.retired_statuses)]
    suggestions = build_suggestions(matched.new_in_sheet, ledger, open_keys,
                                    min_similarity=cfg.min_similarity, top_k=cfg.top_k_suggestions)

    return build_report(period, previous_period(period), mapping, header_rows, results,
                        matched.missing_from_sheet, matched.new_in_sheet, suggestions)


def run_data_check(workbook,
                   company_name: str,
                   period: str,
                   store: LedgerStore,
                   aliases: Optional[Dict[str, str]] = None,
                   company_settings: Optional[List[Dict]] = None,
                   saved_mapping: Optional[Dict[str, str]] = None,
                   allowance_names: Optional[Dict[str, str]] = None,
                   cfg: ReconConfig = ReconConfig(),
                   filename: Optional[str] = None) -> ReconciliationReport:
    """
    Cross-checks one payroll spreadsheet against the ledger for `company_name`/`period`.
    Raises InvalidInput / MissingRequiredColumn as they are detected; anything else is
    wrapped in UnexpectedFailure.
    """
    _check_inputs(workbook, company_name, period)
    try:
        return _run(workbook, company_name, period, store, aliases or {}, company_settings or [],
                    saved_mapping or {}, allowance_names, cfg, filename)
    except ReconError:
        raise
    except Exception as e:
        LOG.exception("Data check failed for %s %s", company_name, period)
        raise UnexpectedFailure(str(e) or e.__class__.__name__) from e


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = ReconConfig()
    p = argparse.ArgumentParser(description="Check a payroll spreadsheet against the monthly payroll ledger.")
    p.add_argument("workbook", help="Spreadsheet export (.xlsx or .csv)")
    p.add_argument("--company", required=True, help="Company display name")
    p.add_argument("--month", required=True, help="Target period, YYYY-MM")
    p.add_argument("--ledger", default=defaults.ledger_path)
    p.add_argument("--aliases", default=defaults.aliases_path)
    p.add_argument("--settings", default=defaults.settings_path)
    p.add_argument("--mappings", default=defaults.column_map_path)
    p.add_argument("--outputs-dir", default=defaults.outputs_dir)
    p.add_argument("--exclusive-matching", action="store_true",
                   help="Do not let two spreadsheet rows match the same ledger employee")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    cfg = ReconConfig(ledger_path=args.ledger, aliases_path=args.aliases, settings_path=args.settings,
                      column_map_path=args.mappings, outputs_dir=args.outputs_dir,
                      exclusive_matching=args.exclusive_matching)

    cache = AliasCache()
    try:
        aliases = cache.get(time.time(), lambda: load_company_aliases(cfg.aliases_path))
        report = run_data_check(
            args.workbook, args.company, args.month,
            store=LedgerStore.from_path(cfg.ledger_path),
            aliases=aliases,
            company_settings=load_company_settings(cfg.settings_path),
            saved_mapping=load_saved_mapping(args.company, cfg.column_map_path),
            cfg=cfg,
        )
    except ReconError as e:
        print(f"ERROR [{e.kind}]: {e.message}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"ERROR [{UnexpectedFailure.kind}]: {e}", file=sys.stderr)
        return 1

    write_outputs(cfg.outputs_dir, report)

    counts = report.status_counts()
    print(f"Wrote outputs to {cfg.outputs_dir}/")
    print(f"Employees: {len(report.results)} | Missing from spreadsheet: {len(report.missing_from_spreadsheet)} "
          f"| New in spreadsheet: {len(report.new_in_spreadsheet)}")
    print("Status breakdown:", counts)
    return 0


if __name__ == "__main__":
    sys.exit(main())

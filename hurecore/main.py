"""
Main Entry Point - hurecore Command Line

Thin command line over the calculators, the rules store and payroll runs.
"""

import argparse
import json
import os
import sys
from typing import List, Optional

from hurecore.contacts.phone import format_phone_for_display, normalize_kenyan_phone
from hurecore.coreutils.env import EXPORT_DIR, RULES_DB
from hurecore.coreutils.errors import HureCoreError
from hurecore.coreutils.logging import log_function_call, setup_logging
from hurecore.coreutils.time import format_date_with_day_ke, to_date
from hurecore.payroll.schemas import (
    DEFAULT_RULES,
    AttendanceRecord,
    PayrollPeriod,
    StaffPayProfile,
    StatutoryRules,
)
from hurecore.payroll.statutory import calculate_net_pay, calculate_paye
from hurecore.scheduling.repeat_dates import generate_repeat_dates
from hurecore.storage.rules_store import (
    DuckDBRulesRepository,
    get_current_rules,
    get_rules_history,
    revert_to_defaults,
)

logger = setup_logging()


def open_rules_repo(database: str) -> DuckDBRulesRepository:
    if database != ":memory:":
        parent = os.path.dirname(database)
        if parent:
            os.makedirs(parent, exist_ok=True)
    return DuckDBRulesRepository(database)


def load_rules(args) -> StatutoryRules:
    """Active rules from the store, or the built-in defaults with --defaults"""
    if args.defaults:
        return DEFAULT_RULES
    with open_rules_repo(args.rules_db) as repo:
        current = get_current_rules(repo)
        if current is None:
            raise HureCoreError("No active statutory rules; run 'rules revert' first")
        return current.rules


def cmd_paye(args) -> int:
    result = calculate_paye(args.income, load_rules(args))
    for band in result.band_breakdown:
        print(
            f"  {band.start:>12,.2f} - {band.end:>12,.2f} @ {band.rate:>6.1%}: {band.tax:>12,.2f}"
        )
    print(f"Gross tax:       {result.gross_tax:,.2f}")
    print(f"Personal relief: {result.personal_relief:,.2f}")
    print(f"PAYE:            {result.net_tax:,.2f}")
    return 0


def cmd_net_pay(args) -> int:
    result = calculate_net_pay(
        args.basic, args.allowances, load_rules(args), args.non_taxable
    )
    d = result.deductions
    print(f"Gross pay:     {result.gross_pay:,.2f}")
    print(f"Taxable pay:   {result.taxable_pay:,.2f}")
    print(f"PAYE:          {d.paye:,.2f}")
    print(f"NSSF:          {d.nssf:,.2f}")
    print(f"SHIF:          {d.shif:,.2f}")
    print(f"Housing levy:  {d.housing_levy:,.2f}")
    print(f"Deductions:    {d.total:,.2f}")
    print(f"Net pay:       {result.net_pay:,.2f}")
    print(f"Employer cost: {result.employer_cost:,.2f}")
    if not result.is_valid:
        print(f"⚠️  Validation: {', '.join(result.validation_errors)}")
        return 2
    return 0


def cmd_repeat_dates(args) -> int:
    for day in generate_repeat_dates(args.start, args.end, args.weekdays):
        print(f"{day.isoformat()}  {format_date_with_day_ke(day)}")
    return 0


def cmd_phone(args) -> int:
    result = normalize_kenyan_phone(args.value)
    if not result.is_valid:
        print(f"❌ {result.error} ({result.error.code})")
        return 1
    print(f"{result.normalized}  {format_phone_for_display(result.normalized)}")
    return 0


def cmd_rules(args) -> int:
    with open_rules_repo(args.rules_db) as repo:
        if args.action == "show":
            current = get_current_rules(repo)
            if current is None:
                print("No active statutory rules")
                return 1
            print(f"Version {current.version} (effective {current.effective_from})")
            print(json.dumps(current.rules.to_dict(), indent=2))
        elif args.action == "history":
            for version in get_rules_history(repo):
                state = "active" if version.is_active else "archived"
                print(
                    f"v{version.version}  {state:<8}  {version.effective_from}  "
                    f"{version.updated_by}  {version.notes or ''}"
                )
        elif args.action == "revert":
            version = revert_to_defaults(repo, args.by)
            print(f"✅ Reverted to defaults as version {version.version}")
    return 0


def cmd_payroll(args) -> int:
    """Run payroll from a JSON file with period, staff and attendance"""
    from hurecore.orchestration.payroll_run import PayrollRunOrchestrator

    with open(args.input, "r") as f:
        data = json.load(f)

    period_data = data["period"]
    period = PayrollPeriod(
        period_id=period_data["id"],
        name=period_data["name"],
        start_date=to_date(period_data["start_date"]),
        end_date=to_date(period_data["end_date"]),
        is_finalized=period_data.get("is_finalized", False),
    )
    staff = [StaffPayProfile(**item) for item in data.get("staff", [])]
    attendance = [
        AttendanceRecord(
            staff_id=item["staff_id"],
            day=to_date(item["day"]),
            status=item["status"],
            total_hours=item.get("total_hours"),
        )
        for item in data.get("attendance", [])
    ]

    with open_rules_repo(args.rules_db) as repo:
        orchestrator = PayrollRunOrchestrator(
            repo, export_dir=args.output_dir, dry_run=args.dry_run
        )
        results = orchestrator.run(period, staff, attendance)

    print(f"✅ Payroll completed: {results['summary']}")
    for kind, path in results["paths"].items():
        print(f"   {kind}: {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="hurecore clinic workforce tools")
    parser.add_argument(
        "--rules-db", default=RULES_DB, help="DuckDB file holding statutory rules"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    paye = subparsers.add_parser("paye", help="PAYE on a monthly taxable income")
    paye.add_argument("income", type=float)
    paye.add_argument("--defaults", action="store_true", help="Use built-in rules")
    paye.set_defaults(handler=cmd_paye)

    net_pay = subparsers.add_parser("net-pay", help="Net pay breakdown")
    net_pay.add_argument("basic", type=float)
    net_pay.add_argument("--allowances", type=float, default=0.0)
    net_pay.add_argument("--non-taxable", type=float, default=0.0)
    net_pay.add_argument("--defaults", action="store_true", help="Use built-in rules")
    net_pay.set_defaults(handler=cmd_net_pay)

    repeat = subparsers.add_parser("repeat-dates", help="Dates for a repeating shift")
    repeat.add_argument("start", help="YYYY-MM-DD")
    repeat.add_argument("end", help="YYYY-MM-DD")
    repeat.add_argument(
        "weekdays", type=int, nargs="+", help="Weekday indices, 0 = Sunday"
    )
    repeat.set_defaults(handler=cmd_repeat_dates)

    phone = subparsers.add_parser("phone", help="Normalize a Kenyan phone number")
    phone.add_argument("value")
    phone.set_defaults(handler=cmd_phone)

    rules = subparsers.add_parser("rules", help="Statutory rules versions")
    rules.add_argument("action", choices=["show", "history", "revert"])
    rules.add_argument("--by", default="cli", help="User recorded on revert")
    rules.set_defaults(handler=cmd_rules)

    payroll = subparsers.add_parser("payroll", help="Run payroll from a JSON file")
    payroll.add_argument("input", help="JSON with period, staff and attendance")
    payroll.add_argument("--output-dir", default=EXPORT_DIR)
    payroll.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute without writing exports",
    )
    payroll.set_defaults(handler=cmd_payroll)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    log_function_call(args.command, **{k: v for k, v in vars(args).items() if k != "handler"})

    try:
        return args.handler(args)
    except HureCoreError as e:
        logger.error(f"❌ {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except OSError as e:
        logger.error(f"❌ Could not read or write file: {e}")
        print(f"❌ Could not read or write file: {e}", file=sys.stderr)
        return 1
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"❌ Invalid input: {e!r}")
        print(f"❌ Invalid input: {e!r}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

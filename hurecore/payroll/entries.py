"""
Payroll Entries - Period Generation and Summary

Turns staff pay profiles and attendance into payroll entries for a period.
Pure functions: the caller supplies staff, attendance and rules.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import polars as pl
import logging

from hurecore.coreutils.errors import PeriodFinalized, PeriodNotFinalized
from hurecore.coreutils.time import KENYA_TZ
from hurecore.export.csv_export import CSVColumn, format_cents_for_csv
from .schemas import (
    PAYROLL_ENTRY_SCHEMA,
    AttendanceRecord,
    PayrollPeriod,
    StaffPayProfile,
    StatutoryRules,
)
from .statutory import calculate_net_pay

logger = logging.getLogger(__name__)

DEFAULT_SHIFT_HOURS = 8

WORKED_STATUSES = {"Present", "Worked"}
LEAVE_STATUSES = {"On Leave"}
ABSENT_STATUSES = {"Absent", "No-show"}


def summarize_attendance(records: Iterable[AttendanceRecord]) -> Dict[str, float]:
    """
    Count worked hours, paid leave days and absent days

    Records without hours count as a default shift.
    """
    worked_units = 0.0
    paid_leave_units = 0
    absent_units = 0

    for record in records:
        if record.status in WORKED_STATUSES:
            worked_units += record.total_hours or DEFAULT_SHIFT_HOURS
        elif record.status in LEAVE_STATUSES:
            paid_leave_units += 1
        elif record.status in ABSENT_STATUSES:
            absent_units += 1

    return {
        "worked_units": worked_units,
        "paid_leave_units": paid_leave_units,
        "absent_units": absent_units,
    }


def calculate_payable_base_cents(
    profile: StaffPayProfile, worked_units: float, total_days: int
) -> int:
    """Payable base pay in cents for the staff member's pay method"""
    if profile.pay_method == "Fixed":
        return profile.monthly_salary_cents
    if profile.pay_method == "Prorated":
        if total_days <= 0:
            return 0
        return round(
            profile.monthly_salary_cents
            * (worked_units / (total_days * DEFAULT_SHIFT_HOURS))
        )
    if profile.pay_method == "Hourly":
        return round(profile.hourly_rate_cents * worked_units)
    if profile.pay_method == "Per Shift":
        rate = profile.shift_rate_cents or profile.daily_rate_cents
        return round(rate * (worked_units / DEFAULT_SHIFT_HOURS))

    logger.warning(f"Unknown pay method '{profile.pay_method}' for {profile.staff_id}")
    return 0


def _to_cents(amount: float) -> int:
    return round(amount * 100)


def generate_entries(
    period: PayrollPeriod,
    staff: Iterable[StaffPayProfile],
    attendance: Iterable[AttendanceRecord],
    rules: StatutoryRules,
) -> pl.DataFrame:
    """
    Generate payroll entries for every active staff member

    Args:
        period: Payroll period; must not be finalized
        staff: Staff pay profiles
        attendance: Attendance records, filtered here to the period
        rules: Statutory rules for deductions

    Returns:
        pl.DataFrame: One row per active staff member in PAYROLL_ENTRY_SCHEMA
    """
    if period.is_finalized:
        raise PeriodFinalized(f"Cannot modify finalized payroll '{period.name}'")

    logger.info(f"Generating payroll entries for {period.name}")

    by_staff: Dict[str, List[AttendanceRecord]] = {}
    for record in attendance:
        if period.start_date <= record.day <= period.end_date:
            by_staff.setdefault(record.staff_id, []).append(record)

    rows = []
    for profile in staff:
        if profile.staff_status != "Active":
            continue

        units = summarize_attendance(by_staff.get(profile.staff_id, []))
        payable_base_cents = calculate_payable_base_cents(
            profile, units["worked_units"], period.total_days
        )
        gross_pay_cents = payable_base_cents

        calculation = calculate_net_pay(gross_pay_cents / 100, 0, rules)
        if not calculation.is_valid:
            logger.warning(
                f"Payslip checks failed for {profile.staff_id}: {calculation.validation_errors}"
            )

        deductions = calculation.deductions
        rows.append(
            {
                "payroll_period_id": period.period_id,
                "staff_id": profile.staff_id,
                "full_name": profile.full_name,
                "email": profile.email,
                "job_title": profile.job_title,
                "pay_method": profile.pay_method,
                "base_salary_cents": profile.monthly_salary_cents,
                "worked_units": float(units["worked_units"]),
                "paid_leave_units": units["paid_leave_units"],
                "absent_units": units["absent_units"],
                "payable_base_cents": payable_base_cents,
                "gross_pay_cents": gross_pay_cents,
                "paye_cents": _to_cents(deductions.paye),
                "nssf_cents": _to_cents(deductions.nssf),
                "shif_cents": _to_cents(deductions.shif),
                "housing_levy_cents": _to_cents(deductions.housing_levy),
                "deductions_total_cents": _to_cents(deductions.total),
                "net_pay_cents": _to_cents(calculation.net_pay),
                "is_paid": False,
            }
        )

    entries_df = pl.DataFrame(rows, schema=PAYROLL_ENTRY_SCHEMA)
    logger.info(f"Generated {entries_df.height} payroll entries")
    return entries_df


def period_summary(entries_df: pl.DataFrame) -> Dict[str, Any]:
    """Totals for a period's entries"""
    if entries_df.height == 0:
        return {
            "total_entries": 0,
            "total_gross_cents": 0,
            "total_net_cents": 0,
            "total_deductions_cents": 0,
            "paid_count": 0,
            "pending_count": 0,
        }

    totals = entries_df.select(
        pl.len().alias("total_entries"),
        pl.col("gross_pay_cents").sum().alias("total_gross_cents"),
        pl.col("net_pay_cents").sum().alias("total_net_cents"),
        pl.col("deductions_total_cents").sum().alias("total_deductions_cents"),
        pl.col("is_paid").sum().alias("paid_count"),
    ).to_dicts()[0]

    totals["pending_count"] = totals["total_entries"] - totals["paid_count"]
    return totals


def mark_paid(entries_df: pl.DataFrame, staff_ids: Iterable[str]) -> pl.DataFrame:
    """Return a copy with the given staff entries marked paid"""
    ids = list(staff_ids)
    return entries_df.with_columns(
        pl.when(pl.col("staff_id").is_in(ids))
        .then(True)
        .otherwise(pl.col("is_paid"))
        .alias("is_paid")
    )


def _stamp(now: Optional[datetime]) -> str:
    return (now or datetime.now(KENYA_TZ)).isoformat()


def finalize_period(
    period: PayrollPeriod, by: str, now: Optional[datetime] = None
) -> PayrollPeriod:
    """
    Lock a period so its entries can no longer be regenerated

    Returns:
        PayrollPeriod: A finalized copy stamped with who finalized it and when

    Raises:
        PeriodFinalized: if the period is already finalized
    """
    if period.is_finalized:
        raise PeriodFinalized(f"Payroll '{period.name}' is already finalized")

    logger.info(f"Finalizing payroll {period.name} by {by}")
    return replace(period, is_finalized=True, finalized_at=_stamp(now), finalized_by=by)


def archive_period(
    period: PayrollPeriod, by: str, now: Optional[datetime] = None
) -> PayrollPeriod:
    """Archived copy of a finalized period; unfinalized periods raise PeriodNotFinalized"""
    if not period.is_finalized:
        raise PeriodNotFinalized(
            f"Cannot archive unfinalized payroll '{period.name}'. Finalize first."
        )

    logger.info(f"Archiving payroll {period.name} by {by}")
    return replace(period, is_archived=True, archived_at=_stamp(now), archived_by=by)


def unarchive_period(period: PayrollPeriod) -> PayrollPeriod:
    return replace(period, is_archived=False, archived_at=None, archived_by=None)


def _hours(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def payroll_export_columns() -> List[CSVColumn]:
    """Columns of the payroll CSV export"""
    return [
        CSVColumn("Employee Name", lambda row: row["full_name"] or "Unknown"),
        CSVColumn("Email", "email"),
        CSVColumn("Job Title", "job_title"),
        CSVColumn("Pay Method", "pay_method"),
        CSVColumn(
            "Base Salary (KES)", lambda row: format_cents_for_csv(row["base_salary_cents"])
        ),
        CSVColumn("Worked Hours", lambda row: _hours(row["worked_units"])),
        CSVColumn("Absent Days", "absent_units"),
        CSVColumn("Leave Days", "paid_leave_units"),
        CSVColumn("Gross Pay (KES)", lambda row: format_cents_for_csv(row["gross_pay_cents"])),
        CSVColumn(
            "Deductions (KES)",
            lambda row: format_cents_for_csv(row["deductions_total_cents"]),
        ),
        CSVColumn("Net Pay (KES)", lambda row: format_cents_for_csv(row["net_pay_cents"])),
        CSVColumn("Status", lambda row: "Paid" if row["is_paid"] else "Pending"),
    ]

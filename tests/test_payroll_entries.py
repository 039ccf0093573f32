"""
Test Payroll Entries - pay methods, attendance units, period summary
"""

import os
import sys
import unittest
from datetime import date, datetime

import polars as pl

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hurecore.coreutils.errors import PeriodFinalized, PeriodNotFinalized
from hurecore.coreutils.time import KENYA_TZ
from hurecore.export.csv_export import export_to_csv
from hurecore.payroll.entries import (
    archive_period,
    calculate_payable_base_cents,
    finalize_period,
    generate_entries,
    mark_paid,
    payroll_export_columns,
    period_summary,
    summarize_attendance,
    unarchive_period,
)
from hurecore.payroll.schemas import (
    DEFAULT_RULES,
    PAYROLL_ENTRY_SCHEMA,
    AttendanceRecord,
    PayrollPeriod,
    StaffPayProfile,
)

JANUARY = PayrollPeriod("period-2026-01", "January 2026", date(2026, 1, 1), date(2026, 1, 31))


def sample_staff():
    return [
        StaffPayProfile(
            "s-1",
            "Amina Wanjiru",
            pay_method="Fixed",
            email="amina@clinic.co.ke",
            job_title="Nurse",
            monthly_salary_cents=5_000_000,
        ),
        StaffPayProfile(
            "s-2",
            "Otieno Kamau",
            pay_method="Hourly",
            job_title="Locum",
            hourly_rate_cents=50_000,
        ),
        StaffPayProfile(
            "s-3",
            "Former Staff",
            staff_status="Inactive",
            monthly_salary_cents=9_000_000,
        ),
    ]


def sample_attendance():
    return [
        AttendanceRecord("s-2", date(2026, 1, 5), "Present", 6),
        AttendanceRecord("s-2", date(2026, 1, 6), "Present"),
        AttendanceRecord("s-2", date(2026, 1, 7), "Absent"),
        AttendanceRecord("s-2", date(2026, 2, 2), "Present", 10),  # next period
        AttendanceRecord("s-1", date(2026, 1, 9), "On Leave"),
    ]


def test_summarize_attendance_counts_units():
    units = summarize_attendance(
        [
            AttendanceRecord("s", date(2026, 1, 1), "Present", 6),
            AttendanceRecord("s", date(2026, 1, 2), "Worked"),
            AttendanceRecord("s", date(2026, 1, 3), "On Leave"),
            AttendanceRecord("s", date(2026, 1, 4), "No-show"),
            AttendanceRecord("s", date(2026, 1, 5), "Absent"),
            AttendanceRecord("s", date(2026, 1, 6), "Scheduled"),
        ]
    )

    assert units == {"worked_units": 14.0, "paid_leave_units": 1, "absent_units": 2}


def test_payable_base_by_pay_method():
    print("🧪 Testing payable base per pay method...")

    fixed = StaffPayProfile("a", "A", pay_method="Fixed", monthly_salary_cents=5_000_000)
    prorated = StaffPayProfile(
        "b", "B", pay_method="Prorated", monthly_salary_cents=3_100_000
    )
    hourly = StaffPayProfile("c", "C", pay_method="Hourly", hourly_rate_cents=50_000)
    per_shift = StaffPayProfile("d", "D", pay_method="Per Shift", shift_rate_cents=200_000)
    per_day = StaffPayProfile("e", "E", pay_method="Per Shift", daily_rate_cents=150_000)

    assert calculate_payable_base_cents(fixed, 0, 31) == 5_000_000
    assert calculate_payable_base_cents(prorated, 80, 31) == 1_000_000
    assert calculate_payable_base_cents(hourly, 14, 31) == 700_000
    assert calculate_payable_base_cents(per_shift, 16, 31) == 400_000
    assert calculate_payable_base_cents(per_day, 8, 31) == 150_000

    print("✅ Fixed, Prorated, Hourly and Per Shift bases match")


def test_unknown_pay_method_pays_nothing():
    profile = StaffPayProfile("x", "X", pay_method="Commission", monthly_salary_cents=100)
    assert calculate_payable_base_cents(profile, 8, 31) == 0


def test_generate_entries_for_active_staff():
    print("🧪 Testing payroll entry generation...")

    entries_df = generate_entries(JANUARY, sample_staff(), sample_attendance(), DEFAULT_RULES)

    assert entries_df.schema == PAYROLL_ENTRY_SCHEMA
    assert entries_df.height == 2
    assert entries_df["staff_id"].to_list() == ["s-1", "s-2"]

    fixed = entries_df.row(0, named=True)
    assert fixed["gross_pay_cents"] == 5_000_000
    assert fixed["paye_cents"] == 738_335
    assert fixed["nssf_cents"] == 108_000
    assert fixed["deductions_total_cents"] == 1_058_835
    assert fixed["net_pay_cents"] == 3_941_165
    assert fixed["paid_leave_units"] == 1
    assert fixed["is_paid"] is False

    hourly = entries_df.row(1, named=True)
    # February attendance is outside the period
    assert hourly["worked_units"] == 14.0
    assert hourly["absent_units"] == 1
    assert hourly["gross_pay_cents"] == 700_000
    assert hourly["paye_cents"] == 0
    assert hourly["net_pay_cents"] == 628_250

    print(f"✅ Generated {entries_df.height} entries")


def test_net_equals_gross_minus_deductions():
    entries_df = generate_entries(JANUARY, sample_staff(), sample_attendance(), DEFAULT_RULES)

    mismatched = entries_df.filter(
        pl.col("gross_pay_cents") - pl.col("deductions_total_cents")
        != pl.col("net_pay_cents")
    )
    assert mismatched.height == 0


def test_no_active_staff_gives_empty_frame():
    entries_df = generate_entries(JANUARY, sample_staff()[2:], [], DEFAULT_RULES)

    assert entries_df.height == 0
    assert entries_df.schema == PAYROLL_ENTRY_SCHEMA
    assert period_summary(entries_df)["total_entries"] == 0


def test_period_summary_and_mark_paid():
    entries_df = generate_entries(JANUARY, sample_staff(), sample_attendance(), DEFAULT_RULES)

    summary = period_summary(entries_df)
    assert summary["total_entries"] == 2
    assert summary["total_gross_cents"] == 5_700_000
    assert summary["total_net_cents"] == 3_941_165 + 628_250
    assert summary["paid_count"] == 0
    assert summary["pending_count"] == 2

    paid_df = mark_paid(entries_df, ["s-2"])
    summary = period_summary(paid_df)
    assert summary["paid_count"] == 1
    assert summary["pending_count"] == 1
    assert entries_df["is_paid"].sum() == 0


def test_payroll_export_columns_render():
    entries_df = generate_entries(JANUARY, sample_staff(), sample_attendance(), DEFAULT_RULES)

    lines = export_to_csv(entries_df.to_dicts(), payroll_export_columns()).split("\n")

    assert lines[0].startswith('"Employee Name","Email","Job Title","Pay Method"')
    assert lines[0].endswith('"Net Pay (KES)","Status"')
    assert lines[1].startswith('"Amina Wanjiru","amina@clinic.co.ke","Nurse","Fixed","50000.00"')
    assert lines[1].endswith('"39411.65","Pending"')
    # whole hours render without a decimal part
    assert '"Hourly","0.00",14,1,0,' in lines[2], lines[2]


def test_period_lifecycle():
    print("🧪 Testing finalize and archive...")

    finalized_at = datetime(2026, 2, 3, 10, 0, tzinfo=KENYA_TZ)
    finalized = finalize_period(JANUARY, "owner-1", now=finalized_at)

    assert finalized.is_finalized
    assert finalized.finalized_by == "owner-1"
    assert finalized.finalized_at == "2026-02-03T10:00:00+03:00"
    assert not JANUARY.is_finalized

    archived = archive_period(finalized, "owner-1")
    assert archived.is_archived
    assert archived.archived_by == "owner-1"
    assert archived.archived_at is not None
    assert archived.is_finalized

    restored = unarchive_period(archived)
    assert not restored.is_archived
    assert restored.archived_at is None
    assert restored.is_finalized

    print("✅ Period finalized, archived and restored")


class TestFinalizedPeriod(unittest.TestCase):
    def test_archive_requires_finalized_period(self):
        with self.assertRaises(PeriodNotFinalized):
            archive_period(JANUARY, "owner-1")

    def test_finalize_twice_raises(self):
        finalized = finalize_period(JANUARY, "owner-1")
        with self.assertRaises(PeriodFinalized):
            finalize_period(finalized, "owner-2")

    def test_finalized_period_blocks_entry_generation(self):
        finalized = finalize_period(JANUARY, "owner-1")
        with self.assertRaises(PeriodFinalized):
            generate_entries(finalized, sample_staff(), [], DEFAULT_RULES)

    def test_finalized_period_cannot_regenerate(self):
        period = PayrollPeriod(
            "period-2025-12",
            "December 2025",
            date(2025, 12, 1),
            date(2025, 12, 31),
            is_finalized=True,
        )
        with self.assertRaises(PeriodFinalized):
            generate_entries(period, sample_staff(), [], DEFAULT_RULES)


if __name__ == "__main__":
    unittest.main()

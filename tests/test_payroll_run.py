"""
Test Payroll Run Orchestrator - end to end with temporary output
"""

import os
import sys
import tempfile
import unittest
from datetime import date
from unittest.mock import patch

import polars as pl

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hurecore.coreutils.errors import NoActiveRules
from hurecore.orchestration.payroll_run import PayrollRunOrchestrator
from hurecore.payroll.schemas import (
    DEFAULT_RULES,
    AttendanceRecord,
    PayrollPeriod,
    StaffPayProfile,
)
from hurecore.storage.rules_store import (
    DuckDBRulesRepository,
    InMemoryRulesRepository,
    RulesVersion,
    update_rules,
)


class TestPayrollRun(unittest.TestCase):
    def setUp(self):
        self.period = PayrollPeriod(
            "2026-01", "January 2026", date(2026, 1, 1), date(2026, 1, 31)
        )
        self.staff = [
            StaffPayProfile("s-1", "Amina Wanjiru", monthly_salary_cents=5_000_000),
            StaffPayProfile(
                "s-2", "Otieno Kamau", pay_method="Hourly", hourly_rate_cents=50_000
            ),
        ]
        self.attendance = [
            AttendanceRecord("s-2", date(2026, 1, 5), "Present", 6),
            AttendanceRecord("s-2", date(2026, 1, 6), "Present"),
        ]

    def test_run_writes_csv_and_parquet(self):
        print("🧪 Testing payroll run with exports...")

        with tempfile.TemporaryDirectory() as tmp:
            orchestrator = PayrollRunOrchestrator(InMemoryRulesRepository(), export_dir=tmp)
            results = orchestrator.run(self.period, self.staff, self.attendance)

            self.assertEqual(results["rules_version"], 1)
            self.assertEqual(results["summary"]["total_entries"], 2)
            self.assertTrue(os.path.exists(results["paths"]["csv"]))
            self.assertTrue(os.path.exists(results["paths"]["parquet"]))

            with open(results["paths"]["csv"], "r", encoding="utf-8") as f:
                self.assertEqual(f.read(), results["csv"])

            saved = pl.read_parquet(results["paths"]["parquet"])
            self.assertEqual(saved["net_pay_cents"].to_list(), [3_941_165, 628_250])

        print("✅ Payroll run exported CSV and Parquet")

    def test_run_uses_latest_rules_version(self):
        with DuckDBRulesRepository(":memory:") as repo:
            update_rules(repo, "admin-1", shif_rate=0.0, housing_levy_rate=0.0)
            orchestrator = PayrollRunOrchestrator(repo, dry_run=True)

            results = orchestrator.run(self.period, self.staff[:1], [])

        self.assertEqual(results["rules_version"], 2)
        entry = results["entries"].row(0, named=True)
        self.assertEqual(entry["shif_cents"], 0)
        self.assertEqual(entry["housing_levy_cents"], 0)

    @patch("hurecore.orchestration.payroll_run.save_payroll_export")
    def test_dry_run_writes_nothing(self, mock_save):
        orchestrator = PayrollRunOrchestrator(InMemoryRulesRepository(), dry_run=True)

        results = orchestrator.run(self.period, self.staff, self.attendance)

        mock_save.assert_not_called()
        self.assertEqual(results["paths"], {})
        self.assertTrue(results["csv"].startswith('"Employee Name"'))

    def test_empty_period_skips_export(self):
        with tempfile.TemporaryDirectory() as tmp:
            orchestrator = PayrollRunOrchestrator(InMemoryRulesRepository(), export_dir=tmp)
            results = orchestrator.run(self.period, [], [])

            self.assertIsNone(results["csv"])
            self.assertEqual(results["paths"], {})
            self.assertEqual(os.listdir(tmp), [])

    def test_missing_active_rules_raises(self):
        repo = InMemoryRulesRepository(
            [
                RulesVersion(
                    version=1,
                    rules=DEFAULT_RULES,
                    is_active=False,
                    effective_from="2024-01-01",
                    updated_by="system",
                )
            ]
        )
        orchestrator = PayrollRunOrchestrator(repo, dry_run=True)

        with self.assertRaises(NoActiveRules):
            orchestrator.run(self.period, self.staff, self.attendance)


if __name__ == "__main__":
    unittest.main()

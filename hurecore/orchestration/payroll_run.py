"""
Payroll Run Orchestrator

One run per payroll period:
1. Load the active statutory rules from the injected repository
2. Generate entries for active staff
3. Summarize the period
4. Render and save the CSV export (skipped in dry-run mode)
"""

from typing import Any, Dict, Iterable, Optional
import logging

from hurecore.coreutils.env import EXPORT_DIR
from hurecore.coreutils.errors import NoActiveRules
from hurecore.export.csv_export import export_to_csv
from hurecore.export.local_storage import save_payroll_export
from hurecore.payroll.entries import (
    generate_entries,
    payroll_export_columns,
    period_summary,
)
from hurecore.payroll.schemas import AttendanceRecord, PayrollPeriod, StaffPayProfile
from hurecore.storage.rules_store import RulesRepository, get_current_rules

logger = logging.getLogger(__name__)


class PayrollRunOrchestrator:
    """Coordinates rules lookup, entry generation and export for a period"""

    def __init__(
        self,
        rules_repo: RulesRepository,
        export_dir: Optional[str] = None,
        dry_run: bool = False,
    ):
        """
        Initialize the payroll run orchestrator

        Args:
            rules_repo: Statutory rules repository
            export_dir: Where exports are written (HURECORE_EXPORT_DIR by default)
            dry_run: If true, compute everything but write no files
        """
        self.rules_repo = rules_repo
        self.export_dir = export_dir or EXPORT_DIR
        self.dry_run = dry_run

        if self.dry_run:
            logger.info("🔍 DRY RUN MODE: exports will not be written")

    def run(
        self,
        period: PayrollPeriod,
        staff: Iterable[StaffPayProfile],
        attendance: Iterable[AttendanceRecord],
    ) -> Dict[str, Any]:
        """
        Run payroll for a period

        Returns:
            Dict: entries frame, summary, rules version, rendered CSV and
            saved file paths (empty in dry-run mode)
        """
        logger.info(f"🚀 Starting payroll run for {period.name}")

        try:
            logger.info("🔄 Step 1: Loading statutory rules...")
            current = get_current_rules(self.rules_repo)
            if current is None:
                raise NoActiveRules("No active statutory rules to run payroll with")
            logger.info(f"✅ Using statutory rules version {current.version}")

            logger.info("🔄 Step 2: Generating entries...")
            entries_df = generate_entries(period, staff, attendance, current.rules)

            logger.info("🔄 Step 3: Summarizing period...")
            summary = period_summary(entries_df)
            logger.info(
                f"✅ {summary['total_entries']} entries, "
                f"gross {summary['total_gross_cents'] / 100:,.2f} KES, "
                f"net {summary['total_net_cents'] / 100:,.2f} KES"
            )

            csv_text = None
            paths: Dict[str, str] = {}
            if entries_df.height == 0:
                logger.warning("⚠️ No active staff in period, nothing to export")
            else:
                logger.info("🔄 Step 4: Rendering export...")
                csv_text = export_to_csv(entries_df.to_dicts(), payroll_export_columns())
                if self.dry_run:
                    logger.info("🔍 DRY RUN: Would save payroll export")
                else:
                    paths = save_payroll_export(
                        entries_df, csv_text, period.period_id, self.export_dir
                    )

            logger.info("🎉 Payroll run completed")
            return {
                "entries": entries_df,
                "summary": summary,
                "rules_version": current.version,
                "csv": csv_text,
                "paths": paths,
            }

        except Exception as e:
            logger.error(f"❌ Payroll run failed: {e}")
            raise

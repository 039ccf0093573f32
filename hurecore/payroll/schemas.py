"""
Payroll Schemas

Statutory rule structures, payroll input/output records and the polars
schema for generated payroll entries.
"""

import math
from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import polars as pl

from hurecore.coreutils.errors import InvalidConfiguration


@dataclass(frozen=True)
class PAYEBand:
    """A monthly PAYE bracket: cumulative upper limit in KES and marginal rate"""

    limit: float
    rate: float

    @property
    def is_unbounded(self) -> bool:
        return math.isinf(self.limit)


@dataclass(frozen=True)
class StatutoryRules:
    pay_bands: tuple
    personal_relief: float = 2400
    shif_rate: float = 2.75  # percent of gross
    housing_levy_rate: float = 1.5  # percent of gross
    nssf_tier_i_limit: float = 6000
    nssf_tier_ii_limit: float = 18000
    nssf_rate: float = 0.06
    nssf_employer_rate: float = 0.06
    nssf_cap: float = 1080

    def with_changes(self, **changes) -> "StatutoryRules":
        unknown = sorted(set(changes) - {f.name for f in fields(self)})
        if unknown:
            raise InvalidConfiguration(f"Unknown statutory rule fields: {unknown}")
        if "pay_bands" in changes:
            changes["pay_bands"] = _coerce_bands(changes["pay_bands"])
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pay_bands": [
                {"limit": None if band.is_unbounded else band.limit, "rate": band.rate}
                for band in self.pay_bands
            ],
            "personal_relief": self.personal_relief,
            "shif_rate": self.shif_rate,
            "housing_levy_rate": self.housing_levy_rate,
            "nssf_tier_i_limit": self.nssf_tier_i_limit,
            "nssf_tier_ii_limit": self.nssf_tier_ii_limit,
            "nssf_rate": self.nssf_rate,
            "nssf_employer_rate": self.nssf_employer_rate,
            "nssf_cap": self.nssf_cap,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatutoryRules":
        """Build rules from stored data; a last band limit of 0/None means unbounded"""
        defaults = DEFAULT_RULES
        return cls(
            pay_bands=_coerce_bands(data.get("pay_bands") or []),
            personal_relief=data.get("personal_relief", defaults.personal_relief),
            shif_rate=data.get("shif_rate", defaults.shif_rate),
            housing_levy_rate=data.get("housing_levy_rate", defaults.housing_levy_rate),
            nssf_tier_i_limit=data.get("nssf_tier_i_limit", defaults.nssf_tier_i_limit),
            nssf_tier_ii_limit=data.get("nssf_tier_ii_limit", defaults.nssf_tier_ii_limit),
            nssf_rate=data.get("nssf_rate", defaults.nssf_rate),
            nssf_employer_rate=data.get("nssf_employer_rate", defaults.nssf_employer_rate),
            nssf_cap=data.get("nssf_cap", defaults.nssf_cap),
        )


def _coerce_bands(raw_bands: Iterable[Any]) -> tuple:
    """PAYEBand tuple from bands or stored mappings; a last limit of 0/None is unbounded"""
    raw_bands = list(raw_bands)
    bands = []
    for idx, band in enumerate(raw_bands):
        if isinstance(band, PAYEBand):
            bands.append(band)
            continue
        try:
            limit = band.get("limit")
            if idx == len(raw_bands) - 1 and (limit is None or limit == 0):
                limit = math.inf
            bands.append(PAYEBand(limit=float(limit), rate=float(band["rate"])))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise InvalidConfiguration(f"Invalid PAYE band {band!r}") from e
    return tuple(bands)


# KRA 2025/2026 monthly bands (annual thresholds divided by 12)
DEFAULT_RULES = StatutoryRules(
    pay_bands=(
        PAYEBand(24000, 0.10),
        PAYEBand(32333, 0.25),
        PAYEBand(500000, 0.30),
        PAYEBand(800000, 0.325),
        PAYEBand(math.inf, 0.35),
    ),
)


@dataclass
class BandTax:
    start: float
    end: float
    rate: float
    taxable_amount: float
    tax: float


@dataclass
class PAYEResult:
    gross_tax: float
    personal_relief: float
    net_tax: float
    band_breakdown: List[BandTax] = field(default_factory=list)


@dataclass
class NSSFResult:
    tier_i: float
    tier_ii: float
    total: float
    employer: float


@dataclass
class Deductions:
    paye: float
    nssf: float
    nssf_tier_i: float
    nssf_tier_ii: float
    shif: float
    housing_levy: float
    total: float


@dataclass
class NetPayBreakdown:
    basic_salary: float
    allowances: float
    non_taxable_allowances: float
    gross_pay: float
    taxable_pay: float
    paye: PAYEResult
    deductions: Deductions
    net_pay: float
    employer_nssf: float
    employer_cost: float
    validation_errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors


PAY_METHODS = ("Fixed", "Prorated", "Hourly", "Per Shift")


@dataclass
class StaffPayProfile:
    staff_id: str
    full_name: str
    pay_method: str = "Fixed"
    email: str = ""
    job_title: str = ""
    staff_status: str = "Active"
    monthly_salary_cents: int = 0
    hourly_rate_cents: int = 0
    shift_rate_cents: int = 0
    daily_rate_cents: int = 0


@dataclass
class AttendanceRecord:
    staff_id: str
    day: date
    status: str
    total_hours: Optional[float] = None


@dataclass
class PayrollPeriod:
    period_id: str
    name: str
    start_date: date
    end_date: date
    is_finalized: bool = False
    finalized_at: Optional[str] = None
    finalized_by: Optional[str] = None
    is_archived: bool = False
    archived_at: Optional[str] = None
    archived_by: Optional[str] = None

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


PAYROLL_ENTRY_SCHEMA = pl.Schema(
    [
        ("payroll_period_id", pl.String()),
        ("staff_id", pl.String()),
        ("full_name", pl.String()),
        ("email", pl.String()),
        ("job_title", pl.String()),
        ("pay_method", pl.String()),
        ("base_salary_cents", pl.Int64()),
        ("worked_units", pl.Float64()),
        ("paid_leave_units", pl.Int64()),
        ("absent_units", pl.Int64()),
        ("payable_base_cents", pl.Int64()),
        ("gross_pay_cents", pl.Int64()),
        ("paye_cents", pl.Int64()),
        ("nssf_cents", pl.Int64()),
        ("shif_cents", pl.Int64()),
        ("housing_levy_cents", pl.Int64()),
        ("deductions_total_cents", pl.Int64()),
        ("net_pay_cents", pl.Int64()),
        ("is_paid", pl.Boolean()),
    ]
)

"""
Payroll Validators

Checks that statutory rules can be evaluated and that computed payslips
are not impossible.
"""

import math
import logging
from typing import List

from hurecore.coreutils.errors import InvalidConfiguration, InvalidIncome
from .schemas import StatutoryRules, NetPayBreakdown

logger = logging.getLogger(__name__)

# PAYE above this share of taxable pay is suspicious but legal
PAYE_WARNING_SHARE = 0.4


def validate_rules(rules: StatutoryRules) -> bool:
    """
    Validate statutory rules before any calculation uses them

    Args:
        rules: Statutory rules to check

    Returns:
        bool: True if valid, raises InvalidConfiguration otherwise
    """
    bands = list(rules.pay_bands)
    if not bands:
        raise InvalidConfiguration("PAYE bands are empty")

    previous_limit = 0.0
    for idx, band in enumerate(bands):
        if math.isnan(band.limit):
            raise InvalidConfiguration(f"Band {idx + 1} has no limit")
        if band.limit <= previous_limit:
            raise InvalidConfiguration(
                f"Band limits must be strictly increasing: band {idx + 1} "
                f"limit {band.limit} <= {previous_limit}"
            )
        if math.isinf(band.limit) and idx != len(bands) - 1:
            raise InvalidConfiguration("Only the last band may be unbounded")
        if not 0 <= band.rate <= 1:
            raise InvalidConfiguration(
                f"Band {idx + 1} rate {band.rate} is outside [0, 1]"
            )
        previous_limit = band.limit

    if rules.personal_relief < 0:
        raise InvalidConfiguration("Personal relief cannot be negative")

    for name in ("shif_rate", "housing_levy_rate"):
        value = getattr(rules, name)
        if not 0 <= value <= 100:
            raise InvalidConfiguration(f"{name} {value} is outside [0, 100] percent")

    for name in ("nssf_rate", "nssf_employer_rate"):
        value = getattr(rules, name)
        if not 0 <= value <= 1:
            raise InvalidConfiguration(f"{name} {value} is outside [0, 1]")

    if not 0 <= rules.nssf_tier_i_limit <= rules.nssf_tier_ii_limit:
        raise InvalidConfiguration(
            "NSSF tier I limit must not exceed the tier II limit"
        )

    return True


def validate_income(amount: float, label: str = "income") -> float:
    """Reject negative, NaN and infinite amounts"""
    if amount is None or isinstance(amount, bool):
        raise InvalidIncome(f"{label} is required")
    if math.isnan(amount) or math.isinf(amount):
        raise InvalidIncome(f"{label} must be a finite number, got {amount}")
    if amount < 0:
        raise InvalidIncome(f"{label} cannot be negative, got {amount}")
    return amount


def check_net_pay(breakdown: NetPayBreakdown, nssf_cap: float) -> List[str]:
    """
    Flag impossible payslips

    Args:
        breakdown: Computed net pay breakdown
        nssf_cap: Maximum employee NSSF contribution

    Returns:
        List[str]: Validation codes, empty when the payslip is consistent
    """
    errors = []
    paye = breakdown.deductions.paye
    taxable = breakdown.taxable_pay

    if paye > taxable:
        errors.append("PAYE_EXCEEDS_TAXABLE")
        logger.error(f"PAYE ({paye}) exceeds taxable pay ({taxable})")

    if breakdown.deductions.total > breakdown.gross_pay:
        errors.append("DEDUCTIONS_EXCEED_GROSS")
        logger.error(
            f"Deductions ({breakdown.deductions.total}) exceed gross ({breakdown.gross_pay})"
        )

    if breakdown.deductions.nssf > nssf_cap:
        errors.append("NSSF_EXCEEDS_MAX")
        logger.error(f"NSSF ({breakdown.deductions.nssf}) exceeds max ({nssf_cap})")

    if taxable > 0 and paye > taxable * PAYE_WARNING_SHARE:
        logger.warning(
            f"PAYE ({paye}) is {paye / taxable * 100:.1f}% of taxable pay"
        )

    return errors

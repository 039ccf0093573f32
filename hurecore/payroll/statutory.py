"""
Statutory Deductions - Pure Calculators

KRA-aligned payroll flow:
1. Gross pay = basic + allowances
2. Taxable pay = gross - non-taxable allowances
3. PAYE from monthly bands, applied progressively
4. Personal relief subtracted after PAYE, floored at zero
5. NSSF, SHIF and housing levy computed on gross; they do NOT reduce taxable pay
6. Net pay = gross - all deductions
"""

import logging

from .schemas import (
    BandTax,
    Deductions,
    NetPayBreakdown,
    NSSFResult,
    PAYEResult,
    StatutoryRules,
)
from .validators import check_net_pay, validate_income, validate_rules

logger = logging.getLogger(__name__)


def _cents(amount: float) -> float:
    return round(amount, 2)


def calculate_paye(taxable_pay: float, rules: StatutoryRules) -> PAYEResult:
    """
    Calculate PAYE using the monthly bands progressively

    Each band's rate applies only to the slice of income between the previous
    band's limit and its own. Income beyond the last finite limit is taxed at
    the last band's rate.

    Args:
        taxable_pay: Monthly taxable income in KES
        rules: Statutory rules with PAYE bands

    Returns:
        PAYEResult: Gross tax, personal relief, net tax and per-band breakdown
    """
    validate_rules(rules)
    validate_income(taxable_pay, "taxable pay")

    bands = list(rules.pay_bands)
    gross_tax = 0.0
    previous_limit = 0.0
    breakdown = []

    for idx, band in enumerate(bands):
        if taxable_pay <= previous_limit:
            break

        is_last = idx == len(bands) - 1
        upper = taxable_pay if is_last else min(taxable_pay, band.limit)
        taxable_amount = upper - previous_limit
        band_tax = taxable_amount * band.rate
        gross_tax += band_tax

        breakdown.append(
            BandTax(
                start=previous_limit,
                end=upper,
                rate=band.rate,
                taxable_amount=taxable_amount,
                tax=_cents(band_tax),
            )
        )
        previous_limit = band.limit

    net_tax = max(0.0, gross_tax - rules.personal_relief)

    return PAYEResult(
        gross_tax=_cents(gross_tax),
        personal_relief=rules.personal_relief,
        net_tax=_cents(net_tax),
        band_breakdown=breakdown,
    )


def calculate_nssf(gross_pay: float, rules: StatutoryRules) -> NSSFResult:
    """
    Calculate NSSF employee contribution in two tiers

    Tier I: rate on earnings up to the tier I limit
    Tier II: rate on earnings between the tier I and tier II limits
    The employee total is capped at nssf_cap.
    """
    validate_income(gross_pay, "gross pay")

    tier_i = min(gross_pay, rules.nssf_tier_i_limit) * rules.nssf_rate

    tier_ii = 0.0
    if gross_pay > rules.nssf_tier_i_limit:
        tier_ii_earnings = (
            min(gross_pay, rules.nssf_tier_ii_limit) - rules.nssf_tier_i_limit
        )
        tier_ii = tier_ii_earnings * rules.nssf_rate

    total = tier_i + tier_ii
    if total > rules.nssf_cap:
        logger.warning(f"NSSF calculation capped: {total} -> {rules.nssf_cap}")
        total = rules.nssf_cap

    pensionable = min(gross_pay, rules.nssf_tier_ii_limit)
    employer = min(pensionable * rules.nssf_employer_rate, rules.nssf_cap)

    return NSSFResult(
        tier_i=_cents(tier_i),
        tier_ii=_cents(tier_ii),
        total=_cents(total),
        employer=_cents(employer),
    )


def calculate_shif(gross_pay: float, rules: StatutoryRules) -> float:
    """SHIF: flat percentage of gross pay"""
    validate_income(gross_pay, "gross pay")
    return _cents(gross_pay * rules.shif_rate / 100)


def calculate_housing_levy(gross_pay: float, rules: StatutoryRules) -> float:
    """Affordable Housing Levy: flat percentage of gross pay"""
    validate_income(gross_pay, "gross pay")
    return _cents(gross_pay * rules.housing_levy_rate / 100)


def calculate_net_pay(
    basic_salary: float,
    allowances: float,
    rules: StatutoryRules,
    non_taxable_allowances: float = 0,
) -> NetPayBreakdown:
    """
    Calculate net pay with the full deduction breakdown

    Args:
        basic_salary: Monthly basic salary in KES
        allowances: Monthly allowances in KES
        rules: Statutory rules
        non_taxable_allowances: Part of allowances exempt from PAYE

    Returns:
        NetPayBreakdown: Gross, taxable, PAYE, deductions, net pay and
        validation codes for impossible results
    """
    validate_income(basic_salary, "basic salary")
    validate_income(allowances, "allowances")
    validate_income(non_taxable_allowances, "non-taxable allowances")

    gross_pay = basic_salary + allowances
    taxable_pay = max(0.0, gross_pay - non_taxable_allowances)

    paye = calculate_paye(taxable_pay, rules)
    nssf = calculate_nssf(gross_pay, rules)
    shif = calculate_shif(gross_pay, rules)
    housing_levy = calculate_housing_levy(gross_pay, rules)

    total_deductions = _cents(paye.net_tax + nssf.total + shif + housing_levy)

    breakdown = NetPayBreakdown(
        basic_salary=basic_salary,
        allowances=allowances,
        non_taxable_allowances=non_taxable_allowances,
        gross_pay=gross_pay,
        taxable_pay=taxable_pay,
        paye=paye,
        deductions=Deductions(
            paye=paye.net_tax,
            nssf=nssf.total,
            nssf_tier_i=nssf.tier_i,
            nssf_tier_ii=nssf.tier_ii,
            shif=shif,
            housing_levy=housing_levy,
            total=total_deductions,
        ),
        net_pay=_cents(gross_pay - total_deductions),
        employer_nssf=nssf.employer,
        employer_cost=_cents(gross_pay + nssf.employer),
    )
    breakdown.validation_errors = check_net_pay(breakdown, rules.nssf_cap)
    return breakdown

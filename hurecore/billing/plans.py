"""
Plan Pricing

Monthly subscription plans in KES with their location, staff and admin limits.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

CURRENCY = "KES"
BILLING_CYCLE_DAYS = 31
GRACE_PERIOD_DAYS = 0


@dataclass(frozen=True)
class Plan:
    plan_id: str
    amount_kes: int
    locations: int
    staff: int
    admins: int
    features: Tuple[str, ...]
    popular: bool = False

    @property
    def amount_cents(self) -> int:
        return self.amount_kes * 100


PLANS: Dict[str, Plan] = {
    "Essential": Plan(
        "Essential", 8000, 1, 10, 2, ("Basic Scheduling", "Attendance", "CSV Exports")
    ),
    "Professional": Plan(
        "Professional",
        15000,
        2,
        30,
        5,
        ("Advanced Scheduling", "Payroll mapping", "Multiple Branches"),
        popular=True,
    ),
    "Enterprise": Plan(
        "Enterprise", 25000, 5, 75, 10, ("API Access", "Custom Roles", "Dedicated Support")
    ),
}


def get_plan(plan_id: str) -> Plan:
    try:
        return PLANS[plan_id]
    except KeyError:
        raise ValueError(
            f"Unknown plan '{plan_id}', expected one of {sorted(PLANS)}"
        ) from None


def get_plan_amount(plan_id: str) -> int:
    return get_plan(plan_id).amount_kes


def get_plan_amount_cents(plan_id: str) -> int:
    return get_plan(plan_id).amount_cents


def format_kes(amount_cents: int) -> str:
    """15000_00 -> 'KES 15,000'; fractional shillings keep two decimals"""
    amount = amount_cents / 100
    if amount == int(amount):
        return f"{CURRENCY} {int(amount):,}"
    return f"{CURRENCY} {amount:,.2f}"


def plan_allows(plan_id: str, locations: int, staff: int, admins: int = 0) -> bool:
    """Whether an organization's current counts fit within a plan's limits"""
    plan = get_plan(plan_id)
    return locations <= plan.locations and staff <= plan.staff and admins <= plan.admins

"""
Eligibility predicates.

Income eligibility decides whether a household qualifies for a policy at all.
Child eligibility comes in two named modes that must not be merged:

- could_ever_apply: the policy band overlaps the childhood window, so the
  policy stays in the catalog even if the child only qualifies later.
- applies_now: the child's current age sits inside the policy band.
"""

from typing import Optional, Tuple

from ..models import (
    ANY_BIRTH_ORDER,
    Child,
    ChildCondition,
    IncomeLimit,
    IncomeLimitKind,
    IncomeTier,
)

CHILDHOOD = (0, 18)


def income_eligible(income: int, limit: IncomeLimit) -> bool:
    """
    Check a household income against an income limit.

    Thresholds are strict: income equal to the threshold does not qualify.
    A tiered limit qualifies if any tier's threshold exceeds the income.
    A single limit without a threshold, or a tiered limit without tiers,
    never qualifies.
    """
    if limit.kind == IncomeLimitKind.NONE:
        return True
    if limit.kind == IncomeLimitKind.SINGLE:
        if not limit.threshold:
            return False
        return income < limit.threshold
    if limit.kind == IncomeLimitKind.TIERED:
        return any(income < tier.threshold for tier in limit.tiers)
    return False


def select_tier(income: int, limit: IncomeLimit) -> Optional[IncomeTier]:
    """Return the first tier, in listed order, whose threshold exceeds income."""
    for tier in limit.tiers:
        if income < tier.threshold:
            return tier
    return None


def ceiling_tier(limit: IncomeLimit) -> Optional[IncomeTier]:
    """Return the first listed tier regardless of income."""
    if limit.kind != IncomeLimitKind.TIERED or not limit.tiers:
        return None
    return limit.tiers[0]


def matches_birth_order(child: Child, condition: ChildCondition) -> bool:
    required = condition.birth_order
    if required is None or required == ANY_BIRTH_ORDER:
        return True
    return required == child.birth_order


def could_ever_apply(
    child: Child,
    condition: ChildCondition,
    childhood: Tuple[int, int] = CHILDHOOD,
) -> bool:
    """
    Filter mode: could the policy apply to this child at any age in childhood?

    The current age is ignored on purpose; a 2-year-old still sees
    high-school support.
    """
    if not matches_birth_order(child, condition):
        return False

    child_min, child_max = childhood
    policy_min, policy_max = condition.age_bounds()
    return not (child_max < policy_min or child_min > policy_max)


def applies_now(
    child: Child,
    condition: ChildCondition,
    default_bounds: Tuple[int, int] = CHILDHOOD,
) -> bool:
    """Point-in-time mode: is the child inside the policy band at their current age?"""
    if not matches_birth_order(child, condition):
        return False

    policy_min, policy_max = condition.age_bounds(*default_bounds)
    return policy_min <= child.age <= policy_max

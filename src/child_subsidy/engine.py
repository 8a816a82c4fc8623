"""
Aggregation and ranking engine.

For each jurisdiction: filter the policy catalog by income, then by whether
any child could ever qualify, run each surviving policy through its
calculator, and total the results. Across jurisdictions, rank by the
remaining entitlement.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union

from .calculators import CalculationContext, resolve
from .calculators.eligibility import applies_now, could_ever_apply, income_eligible
from .catalog import CatalogProvider, PackagedCatalog, resolve_jurisdiction
from .config import EngineConfig
from .errors import InvalidInputError
from .medical import MedicalCostTable, load_medical_costs
from .models import (
    AppliedPolicy,
    BirthOrder,
    CalculationInput,
    CalculationResult,
    Child,
    Jurisdiction,
    Policy,
)

logger = logging.getLogger(__name__)


def validate_input(calc_input: CalculationInput) -> None:
    """
    Reject inputs the engine cannot interpret.

    Ages above 18 are allowed: such a child simply has no remaining entitlement.

    Raises:
        InvalidInputError: On negative income, negative ages or unknown birth orders
    """
    if calc_input.household_income < 0:
        raise InvalidInputError(
            f"Household income must be non-negative, got {calc_input.household_income}"
        )
    for i, child in enumerate(calc_input.children):
        if child.age < 0:
            raise InvalidInputError(f"Child {i + 1}: age must be non-negative, got {child.age}")
        if not isinstance(child.birth_order, BirthOrder):
            raise InvalidInputError(
                f"Child {i + 1}: unknown birth order {child.birth_order!r}"
            )


class SubsidyEngine:
    """Compute and rank subsidy totals over an injected policy catalog."""

    def __init__(
        self,
        catalog: Optional[CatalogProvider] = None,
        medical_costs: Optional[MedicalCostTable] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.catalog = catalog or PackagedCatalog()
        self.medical_costs = medical_costs
        self.config = config or EngineConfig()

    def _context(self, calc_input: CalculationInput) -> CalculationContext:
        return CalculationContext(
            household_income=calc_input.household_income,
            children=calc_input.children,
            medical_costs=self.medical_costs or load_medical_costs(),
            config=self.config,
        )

    def filter_policies(
        self, policies: Sequence[Policy], calc_input: CalculationInput
    ) -> List[Policy]:
        """Keep policies the household's income qualifies for and some child could ever use."""
        childhood = (self.config.childhood_min_age, self.config.childhood_max_age)

        by_income = [
            policy
            for policy in policies
            if income_eligible(calc_input.household_income, policy.income_limit)
        ]
        applicable = [
            policy
            for policy in by_income
            if any(
                could_ever_apply(child, policy.child_condition, childhood)
                for child in calc_input.children
            )
        ]

        logger.debug(
            "%d policies, %d pass income limit, %d apply to children",
            len(policies),
            len(by_income),
            len(applicable),
        )
        return applicable

    def apply_policy(self, policy: Policy, ctx: CalculationContext) -> AppliedPolicy:
        """Run one policy through its calculator."""
        calculator = resolve(policy)
        accrual = calculator.remaining(policy, ctx)

        return AppliedPolicy(
            policy=policy,
            calculated_amount=accrual.amount,
            years_applied=accrual.years,
            age_range=accrual.age_range,
            max_amount=calculator.maximum(policy, ctx),
            received_amount=calculator.received(policy, ctx),
            active_now=any(
                applies_now(child, policy.child_condition, calculator.default_bounds)
                for child in ctx.children
            ),
        )

    def calculate_for_jurisdiction(
        self,
        jurisdiction: Union[Jurisdiction, str],
        calc_input: CalculationInput,
    ) -> CalculationResult:
        """
        Calculate the subsidies one jurisdiction offers a household.

        Args:
            jurisdiction: Jurisdiction or its key
            calc_input: Household income and children

        Returns:
            CalculationResult with rank 0 (ranks are set by calculate_all)

        Raises:
            UnknownJurisdictionError: If the catalog has no such jurisdiction
            InvariantViolationError: If a catalog entry does not fit its calculator
            InvalidInputError: If the input is out of range
        """
        validate_input(calc_input)
        key = resolve_jurisdiction(jurisdiction)
        catalog = self.catalog.load_catalog(key)

        ctx = self._context(calc_input)
        policies = self.filter_policies(catalog.policies, calc_input)
        applied = tuple(self.apply_policy(policy, ctx) for policy in policies)

        total_amount = sum(p.calculated_amount for p in applied)
        total_max_amount = sum(
            p.max_amount if p.max_amount is not None else p.calculated_amount
            for p in applied
        )

        logger.info(
            "%s: %d policies, remaining %d, maximum %d",
            key.value,
            len(applied),
            total_amount,
            total_max_amount,
        )

        return CalculationResult(
            jurisdiction=key,
            applied_policies=applied,
            total_amount=total_amount,
            total_max_amount=total_max_amount,
            rank=0,
            calculated_at=datetime.now(timezone.utc).isoformat(),
        )

    def calculate_all(self, calc_input: CalculationInput) -> List[CalculationResult]:
        """
        Calculate every known jurisdiction and rank them.

        Returns:
            Results sorted by total_amount, highest first, with rank 1..N
        """
        results = [
            self.calculate_for_jurisdiction(jurisdiction, calc_input)
            for jurisdiction in self.catalog.jurisdictions()
        ]
        ranked = sorted(results, key=lambda r: r.total_amount, reverse=True)
        return [replace(result, rank=i + 1) for i, result in enumerate(ranked)]


_default_engine: Optional[SubsidyEngine] = None


def default_engine() -> SubsidyEngine:
    """Shared engine over the packaged catalog."""
    global _default_engine
    if _default_engine is None:
        _default_engine = SubsidyEngine()
    return _default_engine


def make_input(household_income: int, children: Sequence) -> CalculationInput:
    """
    Build a CalculationInput from plain values.

    Children may be Child instances, (age, birth_order) pairs or dicts with
    "age" and "birthOrder"/"birth_order" keys.

    Raises:
        InvalidInputError: If the income or a child cannot be interpreted
    """
    try:
        income = int(household_income)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Cannot interpret household income {household_income!r}") from e

    built = []
    for i, child in enumerate(children):
        if isinstance(child, Child):
            built.append(child)
            continue
        try:
            if isinstance(child, dict):
                age = child["age"]
                order = child.get("birthOrder", child.get("birth_order"))
            else:
                age, order = child
            built.append(Child(age=int(age), birth_order=BirthOrder(order)))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidInputError(f"Child {i + 1}: cannot interpret {child!r}") from e
    return CalculationInput(household_income=income, children=tuple(built))


def calculate_for_jurisdiction(
    jurisdiction: Union[Jurisdiction, str],
    calc_input: CalculationInput,
) -> CalculationResult:
    return default_engine().calculate_for_jurisdiction(jurisdiction, calc_input)


def calculate_all(calc_input: CalculationInput) -> List[CalculationResult]:
    return default_engine().calculate_all(calc_input)

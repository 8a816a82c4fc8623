"""
Data model for subsidy policies, household input and calculation results.

Amounts are whole yen. Ages are whole years.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

# Amount sentinel for policies whose value comes from age bands
VARIABLE = "variable"


class BirthOrder(str, Enum):
    FIRST = "first"
    SECOND = "second"
    THIRD_OR_MORE = "third_or_more"


# Child conditions may also name "any"
ANY_BIRTH_ORDER = "any"


class Frequency(str, Enum):
    ONCE = "once"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class PolicyType(str, Enum):
    CHILDBIRTH_SUPPORT = "childbirth_support"
    CHILDCARE_ALLOWANCE = "childcare_allowance"
    MEDICAL_EXPENSE = "medical_expense"
    SCHOOL_LUNCH = "school_lunch"
    CHILDCARE_FEE = "childcare_fee"
    HIGH_SCHOOL_TUITION = "high_school_tuition"
    UNIVERSITY_TUITION = "university_tuition"
    SUPPORT_018 = "018_support"
    OTHER = "other"


class PolicyCategory(str, Enum):
    CASH_BENEFIT = "cash_benefit"
    EDUCATION = "education"
    MEDICAL = "medical"
    BIRTH_AND_PARENTING = "birth_and_parenting"
    OTHER = "other"


class PolicyShape(str, Enum):
    """Whether a policy carries a flat amount or an age-band list."""

    FIXED = "fixed"
    BANDED = "banded"


class Jurisdiction(str, Enum):
    TOKYO = "tokyo"
    SAITAMA = "saitama"
    CHIBA = "chiba"
    KANAGAWA = "kanagawa"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Jurisdiction.TOKYO: "東京都",
    Jurisdiction.SAITAMA: "埼玉県",
    Jurisdiction.CHIBA: "千葉県",
    Jurisdiction.KANAGAWA: "神奈川県",
}


class IncomeLimitKind(str, Enum):
    NONE = "none"
    SINGLE = "single"
    TIERED = "tiered"


@dataclass(frozen=True)
class Child:
    age: int
    birth_order: BirthOrder


@dataclass(frozen=True)
class IncomeTier:
    """One rung of a tiered income limit: income below threshold earns amount/year."""

    threshold: int
    amount: int
    description: str = ""


@dataclass(frozen=True)
class IncomeLimit:
    """Income-limit rule attached to a policy."""

    kind: IncomeLimitKind = IncomeLimitKind.NONE
    threshold: Optional[int] = None
    tiers: Tuple[IncomeTier, ...] = ()

    @classmethod
    def none(cls) -> "IncomeLimit":
        return cls(IncomeLimitKind.NONE)

    @classmethod
    def single(cls, threshold: int) -> "IncomeLimit":
        return cls(IncomeLimitKind.SINGLE, threshold=threshold)

    @classmethod
    def tiered(cls, tiers) -> "IncomeLimit":
        return cls(IncomeLimitKind.TIERED, tiers=tuple(tiers))


@dataclass(frozen=True)
class ChildCondition:
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    birth_order: Optional[Union[BirthOrder, str]] = None

    def age_bounds(self, default_min: int = 0, default_max: int = 18) -> Tuple[int, int]:
        min_age = default_min if self.min_age is None else self.min_age
        max_age = default_max if self.max_age is None else self.max_age
        return min_age, max_age


@dataclass(frozen=True)
class AgeBand:
    min_age: int
    max_age: int
    amount: int
    frequency: Frequency
    description: str = ""


@dataclass(frozen=True)
class PolicyMetadata:
    source_url: str = ""
    source_name: str = ""
    last_updated: str = ""
    disclaimer: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class FixedPolicy:
    """Policy with a flat amount paid at a given frequency."""

    shape: ClassVar[PolicyShape] = PolicyShape.FIXED

    id: str
    name: str
    type: PolicyType
    category: PolicyCategory
    jurisdiction: Jurisdiction
    amount: Union[int, str]
    frequency: Frequency
    income_limit: IncomeLimit = field(default_factory=IncomeLimit.none)
    child_condition: ChildCondition = field(default_factory=ChildCondition)
    description: str = ""
    metadata: PolicyMetadata = field(default_factory=PolicyMetadata)


@dataclass(frozen=True)
class VariableAmountPolicy:
    """Policy whose amount depends on the child's age band."""

    shape: ClassVar[PolicyShape] = PolicyShape.BANDED

    id: str
    name: str
    type: PolicyType
    category: PolicyCategory
    jurisdiction: Jurisdiction
    age_bands: Tuple[AgeBand, ...]
    frequency: Frequency = Frequency.MONTHLY
    income_limit: IncomeLimit = field(default_factory=IncomeLimit.none)
    child_condition: ChildCondition = field(default_factory=ChildCondition)
    description: str = ""
    metadata: PolicyMetadata = field(default_factory=PolicyMetadata)

    @property
    def amount(self) -> str:
        return VARIABLE


Policy = Union[FixedPolicy, VariableAmountPolicy]


@dataclass(frozen=True)
class AgeRangeInfo:
    from_age: int
    to_age: int
    years: int


@dataclass(frozen=True)
class CalculationInput:
    household_income: int
    children: Tuple[Child, ...]

    def __post_init__(self):
        # Accept any iterable of children
        object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True)
class AppliedPolicy:
    """
    A policy that survived filtering, with its three accrual perspectives.

    calculated_amount is the entitlement from the current age onward,
    received_amount what was already paid before it, max_amount the full
    0-18 entitlement.
    """

    policy: Policy
    calculated_amount: int
    years_applied: int
    age_range: Optional[AgeRangeInfo]
    max_amount: Optional[int]
    received_amount: int
    active_now: bool = False


@dataclass(frozen=True)
class CalculationResult:
    jurisdiction: Jurisdiction
    applied_policies: Tuple[AppliedPolicy, ...]
    total_amount: int
    total_max_amount: int
    rank: int
    calculated_at: str

    @property
    def total_received_amount(self) -> int:
        return sum(p.received_amount for p in self.applied_policies)

"""
child-subsidy: estimate child-support subsidies across jurisdictions.

Given a household income and each child's age and birth order, the engine
works out which subsidy policies apply in each jurisdiction, how much remains
to be received from the children's current ages, how much was already
received, and the full entitlement, then ranks the jurisdictions.
"""

__version__ = "0.1.0"

from .catalog import (
    CatalogProvider,
    DirectoryCatalog,
    InMemoryCatalog,
    JurisdictionCatalog,
    PackagedCatalog,
    parse_catalog,
    parse_policy,
)
from .config import EngineConfig, ReportConfig
from .engine import SubsidyEngine, calculate_all, calculate_for_jurisdiction, make_input
from .errors import (
    CatalogError,
    InvalidInputError,
    InvariantViolationError,
    SubsidyCalcError,
    UnknownJurisdictionError,
)
from .formatting import format_man_yen, validate_income
from .medical import describe_medical_subsidy, load_medical_costs, medical_subsidy
from .models import (
    AppliedPolicy,
    BirthOrder,
    CalculationInput,
    CalculationResult,
    Child,
    FixedPolicy,
    Frequency,
    Jurisdiction,
    PolicyType,
    VariableAmountPolicy,
)

__all__ = [
    "SubsidyEngine",
    "calculate_all",
    "calculate_for_jurisdiction",
    "make_input",
    "EngineConfig",
    "ReportConfig",
    "CatalogProvider",
    "DirectoryCatalog",
    "InMemoryCatalog",
    "JurisdictionCatalog",
    "PackagedCatalog",
    "parse_catalog",
    "parse_policy",
    "SubsidyCalcError",
    "UnknownJurisdictionError",
    "InvariantViolationError",
    "CatalogError",
    "InvalidInputError",
    "format_man_yen",
    "validate_income",
    "medical_subsidy",
    "describe_medical_subsidy",
    "load_medical_costs",
    "AppliedPolicy",
    "BirthOrder",
    "CalculationInput",
    "CalculationResult",
    "Child",
    "FixedPolicy",
    "Frequency",
    "Jurisdiction",
    "PolicyType",
    "VariableAmountPolicy",
]

"""
Exceptions raised by the subsidy engine.

"No applicable policies" is never an error: it is a valid zero result.
"""


class SubsidyCalcError(Exception):
    """Base class for all engine errors."""


class UnknownJurisdictionError(SubsidyCalcError, KeyError):
    """The catalog provider has no data for the requested jurisdiction."""

    def __init__(self, jurisdiction):
        self.jurisdiction = jurisdiction
        super().__init__(f"Unknown jurisdiction: {jurisdiction!r}")

    def __str__(self):
        return self.args[0]


class InvariantViolationError(SubsidyCalcError):
    """A policy reached a calculator whose shape it does not fit."""

    def __init__(self, policy_id: str, message: str):
        self.policy_id = policy_id
        super().__init__(f"{policy_id}: {message}")


class CatalogError(SubsidyCalcError):
    """A catalog record could not be parsed."""


class InvalidInputError(SubsidyCalcError, ValueError):
    """Household income or child data is out of range."""

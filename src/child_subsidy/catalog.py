"""
Policy catalog providers.

The engine only needs a lookup from jurisdiction to its list of policies. The
catalog records use the JSON layout of the published dataset (camelCase
keys); this module turns them into model dataclasses.
"""

import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Tuple, Union

from .errors import CatalogError, UnknownJurisdictionError
from .models import (
    ANY_BIRTH_ORDER,
    VARIABLE,
    AgeBand,
    BirthOrder,
    ChildCondition,
    FixedPolicy,
    Frequency,
    IncomeLimit,
    IncomeLimitKind,
    IncomeTier,
    Jurisdiction,
    Policy,
    PolicyCategory,
    PolicyMetadata,
    PolicyType,
    VariableAmountPolicy,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JurisdictionCatalog:
    jurisdiction: Jurisdiction
    policies: Tuple[Policy, ...]
    last_updated: str = ""
    official_url: str = ""


class CatalogProvider(Protocol):
    def jurisdictions(self) -> List[Jurisdiction]:
        ...

    def load_catalog(self, jurisdiction: Union[Jurisdiction, str]) -> JurisdictionCatalog:
        ...


def resolve_jurisdiction(value: Union[Jurisdiction, str]) -> Jurisdiction:
    """
    Accept a Jurisdiction, its key ("tokyo") or its display name ("東京都").

    Raises:
        UnknownJurisdictionError: If nothing matches
    """
    if isinstance(value, Jurisdiction):
        return value
    try:
        return Jurisdiction(value)
    except ValueError:
        pass
    for jurisdiction in Jurisdiction:
        if jurisdiction.display_name == value:
            return jurisdiction
    raise UnknownJurisdictionError(value)


# =============================================================================
# PARSING
# =============================================================================


def _enum(enum_cls, value, what: str):
    try:
        return enum_cls(value)
    except ValueError as e:
        raise CatalogError(f"Unknown {what}: {value!r}") from e


def parse_income_limit(data: Optional[dict]) -> IncomeLimit:
    if not data:
        return IncomeLimit.none()

    kind = _enum(IncomeLimitKind, data.get("type", "none"), "income limit type")
    tiers = tuple(
        IncomeTier(
            threshold=int(tier["threshold"]),
            amount=int(tier["amount"]),
            description=tier.get("description", ""),
        )
        for tier in data.get("tiers") or []
    )
    threshold = data.get("threshold")
    return IncomeLimit(
        kind=kind,
        threshold=int(threshold) if threshold is not None else None,
        tiers=tiers,
    )


def parse_child_condition(data: Optional[dict]) -> ChildCondition:
    if not data:
        return ChildCondition()

    birth_order = data.get("birthOrder")
    if birth_order is not None and birth_order != ANY_BIRTH_ORDER:
        birth_order = _enum(BirthOrder, birth_order, "birth order")

    return ChildCondition(
        min_age=data.get("minAge"),
        max_age=data.get("maxAge"),
        birth_order=birth_order,
    )


def parse_age_band(data: dict) -> AgeBand:
    return AgeBand(
        min_age=int(data["minAge"]),
        max_age=int(data["maxAge"]),
        amount=int(data["amount"]),
        frequency=_enum(Frequency, data.get("frequency", "monthly"), "frequency"),
        description=data.get("description", ""),
    )


def parse_metadata(data: Optional[dict]) -> PolicyMetadata:
    data = data or {}
    return PolicyMetadata(
        source_url=data.get("sourceUrl", ""),
        source_name=data.get("sourceName", ""),
        last_updated=data.get("lastUpdated", ""),
        disclaimer=data.get("disclaimer"),
        notes=data.get("notes"),
    )


def parse_policy(data: dict, jurisdiction: Optional[Jurisdiction] = None) -> Policy:
    """
    Build a policy from a catalog record.

    A record whose amount is "variable" and which lists ageBasedAmounts becomes
    a VariableAmountPolicy. Anything else is a FixedPolicy, including a
    "variable" record without bands: the calculators reject that one.

    Raises:
        CatalogError: If required fields are missing or malformed
    """
    try:
        policy_id = data["id"]
        conditions = data.get("conditions", {})
        common = dict(
            id=policy_id,
            name=data["name"],
            type=_enum(PolicyType, data["type"], "policy type"),
            category=_enum(PolicyCategory, data.get("category", "other"), "category"),
            jurisdiction=(
                resolve_jurisdiction(data["jurisdiction"])
                if "jurisdiction" in data
                else jurisdiction
            ),
            frequency=_enum(Frequency, data["frequency"], "frequency"),
            income_limit=parse_income_limit(conditions.get("incomeLimit")),
            child_condition=parse_child_condition(conditions.get("childCondition")),
            description=data.get("description", ""),
            metadata=parse_metadata(data.get("metadata")),
        )
        amount = data["amount"]

        if common["jurisdiction"] is None:
            raise CatalogError(f"{policy_id}: no jurisdiction")

        if amount == VARIABLE and data.get("ageBasedAmounts"):
            bands = tuple(parse_age_band(band) for band in data["ageBasedAmounts"])
            return VariableAmountPolicy(age_bands=bands, **common)

        if amount != VARIABLE and (isinstance(amount, bool) or not isinstance(amount, int)):
            raise CatalogError(f"{policy_id}: amount must be an integer or 'variable'")

        return FixedPolicy(amount=amount, **common)
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogError(f"Malformed policy record {data.get('id', '?')!r}: {e}") from e


def parse_catalog(data: dict) -> JurisdictionCatalog:
    try:
        jurisdiction = resolve_jurisdiction(data["jurisdiction"])
    except (KeyError, UnknownJurisdictionError) as e:
        raise CatalogError(f"Catalog has no valid jurisdiction: {e}") from e

    policies = tuple(parse_policy(record, jurisdiction) for record in data.get("policies", []))
    return JurisdictionCatalog(
        jurisdiction=jurisdiction,
        policies=policies,
        last_updated=data.get("lastUpdated", ""),
        official_url=data.get("officialUrl", ""),
    )


# =============================================================================
# PROVIDERS
# =============================================================================


class InMemoryCatalog:
    """Catalog provider over catalogs already built in memory."""

    def __init__(self, catalogs: Mapping[Jurisdiction, JurisdictionCatalog]):
        self._catalogs = dict(catalogs)

    @classmethod
    def from_policies(cls, policies: Mapping[Jurisdiction, List[Policy]]) -> "InMemoryCatalog":
        return cls(
            {
                jurisdiction: JurisdictionCatalog(jurisdiction, tuple(items))
                for jurisdiction, items in policies.items()
            }
        )

    def jurisdictions(self) -> List[Jurisdiction]:
        return list(self._catalogs)

    def load_catalog(self, jurisdiction: Union[Jurisdiction, str]) -> JurisdictionCatalog:
        key = resolve_jurisdiction(jurisdiction)
        if key not in self._catalogs:
            raise UnknownJurisdictionError(jurisdiction)
        return self._catalogs[key]


class _JsonCatalog:
    """Reads <jurisdiction key>.json files, parsing each at most once."""

    def __init__(self):
        self._cache: Dict[Jurisdiction, JurisdictionCatalog] = {}

    def _exists(self, jurisdiction: Jurisdiction) -> bool:
        raise NotImplementedError

    def _read_text(self, jurisdiction: Jurisdiction) -> Optional[str]:
        raise NotImplementedError

    def jurisdictions(self) -> List[Jurisdiction]:
        return [j for j in Jurisdiction if j in self._cache or self._exists(j)]

    def load_catalog(self, jurisdiction: Union[Jurisdiction, str]) -> JurisdictionCatalog:
        key = resolve_jurisdiction(jurisdiction)
        if key in self._cache:
            return self._cache[key]

        text = self._read_text(key)
        if text is None:
            raise UnknownJurisdictionError(jurisdiction)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogError(f"Invalid JSON in catalog for {key.value}: {e}") from e

        catalog = parse_catalog(data)
        if catalog.jurisdiction != key:
            raise CatalogError(
                f"Catalog file for {key.value} declares {catalog.jurisdiction.value}"
            )

        logger.debug("Loaded %d policies for %s", len(catalog.policies), key.value)
        self._cache[key] = catalog
        return catalog


class DirectoryCatalog(_JsonCatalog):
    """Catalog provider over a directory of <jurisdiction key>.json files."""

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)

    def _file(self, jurisdiction: Jurisdiction) -> Path:
        return self.path / f"{jurisdiction.value}.json"

    def _exists(self, jurisdiction: Jurisdiction) -> bool:
        return self._file(jurisdiction).is_file()

    def _read_text(self, jurisdiction: Jurisdiction) -> Optional[str]:
        file_path = self._file(jurisdiction)
        if not file_path.is_file():
            return None
        return file_path.read_text(encoding="utf-8")


class PackagedCatalog(_JsonCatalog):
    """Catalog provider over the datasets shipped with the package."""

    package = "child_subsidy.data"

    def _resource(self, jurisdiction: Jurisdiction):
        return resources.files(self.package).joinpath(f"{jurisdiction.value}.json")

    def _exists(self, jurisdiction: Jurisdiction) -> bool:
        return self._resource(jurisdiction).is_file()

    def _read_text(self, jurisdiction: Jurisdiction) -> Optional[str]:
        resource = self._resource(jurisdiction)
        if not resource.is_file():
            return None
        return resource.read_text(encoding="utf-8")

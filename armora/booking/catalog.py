"""Service tier, scenario and terms catalogs.

Static, read-only reference data. The configurator receives a TierCatalog
at construction and never mutates it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from decimal import Decimal

from armora.booking.errors import InvalidReferenceError
from armora.config import settings
from armora.models.enums import ScenarioId, ServiceTierId, TermsId
from armora.schemas.booking import Scenario, ServiceTier, TermsAcknowledgement

_BILLABLE_HOURS = settings.booking.minimum_billable_hours

SERVICE_TIERS: tuple[ServiceTier, ...] = (
    ServiceTier(
        id=ServiceTierId.ESSENTIAL,
        display_name="Essential Protection",
        hourly_rate=Decimal("50"),
        minimum_billable_hours=_BILLABLE_HOURS,
        description="SIA-licensed Close Protection Officers",
        response_time="2-4 min",
        features=("SIA Level 2 licensed", "Real-time tracking", "24/7 support"),
    ),
    ServiceTier(
        id=ServiceTierId.EXECUTIVE,
        display_name="Executive Shield",
        hourly_rate=Decimal("75"),
        minimum_billable_hours=_BILLABLE_HOURS,
        description="Premium security detail for high-profile clients",
        response_time="3-5 min",
        features=("SIA Level 3 licensed", "Threat assessment", "Discrete surveillance"),
    ),
    ServiceTier(
        id=ServiceTierId.SHADOW,
        display_name="Shadow Protocol",
        hourly_rate=Decimal("65"),
        minimum_billable_hours=_BILLABLE_HOURS,
        description="Special Forces trained protection specialists",
        response_time="5-8 min",
        features=("Military-grade training", "Covert operations", "Counter-surveillance"),
    ),
    ServiceTier(
        id=ServiceTierId.CLIENT_VEHICLE,
        display_name="Client Vehicle Service",
        hourly_rate=Decimal("55"),
        minimum_billable_hours=_BILLABLE_HOURS,
        description="Security-trained CPO for your vehicle",
        response_time="4-6 min",
        features=("Your vehicle", "No mileage charges", "Enhanced privacy"),
    ),
)

SCENARIOS: tuple[Scenario, ...] = (
    Scenario(
        id=ScenarioId.MEDICAL,
        label="Medical",
        description="Hospital visits, appointments and treatment journeys",
        recommended_tier=ServiceTierId.ESSENTIAL,
    ),
    Scenario(
        id=ScenarioId.BUSINESS,
        label="Business",
        description="Meetings, client visits and corporate travel",
        recommended_tier=ServiceTierId.EXECUTIVE,
    ),
    Scenario(
        id=ScenarioId.EVENT,
        label="Event",
        description="Galas, premieres and public appearances",
        recommended_tier=ServiceTierId.SHADOW,
    ),
    Scenario(
        id=ScenarioId.TRAVEL,
        label="Travel",
        description="Airport runs and long-distance journeys",
        recommended_tier=ServiceTierId.CLIENT_VEHICLE,
    ),
    Scenario(
        id=ScenarioId.GENERAL,
        label="General",
        description="Everyday journeys with a protection officer",
        recommended_tier=ServiceTierId.ESSENTIAL,
    ),
)

TERMS: tuple[TermsAcknowledgement, ...] = (
    TermsAcknowledgement(id=TermsId.TERMS_OF_SERVICE, label="Terms of Service"),
    TermsAcknowledgement(id=TermsId.PRIVACY_POLICY, label="Privacy Policy"),
    TermsAcknowledgement(id=TermsId.CANCELLATION_POLICY, label="Cancellation Policy"),
)

SCENARIOS_BY_ID: dict[ScenarioId, Scenario] = {s.id: s for s in SCENARIOS}
TERMS_BY_ID: dict[TermsId, TermsAcknowledgement] = {t.id: t for t in TERMS}


class TierCatalog:
    """Read-only lookup over a fixed list of service tiers."""

    def __init__(self, tiers: Iterable[ServiceTier] = SERVICE_TIERS) -> None:
        self._tiers: tuple[ServiceTier, ...] = tuple(tiers)
        self._by_id: dict[ServiceTierId, ServiceTier] = {t.id: t for t in self._tiers}
        if len(self._by_id) != len(self._tiers):
            msg = "Duplicate tier ids in catalog"
            raise ValueError(msg)

    def get(self, tier_id: ServiceTierId | str) -> ServiceTier:
        """Return the tier with this id.

        Raises:
            InvalidReferenceError: If the id is not in this catalog.
        """
        try:
            return self._by_id[ServiceTierId(tier_id)]
        except (KeyError, ValueError):
            msg = f"Unknown service tier: {tier_id} (catalog: {[t.value for t in self._by_id]})"
            raise InvalidReferenceError(msg) from None

    def __contains__(self, tier_id: object) -> bool:
        try:
            return ServiceTierId(tier_id) in self._by_id  # type: ignore[arg-type]
        except ValueError:
            return False

    def __iter__(self) -> Iterator[ServiceTier]:
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)


def get_scenario(scenario_id: ScenarioId | str) -> Scenario:
    """Look up a scenario.

    Raises:
        InvalidReferenceError: If the id is not in the scenario catalog.
    """
    try:
        return SCENARIOS_BY_ID[ScenarioId(scenario_id)]
    except (KeyError, ValueError):
        msg = f"Unknown scenario: {scenario_id}"
        raise InvalidReferenceError(msg) from None


def get_terms(terms_id: TermsId | str) -> TermsAcknowledgement:
    """Look up an acknowledgement.

    Raises:
        InvalidReferenceError: If the id is not in the terms catalog.
    """
    try:
        return TERMS_BY_ID[TermsId(terms_id)]
    except (KeyError, ValueError):
        msg = f"Unknown terms acknowledgement: {terms_id}"
        raise InvalidReferenceError(msg) from None


# Module-level default catalog
default_catalog = TierCatalog(SERVICE_TIERS)

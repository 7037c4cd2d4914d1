"""Notable observation fetching and normalization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ebird_notifier import timecodec
from ebird_notifier.datasources.ebird.client import CHECKLIST_URL, EBirdClient
from ebird_notifier.exceptions import DecodeError, FetchError
from ebird_notifier.schemas import EBirdRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

    import requests

    from ebird_notifier.timecodec import CanonicalTimestamp

# =============================================================================
# Data Model
# =============================================================================


@dataclass(eq=False)
class Observation:
    """A single notable sighting. Two observations are equal iff their ids are."""

    id: str
    common_name: str
    scientific_name: str
    species_code: str
    count: int | None
    location_id: str
    location_name: str
    latitude: float
    longitude: float
    observer: str
    checklist_id: str
    observed_at: CanonicalTimestamp
    reviewed: bool
    valid: bool
    location_private: bool
    has_comments: bool = False
    comments: str | None = None
    has_media: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Observation):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def presence_only(self) -> bool:
        """True when the species was reported present without a count ("X")."""
        return self.count is None

    @property
    def count_label(self) -> str:
        return "X" if self.count is None else str(self.count)

    @property
    def checklist_url(self) -> str:
        return CHECKLIST_URL.format(sub_id=self.checklist_id)


# =============================================================================
# Parsing
# =============================================================================


def _describe_validation(e: ValidationError) -> str:
    problems = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "record"
        problems.append(f"{loc}: {err['msg']}")
    return "; ".join(problems)


def parse_observation(raw: Any) -> Observation:
    """Validate one API record and convert it to an Observation.

    Raises:
        FetchError: A required field is missing or has the wrong type, or the
            observation date cannot be decoded.
    """
    try:
        record = EBirdRecord.model_validate(raw)
    except ValidationError as e:
        obs_id = raw.get("obsId", "?") if isinstance(raw, dict) else "?"
        msg = f"Malformed observation {obs_id}: {_describe_validation(e)}"
        raise FetchError(msg) from e

    try:
        observed_at = timecodec.decode(record.obs_dt)
    except DecodeError as e:
        msg = f"Malformed observation {record.obs_id}: {e}"
        raise FetchError(msg) from e

    return Observation(
        id=record.obs_id,
        common_name=record.common_name,
        scientific_name=record.scientific_name,
        species_code=record.species_code,
        count=record.how_many,
        location_id=record.location_id,
        location_name=record.location_name,
        latitude=record.lat,
        longitude=record.lng,
        observer=record.user_display_name,
        checklist_id=record.sub_id,
        observed_at=observed_at,
        reviewed=record.obs_reviewed,
        valid=record.obs_valid,
        location_private=record.location_private,
        has_comments=record.has_comments,
        comments=record.comments,
        has_media=record.has_rich_media,
    )


def unique_by_id(observations: Iterable[Observation]) -> list[Observation]:
    """Drop repeated ids, keeping the first record seen for each."""
    seen: set[str] = set()
    unique: list[Observation] = []
    for obs in observations:
        if obs.id in seen:
            continue
        seen.add(obs.id)
        unique.append(obs)
    return unique


# =============================================================================
# API Fetching
# =============================================================================


class ObservationSource:
    """Fetches recent notable observations for a region."""

    def __init__(self, api_key: str, http: requests.Session | None = None) -> None:
        self.client = EBirdClient(api_key, http=http)

    def fetch_recent(self, region: str, days_back: int) -> list[Observation]:
        """
        Fetch notable observations from the last ``days_back`` days.

        eBird sometimes lists the same sighting more than once in a single
        response; repeats are removed here.

        Args:
            region: eBird region code (e.g. ``US-CO`` or ``US-CO-013``).
            days_back: Lookback window in days (1-30).

        Returns:
            Observations in API order, one per id.

        Raises:
            FetchError: Any transport, status or schema failure.
        """
        raw = self.client.get_recent_notable(region, days_back)
        return unique_by_id(parse_observation(item) for item in raw)

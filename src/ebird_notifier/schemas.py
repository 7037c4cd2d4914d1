"""
Wire and run-state models for ebird-notifier.

``EBirdRecord`` validates one element of the eBird "recent notable
observations" response (``detail=full``). Services normalize these into the
canonical ``Observation`` dataclass in ``datasources/ebird/observations.py``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    model_validator,
)

# =============================================================================
# Run state
# =============================================================================


class RunState(StrEnum):
    """States of one notifier run, in order."""

    START = "start"
    LEDGER_LOADED = "ledger_loaded"
    OBSERVATIONS_FETCHED = "observations_fetched"
    FILTERED = "filtered"
    NOTIFIED = "notified"
    SKIPPED_EMPTY = "skipped_empty"
    LEDGER_UPDATED = "ledger_updated"
    PERSISTED = "persisted"
    DONE = "done"
    FAILED = "failed"


# =============================================================================
# eBird API records
# =============================================================================


class EBirdRecord(BaseModel):
    """One observation as returned by ``/data/obs/{region}/recent/notable``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    species_code: StrictStr = Field(..., alias="speciesCode")
    common_name: StrictStr = Field(..., alias="comName")
    scientific_name: StrictStr = Field(..., alias="sciName")
    location_id: StrictStr = Field(..., alias="locId")
    location_name: StrictStr = Field(..., alias="locName")
    obs_dt: StrictStr = Field(..., alias="obsDt")
    how_many: StrictInt | None = Field(default=None, alias="howMany")
    presence_noted: StrictBool = Field(default=False, alias="presenceNoted")
    lat: StrictFloat
    lng: StrictFloat
    obs_reviewed: StrictBool = Field(..., alias="obsReviewed")
    obs_valid: StrictBool = Field(..., alias="obsValid")
    location_private: StrictBool = Field(..., alias="locationPrivate")
    sub_id: StrictStr = Field(..., alias="subId")
    user_display_name: StrictStr = Field(..., alias="userDisplayName")
    obs_id: StrictStr = Field(..., alias="obsId")
    has_comments: StrictBool = Field(..., alias="hasComments")
    comments: StrictStr | None = None
    has_rich_media: StrictBool = Field(..., alias="hasRichMedia")

    @model_validator(mode="after")
    def _check_conditional_fields(self) -> EBirdRecord:
        if self.how_many is None and not self.presence_noted:
            msg = "howMany is required unless presenceNoted is true"
            raise ValueError(msg)
        if self.has_comments and self.comments is None:
            msg = "comments is required when hasComments is true"
            raise ValueError(msg)
        return self

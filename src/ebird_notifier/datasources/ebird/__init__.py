"""eBird notable-observation data source.

Public API:
  - client: EBirdClient (authenticated HTTP, error payload handling)
  - observations: Observation, ObservationSource, parse_observation, unique_by_id
"""

from ebird_notifier.datasources.ebird.client import EBirdClient
from ebird_notifier.datasources.ebird.observations import (
    Observation,
    ObservationSource,
    parse_observation,
    unique_by_id,
)

__all__ = [
    "EBirdClient",
    "Observation",
    "ObservationSource",
    "parse_observation",
    "unique_by_id",
]

"""Observation filters applied before notifying.

Species exclusion runs first: it needs no ledger state, and an excluded
species is never notified, even on its first sighting. Both filters keep the
input order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ebird_notifier.datasources.ebird import Observation
    from ebird_notifier.ledger import DedupLedger


def exclude_by_species(
    observations: Sequence[Observation], exclude: Iterable[str]
) -> list[Observation]:
    """Remove observations whose common name exactly matches an excluded name.

    Matching is case-sensitive: ``"Ruddy Duck"`` does not exclude
    ``"ruddy duck"``.
    """
    excluded = set(exclude)
    return [obs for obs in observations if obs.common_name not in excluded]


def exclude_already_notified(
    observations: Sequence[Observation], ledger: DedupLedger
) -> list[Observation]:
    """Remove observations whose id is already recorded in the ledger."""
    notified = ledger.ids
    return [obs for obs in observations if obs.id not in notified]


def apply_filters(
    observations: Sequence[Observation],
    exclude: Iterable[str],
    ledger: DedupLedger,
) -> list[Observation]:
    """Species exclusion, then already-notified exclusion."""
    return exclude_already_notified(exclude_by_species(observations, exclude), ledger)

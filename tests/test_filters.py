"""Tests for observation filters."""

from __future__ import annotations

from datetime import date

from ebird_notifier.datasources.ebird import Observation
from ebird_notifier.filters import apply_filters, exclude_already_notified, exclude_by_species
from ebird_notifier.ledger import DedupLedger, LedgerEntry
from ebird_notifier.timecodec import CanonicalTimestamp


def _obs(obs_id: str, common_name: str) -> Observation:
    return Observation(
        id=obs_id,
        common_name=common_name,
        scientific_name="Aves sp.",
        species_code="bird",
        count=1,
        location_id="L1",
        location_name="Somewhere",
        latitude=39.7,
        longitude=-105.0,
        observer="Jane Doe",
        checklist_id="S1",
        observed_at=CanonicalTimestamp(date(2024, 4, 1)),
        reviewed=False,
        valid=False,
        location_private=False,
    )


class TestExcludeBySpecies:
    """Exact, case-sensitive common-name exclusion."""

    def test_removes_exact_match(self) -> None:
        result = exclude_by_species(
            [_obs("1", "Ruddy Duck"), _obs("2", "Mallard")], ["Ruddy Duck"]
        )
        assert [o.id for o in result] == ["2"]

    def test_case_sensitive(self) -> None:
        result = exclude_by_species(
            [_obs("1", "Ruddy Duck"), _obs("2", "ruddy duck")], ["Ruddy Duck"]
        )
        assert [o.id for o in result] == ["2"]

    def test_no_partial_match(self) -> None:
        result = exclude_by_species([_obs("1", "Ruddy Duck x Mallard (hybrid)")], ["Ruddy Duck"])
        assert len(result) == 1

    def test_preserves_order(self) -> None:
        obs = [_obs("3", "Mallard"), _obs("1", "Canada Goose"), _obs("2", "Gadwall")]
        result = exclude_by_species(obs, ["Canada Goose"])
        assert [o.id for o in result] == ["3", "2"]

    def test_empty_exclusion_list(self) -> None:
        obs = [_obs("1", "Mallard")]
        assert exclude_by_species(obs, []) == obs


class TestExcludeAlreadyNotified:
    """Ledger-based exclusion."""

    def test_removes_ids_in_ledger(self) -> None:
        ledger = DedupLedger([LedgerEntry("2", "4/1/2024")])
        result = exclude_already_notified(
            [_obs("1", "Mallard"), _obs("2", "Gadwall"), _obs("3", "Wigeon")], ledger
        )
        assert [o.id for o in result] == ["1", "3"]

    def test_matches_on_id_not_timestamp(self) -> None:
        ledger = DedupLedger([LedgerEntry("OTHER", "1")])
        assert len(exclude_already_notified([_obs("1", "Mallard")], ledger)) == 1

    def test_empty_ledger(self) -> None:
        obs = [_obs("1", "Mallard")]
        assert exclude_already_notified(obs, DedupLedger()) == obs


class TestApplyFilters:
    """Combined pipeline."""

    def test_species_then_ledger(self) -> None:
        ledger = DedupLedger([LedgerEntry("C", "4/1/2024")])
        obs = [_obs("A", "Canada Goose"), _obs("B", "Mallard"), _obs("C", "Gadwall")]

        result = apply_filters(obs, ["Canada Goose"], ledger)

        assert [o.id for o in result] == ["B"]

    def test_excluded_species_dropped_on_first_sighting(self) -> None:
        result = apply_filters([_obs("A", "Canada Goose")], ["Canada Goose"], DedupLedger())
        assert result == []

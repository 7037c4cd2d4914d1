"""
Prefect flow that notifies subscribers of new notable observations.

One run is a single synchronous pass::

    load ledger -> fetch -> filter -> send (if anything is new)
                -> evict + merge -> persist ledger

Any failure aborts the run. Nothing already done is rolled back: if the
ledger write fails after a successful send, the next run notifies the same
observations again.

Run locally:
    python -m ebird_notifier.flows.notify
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from prefect import flow, task
from prefect.cache_policies import NO_CACHE

from ebird_notifier import filters
from ebird_notifier.config import get_settings
from ebird_notifier.datasources.ebird import ObservationSource
from ebird_notifier.exceptions import NotifierError
from ebird_notifier.ledger import DedupLedger
from ebird_notifier.renderers.notification import build_notification_html, build_subject
from ebird_notifier.schemas import RunState
from ebird_notifier.services.mail import MailSender

if TYPE_CHECKING:
    from pathlib import Path

    from ebird_notifier.config import Settings
    from ebird_notifier.datasources.ebird import Observation


class Notifier(Protocol):
    """Anything that can deliver a rendered notification."""

    def send(self, subject: str, html_body: str) -> None: ...


class Source(Protocol):
    def fetch_recent(self, region: str, days_back: int) -> list[Observation]: ...


@task(name="load-ledger", cache_policy=NO_CACHE)
def load_ledger(path: str) -> DedupLedger:
    """Load previously notified observations."""
    ledger = DedupLedger.load(path)
    if not ledger.persistent:
        print("No ledger file configured; previously notified observations are not tracked.")
    elif ledger.first_run:
        print(f"No ledger at {ledger.path} yet (first run).")
    else:
        print(f"Loaded {len(ledger)} previously notified observations from {ledger.path}")
    return ledger


@task(name="fetch-observations", cache_policy=NO_CACHE)
def fetch_observations(source: Source, region: str, days_back: int) -> list[Observation]:
    """Fetch recent notable observations for the region."""
    return source.fetch_recent(region, days_back)


@task(name="filter-observations", cache_policy=NO_CACHE)
def filter_observations(
    observations: list[Observation], exclude: list[str], ledger: DedupLedger
) -> list[Observation]:
    """Drop excluded species, then anything already notified."""
    return filters.apply_filters(observations, exclude, ledger)


@task(name="send-notification", cache_policy=NO_CACHE)
def send_notification(notifier: Notifier, observations: list[Observation], subject: str) -> None:
    """Render and send one message covering every new observation."""
    notifier.send(build_subject(observations, subject), build_notification_html(observations))


@task(name="update-ledger", cache_policy=NO_CACHE)
def update_ledger(
    ledger: DedupLedger, observations: list[Observation], now: datetime, days_back: int
) -> dict[str, Any]:
    """Evict aged-out entries and record the newly notified observations."""
    evicted = ledger.evict(now, days_back)
    added = ledger.merge(observations)
    return {"ledger": ledger, "evicted": evicted, "added": added}


@task(name="persist-ledger", cache_policy=NO_CACHE)
def persist_ledger(ledger: DedupLedger) -> Path | None:
    """Write the ledger back to disk (no-op when persistence is disabled)."""
    return ledger.persist()


@flow(name="notify-new-observations", log_prints=True, validate_parameters=False)
def notify_new_observations(
    settings: Settings,
    source: Source | None = None,
    notifier: Notifier | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Notify recipients of notable observations they haven't been told about.

    Args:
        settings: Validated notifier settings.
        source: Observation source (defaults to the eBird API with the
            configured key).
        notifier: Mail collaborator (defaults to SMTP with the configured
            credentials).
        now: Reference time for ledger eviction (defaults to local now).

    Returns:
        Run summary: counts plus the final ``state``.
    """
    if source is None:
        source = ObservationSource(settings.ebird_api_key.get_secret_value())
    if notifier is None:
        notifier = MailSender(settings.mail_config())
    now = now or datetime.now()

    results: dict[str, Any] = {"state": RunState.START, "notified": False}
    try:
        print("Reading previously processed observations...")
        ledger = load_ledger(settings.ledger_path)
        results["state"] = RunState.LEDGER_LOADED

        print(f"Checking for recent observations in {settings.region_code}...")
        observations = fetch_observations(source, settings.region_code, settings.days_back)
        results["fetched"] = len(observations)
        results["state"] = RunState.OBSERVATIONS_FETCHED

        print("Tailoring observation list...")
        new = filter_observations(observations, settings.exclude_species, ledger)
        results["new"] = len(new)
        results["state"] = RunState.FILTERED
        print(f"There are {len(new)} new observations")

        if new:
            print("Sending notifications...")
            send_notification(notifier, new, settings.subject)
            results["notified"] = True
            results["state"] = RunState.NOTIFIED
        else:
            results["state"] = RunState.SKIPPED_EMPTY

        print("Updating list of previously processed observations...")
        update = update_ledger(ledger, new, now, settings.days_back)
        ledger = update["ledger"]
        results["evicted"] = update["evicted"]
        results["ledger_entries"] = len(ledger)
        results["state"] = RunState.LEDGER_UPDATED

        written = persist_ledger(ledger)
        results["state"] = RunState.PERSISTED
        if written is not None:
            print(f"Saved {len(ledger)} ledger entries to {written}")
    except NotifierError as e:
        print(f"Run {RunState.FAILED} after {results['state']}: {e}")
        raise

    results["state"] = RunState.DONE
    return results


if __name__ == "__main__":
    result = notify_new_observations(get_settings())
    print(f"Flow complete: {result}")

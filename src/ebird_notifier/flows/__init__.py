"""
Prefect flows for the notifier pipeline.

Flows:
- notify: load ledger, fetch notable observations, filter, e-mail the new
  ones, update and persist the ledger

Usage (local, settings from EBIRD_NOTIFIER_* environment variables):
    python -m ebird_notifier.flows.notify

Usage (scheduled):
    ebird-notifier run birdNotifier.rc   # e.g. from cron every 30 minutes
"""

"""eBird Notifier - e-mail alerts for new notable bird observations.

Architecture::

    datasources/   eBird API client + Observation normalization
    timecodec.py   eBird date/time <-> canonical timestamp <-> ledger text
    filters.py     Species exclusion, already-notified exclusion
    ledger.py      Persisted record of notified observations (load/evict/merge/persist)
    renderers/     Pure data -> HTML (notification body)
    services/      Shared HTTP session, SMTP sender
    flows/         Prefect orchestration (one notification pass per run)

Data flow: eBird -> datasources -> filters -> mail -> ledger -> disk
"""

__version__ = "0.1.0"

from ebird_notifier.config import Settings, get_settings
from ebird_notifier.datasources.ebird import Observation

__all__ = ["Observation", "Settings", "__version__", "get_settings"]

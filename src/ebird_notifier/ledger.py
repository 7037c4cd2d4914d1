"""Ledger of observations that have already been notified.

The ledger is a plain text file with one ``identifier,timestamp`` line per
notified observation, where ``timestamp`` is the ``timecodec.render`` form
(``4/1/2024 6:30``). No header and no escaping: eBird ids and rendered
timestamps never contain commas.

Lifecycle within one run::

    load -> evict -> merge -> persist

A missing file is the normal first-run state. A present but malformed file is
an error: treating it as empty would re-notify everything it listed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from ebird_notifier import timecodec
from ebird_notifier.exceptions import DecodeError, LoadError, SaveError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from ebird_notifier.datasources.ebird import Observation

#: Entries are kept for this many lookback windows.
EVICTION_WINDOWS = 2


@dataclass(frozen=True)
class LedgerEntry:
    """One previously-notified observation."""

    observation_id: str
    timestamp: str

    def to_line(self) -> str:
        return f"{self.observation_id},{self.timestamp}"

    @classmethod
    def from_line(cls, line: str) -> LedgerEntry:
        """Split one ledger line, checking that the timestamp parses.

        Raises:
            ValueError: Not exactly two comma-separated fields.
            DecodeError: The timestamp is not in ``timecodec.render`` form.
        """
        fields = line.split(",")
        if len(fields) != 2:
            msg = f"Expected 'identifier,timestamp', got {line!r}"
            raise ValueError(msg)
        timecodec.parse(fields[1])
        return cls(fields[0], fields[1])


class DedupLedger:
    """Ordered record of notified observations, optionally backed by a file."""

    def __init__(
        self,
        entries: Iterable[LedgerEntry] = (),
        path: Path | None = None,
        *,
        first_run: bool = False,
    ) -> None:
        self.entries: list[LedgerEntry] = list(entries)
        self.path = path
        self.first_run = first_run

    @property
    def persistent(self) -> bool:
        return self.path is not None

    @property
    def ids(self) -> set[str]:
        return {e.observation_id for e in self.entries}

    def __contains__(self, observation_id: object) -> bool:
        return any(e.observation_id == observation_id for e in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries)

    # -----------------------------------------------------------------------
    # Load / persist
    # -----------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | str | None) -> DedupLedger:
        """Read a ledger file.

        An empty/None path gives an in-memory ledger that is never written.
        A missing file gives an empty ledger flagged ``first_run``.

        Raises:
            LoadError: The file cannot be read or decoded, a line is not
                exactly two comma-separated fields, or a timestamp does not
                parse.
        """
        if not path:
            return cls()
        full = Path(path)
        if not full.exists():
            return cls(path=full, first_run=True)

        try:
            with full.open(encoding="utf-8") as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Failed to open '{full}' for input: {e}"
            raise LoadError(msg) from e

        entries = []
        for lineno, line in enumerate(lines, start=1):
            try:
                entries.append(LedgerEntry.from_line(line))
            except (ValueError, DecodeError) as e:
                msg = f"{full}:{lineno}: {e}"
                raise LoadError(msg) from None
        return cls(entries, path=full)

    def persist(self) -> Path | None:
        """Overwrite the ledger file with the current entries, in order.

        Returns:
            The written path, or None when persistence is disabled.

        Raises:
            SaveError: The file could not be written.
        """
        if self.path is None:
            return None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                for entry in self.entries:
                    f.write(entry.to_line() + "\n")
        except OSError as e:
            msg = f"Failed to open '{self.path}' for output: {e}"
            raise SaveError(msg) from e
        return self.path

    # -----------------------------------------------------------------------
    # Update
    # -----------------------------------------------------------------------

    def evict(self, now: datetime, days_back: int) -> int:
        """Drop entries older than ``now - EVICTION_WINDOWS * days_back``.

        Every entry is parsed before any is removed, so a corrupt timestamp
        leaves the ledger untouched.

        Returns:
            Number of entries removed.

        Raises:
            DecodeError: An entry's timestamp cannot be parsed.
        """
        cutoff = now - timedelta(days=EVICTION_WINDOWS * days_back)
        parsed = [(entry, timecodec.parse(entry.timestamp)) for entry in self.entries]
        kept = [entry for entry, ts in parsed if ts.as_datetime() >= cutoff]
        removed = len(self.entries) - len(kept)
        self.entries = kept
        return removed

    def merge(self, observations: Iterable[Observation]) -> int:
        """Append an entry for each newly notified observation.

        Callers pass observations already filtered against this ledger, so no
        duplicate check is made here.

        Returns:
            Number of entries added.
        """
        added = [
            LedgerEntry(obs.id, timecodec.render(obs.observed_at)) for obs in observations
        ]
        self.entries.extend(added)
        return len(added)

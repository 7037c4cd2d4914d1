"""Notification e-mail renderer.

One paragraph per observation::

    <p><b>Mallard</b> (3), 4/1/2024 6:30, Cherry Creek SP, Jane Doe --
    <a href="https://ebird.org/checklist/S123">...</a></p>
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ebird_notifier import timecodec
from ebird_notifier.renderers import render_template

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ebird_notifier.datasources.ebird import Observation

DEFAULT_SUBJECT = "eBird Notifier Message"


def build_subject(observations: Sequence[Observation], prefix: str = DEFAULT_SUBJECT) -> str:
    n = len(observations)
    noun = "observation" if n == 1 else "observations"
    return f"{prefix}: {n} new notable {noun}"


def build_notification_html(observations: Sequence[Observation]) -> str:
    """Build the HTML message body for a batch of new observations."""
    rows = [
        {
            "common_name": obs.common_name,
            "count": obs.count_label,
            "when": timecodec.render(obs.observed_at),
            "location": obs.location_name,
            "observer": obs.observer,
            "checklist_url": obs.checklist_url,
        }
        for obs in observations
    ]
    return render_template("notification.html.j2", observations=rows)

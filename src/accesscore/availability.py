"""Availability windows for volunteer preferences.

Volunteers can indicate their availability for an event while a window is
open. The window may be unbounded on either side, and an administrator
can override it for an individual volunteer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


class AvailabilityStatus:
    """State of an availability window relative to the current time."""

    PAST = "past"  # Window closed, or the event is over
    FUTURE = "future"  # Window not open yet
    ACTIVE = "active"  # Preferences may be submitted
    OVERRIDE = "override"  # Opened for this volunteer regardless of timing

    ALL = frozenset({"past", "future", "active", "override"})


@dataclass(frozen=True)
class AvailabilityWindow:
    """Period during which availability can be indicated.

    ``start`` and ``end`` are optional bounds; ``override`` forces the
    window open.
    """

    start: datetime | None = None
    end: datetime | None = None
    override: bool = False


def determine_availability_status(
    current_time: datetime,
    event_end_time: datetime,
    window: AvailabilityWindow,
) -> str:
    """Determine the :class:`AvailabilityStatus` of ``window`` at ``current_time``.

    An explicit end keeps the window open until that moment, even after the
    event has finished. Without an end the window closes when the event
    ends; without a start it does not open on its own.
    """
    if window.override:
        return AvailabilityStatus.OVERRIDE

    if window.end is not None and window.end < current_time:
        return AvailabilityStatus.PAST

    if window.start is not None and window.start > current_time:
        return AvailabilityStatus.FUTURE

    if window.end is not None:
        return AvailabilityStatus.ACTIVE

    if event_end_time < current_time:
        return AvailabilityStatus.PAST

    if window.start is not None:
        return AvailabilityStatus.ACTIVE

    return AvailabilityStatus.FUTURE


__all__ = [
    "AvailabilityStatus",
    "AvailabilityWindow",
    "determine_availability_status",
]

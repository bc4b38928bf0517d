from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from typing import Iterator, Sequence

from ..core.enums import SlotMatchPolicy


class SlotMatcher(ABC):
    """Strategy Pattern: decide which (day, slot) a local scan time covers."""

    @abstractmethod
    def slot_keys(self, local: datetime, slots: Sequence[int], interval_hours: int) -> Iterator[tuple[date, int]]:
        raise NotImplementedError


class ExactHourMatcher(SlotMatcher):
    """The scan's local hour must equal the slot start hour."""

    def slot_keys(self, local: datetime, slots: Sequence[int], interval_hours: int) -> Iterator[tuple[date, int]]:
        if local.hour in slots:
            yield local.date(), local.hour


class WindowMatcher(SlotMatcher):
    """The scan falls in [slot start, slot start + interval).

    A slot that starts late in the evening keeps scans made after midnight,
    filed under the day the slot started.
    """

    def slot_keys(self, local: datetime, slots: Sequence[int], interval_hours: int) -> Iterator[tuple[date, int]]:
        width = timedelta(hours=interval_hours)
        for hour in slots:
            anchor = datetime.combine(local.date(), time(hour))
            if anchor > local:
                anchor -= timedelta(days=1)
            if local - anchor < width:
                yield anchor.date(), hour


def matcher_for(policy: SlotMatchPolicy | str) -> SlotMatcher:
    """Factory: map the configured policy name to its matcher."""
    policy = SlotMatchPolicy(policy)
    if policy == SlotMatchPolicy.WINDOW:
        return WindowMatcher()
    return ExactHourMatcher()

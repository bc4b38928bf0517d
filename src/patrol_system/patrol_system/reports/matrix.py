"""Coverage matrix: day x slot x checkpoint grid of guard initials.

Pure computation over rows supplied by the caller; nothing here touches the
database or reads global configuration.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Optional, Sequence

from ..checkpoints.model import Checkpoint
from ..common.datetime_utils import format_local_date, month_days, to_local
from ..core.constants import DEFAULT_UTC_OFFSET_HOURS, INITIALS_LENGTH
from ..core.enums import SlotMatchPolicy
from ..patrols.model import PatrolLog
from ..schedules.model import CoverageSchedule
from .matching import matcher_for


def slot_label(hour: int) -> str:
    return f"{hour:02d}:00"


def slot_hours(start_hour: int, interval_hours: int) -> Iterator[int]:
    """Slot start hours: start, start+interval, ... modulo 24, floor(24/interval) of them.

    An interval below 1 is treated as 1 so the sequence always terminates.
    """
    interval = max(1, int(interval_hours))
    start = int(start_hour) % 24
    for step in range(24 // interval):
        yield (start + step * interval) % 24


def initials(username: str) -> str:
    """First three characters of the login name, upper-cased, never padded."""
    return (username or "")[:INITIALS_LENGTH].upper()


@dataclass(frozen=True)
class MatrixCell:
    slot_hour: int
    checkpoint_id: int
    checkpoint_name: str
    day: date
    value: Optional[str] = None

    @property
    def slot(self) -> str:
        return slot_label(self.slot_hour)

    def to_dict(self) -> dict:
        return {
            "slot": self.slot,
            "checkpoint": self.checkpoint_name,
            "day": self.day.day,
            "date": format_local_date(self.day),
            "value": self.value,
        }


@dataclass(frozen=True)
class CoverageMatrix:
    month: int
    year: int
    slots: tuple[int, ...]
    checkpoints: tuple[str, ...]
    days: tuple[date, ...]
    cells: tuple[MatrixCell, ...]

    def value_at(self, *, day: int, slot_hour: int, checkpoint_name: str) -> Optional[str]:
        for cell in self.cells:
            if cell.day.day == day and cell.slot_hour == slot_hour and cell.checkpoint_name == checkpoint_name:
                return cell.value
        return None

    def filled_cells(self) -> list[MatrixCell]:
        return [c for c in self.cells if c.value]

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "year": self.year,
            "slots": [slot_label(h) for h in self.slots],
            "checkpoints": list(self.checkpoints),
            "days": [d.day for d in self.days],
            "cells": [c.to_dict() for c in self.cells],
        }


def build_matrix(
    month: int,
    year: int,
    schedule: CoverageSchedule,
    checkpoints: Iterable[Checkpoint],
    records: Iterable[PatrolLog],
    *,
    utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS,
    policy: SlotMatchPolicy | str = SlotMatchPolicy.EXACT_HOUR,
) -> CoverageMatrix:
    """Build the coverage grid for one month.

    Cells are ordered by slot (generation order), then checkpoint name, then
    day. Only accepted scans cover a cell; when several match, the earliest
    scan wins.
    """
    interval = max(1, int(schedule.interval_hours))
    slots = tuple(slot_hours(schedule.start_hour, interval))
    days = tuple(month_days(year, month))
    ordered = sorted(checkpoints, key=lambda cp: (cp.name, cp.checkpoint_id))
    matcher = matcher_for(policy)

    covered: dict[tuple[int, date, int], str] = {}
    for rec in sorted(records, key=lambda r: (r.scanned_at, r.log_id)):
        if not rec.accepted or rec.checkpoint_id is None:
            continue
        local = to_local(rec.scanned_at, utc_offset_hours)
        for day, hour in matcher.slot_keys(local, slots, interval):
            covered.setdefault((rec.checkpoint_id, day, hour), initials(rec.username))

    cells: list[MatrixCell] = []
    for hour in slots:
        for cp in ordered:
            for day in days:
                cells.append(
                    MatrixCell(
                        slot_hour=hour,
                        checkpoint_id=cp.checkpoint_id,
                        checkpoint_name=cp.name,
                        day=day,
                        value=covered.get((cp.checkpoint_id, day, hour)),
                    )
                )

    return CoverageMatrix(
        month=month,
        year=year,
        slots=slots,
        checkpoints=tuple(cp.name for cp in ordered),
        days=days,
        cells=tuple(cells),
    )


def rows_by_slot(matrix: CoverageMatrix) -> list[tuple[str, str, list[str]]]:
    """(slot, checkpoint, per-day values) rows, in presentation order."""
    rows: list[tuple[str, str, list[str]]] = []
    per_row = len(matrix.days)
    cells: Sequence[MatrixCell] = matrix.cells
    for i in range(0, len(cells), per_row or 1):
        chunk = cells[i : i + per_row]
        if not chunk:
            continue
        rows.append((chunk[0].slot, chunk[0].checkpoint_name, [c.value or "" for c in chunk]))
    return rows

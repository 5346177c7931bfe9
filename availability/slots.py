"""
Slot arithmetic shared by the worker store, the job ledger, the aggregator
and the assignment engine.

A day is split into two bookable halves, ``am`` and ``pm``. ``full`` is only
offered while both halves are open. Every function here is pure.
"""
from __future__ import annotations
from datetime import time
from enum import Enum
from typing import Iterable, Optional


class Slot(str, Enum):
    full = "full"
    am = "am"
    pm = "pm"


SLOT_ORDER = (Slot.full, Slot.am, Slot.pm)
ALL_SLOTS = frozenset(SLOT_ORDER)
NOON = time(12, 0)


def slots_from_range(start: time, end: time) -> set[Slot]:
    """
    Classify a working window by its hour components.

    - starts before 12 and ends after 12 -> full, am, pm
    - starts before 12 and ends at or before 13 -> am
    - starts at or after 12 -> pm
    - anything else -> full, am, pm
    """
    start_hour, end_hour = start.hour, end.hour
    if start_hour < 12 and end_hour > 12:
        return set(ALL_SLOTS)
    if start_hour < 12 and end_hour <= 13:
        return {Slot.am}
    if start_hour >= 12:
        return {Slot.pm}
    return set(ALL_SLOTS)


def slot_for_time(at: Optional[time]) -> Slot:
    """Half of the day a scheduled time falls in; no time means the whole day."""
    if at is None:
        return Slot.full
    return Slot.am if at < NOON else Slot.pm


def subtract_consumed(available: Iterable[Slot], consumed: Iterable[Slot]) -> set[Slot]:
    """
    Remove booked halves from a worker's slots.

    A consumed ``full`` empties the day; a consumed half also kills ``full``.
    """
    available = set(available)
    consumed = set(consumed)
    if Slot.full in consumed:
        return set()
    remaining = set()
    for s in available:
        if s is Slot.full:
            if Slot.am in consumed or Slot.pm in consumed:
                continue
        elif s in consumed:
            continue
        remaining.add(s)
    return remaining


def remove_blocked(available: Iterable[Slot], blocked: Iterable[Slot]) -> set[Slot]:
    """
    Drop the tokens named by a partial master block.

    A blocked half also takes ``full`` with it. Unlike a consumed ``full``,
    a blocked ``full`` leaves the halves open.
    """
    blocked = {Slot(b) for b in blocked}
    if Slot.am in blocked or Slot.pm in blocked:
        blocked.add(Slot.full)
    return {Slot(s) for s in available if Slot(s) not in blocked}


def has_am(slots: Iterable[Slot]) -> bool:
    slots = set(slots)
    return Slot.am in slots or Slot.full in slots


def has_pm(slots: Iterable[Slot]) -> bool:
    slots = set(slots)
    return Slot.pm in slots or Slot.full in slots


def satisfies(slots: Iterable[Slot], slot_type: str) -> bool:
    """Whether a worker's slots can take a booking of ``slot_type`` (am/pm/full/exact)."""
    slots = set(slots)
    if slot_type == "full":
        return Slot.full in slots or (Slot.am in slots and Slot.pm in slots)
    if slot_type == "am":
        return has_am(slots)
    if slot_type == "pm":
        return has_pm(slots)
    return len(slots) > 0


def ordered(slots: Iterable[Slot | str]) -> list[str]:
    """Canonical ``full, am, pm`` ordering of slot tokens, for anything sent over the wire."""
    present = {Slot(s) for s in slots}
    return [s.value for s in SLOT_ORDER if s in present]

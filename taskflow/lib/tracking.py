"""
Notes and time tracking on task files.

Notes are appended as {timestamp, type, content}. Time is tracked as entries
{start, end?, hours?, note?}; an entry without `end` is a running timer, and
at most one timer runs per task. actualHours is the sum of finished entries.
"""

from datetime import datetime
from typing import Optional

from taskflow.lib.types import TaskFile

NOTE_TYPES = ("note", "handoff", "blocker", "decision")


def add_note(task: TaskFile, content: str, note_type: str = "note") -> dict:
    if note_type not in NOTE_TYPES:
        raise ValueError(f"Unknown note type '{note_type}'. Valid types: {', '.join(NOTE_TYPES)}")
    note = {"timestamp": datetime.now().isoformat(), "type": note_type, "content": content}
    if task.notes is None:
        task.notes = []
    task.notes.append(note)
    return note


def running_entry(task: TaskFile) -> Optional[dict]:
    for entry in task.time_entries or []:
        if not entry.get("end"):
            return entry
    return None


def start_timer(task: TaskFile, note: Optional[str] = None) -> Optional[dict]:
    """Start a timer. Returns None if one is already running."""
    if running_entry(task) is not None:
        return None
    entry = {"start": datetime.now().isoformat()}
    if note:
        entry["note"] = note
    if task.time_entries is None:
        task.time_entries = []
    task.time_entries.append(entry)
    return entry


def stop_timer(task: TaskFile, note: Optional[str] = None, now: Optional[datetime] = None) -> Optional[dict]:
    """Stop the running timer and add its hours to actualHours.

    Returns None if no timer is running.
    """
    entry = running_entry(task)
    if entry is None:
        return None
    end = now or datetime.now()
    elapsed = end - datetime.fromisoformat(entry["start"])
    hours = round(elapsed.total_seconds() / 3600, 2)

    entry["end"] = end.isoformat()
    entry["hours"] = hours
    if note:
        entry["note"] = note
    task.actual_hours = round((task.actual_hours or 0) + hours, 2)
    return entry


def log_time(task: TaskFile, hours: float, note: Optional[str] = None) -> dict:
    """Record hours worked without a timer."""
    if hours <= 0:
        raise ValueError("Logged hours must be positive")
    stamp = datetime.now().isoformat()
    entry = {"start": stamp, "end": stamp, "hours": hours, "note": note or "Manual log"}
    if task.time_entries is None:
        task.time_entries = []
    task.time_entries.append(entry)
    task.actual_hours = round((task.actual_hours or 0) + hours, 2)
    return entry


def set_estimate(task: TaskFile, hours: float) -> None:
    if hours <= 0:
        raise ValueError("Estimate must be positive")
    task.estimated_hours = hours

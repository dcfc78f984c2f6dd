"""
Transcript utilities for Interview Prep.

This module provides the ordered, speaker-tagged log of utterances shared by
the conversation loop (which writes it) and the session lifecycle manager
(which stores it and feeds it to the model).
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from interview_prep.core.exceptions import ValidationError
from interview_prep.models.session import Speaker, TranscriptEntry, ensure_utc, utc_now

# Set up logging
logger = logging.getLogger(__name__)

SPEAKER_LABELS = {
    Speaker.AI.value: "Interviewer",
    Speaker.USER.value: "Candidate",
}


def validate_transcript(entries: Iterable[TranscriptEntry]) -> List[TranscriptEntry]:
    """
    Check the ordering invariant of a submitted transcript.

    Args:
        entries: Transcript entries in submission order

    Returns:
        The entries as a list, unchanged

    Raises:
        ValidationError: if a timestamp is earlier than the one before it
    """
    checked = list(entries)
    for index in range(1, len(checked)):
        if checked[index].timestamp < checked[index - 1].timestamp:
            raise ValidationError(
                f"Transcript timestamps must be non-decreasing (entry {index} is earlier than entry {index - 1})"
            )
    return checked


def count_ai_entries(entries: Iterable[TranscriptEntry]) -> int:
    """Number of interviewer utterances, i.e. questions asked so far."""
    return sum(1 for entry in entries if entry.speaker == Speaker.AI.value)


def format_transcript(entries: Iterable[TranscriptEntry]) -> str:
    """Render a transcript as plain dialogue for prompts."""
    lines = []
    for entry in entries:
        label = SPEAKER_LABELS.get(entry.speaker, str(entry.speaker))
        lines.append(f"{label}: {entry.content}")
    return "\n".join(lines) if lines else "(no conversation yet)"


class TranscriptStore:
    """
    Append-only transcript kept by the live client.

    Entries are stamped on append; if the clock moves backwards the previous
    timestamp is reused so the log stays non-decreasing.
    """

    def __init__(self, entries: Optional[Iterable[TranscriptEntry]] = None):
        self._entries: List[TranscriptEntry] = validate_transcript(entries or [])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    @property
    def entries(self) -> List[TranscriptEntry]:
        return list(self._entries)

    def append(self, speaker: str, content: str, timestamp: Optional[datetime] = None) -> TranscriptEntry:
        """Append one utterance and return the stored entry."""
        stamp = ensure_utc(timestamp) if timestamp else utc_now()
        if self._entries and stamp < self._entries[-1].timestamp:
            stamp = self._entries[-1].timestamp
        entry = TranscriptEntry(speaker=speaker, content=content, timestamp=stamp)
        self._entries.append(entry)
        return entry

    def last_entry(self, speaker: Optional[str] = None) -> Optional[TranscriptEntry]:
        """Most recent entry, optionally restricted to one speaker."""
        for entry in reversed(self._entries):
            if speaker is None or entry.speaker == speaker:
                return entry
        return None

    def to_payload(self) -> List[Dict[str, Any]]:
        """JSON-ready list for the wire."""
        return [entry.model_dump(mode="json") for entry in self._entries]

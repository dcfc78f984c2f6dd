"""
Interfaces the conversation loop drives.

Speech recognition, speech synthesis, device checks and the session API are
supplied by the host (browser bridge, console driver, tests).
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from interview_prep.models.api import EndSessionResponse, NextQuestionResponse, StartSessionResponse


class SpeechCapture(ABC):
    """Speech-to-text source. Final utterances are delivered to the loop by the host."""

    @abstractmethod
    def start(self) -> None:
        """Begin listening."""

    @abstractmethod
    def stop(self) -> None:
        """Stop listening; no further utterances until start() is called again."""


class SpeechPlayback(ABC):
    """Text-to-speech sink."""

    @abstractmethod
    def speak(self, text: str, on_done: Callable[[], None]) -> None:
        """Start speaking text and call on_done once playback has completed."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop any playback in progress without calling on_done."""


class DeviceChecker(ABC):
    @abstractmethod
    async def check_camera(self) -> bool:
        pass

    @abstractmethod
    async def check_microphone(self) -> bool:
        pass


class SessionApi(ABC):
    """Client view of the session endpoints."""

    @abstractmethod
    async def start(
        self,
        interview_type: str,
        difficulty: str = "medium",
        resume_content: Optional[str] = None,
        resume_url: Optional[str] = None,
        focus_area: Optional[str] = None,
    ) -> StartSessionResponse:
        pass

    @abstractmethod
    async def next(
        self, session_id: str, transcript: List[Dict[str, Any]], revision: Optional[int] = None
    ) -> NextQuestionResponse:
        pass

    @abstractmethod
    async def end(self, session_id: str, transcript: List[Dict[str, Any]]) -> EndSessionResponse:
        pass

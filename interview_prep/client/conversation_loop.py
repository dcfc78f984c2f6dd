"""
Client-side driver of a live mock interview.

The controller is single-threaded on the asyncio event loop. Every transition
is triggered by a callback (playback finished, final utterance, network reply,
timer, visibility change); nothing polls.

    Intro -> Setup -> Active{AISpeaking | Listening | Thinking} -> Feedback
                       Paused (inside Active)
"""
import asyncio
import logging
from enum import Enum
from typing import Callable, Optional, Set

from interview_prep.client.collaborators import DeviceChecker, SessionApi, SpeechCapture, SpeechPlayback
from interview_prep.models.session import FeedbackReport, InterviewType, Speaker
from interview_prep.utils.config import get_session_config
from interview_prep.utils.constants import FEEDBACK_UNAVAILABLE_MESSAGE
from interview_prep.utils.transcript import TranscriptStore

logger = logging.getLogger(__name__)


class LoopState(str, Enum):
    INTRO = "intro"
    SETUP = "setup"
    AI_SPEAKING = "ai-speaking"
    LISTENING = "listening"
    THINKING = "thinking"
    PAUSED = "paused"
    FEEDBACK = "feedback"


ACTIVE_STATES = {LoopState.AI_SPEAKING, LoopState.LISTENING, LoopState.THINKING, LoopState.PAUSED}


class ConversationLoopController:
    """
    Runs the speak / listen / think cycle of one interview session.

    The controller owns the transcript. It calls SessionApi.next() after each
    final utterance and SessionApi.end() exactly once, whatever triggers the
    end (user, timer, visibility loss, error or question limit).
    """

    def __init__(
        self,
        api: SessionApi,
        capture: SpeechCapture,
        playback: SpeechPlayback,
        devices: DeviceChecker,
        interview_type: str,
        difficulty: str = "medium",
        focus_area: Optional[str] = None,
        duration_seconds: Optional[float] = None,
        on_state_change: Optional[Callable[[LoopState], None]] = None,
    ):
        self.api = api
        self.capture = capture
        self.playback = playback
        self.devices = devices
        self.interview_type = InterviewType(interview_type).value
        self.difficulty = difficulty
        self.focus_area = focus_area
        self.duration_seconds = duration_seconds or get_session_config()["duration_seconds"]
        self.on_state_change = on_state_change

        self.state = LoopState.INTRO
        self.transcript = TranscriptStore()
        self.session_id: Optional[str] = None
        self.revision: Optional[int] = None
        self.last_question: Optional[str] = None

        self.camera_ok = False
        self.microphone_ok = False
        self.resume_url: Optional[str] = None
        self.resume_text: Optional[str] = None

        self.feedback: Optional[FeedbackReport] = None
        self.feedback_message: Optional[str] = None
        self.end_reason: Optional[str] = None
        self.finished = asyncio.Event()

        self._ended = False
        self._remaining: float = float(self.duration_seconds)
        self._deadline: Optional[float] = None
        self._timer_handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    # ---- state ----

    def _set_state(self, state: LoopState):
        if state != self.state:
            logger.debug(f"Loop state {self.state.value} -> {state.value}")
            self.state = state
            if self.on_state_change:
                self.on_state_change(state)

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def is_active(self) -> bool:
        return self.state in ACTIVE_STATES

    # ---- setup ----

    def enter_setup(self):
        if self.state == LoopState.INTRO:
            self._set_state(LoopState.SETUP)

    async def run_device_checks(self) -> bool:
        self.camera_ok = bool(await self.devices.check_camera())
        self.microphone_ok = bool(await self.devices.check_microphone())
        logger.info(f"Device checks: camera={self.camera_ok} microphone={self.microphone_ok}")
        return self.camera_ok and self.microphone_ok

    def set_resume(self, url: str, extracted_text: str):
        self.resume_url = url
        self.resume_text = extracted_text

    @property
    def can_start(self) -> bool:
        if not (self.camera_ok and self.microphone_ok):
            return False
        if self.interview_type == InterviewType.RESUME_BASED.value:
            return bool(self.resume_url and (self.resume_text or "").strip())
        return True

    async def begin(self):
        """Start the session on the server and speak the first question."""
        if self.state != LoopState.SETUP:
            raise RuntimeError(f"Cannot begin from state {self.state.value}")
        if not self.can_start:
            raise RuntimeError("Device checks (and resume, for resume-based interviews) must pass first")

        started = await self.api.start(
            self.interview_type,
            difficulty=self.difficulty,
            resume_content=self.resume_text,
            resume_url=self.resume_url,
            focus_area=self.focus_area,
        )
        self.session_id = started.session_id
        self.revision = 0
        self.transcript.append(Speaker.AI.value, started.first_question)
        self._start_timer(self._remaining)

        opening = f"{started.opening_remark} {started.first_question}".strip()
        self.last_question = started.first_question
        self._speak(opening)

    # ---- speaking and listening ----

    def _speak(self, text: str):
        self._set_state(LoopState.AI_SPEAKING)
        self.playback.speak(text, self.on_playback_done)

    def on_playback_done(self):
        """Playback completion is the only way into Listening."""
        if self._ended or self.state != LoopState.AI_SPEAKING:
            return
        self._set_state(LoopState.LISTENING)
        self.capture.start()

    def on_final_utterance(self, text: str):
        """A final speech-to-text result ends the candidate's turn."""
        if self._ended or self.state != LoopState.LISTENING:
            logger.debug(f"Ignoring utterance in state {self.state.value}")
            return
        text = (text or "").strip()
        if not text:
            return
        self.capture.stop()
        self.transcript.append(Speaker.USER.value, text)
        self._set_state(LoopState.THINKING)
        self._spawn(self._advance())

    async def _advance(self):
        try:
            reply = await self.api.next(self.session_id, self.transcript.to_payload(), self.revision)
        except Exception as e:
            if not self._ended:
                logger.error(f"Could not get the next question, ending session {self.session_id}: {e}")
                await self.end(reason="error")
            return

        if self._ended:
            return
        self.revision = reply.revision
        if not reply.next_question or not reply.next_question.strip():
            logger.info(f"No further questions for session {self.session_id}")
            await self.end(reason="question-limit")
            return

        self.transcript.append(Speaker.AI.value, reply.next_question)
        self.last_question = reply.next_question
        if self.state == LoopState.THINKING:
            self._speak(reply.next_question)

    # ---- timer ----

    def _start_timer(self, seconds: float):
        loop = asyncio.get_running_loop()
        self._deadline = loop.time() + seconds
        self._timer_handle = loop.call_later(seconds, self._on_timer_expired)

    def _stop_timer(self):
        if self._timer_handle is not None:
            self._timer_handle.cancel()
            self._timer_handle = None
        if self._deadline is not None:
            self._remaining = max(0.0, self._deadline - asyncio.get_running_loop().time())
            self._deadline = None

    @property
    def remaining_seconds(self) -> float:
        if self._deadline is None:
            return self._remaining
        return max(0.0, self._deadline - asyncio.get_running_loop().time())

    def _on_timer_expired(self):
        self._timer_handle = None
        self._deadline = None
        self._remaining = 0.0
        logger.info(f"Interview time is up for session {self.session_id}")
        self._spawn(self.end(reason="timer"))

    # ---- interruptions ----

    def on_visibility_lost(self):
        """Leaving the interview view ends the session."""
        if self.is_active:
            logger.warning(f"Visibility lost during session {self.session_id}")
            self._spawn(self.end(reason="visibility"))

    def pause(self):
        if self.state not in (LoopState.AI_SPEAKING, LoopState.LISTENING) or self._ended:
            return
        self._stop_timer()
        self.capture.stop()
        self.playback.cancel()
        self._set_state(LoopState.PAUSED)
        logger.info(f"Session {self.session_id} paused with {self._remaining:.0f}s left")

    def resume(self):
        """Resume re-speaks the last question; Listening follows its playback."""
        if self.state != LoopState.PAUSED or self._ended:
            return
        self._start_timer(self._remaining)
        self._speak(self.last_question or "")

    # ---- end ----

    async def end(self, reason: str = "user") -> Optional[FeedbackReport]:
        """Conclude the session once; later calls return immediately."""
        if self._ended:
            return self.feedback
        self._ended = True
        self.end_reason = reason

        self._stop_timer()
        self.capture.stop()
        self.playback.cancel()
        logger.info(f"Ending session {self.session_id} ({reason})")

        try:
            if self.session_id is not None:
                result = await self.api.end(self.session_id, self.transcript.to_payload())
                self.feedback = result.feedback
            if self.feedback is None:
                self.feedback_message = FEEDBACK_UNAVAILABLE_MESSAGE
        except Exception as e:
            logger.error(f"Ending session {self.session_id} failed: {e}")
            self.feedback_message = FEEDBACK_UNAVAILABLE_MESSAGE
        finally:
            self._set_state(LoopState.FEEDBACK)
            self.finished.set()
        return self.feedback

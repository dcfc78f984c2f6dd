"""
Command-line interface for the Interview Prep platform.

This module provides a console driver for the live mock interview loop and a
few plan commands, talking to a running API server.
"""
import asyncio
import logging
from typing import Callable, Optional

import aioconsole
import click

from interview_prep.client.api_client import InterviewPrepApiClient
from interview_prep.client.collaborators import DeviceChecker, SpeechCapture, SpeechPlayback
from interview_prep.client.conversation_loop import ConversationLoopController, LoopState
from interview_prep.models.session import InterviewType
from interview_prep.utils.constants import FALLBACK_CLOSING_REMARK

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

COMMANDS_HELP = """Commands:
- /pause and /resume to pause the interview
- /leave to simulate leaving the interview window
- /end to finish and get feedback
Anything else is your answer."""


class ConsolePlayback(SpeechPlayback):
    """Prints the interviewer's turn; playback completes on the next loop iteration."""

    def __init__(self):
        self._pending: Optional[asyncio.Handle] = None

    def speak(self, text: str, on_done: Callable[[], None]) -> None:
        print(f"\nInterviewer: {text}")
        self._pending = asyncio.get_running_loop().call_soon(on_done)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None


class ConsoleCapture(SpeechCapture):
    def __init__(self):
        self.listening = asyncio.Event()

    def start(self) -> None:
        self.listening.set()

    def stop(self) -> None:
        self.listening.clear()


class ConsoleDevices(DeviceChecker):
    """Asks the user to confirm camera and microphone."""

    async def _confirm(self, device: str) -> bool:
        answer = await aioconsole.ainput(f"Is your {device} ready? [Y/n] ")
        return answer.strip().lower() in ("", "y", "yes")

    async def check_camera(self) -> bool:
        return await self._confirm("camera")

    async def check_microphone(self) -> bool:
        return await self._confirm("microphone")


def print_feedback(controller: ConversationLoopController):
    print("\n" + "=" * 50)
    print("  INTERVIEW FEEDBACK")
    print("=" * 50)
    if controller.end_reason == "question-limit":
        print(FALLBACK_CLOSING_REMARK)
    report = controller.feedback
    if report is None:
        print(controller.feedback_message)
        return
    print(f"* Overall score: {report.overall_score:.0f}/100")
    print(f"* Summary: {report.performance_summary}")
    content = report.content_analysis
    print(f"* Clarity: {content.clarity.score}/10 - {content.clarity.feedback}")
    print(f"* Conciseness: {content.conciseness.score}/10 - {content.conciseness.feedback}")
    print(f"* Technical accuracy: {content.technical_accuracy.score}/10 - {content.technical_accuracy.feedback}")
    communication = report.communication_analysis
    print(f"* Pacing: {communication.pacing}, confidence: {communication.confidence_level}")
    print(f"* Filler words: {communication.filler_words.count} {communication.filler_words.words}")
    for suggestion in report.suggested_answers:
        print(f"\nQ: {suggestion.question}\nSuggested: {suggestion.suggested_answer}")
    print("=" * 50 + "\n")


async def run_console_interview(api: InterviewPrepApiClient, interview_type: str, difficulty: str,
                                focus_area: Optional[str], resume_path: Optional[str],
                                duration: Optional[int]):
    capture = ConsoleCapture()
    controller = ConversationLoopController(
        api,
        capture,
        ConsolePlayback(),
        ConsoleDevices(),
        interview_type=interview_type,
        difficulty=difficulty,
        focus_area=focus_area,
        duration_seconds=duration,
    )
    controller.enter_setup()

    if not await controller.run_device_checks():
        print("Camera and microphone are required to start.")
        return
    if resume_path:
        upload = await api.upload_resume(resume_path)
        controller.set_resume(upload.url, upload.extracted_text)
        print(f"Resume uploaded ({len(upload.extracted_text)} characters extracted)")
    if not controller.can_start:
        print("A resume is required for a resume-based interview (use --resume).")
        return

    print("\n" + COMMANDS_HELP)
    await controller.begin()

    finished = asyncio.ensure_future(controller.finished.wait())
    while not controller.finished.is_set():
        if controller.state != LoopState.PAUSED:
            listening = asyncio.ensure_future(capture.listening.wait())
            await asyncio.wait({listening, finished}, return_when=asyncio.FIRST_COMPLETED)
            listening.cancel()
            if controller.finished.is_set():
                break

        reading = asyncio.ensure_future(aioconsole.ainput("\nYou: "))
        await asyncio.wait({reading, finished}, return_when=asyncio.FIRST_COMPLETED)
        if not reading.done():
            reading.cancel()
            break
        line = reading.result().strip()

        if line == "/end":
            await controller.end(reason="user")
        elif line == "/leave":
            controller.on_visibility_lost()
        elif line == "/pause":
            controller.pause()
            print(f"Paused with {controller.remaining_seconds:.0f}s left. Type /resume to continue.")
        elif line == "/resume":
            controller.resume()
        elif controller.state == LoopState.LISTENING:
            controller.on_final_utterance(line)

    await controller.finished.wait()
    print_feedback(controller)


@click.group()
@click.option('--user-id', envvar='INTERVIEW_PREP_USER_ID', default=None, help='Identity sent as X-User-Id')
@click.option('--api-url', envvar='API_BASE_URL', default=None, help='Base URL of the API server')
@click.option('--verbose', is_flag=True, help='Show debug logging')
@click.pass_context
def cli(ctx, user_id: str, api_url: Optional[str], verbose: bool):
    """Interview Prep - preparation plans and live mock interviews"""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    ctx.obj = {"user_id": user_id, "api_url": api_url}


@cli.command()
@click.option('--host', default="0.0.0.0", help='Host to bind the server to')
@click.option('--port', default=8000, type=int, help='Port to bind the server to')
def serve(host: str, port: int):
    """Run the API server."""
    from interview_prep.server import start_server
    start_server(host=host, port=port)


async def _with_client(ctx, plan_id: Optional[str], action):
    if not ctx.obj["user_id"]:
        raise click.UsageError("--user-id (or INTERVIEW_PREP_USER_ID) is required")
    api = InterviewPrepApiClient(ctx.obj["user_id"], plan_id=plan_id, base_url=ctx.obj["api_url"])
    try:
        return await action(api)
    finally:
        await api.close()


@cli.command()
@click.option('--title', required=True, help='Plan title')
@click.option('--role', required=True, help='Target role')
@click.option('--company', required=True, help='Target company')
@click.option('--level', default="Entry-level", help='Seniority of the role')
@click.pass_context
def create_plan(ctx, title: str, role: str, company: str, level: str):
    """Create a preparation plan."""
    async def action(api):
        plan = await api.create_plan(title, role, company, level=level)
        print(f"\nCreated plan {plan.plan_id}")
        print(f"* {len(plan.study_topics)} study topics, {len(plan.prepared_questions)} questions, "
              f"{len(plan.practice_problems)} practice problems, {len(plan.story_bank)} stories")

    asyncio.run(_with_client(ctx, None, action))


@cli.command()
@click.pass_context
def list_plans(ctx):
    """List your preparation plans."""
    async def action(api):
        plans = await api.list_plans()
        if not plans:
            print("\nNo plans found.")
            return
        for plan in plans:
            print(f"{plan.plan_id}  {plan.title}  ({plan.target.role} @ {plan.target.company}, {plan.status})")

    asyncio.run(_with_client(ctx, None, action))


@cli.command()
@click.argument('plan_id')
@click.option('--type', 'interview_type', default=InterviewType.BEHAVIORAL.value,
              type=click.Choice([t.value for t in InterviewType]), help='Interview type')
@click.option('--difficulty', default="medium", type=click.Choice(["easy", "medium", "hard"]))
@click.option('--focus', 'focus_area', default=None, help='Optional focus area')
@click.option('--resume', 'resume_path', type=click.Path(exists=True, dir_okay=False), default=None,
              help='Resume file (PDF or text) for resume-based interviews')
@click.option('--duration', type=int, default=None, help='Interview length in seconds')
@click.pass_context
def interview(ctx, plan_id: str, interview_type: str, difficulty: str, focus_area: Optional[str],
              resume_path: Optional[str], duration: Optional[int]):
    """Run a live mock interview in the console."""
    async def action(api):
        await run_console_interview(api, interview_type, difficulty, focus_area, resume_path, duration)

    try:
        asyncio.run(_with_client(ctx, plan_id, action))
    except KeyboardInterrupt:
        print("\nInterview interrupted.")


def main():
    cli()


if __name__ == "__main__":
    main()

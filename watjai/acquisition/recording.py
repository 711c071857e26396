"""Timed, per-lead recording state machine driven by device frames."""

import asyncio
import logging
from typing import Optional

from ..device.connection import ConnectionManager
from ..exceptions import RecordingPreconditionError
from ..models.leads import LeadRecording
from ..protocol.frames import Frame, FrameKind, parse_frames
from .session import RecordingSession, RecordingState, SessionPhase

logger = logging.getLogger(__name__)


class RecordingController:
    """Runs the Idle/Recording state machine for leads I, II and III.

    Everything runs on one event loop: frame handlers are synchronous, and
    the one-second timer is an ordinary task, so an auto-stop can land
    between two frames but never in the middle of one.
    """

    def __init__(self,
                 connection: ConnectionManager,
                 session: Optional[RecordingSession] = None,
                 tick_interval: float = 1.0):
        """Initialize recording controller.

        Args:
            connection: Device link used for LEAD/START/STOP commands
            session: Session to drive; a fresh one is created if omitted
            tick_interval: Seconds between timer ticks
        """
        self.connection = connection
        self.session = session or RecordingSession()
        self.tick_interval = tick_interval
        self._timer_task: Optional[asyncio.Task] = None

    @property
    def is_recording(self) -> bool:
        return self.session.is_recording

    async def start_recording(self) -> None:
        """Start capturing the current lead.

        Raises:
            RecordingPreconditionError: If not connected, already recording,
                or all leads are done; the session is left unchanged
        """
        session = self.session
        if session.phase is SessionPhase.ASSEMBLY:
            raise RecordingPreconditionError("All three leads have been recorded")
        if session.is_recording:
            raise RecordingPreconditionError("A recording is already in progress")
        if not self.connection.is_connected:
            raise RecordingPreconditionError("Please connect to a device first")

        lead = session.current_lead
        # recording a lead again starts it from scratch
        session.leads[lead] = LeadRecording(lead)
        session.refresh_derived()
        session.buffer.flush()
        session.buffer.clear_display()
        session.elapsed_seconds = 0
        session.state = RecordingState.RECORDING
        timer = self._timer_task = asyncio.create_task(self._run_timer())

        logger.info(f"Recording Lead {session.current_recording.name}")
        await self.connection.send_command(f"LEAD:{lead}")
        if self._timer_task is not timer:
            logger.info(f"Lead {session.current_recording.name} stopped before START was sent")
            return
        await self.connection.send_command("START")
        if self._timer_task is not timer and not session.is_recording:
            # a stop landed while START was in flight
            await self.connection.send_command("STOP")

    async def stop_recording(self, auto: bool = False) -> bool:
        """Stop capture, flush the accumulator and send STOP.

        Returns:
            False if nothing was recording (no-op), True otherwise
        """
        session = self.session
        if not session.is_recording:
            return False

        session.state = RecordingState.IDLE
        self._cancel_timer()
        self._flush_into_current_lead()

        lead = session.current_recording
        if not lead.is_empty:
            lead.mark_complete()
        session.refresh_derived()

        logger.info(f"{'Auto-stopped' if auto else 'Stopped'} Lead {lead.name} "
                    f"after {session.elapsed_seconds}s with {len(lead.samples)} samples")
        await self.connection.send_command("STOP")
        return True

    async def tick(self) -> None:
        """Advance the recording clock by one second; stops at the maximum duration."""
        session = self.session
        if not session.is_recording:
            return
        session.elapsed_seconds = min(session.elapsed_seconds + 1, session.max_duration)
        if session.elapsed_seconds >= session.max_duration:
            await self.stop_recording(auto=True)

    async def _run_timer(self) -> None:
        # a restarted recording owns a new task; this one must not keep ticking
        while self._timer_task is asyncio.current_task():
            await asyncio.sleep(self.tick_interval)
            await self.tick()

    def _cancel_timer(self) -> None:
        task, self._timer_task = self._timer_task, None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    def on_data(self, text: str) -> None:
        """Data channel listener: parse and apply every frame in ``text``."""
        for frame in parse_frames(text):
            self.handle_frame(frame)

    def handle_frame(self, frame: Frame) -> None:
        if not self.session.is_recording:
            logger.debug(f"Ignoring {frame.kind.value} frame while idle")
            return

        buffer = self.session.buffer
        if frame.kind is FrameKind.SAMPLE_LINE:
            buffer.on_sample_line(frame.values)
        elif frame.kind is FrameKind.SINGLE_SAMPLE:
            buffer.on_single_sample(frame.values[0])
        elif frame.kind is FrameKind.DATA_START:
            buffer.on_data_start()
        elif frame.kind in (FrameKind.BUFFER_FULL, FrameKind.DATA_END):
            self._flush_into_current_lead()
        elif frame.kind is FrameKind.STATUS:
            logger.debug(f"Device status: {frame.text}")

    def _flush_into_current_lead(self) -> None:
        samples = self.session.buffer.flush()
        if not samples:
            return
        lead = self.session.current_recording
        lead.append_samples(samples)
        logger.debug(f"Flushed {len(samples)} samples into Lead {lead.name} "
                     f"({len(lead.samples)} total)")

    def advance_lead(self) -> SessionPhase:
        """Move to the next lead, or to the assembly phase after Lead III.

        Raises:
            RecordingPreconditionError: If recording, or the current lead is empty
        """
        session = self.session
        if session.is_recording:
            raise RecordingPreconditionError(
                "Please wait for the measurement to complete or stop it manually")
        if session.phase is SessionPhase.ASSEMBLY:
            return session.phase

        lead = session.current_recording
        if lead.is_empty:
            raise RecordingPreconditionError(f"Please complete a recording for Lead {lead.name}")

        if session.current_lead < 3:
            session.current_lead += 1
            session.elapsed_seconds = 0
            session.buffer.clear_display()
            logger.info(f"Advanced to Lead {session.current_recording.name}")
        else:
            session.phase = SessionPhase.ASSEMBLY
            logger.info("All three leads recorded")
        return session.phase

    def close(self) -> None:
        """Cancel the timer and keep whatever was already received.

        An interrupted lead is marked complete when it holds samples, as on a
        normal stop. No STOP is sent.
        """
        self._cancel_timer()
        if self.session.is_recording:
            self.session.state = RecordingState.IDLE
            self._flush_into_current_lead()
            lead = self.session.current_recording
            if not lead.is_empty:
                lead.mark_complete()
            self.session.refresh_derived()
            logger.info("Recording controller closed during an active recording")

"""Measurement service: the single writer of a three-lead acquisition session."""

import logging
from typing import Any, Dict, Optional

from ..acquisition.recording import RecordingController
from ..acquisition.session import RecordingSession, SessionPhase
from ..analysis.assembler import ResultsAssembler
from ..analysis.base import AbstractAnalysisBackend
from ..analysis.http_backend import HttpAnalysisBackend
from ..config import WatjaiConfig
from ..device.connection import ConnectionManager
from ..device.events import CONNECTION, DATA, ERROR, ConnectionEvents
from ..exceptions import AnalysisError, AnalysisPreconditionError, RecordingPreconditionError
from ..models.device import ConnectionState
from ..storage.settings_store import SettingsStore

logger = logging.getLogger(__name__)


class MeasurementService:
    """Wires the device link, the recording state machine and the analysis step.

    UI layers call the coroutine methods and get result dictionaries back;
    they only read the session through ``get_status`` and ``session``.
    """

    def __init__(self,
                 config: WatjaiConfig,
                 backend: Optional[AbstractAnalysisBackend] = None,
                 events: Optional[ConnectionEvents] = None):
        """Initialize measurement service.

        Args:
            config: Application configuration
            backend: Analysis backend; defaults to the HTTP backend at analysis.url
            events: Device event channels; defaults to the configured topic prefix
        """
        self.config = config
        self.events = events or ConnectionEvents(config.get('device.topic_prefix', 'device'))
        self.connection_manager = ConnectionManager(
            events=self.events,
            port=config.get('device.port', 81),
            path=config.get('device.path', '/'),
            message_framed=config.get('device.message_framed', True),
        )
        self.controller = RecordingController(self.connection_manager)
        self.assembler = ResultsAssembler(backend or HttpAnalysisBackend(config.get('analysis.url')))
        self.settings = SettingsStore(config.get_settings_path())
        self.last_error: Optional[str] = None

        self.events.subscribe(DATA, self.controller.on_data)
        self.events.subscribe(ERROR, self._on_error)
        self.events.subscribe(CONNECTION, self._on_connection_changed)

        logger.info("MeasurementService ready")

    @property
    def session(self) -> RecordingSession:
        return self.controller.session

    def _on_error(self, message: str) -> None:
        self.last_error = message

    def _on_connection_changed(self, state: ConnectionState, error: Optional[str] = None) -> None:
        if state is ConnectionState.CONNECTED:
            self.last_error = None
        elif state is ConnectionState.DISCONNECTED and self.session.is_recording:
            logger.warning("Device disconnected during a recording; already flushed samples are kept")

    def _fail(self, message: str) -> Dict[str, Any]:
        self.last_error = message
        logger.warning(message)
        return {"success": False, "error": message}

    async def connect(self, address: str) -> Dict[str, Any]:
        """Connect to the device and remember its address for next time."""
        if not address or not address.strip():
            return self._fail("Please enter the device address")

        address = address.strip()
        self.settings.set_device_address(address)
        if not await self.connection_manager.connect(address):
            return self._fail(self.connection_manager.connection.last_error or "Could not connect to device")

        return {
            "success": True,
            "endpoint": self.connection_manager.connection.endpoint,
        }

    async def auto_connect(self) -> Dict[str, Any]:
        """Connect to the last used address when not connected already."""
        if self.connection_manager.is_connected:
            return {"success": True, "endpoint": self.connection_manager.connection.endpoint}

        address = self.settings.get_device_address()
        if not address:
            return {"success": False, "error": "No saved device address"}

        if not await self.connection_manager.connect(address):
            return self._fail(self.connection_manager.connection.last_error or "Could not connect to device")
        return {"success": True, "endpoint": self.connection_manager.connection.endpoint}

    async def disconnect(self) -> Dict[str, Any]:
        await self.connection_manager.disconnect()
        return {"success": True}

    async def start_recording(self) -> Dict[str, Any]:
        try:
            await self.controller.start_recording()
        except RecordingPreconditionError as e:
            return self._fail(str(e))

        return {
            "success": True,
            "lead": self.session.current_lead,
            "max_duration": self.session.max_duration,
        }

    async def stop_recording(self) -> Dict[str, Any]:
        stopped = await self.controller.stop_recording()
        lead = self.session.current_recording
        return {
            "success": True,
            "stopped": stopped,
            "lead": lead.lead_number,
            "samples": len(lead.samples),
        }

    async def next_step(self) -> Dict[str, Any]:
        """Advance to the next lead, or run the analysis after Lead III."""
        try:
            phase = self.controller.advance_lead()
        except RecordingPreconditionError as e:
            return self._fail(str(e))

        if phase is SessionPhase.RECORDING:
            return {"success": True, "phase": phase.value, "lead": self.session.current_lead}
        return await self.analyze()

    async def analyze(self) -> Dict[str, Any]:
        """Submit the three leads; a failure keeps the previous result."""
        if self.session.phase is not SessionPhase.ASSEMBLY:
            return self._fail("Please record all three leads first")

        try:
            verdict = await self.assembler.submit(self.session.leads)
        except AnalysisPreconditionError as e:
            return self._fail(str(e))
        except AnalysisError as e:
            return self._fail(f"Analysis failed: {e}")

        return {
            "success": True,
            "phase": SessionPhase.ASSEMBLY.value,
            "result": verdict.model_dump(),
            "risk_level": verdict.effective_risk_level,
            "is_normal_rhythm": verdict.is_normal_rhythm,
        }

    def new_session(self) -> None:
        """Discard the current leads and start again from Lead I."""
        self.controller.close()
        self.controller.session = RecordingSession()
        logger.info("Started a new measurement session")

    def get_status(self) -> Dict[str, Any]:
        status = self.session.get_status()
        status["connection_state"] = self.connection_manager.connection.state.value
        status["endpoint"] = self.connection_manager.connection.endpoint
        status["last_error"] = self.last_error
        result = self.assembler.result
        status["result"] = result.model_dump() if result else None
        return status

    async def cleanup(self) -> None:
        """Stop any recording, cancel timers and close the device link."""
        try:
            if self.session.is_recording and self.connection_manager.is_connected:
                await self.controller.stop_recording()
            self.controller.close()
            await self.connection_manager.disconnect()
        finally:
            self.events.unsubscribe_all()
        logger.info("MeasurementService cleaned up")

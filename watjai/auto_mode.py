"""Auto mode: record the three leads unattended and print the analysis."""

import asyncio
import logging
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table

from .config import WatjaiConfig
from .models.leads import LEAD_NUMBERS, lead_name
from .services.measurement_service import MeasurementService

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.25


def run_auto_mode(config: WatjaiConfig, address: Optional[str] = None) -> bool:
    """Run a full measurement without user interaction.

    This mode:
    1. Connects to ``address`` (or the last saved address)
    2. Records Lead I, II and III, each stopped automatically after 15 seconds
    3. Submits the leads for analysis
    4. Prints the verdict and the derived lead summary

    Returns:
        True if the analysis completed
    """
    console = Console()
    try:
        return asyncio.run(_run(config, address, console))
    except KeyboardInterrupt:
        console.print("\n🛑 Auto mode interrupted by user", style="yellow")
        logger.info("Auto mode interrupted by KeyboardInterrupt")
        return False


async def _run(config: WatjaiConfig, address: Optional[str], console: Console) -> bool:
    service = MeasurementService(config)
    try:
        if address:
            result = await service.connect(address)
        else:
            result = await service.auto_connect()
        if not result["success"]:
            console.print(f"❌ {result['error']}", style="bold red")
            return False
        console.print(f"✅ Connected to {result['endpoint']}", style="green")

        analysis = None
        for lead in LEAD_NUMBERS:
            if not await _record_lead(service, console, lead):
                return False
            analysis = await service.next_step()
            if not analysis["success"]:
                console.print(f"❌ {analysis['error']}", style="bold red")
                return False

        _report_results(service, analysis, console)
        return True
    finally:
        await service.cleanup()


async def _record_lead(service: MeasurementService, console: Console, lead: int) -> bool:
    result = await service.start_recording()
    if not result["success"]:
        console.print(f"❌ {result['error']}", style="bold red")
        return False

    name = lead_name(lead)
    with console.status(f"🔴 Recording Lead {name}...") as status:
        while service.session.is_recording:
            elapsed = service.session.elapsed_seconds
            samples = len(service.session.buffer.accumulator) + len(service.session.current_recording.samples)
            status.update(f"🔴 Recording Lead {name}: {elapsed}/{service.session.max_duration}s, {samples} samples")
            await asyncio.sleep(POLL_INTERVAL_SECONDS)

    samples = len(service.session.current_recording.samples)
    console.print(f"⏹️  Lead {name}: {samples} samples")
    return True


def _report_results(service: MeasurementService, analysis: Dict[str, Any], console: Console) -> None:
    verdict = analysis["result"]

    table = Table(title="ECG Analysis")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Prediction", verdict["prediction"])
    table.add_row("Confidence", f"{verdict['confidence']:.1f}%")
    table.add_row("Risk level", analysis["risk_level"])
    table.add_row("Rhythm", "Normal" if analysis["is_normal_rhythm"] else "Abnormal")
    console.print(table)

    leads = Table(title="Leads")
    leads.add_column("Lead")
    leads.add_column("Samples", justify="right")
    for recording in service.session.leads.values():
        leads.add_row(recording.name, str(len(recording.samples)))
    for name, samples in service.session.derived.as_dict().items():
        leads.add_row(name, str(len(samples)))
    console.print(leads)

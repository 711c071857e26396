"""HTTP analysis backend posting lead samples to the remote classification API."""

import logging
from typing import Dict, Optional

import aiohttp
from pydantic import ValidationError

from ..exceptions import AnalysisError
from ..models.analysis import AnalysisRequest, AnalysisVerdict
from .base import AbstractAnalysisBackend

logger = logging.getLogger(__name__)


class HttpAnalysisBackend(AbstractAnalysisBackend):
    """Sends analysis requests as JSON to a remote endpoint.

    No timeout is applied here; callers wrap ``analyze`` in their own
    timeout policy if they need one.
    """

    def __init__(self, url: str, headers: Optional[Dict[str, str]] = None):
        """Initialize HTTP analysis backend.

        Args:
            url: Full URL of the analysis endpoint
            headers: Extra request headers (e.g. authorization)
        """
        self.url = url
        self.headers = {"Content-Type": "application/json"}
        if headers:
            self.headers.update(headers)

        logger.info(f"HttpAnalysisBackend initialized with url: {url}")

    async def analyze(self, request: AnalysisRequest) -> AnalysisVerdict:
        payload = request.model_dump()
        logger.info(f"Submitting analysis: lead I={len(request.signal_lead1)} samples, "
                    f"lead II={len(request.signal_lead2 or [])}, "
                    f"lead III={len(request.signal_lead3 or [])}")

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self.url, headers=self.headers, json=payload) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise AnalysisError(
                            f"Analysis API error: {response.status} - {error_text}",
                            status=response.status)

                    try:
                        result = await response.json(content_type=None)
                    except ValueError as e:
                        raise AnalysisError(f"Invalid analysis response: {e}") from e
        except aiohttp.ClientError as e:
            raise AnalysisError(f"Analysis request failed: {e}") from e

        try:
            return AnalysisVerdict.model_validate(result)
        except ValidationError as e:
            raise AnalysisError(f"Invalid analysis response: {e}") from e

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx

from intake_client.session import FormDraftSession

logger = logging.getLogger(__name__)


class IntakeApiClient:
    """Calls the intake API on behalf of the form. One attempt per call, no retries."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        # Surfaces failures to the user (e.g. a toast); local state is never rolled back
        self.on_error = on_error

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def save_submission(
        self,
        form_data: dict[str, Any],
        current_step: int,
        completed_steps: list[int],
        total_amount: Optional[float],
        session_id: str,
    ) -> Optional[dict[str, Any]]:
        """POST the draft; returns {"id": ...} or None when the save failed."""
        payload = {
            "formData": form_data,
            "currentStep": current_step,
            "completedSteps": completed_steps,
            "totalAmount": total_amount,
            "sessionId": session_id,
        }
        try:
            async with self._client() as client:
                response = await client.post("/api/save-submission", json=payload)
            try:
                data = response.json()
            except ValueError:
                data = {}
            if not isinstance(data, dict):
                data = {}
            if response.status_code >= 400:
                message = data.get("error") or data.get("detail") or "Failed to save submission"
                logger.error("save-submission failed with %s: %s", response.status_code, message)
                if self.on_error is not None:
                    self.on_error(message)
                return None
            return {"id": data["id"]} if data.get("id") else None
        except httpx.HTTPError as e:
            logger.error("save-submission request error: %s", e)
            if self.on_error is not None:
                self.on_error(str(e))
            return None

    async def save_draft(
        self,
        draft: FormDraftSession,
        current_step: int,
        completed_steps: list[int],
        total_amount: Optional[float] = None,
    ) -> Optional[dict[str, Any]]:
        return await self.save_submission(
            draft.form_data, current_step, completed_steps, total_amount, draft.session_id
        )

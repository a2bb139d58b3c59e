"""HTTP transport for completion records."""

from __future__ import annotations

import logging
from threading import Thread
from typing import Callable

from pydantic import ValidationError
import requests

from quiz_player.constants.network_constants import (
    AUTH_HEADER,
    COMPLETION_ENDPOINT,
    REQUEST_TIMEOUT_SECONDS,
    USER_ID_HEADER,
)
from quiz_player.core.models import CompletionRecord, Credentials, SubmissionOutcome
from quiz_player.core.schemas import CompletionRequest, CompletionResponse
from quiz_player.core.services.scheduler import Scheduler

logger = logging.getLogger(__name__)


class HttpCompletionClient:
    """Posts completion records to ``/api/quiz/completion``.

    With a scheduler the request runs on a worker thread and the outcome is
    handed back on the scheduler's loop; without one it runs inline.
    """

    def __init__(
        self,
        base_url: str,
        credentials: Credentials,
        *,
        session: requests.Session | None = None,
        scheduler: Scheduler | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._url = base_url.rstrip("/") + COMPLETION_ENDPOINT
        self._credentials = credentials
        self._session = session or requests.Session()
        self._scheduler = scheduler
        self._timeout = timeout

    def submit(
        self, record: CompletionRecord, on_done: Callable[[SubmissionOutcome], None]
    ) -> None:
        if self._scheduler is None:
            on_done(self.post(record))
            return

        scheduler = self._scheduler

        def run_request() -> None:
            outcome = self.post(record)
            scheduler.call_soon_threadsafe(lambda: on_done(outcome))

        Thread(target=run_request, name="CompletionSubmit", daemon=True).start()

    def post(self, record: CompletionRecord) -> SubmissionOutcome:
        payload = CompletionRequest.from_record(record).model_dump(by_alias=True, mode="json")
        headers = {
            AUTH_HEADER: f"Bearer {self._credentials.token}",
            USER_ID_HEADER: self._credentials.user_id,
        }
        try:
            response = self._session.post(
                self._url, json=payload, headers=headers, timeout=self._timeout
            )
        except requests.RequestException as exc:
            logger.warning("Completion request to %s failed: %s", self._url, exc)
            return SubmissionOutcome(success=False, error=f"Could not reach the server: {exc}")

        if not 200 <= response.status_code < 300:
            return SubmissionOutcome(
                success=False,
                error=f"Server responded with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = CompletionResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            logger.warning("Completion accepted but response body was unreadable")
            return SubmissionOutcome(success=True, status_code=response.status_code)
        return SubmissionOutcome(
            success=True,
            unlocked_slugs=tuple(body.newly_unlocked_achievements),
            status_code=response.status_code,
        )

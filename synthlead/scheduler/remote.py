"""Trigger a cycle on a running API server instead of in-process."""
from typing import Optional
import requests
from synthlead.config import ADMIN_SECRET, API_URL, REQUEST_TIMEOUT_SECONDS
from synthlead.data.models import GenerationCycleResult
from synthlead.errors import InsufficientCorpus, PersistenceError, ProviderError
from synthlead.server.schemas import GenerateLeadResponse


class RemoteTrigger:
    """Calls ``POST /generate-lead`` and maps the response back onto cycle outcomes."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        admin_secret: Optional[str] = None,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
        dry_run: bool = False,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = (api_url or API_URL).rstrip("/")
        self.admin_secret = admin_secret or ADMIN_SECRET
        if not self.admin_secret:
            raise ValueError("ADMIN_SECRET not set")
        self.timeout = timeout
        self.dry_run = dry_run
        self.session = session or requests.Session()

    def __call__(self) -> GenerationCycleResult:
        try:
            response = self.session.post(
                f"{self.api_url}/generate-lead",
                headers={
                    "Authorization": f"Bearer {self.admin_secret}",
                    "Content-Type": "application/json",
                },
                params={"dry_run": "true"} if self.dry_run else None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ProviderError(f"Error calling generation API: {e}") from e

        if response.status_code == 401:
            raise ValueError("API rejected ADMIN_SECRET (401 Unauthorized)")

        if response.status_code == 200:
            return GenerateLeadResponse.model_validate(response.json()).result

        detail = self._detail(response)
        message = detail.get("error", f"API request failed ({response.status_code})")
        if response.status_code == 409:
            raise InsufficientCorpus(detail.get("available", 0), detail.get("required", 0))
        if response.status_code == 500 and detail.get("kind") == "persistence_error":
            raise PersistenceError(message)
        raise ProviderError(message)

    @staticmethod
    def _detail(response: requests.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {"error": response.text or "Unknown error"}
        detail = body.get("detail", body) if isinstance(body, dict) else {}
        return detail if isinstance(detail, dict) else {"error": str(detail)}

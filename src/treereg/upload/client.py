"""HTTP client for the intervention registration endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..config import UploadConfig
from .exceptions import ApiRejectionError, NetworkError


logger = logging.getLogger(__name__)


class RegistrationClient:
    """POST one registration payload per call."""

    def __init__(
        self,
        config: UploadConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self._headers = {
            "accept": "*/*",
            "authorization": f"Bearer {config.bearer_token}",
            "content-type": "application/json",
            "tenant-key": config.tenant_key,
            "x-locale": "en",
        }

    def submit(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.session.post(
                self.config.api_url,
                json=payload,
                headers=self._headers,
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(f"Network error: {exc}") from exc

        if not response.ok:
            body = _response_body(response)
            logger.debug(
                "Registration rejected",
                extra={"status_code": response.status_code, "body": body},
            )
            raise ApiRejectionError(status_code=response.status_code, body=body)

        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}


def _response_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text

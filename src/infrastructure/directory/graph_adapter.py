"""
Infrastructure adapter: Microsoft Graph (Entra ID applications) → IApplicationDirectory.

Talks to the Graph REST API directly with httpx; the bearer token comes from
an azure-identity credential (managed identity in the cloud, developer login
locally). Every non-success response or transport error is translated into a
domain error, 404 on the application lookup being ApplicationNotFoundError.
"""

import re
from datetime import datetime
from typing import Any, Optional

import httpx
from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential

from src.domain.entities.directory_credential import (
    DirectoryApplication,
    DirectoryCredential,
    PasswordCredentialRequest,
)
from src.domain.errors import ApplicationNotFoundError, DirectoryCallError
from src.domain.ports.directory_port import IApplicationDirectory

GRAPH_SCOPE = "https://graph.microsoft.com/.default"
DEFAULT_GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"

# Graph emits up to 7 fractional digits; datetime accepts at most 6.
_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_graph_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    normalised = _FRACTION.sub(r"\1", value.replace("Z", "+00:00"))
    return datetime.fromisoformat(normalised)


def _credential_from_json(payload: dict) -> DirectoryCredential:
    return DirectoryCredential(
        key_id=payload["keyId"],
        secret_text=payload.get("secretText"),
        display_name=payload.get("displayName"),
        start_date_time=parse_graph_datetime(payload.get("startDateTime")),
        end_date_time=parse_graph_datetime(payload.get("endDateTime")),
        hint=payload.get("hint"),
    )


class MicrosoftGraphDirectory(IApplicationDirectory):
    """Manages application password credentials through Microsoft Graph."""

    def __init__(
        self,
        credential: Any = None,
        base_url: str = DEFAULT_GRAPH_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Args:
            credential: azure-identity credential; DefaultAzureCredential when omitted.
            base_url:   Graph endpoint including the API version segment.
            timeout:    Per-request timeout in seconds.
            transport:  Optional httpx transport (tests use httpx.MockTransport).
        """
        self._credential = credential or DefaultAzureCredential()
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            token = self._credential.get_token(GRAPH_SCOPE).token
        except AzureError as exc:
            raise DirectoryCallError(f"Could not acquire a Graph token: {exc}") from exc
        try:
            return self._http.request(
                method,
                path,
                headers={"Authorization": f"Bearer {token}"},
                **kwargs,
            )
        except httpx.HTTPError as exc:
            raise DirectoryCallError(f"Graph {method} {path} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if response.is_success:
            return
        try:
            message = response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            message = response.text
        raise DirectoryCallError(
            f"{action} failed with HTTP {response.status_code}: {message}",
            status_code=response.status_code,
        )

    def get_application(self, application_id: str) -> DirectoryApplication:
        response = self._request(
            "GET",
            f"/applications/{application_id}",
            params={"$select": "id,appId,displayName,passwordCredentials"},
        )
        if response.status_code == 404:
            raise ApplicationNotFoundError(application_id)
        self._raise_for_status(response, f"Lookup of application {application_id}")

        body = response.json()
        return DirectoryApplication(
            object_id=body.get("id", application_id),
            display_name=body.get("displayName") or "",
            app_id=body.get("appId"),
            password_credentials=tuple(
                _credential_from_json(c) for c in body.get("passwordCredentials") or []
            ),
        )

    def add_password_credential(
        self, application_id: str, request: PasswordCredentialRequest
    ) -> DirectoryCredential:
        response = self._request(
            "POST",
            f"/applications/{application_id}/addPassword",
            json={
                "passwordCredential": {
                    "displayName": request.display_name,
                    "endDateTime": request.end_date_time.isoformat(),
                }
            },
        )
        self._raise_for_status(response, f"addPassword on {application_id}")

        credential = _credential_from_json(response.json())
        if not credential.secret_text:
            raise DirectoryCallError(
                f"addPassword on {application_id} returned credential "
                f"{credential.key_id} without secret text"
            )
        return credential

    def remove_password_credential(self, application_id: str, key_id: str) -> None:
        response = self._request(
            "POST",
            f"/applications/{application_id}/removePassword",
            json={"keyId": key_id},
        )
        self._raise_for_status(response, f"removePassword {key_id} on {application_id}")

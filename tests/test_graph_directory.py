"""Tests for MicrosoftGraphDirectory against a mocked Graph endpoint."""

import json
from datetime import datetime, timezone

import httpx
import pytest
from azure.core.credentials import AccessToken
from azure.core.exceptions import ClientAuthenticationError

from src.domain.entities.directory_credential import PasswordCredentialRequest
from src.domain.errors import ApplicationNotFoundError, DirectoryCallError
from src.infrastructure.directory.graph_adapter import (
    GRAPH_SCOPE,
    MicrosoftGraphDirectory,
    parse_graph_datetime,
)

APP_ID = "11111111-2222-3333-4444-555555555555"
KEY_A = "aaaaaaaa-0000-0000-0000-000000000001"
KEY_B = "bbbbbbbb-0000-0000-0000-000000000002"


class StaticCredential:
    def __init__(self) -> None:
        self.scopes: list[tuple] = []

    def get_token(self, *scopes, **kwargs) -> AccessToken:
        self.scopes.append(scopes)
        return AccessToken("test-token", 4102444800)


class FailingCredential:
    def get_token(self, *scopes, **kwargs) -> AccessToken:
        raise ClientAuthenticationError("no managed identity")


def _directory(handler, credential=None) -> MicrosoftGraphDirectory:
    return MicrosoftGraphDirectory(
        credential=credential or StaticCredential(),
        base_url="https://graph.test/v1.0",
        transport=httpx.MockTransport(handler),
    )


class TestGetApplication:
    def test_maps_application_and_credentials(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(
                200,
                json={
                    "id": APP_ID,
                    "appId": "client-id",
                    "displayName": "Payments API",
                    "passwordCredentials": [
                        {
                            "keyId": KEY_A,
                            "displayName": "Set via automation",
                            "startDateTime": "2026-09-18T12:00:00Z",
                            "endDateTime": "2026-10-18T12:00:00.1234567Z",
                            "hint": "abc",
                            "secretText": None,
                        }
                    ],
                },
            )

        application = _directory(handler).get_application(APP_ID)

        request = seen["request"]
        assert request.method == "GET"
        assert request.url.path == f"/v1.0/applications/{APP_ID}"
        assert "passwordCredentials" in request.url.params["$select"]
        assert request.headers["Authorization"] == "Bearer test-token"
        assert application.display_name == "Payments API"
        assert application.app_id == "client-id"
        [credential] = application.password_credentials
        assert credential.key_id == KEY_A
        assert credential.secret_text is None
        assert credential.end_date_time == datetime(
            2026, 10, 18, 12, 0, 0, 123456, tzinfo=timezone.utc
        )

    def test_404_is_application_not_found(self) -> None:
        directory = _directory(
            lambda r: httpx.Response(404, json={"error": {"message": "does not exist"}})
        )
        with pytest.raises(ApplicationNotFoundError):
            directory.get_application(APP_ID)

    def test_other_errors_are_directory_call_errors(self) -> None:
        directory = _directory(
            lambda r: httpx.Response(
                403, json={"error": {"message": "Insufficient privileges"}}
            )
        )
        with pytest.raises(DirectoryCallError, match="Insufficient privileges") as info:
            directory.get_application(APP_ID)
        assert info.value.status_code == 403

    def test_transport_error_is_directory_call_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(DirectoryCallError):
            _directory(handler).get_application(APP_ID)

    def test_token_failure_is_directory_call_error(self) -> None:
        directory = _directory(lambda r: httpx.Response(200), FailingCredential())
        with pytest.raises(DirectoryCallError, match="token"):
            directory.get_application(APP_ID)

    def test_requests_graph_scope(self) -> None:
        credential = StaticCredential()
        _directory(
            lambda r: httpx.Response(200, json={"id": APP_ID, "displayName": "x"}),
            credential,
        ).get_application(APP_ID)
        assert credential.scopes == [(GRAPH_SCOPE,)]


class TestAddPasswordCredential:
    def test_posts_request_and_returns_secret(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "keyId": KEY_B,
                    "secretText": "s3cr3t",
                    "displayName": "Set via automation",
                    "startDateTime": "2026-10-18T12:00:00Z",
                    "endDateTime": "2026-11-17T12:00:00Z",
                    "hint": "s3c",
                },
            )

        end = datetime(2026, 11, 17, 12, 0, tzinfo=timezone.utc)
        credential = _directory(handler).add_password_credential(
            APP_ID, PasswordCredentialRequest("Set via automation", end)
        )

        assert seen["path"] == f"/v1.0/applications/{APP_ID}/addPassword"
        assert seen["body"] == {
            "passwordCredential": {
                "displayName": "Set via automation",
                "endDateTime": "2026-11-17T12:00:00+00:00",
            }
        }
        assert credential.key_id == KEY_B
        assert credential.secret_text == "s3cr3t"
        assert credential.end_date_time == end

    def test_missing_secret_text_is_an_error(self) -> None:
        directory = _directory(lambda r: httpx.Response(200, json={"keyId": KEY_B}))
        request = PasswordCredentialRequest(
            "Set via automation", datetime(2026, 11, 17, tzinfo=timezone.utc)
        )
        with pytest.raises(DirectoryCallError, match="without secret text"):
            directory.add_password_credential(APP_ID, request)

    def test_server_error(self) -> None:
        directory = _directory(lambda r: httpx.Response(500, text="boom"))
        request = PasswordCredentialRequest(
            "Set via automation", datetime(2026, 11, 17, tzinfo=timezone.utc)
        )
        with pytest.raises(DirectoryCallError, match="HTTP 500"):
            directory.add_password_credential(APP_ID, request)


class TestRemovePasswordCredential:
    def test_posts_key_id(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(204)

        _directory(handler).remove_password_credential(APP_ID, KEY_A)

        assert seen["path"] == f"/v1.0/applications/{APP_ID}/removePassword"
        assert seen["body"] == {"keyId": KEY_A}

    def test_failure_raises(self) -> None:
        directory = _directory(
            lambda r: httpx.Response(400, json={"error": {"message": "No password found"}})
        )
        with pytest.raises(DirectoryCallError, match="No password found"):
            directory.remove_password_credential(APP_ID, KEY_A)


class TestParseGraphDatetime:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2026-10-18T12:00:00Z", datetime(2026, 10, 18, 12, tzinfo=timezone.utc)),
            (
                "2026-10-18T12:00:00.5Z",
                datetime(2026, 10, 18, 12, 0, 0, 500000, tzinfo=timezone.utc),
            ),
            (None, None),
        ],
    )
    def test_parses(self, value, expected) -> None:
        assert parse_graph_datetime(value) == expected

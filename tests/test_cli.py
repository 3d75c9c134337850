"""CLI tests — click commands against a mocked HTTP backend.

Learn: httpx.MockTransport stands in for the server, so these tests
check what the CLI sends and how it renders envelopes, without a
database or an event loop of their own.
"""

import json

import httpx
import pytest
from click.testing import CliRunner

from tenantauth.cli import main as cli


@pytest.fixture()
def backend(monkeypatch, tmp_path):
    """Route CLI HTTP calls to a handler; returns the list of seen requests."""
    seen: list[httpx.Request] = []
    responses: dict[tuple[str, str], httpx.Response] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return responses.get(
            (request.method, request.url.path),
            httpx.Response(404, json={"statusCode": 404, "data": None,
                                      "message": "Not Found", "success": False}),
        )

    def fake_client(api_url=None, token=None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url="http://test",
            headers=headers,
        )

    monkeypatch.setattr(cli, "_client", fake_client)
    monkeypatch.setattr(cli, "TOKEN_FILE", tmp_path / "token")
    monkeypatch.delenv("TENANTAUTH_TOKEN", raising=False)
    return seen, responses


def _ok(data, message="ok", status=200):
    return httpx.Response(status, json={
        "statusCode": status, "data": data, "message": message, "success": True,
    })


def test_register_prints_credentials(backend):
    seen, responses = backend
    responses[("POST", "/api/v1/register")] = _ok(
        {"clientID": "cid-1", "clientSecret": "s" * 64}, status=201
    )

    result = CliRunner().invoke(cli.main, [
        "register", "--company", "Acme", "--owner", "Jo", "--roll", "R1",
        "--email", "jo@acme.com", "--access-code", "1234",
    ])

    assert result.exit_code == 0, result.output
    assert "cid-1" in result.output
    assert "s" * 64 in result.output
    sent = json.loads(seen[0].content)
    assert sent == {
        "companyName": "Acme", "ownerName": "Jo", "rollNo": "R1",
        "ownerEmail": "jo@acme.com", "accessCode": "1234",
    }


def test_register_conflict_exits_nonzero(backend):
    _, responses = backend
    responses[("POST", "/api/v1/register")] = httpx.Response(409, json={
        "statusCode": 409, "data": None, "success": False,
        "message": "Company with this email already exists",
    })

    result = CliRunner().invoke(cli.main, [
        "register", "--company", "Acme", "--owner", "Jo", "--roll", "R1",
        "--email", "jo@acme.com", "--access-code", "1234",
    ])

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_login_save_then_whoami(backend):
    seen, responses = backend
    responses[("POST", "/api/v1/login")] = _ok(
        {"token_type": "Bearer", "accessToken": "tok-123", "expires_in": 900}
    )
    responses[("GET", "/api/v1/current-user")] = _ok({
        "companyName": "Acme", "ownerName": "Jo", "ownerEmail": "jo@acme.com",
        "rollNo": "R1", "clientID": "cid-1",
    })
    runner = CliRunner()

    result = runner.invoke(cli.main, [
        "login", "--company", "Acme", "--owner", "Jo", "--roll", "R1",
        "--email", "jo@acme.com", "--client-id", "cid-1",
        "--client-secret", "s" * 64, "--access-code", "1234", "--save",
    ])
    assert result.exit_code == 0, result.output
    assert cli.TOKEN_FILE.read_text() == "tok-123"

    result = runner.invoke(cli.main, ["whoami"])
    assert result.exit_code == 0, result.output
    assert "Acme" in result.output
    assert seen[-1].headers["Authorization"] == "Bearer tok-123"


def test_whoami_without_token(backend):
    result = CliRunner().invoke(cli.main, ["whoami"])
    assert result.exit_code == 1
    assert "no access token" in result.output


def test_logout_forgets_token(backend):
    seen, responses = backend
    responses[("POST", "/api/v1/logout")] = _ok({}, message="Company logged out")
    cli.TOKEN_FILE.write_text("tok-123")

    result = CliRunner().invoke(cli.main, ["logout"])

    assert result.exit_code == 0, result.output
    assert not cli.TOKEN_FILE.exists()
    assert seen[0].headers["Authorization"] == "Bearer tok-123"

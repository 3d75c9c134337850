"""tenantauth CLI — register companies and manage tokens against a running server.

Usage:
    tenantauth register --company Acme --owner Jo --roll R1 --email jo@acme.com
    tenantauth login --email jo@acme.com --client-id ... --client-secret ... --save
    tenantauth whoami                    # uses the saved token
    tenantauth logout
    tenantauth health
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"
TOKEN_FILE = Path.home() / ".tenantauth" / "token"


def _api_url(api_url: Optional[str] = None) -> str:
    return (api_url or os.environ.get("TENANTAUTH_API_URL", DEFAULT_API_URL)).rstrip("/")


def _client(api_url: Optional[str] = None, token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the tenantauth backend."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(api_url), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def _unwrap(r: httpx.Response) -> dict:
    """Return the envelope's data, or exit with its message."""
    try:
        body = r.json()
    except ValueError:
        _fail(f"HTTP {r.status_code}: {r.text[:200]}")
    if r.status_code >= 400 or not body.get("success", False):
        _fail(f"HTTP {r.status_code}: {body.get('message', 'request failed')}")
    return body.get("data") or {}


def _load_token(token: Optional[str]) -> str:
    if token:
        return token
    env_token = os.environ.get("TENANTAUTH_TOKEN")
    if env_token:
        return env_token
    if TOKEN_FILE.exists():
        return TOKEN_FILE.read_text().strip()
    _fail("no access token — run `tenantauth login --save` or pass --token")


def _save_token(token: str) -> None:
    TOKEN_FILE.parent.mkdir(parents=True, exist_ok=True)
    TOKEN_FILE.write_text(token)
    TOKEN_FILE.chmod(0o600)


def _run(coro):
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="tenantauth")
@click.option("--api-url", envvar="TENANTAUTH_API_URL", help="Backend base URL")
@click.pass_context
def main(ctx: click.Context, api_url: Optional[str]):
    """tenantauth — company registration and JWT credentials."""
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url


# ---------------------------------------------------------------------------
# tenantauth register
# ---------------------------------------------------------------------------


@main.command()
@click.option("--company", "company_name", required=True, help="Company name")
@click.option("--owner", "owner_name", required=True, help="Owner name")
@click.option("--roll", "roll_no", required=True, help="Roll / identifier number")
@click.option("--email", "owner_email", required=True, help="Owner email")
@click.option("--access-code", prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_context
def register(ctx, company_name, owner_name, roll_no, owner_email, access_code):
    """Register a company. Prints the client credentials exactly once."""
    data = _run(_post(ctx.obj["api_url"], "/api/v1/register", {
        "companyName": company_name,
        "ownerName": owner_name,
        "rollNo": roll_no,
        "ownerEmail": owner_email,
        "accessCode": access_code,
    }))
    click.secho("Company registered.", fg="green")
    click.echo(f"  clientID:     {data['clientID']}")
    click.echo(f"  clientSecret: {data['clientSecret']}")
    click.secho("Save the client secret now — it cannot be shown again.", fg="yellow")


# ---------------------------------------------------------------------------
# tenantauth login
# ---------------------------------------------------------------------------


@main.command()
@click.option("--company", "company_name", required=True)
@click.option("--owner", "owner_name", required=True)
@click.option("--roll", "roll_no", required=True)
@click.option("--email", "owner_email", required=True)
@click.option("--client-id", required=True)
@click.option("--client-secret", envvar="TENANTAUTH_CLIENT_SECRET", required=True)
@click.option("--access-code", prompt=True, hide_input=True)
@click.option("--save", is_flag=True, help=f"Store the access token in {TOKEN_FILE}")
@click.pass_context
def login(ctx, company_name, owner_name, roll_no, owner_email, client_id,
          client_secret, access_code, save):
    """Log in and print the access token."""
    data = _run(_post(ctx.obj["api_url"], "/api/v1/login", {
        "companyName": company_name,
        "ownerName": owner_name,
        "rollNo": roll_no,
        "ownerEmail": owner_email,
        "accessCode": access_code,
        "clientID": client_id,
        "clientSecret": client_secret,
    }))
    token = data["accessToken"]
    if save:
        _save_token(token)
        click.secho(f"Token saved to {TOKEN_FILE} (expires in {data['expires_in']}s)", fg="green")
    else:
        click.echo(token)


async def _post(api_url: Optional[str], path: str, body: dict) -> dict:
    async with _client(api_url) as c:
        r = await c.post(path, json=body)
    return _unwrap(r)


# ---------------------------------------------------------------------------
# tenantauth whoami / logout
# ---------------------------------------------------------------------------


@main.command()
@click.option("--token", help="Access token (defaults to the saved one)")
@click.pass_context
def whoami(ctx, token: Optional[str]):
    """Show the company behind the access token."""
    _run(_whoami_impl(ctx.obj["api_url"], _load_token(token)))


async def _whoami_impl(api_url: Optional[str], token: str):
    async with _client(api_url, token) as c:
        r = await c.get("/api/v1/current-user")
    data = _unwrap(r)
    click.secho(f"{data['companyName']}", bold=True)
    click.echo(f"  owner:    {data['ownerName']} <{data['ownerEmail']}>")
    click.echo(f"  roll:     {data['rollNo']}")
    click.echo(f"  clientID: {data['clientID']}")


@main.command()
@click.option("--token", help="Access token (defaults to the saved one)")
@click.pass_context
def logout(ctx, token: Optional[str]):
    """Invalidate the stored refresh token and forget the saved token."""
    _run(_logout_impl(ctx.obj["api_url"], _load_token(token)))
    if TOKEN_FILE.exists():
        TOKEN_FILE.unlink()
    click.secho("Logged out.", fg="green")


async def _logout_impl(api_url: Optional[str], token: str):
    async with _client(api_url, token) as c:
        r = await c.post("/api/v1/logout")
    _unwrap(r)


# ---------------------------------------------------------------------------
# tenantauth health
# ---------------------------------------------------------------------------


@main.command()
@click.pass_context
def health(ctx):
    """Check backend health."""
    _run(_health_impl(ctx.obj["api_url"]))


async def _health_impl(api_url: Optional[str]):
    async with _client(api_url) as c:
        r = await c.get("/api/v1/health")
    r.raise_for_status()
    data = r.json()
    color = "green" if data.get("status") == "healthy" else "yellow"
    click.secho(data.get("status", "unknown"), fg=color, bold=True)
    click.echo(_pretty_json(data))


if __name__ == "__main__":
    main()

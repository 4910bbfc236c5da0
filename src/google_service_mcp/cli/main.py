"""Command-line interface for google-service-mcp."""

import asyncio
import sys

import click

from google_service_mcp.__version__ import __version__


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Google Service MCP Server - Connect AI agents to Google Workspace.

    This tool provides 30 tools across:
    - Google Meet (conference records, recordings, transcripts, spaces)
    - Google Calendar (Meet meetings, events with Meet links)
    - Gmail (read, search, send, drafts, labels)
    - Google Docs (list, search, read, create, edit)
    """
    pass


@main.command()
@click.option("--force", is_flag=True, help="Re-authenticate even if a token is already saved")
def setup(force: bool) -> None:
    """Set up Google authentication.

    With a service account key nothing needs to be done. With an OAuth
    client file this will:
    1. Open browser for OAuth2 consent flow
    2. Store the refresh token at GOOGLE_TOKEN_PATH (default ./token.json)

    Requires GOOGLE_CREDENTIALS_PATH (default ./credentials.json).
    """
    from google_service_mcp.auth import CredentialKind, OAuthManager, TokenStatus
    from google_service_mcp.config import Settings
    from google_service_mcp.errors import CredentialsError

    settings = Settings.from_env()
    manager = OAuthManager(settings)

    try:
        client_secrets = manager.load_client_secrets()
    except CredentialsError as e:
        click.echo(f"❌ Error: {e}")
        sys.exit(1)

    if manager.credential_kind(client_secrets) == CredentialKind.SERVICE_ACCOUNT:
        click.echo(f"✓ Service account configured: {client_secrets.get('client_email', 'unknown')}")
        click.echo("No interactive sign-in needed.")
        return

    if manager.storage.get_status() == TokenStatus.VALID and not force:
        click.echo("✓ Already authenticated!")
        click.echo(f"Token stored at: {settings.token_path}")
        click.echo("Use --force to re-authenticate.")
        return

    click.echo("Starting OAuth authentication flow...")
    click.echo("Browser will open for Google consent...")
    click.echo("")

    try:
        asyncio.run(manager.load_credentials(interactive=True, force=force))
        click.echo("✓ Authentication successful!")
        click.echo(f"Token stored at: {settings.token_path}")
    except Exception as e:
        click.echo(f"❌ Authentication failed: {e}")
        sys.exit(1)


@main.command()
def status() -> None:
    """Show the current authentication status."""
    from google_service_mcp.auth import OAuthManager
    from google_service_mcp.config import Settings

    manager = OAuthManager(Settings.from_env())
    click.echo(manager.get_status_message())

    if not manager.has_credential_source():
        sys.exit(1)


@main.command()
def mcp() -> None:
    """Start the MCP server over stdio.

    Starts the stdio MCP server that provides 30 tools across:
    - Google Meet / Calendar (13 tools, including auth)
    - Gmail (11 tools)
    - Google Docs (6 tools)

    Credentials are loaded on the first tool call. If none are available,
    call the 'authenticate' tool or run 'google-service-mcp setup'.
    """
    from google_service_mcp.server import main as server_main

    try:
        click.echo("Starting Google Service MCP server...", err=True)
        server_main()
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)
    except Exception as e:
        click.echo(f"❌ Server error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

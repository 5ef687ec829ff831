"""Command line entrypoint: ``netpad-mcp-proxy``."""

from __future__ import annotations

import json
from typing import Optional

import typer
import uvicorn

from netpad_proxy.config import Settings, get_settings, mask_api_key, validate_configuration
from netpad_proxy.credentials import API_KEY, NETPAD_URL, PORT, create_store
from netpad_proxy.main import create_app

app = typer.Typer(help="NetPad MCP proxy server for code assistant integration")

PRODUCTION = "production"
DEVELOPMENT = "development"

MCP_CLIENT_CONFIG = {
    "mcpServers": {
        "NetPad": {
            "command": "npx",
            "args": ["-y", "netpad-mcp-proxy"],
        }
    }
}


def _settings(debug: bool = False) -> Settings:
    settings = get_settings()
    if debug:
        settings = settings.model_copy(update={"DEBUG": True, "LOG_LEVEL": "DEBUG"})
    return settings


def startup_banner(port: int, netpad_url: str, api_key: str) -> str:
    """Text printed when the proxy starts listening."""
    return "\n".join(
        [
            "NetPad MCP Proxy",
            "",
            f"Server running at http://localhost:{port}",
            f"Connected to NetPad at {netpad_url}",
            f"API Key: {mask_api_key(api_key)}",
            "",
            "To use with Cursor, add this to your MCP configuration:",
            "",
            json.dumps(MCP_CLIENT_CONFIG, indent=2),
            "",
            "Press Ctrl+C to stop the server",
        ]
    )


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to run the server on"),
    netpad_url: Optional[str] = typer.Option(
        None, "--netpad-url", "-n", help="URL of the NetPad server"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", "-k", help="NetPad API key (defaults to the stored key)"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
) -> None:
    """Start the proxy server. Options given here are saved for later runs."""

    settings = _settings(debug)
    store = create_store(settings)

    if netpad_url:
        store.set(NETPAD_URL, netpad_url)
    if api_key:
        store.set(API_KEY, api_key)
    if port:
        store.set(PORT, port)

    if not store.get(API_KEY):
        typer.secho("No API key found. Please configure an API key:", fg=typer.colors.YELLOW)
        entered = typer.prompt("NetPad API Key", default="", show_default=False)
        if not entered:
            typer.secho(
                "API key is required to start the proxy server", fg=typer.colors.RED, err=True
            )
            raise typer.Exit(code=1)
        store.set(API_KEY, entered)
        typer.secho("API key saved successfully", fg=typer.colors.GREEN)

    listen_port = int(store.get(PORT))
    typer.echo(startup_banner(listen_port, store.get(NETPAD_URL), store.get(API_KEY)))

    uvicorn.run(
        create_app(settings, store),
        host=settings.HOST,
        port=listen_port,
        log_level=settings.LOG_LEVEL.lower(),
    )


@app.command()
def configure(
    netpad_url: Optional[str] = typer.Option(
        None, "--netpad-url", "-n", help="URL of the NetPad server (skips the prompt)"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", "-k", help="NetPad API key (skips the prompt)"
    ),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="Proxy server port (skips the prompt)"
    ),
) -> None:
    """Interactively store the NetPad URL, API key and proxy port."""

    settings = get_settings()
    store = create_store(settings)

    if not netpad_url:
        current_url = str(store.get(NETPAD_URL) or "")
        environment = typer.prompt(
            f"Which environment do you want to connect to? ({PRODUCTION}/{DEVELOPMENT})",
            default=DEVELOPMENT if "localhost" in current_url else PRODUCTION,
        ).strip().lower()

        if environment == PRODUCTION:
            netpad_url = settings.PRODUCTION_NETPAD_URL
            typer.echo(
                f"Production selected. The proxy will connect to the NetPad SaaS "
                f"instance at {netpad_url}."
            )
            typer.secho(
                "Keep your API key secure. Do not share it or commit it to source control.",
                fg=typer.colors.YELLOW,
            )
        elif environment == DEVELOPMENT:
            netpad_url = typer.prompt(
                "Enter the URL of your local or custom NetPad server",
                default=current_url or settings.DEFAULT_NETPAD_URL,
            )
        else:
            typer.secho(
                f"Unknown environment '{environment}', expected {PRODUCTION} or {DEVELOPMENT}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)

    if not api_key:
        api_key = typer.prompt(
            "NetPad API Key", default=store.get(API_KEY) or "", show_default=False
        )
    if port is None:
        port = typer.prompt("Proxy Server Port", default=int(store.get(PORT)), type=int)

    if netpad_url:
        store.set(NETPAD_URL, netpad_url)
    if api_key:
        store.set(API_KEY, api_key)
    if port:
        store.set(PORT, port)

    typer.secho("Configuration saved successfully", fg=typer.colors.GREEN)


@app.command()
def reset() -> None:
    """Clear the stored configuration."""

    create_store(get_settings()).clear()
    typer.secho("Configuration reset successfully", fg=typer.colors.GREEN)


@app.command()
def show() -> None:
    """Print the stored configuration with the API key masked."""

    store = create_store(get_settings())
    values = store.as_dict()
    typer.echo(
        json.dumps({**values, API_KEY: mask_api_key(values.get(API_KEY))}, indent=2)
    )

    status = validate_configuration(values)
    for error in status["errors"]:
        typer.secho(f"Error: {error}", fg=typer.colors.RED)
    for warning in status["warnings"]:
        typer.secho(f"Warning: {warning}", fg=typer.colors.YELLOW)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

"""Typer CLI for Scriptguard."""

import typer
from rich.console import Console

app = typer.Typer(name="scriptguard", help="Scriptguard: per-device script licensing server")
console = Console()


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8080, help="Bind port"),
):
    """Start the Scriptguard API server."""
    import uvicorn
    from scriptguard.app import create_app

    console.print(f"[bold green]Starting Scriptguard on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


@app.command()
def token(
    admin_id: str = typer.Argument(..., help="Admin id to sign a session for"),
):
    """Mint an admin session token (offline, signed with the secret key)."""
    from scriptguard.common.security import create_session_token

    console.print(create_session_token(admin_id))


@app.command()
def keygen(
    prefix: str = typer.Option("SG", help="Key prefix"),
    count: int = typer.Option(1, min=1, help="Number of keys"),
):
    """Print fresh license key tokens (not stored)."""
    from scriptguard.keygen.generator import generate_license_key

    for _ in range(count):
        console.print(f"[bold]{generate_license_key(prefix)}[/bold]")


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check Scriptguard server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] — v{data['version']}")
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

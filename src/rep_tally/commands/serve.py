"""Web server command."""

import click

from ..db import get_db_path
from .base import ensure_initialized, get_data_dir


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int):
    """Start the JSON API server.

    The server keeps one live session in memory; timers tick on the server's
    event loop and every change is saved as it happens.

    Examples:

        # Start on default port (8000)
        rep-tally serve

        # Start on custom port
        rep-tally serve --port 3000
    """
    ensure_initialized(ctx)

    import uvicorn

    from ..web import create_app

    click.echo()
    click.echo(click.style("Starting rep-tally API server...", fg="green"))
    click.echo(f"  Local:   http://{host}:{port}")
    click.echo("Press Ctrl+C to stop the server.")
    click.echo()

    app = create_app(get_db_path(get_data_dir(ctx)))
    uvicorn.run(app, host=host, port=port)

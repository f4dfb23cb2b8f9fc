"""CLI entry point for devpilot."""

import logging
import socket

import click
import uvicorn

from .commands.ai import ai
from .config import ConfigStore
from .context import AppContext


def port_in_use(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError:
            return True
    return False


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), envvar="DEVPILOT_CONFIG_PATH",
              help="Path to config.json.")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx, config_path, verbose):
    """AI-assisted development tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.obj is None:
        ctx.obj = AppContext.from_config(ConfigStore.load(config_path))


main.add_command(ai)


@main.command()
@click.option("--port", default=3001, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
def demo(port: int, host: str):
    """Start the demo analysis dashboard."""
    if port_in_use(host, port):
        raise click.ClickException(f"Port {port} is already in use, stop the service using it or pick another --port")
    click.echo(f"Starting devpilot demo on http://{host}:{port}")
    click.echo(f"API available at http://{host}:{port}/api/analysis")
    uvicorn.run("devpilot.demo_server:app", host=host, port=port, reload=False)

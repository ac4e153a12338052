"""Main CLI application using Cyclopts.

``shelf serve`` runs the HTTP API; ``shelf seed`` loads initial records
into an empty store without starting the server.
"""

import asyncio
import sys
from pathlib import Path

import cyclopts
import logfire
import uvicorn

from shelf.application.di import create_container
from shelf.cli.console import get_console
from shelf.config import Config, configure_logging
from shelf.domain.shared.error import ShelfError
from shelf.infrastructure.persistence.seed import initialize_store

app = cyclopts.App(
    name="shelf",
    help="Shelf - ownership-aware catalog server",
)


@app.command
def serve(
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Run the catalog API server in the foreground.

    Args:
        host: Host to bind to. Defaults to server.host from config.
        port: Port to listen on. Defaults to server.port (or $PORT).
    """
    config = Config()
    logfire.configure(send_to_logfire="if-token-present", console=False)

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    get_console().success(f"Serving /{config.catalog.collection} on http://{bind_host}:{bind_port}")

    uvicorn.run(
        "shelf.application.api.rest.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        access_log=True,
    )


@app.command
def seed(file: Path) -> None:
    """Load records from a JSON file into the configured store if it is empty.

    Args:
        file: JSON array of records in the stored document layout.
    """
    console = get_console()
    config = Config()
    configure_logging(config.logging)

    if config.store.backend == "memory":
        console.error(
            "The memory store does not outlive this command",
            hint="Set store.seed_file so the server seeds itself at startup",
        )
        sys.exit(1)

    try:
        inserted = asyncio.run(_seed(config, file))
    except ShelfError as e:
        console.error(e.message)
        sys.exit(1)

    if inserted:
        console.success(f"Seeded {inserted} records from {file}")
    else:
        console.print("[dim]Store already holds records; nothing seeded[/dim]")


async def _seed(config: Config, file: Path) -> int:
    container = create_container(config)
    try:
        return await initialize_store(container, config, seed_file=file)
    finally:
        await container.close()


if __name__ == "__main__":
    app()

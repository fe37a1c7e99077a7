import asyncio
from pathlib import Path

import typer
from alembic import command
from alembic.config import Config

from callboard.core.config import settings

app = typer.Typer(help="Callboard RingCentral analytics dashboard.")

ALEMBIC_INI = Path(__file__).resolve().parents[1] / "alembic.ini"


@app.command()
def serve(host: str = settings.host, port: int = settings.port):
    """Run the HTTP server until SIGINT or SIGTERM."""
    from callboard.entrypoint import serve as serve_app

    asyncio.run(serve_app(host, port))


@app.command()
def migrate(revision: str = "head"):
    """Apply database migrations."""
    config = Config(str(ALEMBIC_INI))
    config.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(config, revision)
    typer.echo(f"Database upgraded to {revision}")


if __name__ == "__main__":
    app()

"""Planner extractor CLI.

Usage:
    python cli/main.py --help

Commands:
    extract   → run one extraction and print the JSON envelope
    serve     → run the HTTP service under uvicorn
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from planner_extractor.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
import logging
from typing import Optional

import typer

from planner_extractor.config import settings
from planner_extractor.extraction.orchestrator import ExtractionOrchestrator
from planner_extractor.extraction.strategies import STRATEGY_NAMES

app = typer.Typer(
    name="planner-extractor",
    help="IKEA kitchen planner item extractor.",
    no_args_is_help=True,
)


@app.command("extract")
def extract(
    planner_url: str = typer.Argument(..., help="Kitchen planner URL."),
    nonce: Optional[str] = typer.Option(None, "--nonce", help="Idempotency token (generated if omitted)."),
    strategy: Optional[str] = typer.Option(
        None, "--strategy", help=f"Parsing strategy: {' | '.join(STRATEGY_NAMES)}."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline progress to stderr."),
) -> None:
    """Extract the items of one planner and print the result envelope as JSON."""
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level)
    typer.echo(f"[extract] Extracting {planner_url!r} …", err=True)

    result = ExtractionOrchestrator(settings).extract(
        planner_url, request_nonce=nonce, strategy=strategy
    )
    typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))

    if not result.success:
        typer.echo(f"[extract] Failed: {result.error_code}: {result.error_message}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"[extract] {len(result.items)} items  hash={result.extraction_hash}", err=True)


@app.command("serve")
def serve(
    host: str = typer.Option(settings.host, help="Bind address."),
    port: int = typer.Option(settings.port, help="Bind port."),
) -> None:
    """Run the extraction HTTP service."""
    import uvicorn  # noqa: PLC0415

    uvicorn.run("planner_extractor.api.app:app", host=host, port=port)


if __name__ == "__main__":
    app()

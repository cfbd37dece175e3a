"""CLI implementation for lengthlimit."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import typer

from . import read_source, read_source_sync
from .core.drive import DEFAULT_CHUNK_SIZE
from .core.model import ReadResult
from .core.units import Unit, to_bytes
from .core.util import result_asdict
from .io import close_global_client

app = typer.Typer(add_completion=False, help="Read files and URLs under a hard byte limit.")

logger = logging.getLogger(__name__)


def iter_sources(files: list[str]) -> list[str]:
    """Get list of sources from files argument or stdin."""
    if "-" in files:
        # stdin mode
        stdin_lines = [ln.strip() for ln in sys.stdin if ln.strip()]
        if not stdin_lines:
            return []
        return stdin_lines
    elif files:
        return list(files)
    return []


def _resolve(src: str) -> str:
    parsed_url = urlparse(src)
    if parsed_url.scheme and parsed_url.netloc:  # It's a URL
        return src
    return str(Path(src).resolve())


async def _batch_read(sources: list[str], max_bytes: int, chunk_size: int) -> list[ReadResult]:
    """Asynchronously read a list of sources, one limiter each."""
    tasks = [read_source(src, max_bytes, chunk_size=chunk_size) for src in sources]
    try:
        results = await asyncio.gather(*tasks, return_exceptions=True)
    finally:
        await close_global_client()
    processed_results = []
    for src, res in zip(sources, results):
        if isinstance(res, Exception):
            processed_results.append(ReadResult(source=src, success=False, bytes_read=0,
                                                bytes_remaining=max_bytes, error=str(res)))
        else:
            processed_results.append(res)
    return processed_results


@app.command()
def main(
    files: list[str] = typer.Argument(None, help="Files or URLs to read, or '-' for stdin"),
    limit: int = typer.Option(..., "--limit", min=0, help="Exclusive byte limit, in --unit"),
    unit: str = typer.Option("b", "--unit", help="Unit of --limit: b, kb, mb or gb"),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", min=1, help="Bytes requested per read step"),
    fields: Optional[str] = typer.Option(None, "--fields", help="Comma-separated subset of keys to emit"),
    jsonl: bool = typer.Option(False, "--jsonl", help="Force JSON-lines output"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    sync: bool = typer.Option(False, "--sync", help="Force synchronous I/O"),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output to stderr"),
):
    """Read one or many local paths or URLs, failing any that reach the byte limit."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, stream=sys.stderr,
                        format="%(levelname)s %(name)s: %(message)s")

    sel_fields = set(fields.split(",")) if fields else None

    try:
        max_bytes = to_bytes(limit, Unit.parse(unit))
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)

    sources = iter_sources(files or [])

    if not sources:
        typer.echo("No input files given.", err=True)
        raise typer.Exit(code=1)

    logger.debug("reading %d source(s) with a limit of %d bytes", len(sources), max_bytes)

    results: list[ReadResult] = []
    if sync:
        for src in sources:
            try:
                res = read_source_sync(_resolve(src), max_bytes, chunk_size=chunk_size)
            except Exception as e:
                res = ReadResult(source=src, success=False, bytes_read=0,
                                 bytes_remaining=max_bytes, error=str(e))
            results.append(res)
    else:
        results = asyncio.run(_batch_read([_resolve(src) for src in sources], max_bytes, chunk_size))

    # open output sink
    sink = open(output, "w", encoding="utf-8") if output else sys.stdout
    try:
        # choose output style
        if len(sources) == 1 and not jsonl:
            json.dump(result_asdict(results[0], fields=sel_fields), sink, indent=2)
            sink.write("\n")
        else:
            for res in results:
                sink.write(json.dumps(result_asdict(res, fields=sel_fields)))
                sink.write("\n")
    finally:
        if output:
            sink.close()

    # exit code
    if any(not r.success for r in results):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()

"""
Ragraph CLI

Commands:
    ragraph add TEXT...        ingest documents
    ragraph upload FILE        ingest a UTF-8 text file
    ragraph query TEXT         answer a question (--graph for graph expansion)
    ragraph serve              run the HTTP API with uvicorn
"""

import asyncio
import json
import sys
from pathlib import Path

import click

from ragraph import __version__
from ragraph.config.environment import load_env_file
from ragraph.core.config import RagraphConfig
from ragraph.core.engine import HybridRAG
from ragraph.exceptions import RagraphError
from ragraph.logging import configure_logging


# ============================================================================
# Helper Functions
# ============================================================================

def build_engine() -> HybridRAG:
    """Engine from the current environment (.env already loaded)."""
    return HybridRAG.from_config(RagraphConfig())


async def _add(texts):
    async with build_engine() as rag:
        return await rag.add_documents(texts)


async def _upload(raw: bytes):
    async with build_engine() as rag:
        return await rag.add_single_document(raw)


async def _query(text: str, use_graph: bool):
    async with build_engine() as rag:
        return await rag.query(text, use_graph=use_graph)


def run(coro):
    """Run a coroutine; ragraph errors become exit code 1."""
    try:
        return asyncio.run(coro)
    except RagraphError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)


# ============================================================================
# CLI
# ============================================================================

@click.group()
@click.version_option(version=__version__, prog_name='ragraph')
@click.option('--env-file', type=click.Path(dir_okay=False), default=None,
              help='Path of the .env file (default: search from the current directory)')
@click.option('--log-level', default='WARNING', show_default=True, help='Minimum log level')
@click.option('--json-logs', is_flag=True, help='Emit JSON log lines')
def cli(env_file, log_level, json_logs):
    """Ragraph - hybrid vector and graph retrieval."""
    load_env_file(env_file)
    configure_logging(log_level, json_output=json_logs)


@cli.command('add')
@click.argument('texts', nargs=-1, required=True)
@click.option('--json', 'as_json', is_flag=True, help='Output the report as JSON')
def add(texts, as_json):
    """Ingest one or more documents.

    Example:
        ragraph add "FalkorDB stores graphs" "pgvector stores vectors"
    """
    report = run(_add(list(texts)))

    if as_json:
        click.echo(json.dumps({
            "added": report.added_count,
            "document_ids": report.document_ids,
            "errors": report.errors,
        }, indent=2))
    else:
        click.echo(f"Added {report.added_count}/{report.total} documents")
        for error in report.errors:
            click.echo(f"  - {error}", err=True)

    if report.all_failed:
        sys.exit(1)


@cli.command('upload')
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def upload(file):
    """Ingest a text file as a single document."""
    result = run(_upload(file.read_bytes()))
    click.echo(f"Document uploaded with id {result.document_id}")
    for error in result.errors:
        click.echo(f"  - {error}", err=True)


@cli.command('query')
@click.argument('text')
@click.option('--graph', 'use_graph', is_flag=True, help='Expand the context through the token graph')
@click.option('--show-context', is_flag=True, help='Print the retrieved context as well')
def query(text, use_graph, show_context):
    """Answer a question from the stored documents."""
    result = run(_query(text, use_graph))

    click.echo(result.response_text)
    if show_context:
        click.echo("\n--- context ---")
        click.echo(result.context)
    if result.graph_error:
        click.echo(f"Warning: {result.graph_error}", err=True)


@cli.command('serve')
@click.option('--host', default='0.0.0.0', show_default=True)
@click.option('--port', default=8080, show_default=True, type=int)
def serve(host, port):
    """Run the HTTP API."""
    import uvicorn

    from ragraph.api import create_app

    try:
        rag = build_engine()
    except (RagraphError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    uvicorn.run(create_app(rag), host=host, port=port)


if __name__ == '__main__':
    cli()

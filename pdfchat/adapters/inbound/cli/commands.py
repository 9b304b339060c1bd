"""CLI interface for pdfchat."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ....config import settings
from ....config.logging import setup_logging
from ....core.domain import RetrievalResult
from ...common.exception_handler import format_exception_json

app = typer.Typer(
    name="pdfchat",
    help="pdfchat - upload a PDF and chat with it",
    add_completion=False,
)

console = Console()


def handle_cli_error(exc: Exception) -> None:
    """Handle and display errors in CLI with structured format.

    In debug mode, shows full JSON error details.
    In normal mode, shows a user-friendly message with error code.
    """
    error_data = format_exception_json(exc, include_trace=settings.debug)

    if settings.debug:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, default=str),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
        return

    error_code = error_data["error"].get("code", "UNKNOWN")
    console.print(f"\n[red]Error [{error_code}]:[/] {error_data['error']['message']}")
    console.print(f"[dim]Type: {error_data['error']['type']}[/]")

    location = error_data.get("location", {})
    if location:
        loc_str = f"{location.get('file', '?')}:{location.get('line', '?')} in {location.get('method', '?')}"
        console.print(f"[dim]Location: {loc_str}[/]")

    console.print("[dim]Set DEBUG=true for full details[/]")


def _print_sources(sources: list[RetrievalResult]) -> None:
    if not sources:
        return
    console.print("\n[dim]Sources:[/]")
    for source in sources:
        page = f"p.{source.page}" if source.page is not None else "doc"
        preview = source.content.replace("\n", " ")
        console.print(f"  [dim]{page} ({source.score:.2f}) {preview}[/]")


def _answer(question: str) -> None:
    from ....composition.container import get_rag_service

    chunks, sources = get_rag_service().query_stream(question)
    console.print()
    for chunk in chunks:
        console.print(chunk, end="", markup=False, highlight=False)
    console.print()
    _print_sources(sources)


@app.callback()
def main() -> None:
    setup_logging(level=settings.log_level, json_format=settings.log_json)


@app.command()
def ingest(
    pdf: Path = typer.Argument(..., exists=True, dir_okay=False, help="PDF file to index"),
) -> None:
    """Index a PDF so it can be queried with 'chat' or 'ask'."""
    from ....composition.container import get_ingestion_service

    try:
        with console.status(f"[bold green]Processing {pdf.name}...[/]"):
            index = get_ingestion_service().ingest(pdf.read_bytes())
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    console.print(f"[green]Indexed {index.count()} pages from {pdf.name}[/]")
    console.print(f"[dim]Persisted to {settings.data_dir}[/]")


@app.command()
def chat() -> None:
    """Start an interactive chat session with the indexed document."""
    console.print(
        Panel.fit(
            "[bold]pdfchat[/]\n"
            "[dim]Ask questions about the last ingested PDF[/]\n\n"
            "[dim]Type 'quit' or 'exit' to leave[/]",
            title="Welcome",
            border_style="blue",
        )
    )

    while True:
        try:
            query = Prompt.ask("\n[bold cyan]You[/]")

            if query.lower() in ("quit", "exit", "q"):
                console.print("[dim]Goodbye![/]")
                break

            if not query.strip():
                continue

            _answer(query)

        except KeyboardInterrupt:
            console.print("\n[dim]Goodbye![/]")
            break
        except Exception as exc:
            handle_cli_error(exc)


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question about the indexed document"),
) -> None:
    """Ask a single question and stream the answer."""
    try:
        _answer(question)
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)


@app.command()
def status() -> None:
    """Show configuration and persisted document status."""
    from ....composition.container import get_document_store

    store = get_document_store()

    table = Table(title="pdfchat status", show_header=False)
    table.add_row("Gemini API key", "configured" if settings.gemini_api_key else "[red]missing[/]")
    table.add_row("Model", settings.gemini_model)
    table.add_row("Embedding model", settings.gemini_embedding_model)
    table.add_row("Langfuse tracing", "enabled" if settings.langfuse_enabled else "disabled")
    table.add_row("Data directory", str(settings.data_dir))

    pages = store.load_pages()
    if pages is not None:
        document = f"{len(pages)} pages"
    elif store.has_persisted_document():
        document = "legacy text only"
    else:
        document = "[yellow]none, run 'pdfchat ingest <file.pdf>'[/]"
    table.add_row("Document", document)

    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind"),
    port: int = typer.Option(8000, help="Port to listen on"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "pdfchat.adapters.inbound.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    app()

# src/html2pdf/cli.py

from __future__ import annotations

import typer
import asyncio
from pathlib import Path
from typing import List, Optional, Set
from .cancel import CancelToken
from .constants import DEFAULT_TIMEOUT_S
from .converter import HtmlToPdfConverter
from .errors import Html2PdfError
from .log import configure_logging
from .options import Option, with_logger, with_print_background
from .sync_api import convert_html_file_to_pdf
from .utils import expand_inputs, pdf_path_for, unique_path
from rich.console import Console, Group
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    Progress,
    BarColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    TaskProgressColumn,
    MofNCompleteColumn,
)


app = typer.Typer(add_completion=False)

console = Console()


def _options(print_background: bool, quiet: bool) -> List[Option]:
    opts: List[Option] = [with_print_background(print_background)]
    if quiet:
        opts.append(with_logger(None))
    return opts


@app.command(help="Convert one HTML file to PDF.")
def convert(
    input_file: Path = typer.Argument(..., help="HTML file to convert"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="PDF path (default: input with .pdf suffix)"
    ),
    timeout_s: float = typer.Option(
        DEFAULT_TIMEOUT_S,
        "--timeout",
        envvar="HTML2PDF_TIMEOUT",
        help="Conversion timeout (seconds)",
    ),
    print_background: bool = typer.Option(
        False, "--print-background", help="Print CSS background colors and images"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No diagnostic output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log the CDP trace"),
) -> None:
    configure_logging(verbose)
    target = output or pdf_path_for(input_file)
    try:
        pdf = convert_html_file_to_pdf(
            input_file, *_options(print_background, quiet), timeout=timeout_s
        )
    except Html2PdfError as exc:
        console.print(f"[red]✗[/red] {escape(str(input_file))}: {escape(str(exc))}", soft_wrap=True)
        raise typer.Exit(code=1)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(pdf)
    except OSError as exc:
        console.print(f"[red]✗[/red] {escape(str(target))}: {escape(str(exc))}", soft_wrap=True)
        raise typer.Exit(code=1)
    typer.echo(f"{target} ({len(pdf)} bytes)")


async def _worker(
    sem: asyncio.Semaphore,
    converter: HtmlToPdfConverter,
    src: Path,
    target: Path,
    opts: List[Option],
    timeout_s: float,
    event_q: asyncio.Queue,
) -> None:
    """
    Convert one file under the concurrency limit and report the outcome.
    """
    async with sem:
        try:
            pdf = await converter.convert_file(src, *opts, token=CancelToken(timeout_s))
            target.write_bytes(pdf)
        except (Html2PdfError, OSError) as exc:
            await event_q.put(("fail", src, str(exc)))
            return
    await event_q.put(("ok", src, target.name))


@app.command(help="Convert many HTML files concurrently, one browser per file.")
def run(
    inputs: List[Path] = typer.Argument(..., help="HTML files or directories"),
    out_dir: Path = typer.Option(
        Path("output"), "--out-dir", "-o", help="Output directory"
    ),
    timeout_s: float = typer.Option(
        DEFAULT_TIMEOUT_S,
        "--timeout",
        envvar="HTML2PDF_TIMEOUT",
        help="Per-file conversion timeout (seconds)",
    ),
    max_concurrency: int = typer.Option(
        4, "--max-concurrency", "-c", help="Max concurrent browsers"
    ),
    print_background: bool = typer.Option(
        False, "--print-background", help="Print CSS background colors and images"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log the CDP trace"),
) -> None:
    """
    Thin sync wrapper that runs the async pipeline.
    """
    configure_logging(verbose)
    files = expand_inputs(inputs)
    if not files:
        typer.echo("No HTML files found.", err=True)
        raise typer.Exit(code=1)
    failed = asyncio.run(
        _run_async(files, out_dir, timeout_s, max_concurrency, print_background)
    )
    if failed:
        raise typer.Exit(code=1)


async def _run_async(
    files: List[Path],
    out_dir: Path,
    timeout_s: float,
    max_concurrency: int,
    print_background: bool,
) -> int:
    """
    Main async runner. Returns the number of failed files.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    converter = HtmlToPdfConverter()
    opts = _options(print_background, quiet=False)
    sem = asyncio.Semaphore(max(1, max_concurrency))

    # pick every target name up front so concurrent workers never collide
    targets: List[Path] = []
    reserved: Set[Path] = set()
    for src in files:
        target = unique_path(pdf_path_for(src, out_dir), taken=reserved)
        reserved.add(target)
        targets.append(target)

    total = len(files)
    processed_lines: list[str] = []

    progress = Progress(
        TextColumn("[bold]Overall[/bold]"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("•"),
        MofNCompleteColumn(),
        TextColumn("converted"),
        TextColumn("•"),
        TimeElapsedColumn(),
        TextColumn(" ETA "),
        TimeRemainingColumn(),
        expand=True,
        console=console,
    )
    task_id = progress.add_task("convert", total=total)

    def _render_ui():
        # keep the panel short enough that the progress bar stays visible
        h = console.size.height
        tail_cap = max(3, h - 7)

        over = max(0, len(processed_lines) - tail_cap)
        tail = processed_lines[-tail_cap:] if processed_lines else []
        if over > 0:
            body_lines = [f"[dim]… {over} older entries hidden …[/dim]", *tail]
        else:
            body_lines = tail

        body = "\n".join(body_lines) if body_lines else "[dim]No files converted yet...[/dim]"

        return Group(
            Panel(
                body,
                title="Converted (latest at bottom)",
                border_style="green",
                padding=(0, 1),
            ),
            progress,
        )

    event_q: asyncio.Queue = asyncio.Queue()
    failed = 0

    async def ui_loop() -> None:
        nonlocal failed
        completed = 0
        with Live(_render_ui(), console=console, refresh_per_second=8, transient=False) as live:
            while completed < total:
                status, src, result = await event_q.get()
                completed += 1
                progress.update(task_id, advance=1)

                if status == "ok":
                    processed_lines.append(f"[green]✓[/green] {escape(str(src))} → {escape(result)}")
                else:
                    failed += 1
                    processed_lines.append(f"[red]✗[/red] {escape(str(src))}  [dim]{escape(result)}[/dim]")

                live.update(_render_ui())

    workers = [
        _worker(sem, converter, src, target, opts, timeout_s, event_q)
        for src, target in zip(files, targets)
    ]
    await asyncio.gather(asyncio.create_task(ui_loop()), *workers)
    return failed


@app.command(help="Install Chromium browser for Playwright (one-time).")
def install_browser() -> None:
    import subprocess
    import sys

    subprocess.check_call([sys.executable, "-m", "playwright", "install", "chromium"])
    typer.echo("Chromium installed for Playwright.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()

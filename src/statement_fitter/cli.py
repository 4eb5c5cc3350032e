"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from statement_fitter.clients.llm_client import LLMClient
from statement_fitter.config import AppConfig, load_config
from statement_fitter.fitting.controller import FitController, SlotState
from statement_fitter.fitting.density import compress as compress_text
from statement_fitter.fitting.density import normalize as normalize_text
from statement_fitter.fitting.density import visualize
from statement_fitter.fitting.measure import measure_width
from statement_fitter.fitting.optimizer import (
    FitStatus,
    optimization_suggestions,
    optimize_bullet,
    optimize_multiline,
)
from statement_fitter.fitting.segmenter import segment_into_lines
from statement_fitter.models.statement import DraftSession, StatementDraft
from statement_fitter.pipeline.character_enforcer import CharacterEnforcer
from statement_fitter.pipeline.selection_reviser import SelectionReviser
from statement_fitter.pipeline.synonyms import SynonymFinder
from statement_fitter.storage.draft_store import DraftStore
from statement_fitter.usage.cost_calculator import calculate_cost

app = typer.Typer(
    name="statement-fitter",
    help="Fit AF Form 1206 / EPB statements into character and line budgets.",
    no_args_is_help=True,
)
console = Console()

_STATE_COLORS = {
    SlotState.EMPTY: "dim",
    SlotState.DRAFTING: "yellow",
    SlotState.FITTING: "yellow",
    SlotState.READY: "green",
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _width(config: AppConfig, width: float | None) -> float:
    return width if width is not None else config.fitting.line_width_px


def _print_cost(llm: LLMClient) -> None:
    summary = llm.get_token_summary()
    if summary["calls"]:
        cost = calculate_cost(summary["calls"])
        console.print(
            f"[dim]{summary['input']} input / {summary['output']} output tokens, ~${cost:.4f}[/dim]"
        )


def _lines_table(controller: FitController) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Width (px)", justify="right")
    table.add_column("Compact")
    table.add_column("Text")
    for slot in controller.line_slots():
        if not slot.exists:
            table.add_row(str(slot.index + 1), "-", "-", "[dim](empty)[/dim]")
            continue
        seg = slot.segment
        width = f"[red]{seg.width:.1f}[/red]" if seg.exceeds_budget else f"{seg.width:.1f}"
        table.add_row(
            str(slot.index + 1),
            width,
            "yes" if seg.is_compressed else "",
            visualize(seg.text),
        )
    return table


@app.command()
def measure(text: str = typer.Argument(help="Statement text")) -> None:
    """Print the rendered width of a statement in pixels."""
    console.print(f"{measure_width(text):.2f} px, {len(text)} chars")


@app.command()
def lines(
    text: str = typer.Argument(help="Statement text"),
    width: float = typer.Option(None, "--width", "-w", help="Line width in px"),
) -> None:
    """Show how a statement wraps on the form."""
    config = load_config()
    for i, seg in enumerate(segment_into_lines(text, _width(config, width)), start=1):
        flag = " [red](too wide)[/red]" if seg.exceeds_budget else ""
        console.print(f"{i}: [{seg.start}:{seg.end}] {seg.width:.1f}px {visualize(seg.text)}{flag}")


@app.command()
def compress(text: str = typer.Argument(help="Statement text")) -> None:
    """Narrow the inter-word spaces of a statement."""
    result = compress_text(text)
    console.print(result.text, markup=False, highlight=False)
    console.print(f"[dim]{len(result.touched)} spaces narrowed[/dim]")


@app.command()
def normalize(text: str = typer.Argument(help="Statement text")) -> None:
    """Restore ordinary spaces in a statement."""
    console.print(normalize_text(text), markup=False, highlight=False)


@app.command()
def optimize(
    text: str = typer.Argument(help="Statement text"),
    single_line: bool = typer.Option(False, "--single-line", help="Fit a one-line bullet exactly"),
    width: float = typer.Option(None, "--width", "-w", help="Line width in px"),
) -> None:
    """Adjust spacing so a statement fits its lines."""
    config = load_config()
    line_width = _width(config, width)
    result = (optimize_bullet if single_line else optimize_multiline)(text, line_width)
    color = "green" if result.status == FitStatus.OPTIMIZED else "yellow"
    console.print(f"[{color}]{result.status.name}[/{color}]: {result.rendering.line_count} line(s)")
    console.print(result.text, markup=False, highlight=False)
    if single_line:
        for hint in optimization_suggestions(text, line_width):
            console.print(f"  - {hint}")


@app.command()
def check(
    text: str = typer.Argument(help="Statement text"),
    target_lines: int = typer.Option(None, "--lines", "-l", help="Target visual lines"),
    limit: int = typer.Option(None, "--limit", help="Character limit"),
    save: str = typer.Option(None, "--save", help="Save into this drafting session"),
    slot: str = typer.Option("statement:0", "--slot", help="Slot key inside the session"),
) -> None:
    """Report character and line usage against a statement's budget."""
    config = load_config()
    draft = StatementDraft(
        text=text,
        character_limit=limit or config.fitting.character_limit,
        target_lines=target_lines or config.fitting.target_lines,
    )
    controller = FitController(draft, line_width=config.fitting.line_width_px)
    report = controller.report()
    color = _STATE_COLORS[controller.state]

    console.print(_lines_table(controller))
    console.print(
        Panel(
            f"Characters: {report.used_chars}/{report.character_limit}"
            + (f" [red](+{report.over_chars})[/red]" if report.over_chars else "")
            + f" | Lines: {report.used_lines}/{report.target_lines}"
            + (f" [red](+{report.over_lines})[/red]" if report.over_lines else "")
            + f"\nState: [bold {color}]{controller.state.value}[/bold {color}]",
            title="Fit",
        )
    )

    if save:
        store = DraftStore(config.store.resolved_db_path, ttl_days=config.store.ttl_days)
        session = store.load(save) or DraftSession()
        session.slots[slot] = controller.draft
        store.save(save, session)
        console.print(f"[green]Saved {slot} to session {save}[/green]")


@app.command()
def revise(
    text: str = typer.Argument(help="Statement text"),
    start: int = typer.Option(0, "--start", help="Selection start offset"),
    end: int = typer.Option(None, "--end", help="Selection end offset (default: end of text)"),
    mode: str = typer.Option("general", "--mode", "-m", help="expand | compress | general"),
    instruction: str = typer.Option(None, "--instruction", "-i", help="Extra steering"),
    versions: int = typer.Option(None, "--versions", "-n", min=1, max=5, help="Number of candidates"),
    aggressiveness: int = typer.Option(
        None, "--aggressiveness", "-a", min=0, max=100, help="Word replacement level"
    ),
    avoid: list[str] = typer.Option(None, "--avoid", help="Verbs already used elsewhere"),
    fill: bool = typer.Option(False, "--fill", help="Fill the room left under the character limit"),
) -> None:
    """Ask the LLM for replacement candidates for a selected range."""
    if mode not in ("expand", "compress", "general"):
        console.print(f"[red]Unknown mode: {mode}[/red]")
        raise typer.Exit(1)

    config = load_config()
    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    controller = FitController(
        StatementDraft(text=text, character_limit=config.fitting.character_limit),
        reviser=SelectionReviser(llm, temperature=config.revision.temperature),
        line_width=config.fitting.line_width_px,
        model=config.llm.revision_model,
        version_count=versions or config.revision.version_count,
        aggressiveness=config.revision.aggressiveness if aggressiveness is None else aggressiveness,
        fill_to_max=fill,
        on_notice=lambda level, message: console.print(f"[yellow]{message}[/yellow]"),
    )
    controller.used_verbs = list(avoid or [])

    with console.status("Revising selection..."):
        outcome = asyncio.run(
            controller.request_revision(start, len(text) if end is None else end, mode, instruction)
        )

    if not outcome.ok:
        console.print(f"[red]{outcome.error or 'revision discarded'}[/red]")
        raise typer.Exit(1)

    for i, candidate in enumerate(outcome.candidates, start=1):
        console.print(f"[bold]{i}.[/bold] {candidate}", highlight=False)
    _print_cost(llm)


@app.command()
def synonyms(
    word: str = typer.Argument(help="Word to replace"),
    text: str = typer.Argument(help="Statement containing the word"),
) -> None:
    """Suggest context-aware synonyms for a word."""
    config = load_config()
    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    finder = SynonymFinder(llm, model=config.llm.revision_model)
    with console.status("Finding synonyms..."):
        found = asyncio.run(finder.find(word, text))
    if not found:
        console.print("[yellow]No synonyms found.[/yellow]")
        return
    console.print(", ".join(found))
    _print_cost(llm)


@app.command()
def enforce(
    text: str = typer.Argument(help="Statement text"),
    max_chars: int = typer.Option(..., "--max", help="Maximum characters"),
    min_chars: int = typer.Option(None, "--min", help="Minimum characters (default: max - 10)"),
    context: str = typer.Option(None, "--context", help="MPA or award category"),
) -> None:
    """Retry a statement through the LLM until it fits a character window."""
    config = load_config()
    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    enforcer = CharacterEnforcer(
        llm,
        model=config.llm.enforcement_model,
        max_retries=config.enforcement.max_retries,
    )
    with console.status("Adjusting length..."):
        result = asyncio.run(enforcer.enforce(text, max_chars, min_chars, context))

    v = result.final_validation
    color = "green" if v.is_compliant else "yellow"
    console.print(result.statement, markup=False, highlight=False)
    console.print(
        f"[{color}]{v.actual_length} chars ({v.target_min}-{v.target_max})[/{color}], "
        f"{result.attempts} attempt(s), stopped: {result.stop_reason}"
    )
    _print_cost(llm)


@app.command()
def drafts(
    clear: str = typer.Option(None, "--clear", help="Delete one session"),
    clear_all: bool = typer.Option(False, "--clear-all", help="Delete every session"),
) -> None:
    """List or clear saved drafting sessions."""
    config = load_config()
    store = DraftStore(config.store.resolved_db_path, ttl_days=config.store.ttl_days)

    if clear_all:
        console.print(f"[green]Deleted {store.clear_all()} session(s)[/green]")
        return
    if clear:
        store.clear(clear)
        console.print(f"[green]Deleted session {clear}[/green]")
        return

    keys = store.keys()
    if not keys:
        console.print("[yellow]No saved sessions.[/yellow]")
        return
    for key in keys:
        session = store.load(key)
        if session is None:
            continue
        console.print(f"  [bold]{key}[/bold]: {', '.join(sorted(session.slots))}")
    stats = store.stats()
    console.print(f"[dim]{stats['active']} active, {stats['expired']} expired[/dim]")


if __name__ == "__main__":
    app()

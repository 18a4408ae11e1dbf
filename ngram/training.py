"""
Training Module with Rich Terminal UI

This module provides training, prediction and interactive demo functions
with terminal progress bars and tables using the Rich library.
"""

import logging
from typing import Dict, List, Optional, Sequence
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    Progress, SpinnerColumn, TextColumn, BarColumn,
    TaskProgressColumn, TimeElapsedColumn
)
from rich.panel import Panel
from rich.table import Table
from rich import box

from .model import LanguageModel
from .smoothing import LogTransform


console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through the shared Rich console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True
    )


def create_stats_table(stats: Dict) -> Table:
    """Create a Rich table displaying model statistics."""
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="green")
    table.add_column("Value", style="yellow", justify="right")

    for key, value in stats.items():
        display_key = key.replace('_', ' ').title()

        if isinstance(value, float):
            display_value = f"{value:,.4f}"
        elif isinstance(value, int):
            display_value = f"{value:,}"
        else:
            display_value = str(value)

        table.add_row(display_key, display_value)

    return table


def create_predictions_table(context: Sequence[str], predictions: List) -> Table:
    """Create a Rich table of ranked next-word predictions."""
    table = Table(
        box=box.SIMPLE,
        title=f"After '[bold]{' '.join(context)}[/bold]'",
        header_style="bold cyan"
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Word", style="green")
    table.add_column("Score", style="yellow", justify="right")

    for i, (word, score) in enumerate(predictions, 1):
        table.add_row(str(i), word, f"{score:.4f}")

    return table


def train_model_cli(
    sequences: List[List[str]],
    n: int = 3,
    lambda_factor: Optional[float] = None,
    sequence_length: int = 15,
    log_transform: str = "log2",
    windowed: bool = False,
    source: str = "sample statements",
    save_path: Optional[str] = None
) -> LanguageModel:
    """
    Train a language model with terminal output.

    Args:
        sequences: Word sequences to train on
        n: Order of the model
        lambda_factor: Smoothing strength (default: n)
        sequence_length: Assumed sequence length for the uniform floor
        log_transform: Log-domain transform name
        windowed: Also insert the n-word windows of each sequence
        source: Description of where the sequences came from
        save_path: Path to save the trained model

    Returns:
        Trained LanguageModel
    """
    model = LanguageModel(
        ngram_order=n,
        lambda_factor=lambda_factor,
        sequence_length=sequence_length,
        log_transform=log_transform
    )

    console.print()
    console.print(Panel.fit(
        "[bold blue]N-gram Language Model Training[/bold blue]",
        border_style="blue"
    ))
    console.print()

    config_table = Table(box=box.SIMPLE, show_header=False)
    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value", style="white")
    config_table.add_row("Model Order (n)", str(n))
    config_table.add_row("Lambda Factor", f"{model.lambda_factor:g}")
    config_table.add_row("Sequence Length", str(sequence_length))
    config_table.add_row("Log Transform", model.log_transform.value)
    config_table.add_row("Windowed", "yes" if windowed else "no")
    config_table.add_row("Corpus", source)

    console.print(Panel(config_table, title="[bold]Configuration[/bold]", border_style="green"))
    console.print()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console
    ) as progress:

        train_task = progress.add_task("[cyan]Training model...", total=len(sequences))

        def update_progress(current, total):
            progress.update(train_task, completed=current)

        inserted = model.train_many(
            sequences,
            windowed=windowed,
            progress_callback=update_progress
        )

        progress.remove_task(train_task)

    console.print(f"[green]✓[/green] Trained on {len(sequences):,} statements "
                  f"({inserted:,} sequences inserted)")
    console.print()

    console.print(Panel(
        create_stats_table(model.stats()),
        title="[bold]Model Statistics[/bold]",
        border_style="yellow"
    ))

    if save_path:
        console.print()
        with console.status("[cyan]Saving model..."):
            model.save(save_path)
        console.print(f"[green]✓[/green] Model saved to: [bold]{save_path}[/bold]")

    console.print()
    return model


def show_predictions(model: LanguageModel, context: Sequence[str], top_k: int = 10) -> List:
    """
    Print the ranked continuations of a context.

    Returns:
        The (word, score) list that was printed
    """
    predictions = model.most_probable(context, top_k=top_k)

    if not predictions:
        console.print(f"[yellow]No continuations observed after[/yellow] '{' '.join(context)}'")
        return predictions

    console.print(create_predictions_table(context, predictions))

    if model.log_transform == LogTransform.LOG2:
        console.print("[dim]Scores are log2 estimates of the full sequence (higher is better).[/dim]")

    return predictions


def interactive_demo(model: LanguageModel, top_k: int = 10):
    """Run an interactive demo of the model."""
    console.print()
    console.print(Panel.fit(
        "[bold magenta]Interactive Demo[/bold magenta]\n"
        "Enter a word or phrase to see the most probable next words.\n"
        "Type 'quit' to exit.",
        border_style="magenta"
    ))
    console.print()

    while True:
        try:
            user_input = console.input("[bold cyan]Enter context:[/bold cyan] ")

            if user_input.lower() in ('quit', 'exit', 'q'):
                break

            words = user_input.split()
            if not words:
                continue

            console.print()
            show_predictions(model, words, top_k=top_k)
            console.print()

        except (KeyboardInterrupt, EOFError):
            break

    console.print("\n[yellow]Goodbye![/yellow]")

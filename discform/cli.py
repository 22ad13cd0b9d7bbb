"""CLI for the discform questionnaire and scoring engine."""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from discform import __version__
from discform.catalog.models import Catalog, ProfileSpec
from discform.catalog.registry import (
    CatalogNotFoundError,
    CatalogRegistry,
    CatalogValidationError,
    get_default_catalog,
)
from discform.config import (
    ScoringPolicy,
    get_config_path,
    get_data_dir,
    get_discform_home,
    load_policy,
)
from discform.core.models import RankRecord, Stage
from discform.core.scores import ScoreVector
from discform.io import read_jsonl
from discform.progression import (
    AssessmentFinalizer,
    AssessmentProgress,
    DuplicateFinalizationError,
    FinalizationError,
    NavigationError,
    ProgressionController,
)
from discform.ranking import RankSelector, RankValidationError
from discform.scoring import ScoringEngine, ScoringError
from discform.stores import FileStores, PersistenceError

app = typer.Typer(
    name="discform",
    help="DISC and motivational values questionnaire engine.",
    no_args_is_help=True,
)
console = Console()

TAKE_HELP = (
    "[dim]<n> toggle item  ·  m <n> <pos> move item to position  ·  "
    "c clear  ·  s submit  ·  b back  ·  q quit[/dim]"
)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"discform version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show progression and persistence logs"),
    ] = False,
) -> None:
    """discform: DISC and motivational values questionnaire engine."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@app.command()
def init(
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", "-d", help="Directory for responses and results"),
    ] = None,
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing config.yaml",
    ),
) -> None:
    """Initialize discform global configuration.

    Creates:
      ~/.config/discform/config.yaml
      ~/.config/discform/data/

    Examples:
        discform init
        discform init --data-dir /srv/discform
    """
    import yaml

    home = get_discform_home()
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print(f"[yellow]Warning:[/yellow] Config already exists at {config_path}")
        console.print("Use --force to overwrite")
        raise typer.Exit(1)

    if data_dir is None:
        data_dir = home / "data"

    console.print(f"[bold]Initializing discform at {home}[/bold]")
    home.mkdir(parents=True, exist_ok=True)
    data_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"  [green]✓[/green] Data directory {data_dir}")

    config = {
        "data_dir": str(data_dir),
        "scoring": ScoringPolicy().model_dump(),
    }
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, sort_keys=False)
    console.print(f"  [green]✓[/green] Created config at {config_path}")

    console.print("\n[green]✓ Initialized discform[/green]")


@app.command()
def catalog(
    stage: Annotated[
        Stage | None,
        typer.Option("--stage", "-s", help="Only show one stage"),
    ] = None,
    catalog_version: Annotated[
        str | None,
        typer.Option("--catalog-version", help="Catalog version (default: latest)"),
    ] = None,
) -> None:
    """Print the item groups of each stage."""
    try:
        registry = CatalogRegistry()
        loaded = registry.get(catalog_version) if catalog_version else registry.get_latest()
    except (CatalogNotFoundError, CatalogValidationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[bold]{loaded.catalog_id}[/bold] v{loaded.version} ({loaded.locale})")
    for info in loaded.stages:
        if stage is not None and info.stage != stage:
            continue
        table = Table(title=f"{info.title}\n[dim]{info.instruction}[/dim]")
        table.add_column("Group", justify="right")
        for _ in range(len(loaded.groups(info.stage)[0].items)):
            table.add_column("Item")
        for group in loaded.groups(info.stage):
            table.add_row(
                str(group.group_number),
                *(f"{item.text} [dim]({item.factor})[/dim]" for item in group.items),
            )
        console.print(table)


@app.command()
def take(
    assessment_id: Annotated[str, typer.Argument(help="Assessment to take or resume")],
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", "-d", envvar="DISCFORM_DATA_DIR", help="Data directory"),
    ] = None,
) -> None:
    """Take the questionnaire interactively, resuming where it was left off."""
    controller = _controller(data_dir)

    try:
        progress = controller.resume(assessment_id)
    except PersistenceError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    while not progress.completed:
        selector = controller.selector(progress)
        next_progress = _rank_group(controller, progress, selector)
        if next_progress is None:
            console.print(f"Paused at {progress.position}. Run take again to resume.")
            return
        progress = next_progress

    try:
        outcome = controller.finalize(progress)
    except (ScoringError, PersistenceError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if outcome is not None:
        _print_vector(outcome.vector, controller.catalog)


@app.command()
def score(
    input_path: Annotated[
        Path,
        typer.Option("--in", "-i", help="Input JSONL file of rank records"),
    ],
    assessment_id: Annotated[
        str | None,
        typer.Option("--assessment", "-a", help="Only score this assessment's records"),
    ] = None,
    output_path: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Write the score vector as JSON"),
    ] = None,
) -> None:
    """Score a file of rank records without touching any store."""
    if not input_path.exists():
        console.print(f"[red]Error:[/red] Input file not found: {input_path}")
        raise typer.Exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Scoring responses...", total=None)
        try:
            records = [RankRecord.model_validate(row) for row in read_jsonl(input_path)]
            if assessment_id is not None:
                records = [r for r in records if r.assessment_id == assessment_id]
            engine = ScoringEngine(policy=load_policy())
            vector = engine.score(records, assessment_id)
        except (ValueError, ScoringError) as e:
            # pydantic's ValidationError is a ValueError
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    _print_vector(vector, engine.catalog)
    if output_path:
        output_path.write_text(vector.model_dump_json(indent=2) + "\n", encoding="utf-8")
        console.print(f"\n[green]✓[/green] Wrote {output_path}")


@app.command()
def finalize(
    assessment_id: Annotated[str, typer.Argument(help="Assessment to finalize")],
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", "-d", envvar="DISCFORM_DATA_DIR", help="Data directory"),
    ] = None,
) -> None:
    """Score and store a completed assessment. Safe to repeat."""
    finalizer = _controller(data_dir).finalizer
    try:
        outcome = finalizer.finalize(assessment_id)
    except (ScoringError, PersistenceError, DuplicateFinalizationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not outcome.created:
        console.print(f"[yellow]Already finalized:[/yellow] {assessment_id}")
    _print_vector(outcome.vector, finalizer.engine.catalog)


@app.command()
def regenerate(
    assessment_id: Annotated[str, typer.Argument(help="Assessment to recompute")],
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", "-d", envvar="DISCFORM_DATA_DIR", help="Data directory"),
    ] = None,
) -> None:
    """Recompute an assessment's result from its responses and replace it."""
    finalizer = _controller(data_dir).finalizer
    try:
        vector = finalizer.regenerate(assessment_id)
    except (ScoringError, PersistenceError, DuplicateFinalizationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Regenerated {assessment_id}")
    _print_vector(vector, finalizer.engine.catalog)


def _controller(data_dir: Path | None) -> ProgressionController:
    try:
        stores = FileStores.open(data_dir or get_data_dir())
    except PersistenceError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    policy = load_policy()
    catalog = get_default_catalog()
    finalizer = AssessmentFinalizer(
        stores.responses,
        stores.statuses,
        stores.results,
        engine=ScoringEngine(catalog=catalog, policy=policy),
    )
    return ProgressionController(
        stores.responses,
        stores.statuses,
        finalizer,
        catalog=catalog,
        policy=policy,
    )


def _rank_group(
    controller: ProgressionController,
    progress: AssessmentProgress,
    selector: RankSelector,
) -> AssessmentProgress | None:
    """Run the prompt loop for one group.

    Returns the next session, or None when the candidate quits.
    """
    info = controller.catalog.stage_info(progress.stage)
    while True:
        _print_group(info.title, info.instruction, progress, selector)
        command = typer.prompt(">", prompt_suffix=" ").strip().lower()
        parts = command.split()
        if not parts:
            continue

        try:
            if parts[0] == "q":
                return None
            if parts[0] == "b":
                return controller.back(progress)
            if parts[0] == "c":
                selector.clear()
            elif parts[0] == "s":
                return controller.submit(progress, selector)
            elif parts[0] == "m" and len(parts) == 3:
                item = selector.items[_index(parts[1], len(selector.items))]
                evicted = selector.reorder(item, _index(parts[2], selector.max_rank))
                if evicted is not None:
                    console.print(f"[yellow]{evicted.text} unranked[/yellow]")
            else:
                selector.toggle(selector.items[_index(parts[0], len(selector.items))])
        except (RankValidationError, NavigationError) as e:
            console.print(f"[red]Error:[/red] {e}")
        except PersistenceError as e:
            console.print(f"[red]Error:[/red] {e}")
            console.print("Responses for this group were not saved; submit again.")
        except FinalizationError as e:
            console.print(f"[red]Error:[/red] {e}")
            console.print(
                f"Responses are saved. Run [bold]discform finalize {progress.assessment_id}[/bold]."
            )
            raise typer.Exit(1)


def _index(token: str, size: int) -> int:
    """Parse a 1-based number typed by the candidate."""
    if not token.isdigit() or not 1 <= int(token) <= size:
        raise RankValidationError(f"Expected a number from 1 to {size}, got {token!r}")
    return int(token) - 1


def _format_elapsed(elapsed: timedelta) -> str:
    """Format a duration as mm:ss, or h:mm:ss past the hour."""
    seconds = max(int(elapsed.total_seconds()), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def _print_group(
    title: str,
    instruction: str,
    progress: AssessmentProgress,
    selector: RankSelector,
) -> None:
    console.print(
        f"\n[bold]{title}[/bold]  Grupo {progress.current_group} de 10 "
        f"[dim]({progress.percent:.0f}%)  {_format_elapsed(progress.elapsed)}[/dim]"
    )
    console.print(f"[dim]{instruction}[/dim]")
    table = Table(show_header=True, box=None)
    table.add_column("#", justify="right")
    table.add_column("Item")
    table.add_column("Rank", justify="right")
    for number, item in enumerate(selector.items, 1):
        rank = selector.rank_of(item)
        table.add_row(
            str(number),
            f"[bold]{item.text}[/bold]" if rank else item.text,
            f"[cyan]{rank}º[/cyan]" if rank else "",
        )
    console.print(table)
    console.print(f"Ranked {len(selector.ranked)}/{selector.max_rank}  {TAKE_HELP}")


def _print_vector(vector: ScoreVector, catalog: Catalog) -> None:
    console.print(f"\n[bold]Result for {vector.assessment_id}[/bold]")
    console.print(vector.profile_description)
    _print_profile(catalog.profile_named(vector.primary_profile))

    disc = Table(title="DISC")
    disc.add_column("Factor")
    disc.add_column("Natural", justify="right")
    disc.add_column("Adapted", justify="right")
    disc.add_column("Delta", justify="right")
    for factor in ("D", "I", "S", "C"):
        disc.add_row(
            factor,
            str(vector.natural.get(factor)),
            str(vector.adapted.get(factor)),
            str(vector.tension_delta.get(factor)),
        )
    console.print(disc)
    console.print(f"Tension: {vector.total_tension} ({vector.tension_level})")

    values = Table(title="Values")
    values.add_column("Value")
    values.add_column("Score", justify="right")
    for name, points in vector.values.model_dump().items():
        values.add_row(name, str(points))
    console.print(values)
    console.print(f"Jung type: [bold]{vector.jung_type.type}[/bold]")


def _print_profile(profile: ProfileSpec | None) -> None:
    if profile is None:
        return
    console.print(f"\n[bold]{profile.name}[/bold]")
    console.print(profile.full_description)
    console.print("[green]Strengths:[/green] " + ", ".join(profile.strengths))
    console.print("[yellow]Challenges:[/yellow] " + ", ".join(profile.challenges))
    console.print(f"[cyan]Ideal environment:[/cyan] {profile.ideal_environment}")


if __name__ == "__main__":
    app()

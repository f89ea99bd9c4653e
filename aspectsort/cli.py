"""
Command-line interface for aspectsort.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress

from .config import Config
from .constants import MIN_HEIGHT, MIN_WIDTH, PROGRAM, get_console, get_logger
from .core import PipelineRunner, RunState, validate_paths
from .errors import ValidationError
from .progress import ProgressContext
from .runlog import RunLog


def setup_logging(console: Console, verbose: bool = False) -> logging.Logger:
    """Route program logs to the rich console, WARNING and above unless verbose."""
    logger = get_logger()
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        console_handler = RichHandler(console=console, rich_tracebacks=True)
        console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(console_handler)
    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.setLevel(logging.DEBUG)
    return logger


def create_parser(config: Config) -> argparse.ArgumentParser:
    """Create argument parser with dynamic defaults from config."""
    last_source = config.get_last_source()
    last_dest = config.get_last_dest()

    source_help = "Source directory containing photos to triage"
    dest_help = "Destination directory for qualifying photos"
    if last_source:
        source_help += f" (default: {last_source})"
    if last_dest:
        dest_help += f" (default: {last_dest})"

    parser = argparse.ArgumentParser(
        description=f"Copy {MIN_WIDTH}x{MIN_HEIGHT}+ photos into orientation/aspect-ratio folders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} ~/Pictures/Library ~/Pictures/Wallpapers
  {PROGRAM} --dry-run
  {PROGRAM} --source ~/Desktop/NewPhotos
        """
    )

    parser.add_argument("source", nargs="?", help=source_help)
    parser.add_argument("dest", nargs="?", help=dest_help)
    parser.add_argument(
        "--source", "-s", dest="source_override",
        help="Override source directory"
    )
    parser.add_argument(
        "--dest", "-d", dest="dest_override",
        help="Override destination directory"
    )
    parser.add_argument(
        "--yes", "-y", action="store_true",
        help="Auto-confirm processing for saved source/dest paths"
    )
    parser.add_argument(
        "--dry-run", "-n", action="store_true",
        help="Classify images without copying anything"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def show_processing_plan(source: Path, dest: Path, dry_run: bool, console: Console) -> None:
    """Display the processing plan before execution."""
    console.print("\n[bold]Processing Plan:[/bold]")
    console.print(f"  Source:          [blue]{source}[/blue]")
    console.print(f"  Destination:     [blue]{dest}[/blue]")
    console.print(f"  Processing Mode: [cyan]{'DRY RUN' if dry_run else 'COPY'}[/cyan]")
    console.print(f"  Minimum Size:    [cyan]{MIN_WIDTH}x{MIN_HEIGHT}[/cyan]")
    console.print()


def confirm_processing(console: Console) -> bool:
    """Ask for confirmation when using saved configuration."""
    console.print("[yellow]Confirm processing plan with saved configuration.[/yellow]")

    try:
        response = console.input("Continue? [y/N]: ").strip().lower()
        return response in ['y', 'yes']
    except (EOFError, KeyboardInterrupt):
        console.print("\n[red]Operation cancelled[/red]")
        return False


def main(config_path: Optional[Path] = None) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
    """
    config = Config(config_path=config_path)
    parser = create_parser(config)
    args = parser.parse_args()

    if args.version:
        from . import __version__, __copyright__
        if args.verbose:
            print(f"{PROGRAM} version {__version__} {__copyright__}")
            print(f"Config:  {config.config_path}")
            return 0
        print(__version__)
        return 0

    using_saved_config = args.source is None and args.dest is None and \
                         args.source_override is None and args.dest_override is None

    source_arg = args.source_override or args.source or config.get_last_source()
    dest_arg = args.dest_override or args.dest or config.get_last_dest()

    try:
        source, dest = validate_paths(source_arg, dest_arg)
    except ValidationError as e:
        print(f"Error: {e}")
        return 1

    config.update_paths(str(source), str(dest))

    console = get_console()
    logger = setup_logging(console, verbose=args.verbose)

    show_processing_plan(source, dest, args.dry_run, console)

    if using_saved_config and not args.yes:
        if not confirm_processing(console):
            return 0

    run_log = RunLog(dest_path=dest, root_dir=config.program_root, dry_run=args.dry_run)
    run_log.attach(logger)

    runner = PipelineRunner(dry_run=args.dry_run)
    try:
        with Progress(console=console) as progress:
            task = progress.add_task("Discovering images...", total=None)
            runner.feed.subscribe(ProgressContext(progress, task))
            runner.start(source, dest)
            try:
                outcome = runner.wait()
            except KeyboardInterrupt:
                runner.cancel()
                outcome = runner.wait()
    finally:
        run_log.detach(logger)

    if outcome is None or outcome.state is RunState.FAILED:
        message = outcome.summary if outcome else "Run did not finish"
        console.print(f"\n[red]Fatal error: {message}[/red]")
        return 1

    runner.print_summary()

    if outcome.cancelled:
        console.print(f"\n[red]{outcome.summary}[/red]")
        return 1

    errors = runner.stats_manager.get_errors()
    if errors:
        console.print(f"\n[green]✓ {outcome.summary}[/green] [yellow]({errors} files had errors)[/yellow]")
    else:
        console.print(f"\n[green]✓ {outcome.summary}[/green]")
    if not args.dry_run:
        console.print(f"Log written to {run_log.log_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Main CLI interface for gemfile-parser."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from ..core.config import ParserConfig
from ..core.parsers import DependencyParser, GemfileParser, GemspecParser, ParsedManifest, ParseMode, ParserRegistry
from ..output.formatters import ConsoleFormatter, JSONFormatter
from ..utils.logging import get_logger, setup_logging
from ..utils.path_utils import find_manifest_files, resolve_gemspec_files

app = typer.Typer(
    name="gemfile-parser",
    help="Extract dependencies from Gemfiles and gemspecs without running Ruby",
    add_completion=False
)

console = Console()
logger = get_logger("CLI")

OUTPUT_FORMATS = ("table", "json")


@app.command()
def scan(
    path: Path = typer.Argument(
        Path("."),
        help="Project directory (or single manifest) to scan"
    ),
    output_format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format: 'table' or 'json'"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write JSON results to this file"
    ),
    runtime_group: Optional[List[str]] = typer.Option(
        None,
        "--runtime-group",
        "-g",
        help="Extra group to classify as runtime (repeatable)"
    ),
    include_gemspec: bool = typer.Option(
        True,
        "--include-gemspec/--no-include-gemspec",
        help="Also parse gemspecs referenced by 'gemspec' declarations"
    ),
    ignore_patterns: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        help="Additional ignore patterns"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    )
) -> None:
    """Find and parse every Gemfile and gemspec under PATH."""
    setup_logging(verbose=verbose)
    _check_format(output_format)

    if not path.exists():
        console.print(f"[red]Error: Path does not exist: {path}[/red]")
        raise typer.Exit(1)

    try:
        config = ParserConfig.from_options(runtime_group, include_gemspec, ignore_patterns)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    show_status = output_format == "table"
    manifest_files = find_manifest_files(path, config.ignore_patterns)

    if not manifest_files:
        if show_status:
            console.print("[yellow]No Gemfile or gemspec found[/yellow]")
        _emit([], output_format, output)
        return

    if show_status:
        console.print(f"Found {len(manifest_files)} manifest files")

    registry = build_registry(config)
    manifests = parse_manifests(
        [manifest.path for manifest in manifest_files],
        registry,
        include_gemspec=config.include_gemspec,
        show_status=show_status
    )

    _emit(manifests, output_format, output)


@app.command()
def parse(
    file: Path = typer.Argument(..., help="Gemfile or gemspec to parse"),
    mode: Optional[str] = typer.Option(
        None,
        "--mode",
        "-m",
        help="Parse mode: 'gemfile' or 'gemspec' (inferred from the file name by default)"
    ),
    output_format: str = typer.Option("table", "--format", "-f", help="Output format: 'table' or 'json'"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON results to this file"),
    runtime_group: Optional[List[str]] = typer.Option(
        None,
        "--runtime-group",
        "-g",
        help="Extra group to classify as runtime (repeatable)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")
) -> None:
    """Parse a single manifest file."""
    setup_logging(verbose=verbose)
    _check_format(output_format)

    try:
        config = ParserConfig.from_options(runtime_group)
        if mode is None:
            parse_mode = ParseMode.GEMSPEC if file.suffix == ".gemspec" else ParseMode.GEMFILE
        else:
            parse_mode = ParseMode.coerce(mode)

        parser_class = GemspecParser if parse_mode is ParseMode.GEMSPEC else GemfileParser
        manifest = parser_class(config.runtime_groups).parse(file)
    except (OSError, ValueError) as e:
        logger.error(f"Parse failed: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    _emit([manifest], output_format, output)


@app.command()
def info() -> None:
    """Show supported manifest types."""
    console.print("[bold cyan]gemfile-parser[/bold cyan]")
    console.print(f"[bold]Supported Parsers:[/bold] {', '.join(DependencyParser.get_supported_parser_types())}")
    console.print(f"[bold]File Patterns:[/bold] {', '.join(DependencyParser.get_file_patterns())}")
    console.print(f"[bold]Runtime Groups:[/bold] {', '.join(ParserConfig().runtime_groups)}")


def build_registry(config: ParserConfig) -> ParserRegistry:
    """Build a parser registry bound to a configuration's runtime groups.

    Args:
        config: Parser configuration

    Returns:
        Registry with Gemfile and gemspec parsers
    """
    registry = ParserRegistry()
    registry.register("gemfile", GemfileParser(config.runtime_groups))
    registry.register("gemspec", GemspecParser(config.runtime_groups))
    return registry


def parse_manifests(
    paths: List[Path],
    registry: ParserRegistry,
    include_gemspec: bool = True,
    show_status: bool = True
) -> List[ParsedManifest]:
    """Parse manifest files, following ``gemspec`` declarations.

    Args:
        paths: Manifest files to parse
        registry: Parser registry to use
        include_gemspec: Parse gemspecs referenced from Gemfiles
        show_status: Print one status line per file

    Returns:
        Parsed manifests in the order they were parsed
    """
    manifests: List[ParsedManifest] = []
    seen = set()
    queue = list(paths)

    while queue:
        file_path = queue.pop(0)
        key = file_path.resolve()
        if key in seen:
            continue
        seen.add(key)

        try:
            parsed = registry.parse_file(file_path)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to parse {file_path}: {e}")
            if show_status:
                console.print(f"  ✗ {file_path}: {e}")
            continue

        if parsed is None:
            continue

        manifests.append(parsed)
        if show_status:
            console.print(f"  ✓ {file_path} ({len(parsed.dependencies)} dependencies)")

        if include_gemspec and parsed.gemspec_path and parsed.mode is ParseMode.GEMFILE:
            queue.extend(resolve_gemspec_files(file_path, parsed.gemspec_path))

    return manifests


def _check_format(output_format: str) -> None:
    if output_format not in OUTPUT_FORMATS:
        console.print(f"[red]Error: Unknown format '{output_format}' (expected one of: {', '.join(OUTPUT_FORMATS)})[/red]")
        raise typer.Exit(1)


def _emit(manifests: List[ParsedManifest], output_format: str, output: Optional[Path]) -> None:
    json_formatter = JSONFormatter(output)

    if output_format == "json":
        results = json_formatter.format_results(manifests)
        if output:
            json_formatter.save_results(results)
        else:
            typer.echo(json_formatter.dumps(results))
        return

    ConsoleFormatter(console).format_results(manifests)
    if output:
        json_formatter.save_results(json_formatter.format_results(manifests))
        console.print(f"Results saved to {output}")


def main() -> None:
    """Main entry point for the gemfile-parser CLI."""
    app()


if __name__ == "__main__":
    main()

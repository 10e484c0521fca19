"""Output formatters for parsed manifests."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.parsers.base import DependencyType, ParsedManifest
from ..utils.logging import get_logger


class ConsoleFormatter:
    """Rich console formatter for parse results."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the console formatter.

        Args:
            console: Rich console instance
        """
        self.console = console or Console()
        self.logger = get_logger("ConsoleFormatter")

    def format_results(self, manifests: List[ParsedManifest]) -> None:
        """Display a summary panel and one dependency table per manifest.

        Args:
            manifests: Parsed manifests to display
        """
        self.console.print(self._create_summary_panel(manifests))

        for manifest in manifests:
            if manifest.dependencies:
                self.console.print(self._create_dependencies_table(manifest))
            else:
                self.console.print(Panel(
                    f"No dependencies declared in {_label(manifest)}",
                    style="yellow"
                ))

            for warning in manifest.warnings:
                self.console.print(f"[yellow]warning:[/yellow] {_label(manifest)}: {warning}")

    def _create_summary_panel(self, manifests: List[ParsedManifest]) -> Panel:
        total = sum(len(m.dependencies) for m in manifests)
        runtime = sum(len(m.runtime_dependencies()) for m in manifests)
        gemspecs = [m.gemspec_path for m in manifests if m.gemspec_path]

        content = (
            f"Manifests parsed: {len(manifests)}\n"
            f"Dependencies: {total} ({runtime} runtime, {total - runtime} development)"
        )
        if gemspecs:
            content += f"\nGemspec patterns: {', '.join(gemspecs)}"

        return Panel(content, title="Parse Summary", style="cyan")

    def _create_dependencies_table(self, manifest: ParsedManifest) -> Table:
        """Create the dependency table for one manifest.

        Args:
            manifest: Parsed manifest

        Returns:
            Rich table with one row per dependency
        """
        table = Table(title=_label(manifest))

        table.add_column("Line", style="dim", justify="right")
        table.add_column("Gem", style="cyan", no_wrap=True)
        table.add_column("Requirement", style="blue")
        table.add_column("Type")
        table.add_column("Groups", style="magenta")

        for dep in manifest.dependencies:
            type_style = "green" if dep.type is DependencyType.RUNTIME else "yellow"
            table.add_row(
                str(dep.line),
                dep.name,
                str(dep.requirement),
                Text(dep.type.value, style=type_style),
                ", ".join(dep.groups)
            )

        return table

    def format_error(self, error: str, details: Optional[str] = None) -> None:
        """Format and display an error message.

        Args:
            error: Error message
            details: Optional error details
        """
        message = f"{error}\n\n{details}" if details else error
        self.console.print(Panel(message, title="Error", style="red"))

    def format_info(self, message: str, title: Optional[str] = None) -> None:
        self.console.print(Panel(message, title=title, style="blue"))


class JSONFormatter:
    """JSON formatter for parse results."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")

    def format_manifest(self, manifest: ParsedManifest) -> Dict[str, Any]:
        return {
            "source_file": str(manifest.source_file) if manifest.source_file else None,
            "mode": manifest.mode.value,
            "is_gemspec": manifest.is_gemspec,
            "gemspec_path": manifest.gemspec_path,
            "dependencies": [dep.to_dict() for dep in manifest.dependencies],
            "warnings": list(manifest.warnings),
        }

    def format_results(
        self,
        manifests: List[ParsedManifest],
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Format parse results as JSON-ready data.

        Args:
            manifests: Parsed manifests
            metadata: Optional additional metadata

        Returns:
            Formatted JSON data
        """
        total = sum(len(m.dependencies) for m in manifests)
        runtime = sum(len(m.runtime_dependencies()) for m in manifests)

        result = {
            "summary": {
                "manifests": len(manifests),
                "total_dependencies": total,
                "runtime_dependencies": runtime,
                "development_dependencies": total - runtime,
                "timestamp": datetime.now().isoformat()
            },
            "manifests": [self.format_manifest(m) for m in manifests]
        }

        if metadata:
            result["metadata"] = metadata

        return result

    def dumps(self, results: Dict[str, Any]) -> str:
        return json.dumps(results, indent=2, ensure_ascii=False)

    def save_results(
        self,
        results: Dict[str, Any],
        output_file: Optional[Path] = None
    ) -> None:
        """Save results to JSON file.

        Args:
            results: Results dictionary
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(self.dumps(results))

            self.logger.info(f"Results saved to {file_path}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise


def _label(manifest: ParsedManifest) -> str:
    if manifest.source_file:
        return str(manifest.source_file)
    return f"<{manifest.mode.value}>"

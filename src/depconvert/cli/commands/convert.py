"""
Import Command - Convert legacy Go dependency metadata.

Detects which legacy tool (glide, godep, vndr) manages a project, converts
its metadata, and prints the resulting manifest and lock.

Usage:
    depconvert import . --root github.com/me/project
    depconvert import . --root github.com/me/project --json
    depconvert import . --root github.com/me/project --importer godep -v
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ...core.converter import ConversionResult, StructuralError
from ...core.source import GitSourceProvider
from ...core.types import LockedProject
from ...importers import IMPORTER_TYPES, ImporterLoadError, create_importers, find_importer

console = Console()


@click.command("import")
@click.argument(
    "project_dir",
    type=click.Path(exists=True, file_okay=False),
    default=".",
)
@click.option(
    "--root",
    "project_root",
    required=True,
    help="Import path of the project being converted",
)
@click.option(
    "--importer",
    "importer_name",
    type=click.Choice(list(IMPORTER_TYPES)),
    help="Use only this importer instead of auto-detecting",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the manifest and lock as JSON",
)
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output")
def import_command(
    project_dir: str,
    project_root: str,
    importer_name: str | None,
    as_json: bool,
    verbose: bool,
):
    """
    Convert legacy dependency metadata into a manifest and lock.

    Looks for glide.yaml, Godeps/Godeps.json and vendor.conf (in that order)
    and converts the first one found. Versions are resolved against the
    remote repositories with `git ls-remote`.

    \b
    Examples:
        depconvert import . --root github.com/me/project
        depconvert import ./svc --root github.com/me/svc --json
    """
    # Warnings reach the user through the rendered result unless verbose
    logging.basicConfig(
        level=logging.INFO if verbose else logging.ERROR,
        format="%(message)s",
    )

    project_path = Path(project_dir).resolve()
    provider = GitSourceProvider()
    names = [importer_name] if importer_name else None
    importers = create_importers(provider, verbose=verbose, names=names)

    importer = find_importer(project_path, importers)
    if importer is None:
        console.print(f"[red]Error:[/red] No legacy dependency metadata found in {project_path}")
        console.print("Looked for: " + ", ".join(str(i.config_file) for i in importers))
        sys.exit(1)

    if not as_json:
        console.print(f"[bold]📦 Importing {importer.name} configuration...[/bold]\n")

    try:
        result = importer.run(project_path, project_root)
    except (ImporterLoadError, StructuralError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if as_json:
        payload = {
            "importer": importer.name,
            "manifest": result.manifest.to_dict(),
            "lock": result.lock.to_dict(),
            "warnings": result.warnings,
        }
        click.echo(json.dumps(payload, indent=2))
        return

    _print_result(result, show_warnings=not verbose)


def _describe_version(project: LockedProject) -> str:
    data = project.to_dict()
    if "branch" in data:
        return f"branch {data['branch']}"
    return data.get("version", "-")


def _print_result(result: ConversionResult, show_warnings: bool = True) -> None:
    """Print the converted manifest and lock."""
    if result.lock.projects:
        table = Table(title="Converted Dependencies")
        table.add_column("Project", style="cyan")
        table.add_column("Constraint", style="green")
        table.add_column("Locked Version")
        table.add_column("Revision", style="dim")
        table.add_column("Source", style="dim")

        for project in result.lock.projects:
            revision = project.revision
            table.add_row(
                project.root,
                result.manifest.constraints.get(project.root, "-"),
                _describe_version(project),
                revision[:8] if revision else "-",
                project.source or "-",
            )
        console.print(table)
    else:
        console.print("[yellow]No dependencies converted[/yellow]")

    if result.manifest.ignored:
        console.print("\n[bold]Ignored packages:[/bold]")
        for path in result.manifest.ignored:
            console.print(f"  [dim]⏭️  {path}[/dim]")

    if show_warnings and result.warnings:
        console.print()
        for warning in result.warnings:
            console.print(f"[yellow]⚠ {warning}[/yellow]")

    console.print(
        f"\n[green]✓ Converted {len(result.lock.projects)} project(s)[/green]"
        + (f", [yellow]skipped {len(result.skipped)}[/yellow]" if result.skipped else "")
    )

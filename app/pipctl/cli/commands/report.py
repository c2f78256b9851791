"""Report command implementation.

Compares installed package versions with the latest releases without
changing anything.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from pipctl.cli.types import OutputFormat, load_app_config
from pipctl.core.executor import get_store
from pipctl.core.report import StatusReporter
from pipctl.utils.formatting import (
    console,
    create_comparison_table,
    format_comparison_row,
    print_error,
    print_info,
    print_success,
)


def report_packages(
    names: Annotated[
        list[str] | None,
        typer.Argument(
            help="Package names to report on (default: all installed).",
            show_default=False,
        ),
    ] = None,
    all_packages: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Report on every installed package.",
        ),
    ] = False,
    outdated_only: Annotated[
        bool,
        typer.Option(
            "--outdated",
            "-o",
            help="Only show packages that are not up to date.",
        ),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the config file.",
        ),
    ] = None,
) -> None:
    """Report installed and latest versions of packages.

    Never installs or removes anything.

    Examples:
        pipctl report                       # Every installed package
        pipctl report requests httpx        # Two packages
        pipctl report --outdated            # Only packages with updates
        pipctl report --format json         # Output as JSON
    """
    config = load_app_config(config_path)
    store = get_store(config, config_path)

    if not store.is_available():
        print_error(f"Python interpreter not found: {config.python}")
        raise typer.Exit(code=1)

    requested = [] if all_packages or not names else list(dict.fromkeys(names))
    reporter = StatusReporter(store, query_workers=config.query_workers)

    try:
        records = reporter.report(requested)
    except RuntimeError as e:
        print_error(f"Scan failed: {e}")
        raise typer.Exit(code=1) from e
    finally:
        store.close()

    if outdated_only:
        records = [r for r in records if not r.up_to_date]

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([r.to_dict() for r in records]))
        return

    if not records:
        if outdated_only:
            print_success("All packages are up to date.")
        else:
            print_info("No packages found.")
        return

    table = create_comparison_table()
    for record in records:
        table.add_row(*format_comparison_row(record))
    console.print(table)

    outdated = sum(1 for r in records if r.latest is not None and not r.up_to_date)
    unknown = sum(1 for r in records if r.latest is None)
    duplicates = sum(1 for r in records if r.count > 1)
    console.print(
        f"\n[dim]{len(records)} package(s): {outdated} outdated, "
        f"{unknown} unknown to {config.index.name}, {duplicates} with duplicate installs[/]"
    )

"""Reconcile command implementation.

Installs, upgrades and removes package copies so that every requested
package ends up at its latest release.
"""

import json
import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer

from pipctl.cli.display import (
    create_results_table,
    exit_code_for,
    print_results_summary,
)
from pipctl.cli.types import OutputFormat, get_confirm, load_app_config
from pipctl.core.errors import UntrustedSourceError
from pipctl.core.executor import get_store, record_results_to_history
from pipctl.core.reconciler import ReconcileOptions, Reconciler
from pipctl.core.report import StatusReporter
from pipctl.models.package import InstallScope
from pipctl.utils.formatting import console, print_error, print_info, print_warning


@contextmanager
def _cancel_on_interrupt() -> Iterator[threading.Event]:
    """Turn the first Ctrl-C into a cancellation request.

    The package being processed is finished; the remaining ones are
    skipped. A second Ctrl-C interrupts immediately.
    """
    cancel = threading.Event()

    def _handler(signum: int, frame: object) -> None:
        if cancel.is_set():
            raise KeyboardInterrupt
        cancel.set()
        print_warning("Cancelling after the current package (press Ctrl-C again to abort).")

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield cancel
    finally:
        signal.signal(signal.SIGINT, previous)


def reconcile_packages(
    ctx: typer.Context,
    names: Annotated[
        list[str] | None,
        typer.Argument(
            help="Package names to reconcile.",
            show_default=False,
        ),
    ] = None,
    all_packages: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Reconcile every installed package.",
        ),
    ] = False,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Reinstall the latest version even if it is already installed.",
        ),
    ] = False,
    allow_import: Annotated[
        bool,
        typer.Option(
            "--import",
            "-i",
            help="Import each package after it is installed.",
        ),
    ] = False,
    scope: Annotated[
        InstallScope | None,
        typer.Option(
            "--scope",
            "-s",
            help="Install scope: user or all-users (default from config).",
            case_sensitive=False,
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompts and proceed.",
        ),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    no_history: Annotated[
        bool,
        typer.Option(
            "--no-history",
            help="Do not record this run in the history file.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the config file.",
        ),
    ] = None,
) -> None:
    """Reconcile installed packages with their latest releases.

    For each package:
      - not installed: install the latest version
      - one copy at the latest version: nothing to do
      - one older copy: upgrade it (or reinstall if pip cannot upgrade it)
      - several copies: keep the latest one and remove the others
      - installed in the other scope: move it to the requested scope

    Examples:
        pipctl reconcile requests rich      # Reconcile two packages
        pipctl reconcile --all --yes        # Everything, without prompts
        pipctl reconcile httpx --force      # Reinstall the latest httpx
        pipctl reconcile black -s all-users # Install machine-wide
    """
    config = load_app_config(config_path)
    store = get_store(config, config_path)

    if not store.is_available():
        print_error(f"Python interpreter not found: {config.python}")
        raise typer.Exit(code=1)

    if all_packages:
        try:
            package_names = StatusReporter(store).resolve_names(())
        except RuntimeError as e:
            print_error(f"Scan failed: {e}")
            raise typer.Exit(code=1) from e
    elif names:
        package_names = list(dict.fromkeys(names))
    else:
        print_error("Specify package names or use --all.")
        raise typer.Exit(code=1)

    if not package_names:
        print_info("No packages to reconcile.")
        return

    options = ReconcileOptions(
        force=force,
        allow_import=allow_import,
        scope=scope or config.default_scope,
    )
    reconciler = Reconciler(
        store,
        confirm=get_confirm(yes),
        query_workers=config.query_workers,
    )

    try:
        with _cancel_on_interrupt() as cancel:
            results = reconciler.reconcile(package_names, options, cancel=cancel)
    except UntrustedSourceError as e:
        print_error(str(e))
        print_info("Run 'pipctl config trust' or pass --yes to trust the package index.")
        raise typer.Exit(code=1) from e
    finally:
        store.close()

    if config.record_history and not no_history:
        record_results_to_history(results, force=force)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([r.to_dict() for r in results]))
    else:
        quiet = bool(ctx.obj and ctx.obj.get("quiet"))
        if not quiet:
            console.print(create_results_table(results))
        print_results_summary(results)

    code = exit_code_for(results)
    if code:
        raise typer.Exit(code=code)

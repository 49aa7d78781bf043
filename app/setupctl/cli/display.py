"""Shared Rich display functions for outcomes and reports.

Provides table builders and summary printers used by the ``run`` and
``status`` commands.
"""

from rich.markup import escape
from rich.table import Table

from setupctl.models.manifest import ManifestItem, ManifestKind
from setupctl.models.outcome import InstallOutcome, OutcomeStatus
from setupctl.models.report import KindSummary, RunReport
from setupctl.utils.formatting import console, print_info, print_success

# Display label and style per outcome status
STATUS_STYLES: dict[OutcomeStatus, tuple[str, str]] = {
    OutcomeStatus.INSTALLED: ("installed", "installed"),
    OutcomeStatus.ALREADY_PRESENT: ("present", "present"),
    OutcomeStatus.INSTALL_FAILED: ("install failed", "failed"),
    OutcomeStatus.VERIFY_FAILED: ("verify failed", "failed"),
    OutcomeStatus.SKIPPED: ("skipped", "skipped"),
}


def format_status(status: OutcomeStatus) -> str:
    """Format an outcome status with color markup."""
    label, style = STATUS_STYLES[status]
    return f"[{style}]{label}[/{style}]"


def create_summary_table(summaries: tuple[KindSummary, ...]) -> Table:
    """Create a table of outcome counts per manifest kind.

    Args:
        summaries: Per-kind summaries in processing order.

    Returns:
        Rich Table with one row per kind.
    """
    table = Table(
        title="Summary",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Kind", no_wrap=True)
    table.add_column("Installed", justify="right")
    table.add_column("Present", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Skipped", justify="right")

    for summary in summaries:
        failed = f"[failed]{summary.failed}[/failed]" if summary.failed else "0"
        table.add_row(
            summary.kind.label,
            f"[installed]{summary.installed}[/installed]",
            f"[present]{summary.already_present}[/present]",
            failed,
            f"[skipped]{summary.skipped}[/skipped]",
        )

    return table


def create_failures_table(failures: list[InstallOutcome]) -> Table:
    """Create a table listing every failed item with its failure class.

    Args:
        failures: Outcomes in a terminal-failure state.

    Returns:
        Rich Table with one row per failure.
    """
    table = Table(
        title="Failed Items",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Kind", width=11)
    table.add_column("Identifier", no_wrap=True)
    table.add_column("Failure", width=14)
    table.add_column("Message")

    for outcome in failures:
        table.add_row(
            outcome.kind.value,
            escape(outcome.identifier),
            format_status(outcome.status),
            f"[muted]{escape(outcome.message or '')}[/muted]",
        )

    return table


def create_status_table(
    kind: ManifestKind,
    items: list[ManifestItem],
    installed: dict[str, bool] | None,
) -> Table:
    """Create a table showing the presence of each manifest item.

    Args:
        kind: Manifest kind of the items.
        items: Items in manifest order.
        installed: Presence per identifier, or None if the installer is unavailable.

    Returns:
        Rich Table with one row per item.
    """
    table = Table(
        title=kind.label,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Identifier", no_wrap=True)
    table.add_column("Comment", style="muted")

    for item in items:
        if installed is None:
            icon = "[skipped]?[/skipped]"
        elif installed.get(item.identifier):
            icon = "[present]●[/present]"
        else:
            icon = "[warning]○[/warning]"
        table.add_row(icon, escape(item.identifier), escape(item.comment or ""))

    return table


def print_report(report: RunReport) -> None:
    """Print the final human-readable run report.

    Args:
        report: Completed run report.
    """
    console.print()
    console.print(create_summary_table(report.summaries))

    failures = report.failures
    if failures:
        console.print(create_failures_table(failures))
        console.print(
            f"\n[error]{len(failures)} item(s) failed.[/error] "
            "Re-running setupctl is safe: installed items are skipped."
        )
    else:
        print_success(f"All {len(report.outcomes)} item(s) handled successfully.")

    console.print(f"[muted]Duration: {report.duration_seconds:.1f}s[/muted]")
    if report.log_path:
        console.print(f"[muted]Log: {report.log_path}[/muted]")
    if report.backup_dir:
        console.print(f"[muted]Backup: {report.backup_dir}[/muted]")


def print_next_steps() -> None:
    """Print follow-up steps that cannot be automated."""
    print_info("\nNext steps:")
    console.print("  1. Open a new terminal session or run 'source ~/.zshrc'.")
    console.print("  2. Install any apps not available on Homebrew manually.")
    console.print("  3. Sign in to VS Code Settings Sync if you use it.")

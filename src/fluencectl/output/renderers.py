"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from fluencectl.output.console import render_to_string

if TYPE_CHECKING:
    from rich.console import Console

    from fluencectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
    else:
        renderer = _render_error
    return render_to_string(lambda console: renderer(result, console, verbose=verbose))


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    deals = result.data.get("deals")
    if result.op == "deal_deploy" and isinstance(deals, list):
        return "\n".join(str(d.get("deal_address", "")) for d in deals)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="fl.ok"), Text(f"  {result.op}", style="fl.op"), sep="")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    styles = {
        "path": "fl.path",
        "project_path": "fl.path",
        "name": "fl.name",
        "network": "fl.network",
        "deal_address": "fl.address",
    }
    if isinstance(value, (dict, list)):
        value = json.dumps(value, separators=(",", ":"))
    console.print(
        Text(f"  {key}: ", style="fl.key"), Text(str(value), style=styles.get(key, "")), sep=""
    )


def _render_issues(console: Console, issues: list[dict[str, Any]], *, verbose: bool) -> None:
    severity_styles = {"error": "fl.error", "warning": "fl.warning"}
    by_file: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        by_file.setdefault(str(issue.get("file", "")), []).append(issue)

    for file, file_issues in by_file.items():
        console.print(f"\n[bold]{escape(file)}[/bold]")
        for issue in file_issues:
            sev = str(issue.get("severity", "warning"))
            style = severity_styles.get(sev, "")
            prefix = f"[{style}]{sev}[/{style}]" if style else sev
            category = ""
            if verbose and issue.get("category"):
                category = escape(f" [{issue['category']}]")
            console.print(f"  {prefix}{category}: ", Text(str(issue.get("message", ""))), sep="")

    errors = sum(1 for i in issues if i.get("severity") == "error")
    console.print(f"\n{errors} errors, {len(issues) - errors} warnings")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="fl.error"),
        Text(f"  {result.op}", style="fl.op"),
        Text(f": {msg}"),
        sep="",
    )
    if err is None:
        return
    issues = err.detail.get("issues")
    if isinstance(issues, list):
        _render_issues(console, issues, verbose=verbose)
    elif verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("project_path", "template", "network"):
        if key in d:
            _field(console, key, d[key])
    files = d.get("files_created", [])
    _field(console, "files_created", len(files))
    if verbose:
        for f in files:
            console.print(f"    {f}")


def _render_service(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("name", "get", "path"):
        if key in d:
            _field(console, key, d[key])
    _field(console, "modules", ", ".join(d.get("modules", [])))
    workers = d.get("workers") or []
    if workers:
        _field(console, "added_to_workers", ", ".join(workers))


def _render_deploy(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "network", result.data.get("network", ""))
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Worker", style="fl.name", no_wrap=True)
    table.add_column("Deal", style="fl.address", no_wrap=True)
    table.add_column("Action")
    if verbose:
        table.add_column("Worker CID", style="fl.cid")
    for deal in result.data.get("deals", []):
        row = [
            str(deal.get("worker_name", "")),
            str(deal.get("deal_address", "")),
            "updated" if deal.get("updated") else "created",
        ]
        if verbose:
            row.append(str(deal.get("worker_cid", "")))
        table.add_row(*row)
    console.print(table)


def _render_withdraw(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "network", result.data.get("network", ""))
    ids = result.data.get("commitment_ids", [])
    _field(console, "commitments", len(ids))
    if verbose:
        for cc_id in ids:
            console.print(f"    {cc_id}")


def _render_upgrade(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    if "pending" in d:
        rows, label = d["pending"], "pending"
    else:
        rows, label = d.get("applied", []), "applied"
    _field(console, label, len(rows))
    for row in rows:
        console.print(
            f"    {row['file']}: v{row['current']} → v{row['latest']}",
            style="fl.path" if label == "applied" else "",
        )
    if d.get("message"):
        _field(console, "message", d["message"])
    if verbose and d.get("schemas"):
        _field(console, "schemas", len(d["schemas"]))


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    issues = result.data.get("issues", [])
    if not issues:
        console.print("[fl.ok]OK[/fl.ok]  No issues found.")
        if verbose:
            for file in result.data.get("checked", []):
                console.print(f"    {file}")
        return
    _render_issues(console, issues, verbose=verbose)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "init_project": _render_init,
    "service_new": _render_service,
    "service_add": _render_service,
    "deal_deploy": _render_deploy,
    "withdraw_collateral": _render_withdraw,
    "reward_withdraw": _render_withdraw,
    "upgrade": _render_upgrade,
    "check": _render_check,
}

"""Runtime diagnostics for D-Bus bindings, player reachability and cache access."""

from __future__ import annotations

import importlib
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from spotify_manage.errors import SpotifyManageError
from spotify_manage.services.dbus_player import connect_session_player

DoctorStatus = Literal["ok", "missing", "error"]


@dataclass(frozen=True)
class DoctorCheck:
    """One environment readiness check result."""

    name: str
    status: DoctorStatus
    required: bool
    detail: str
    hint: str | None = None


@dataclass(frozen=True)
class DoctorReport:
    """Collection of doctor checks and derived process exit contract."""

    bus_name: str
    checks: list[DoctorCheck]

    @property
    def exit_code(self) -> int:
        """Return non-zero when any required check failed or is missing."""
        for check in self.checks:
            if check.required and check.status != "ok":
                return 2
        return 0


def run_doctor(bus_name: str, cache_path: Path) -> DoctorReport:
    """Run diagnostics for the configured player and cache location."""
    checks = [
        probe_module("pydbus", hint="pip install pydbus"),
        probe_module(
            "gi",
            hint="Install PyGObject (python3-gi) or the [dbus] extra.",
        ),
        probe_player(bus_name),
        probe_cache_dir(cache_path),
    ]
    return DoctorReport(bus_name=bus_name, checks=checks)


def render_report(report: DoctorReport) -> str:
    """Render terminal-friendly diagnostics report text."""
    lines = [f"spotify-manage doctor (player={report.bus_name})", ""]
    for check in report.checks:
        state = _status_token(check.status)
        req = "required" if check.required else "optional"
        lines.append(f"{state} {check.name:<10} [{req}] {check.detail}")
        if check.hint:
            lines.append(f"      hint: {check.hint}")
    lines.append("")
    lines.append("Result: OK" if report.exit_code == 0 else "Result: FAIL")
    return "\n".join(lines)


def probe_module(name: str, *, hint: str) -> DoctorCheck:
    """Verify a binding module is importable."""
    try:
        module = importlib.import_module(name)
    except Exception as exc:
        return DoctorCheck(
            name=name,
            status="missing",
            required=True,
            detail=f"not importable ({exc.__class__.__name__})",
            hint=hint,
        )
    version = getattr(module, "__version__", None)
    detail = f"importable ({version})" if version else "importable"
    return DoctorCheck(name=name, status="ok", required=True, detail=detail)


def probe_player(
    bus_name: str,
    *,
    connect: Callable[[str], object] = connect_session_player,
) -> DoctorCheck:
    """Check the session bus address and try resolving the player object.

    Optional: the player may simply not be running yet.
    """
    if not os.environ.get("DBUS_SESSION_BUS_ADDRESS"):
        return DoctorCheck(
            name="player",
            status="missing",
            required=False,
            detail="DBUS_SESSION_BUS_ADDRESS is not set",
            hint="Run inside a desktop session or export the session bus address.",
        )
    try:
        connect(bus_name)
    except SpotifyManageError as exc:
        return DoctorCheck(
            name="player",
            status="error",
            required=False,
            detail=str(exc),
            hint="Start the player or pass --player with its MPRIS name.",
        )
    return DoctorCheck(
        name="player", status="ok", required=False, detail=f"{bus_name} reachable"
    )


def probe_cache_dir(cache_path: Path) -> DoctorCheck:
    """Verify the cache directory exists (or can be created) and is writable."""
    directory = cache_path.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return DoctorCheck(
            name="cache",
            status="error",
            required=True,
            detail=f"cannot create {directory} ({exc.__class__.__name__})",
            hint="Pass --cache-file with a writable location.",
        )
    if not os.access(directory, os.W_OK):
        return DoctorCheck(
            name="cache",
            status="error",
            required=True,
            detail=f"{directory} is not writable",
            hint="Pass --cache-file with a writable location.",
        )
    return DoctorCheck(name="cache", status="ok", required=True, detail=str(cache_path))


def _status_token(status: DoctorStatus) -> str:
    """Map doctor status to compact display token."""
    if status == "ok":
        return "[OK]"
    if status == "missing":
        return "[MISS]"
    return "[ERR]"

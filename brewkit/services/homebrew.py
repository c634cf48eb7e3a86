"""Homebrew, driven through the serial CLI queue.

Every ``brew`` invocation goes through one ``CLI`` instance so that two
commands never touch the local Homebrew installation at the same time.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from brewkit.config import Settings, settings
from brewkit.errors import BrewInfoError, CommandError
from brewkit.models.brew import BrewAction, BrewApp
from brewkit.services.cli import CLI
from brewkit.utils.logging import get_logger

log = get_logger(__name__)


class Homebrew:
    """A way to interface with the Homebrew CLI."""

    def __init__(self, cli: CLI | None = None, cfg: Settings | None = None) -> None:
        self._cfg = cfg or settings
        self.cli = cli or CLI(cfg=self._cfg)
        self.brew_command = self._cfg.brew_executable

    # ── helpers ───────────────────────────────────────────────────────

    async def _brew(self, arguments: Sequence[str]) -> Optional[bytes]:
        return await self.cli.output(self.brew_command, arguments)

    async def _brew_lines(self, arguments: Sequence[str]) -> list[str]:
        return await self.cli.output_lines(self.brew_command, arguments)

    # ── sync ──────────────────────────────────────────────────────────

    async def update(self) -> None:
        """Sync the local Homebrew metadata with the package servers."""
        try:
            await self._brew(["update"])
        except CommandError as exc:
            log.warning("brew.update_failed", error=str(exc))

    # ── info ──────────────────────────────────────────────────────────

    async def list_installed_apps(self) -> list[str]:
        """Tokens of every cask Homebrew has installed."""
        return [line.strip() for line in await self._brew_lines(["list", "--casks"]) if line.strip()]

    async def list_all_apps(self) -> list[str]:
        """Tokens of every cask Homebrew offers, installed or not."""
        lines = await self._brew_lines(["search", "--quiet", "--casks", '""'])
        # First line is the "==> Casks" header
        apps = [line.strip() for line in lines[1:] if line.strip()]
        log.debug("brew.list_all", count=len(apps))
        return apps

    async def info(self, token: str) -> Optional[dict[str, Any]]:
        """The ``--json=v2`` info document for *token*, ``None`` if brew printed nothing."""
        data = await self._brew(["info", "--casks", "--json=v2", token])
        if data is None:
            log.warning("brew.no_info", token=token)
            return None
        try:
            document = json.loads(data)
        except ValueError as exc:
            log.error("brew.info_not_json", token=token, error=str(exc))
            raise BrewInfoError(
                f"brew info for {token!r} is not valid JSON",
                details={"bytes": len(data)},
                cause=exc,
            ) from exc
        if not isinstance(document, dict):
            raise BrewInfoError(f"brew info for {token!r} is not a JSON object")
        return document

    async def describe(self, token: str) -> Optional[BrewApp]:
        """Summarise the info document for *token*.

        Prefers the cask with that token, then the formula with that name,
        then whatever cask or formula brew returned first.
        """
        document = await self.info(token)
        if document is None:
            return None

        casks: list[dict[str, Any]] = document.get("casks") or []
        formulae: list[dict[str, Any]] = document.get("formulae") or []

        for cask in casks:
            if cask.get("token") == token:
                return BrewApp.from_cask(token, cask)
        for formula in formulae:
            if formula.get("name") == token:
                return BrewApp.from_formula(token, formula)
        if casks:
            return BrewApp.from_cask(token, casks[0])
        if formulae:
            return BrewApp.from_formula(token, formulae[0])

        log.warning("brew.no_match", token=token)
        return None

    # ── install / uninstall / upgrade ─────────────────────────────────

    async def _install_like(self, action: BrewAction, token: str) -> bool:
        try:
            await self._brew([action.value, token])
        except CommandError as exc:
            log.error("brew.action_failed", action=action.value, token=token, error=str(exc))
            return False
        log.info("brew.action_done", action=action.value, token=token)
        return True

    async def install(self, token: str) -> bool:
        return await self._install_like(BrewAction.install, token)

    async def uninstall(self, token: str) -> bool:
        return await self._install_like(BrewAction.uninstall, token)

    async def upgrade(self, token: str) -> bool:
        """Upgrade *token* to the latest version."""
        return await self._install_like(BrewAction.upgrade, token)

    async def perform(self, action: BrewAction, token: str) -> bool:
        return await self._install_like(action, token)

    def close(self) -> None:
        self.cli.close()


# Singleton
homebrew = Homebrew()

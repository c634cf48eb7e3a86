"""Homebrew request and response models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class BrewAction(str, Enum):
    install = "install"
    uninstall = "uninstall"
    upgrade = "upgrade"


class BrewApp(BaseModel):
    """What ``brew info --json=v2`` says about one cask or formula."""

    token: str
    name: Optional[str] = None
    installed_version: Optional[str] = None
    latest_version: Optional[str] = None
    needs_update: bool = False

    @classmethod
    def from_cask(cls, token: str, cask: dict[str, Any]) -> BrewApp:
        names = cask.get("name") or []
        return cls(
            token=token,
            name=names[0] if names else None,
            installed_version=cask.get("installed"),
            latest_version=cask.get("version"),
            needs_update=bool(cask.get("outdated", False)),
        )

    @classmethod
    def from_formula(cls, token: str, formula: dict[str, Any]) -> BrewApp:
        installed = formula.get("installed") or []
        versions = formula.get("versions")
        # "versions" is either a mapping ({"stable": ...}) or a list of them
        if isinstance(versions, list):
            versions = versions[0] if versions else {}
        return cls(
            token=token,
            name=formula.get("name"),
            installed_version=installed[0].get("version") if installed else None,
            latest_version=(versions or {}).get("stable"),
            needs_update=bool(formula.get("outdated", False)),
        )

"""Validation of package tokens before they are put on a shell command line.

Arguments are joined into one string for the shell without any escaping, so
anything reaching ``brew`` from outside must look like a plain cask/formula
token.
"""

from __future__ import annotations

import re

from brewkit.utils.logging import get_logger

log = get_logger(__name__)

MAX_TOKEN_LENGTH = 100

# Casks and formulae: "firefox", "python@3.12", "homebrew/cask/foo", "c++-lib"
TOKEN_PATTERN: re.Pattern[str] = re.compile(r"^[A-Za-z0-9][A-Za-z0-9@._+/-]*$")


class TokenFilterResult:
    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str):
        self.allowed = allowed
        self.reason = reason

    def __bool__(self) -> bool:
        return self.allowed


def check_token(token: str) -> TokenFilterResult:
    """Check whether *token* is safe to pass to brew unquoted."""
    tok = token.strip()
    if not tok:
        return TokenFilterResult(False, "empty token")
    if len(tok) > MAX_TOKEN_LENGTH:
        return TokenFilterResult(False, f"token longer than {MAX_TOKEN_LENGTH} characters")
    if ".." in tok:
        return TokenFilterResult(False, "token contains '..'")
    if not TOKEN_PATTERN.match(tok):
        log.warning("token_filter.denied", token=tok)
        return TokenFilterResult(False, "token contains characters the shell would interpret")
    return TokenFilterResult(True, "allowed token")

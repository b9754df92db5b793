#!/usr/bin/env python3
"""Error taxonomy shared by the client and the CLI."""
from __future__ import annotations

from typing import Optional


class TransferError(Exception):
    """Base class for every error the CLI prints instead of a traceback."""


class ValidationError(TransferError):
    """Bad local arguments, detected before any network call."""


class AuthError(TransferError):
    """Application Default Credentials could not be resolved."""


class ConfigError(TransferError):
    """Missing project id or an unreadable config file."""


class RemoteError(TransferError):
    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status

"""Command-line client for the Cloud Storage Transfer Service."""
from __future__ import annotations

from storage_transfer.client import TransferClient
from storage_transfer.exceptions import AuthError, ConfigError, RemoteError, TransferError, ValidationError
from storage_transfer.models import NoOperations, OperationFilter, TransferJobSpec

__all__ = [
    "TransferClient",
    "TransferError",
    "ValidationError",
    "AuthError",
    "RemoteError",
    "ConfigError",
    "NoOperations",
    "OperationFilter",
    "TransferJobSpec",
]

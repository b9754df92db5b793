#!/usr/bin/env python3
"""Credential resolution
Application Default Credentials only (env GOOGLE_APPLICATION_CREDENTIALS, gcloud user login, metadata server).
Identities that come without scopes (user workstation, App Engine) are widened to cloud-platform;
pre-scoped identities (Compute Engine, managed VMs) are used as-is.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

import google.auth
import structlog
from google.auth.credentials import with_scopes_if_required
from google.auth.exceptions import DefaultCredentialsError

from storage_transfer.exceptions import AuthError

logger = structlog.get_logger()

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

DefaultLoader = Callable[[], Tuple[Any, Optional[str]]]


@dataclass(frozen=True)
class ResolvedCredentials:
    credentials: Any
    project_id: Optional[str] = None
    scoped: bool = False


class CredentialResolver:
    """Resolves ADC once; later calls return the same session."""

    def __init__(self, scopes: Optional[Sequence[str]] = None, loader: Optional[DefaultLoader] = None) -> None:
        self._scopes = list(scopes) if scopes else [CLOUD_PLATFORM_SCOPE]
        self._loader = loader or google.auth.default
        self._resolved: Optional[ResolvedCredentials] = None

    def _load_default(self) -> Tuple[Any, Optional[str]]:
        try:
            return self._loader()
        except DefaultCredentialsError as e:
            raise AuthError(
                f"Could not resolve Application Default Credentials: {e}. "
                "Run `gcloud auth application-default login` or set GOOGLE_APPLICATION_CREDENTIALS."
            ) from e

    def resolve(self) -> ResolvedCredentials:
        if self._resolved is not None:
            return self._resolved
        credentials, project_id = self._load_default()
        if credentials is None:
            raise AuthError("Application Default Credentials returned no credentials")
        scoped_credentials = with_scopes_if_required(credentials, self._scopes)
        scoped = scoped_credentials is not credentials
        if scoped:
            logger.debug("Widened credential scopes", scopes=self._scopes)
        self._resolved = ResolvedCredentials(scoped_credentials, project_id, scoped)
        return self._resolved

#!/usr/bin/env python3
"""Storage Transfer API adapter
Wraps the discovery client so callers see ApiResponse(status, body) instead of HttpError.
404 comes back as a response; a failed token refresh raises AuthError; every other HTTP or transport failure raises RemoteError.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient import discovery
from googleapiclient.errors import HttpError

from storage_transfer.exceptions import AuthError, RemoteError

API_NAME = "storagetransfer"
API_VERSION = "v1"
NOT_FOUND = 404


@dataclass(frozen=True)
class ApiResponse:
    status: int
    body: Dict[str, Any] = field(default_factory=dict)


def _error_body(err: HttpError) -> Dict[str, Any]:
    try:
        data = json.loads(err.content.decode("utf-8"))
    except (ValueError, AttributeError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


class StorageTransferAPI:
    def __init__(self, service: Any) -> None:
        self._service = service

    @classmethod
    def from_credentials(cls, credentials: Any) -> "StorageTransferAPI":
        service = discovery.build(API_NAME, API_VERSION, credentials=credentials, cache_discovery=False)
        return cls(service)

    def _execute(self, request: Any, what: str) -> ApiResponse:
        try:
            body = request.execute()
        except HttpError as e:
            status = int(e.resp.status)
            if status == NOT_FOUND:
                return ApiResponse(status, _error_body(e))
            raise RemoteError(f"{what} failed ({status}): {e}", status=status) from e
        except RefreshError as e:
            raise AuthError(f"{what} failed, credentials could not be refreshed: {e}") from e
        except (TransportError, httplib2.HttpLib2Error, OSError) as e:
            raise RemoteError(f"{what} failed: {e}") from e
        return ApiResponse(200, body or {})

    def create_transfer_job(self, body: Dict[str, Any]) -> ApiResponse:
        return self._execute(self._service.transferJobs().create(body=body), "transferJobs.create")

    def list_transfer_operations(self, name: str, filter: str) -> ApiResponse:
        request = self._service.transferOperations().list(name=name, filter=filter)
        return self._execute(request, "transferOperations.list")


ApiFactory = Callable[[Any], StorageTransferAPI]

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest
import structlog

from storage_transfer.api import ApiResponse
from storage_transfer.credentials import ResolvedCredentials

PROJECT = "my-project"


class FakeResolver:
    def __init__(self, error: Optional[Exception] = None, project_id: Optional[str] = PROJECT) -> None:
        self.error = error
        self.project_id = project_id
        self.calls = 0

    def resolve(self) -> ResolvedCredentials:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ResolvedCredentials(credentials="session-token", project_id=self.project_id, scoped=True)


class FakeAPI:
    def __init__(self, create: Optional[ApiResponse] = None, operations: Optional[ApiResponse] = None) -> None:
        self.create_response = create or ApiResponse(200, {})
        self.list_response = operations or ApiResponse(200, {})
        self.created: List[Dict[str, Any]] = []
        self.listed: List[Tuple[str, str]] = []

    def create_transfer_job(self, body: Dict[str, Any]) -> ApiResponse:
        self.created.append(body)
        return self.create_response

    def list_transfer_operations(self, name: str, filter: str) -> ApiResponse:
        self.listed.append((name, filter))
        return self.list_response


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()

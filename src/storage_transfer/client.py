#!/usr/bin/env python3
"""Transfer client
authenticate → build request → one API call. No polling, no retries, no local job state.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union

import structlog

from storage_transfer.api import NOT_FOUND, ApiFactory, StorageTransferAPI
from storage_transfer.credentials import CredentialResolver
from storage_transfer.exceptions import RemoteError, ValidationError
from storage_transfer.models import NoOperations, OperationFilter, TransferJobSpec, check_job_args

logger = structlog.get_logger()

OPERATIONS_NAME = "transferOperations"


class TransferClient:
    def __init__(
        self,
        *,
        project_id: str,
        resolver: Optional[CredentialResolver] = None,
        api_factory: Optional[ApiFactory] = None,
    ) -> None:
        if not project_id:
            raise ValidationError("project_id is required")
        self.project_id = project_id
        self._resolver = resolver or CredentialResolver()
        self._api_factory = api_factory or StorageTransferAPI.from_credentials
        self._api: Optional[StorageTransferAPI] = None

    def authenticate(self) -> Any:
        """Resolve default credentials and return the authenticated session."""
        resolved = self._resolver.resolve()
        self._api = self._api_factory(resolved.credentials)
        return resolved.credentials

    def _session(self) -> StorageTransferAPI:
        if self._api is None:
            self.authenticate()
        return self._api

    def build_job_spec(
        self,
        source_bucket: Optional[str],
        destination_bucket: Optional[str],
        date: Optional[str],
        time: Optional[str],
        description: Optional[str] = None,
    ) -> TransferJobSpec:
        start_date, start_time = check_job_args(source_bucket, destination_bucket, date, time)
        return TransferJobSpec(
            project_id=self.project_id,
            source_bucket=source_bucket,
            destination_bucket=destination_bucket,
            schedule_start_date=start_date,
            start_time_of_day=start_time,
            description=description or None,
        )

    def create_transfer_job(
        self,
        source_bucket: Optional[str],
        destination_bucket: Optional[str],
        date: Optional[str],
        time: Optional[str],
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a one-shot job copying ``source_bucket`` into ``destination_bucket``.

        Source objects are never deleted. The created job is returned exactly as the
        service sent it.
        """
        spec = self.build_job_spec(source_bucket, destination_bucket, date, time, description)
        body = spec.to_resource()
        logger.info("Submitting transfer job", body=json.dumps(body, indent=2))

        resp = self._session().create_transfer_job(body)
        if resp.status == NOT_FOUND:
            raise RemoteError("Not Found!", status=resp.status)
        logger.info("Created job", name=resp.body.get("name"))
        return resp.body

    def get_job_status(self, job_name: Optional[str] = None) -> Union[List[Dict[str, Any]], NoOperations]:
        """List the transfer operations of the project, optionally for one job."""
        op_filter = OperationFilter.for_job(self.project_id, job_name)

        resp = self._session().list_transfer_operations(OPERATIONS_NAME, op_filter.to_json())
        if resp.status == NOT_FOUND:
            raise RemoteError("Not Found!", status=resp.status)
        operations = resp.body.get("operations") or []
        if not operations:
            logger.info("No operations found", filter=op_filter.to_dict())
            return NoOperations(op_filter)
        logger.info("Found operations", count=len(operations))
        return list(operations)

#!/usr/bin/env python3
"""Request shapes for the Storage Transfer API.
TransferJobSpec builds the `TransferJob` body; OperationFilter builds the JSON
filter string `transferOperations.list` expects.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from storage_transfer.exceptions import ValidationError

DATE_FORMAT = "%Y/%m/%d"
TIME_FORMAT = "%H:%M"
STATUS_ENABLED = "ENABLED"


@dataclass(frozen=True)
class ScheduleDate:
    year: int
    month: int
    day: int

    def to_dict(self) -> Dict[str, int]:
        return {"year": self.year, "month": self.month, "day": self.day}


@dataclass(frozen=True)
class TimeOfDay:
    hours: int
    minutes: int

    def to_dict(self) -> Dict[str, int]:
        return {"hours": self.hours, "minutes": self.minutes}


def parse_date(value: Optional[str]) -> ScheduleDate:
    """Parse ``YYYY/MM/DD`` into a naive calendar date."""
    if not value:
        raise ValidationError('"date" is required (YYYY/MM/DD)')
    try:
        d = datetime.strptime(value, DATE_FORMAT)
    except ValueError as e:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY/MM/DD") from e
    return ScheduleDate(year=d.year, month=d.month, day=d.day)


def parse_time(value: Optional[str]) -> TimeOfDay:
    """Parse ``HH:mm`` into a time of day. No timezone is attached."""
    if not value:
        raise ValidationError('"time" is required (HH:mm)')
    try:
        t = datetime.strptime(value, TIME_FORMAT)
    except ValueError as e:
        raise ValidationError(f"Invalid time {value!r}, expected HH:mm") from e
    return TimeOfDay(hours=t.hour, minutes=t.minute)


def check_job_args(
    source_bucket: Optional[str],
    destination_bucket: Optional[str],
    date: Optional[str],
    time: Optional[str],
) -> Tuple[ScheduleDate, TimeOfDay]:
    """Local checks for a new job, source bucket first. Needs no credentials."""
    if not source_bucket:
        raise ValidationError('"source_bucket" is required!')
    if not destination_bucket:
        raise ValidationError('"destination_bucket" is required!')
    return parse_date(date), parse_time(time)


@dataclass(frozen=True)
class TransferJobSpec:
    project_id: str
    source_bucket: str
    destination_bucket: str
    schedule_start_date: ScheduleDate
    start_time_of_day: TimeOfDay
    description: Optional[str] = None
    status: str = STATUS_ENABLED

    def __post_init__(self) -> None:
        if not self.source_bucket:
            raise ValidationError('"source_bucket" is required!')
        if not self.destination_bucket:
            raise ValidationError('"destination_bucket" is required!')

    def to_resource(self) -> Dict[str, Any]:
        # start == end date: the job runs once
        resource: Dict[str, Any] = {
            "projectId": self.project_id,
            "status": self.status,
            "transferSpec": {
                "gcsDataSource": {"bucketName": self.source_bucket},
                "gcsDataSink": {"bucketName": self.destination_bucket},
                "transferOptions": {"deleteObjectsFromSourceAfterTransfer": False},
            },
            "schedule": {
                "scheduleStartDate": self.schedule_start_date.to_dict(),
                "scheduleEndDate": self.schedule_start_date.to_dict(),
                "startTimeOfDay": self.start_time_of_day.to_dict(),
            },
        }
        if self.description:
            resource["description"] = self.description
        return resource


@dataclass(frozen=True)
class OperationFilter:
    project_id: str
    job_names: Optional[List[str]] = None

    @classmethod
    def for_job(cls, project_id: str, job_name: Optional[str] = None) -> "OperationFilter":
        return cls(project_id=project_id, job_names=[job_name] if job_name else None)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"project_id": self.project_id}
        if self.job_names:
            out["job_names"] = list(self.job_names)
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class NoOperations:
    """A successful status query that matched nothing."""
    filter: OperationFilter
    message: str = field(default="No operations found.")

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.message

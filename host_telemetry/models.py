"""Value records returned by the metric probes."""
from __future__ import annotations

import datetime as dt
from typing import List

from pydantic import BaseModel, ConfigDict, Field


def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).astimezone()


class CpuRecord(BaseModel):
    """One CPU descriptor as reported by the OS."""

    model_config = ConfigDict(protected_namespaces=())

    model_name: str = ""
    cores: int = Field(default=0, ge=0)
    usage: float = 0.0


class MemoryRecord(BaseModel):
    total: int = 0
    available: int = 0
    used: int = 0
    used_percent: float = 0.0


class DiskRecord(BaseModel):
    """Usage summed over every physical partition."""

    total: int = 0
    free: int = 0
    used: int = 0
    used_percent: float = 0.0


class HostRecord(BaseModel):
    hostname: str = ""
    os: str = ""
    platform: str = ""
    boot_time: int = 0
    uptime: int = 0
    procs: int = 0
    create_time: dt.datetime = Field(default_factory=_now)


class SystemSnapshot(BaseModel):
    """Point-in-time composite of all probe outputs."""

    cpu: List[CpuRecord] = Field(default_factory=list)
    memory: MemoryRecord = Field(default_factory=MemoryRecord)
    disk: DiskRecord = Field(default_factory=DiskRecord)
    host: HostRecord = Field(default_factory=HostRecord)

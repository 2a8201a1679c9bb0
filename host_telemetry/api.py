"""FastAPI application exposing host telemetry snapshots."""
from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI

from . import __version__, metrics
from .config import Settings, get_settings
from .models import CpuRecord, DiskRecord, HostRecord, MemoryRecord, SystemSnapshot


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Host Telemetry Service",
        description="Lightweight FastAPI service exposing CPU, memory, disk and host snapshots.",
        version=__version__,
    )

    # Plain ``def`` endpoints run on the threadpool, so the CPU sample does not
    # block the event loop.
    @app.get("/", response_model=SystemSnapshot, summary="Return a full system snapshot", tags=["telemetry"])
    def system_snapshot():
        return metrics.collect_system(settings.cpu_sample_seconds)

    @app.get("/cpu", response_model=List[CpuRecord], summary="Return CPU descriptors and usage", tags=["telemetry"])
    def cpu_info():
        return metrics.collect_cpu(settings.cpu_sample_seconds)

    @app.get("/memory", response_model=MemoryRecord, summary="Return virtual memory usage", tags=["telemetry"])
    def memory_info():
        return metrics.collect_memory()

    @app.get("/disk", response_model=DiskRecord, summary="Return aggregated disk usage", tags=["telemetry"])
    def disk_info():
        return metrics.collect_disk()

    @app.get("/host", response_model=HostRecord, summary="Return host metadata", tags=["telemetry"])
    def host_info():
        return metrics.collect_host()

    @app.get("/health", summary="Service health check", tags=["system"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()

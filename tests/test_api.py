"""Tests for host_telemetry.api routes."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import host_telemetry
from host_telemetry.api import create_app
from host_telemetry.config import Settings
from host_telemetry.models import CpuRecord, DiskRecord, HostRecord, MemoryRecord


# ── fixtures ───────────────────────────────────────────


@pytest.fixture
def client():
    return TestClient(create_app(Settings(cpu_sample_seconds=0.25)))


@pytest.fixture
def probes():
    """Replace every probe with canned records."""
    with patch("host_telemetry.metrics.collect_cpu") as cpu, \
            patch("host_telemetry.metrics.collect_memory") as memory, \
            patch("host_telemetry.metrics.collect_disk") as disk, \
            patch("host_telemetry.metrics.collect_host") as host:
        cpu.return_value = [
            CpuRecord(model_name="Xeon", cores=1, usage=45.0),
            CpuRecord(model_name="Xeon", cores=1),
        ]
        memory.return_value = MemoryRecord(total=16_000, available=6_000, used=10_000, used_percent=62.5)
        disk.return_value = DiskRecord(total=300, free=190, used=110, used_percent=110 / 300 * 100)
        host.return_value = HostRecord(
            hostname="box-01", os="linux", platform="ubuntu", boot_time=1_700_000_000, uptime=3_600, procs=42
        )
        yield {"cpu": cpu, "memory": memory, "disk": disk, "host": host}


# ── metric routes ──────────────────────────────────────


def test_root_returns_full_snapshot(client, probes):
    response = client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"cpu", "memory", "disk", "host"}
    assert [c["usage"] for c in body["cpu"]] == [45.0, 0.0]
    assert body["memory"]["used_percent"] == 62.5
    assert body["disk"]["total"] == 300
    assert body["host"]["hostname"] == "box-01"
    probes["cpu"].assert_called_once_with(0.25)


def test_cpu_route(client, probes):
    response = client.get("/cpu")
    assert response.status_code == 200
    assert response.json() == [
        {"model_name": "Xeon", "cores": 1, "usage": 45.0},
        {"model_name": "Xeon", "cores": 1, "usage": 0.0},
    ]
    probes["cpu"].assert_called_once_with(0.25)


def test_cpu_route_empty_list(client, probes):
    probes["cpu"].return_value = []
    response = client.get("/cpu")
    assert response.status_code == 200
    assert response.json() == []


def test_memory_route(client, probes):
    response = client.get("/memory")
    assert response.status_code == 200
    assert response.json() == {"total": 16_000, "available": 6_000, "used": 10_000, "used_percent": 62.5}


def test_disk_route(client, probes):
    response = client.get("/disk")
    assert response.status_code == 200
    body = response.json()
    assert (body["total"], body["free"], body["used"]) == (300, 190, 110)
    assert body["used_percent"] == pytest.approx(36.6667, rel=1e-4)


def test_host_route(client, probes):
    response = client.get("/host")
    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"hostname", "os", "platform", "boot_time", "uptime", "procs", "create_time"}
    assert body["procs"] == 42
    assert body["platform"] == "ubuntu"
    assert isinstance(body["create_time"], str)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# ── degradation ────────────────────────────────────────


def test_os_failures_still_return_200_with_zeros(client):
    """Probe failures degrade to zero payloads, never to HTTP errors."""
    with patch("host_telemetry.metrics.psutil") as mock_psutil, \
            patch("host_telemetry.metrics._read_cpu_descriptors", side_effect=OSError("boom")):
        mock_psutil.virtual_memory.side_effect = OSError("boom")
        mock_psutil.disk_partitions.side_effect = OSError("boom")
        mock_psutil.boot_time.side_effect = OSError("boom")

        responses = {path: client.get(path) for path in ("/", "/cpu", "/memory", "/disk", "/host")}

    assert all(r.status_code == 200 for r in responses.values())
    assert responses["/cpu"].json() == []
    assert responses["/memory"].json() == {"total": 0, "available": 0, "used": 0, "used_percent": 0.0}
    assert responses["/disk"].json() == {"total": 0, "free": 0, "used": 0, "used_percent": 0.0}
    host = responses["/host"].json()
    assert host["hostname"] == "" and host["procs"] == 0
    assert host["create_time"]
    snapshot = responses["/"].json()
    assert snapshot["cpu"] == []
    assert snapshot["memory"]["total"] == 0


# ── live host ──────────────────────────────────────────


def test_root_against_live_host():
    """An unpatched snapshot of the machine running the tests has the documented shape."""
    client = TestClient(create_app(Settings(cpu_sample_seconds=0.1)))
    response = client.get("/")
    assert response.status_code == 200
    body = response.json()

    for cpu in body["cpu"]:
        assert isinstance(cpu["model_name"], str)
        assert isinstance(cpu["cores"], int) and cpu["cores"] >= 0
        assert 0.0 <= cpu["usage"] <= 100.0
    assert all(cpu["usage"] == 0.0 for cpu in body["cpu"][1:])

    memory = body["memory"]
    assert all(isinstance(memory[k], int) for k in ("total", "available", "used"))
    assert 0.0 <= memory["used_percent"] <= 100.0

    disk = body["disk"]
    assert all(isinstance(disk[k], int) for k in ("total", "free", "used"))
    assert 0.0 <= disk["used_percent"] <= 100.0

    host = body["host"]
    assert all(isinstance(host[k], str) for k in ("hostname", "os", "platform", "create_time"))
    assert all(isinstance(host[k], int) for k in ("boot_time", "uptime", "procs"))


def test_openapi_reports_package_version(client):
    response = client.get("/openapi.json")
    assert response.status_code == 200
    assert response.json()["info"]["version"] == host_telemetry.__version__

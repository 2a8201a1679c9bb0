"""Helpers for collecting host system metrics.

Every probe is best-effort: a failing OS query is logged at debug level and
turned into a zero-valued (or empty) record instead of an exception.
"""
from __future__ import annotations

import logging
import platform
import socket
import time
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List

import psutil

from .config import CPU_SAMPLE_SECONDS
from .models import CpuRecord, DiskRecord, HostRecord, MemoryRecord, SystemSnapshot

logger = logging.getLogger(__name__)

CPUINFO_PATH = Path("/proc/cpuinfo")
OS_RELEASE_PATH = Path("/etc/os-release")

# Common ARM "CPU part" ids for kernels that print no model name.
ARM_PART_NAMES = {
    "0xc07": "Cortex-A7",
    "0xc08": "Cortex-A8",
    "0xc09": "Cortex-A9",
    "0xc0f": "Cortex-A15",
    "0xd03": "Cortex-A53",
    "0xd04": "Cortex-A35",
    "0xd05": "Cortex-A55",
    "0xd07": "Cortex-A57",
    "0xd08": "Cortex-A72",
    "0xd09": "Cortex-A73",
    "0xd0a": "Cortex-A75",
    "0xd0b": "Cortex-A76",
    "0xd0c": "Neoverse-N1",
    "0xd40": "Neoverse-V1",
    "0xd49": "Neoverse-N2",
    "0xd4f": "Neoverse-V2",
}


def _as_dict(stats_obj: Any) -> Dict[str, Any]:
    """Normalize psutil namedtuple output to plain dicts."""
    if hasattr(stats_obj, "_asdict"):
        return dict(stats_obj._asdict())
    return dict(stats_obj)


def _cpu_model_name(fields: Dict[str, str]) -> str:
    model_name = fields.get("model name") or fields.get("cpu") or fields.get("Processor", "")
    if model_name:
        return model_name
    part = fields.get("CPU part", "").lower()
    return ARM_PART_NAMES.get(part, part)


def parse_cpuinfo(text: str) -> List[CpuRecord]:
    """Build one descriptor per ``processor`` entry of ``/proc/cpuinfo``.

    The model name comes from ``model name`` (x86, newer ARM) or ``cpu``
    (POWER). Older ARM kernels print a single ``Processor`` header that names
    every entry after it; failing both, the ARM ``CPU part`` id is used.
    """
    entries: List[Dict[str, str]] = []
    header = ""
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key, value = key.strip(), value.strip()
        if key == "Processor":
            header = value
        elif key == "processor":
            entries.append({"Processor": header} if header else {})
        elif entries:
            entries[-1][key] = value
    return [CpuRecord(model_name=_cpu_model_name(fields), cores=1) for fields in entries]


def _read_cpu_descriptors() -> List[CpuRecord]:
    if platform.system() == "Linux" and CPUINFO_PATH.exists():
        return parse_cpuinfo(CPUINFO_PATH.read_text(encoding="utf-8", errors="ignore"))
    model_name = platform.processor() or platform.uname().machine
    return [CpuRecord(model_name=model_name, cores=psutil.cpu_count(logical=True) or 0)]


def attach_cpu_usage(descriptors: List[CpuRecord], usage: float) -> List[CpuRecord]:
    """Put the aggregate usage sample on the first descriptor only."""
    records = [descriptor.model_copy(update={"usage": 0.0}) for descriptor in descriptors]
    if records:
        records[0] = records[0].model_copy(update={"usage": usage})
    return records


def collect_cpu(sample_interval: float = CPU_SAMPLE_SECONDS) -> List[CpuRecord]:
    """Enumerate CPU descriptors and sample aggregate utilization.

    The sample blocks the calling thread for ``sample_interval`` seconds. It is
    skipped entirely when the OS reports no descriptors.
    """
    try:
        descriptors = _read_cpu_descriptors()
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("CPU descriptor query failed: %s", exc)
        return []
    if not descriptors:
        return []

    try:
        usage = psutil.cpu_percent(interval=sample_interval)
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("CPU usage sample failed: %s", exc)
        usage = 0.0
    return attach_cpu_usage(descriptors, usage)


def collect_memory() -> MemoryRecord:
    try:
        memory = psutil.virtual_memory()
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("Virtual memory query failed: %s", exc)
        return MemoryRecord()
    return MemoryRecord(
        total=memory.total,
        available=memory.available,
        used=memory.used,
        used_percent=memory.percent,
    )


def aggregate_disk_usage(usages: Iterable[Any]) -> DiskRecord:
    """Sum per-partition usage into one system-wide record.

    Accepts psutil ``disk_usage`` results or plain mappings with ``total``,
    ``free`` and ``used`` keys.
    """
    total = free = used = 0
    for usage in usages:
        stats = _as_dict(usage)
        total += int(stats.get("total", 0))
        free += int(stats.get("free", 0))
        used += int(stats.get("used", 0))

    used_percent = used / total * 100 if total > 0 else 0.0
    return DiskRecord(total=total, free=free, used=used, used_percent=used_percent)


def _partition_usages() -> Iterator[Any]:
    for partition in psutil.disk_partitions(all=False):
        try:
            usage = psutil.disk_usage(partition.mountpoint)
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug("Disk usage query failed for %s: %s", partition.mountpoint, exc)
            continue
        yield usage


def collect_disk() -> DiskRecord:
    try:
        return aggregate_disk_usage(_partition_usages())
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("Disk partition query failed: %s", exc)
        return DiskRecord()


def _read_platform_id(system_name: str) -> str:
    """Return the distribution id on Linux, the lowercased OS name elsewhere."""
    if system_name == "Linux" and OS_RELEASE_PATH.exists():
        for line in OS_RELEASE_PATH.read_text(encoding="utf-8", errors="ignore").splitlines():
            key, sep, value = line.partition("=")
            if sep and key.strip() == "ID":
                return value.strip().strip('"')
    return system_name.lower()


def collect_host() -> HostRecord:
    """Collect host identity and uptime; ``create_time`` is stamped per call."""
    try:
        system_name = platform.system()
        boot_time = int(psutil.boot_time())
        return HostRecord(
            hostname=socket.gethostname(),
            os=system_name.lower(),
            platform=_read_platform_id(system_name),
            boot_time=boot_time,
            uptime=max(0, int(time.time()) - boot_time),
            procs=len(psutil.pids()),
        )
    except Exception as exc:  # pylint: disable=broad-except
        logger.debug("Host info query failed: %s", exc)
        return HostRecord()


def collect_system(cpu_sample_interval: float = CPU_SAMPLE_SECONDS) -> SystemSnapshot:
    """Gather CPU, memory, disk and host records into one snapshot."""
    return SystemSnapshot(
        cpu=collect_cpu(cpu_sample_interval),
        memory=collect_memory(),
        disk=collect_disk(),
        host=collect_host(),
    )

"""Host telemetry FastAPI service."""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("host-telemetry")
except PackageNotFoundError:  # pragma: no cover - fallback when package metadata missing
    __version__ = "0.1.0"

from .api import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]

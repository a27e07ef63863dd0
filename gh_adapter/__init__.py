"""Provider-agnostic adapter for code-hosting platforms."""

__version__ = "0.1.0"

from .config import AdapterConfig, Credentials, HttpAuthType, RetryPolicy  # noqa: E402
from .providers import build_adapter  # noqa: E402

__all__ = [
    "AdapterConfig",
    "Credentials",
    "HttpAuthType",
    "RetryPolicy",
    "build_adapter",
]

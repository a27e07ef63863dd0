"""Provider registry.

Configuration names the provider; the registry maps that name to a factory
that builds a ready adapter. Callers receive a ``RepositoryAdapter`` and never
depend on a concrete provider class.
"""

from collections.abc import Callable

from .config import AdapterConfig
from .contract import RepositoryAdapter
from .github_client.adapter import GitHubAdapter

AdapterFactory = Callable[[AdapterConfig], RepositoryAdapter]

_REGISTRY: dict[str, AdapterFactory] = {
    GitHubAdapter.get_name(): GitHubAdapter,
}


def register_provider(name: str, factory: AdapterFactory) -> None:
    """Register an adapter factory under ``name``, replacing any previous one."""
    _REGISTRY[name] = factory


def available_providers() -> list[str]:
    return sorted(_REGISTRY)


def build_adapter(config: AdapterConfig) -> RepositoryAdapter:
    """Build the adapter selected by ``config.provider``.

    Raises:
        ValueError: If no provider is registered under that name
    """
    try:
        factory = _REGISTRY[config.provider]
    except KeyError:
        raise ValueError(
            f"Unknown provider '{config.provider}'. "
            f"Available: {', '.join(available_providers())}"
        ) from None
    return factory(config)

"""In-memory registry for external collaborators."""
from typing import Any, Dict

_REGISTRY: Dict[str, Any] = {}


def bind_api(key: str, api: Any) -> None:
    """Bind a collaborator implementation to a registry key."""
    _REGISTRY[key] = api


def get_api(key: str) -> Any:
    """Retrieve a collaborator from the registry.

    Raises:
        KeyError: If no collaborator has been bound for ``key``.
    """

    if key not in _REGISTRY:
        raise KeyError(f"Collaborator not bound in registry: {key}")
    return _REGISTRY[key]


def unbind_api(key: str) -> None:
    _REGISTRY.pop(key, None)


ADMIN_API_KEY = "collaborators.admin_api"

"""
Abstract base classes for the collaborators of the module loader.

The module graph and the transform pipeline are owned by the hosting dev
server; the loader only depends on these contracts.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class CompiledResult:
    """
    Output of the transform pipeline for one module.

    Attributes:
        code: Executable source using the injected SSR bindings
        file: Backing file of the module
        map: Optional line map from generated line to original line
    """

    code: str
    file: Optional[str] = None
    map: Optional[Dict[int, int]] = None


class IModuleGraph(ABC):
    """Interface for the dependency graph storing per-url module records."""

    url_to_module_map: Dict[str, Any]

    @abstractmethod
    async def ensure_entry_from_url(self, url: str) -> Any:
        """
        Fetch the record for ``url``, creating it if absent.

        Args:
            url: Canonical module identifier

        Returns:
            The module record
        """
        pass

    @abstractmethod
    def get_module_by_url(self, url: str) -> Optional[Any]:
        """Return the record for ``url`` without creating it."""
        pass


class ITransformer(ABC):
    """Interface for the transform pipeline."""

    @abstractmethod
    async def transform_request(
        self, url: str, ssr: bool = True
    ) -> Optional[CompiledResult]:
        """
        Transform a module into executable code.

        Args:
            url: Canonical module identifier
            ssr: Whether the result is meant for server-side execution

        Returns:
            The compiled result, or None if the module cannot be produced
        """
        pass

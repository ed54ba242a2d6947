"""Stage Registry - maps configured stage names to stage factories.

Registry pattern for building pipelines from a ``SAVE_PROCESS`` string.
Each registry is an explicit object owned by the assembler; there is no
process-wide registry.
"""

import logging
from typing import Callable, Dict, List

from domain.pipeline.ports import ProcessorPort

logger = logging.getLogger(__name__)

StageFactory = Callable[[], ProcessorPort]


class StageRegistry:
    """Registry of available pipeline stages.

    Names are matched case-insensitively.

    Example:
        registry = StageRegistry()
        registry.register("HeadersParser", HeadersParserProcessor)
        stage = registry.create("headersparser")
    """

    def __init__(self):
        """Initialize empty registry."""
        self._factories: Dict[str, StageFactory] = {}

    @staticmethod
    def _key(name: str) -> str:
        return name.strip().lower()

    def register(self, name: str, factory: StageFactory) -> None:
        """Register a stage factory.

        Args:
            name: Stage name as used in SAVE_PROCESS
            factory: Callable returning a new stage

        Raises:
            ValueError: If the name is empty or already registered
        """
        key = self._key(name or "")
        if not key:
            raise ValueError("Cannot register a stage without a name")
        if key in self._factories:
            raise ValueError(f"Stage already registered: {name}")

        self._factories[key] = factory
        logger.debug(f"Registered stage: {name}")

    def create(self, name: str) -> ProcessorPort:
        """Create a stage by name.

        Raises:
            ValueError: If no stage is registered under the name
        """
        factory = self._factories.get(self._key(name or ""))
        if factory is None:
            raise ValueError(
                f"Unknown pipeline stage: {name}. Available: {', '.join(self.names())}"
            )
        return factory()

    def names(self) -> List[str]:
        """Get registered stage names (normalized)."""
        return sorted(self._factories)

    def __contains__(self, name: str) -> bool:
        return self._key(name or "") in self._factories

    def __len__(self) -> int:
        return len(self._factories)

"""Generation manager.

Owns the set of named stores tagged with the current cache version:
creates them on startup and deletes the stores left behind by previous
versions.
"""

import structlog

from offline_cache.entities import StorePurpose
from offline_cache.protocols import StoreRegistry

logger = structlog.get_logger(__name__)


class GenerationManager:
    """Creates and prunes versioned stores.

    prune_stale() must not run concurrently with ensure_generations() or
    with installation writes; the LifecycleController serializes them.

    Example:
        ```python
        generations = GenerationManager(registry, cache_version="zenflow-v2", namespace="zenflow")
        await generations.ensure_generations()  # zenflow-v2-static, -api, -cdn
        await generations.prune_stale()          # drops zenflow-v1-*
        ```
    """

    def __init__(
        self,
        registry: StoreRegistry,
        cache_version: str,
        namespace: str,
        legacy_store_names: tuple[str, ...] = (),
    ) -> None:
        """Initialize the generation manager.

        Args:
            registry: Registry holding every named store.
            cache_version: Current version, used as store-name prefix.
            namespace: Application namespace shared by all versions.
            legacy_store_names: Exact names from older layouts that are
                also considered stale.
        """
        self._registry = registry
        self._version = cache_version
        self._namespace = namespace
        self._legacy = frozenset(legacy_store_names)

    @property
    def cache_version(self) -> str:
        return self._version

    def store_name(self, purpose: StorePurpose) -> str:
        return f"{self._version}-{purpose.value}"

    @property
    def store_names(self) -> list[str]:
        return [self.store_name(purpose) for purpose in StorePurpose]

    def is_stale(self, name: str) -> bool:
        """Check whether a store belongs to this application but not to this version."""
        if name in self._legacy:
            return True
        return name.startswith(f"{self._namespace}-") and not name.startswith(f"{self._version}-")

    async def ensure_generations(self) -> list[str]:
        """Create the current version's stores if absent.

        Returns:
            The current store names
        """
        names = self.store_names
        for name in names:
            await self._registry.open(name)
        logger.info("generations_ensured", version=self._version, stores=names)
        return names

    async def prune_stale(self) -> list[str]:
        """Delete stores from previous versions.

        Returns:
            Names of the deleted stores
        """
        deleted = []
        for name in await self._registry.keys():
            if not self.is_stale(name):
                continue
            logger.info("deleting_stale_store", store=name)
            if await self._registry.delete(name):
                deleted.append(name)
        return deleted

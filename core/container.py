"""
Dependency Injection Container.

Maps interfaces to implementations so routes and scripts resolve the same
store and service instances, and tests can swap them out.
"""

from typing import Any, Callable, Dict, Type, TypeVar

from core.logger import logger

T = TypeVar("T")


class Container:
    """
    Simple Dependency Injection Container.

    Supports:
    - Singleton instances (register)
    - Factory functions (register_factory)
    - Interface resolution (resolve)
    """

    _instances: Dict[Type, Any] = {}
    _providers: Dict[Type, Callable[[], Any]] = {}
    _initialized: bool = False

    @classmethod
    def register(cls, interface: Type[T], instance: Any) -> None:
        """Register a singleton instance for an interface."""
        cls._instances[interface] = instance

    @classmethod
    def register_factory(cls, interface: Type[T], factory: Callable[[], T]) -> None:
        """Register a factory; it is called on every resolve()."""
        cls._providers[interface] = factory

    @classmethod
    def resolve(cls, interface: Type[T]) -> T:
        """
        Resolve an interface to its implementation.

        Raises:
            KeyError: If no implementation is registered for the interface
        """
        if interface in cls._instances:
            return cls._instances[interface]
        if interface in cls._providers:
            return cls._providers[interface]()
        raise KeyError(f"No provider registered for {interface.__name__}")

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations (useful for testing)."""
        cls._instances.clear()
        cls._providers.clear()
        cls._initialized = False

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._initialized

    @classmethod
    def _mark_initialized(cls) -> None:
        cls._initialized = True


def bootstrap_container() -> None:
    """
    Initialize the dependency injection container.

    Registers all interface implementations:
    - IArtifactStore -> FilesystemArtifactStore
    - IAudioFetcher -> YtDlpFetcher
    - Mp3Service -> Mp3Service (singleton, with injected dependencies)

    This function is idempotent - calling it multiple times has no effect
    after the first successful initialization.
    """
    if Container.is_initialized():
        return

    logger.info("Bootstrapping dependency injection container...")

    try:
        from interfaces.artifact_store import IArtifactStore
        from interfaces.audio_fetcher import IAudioFetcher

        from infrastructure.filesystem.artifact_store import get_artifact_store
        from infrastructure.ytdlp.fetcher import get_ytdlp_fetcher

        from services.mp3_service import Mp3Service

        Container.register_factory(IArtifactStore, get_artifact_store)
        logger.info("Registered IArtifactStore -> FilesystemArtifactStore (factory)")

        Container.register_factory(IAudioFetcher, get_ytdlp_fetcher)
        logger.info("Registered IAudioFetcher -> YtDlpFetcher (factory)")

        # One service per process: the in-flight registry must be shared
        # by every request
        service = Mp3Service(
            store=Container.resolve(IArtifactStore),
            fetcher=Container.resolve(IAudioFetcher),
        )
        Container.register(Mp3Service, service)
        logger.info("Registered Mp3Service with DI (singleton)")

        Container._mark_initialized()
        logger.info("Dependency injection container bootstrapped successfully")

    except Exception as e:
        logger.error(f"Failed to bootstrap container: {e}")
        logger.exception("Container bootstrap error details:")
        raise


def get_artifact_store():
    """
    Get IArtifactStore implementation from container.

    Returns:
        IArtifactStore implementation
    """
    from interfaces.artifact_store import IArtifactStore

    if not Container.is_initialized():
        bootstrap_container()

    return Container.resolve(IArtifactStore)


def get_mp3_service():
    """
    Get Mp3Service from container.

    Returns:
        Mp3Service with injected dependencies
    """
    from services.mp3_service import Mp3Service

    if not Container.is_initialized():
        bootstrap_container()

    return Container.resolve(Mp3Service)

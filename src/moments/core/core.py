from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, cast

from moments.config import Config
from moments.core.store import DocumentStore, create_document_store
from moments.utils import epoch_seconds

if TYPE_CHECKING:
    from moments.core.modules.access.service import AccessService
    from moments.core.modules.credential.service import CredentialService
    from moments.core.modules.moment.service import MomentService
    from moments.core.modules.session.service import SessionService
    from moments.core.modules.token.service import TokenService
    from moments.core.modules.upload.service import UploadService

Clock = Callable[[], int]


class Service:
    """Base class for services sharing the application config."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry that automatically discovers and initializes services."""

    credential: CredentialService
    token: TokenService
    session: SessionService
    access: AccessService
    moment: MomentService
    upload: UploadService

    def __init__(self, config: Config) -> None:
        """Initialize all services automatically using service configuration."""
        self._services: list[Service] = []

        # Service configuration: (attribute_name, module_path, class_name)
        # Order matters: the token codec reads its signing key at construction
        service_configs = [
            ("credential", "moments.core.modules.credential.service", "CredentialService"),
            ("token", "moments.core.modules.token.service", "TokenService"),
            ("session", "moments.core.modules.session.service", "SessionService"),
            ("access", "moments.core.modules.access.service", "AccessService"),
            ("moment", "moments.core.modules.moment.service", "MomentService"),
            ("upload", "moments.core.modules.upload.service", "UploadService"),
        ]

        for attr_name, module_path, class_name in service_configs:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(config)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, clock, document store, and all service instances."""

    config: Config
    clock: Clock
    store: DocumentStore
    services: Services

    def __init__(self, config: Config, clock: Clock = epoch_seconds) -> None:
        """Initialize core with config, the document store, and auto-register services."""
        self.config = config
        self.clock = clock
        self.store = create_document_store(config)
        self.services = Services(config)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Start the document store and all services on application startup."""
        await self.store.start()
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the document store on shutdown."""
        await self.services.stop_all()
        await self.store.close()

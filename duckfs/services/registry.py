"""Service registry that wires all application services together."""
import logging

from duckfs.core.config import Settings
from duckfs.services.fs_accessor import FilesystemAccessor, LocalFilesystem
from duckfs.services.save_service import SaveService
from duckfs.services.traversal import TraversalEngine

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Container object for dependency injection."""

    def __init__(self, settings: Settings, *, filesystem: FilesystemAccessor | None = None) -> None:
        self.settings = settings
        self.filesystem = filesystem or LocalFilesystem()
        self.traversal_engine = TraversalEngine(
            self.filesystem,
            root=settings.root,
            logger=logging.getLogger("duckfs.traversal"),
        )
        self.save_service = SaveService(root=settings.root)

    async def startup(self) -> None:
        logger.info("Serving filesystem root %s", self.settings.root)

    async def shutdown(self) -> None:
        logger.info("Shutting down duckfs services")

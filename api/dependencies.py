"""
API Dependencies - Singleton state management and FastAPI dependency injection

Holds one Repository per registered record model for the lifetime of the
process. Repositories load their store lazily on first access.
"""

import logging
from contextlib import asynccontextmanager
from typing import Dict, Mapping, Optional

from fastapi import Depends

from recordstore.exceptions import UnknownRecordTypeError
from recordstore.models import MODELS
from recordstore.models.base import RecordModel
from recordstore.repository import Repository
from recordstore.settings import get_settings

logger = logging.getLogger(__name__)


class AppState:
    """
    Global application state - holds the repositories.

    Singleton pattern: one instance shared across all requests.
    """

    def __init__(self, models: Optional[Mapping[str, RecordModel]] = None):
        self.models: Dict[str, RecordModel] = dict(models if models is not None else MODELS)
        self.repositories: Dict[str, Repository] = {}
        self._initialized = False

    def initialize(self, data_root=None) -> None:
        """Create one repository per model, all sharing the same data root"""
        if self._initialized:
            logger.debug("AppState already initialized")
            return

        root = data_root if data_root is not None else get_settings().data_root
        logger.info(f"Creating repositories under {root}...")
        for resource, model in self.models.items():
            self.repositories[resource] = Repository(model, data_root=root)
            logger.info(f"Repository ready: {resource}")
        self._initialized = True

    def repository(self, resource: str) -> Repository:
        if resource not in self.repositories:
            raise UnknownRecordTypeError(resource)
        return self.repositories[resource]

    def get_status(self) -> dict:
        """Per-resource load status and record counts"""
        status = {}
        for resource, repo in self.repositories.items():
            records = repo.objects()
            result = repo.load_result
            status[resource] = {
                "status": result.status.value if result is not None else "not_loaded",
                "count": len(records),
                "error": str(result.error) if result is not None and result.error is not None else None,
            }
        return status

    def is_ready(self) -> bool:
        return self._initialized and all(
            repo.load_result is None or repo.load_result.ok
            for repo in self.repositories.values()
        )


# Global singleton instance
app_state = AppState()


def get_app_state() -> AppState:
    """
    FastAPI dependency to access app state.

    Usage in routers:
        @router.get("/example")
        def example(state: AppState = Depends(get_app_state)):
            repo = state.repository("contacts")
            ...
    """
    if not app_state._initialized:
        logger.warning("AppState not initialized, initializing now...")
        app_state.initialize()
    return app_state


def repository_dependency(resource: str):
    """Build a FastAPI dependency returning the repository for one resource"""

    def get_repository(state: AppState = Depends(get_app_state)) -> Repository:
        return state.repository(resource)

    get_repository.__name__ = f"get_{resource}_repository"
    return get_repository


@asynccontextmanager
async def lifespan_handler(app):
    """
    FastAPI lifespan context manager for startup/shutdown.

    Usage in main.py:
        app = FastAPI(lifespan=lifespan_handler)
    """
    logger.info("FastAPI starting up...")
    app_state.initialize()

    yield  # App is now running

    logger.info("FastAPI shutting down...")
    logger.info("Shutdown complete")

from contextlib import asynccontextmanager
import logging

from hireprep.core.config import settings
from hireprep.core.detection_config import get_detection_config
from hireprep.storage import get_kv_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = get_kv_store()
    store.warmup()
    get_detection_config()
    logger.info("storage_ready backend=%s", settings.storage_backend)
    yield
    store.close()

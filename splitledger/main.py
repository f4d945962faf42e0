import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from splitledger.api.v1.routes.system import router as system_router
from splitledger.api.v1.routes.user import router as user_router
from splitledger.api.v1.routes.group import router as group_router
from splitledger.api.v1.routes.expense import router as expense_router
from splitledger.core.config import settings
from splitledger.core.dependencies import open_stores
from splitledger.core.log_config import configure_logging
from splitledger.core.middleware import log_requests
from splitledger.db.session import init_models
from splitledger.services.recurring_services import run_recurring_loop

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()

    if settings.STORE_BACKEND == "sql":
        await init_models()

    task = None
    if settings.RECURRING_ENABLED:
        task = asyncio.create_task(run_recurring_loop(open_stores, settings.RECURRING_INTERVAL_SECONDS))

    logger.info("%s started with %s store", settings.APP_NAME, settings.STORE_BACKEND)
    yield

    if task:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

if settings.DEV_MODE:
    app.middleware("http")(log_requests)

@app.get("/")
async def root():
    return {"message": f"{settings.APP_NAME} is live"}

app.include_router(system_router, prefix="/api/v1/system")
app.include_router(user_router, prefix="/api/v1/users")
app.include_router(group_router, prefix="/api/v1/groups")
app.include_router(expense_router, prefix="/api/v1/groups")

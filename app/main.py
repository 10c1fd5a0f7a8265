import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.core.config import settings
from app.core.db_check import wait_for_db
from app.api.v1.routes.system import router as system_router
from app.api.v1.routes.expense import router as expense_router
from app.api.v1.routes.settlement import router as settlement_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    await wait_for_db()
    yield

app = FastAPI(title="Tabsplit Backend", lifespan=lifespan)

@app.get("/")
async def root():
    return {"message": "Tabsplit Backend is live"}

app.include_router(system_router, prefix="/api/v1/system")
app.include_router(expense_router, prefix="/api/v1/expenses")
app.include_router(settlement_router, prefix="/api/v1/settlements")

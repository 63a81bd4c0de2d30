from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from master_chef.api.generate import router as generate_router
from master_chef.api.recipes import router as recipes_router
from master_chef.api.ui import router as ui_router
from master_chef.core.config import get_settings
from master_chef.db.sqlite import init_db
from master_chef.i18n.translator import get_translator
from master_chef.services.generator_factory import get_generator

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    get_generator(settings)
    get_translator()
    init_db()
    yield


app = FastAPI(title="AI Master Chef", version="0.1.0", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
app.include_router(ui_router)
app.include_router(generate_router)
app.include_router(recipes_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}

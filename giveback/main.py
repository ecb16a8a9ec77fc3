import logging
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from jinja2 import Environment, FileSystemLoader
from starlette.responses import HTMLResponse

from giveback.config import settings
from giveback.database import async_session, engine
from giveback.models import Base
from giveback.services.listing_store import RestListingStore, SqlListingStore
from giveback.views import activity, listings, search

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # create tables on startup
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    client = None
    if settings.store_backend == "rest":
        client = httpx.AsyncClient(timeout=settings.search_timeout)
        app.state.listing_store = RestListingStore(client, settings.store_url, settings.store_api_key)
        logger.info("Searching listings through %s", settings.store_url)
    else:
        app.state.listing_store = SqlListingStore(async_session)
        logger.info("Searching listings in %s", settings.database_url)

    yield

    if client is not None:
        await client.aclose()
    await engine.dispose()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# templates
templates_dir = Path(__file__).parent / "templates"
app.state.templates = Environment(loader=FileSystemLoader(str(templates_dir)), autoescape=True)


def _template_response(self, name, context):
    template = self.get_template(name)
    html = template.render(**context)
    return HTMLResponse(html)


app.state.templates.TemplateResponse = lambda name, ctx: _template_response(app.state.templates, name, ctx)

# static files
static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

# routers
app.include_router(search.router)
app.include_router(listings.router)
app.include_router(activity.router)

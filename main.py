from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database

import config
from database import db, ensure_indexes, get_db
from errors import register_exception_handlers
from logging_config import configure_logging, get_logger
from routers import (
    admin,
    advertisements,
    alternatives,
    auth,
    discussions,
    github_stats,
    launches,
    newsletter,
    notifications,
    payments,
    profile,
    search,
    submissions,
    taxonomy,
    votes,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    try:
        ensure_indexes(db)
    except Exception as e:
        # The API still serves /test so a missing database can be diagnosed
        logger.error("ensure_indexes_failed", error=str(e)[:200])
    logger.info("api_started", env=config.ENV)
    yield


app = FastAPI(title="Open Source Alternatives API", lifespan=lifespan)

# Credentials are only allowed with an explicit origin list.
wildcard = config.CORS_ORIGINS == ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=not wildcard,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

for module in (
    auth,
    alternatives,
    launches,
    submissions,
    votes,
    discussions,
    notifications,
    advertisements,
    taxonomy,
    search,
    github_stats,
    payments,
    profile,
    newsletter,
    admin,
):
    app.include_router(module.router)


# Health
@app.get("/")
def read_root():
    return {"message": "Open Source Alternatives API running"}


@app.get("/test")
def test_database(database: Database = Depends(get_db)):
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if config.DATABASE_URL else "❌ Not Set",
        "database_name": None,
        "connection_status": "Not Connected",
        "collections": [],
    }
    try:
        response["database_name"] = database.name
        response["collections"] = database.list_collection_names()[:10]
        response["database"] = "✅ Available"
        response["connection_status"] = "Connected"
    except Exception as e:
        response["database"] = f"❌ Error: {str(e)[:80]}"
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)

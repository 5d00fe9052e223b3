import asyncio
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request #type: ignore
from fastapi.middleware.cors import CORSMiddleware #type: ignore
from fastapi.responses import JSONResponse #type: ignore

from music_analytics import config as cfg
from music_analytics.common import constants as const
from music_analytics.common.logger import get_logger
from music_analytics.core.database import Database, MongoQueryExecutor
from music_analytics.core.errors import ReportError

from music_analytics.api.royalty_api import router as royalty_router
from music_analytics.api.chart_api import router as chart_router
from music_analytics.api.user_api import router as user_router
from music_analytics.api.demographic_api import router as demographic_router

logger = get_logger("Analytics Main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting analytics API...")
    database = Database(cfg.MONGO_URI, cfg.MONGO_DB)

    for attempt in range(1, cfg.CONNECT_MAX_RETRIES + 1):
        try:
            logger.info(f"Connecting to MongoDB (attempt {attempt}/{cfg.CONNECT_MAX_RETRIES})...")
            await database.connect_to_mongo()
            break
        except Exception as e:
            logger.warning(f"MongoDB connection failed: {e}")
            database.close()
            if attempt == cfg.CONNECT_MAX_RETRIES:
                logger.error(f"CRITICAL: could not connect to MongoDB after {cfg.CONNECT_MAX_RETRIES} attempts.")
                raise
            logger.info(f"Retrying in {cfg.CONNECT_RETRY_DELAY}s...")
            await asyncio.sleep(cfg.CONNECT_RETRY_DELAY)

    await database.create_indexes()
    app.state.database = database
    app.state.executor = MongoQueryExecutor(database.db)
    logger.info(f"API ready on http://{cfg.API_HOST}:{cfg.API_PORT}")

    yield

    logger.info("Shutting down analytics API...")
    database.close()
    logger.info("MongoDB connection closed.")


app = FastAPI(
    title=const.API_NAME,
    version=const.API_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cfg.CORS_ALLOW_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(ReportError)
async def report_error_handler(request: Request, exc: ReportError):
    if exc.code >= 500:
        logger.error(f"{request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.code, content=exc.to_envelope())


app.include_router(royalty_router, prefix="/api/royalties", tags=["Royalties"])
app.include_router(chart_router, prefix="/api/charts", tags=["Charts"])
app.include_router(user_router, prefix="/api/users", tags=["Users"])
app.include_router(demographic_router, prefix="/api/demographics", tags=["Demographics"])


@app.get("/", tags=["Catalog"])
async def endpoint_catalog():
    return {
        "name": const.API_NAME,
        "version": const.API_VERSION,
        "endpoints": const.ENDPOINT_CATALOG,
    }


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    database = getattr(request.app.state, "database", None)
    mongo_up = database is not None and await database.ping()
    return {"status": "ok" if mongo_up else "degraded", "mongodb": "up" if mongo_up else "down"}


if __name__ == "__main__":
    import uvicorn #type: ignore

    uvicorn.run("music_analytics.main:app", host=cfg.API_HOST, port=cfg.API_PORT)

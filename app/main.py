import logging
from contextlib import asynccontextmanager
from logging.config import dictConfig

from fastapi import FastAPI

from app.config import LogConfig, config
from app.dependencies.database import close_db, init_db
from app.exceptions.handlers import register_exception_handlers
from app.middlewares.middlewares import setup_middlewares
from app.routers import books, users, wishlist

dictConfig(LogConfig(LOG_LEVEL=config.LOG_LEVEL).model_dump())
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup, dispose of it on shutdown"""

    try:
        await init_db()
        logger.info("✅ Database is ready")

        yield

    except Exception as e:
        logger.error(f"❌ Error while starting the server: {e}")
        raise e

    finally:
        await close_db()
        logger.info("🔴 Database connection closed")


app = FastAPI(
    lifespan=lifespan,
    title="Library API",
    description="Books, users and wishlists with availability notifications",
    version="1.0",
)

setup_middlewares(app)
register_exception_handlers(app)

app.include_router(books.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(wishlist.router, prefix="/api")


@app.get("/server-status", tags=["Health"])
async def server_status():
    return {"status": "OK", "message": "Server is running"}


logger.info("✅ Library API successfully started!")

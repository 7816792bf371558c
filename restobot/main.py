# restobot/main.py
# Main app setup

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from restobot.api.routes import chat, health, imports, restaurants
from restobot.config import get_settings
from restobot.services.store import get_restaurant_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run when app starts and stops
    # Setup: create storage folder and load restaurants
    settings = get_settings()
    settings.STORAGE_DIR.mkdir(parents=True, exist_ok=True)
    get_restaurant_store()
    yield


def create_app() -> FastAPI:
    # Create the FastAPI app
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    # Configure CORS; the chat widget is embedded on restaurant sites
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register API routes
    app.include_router(health.router)
    app.include_router(restaurants.router)
    app.include_router(chat.router)
    app.include_router(imports.router)

    return app


# Create the app instance
app = create_app()


@app.get("/")
async def root():
    # Basic info endpoint
    settings = get_settings()
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("restobot.main:app", host="0.0.0.0", port=8000, reload=True)

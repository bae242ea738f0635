import asyncio
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from app import config
from app.database import AsyncSessionLocal, init_models
from app.error_handlers import setup_error_handlers
from app.limiter import limiter
from app.routes import (
    auth, writing_routes, interaction_routes, user_routes, challenge_routes,
    notification_routes, admin_routes, category_routes,
)
from app.seed import seed_demo_data
from app.storage import Storage

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Pencraft API")

# Rate limiting setup
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

setup_error_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    status_code = 500  # stays 500 if the app raises
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method, request.url.path, status_code, elapsed_ms,
        )


# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include the routers
app.include_router(auth.router)
app.include_router(writing_routes.router)
app.include_router(interaction_routes.router)
app.include_router(user_routes.router)
app.include_router(challenge_routes.router)
app.include_router(notification_routes.router)
app.include_router(admin_routes.router)
app.include_router(category_routes.router)


# Run DB init on startup
@app.on_event("startup")
async def on_startup():
    # Tiny retry so a momentary DB disconnect doesn't crash the app.
    for attempt in range(2):
        try:
            await init_models()
            break  # success
        except Exception as e:
            if attempt == 0:
                logger.warning("DB init failed, retrying once: %r", e)
                await asyncio.sleep(0.5)
            else:
                # Tables should already exist from previous runs.
                logger.error("Skipping DB init due to error: %r", e)
                return

    if config.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            await seed_demo_data(Storage(session), config.ADMIN_PASSWORD)

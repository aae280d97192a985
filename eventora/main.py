import os
from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from eventora.api.routes import (
    ai as ai_router,
    events as events_router,
    health as health_router,
    preferences as preferences_router,
    registrations as registrations_router,
)
from eventora.cache import cache
from eventora.core.config import settings
from eventora.core.errors import register_exception_handlers
from eventora.core.http import close_http_client
from eventora.core.logging import logger
from eventora.core.rate_limit import limiter
from eventora.db.session import engine, init_models
from eventora.middleware.security_headers import SecurityHeadersMiddleware

app = FastAPI(title="Eventora API")

# Add rate limiter to app state
app.state.limiter = limiter
register_exception_handlers(app)

app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

api_router = APIRouter(prefix="/api")
api_router.include_router(ai_router.router)
# registrations first: /events/my-registrations must win over /events/{event_id}
api_router.include_router(registrations_router.router)
api_router.include_router(events_router.router)
api_router.include_router(preferences_router.router)

app.include_router(api_router)
app.include_router(health_router.router)

app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


@app.on_event("startup")
async def on_startup():
    os.makedirs(os.path.join(settings.UPLOAD_DIR, "events"), exist_ok=True)
    await init_models()
    logger.info(f"Eventora API started ({settings.ENVIRONMENT})")


@app.on_event("shutdown")
async def on_shutdown():
    await close_http_client()
    await cache.close()
    await engine.dispose()
    logger.info("Eventora API stopped")

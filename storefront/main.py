import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.core.config import settings
from storefront.core.exceptions import AppException
from storefront.core.logging_config import setup_logging
from storefront.database.connection import Base, engine
from storefront.middleware.geo import GeoMiddleware
from storefront.routes import system
from storefront.routes.auth import router as auth_router
from storefront.routes.cart import router as cart_router
from storefront.routes.contact import router as contact_router
from storefront.routes.ornaments import router as ornament_router
from storefront.routes.pricing import router as pricing_router
from storefront.routes.tracking import router as tracking_router

# register every table on Base before create_all
from storefront.models import cart, ornament, pricing_config, tracking_log, user  # noqa: F401

logger = logging.getLogger("storefront")

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Jewelry Storefront API")

app.add_middleware(GeoMiddleware)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(auth_router)
app.include_router(ornament_router)
app.include_router(pricing_router)
app.include_router(cart_router)
app.include_router(contact_router)
app.include_router(tracking_router)
app.include_router(system.router)

@app.on_event("startup")
async def startup_event():
    setup_logging(settings.LOG_LEVEL)
    app.state.start_time = datetime.utcnow()
    logger.info("Storefront API started")

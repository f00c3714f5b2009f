from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
import logging
import time

from .api.routes.auth import router as auth_router
from .api.routes.users import router as users_router
from .api.routes.appointments import router as appointments_router
from .core.config import settings
from .core.database import init_db
from .core.exceptions import CarebookError

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables before the first request is served."""
    init_db()
    logger.info(f"{settings.APP_NAME} {settings.VERSION} ready")
    yield

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Appointment booking for patients, doctors and administrators",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if not settings.TESTING:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started
    response.headers["X-Process-Time"] = f"{elapsed:.4f}"
    logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed:.4f}s")
    return response

@app.exception_handler(CarebookError)
async def carebook_error_handler(request: Request, exc: CarebookError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.name},
    )

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400, reported in the same shape as service errors."""
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in errors
    )
    return JSONResponse(
        status_code=400,
        content={
            "detail": message or "Invalid request",
            "error": "ValidationError",
            "errors": jsonable_encoder(errors),
        },
    )

app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(appointments_router, prefix=settings.API_PREFIX)

@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.VERSION}

@app.get(f"{settings.API_PREFIX}/info")
async def api_info():
    return {
        "name": settings.APP_NAME,
        "version": settings.VERSION,
        "endpoints": {
            "authentication": f"{settings.API_PREFIX}/auth",
            "users": f"{settings.API_PREFIX}/users",
            "appointments": f"{settings.API_PREFIX}/appointments",
        },
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("carebook.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)

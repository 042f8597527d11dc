# growgraph/main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from growgraph.api import router as api_router
from growgraph.core.config import settings
from growgraph.core.exceptions import NodeNotFoundException, SessionNotFoundException, UnknownParentError
from growgraph.core.limiter import limiter

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup Logic ---
    api_router.get_advisor()
    logger.info("Career service client ready (%s).", settings.CAREER_API_URL)
    try:
        yield
    finally:
        # --- Shutdown Logic ---
        await api_router.close_advisor()
        logger.info("Closed career service client.")


app = FastAPI(
    title="GrowGraph API",
    description="Builds and expands a career exploration mind map.",
    version="1.0.0",
    lifespan=lifespan
)

# Add Limiter to the application state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Exempt all OPTIONS requests from rate limiting to prevent CORS preflight issues
app.state.limiter.exempt_methods = ["OPTIONS"]

allowed_origins = [
    "http://localhost:3000",
    "http://localhost:8000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Content-Type", "X-User-ID"],
)

@app.exception_handler(NodeNotFoundException)
async def node_not_found_exception_handler(request: Request, exc: NodeNotFoundException):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": exc.message},
    )

@app.exception_handler(UnknownParentError)
async def unknown_parent_exception_handler(request: Request, exc: UnknownParentError):
    logger.error("Attempted to attach a child to missing parent '%s'.", exc.parent_id)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": exc.message},
    )

@app.exception_handler(SessionNotFoundException)
async def session_not_found_exception_handler(request: Request, exc: SessionNotFoundException):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": exc.message},
    )

app.include_router(api_router.router)

@app.get("/")
async def root():
    return {"message": "Welcome to the GrowGraph API"}

@app.get("/healthz", tags=["Health"], status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "ok"}

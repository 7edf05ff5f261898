import os
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from db import Base, engine
from guidance.errors import GuidanceError
from guidance.models import GuidanceProgram  # noqa: F401  registers the table
from guidance.routes import router as guidance_router, error_response

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: make sure guidance_program exists
    try:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ready")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
    yield


app = FastAPI(
    title="Career Namibia Guidance API",
    description="Matches Namibian secondary school results to UNAM, NUST and IUM programs",
    version="1.0.0",
    lifespan=lifespan,
)

allowed_origins = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]
logger.info(f"CORS allowed origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Malformed input is a 400 with the shared error envelope
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return error_response(400, "Invalid request", jsonable_encoder(details))


@app.exception_handler(GuidanceError)
async def guidance_exception_handler(request: Request, exc: GuidanceError):
    return error_response(exc.status_code, exc.message, exc.details)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


app.include_router(guidance_router)


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok", "service": "career-guidance", "version": "1.0.0"}

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from db import upgrade_schema

# Routers
from routers.attempts import router as attempts_router
from routers.grading import router as grading_router
from routers.health import router as health_router
from routers.problems import router as problems_router

logger = logging.getLogger("arith-practice")
logging.basicConfig(level=logging.INFO)

_DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"
CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", _DEFAULT_ORIGINS).split(",") if o.strip()
]
AUTO_MIGRATE = os.getenv("AUTO_MIGRATE", "1") not in ("0", "false", "False", "")

if AUTO_MIGRATE:
    try:
        upgrade_schema()
    except Exception:
        logger.exception("Schema upgrade failed; storage endpoints may be unavailable")

app = FastAPI(title="Arithmetic Practice – Generation & Grading API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "x-api-key", "x-admin-token"],
)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(problems_router)  # /problems/generate, /problems/sets/...
app.include_router(grading_router)  # /evaluate, /grade, /grade-batch
app.include_router(attempts_router)  # /attempts/...
app.include_router(health_router)  # /health/...

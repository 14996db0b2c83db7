from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .errors import LedgerError
from .log import configure_logging
from .routers import dashboard, shares, transactions
from .services.overdue import SessionFlagStore

settings = get_settings()
logger = configure_logging(settings)

app = FastAPI(title=settings.app_name)
app.state.session_flags = SessionFlagStore(
    maxsize=settings.session_flag_max_entries,
    ttl=settings.session_flag_ttl_seconds,
)

# CORS: allow web origin for dev
allowed_origins = {str(settings.app_url), "http://localhost:3000", "http://127.0.0.1:3000"}
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "service": settings.app_name,
        "env": settings.app_env,
    }

# Routers
app.include_router(transactions.router)
app.include_router(shares.router)
app.include_router(dashboard.router)

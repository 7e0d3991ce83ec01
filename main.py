import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from routers import invoices_router, lease_fees_router, usage_router
from services.exceptions import (
    BillingError,
    DuplicateInvoiceError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# App instance
app = FastAPI(title="Rentify Billing API")

# CORS
origins = [origin for origin in settings.CORS_ORIGINS.split(",") if origin]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Billing error -> HTTP status
ERROR_STATUS_CODES = {
    NotFoundError: 404,
    InvalidStateError: 409,
    DuplicateInvoiceError: 409,
    ValidationError: 400,
}


@app.exception_handler(BillingError)
async def billing_exception_handler(request: Request, exc: BillingError):
    status_code = 400
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    logger.info("%s %s -> %s: %s", request.method, request.url.path, status_code, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.get("/api/health")
def health():
    return {"status": "ok"}


app.include_router(invoices_router)
app.include_router(lease_fees_router)
app.include_router(usage_router)

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=True)

# billboard_billing/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from billboard_billing.api.billing import router as billing_router
from billboard_billing.api.contracts import router as contracts_router
from billboard_billing.api.customers import router as customers_router
from billboard_billing.api.payments import router as payments_router
from billboard_billing.api.rate_card import router as rate_card_router
from billboard_billing.config import configure_logging
from billboard_billing.errors import NotFoundError, StorageError, ValidationError

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Billboard Rentals Billing API",
    version="0.1.0",
)


@app.exception_handler(ValidationError)
def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc), "field": exc.field})


@app.exception_handler(NotFoundError)
def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StorageError)
def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})


@app.get("/health")
def health_check():
    return {"status": "ok"}

app.include_router(customers_router)
app.include_router(contracts_router)
app.include_router(rate_card_router)
app.include_router(payments_router)
app.include_router(billing_router)

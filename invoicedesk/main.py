from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from invoicedesk.api.auth import router as auth_router
from invoicedesk.api.customers import router as customers_router
from invoicedesk.api.dashboard import router as dashboard_router
from invoicedesk.api.invoices import router as invoices_router
from invoicedesk.config import configure_logging, get_settings
from invoicedesk.errors import DataAccessError

configure_logging()

settings = get_settings()

app = FastAPI(
    title="invoicedesk dashboard API",
    version=settings.api_version,
)


@app.exception_handler(DataAccessError)
def data_access_error_handler(request: Request, exc: DataAccessError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.get("/health")
def health_check():
    return {"status": "ok"}

app.include_router(auth_router)
app.include_router(customers_router)
app.include_router(dashboard_router)
app.include_router(invoices_router)

import logging

from fastapi import FastAPI

from packing_forecast.api.v1.router import api_router
from packing_forecast.core.config import get_settings


app = FastAPI(title="Packing Plant Stock Forecast")
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def _startup_event() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.get("/")
def root():
    return {"status": "ok", "message": "Stock forecast backend running"}

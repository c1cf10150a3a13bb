# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: main.py
# -----------------------------------------------------------------------------
import logging
import os

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.routers import embeddings, health, ledger, query, search

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
logger = logging.getLogger(__name__)

app = FastAPI(title="HSK RAG API")
app.include_router(health.router)
app.include_router(query.router)
app.include_router(search.router)
app.include_router(ledger.router)
app.include_router(embeddings.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=os.getenv("HSK_API_HOST", "127.0.0.1"),
        port=int(os.getenv("HSK_API_PORT", "8000")),
        log_level="info",
        reload=False,
    )

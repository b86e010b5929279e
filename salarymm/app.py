import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salarymm.core.regulation import get_regulation
from salarymm.routes import calc, employees, payroll, reports

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    logging.basicConfig(level=os.getenv("SALARYMM_LOG_LEVEL", "INFO").upper(), format=LOG_FORMAT)

    app = FastAPI(title="SalaryMM Payroll API", version="0.1.0")

    # fail at start-up rather than on the first payroll run
    regulation = get_regulation()
    logger.info("Using regulation %s (effective %s)", regulation.version, regulation.effective_from)

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(calc.router, prefix="/api")
    app.include_router(employees.router, prefix="/api")
    app.include_router(payroll.router, prefix="/api")
    app.include_router(reports.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "SalaryMM Payroll API",
                "docs": "/docs",
                "regulation": regulation.version,
            }
        )

    return app


app = create_app()

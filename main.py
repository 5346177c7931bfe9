from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from core.config_loader import settings
from core.logging_config import setup_logging

from availability.router import availability_router
from mastercalendar.router import master_calendar_router
from worker.router import worker_router
from workeravailability.router import worker_availability_router
from job.router import job_router
from assignment.router import assignment_router
from quote.router import quote_router
import models_bootstrap

setup_logging()

openapi_tags = [
    {
        "name": "Availability",
        "description": "Bookable dates and slots",
    },
    {
        "name": "Health Checks",
        "description": "Application health checks",
    }
]

app = FastAPI(title="Trades availability service", openapi_tags=openapi_tags)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(availability_router, prefix="/api")
app.include_router(master_calendar_router, prefix="/api")
app.include_router(worker_availability_router, prefix="/api")
app.include_router(worker_router, prefix="/api")
app.include_router(job_router, prefix="/api")
app.include_router(assignment_router, prefix="/api")
app.include_router(quote_router, prefix="/api")


@app.get("/health", tags=['Health Checks'])
def read_root():
    return {"health": "true"}

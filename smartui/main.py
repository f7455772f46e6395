"""
FastAPI application entrypoint.

Serves scenario validation so editors can check a scenario before it
is committed to a suite directory. Running scenarios is done by the
``smartui run`` command, not over HTTP.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartui.api.scenarios import router as scenarios_router
from smartui.core.logging import configure_logging

configure_logging()

app = FastAPI(title="Smart UI Test Runner")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(scenarios_router)

from __future__ import annotations

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator


def instrument_metrics(app: FastAPI, endpoint: str = "/metrics") -> None:
    Instrumentator(excluded_handlers=[endpoint]).instrument(app).expose(app, endpoint=endpoint)

"""
api/main.py — FastAPI application for the piano tuner.

Run with:
    uvicorn api.main:app --reload

Routes:
    /tuner/*   — block analysis, sensitivity, file analysis (api/routes/tuner.py)
    /health    — liveness
    /metrics   — Prometheus exposition
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from api.routes.tuner import router as tuner_router
from infrastructure.metrics import get_metrics_response

# Browser tuner pages on the usual dev-server ports. localhost and 127.0.0.1
# are distinct origins to a browser.
TUNER_UI_ORIGINS: list[str] = [
    f"http://{host}:{port}" for port in (3000, 5173) for host in ("localhost", "127.0.0.1")
]

app = FastAPI(title="Piano Tuner")

app.add_middleware(
    CORSMiddleware,
    allow_origins=TUNER_UI_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["*"],
)

app.include_router(tuner_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Return a simple liveness check."""
    return {"status": "ok"}


@app.get("/metrics")
def metrics() -> Response:
    """Tuner metrics in Prometheus text exposition format."""
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)

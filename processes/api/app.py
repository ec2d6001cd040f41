from __future__ import annotations

import json
import logging
import time
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Response

from processes.api.models import ErrorResponse, OptimizeRequest, OptimizeResponse
from processes.partition.adapter import build_report
from processes.partition.types import DebugOptions, PartitionError

app = FastAPI()

logger = logging.getLogger("processes.api")


@app.get("/health")  # type: ignore[misc]
def health() -> dict[str, Any]:
    t0 = time.time()
    logger.info(json.dumps({"event": "api_enter", "endpoint": "/health"}))
    out = {
        "ok": True,
        "version": "0.1.0",
        "time": datetime.now(UTC).isoformat(),
    }
    dt = time.time() - t0
    logger.info(json.dumps({"event": "api_exit", "endpoint": "/health", "dt_s": round(dt, 6)}))
    return out


@app.post(
    "/optimize",
    response_model=OptimizeResponse | ErrorResponse,
)  # type: ignore[misc]
def optimize_groups(
    req: OptimizeRequest, response: Response
) -> OptimizeResponse | ErrorResponse:
    t0 = time.time()
    entities = req.entities if req.entities is not None else list(req.matrix.keys())
    logger.info(
        json.dumps(
            {
                "event": "api_enter",
                "endpoint": "/optimize",
                "entities": len(entities),
                "max_groups": req.max_groups,
            }
        )
    )
    debug = DebugOptions.from_dict(req.debug.model_dump() if req.debug else None)
    try:
        report = build_report(entities, req.matrix, req.max_groups, debug)
    except PartitionError as e:
        response.status_code = 400
        logger.error(
            json.dumps(
                {
                    "event": "api_error",
                    "endpoint": "/optimize",
                    "code": e.code.value,
                    "detail": e.message,
                }
            )
        )
        return ErrorResponse(error=e.code.value, detail=e.message)

    dt = time.time() - t0
    logger.info(
        json.dumps(
            {
                "event": "api_exit",
                "endpoint": "/optimize",
                "dt_s": round(dt, 6),
                "total_score": report["total_score"],
                "is_optimal": report["is_optimal"],
            }
        )
    )
    return OptimizeResponse(**report)

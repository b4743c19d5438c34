from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request

from kurswatch.models import history_to_json
from kurswatch.services.runtime import Runtime

"""Rates router: JSON views of the history and a manual refresh trigger.

Endpoints:
    - GET /rates/history  -> full history, oldest first
    - GET /rates/latest   -> newest snapshot (404 when empty)
    - POST /rates/refresh -> run one fetch/reconcile cycle now
"""

router = APIRouter(prefix="/rates", tags=["rates"])


def get_runtime(request: Request) -> Runtime:
    return request.app.state.runtime


@router.get("/history", summary="Current rate history")
async def get_history(rt: Runtime = Depends(get_runtime)) -> List[Dict[str, Any]]:
    return history_to_json(rt.state.current)


@router.get("/latest", summary="Most recent snapshot")
async def get_latest(rt: Runtime = Depends(get_runtime)) -> Dict[str, Any]:
    history = rt.state.current
    if not history:
        raise HTTPException(status_code=404, detail="no rates recorded yet")
    return history[-1].to_json()


@router.post("/refresh", summary="Fetch and reconcile rates now")
async def refresh(rt: Runtime = Depends(get_runtime)) -> Dict[str, Any]:
    result = await rt.pipeline.run_once()
    if result is None:
        return {"status": "failed", "action": None, "entries": len(rt.state.current)}
    return {
        "status": "changed" if result.changed else "unchanged",
        "action": result.action,
        "entries": len(result.history),
    }

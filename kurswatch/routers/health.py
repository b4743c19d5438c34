from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    rt = request.app.state.runtime
    return {
        "status": "ok",
        "entries": len(rt.state.current),
        "subscribers": rt.notifier.subscriber_count,
        "scheduler_running": rt.scheduler.running,
        "persist_pending": rt.state.dirty,
    }

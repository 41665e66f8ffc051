from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    """Liveness check, with the mail transport in use."""
    dispatcher = getattr(request.app.state, "dispatcher", None)
    return {
        "status": "ok",
        "mail_transport": dispatcher.transport.name if dispatcher else None,
    }

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/_healthz", response_class=PlainTextResponse, summary="Liveness probe")
async def healthz() -> str:
    return "SERVING"

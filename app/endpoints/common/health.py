# app/endpoints/common/health.py
from fastapi import APIRouter

router = APIRouter()


@router.get("/health", summary="Liveness probe")
def health():
    return {"status": "ok"}

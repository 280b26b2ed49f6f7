from fastapi import APIRouter

from resume_builder.db import store

router = APIRouter()


@router.get("/health", summary="Health Check", description="Report service status and the current server time.")
async def health_check():
    return {"status": "healthy", "timestamp": store.utc_now_iso()}

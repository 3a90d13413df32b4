from fastapi import APIRouter

from mwalimu.modules.assistant import router as assistant_router
from mwalimu.modules.auth import router as auth_router
from mwalimu.modules.dashboard import router as dashboard_router
from mwalimu.modules.schools import router as schools_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(schools_router, prefix="/schools", tags=["Schools"])

api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])

api_router.include_router(assistant_router, prefix="/assistant", tags=["Assistant"])

from fastapi import APIRouter

from schoolcms.modules.careers import router as careers_router

api_router = APIRouter()

api_router.include_router(careers_router, prefix="/careers", tags=["Careers"])

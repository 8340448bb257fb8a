from fastapi import APIRouter

from unidoxia.modules.applications.router import router as applications_router
from unidoxia.modules.profiles.router import router as profiles_router
from unidoxia.modules.reviews.router import router as reviews_router
from unidoxia.modules.universities.router import router as universities_router

api_router = APIRouter()

api_router.include_router(applications_router, prefix="/applications", tags=["Applications"])

api_router.include_router(reviews_router, prefix="/applications", tags=["Reviews"])

api_router.include_router(universities_router, prefix="/universities", tags=["Universities"])

api_router.include_router(profiles_router, prefix="/profiles", tags=["Profiles"])

from fastapi import APIRouter

from app.modules.auth import router as auth_router
from app.modules.leaving_certificates import router as leaving_certificates_router
from app.modules.schools.router import router as schools_router
from app.modules.students.router import router as students_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(schools_router, prefix="/schools", tags=["Schools"])

api_router.include_router(students_router, prefix="/students", tags=["Students"])

api_router.include_router(
    leaving_certificates_router,
    prefix="/lc",
    tags=["Leaving Certificates"],
)

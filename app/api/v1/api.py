# Router aggregator
from fastapi import APIRouter
from app.api.v1.endpoints.auth import auth_router
from app.api.v1.endpoints.admin import admin_users_router
from app.api.v1.endpoints.admin import admin_directory_router
from app.api.v1.endpoints.faculty import faculty_router
from app.api.v1.endpoints.student import student_router
from app.api.v1.endpoints.notice_upload import admin_notice_router
from app.api.v1.endpoints.notice_upload import faculty_notice_router
from app.api.v1.endpoints.notice_upload import student_notice_router
from app.api.v1.endpoints.reply import reply_router


api_router = APIRouter()

api_router.include_router(auth_router.router)
api_router.include_router(admin_users_router.router)
api_router.include_router(admin_directory_router.router)
api_router.include_router(admin_notice_router.router)
api_router.include_router(faculty_router.router)
api_router.include_router(faculty_notice_router.router)
api_router.include_router(student_router.router)
api_router.include_router(student_notice_router.router)
api_router.include_router(reply_router.router)

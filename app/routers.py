# app/routers.py
from fastapi import FastAPI

# common
from app.endpoints.common.health import router as health
from app.endpoints.common.leaderboard import router as leaderboard

# admin
from app.endpoints.admin.submission import router as admin_submission
from app.endpoints.admin.users import router as admin_users

# user
from app.endpoints.user.me import router as me
from app.endpoints.user.submission import router as user_submission


def register_routers(app: FastAPI) -> None:
    app.include_router(health,            prefix="",             tags=["util"])
    app.include_router(leaderboard,       prefix="/leaderboard", tags=["leaderboard"])

    # ==============================
    # User
    # ==============================
    app.include_router(me,                prefix="/me",          tags=["user/me"])
    app.include_router(user_submission,   prefix="/submissions", tags=["user/submissions"])

    # ==============================
    # Admin
    # ==============================
    app.include_router(admin_submission,  prefix="/submissions", tags=["admin/submissions"])
    app.include_router(admin_users,       prefix="/users",       tags=["admin/users"])

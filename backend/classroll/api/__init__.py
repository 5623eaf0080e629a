"""
API router
Объединяет все endpoint'ы
"""

from fastapi import APIRouter
from classroll.api.endpoints import students, classes

api_router = APIRouter()

# Include все routers
api_router.include_router(students.router, prefix="/students", tags=["students"])
api_router.include_router(classes.router, prefix="/classes", tags=["classes"])

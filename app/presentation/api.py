from fastapi import APIRouter

from app.presentation.routers.enquiry import router as enquiry_router
from app.presentation.routes.health import router as health_router

api = APIRouter()

# Paths are kept unversioned: existing front-ends post to /send
routers = (health_router, enquiry_router)
for router in routers:
    api.include_router(router)

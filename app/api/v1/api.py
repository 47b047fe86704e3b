from fastapi import APIRouter
from app.api.v1.endpoints import backup, databases, entities, health, sync

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])

# Registry routes must be registered before the generic /{database_id}/{kind} routes
api_router.include_router(databases.router, prefix="/databases", tags=["databases"])
api_router.include_router(entities.router, prefix="/databases", tags=["entities"])

# Bulk transfer
api_router.include_router(sync.router, prefix="/sync", tags=["sync"])
api_router.include_router(backup.router, prefix="/backup", tags=["backup"])

from fastapi import APIRouter
from api.sync_routes import router as sync_router

router = APIRouter()

# Cron triggers: /api/cron/...
router.include_router(sync_router, prefix="/cron", tags=["Sync"])

from fastapi import APIRouter
from .scheduler_router import router as scheduler_router
from .notification_router import router as notification_router

# Router principal que agrupa todos os endpoints de notificações
router = APIRouter(
    prefix="/api/notifications",
    tags=["API - Notifications"]
)

# Rotas fixas antes das rotas com /{notification_id}
router.include_router(scheduler_router)
router.include_router(notification_router)

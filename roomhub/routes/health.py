"""
Module routes/health.py
Rôle:
- Endpoint de santé (service OK + compteurs rooms/joueurs/connexions).
"""
from fastapi import APIRouter

from roomhub.config.settings import settings
from roomhub.services.coordinator import COORDINATOR
from roomhub.services.ws_manager import HUB

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Renvoie un OK avec le nom de service configuré et l'activité en cours."""
    return {
        "ok": True,
        "service": settings.APP_NAME,
        **COORDINATOR.stats(),
        "connections": HUB.stats()["connections_total"],
    }

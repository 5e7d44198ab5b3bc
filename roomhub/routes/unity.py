"""
Module routes/unity.py
Rôle:
- Points d'injection HTTP utilisés par le client Unity pour diffuser des
  événements externes à toutes les connexions WS.

Routes:
- POST /victory : diffuse `game:victory` (protégé par `unity_required`).
- POST /timer   : diffuse `timer:update` (timeLeft, minutes, seconds, isRunning).

Les deux répondent immédiatement {success: true}; la diffusion est
"fire-and-forget" et porte un timestamp serveur en millisecondes.
"""
import logging
import time

from fastapi import APIRouter, Depends

from roomhub.deps.auth import unity_required
from roomhub.models.event import TimerPayload
from roomhub.services.ws_manager import HUB

logger = logging.getLogger(__name__)

router = APIRouter(tags=["unity"])

VICTORY_MESSAGE = "Vous avez gagné!"


def _now_ms() -> int:
    return int(time.time() * 1000)


@router.post("/victory", dependencies=[Depends(unity_required)])
async def victory():
    """Signal de victoire envoyé par Unity → broadcast à tous les clients."""
    logger.info("victory signal received from Unity")
    HUB.broadcast("game:victory", {"message": VICTORY_MESSAGE, "timestamp": _now_ms()})
    return {"success": True, "message": "Message de victoire diffusé"}


@router.post("/timer")
async def timer(payload: TimerPayload):
    """Tick de chrono Unity → `timer:update` pour tous les clients."""
    data = payload.model_dump(by_alias=True)
    data["timestamp"] = _now_ms()
    HUB.broadcast("timer:update", data)
    return {"success": True, "message": "Timer diffusé"}

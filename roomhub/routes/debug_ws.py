# roomhub/routes/debug_ws.py
"""
Module routes/debug_ws.py
Rôle:
- Utilitaires de debug (montés seulement si `settings.DEBUG_ROUTES`):
  - Carte des connexions / canaux WS.
  - Rosters de toutes les rooms ouvertes.
  - Fermeture forcée de toutes les sockets.
"""
from typing import Any, Dict

from fastapi import APIRouter

from roomhub.services.coordinator import COORDINATOR
from roomhub.services.ws_manager import HUB

router = APIRouter(prefix="/debug", tags=["debug-ws"])


@router.get("/ws/peers")
def ws_peers() -> Dict[str, Any]:
    """Carte des connexions WS et des canaux."""
    return HUB.stats()


@router.get("/rooms")
def rooms() -> Dict[str, Any]:
    """Rooms ouvertes et leurs rosters."""
    return {"rooms": COORDINATOR.snapshot()}


@router.post("/ws/close_all")
async def close_all():
    """Ferme toutes les sockets (le nettoyage des rooms suit la déconnexion)."""
    stats = await HUB.close_all()
    return {"ok": True, "stats": stats}

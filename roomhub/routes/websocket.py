# roomhub/routes/websocket.py
"""
WebSocket endpoint.

- /ws : canal unique des clients (Unity + guides).
  - À l'ouverture : {"type":"connected","payload":{"socketId": "..."}}.
  - Trames entrantes : {"type", "payload", "ack"?, "to"?}.
  - Réponse aux opérations avec ack : {"type":"ack","ack": <id>, "payload": {...}}.
  - À la fermeture : nettoyage joueur / room / annuaire guides (une seule fois).
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket
from pydantic import ValidationError

from roomhub.config.settings import settings
from roomhub.models.event import Frame
from roomhub.services.coordinator import COORDINATOR
from roomhub.services.dispatcher import UnknownEvent, dispatch
from roomhub.services.io_utils import loads_text
from roomhub.services.relay import RELAY
from roomhub.services.ws_manager import HUB

logger = logging.getLogger(__name__)

router = APIRouter()


def _frame_size(raw: str | bytes) -> int:
    return len(raw.encode("utf-8")) if isinstance(raw, str) else len(raw)


@router.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    """
    Boucle d'écoute des clients.
    - Trames non JSON ou trop grosses -> ignorées.
    - Type inconnu -> trame "error".
    """
    cid = await HUB.connect(ws)
    logger.info("client connected: %s", cid)
    HUB.send_to_one(cid, "connected", {"socketId": cid})
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""

            if _frame_size(raw) > settings.MAX_MESSAGE_BYTES:
                logger.warning("oversized frame from %s dropped", cid)
                continue
            msg = loads_text(raw)
            if not isinstance(msg, dict):
                # Message non JSON -> ignore
                continue
            try:
                frame = Frame.model_validate(msg)
            except ValidationError:
                HUB.send_raw(cid, {"type": "error", "error": "invalid frame"})
                continue

            try:
                result = dispatch(COORDINATOR, RELAY, cid, frame)
            except UnknownEvent:
                HUB.send_raw(cid, {"type": "error", "error": "unknown event", "received": frame.type})
                continue
            if frame.ack is not None and result is not None:
                HUB.send_raw(cid, {"type": "ack", "ack": frame.ack, "payload": result})
    finally:
        COORDINATOR.disconnect(cid)
        await HUB.disconnect(cid)

"""
Service: dispatcher.py
Rôle:
- Router une trame client validée (`Frame`) vers l'opération correspondante
  du coordinateur ou vers le relais de signalisation.
- Convertir les refus métier (`RoomError`) en payload d'ack {ok: false, error}.

Retour de `dispatch`:
- le payload d'ack de l'opération (dict), ou None si l'événement n'en produit
  pas (position, joinAsGuide, relais).
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from roomhub.models.event import Frame, JoinRoomPayload
from .coordinator import InvalidRoom, RoomCoordinator, RoomError
from .relay import SignalingRelay

logger = logging.getLogger(__name__)


class UnknownEvent(LookupError):
    """Type d'événement qui n'est ni une opération ni un relais."""


def _room_join(coordinator: RoomCoordinator, cid: str, payload: Any):
    try:
        data = JoinRoomPayload.model_validate(payload)
    except ValidationError:
        raise InvalidRoom()
    return coordinator.join_room(cid, data.room_id)


HANDLERS: Dict[str, Callable[[RoomCoordinator, str, Any], Optional[dict]]] = {
    "room:create": lambda c, cid, _: c.create_room(cid),
    "room:join": _room_join,
    "player:create": lambda c, cid, payload: c.claim_name(cid, payload),
    "player:position": lambda c, cid, payload: c.report_position(cid, payload),
    "game:launch": lambda c, cid, _: c.launch_game(cid),
    "joinAsGuide": lambda c, cid, payload: c.announce_guide(cid, payload),
}


def dispatch(
    coordinator: RoomCoordinator,
    relay: SignalingRelay,
    cid: str,
    frame: Frame,
) -> Optional[dict]:
    if relay.handles(frame.type):
        relay.forward(cid, frame.type, frame.payload, to=frame.to)
        return None

    handler = HANDLERS.get(frame.type)
    if handler is None:
        raise UnknownEvent(frame.type)
    try:
        return handler(coordinator, cid, frame.payload)
    except RoomError as exc:
        logger.info("%s refused for %s: %s", frame.type, cid, exc.code)
        return exc.to_ack()

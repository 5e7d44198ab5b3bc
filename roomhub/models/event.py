"""
Models / event.py
Rôle:
- Définir les payloads entrants validés (WS et HTTP) et la trame WS standard.

Notes:
- Les clés restent en camelCase côté fil (client Unity + front web).
- `Frame.payload` est libre : les relais de signalisation ne l'inspectent jamais.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .player import Position


class Frame(BaseModel):
    """Trame client → serveur: {"type", "payload", "ack"?, "to"?}."""
    type: str
    payload: Any = None
    ack: Optional[Any] = None  # identifiant d'accusé de réception (optionnel)
    to: Optional[str] = None   # destinataire unique pour les relais (optionnel)


class JoinRoomPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId")


class PositionPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId")
    pseudo: Optional[str] = None
    position: Position
    timestamp: Optional[float] = None


class TimerPayload(BaseModel):
    """Tick de chrono poussé par Unity (champs relayés tels quels)."""
    model_config = ConfigDict(populate_by_name=True)

    time_left: Optional[float] = Field(default=None, alias="timeLeft")
    minutes: Optional[int] = None
    seconds: Optional[int] = None
    is_running: Optional[bool] = Field(default=None, alias="isRunning")

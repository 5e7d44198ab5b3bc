"""
Models / player.py
Rôle:
- Définir l'enregistrement d'un joueur connecté (une fiche par connexion vivante).

Champs:
- socket_id: identité de la connexion (fournie par le hub WS).
- pseudo: nom d'affichage (placeholder tant qu'il n'est pas choisi).
- role: "unity" (créateur, un seul par room) ou "guide" (joueurs qui rejoignent).
- room_id: PIN de la room, fixé pour toute la durée de la connexion.
- position / last_position_update: dernière position connue (last-write-wins).
- obstacle_types: part du catalogue d'obstacles attribuée (guides uniquement).

Notes:
- Sérialisation "fil" en camelCase (`socketId`, `roomId`…) via les alias.
- `stage` rend explicite l'état de la connexion: UNJOINED → JOINED → NAMED.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

STAGE_UNJOINED = "UNJOINED"  # aucune fiche joueur pour cette connexion
STAGE_JOINED = "JOINED"      # fiche créée (room + rôle), pseudo par défaut
STAGE_NAMED = "NAMED"        # pseudo choisi via player:create


class Role(str, Enum):
    UNITY = "unity"
    GUIDE = "guide"


class Position(BaseModel):
    x: float
    y: float


class Player(BaseModel):
    """Fiche joueur (registre en mémoire + payload de `room:players`)."""
    model_config = ConfigDict(populate_by_name=True)

    socket_id: str = Field(alias="socketId")
    pseudo: str
    role: Role
    room_id: str = Field(alias="roomId")
    position: Optional[Position] = None
    last_position_update: Optional[float] = Field(default=None, alias="lastPositionUpdate")
    # part privée du guide: envoyée via obstacles:assigned, jamais dans le roster
    obstacle_types: Optional[List[str]] = Field(default=None, alias="obstacleTypes", exclude=True)
    named: bool = Field(default=False, exclude=True)  # interne, jamais envoyé

    @property
    def stage(self) -> str:
        return STAGE_NAMED if self.named else STAGE_JOINED

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

"""
Service: player_registry.py
Rôle:
- Mapping connection_id -> fiche `Player` (état mutable central).
- `list_by_room` reflète immédiatement le dernier put/remove, dans l'ordre
  d'insertion (ordre d'arrivée dans la room).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from roomhub.models.player import STAGE_UNJOINED, Player, Role


@dataclass
class PlayerRegistry:
    players: Dict[str, Player] = field(default_factory=dict)

    def put(self, cid: str, player: Player) -> None:
        """Enregistre la fiche de la connexion."""
        self.players[cid] = player

    def get(self, cid: str) -> Optional[Player]:
        return self.players.get(cid)

    def remove(self, cid: str) -> Optional[Player]:
        return self.players.pop(cid, None)

    def list_by_room(self, room_id: str) -> list[Player]:
        return [p for p in self.players.values() if p.room_id == room_id]

    def guides_in_room(self, room_id: str) -> list[Player]:
        return [p for p in self.list_by_room(room_id) if p.role == Role.GUIDE]

    def stage(self, cid: str) -> str:
        player = self.players.get(cid)
        return player.stage if player else STAGE_UNJOINED

    def __len__(self) -> int:
        return len(self.players)

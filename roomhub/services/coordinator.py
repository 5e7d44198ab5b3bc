"""
Service: coordinator.py
Rôle:
- Opérations invoquées par les connexions : créer / rejoindre une room, choisir
  un pseudo, publier sa position, lancer la partie, annonce guide voix.
- Nettoyage sur déconnexion (fiche joueur, room vide, annuaire des guides).
- Maintient la cohérence entre RoomRegistry, PlayerRegistry, GuideDirectory
  et redistribue les obstacles quand les guides d'une room changent.

Contrat:
- Chaque opération mute l'état en mémoire de façon synchrone puis diffuse via
  le hub (envois non bloquants). Aucune opération n'observe un état partiel.
- Les refus lèvent une `RoomError` (code stable + message client en français);
  le dispatcher WS la convertit en ack {ok: false, error}.

Événements serveur émis:
- room:players, room:create:response, obstacles:assigned, player:position:update,
  game:started, guidesUpdate.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from roomhub.config.settings import settings
from roomhub.models.event import PositionPayload
from roomhub.models.player import Player, Role
from .guide_directory import GuideDirectory
from .obstacles import partition_obstacles
from .pin import PinSpaceExhausted
from .player_registry import PlayerRegistry
from .room_registry import RoomRegistry
from .ws_manager import HUB, ChannelHub

logger = logging.getLogger(__name__)


# -------------------- erreurs métier --------------------

class RoomError(Exception):
    """Refus d'une opération joueur (jamais fatal pour le process)."""
    code = "room_error"
    message = "Erreur"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)

    def to_ack(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.message, "code": self.code}


class InvalidRoom(RoomError):
    code = "invalid_room"
    message = "PIN invalide"


class EmptyName(RoomError):
    code = "empty_name"
    message = "Pseudo requis"


class NameTaken(RoomError):
    code = "name_taken"
    message = "Pseudo déjà pris"


class NoRoom(RoomError):
    code = "no_room"
    message = "Room non trouvée pour ce joueur"


class NoPlayer(RoomError):
    code = "no_player"
    message = "Joueur non trouvé"


class NotAuthorized(RoomError):
    code = "not_authorized"
    message = "Seul le joueur Unity peut lancer la partie"


class AlreadyInRoom(RoomError):
    code = "already_in_room"
    message = "Déjà dans une room"


class NoFreePin(RoomError):
    code = "no_free_pin"
    message = "Aucun PIN disponible, réessayez"


def _normalize_pin(room_id: Any) -> str:
    return str(room_id or "").strip().upper()


# -------------------- coordinateur --------------------

@dataclass
class RoomCoordinator:
    hub: ChannelHub
    catalog: List[str] = field(default_factory=lambda: list(settings.OBSTACLE_CATALOG))
    default_pseudo: str = field(default_factory=lambda: settings.DEFAULT_PSEUDO)
    rng: Optional[random.Random] = None
    rooms: RoomRegistry = field(
        default_factory=lambda: RoomRegistry(max_attempts=settings.PIN_MAX_ATTEMPTS)
    )
    players: PlayerRegistry = field(default_factory=PlayerRegistry)
    guides: GuideDirectory = field(default_factory=GuideDirectory)
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)

    # === vues ===
    def roster(self, room_id: str) -> List[Dict[str, Any]]:
        return [p.to_wire() for p in self.players.list_by_room(room_id)]

    def _broadcast_roster(self, room_id: str) -> List[Dict[str, Any]]:
        roster = self.roster(room_id)
        self.hub.send_to_channel(room_id, "room:players", roster)
        return roster

    def _room_exists(self, pin: str) -> bool:
        # le registre fait foi; l'occupation du canal reste acceptée en repli
        return self.rooms.exists(pin) or bool(self.hub.members(pin))

    # === obstacles ===
    def repartition(self, room_id: str) -> Dict[str, List[str]]:
        """
        Recalcule de zéro la répartition des obstacles entre les guides de la room
        et notifie chaque guide de SA part uniquement.
        """
        with self._lock:
            guides = self.players.guides_in_room(room_id)
            slices = partition_obstacles(len(guides), self.catalog, self.rng)
            assigned: Dict[str, List[str]] = {}
            for guide, share in zip(guides, slices):
                guide.obstacle_types = share
                assigned[guide.socket_id] = share
                self.hub.send_to_one(
                    guide.socket_id,
                    "obstacles:assigned",
                    {"obstacleTypes": share, "count": len(share)},
                )
            if guides:
                logger.debug("room %s: obstacles redistributed to %d guide(s)", room_id, len(guides))
            return assigned

    # === opérations joueur ===
    def create_room(self, cid: str) -> Dict[str, Any]:
        with self._lock:
            if self.players.get(cid) is not None:
                raise AlreadyInRoom()
            try:
                room_id = self.rooms.create()
            except PinSpaceExhausted:
                logger.warning("room creation refused for %s: no free PIN", cid)
                raise NoFreePin()
            self.hub.join(cid, room_id)
            self.players.put(cid, Player(
                socket_id=cid,
                pseudo=self.default_pseudo,
                role=Role.UNITY,
                room_id=room_id,
            ))
            logger.info("room %s created by %s", room_id, cid)

            # vue du créateur avant l'arrivée du premier guide
            self.hub.send_to_one(cid, "room:players", [])
            self.hub.send_to_one(cid, "room:create:response", {"ok": True, "roomId": room_id})
            return {"ok": True, "roomId": room_id}

    def join_room(self, cid: str, room_id: Any) -> Dict[str, Any]:
        pin = _normalize_pin(room_id)
        with self._lock:
            if not pin or not self._room_exists(pin):
                logger.info("join rejected for %s: unknown room %r", cid, pin)
                raise InvalidRoom()
            if self.players.get(cid) is not None:
                raise AlreadyInRoom()

            self.players.put(cid, Player(
                socket_id=cid,
                pseudo=self.default_pseudo,
                role=Role.GUIDE,
                room_id=pin,
            ))
            self.hub.join(cid, pin)
            logger.info("%s joined room %s", cid, pin)

            roster = self._broadcast_roster(pin)
            self.repartition(pin)
            return {"ok": True, "players": roster}

    def claim_name(self, cid: str, pseudo: Any) -> Dict[str, Any]:
        name = (pseudo if isinstance(pseudo, str) else "").strip()
        with self._lock:
            if not name:
                raise EmptyName()
            player = self.players.get(cid)
            if player is None:
                raise NoRoom()

            wanted = name.lower()
            taken = any(
                other.pseudo.lower() == wanted
                for other in self.players.list_by_room(player.room_id)
                if other.socket_id != cid
            )
            if taken:
                raise NameTaken()

            player.pseudo = name
            player.named = True
            self._broadcast_roster(player.room_id)
            return {"ok": True, "pseudo": name}

    def report_position(self, cid: str, data: Any) -> None:
        """Position last-write-wins; messages périmés ou mal formés ignorés."""
        with self._lock:
            player = self.players.get(cid)
            if player is None:
                return
            try:
                update = PositionPayload.model_validate(data)
            except ValidationError:
                logger.debug("malformed position from %s ignored", cid)
                return
            if _normalize_pin(update.room_id) != player.room_id:
                return

            player.position = update.position
            player.last_position_update = update.timestamp
            self.hub.send_to_channel(player.room_id, "player:position:update", {
                "socketId": cid,
                "pseudo": update.pseudo if update.pseudo is not None else player.pseudo,
                "position": update.position.model_dump(),
                "timestamp": update.timestamp,
            })

    def launch_game(self, cid: str) -> Dict[str, Any]:
        with self._lock:
            player = self.players.get(cid)
            if player is None:
                raise NoPlayer()
            if player.role != Role.UNITY:
                logger.info("launch refused for guide %s in room %s", cid, player.room_id)
                raise NotAuthorized()

            self.repartition(player.room_id)
            self.hub.send_to_channel(player.room_id, "game:started", {"roomId": player.room_id})
            logger.info("game started in room %s by %s", player.room_id, player.pseudo)
            return {"ok": True}

    def announce_guide(self, cid: str, name: Any) -> None:
        """Annonce voix/chat (`joinAsGuide`), indépendante des rooms."""
        with self._lock:
            self.guides.announce(cid, name if isinstance(name, str) else str(name or ""))
            logger.info("voice guide connected: %s", self.guides.guides[cid])
            self.hub.broadcast("guidesUpdate", self.guides.names())

    def disconnect(self, cid: str) -> None:
        """Nettoyage sur déconnexion (sans précondition, no-op si inconnu)."""
        with self._lock:
            player = self.players.remove(cid)
            if player is not None:
                room_id = player.room_id
                self.hub.leave(cid, room_id)
                remaining = self._broadcast_roster(room_id)
                if not remaining:
                    self.rooms.remove(room_id)
                    logger.info("room %s removed (empty)", room_id)
                else:
                    self.repartition(room_id)

            guide_name = self.guides.remove(cid)
            if guide_name is not None:
                self.hub.broadcast("guidesUpdate", self.guides.names())
                logger.info("voice guide disconnected: %s", guide_name)
            else:
                logger.info("client disconnected: %s", cid)

    # === admin ===
    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "rooms": len(self.rooms),
                "players": len(self.players),
                "voice_guides": len(self.guides.guides),
            }

    def snapshot(self) -> Dict[str, Any]:
        """Vue complète des rooms et rosters (diagnostic)."""
        with self._lock:
            return {room_id: self.roster(room_id) for room_id in self.rooms.all()}

    def reset(self) -> None:
        """Vide tous les registres (tests / reset admin)."""
        with self._lock:
            self.rooms.rooms.clear()
            self.players.players.clear()
            self.guides.guides.clear()


COORDINATOR = RoomCoordinator(hub=HUB)

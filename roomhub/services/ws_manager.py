# roomhub/services/ws_manager.py
"""
Service: ws_manager.py
- Attribue une identité (connection_id) à chaque WebSocket accepté.
- Regroupe les connexions en canaux nommés (un canal par PIN de room).
- Envois "fire-and-forget": chaque trame est encodée puis déposée dans la file
  de la connexion; une tâche d'écriture par connexion la vide dans l'ordre.
- Snapshots immuables pour éviter "set changed size during iteration".
- Admin: stats(), close_all().

Les envois sont synchrones (aucun `await`) : le coordinateur peut muter son
état et diffuser sans jamais être suspendu en plein milieu d'une opération.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Dict, Optional, Set
from uuid import uuid4

from starlette.websockets import WebSocket

from .io_utils import dumps_text

logger = logging.getLogger(__name__)


@dataclass
class Connection:
    """Une socket acceptée + sa file d'envoi et sa tâche d'écriture."""
    connection_id: str
    ws: WebSocket
    queue: "asyncio.Queue[str]" = field(default_factory=asyncio.Queue)
    writer: Optional[asyncio.Task] = None


@dataclass
class ChannelHub:
    _lock: RLock = field(default_factory=RLock, init=False, repr=False)
    # connection_id -> Connection
    connections: Dict[str, Connection] = field(default_factory=dict)
    # canal -> set(connection_id)
    channels: Dict[str, Set[str]] = field(default_factory=dict)

    async def connect(self, ws: WebSocket) -> str:
        """Accepte la connexion WS et lui attribue une identité unique."""
        await ws.accept()
        cid = uuid4().hex
        conn = Connection(connection_id=cid, ws=ws)
        conn.writer = asyncio.create_task(self._writer(conn))
        with self._lock:
            self.connections[cid] = conn
        return cid

    async def _writer(self, conn: Connection) -> None:
        while True:
            text = await conn.queue.get()
            try:
                await conn.ws.send_text(text)
            except Exception:
                # socket morte: plus aucun envoi ne lui est adressé,
                # la boucle de réception se chargera du disconnect
                logger.debug("send failed for %s, writer stopped", conn.connection_id)
                self._forget(conn.connection_id)
                return

    def _forget(self, cid: str) -> Optional[Connection]:
        """Retire l'identité du registre et de tous ses canaux."""
        with self._lock:
            conn = self.connections.pop(cid, None)
            for channel in list(self.channels):
                members = self.channels[channel]
                members.discard(cid)
                if not members:
                    self.channels.pop(channel, None)
        return conn

    async def disconnect(self, cid: str) -> None:
        """Retire l'identité de tous les canaux et arrête son écriture."""
        conn = self._forget(cid)
        if conn is None:
            return
        if conn.writer is not None:
            conn.writer.cancel()
        try:
            await conn.ws.close()
        except Exception:
            pass

    # ---------- canaux ----------
    def join(self, cid: str, channel: str) -> None:
        with self._lock:
            self.channels.setdefault(channel, set()).add(cid)

    def leave(self, cid: str, channel: str) -> None:
        with self._lock:
            members = self.channels.get(channel)
            if members is None:
                return
            members.discard(cid)
            if not members:
                self.channels.pop(channel, None)

    def members(self, channel: str) -> list[str]:
        with self._lock:
            return list(self.channels.get(channel, set()))

    # ---------- envois ----------
    def _enqueue(self, cids: list[str], frame: Dict[str, Any]) -> int:
        text = dumps_text(frame)
        sent = 0
        with self._lock:
            targets = [self.connections.get(cid) for cid in cids]
        for conn in targets:
            if conn is None:
                continue
            conn.queue.put_nowait(text)
            sent += 1
        return sent

    def send_raw(self, cid: str, frame: Dict[str, Any]) -> int:
        """Dépose une trame déjà construite (ex: ack) pour une connexion."""
        return self._enqueue([cid], frame)

    def send_to_one(self, cid: str, event: str, payload: Any = None) -> int:
        return self._enqueue([cid], {"type": event, "payload": payload})

    def send_to_channel(self, channel: str, event: str, payload: Any = None) -> int:
        return self._enqueue(self.members(channel), {"type": event, "payload": payload})

    def send_to_all_except(self, cid: str, event: str, payload: Any = None) -> int:
        with self._lock:
            others = [other for other in self.connections if other != cid]
        return self._enqueue(others, {"type": event, "payload": payload})

    def broadcast(self, event: str, payload: Any = None) -> int:
        with self._lock:
            everyone = list(self.connections)
        return self._enqueue(everyone, {"type": event, "payload": payload})

    # ---------- admin ----------
    def stats(self) -> dict:
        with self._lock:
            return {
                "connections_total": len(self.connections),
                "channels": {name: len(members) for name, members in self.channels.items()},
            }

    async def close_all(self) -> dict:
        """Ferme TOUTES les sockets."""
        with self._lock:
            cids = list(self.connections)
        for cid in cids:
            await self.disconnect(cid)
        return self.stats()


HUB = ChannelHub()

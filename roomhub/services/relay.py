# roomhub/services/relay.py
"""
Relais de signalisation (WebRTC, chat, audio).
Transfert aveugle : le payload n'est jamais lu ni validé.

- "message" est renvoyé à tout le monde (expéditeur compris).
- Les autres événements vont à toutes les connexions sauf l'expéditeur,
  ou uniquement à `to` si la trame désigne un destinataire.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .ws_manager import HUB, ChannelHub

logger = logging.getLogger(__name__)

SCOPE_ALL = "all"
SCOPE_OTHERS = "others"

RELAYED_EVENTS = {
    "message": SCOPE_ALL,
    "webrtc-offer": SCOPE_OTHERS,
    "webrtc-answer": SCOPE_OTHERS,
    "webrtc-candidate": SCOPE_OTHERS,
    "audioMessage": SCOPE_OTHERS,
    "audioChunk": SCOPE_OTHERS,
}


@dataclass
class SignalingRelay:
    hub: ChannelHub

    def handles(self, event: str) -> bool:
        return event in RELAYED_EVENTS

    def forward(self, sender: str, event: str, payload: Any, to: Optional[str] = None) -> int:
        if to:
            sent = self.hub.send_to_one(to, event, payload)
        elif RELAYED_EVENTS[event] == SCOPE_ALL:
            sent = self.hub.broadcast(event, payload)
        else:
            sent = self.hub.send_to_all_except(sender, event, payload)
        logger.debug("relay %s from %s -> %d peer(s)", event, sender, sent)
        return sent


RELAY = SignalingRelay(hub=HUB)

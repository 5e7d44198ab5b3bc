"""
Service: guide_directory.py
Rôle:
- Annuaire des guides annoncés sur le canal voix/chat (`joinAsGuide`).
- Indépendant des rooms : une connexion peut y figurer sans fiche joueur.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class GuideDirectory:
    guides: Dict[str, str] = field(default_factory=dict)  # connection_id -> nom

    def announce(self, cid: str, name: str) -> None:
        self.guides[cid] = name

    def remove(self, cid: str) -> Optional[str]:
        return self.guides.pop(cid, None)

    def names(self) -> list[str]:
        return list(self.guides.values())

    def __contains__(self, cid: str) -> bool:
        return cid in self.guides

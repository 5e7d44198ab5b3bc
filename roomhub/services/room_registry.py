"""
Service: room_registry.py
Rôle:
- Source de vérité de "ce PIN existe-t-il ?".
- Un PIN est valide pour rejoindre tant qu'il est présent ici, indépendamment
  de l'occupation du canal WebSocket correspondant.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Set

from .pin import generate_pin, generate_unique_pin


@dataclass
class RoomRegistry:
    max_attempts: int = 8
    generator: Callable[[], str] = generate_pin
    rooms: Set[str] = field(default_factory=set)

    def create(self) -> str:
        """Tire un PIN libre, l'enregistre et le renvoie."""
        pin = generate_unique_pin(self.exists, self.max_attempts, self.generator)
        self.rooms.add(pin)
        return pin

    def exists(self, pin: str) -> bool:
        return pin in self.rooms

    def remove(self, pin: str) -> None:
        self.rooms.discard(pin)

    def all(self) -> list[str]:
        return sorted(self.rooms)

    def __len__(self) -> int:
        return len(self.rooms)

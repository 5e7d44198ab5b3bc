"""
Service: pin.py
Rôle:
- Générer le code court (PIN) d'une room : 3 octets aléatoires → 6 caractères
  hexadécimaux majuscules (~16,7 M combinaisons).
- `generate_unique_pin` retire un nouveau PIN tant qu'il est déjà utilisé,
  dans la limite de `attempts` tirages.
"""
from __future__ import annotations

import secrets
from typing import Callable

PIN_BYTES = 3


class PinSpaceExhausted(RuntimeError):
    """Tous les tirages sont tombés sur des PIN déjà utilisés."""


def generate_pin() -> str:
    """Tire un PIN hexadécimal majuscule (source d'entropie: `secrets`)."""
    return secrets.token_hex(PIN_BYTES).upper()


def generate_unique_pin(
    exists: Callable[[str], bool],
    attempts: int = 8,
    generator: Callable[[], str] = generate_pin,
) -> str:
    """
    Renvoie un PIN absent du registre.

    Lève PinSpaceExhausted si `attempts` tirages consécutifs sont tous en collision.
    """
    for _ in range(max(1, attempts)):
        pin = generator()
        if not exists(pin):
            return pin
    raise PinSpaceExhausted(f"no free PIN after {attempts} attempts")

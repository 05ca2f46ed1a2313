"""
Conversión de máscara dotted-quad a longitud de prefijo CIDR.
"""

from __future__ import annotations

DEFAULT_PREFIX = 24


def subnet_to_prefix(subnet_mask: str | None) -> int:
    """
    Convierte una máscara ("255.255.255.0") en longitud de prefijo (24).

    Recorre los bits de cada octeto del más significativo al menos significativo
    y devuelve la cantidad acumulada en el primer bit en cero. Una máscara no
    contigua se trunca ahí: "255.0.255.0" → 8, no 16.

    Máscara ausente o mal formada (no son 4 octetos enteros 0..255) → 24.
    """
    if not subnet_mask:
        return DEFAULT_PREFIX

    parts = subnet_mask.strip().split(".")
    if len(parts) != 4:
        return DEFAULT_PREFIX

    octets = []
    for part in parts:
        # isdigit() acepta dígitos unicode ("²") que int() rechaza
        if not (part.isascii() and part.isdigit()):
            return DEFAULT_PREFIX
        value = int(part)
        if value > 255:
            return DEFAULT_PREFIX
        octets.append(value)

    bits = 0
    for octet in octets:
        for shift in range(7, -1, -1):
            if octet & (1 << shift):
                bits += 1
            else:
                return bits
    return bits

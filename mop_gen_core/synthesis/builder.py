"""
Síntesis de la Method of Procedure a partir de `ExtractedData`.

`synthesize()` es una función pura: mismo input → mismos pasos, byte a byte.
No hace IO ni depende de estado global mutable (el registry se pasa
explícitamente o se usa el registry de fábrica, que es de solo lectura).

Esqueleto fijo, en este orden:

    1. Conectarse                  (siempre)
    2. Modo privilegiado           (siempre)
    3. Modo configuración          (siempre)
    4. Configurar interfaces       (si hay interfaces)
    5. Configurar routing          (si hay protocolos de routing)
    6. Configurar VLANs            (si device_type == "switch" y hay VLANs)
    7. Guardar configuración       (siempre)
    8. Verificar configuración     (siempre; depende de qué se incluyó en 4–6)

Los pasos se numeran sobre lo que efectivamente se incluyó, sin huecos.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence, Set, Tuple

from ..domain_models import ExtractedData, ProcedureStep
from .vendors import DEFAULT_REGISTRY, OP_INTERFACES, OP_ROUTING, OP_VLANS, StrategyRegistry

DEFAULT_CONNECT_IP = "192.168.1.1"

# (description, command, verification, rollback) antes de numerar
_Draft = Tuple[str, str, str, str]


def _connect_ip(data: ExtractedData) -> str:
    for intf in data.interfaces[:1]:
        if intf.ip:
            return intf.ip
    return DEFAULT_CONNECT_IP


def _device_label(data: ExtractedData) -> str:
    parts = [data.vendor, data.model, data.device_type or "device"]
    return " ".join(p for p in parts if p)


def synthesize(
    data: ExtractedData,
    registry: StrategyRegistry = DEFAULT_REGISTRY,
) -> List[ProcedureStep]:
    """
    Genera la lista ordenada de pasos de la MOP.

    Args:
        data: Datos del equipo ya normalizados.
        registry: Registro de estrategias por vendor. El vendor se resuelve
            una única vez; vendors desconocidos caen en la estrategia default.

    Returns:
        Lista de ProcedureStep numerados 1..N.
    """
    strategy = registry.resolve(data.vendor)
    drafts: List[_Draft] = []
    included: Set[str] = set()

    drafts.append((
        f"Connect to {_device_label(data)}",
        strategy.connect(data, _connect_ip(data)),
        "Verify connection is established and prompt is available",
        strategy.connect_rollback(data),
    ))
    drafts.append((
        "Enter privileged mode",
        strategy.privileged(data),
        "Verify prompt changes to indicate privileged mode",
        strategy.privileged_rollback(data),
    ))
    drafts.append((
        "Enter configuration mode",
        strategy.config_mode(data),
        "Verify prompt changes to indicate configuration mode",
        strategy.config_mode_rollback(data),
    ))

    if data.interfaces:
        included.add(OP_INTERFACES)
        drafts.append((
            "Configure interfaces",
            strategy.interfaces(data),
            "Verify interfaces are configured correctly",
            strategy.interfaces_rollback(data),
        ))

    if data.routing_protocols:
        included.add(OP_ROUTING)
        drafts.append((
            "Configure routing protocols",
            strategy.routing(data),
            "Verify routing protocols are configured correctly",
            strategy.routing_rollback(data),
        ))

    if data.is_switch and data.vlans:
        included.add(OP_VLANS)
        drafts.append((
            "Configure VLANs",
            strategy.vlans(data),
            "Verify VLANs are configured correctly",
            strategy.vlans_rollback(data),
        ))

    drafts.append((
        "Save configuration",
        strategy.save(data),
        "Verify configuration is saved",
        strategy.save_rollback(data),
    ))
    drafts.append((
        "Verify configuration",
        strategy.verify(data, frozenset(included)),
        "Verify all configurations are applied correctly",
        strategy.verify_rollback(data),
    ))

    return [
        ProcedureStep(
            id=f"step{number}",
            step_number=number,
            description=description,
            command=command,
            verification=verification,
            rollback=rollback,
        )
        for number, (description, command, verification, rollback) in enumerate(drafts, start=1)
    ]


# ============================================================
# Edición de la secuencia (mantiene la numeración contigua)
# ============================================================

def renumber_steps(steps: Sequence[ProcedureStep]) -> List[ProcedureStep]:
    """Reasigna step_number = índice + 1 (e id) a toda la secuencia."""
    return [
        replace(step, id=f"step{number}", step_number=number)
        for number, step in enumerate(steps, start=1)
    ]


def insert_step(
    steps: Sequence[ProcedureStep],
    step: ProcedureStep,
    position: Optional[int] = None,
) -> List[ProcedureStep]:
    """
    Inserta un paso y renumera.

    Args:
        steps: Secuencia actual.
        step: Paso a insertar (su numeración se ignora).
        position: Número de paso (1-based) que ocupará el nuevo paso.
            None = al final.
    """
    items = list(steps)
    if position is None:
        items.append(step)
    else:
        if position < 1 or position > len(items) + 1:
            raise IndexError(f"Posición {position} fuera de rango (1..{len(items) + 1})")
        items.insert(position - 1, step)
    return renumber_steps(items)


def remove_step(steps: Sequence[ProcedureStep], step_number: int) -> List[ProcedureStep]:
    """Elimina el paso `step_number` y renumera el resto."""
    if step_number < 1 or step_number > len(steps):
        raise IndexError(f"Paso {step_number} inexistente (1..{len(steps)})")
    items = list(steps)
    del items[step_number - 1]
    return renumber_steps(items)

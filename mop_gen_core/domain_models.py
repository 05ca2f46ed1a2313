from __future__ import annotations

"""
mop_gen_core.domain_models
==========================

Modelos de dominio (dataclasses) usados a lo largo del core.

Objetivo
--------
Este módulo define las estructuras "neutras" del sistema:

- Datos extraídos de un documento de equipamiento de red (`ExtractedData`,
  `Interface`, `Vlan`), tal como los entrega el servicio de extracción.
- Pasos de una Method of Procedure (`ProcedureStep`).
- Vistas de solo lectura de MOPs y reviews para los renderers
  (`MopRecord`, `ReviewRecord`), desacopladas del ORM.

Principios de diseño
--------------------
- Dataclasses inmutables sin IO: este módulo NO habla con DB, storage ni HTTP.
- `ExtractedData` es total: cualquier campo puede faltar y se reemplaza por un
  default documentado. La única validación estricta es de *forma* (un campo
  lista que no es lista) y se hace en `parse_extracted_data`, que es la
  frontera con el servicio externo.

Defaults
--------
- vendor / model / device_type ausentes → "".
- interfaces / vlans ausentes → tupla vacía; routing_protocols → frozenset vacío.
- Interfaz sin `name` → se descarta (no hay nada que configurar).
- Interfaz sin `ip` → se omite la línea de IP; sin `subnet` → /24.
- VLAN sin `id` → se descarta; sin `name` → "VLAN<id>".
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Tuple

from .errors import UpstreamError


# ============================================================
# Datos extraídos
# ============================================================

@dataclass(frozen=True)
class Interface:
    """
    Interfaz de red a configurar.

    Attributes:
        name: Nombre de la interfaz tal como lo espera el equipo (ej: "Gi0/0").
        ip: Dirección IPv4. "" si el documento no la especifica.
        subnet: Máscara en notación dotted-quad. "" si no se especifica.
    """
    name: str
    ip: str = ""
    subnet: str = ""


@dataclass(frozen=True)
class Vlan:
    """VLAN a crear en un switch."""
    id: str
    name: str


@dataclass(frozen=True)
class ExtractedData:
    """
    Vista normalizada y de solo lectura de los hechos de un equipo.

    Attributes:
        device_type:
            Tipo de equipo ("router", "switch", "firewall", ...). El paso de
            VLANs exige exactamente "switch" (sin normalizar mayúsculas).
        vendor:
            Fabricante tal como vino del documento. La selección de estrategia
            se hace luego, case-insensitive.
        model:
            Modelo del equipo (solo se usa en textos descriptivos).
        interfaces:
            Interfaces en el orden del documento. El orden importa: la IP de la
            primera interfaz se usa para conectarse al equipo.
        routing_protocols:
            Conjunto de protocolos en minúsculas ("ospf", "bgp", ...).
        vlans:
            VLANs en el orden del documento.
    """
    device_type: str = ""
    vendor: str = ""
    model: str = ""
    interfaces: Tuple[Interface, ...] = ()
    routing_protocols: FrozenSet[str] = field(default_factory=frozenset)
    vlans: Tuple[Vlan, ...] = ()

    @property
    def is_switch(self) -> bool:
        return self.device_type == "switch"

    def to_payload(self) -> Dict[str, Any]:
        """Serializa a dict snake_case (mismo formato que entrega el servicio de extracción)."""
        return {
            "device_type": self.device_type,
            "vendor": self.vendor,
            "model": self.model,
            "interfaces": [
                {"name": i.name, "ip": i.ip, "subnet": i.subnet} for i in self.interfaces
            ],
            "routing_protocols": sorted(self.routing_protocols),
            "vlans": [{"id": v.id, "name": v.name} for v in self.vlans],
        }


# ============================================================
# Pasos de la MOP
# ============================================================

@dataclass(frozen=True)
class ProcedureStep:
    """
    Un paso operativo de la Method of Procedure.

    Attributes:
        id:
            Identificador estable dentro de la MOP: "step<step_number>".
        step_number:
            Número de paso 1..N. Siempre igual a índice + 1 en la lista.
        description:
            Qué se hace en el paso (texto humano).
        command:
            Texto de comandos, puede ser multi-línea.
        verification:
            Cómo verificar que el paso salió bien.
        rollback:
            Comandos para deshacer el paso.
    """
    id: str
    step_number: int
    description: str
    command: str
    verification: str
    rollback: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "step_number": self.step_number,
            "description": self.description,
            "command": self.command,
            "verification": self.verification,
            "rollback": self.rollback,
        }


# ============================================================
# Vistas de solo lectura para renderizar
# ============================================================

@dataclass(frozen=True)
class MopRecord:
    """
    Snapshot de una MOP tal como la consumen los renderers.

    Se construye desde el modelo ORM (`db.models.Mop`) para que el render sea
    una función pura, sin sesión de base de datos abierta.
    """
    id: str
    document_id: str
    title: str
    description: str
    status: str
    created_at: datetime
    created_by: str = ""


@dataclass(frozen=True)
class ReviewRecord:
    """Snapshot de una review para renderizar."""
    id: str
    mop_id: str
    reviewer_id: str
    status: str
    comments: str
    created_at: datetime


# ============================================================
# Parsing del payload del servicio de extracción
# ============================================================

def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_list(value: Any, field_name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise UpstreamError(
            f"Payload de extracción inválido: '{field_name}' debe ser una lista, "
            f"llegó {type(value).__name__}"
        )
    return list(value)


def _as_mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise UpstreamError(
            f"Payload de extracción inválido: cada elemento de '{field_name}' debe ser un objeto"
        )
    return value


def _parse_interfaces(items: Iterable[Any]) -> Tuple[Interface, ...]:
    result: List[Interface] = []
    for raw in items:
        item = _as_mapping(raw, "interfaces")
        name = _text(item.get("name"))
        if not name:
            continue
        result.append(
            Interface(
                name=name,
                ip=_text(_pick(item, "ip", "ip_address", "ipAddress")),
                subnet=_text(_pick(item, "subnet", "subnet_mask", "subnetMask", "mask")),
            )
        )
    return tuple(result)


def _parse_vlans(items: Iterable[Any]) -> Tuple[Vlan, ...]:
    result: List[Vlan] = []
    for raw in items:
        item = _as_mapping(raw, "vlans")
        vlan_id = _text(_pick(item, "id", "vlan_id", "vlanId"))
        if not vlan_id:
            continue
        result.append(Vlan(id=vlan_id, name=_text(item.get("name")) or f"VLAN{vlan_id}"))
    return tuple(result)


def parse_extracted_data(payload: Any) -> ExtractedData:
    """
    Convierte el payload crudo del servicio de extracción en `ExtractedData`.

    Acepta claves snake_case (formato del servicio) y camelCase.

    Args:
        payload: dict con los datos extraídos, o None.

    Returns:
        ExtractedData normalizado (campos ausentes → defaults).

    Raises:
        UpstreamError: si el payload no es un objeto o algún campo lista no es lista.
    """
    if payload is None:
        return ExtractedData()
    if not isinstance(payload, Mapping):
        raise UpstreamError(
            f"Payload de extracción inválido: se esperaba un objeto, llegó {type(payload).__name__}"
        )

    protocols = _as_list(_pick(payload, "routing_protocols", "routingProtocols"), "routing_protocols")

    return ExtractedData(
        device_type=_text(_pick(payload, "device_type", "deviceType")),
        vendor=_text(payload.get("vendor")),
        model=_text(payload.get("model")),
        interfaces=_parse_interfaces(_as_list(payload.get("interfaces"), "interfaces")),
        routing_protocols=frozenset(p for p in (_text(x).lower() for x in protocols) if p),
        vlans=_parse_vlans(_as_list(payload.get("vlans"), "vlans")),
    )

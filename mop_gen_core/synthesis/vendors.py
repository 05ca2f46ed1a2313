"""
Estrategias de comandos por familia de fabricante.

Cada estrategia implementa `core.abstractions.VendorCommandStrategy`:
texto de ida y texto de rollback para cada tipo de operación, explícitos.

Familias registradas por defecto:

- "cisco":   IOS completo (verificación de routing y VLANs incluida).
- "juniper": Junos (`set` / `delete`, prefijos CIDR, commit).
- default:   estilo IOS genérico para cualquier otro vendor (o vendor ausente).

Agregar un vendor nuevo = registrar una estrategia en un `StrategyRegistry`,
sin tocar la síntesis.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Dict, List, Sequence

from ..core.abstractions import VendorCommandStrategy
from ..domain_models import ExtractedData
from .netmask import subnet_to_prefix

logger = logging.getLogger(__name__)

# Operaciones condicionales (las que pueden faltar en una MOP)
OP_INTERFACES = "interfaces"
OP_ROUTING = "routing"
OP_VLANS = "vlans"

DEFAULT_MASK = "255.255.255.0"
NO_ROLLBACK = "No rollback needed"

# Protocolos con plantilla propia; el resto se emite como comentario manual.
KNOWN_PROTOCOLS = ("ospf", "bgp")


def ordered_protocols(protocols: AbstractSet[str]) -> List[str]:
    """Orden estable: ospf, bgp y luego el resto alfabético."""
    known = [p for p in KNOWN_PROTOCOLS if p in protocols]
    others = sorted(p for p in protocols if p not in KNOWN_PROTOCOLS)
    return known + others


def _join(lines: Sequence[str]) -> str:
    return "\n".join(lines)


# ============================================================
# Estrategia por defecto (estilo IOS genérico)
# ============================================================

class DefaultStrategy:
    """
    Estrategia para vendors desconocidos.

    Usa sintaxis estilo IOS, que es la más difundida, y una verificación mínima
    (running-config + estado de interfaces).
    """

    name = "default"
    comment = "!"

    # --- Sesión ---

    def connect(self, data: ExtractedData, ip: str) -> str:
        return f"ssh admin@{ip}\nPassword: ******"

    def connect_rollback(self, data: ExtractedData) -> str:
        return "exit"

    def privileged(self, data: ExtractedData) -> str:
        return "enable\nPassword: ******"

    def privileged_rollback(self, data: ExtractedData) -> str:
        return "disable"

    def config_mode(self, data: ExtractedData) -> str:
        return "configure terminal"

    def config_mode_rollback(self, data: ExtractedData) -> str:
        return "end"

    # --- Interfaces ---

    def interfaces(self, data: ExtractedData) -> str:
        lines: List[str] = []
        for intf in data.interfaces:
            lines.append(f"interface {intf.name}")
            if intf.ip:
                lines.append(f" ip address {intf.ip} {intf.subnet or DEFAULT_MASK}")
            lines.append(" no shutdown")
            lines.append("!")
        return _join(lines)

    def interfaces_rollback(self, data: ExtractedData) -> str:
        lines: List[str] = []
        for intf in data.interfaces:
            lines.append(f"interface {intf.name}")
            lines.append(" shutdown")
            lines.append(" no ip address")
            lines.append("!")
        return _join(lines)

    # --- Routing ---

    def routing(self, data: ExtractedData) -> str:
        lines: List[str] = []
        for proto in ordered_protocols(data.routing_protocols):
            if proto == "ospf":
                lines += ["router ospf 1", " network 0.0.0.0 255.255.255.255 area 0", "!"]
            elif proto == "bgp":
                lines += ["router bgp 65000", " bgp router-id 1.1.1.1", "!"]
            else:
                lines.append(f"{self.comment} {proto}: no template available, configure manually")
        return _join(lines)

    def routing_rollback(self, data: ExtractedData) -> str:
        lines: List[str] = []
        for proto in ordered_protocols(data.routing_protocols):
            if proto == "ospf":
                lines.append("no router ospf 1")
            elif proto == "bgp":
                lines.append("no router bgp 65000")
            else:
                lines.append(f"{self.comment} {proto}: remove configuration manually")
        return _join(lines)

    # --- VLANs ---

    def vlans(self, data: ExtractedData) -> str:
        lines: List[str] = []
        for vlan in data.vlans:
            lines += [f"vlan {vlan.id}", f" name {vlan.name}", "!"]
        return _join(lines)

    def vlans_rollback(self, data: ExtractedData) -> str:
        return _join([f"no vlan {vlan.id}" for vlan in data.vlans])

    # --- Guardado / verificación ---

    def save(self, data: ExtractedData) -> str:
        return "write memory"

    def save_rollback(self, data: ExtractedData) -> str:
        return NO_ROLLBACK

    def verify(self, data: ExtractedData, included: AbstractSet[str]) -> str:
        lines = ["show running-config"]
        if OP_INTERFACES in included:
            lines.append("show ip interface brief")
        return _join(lines)

    def verify_rollback(self, data: ExtractedData) -> str:
        return NO_ROLLBACK


# ============================================================
# Cisco IOS
# ============================================================

class CiscoStrategy(DefaultStrategy):
    """Cisco IOS: misma sintaxis que el default, verificación completa."""

    name = "cisco"

    def verify(self, data: ExtractedData, included: AbstractSet[str]) -> str:
        lines = ["show running-config"]
        if OP_INTERFACES in included:
            lines.append("show ip interface brief")
        if OP_ROUTING in included:
            if "ospf" in data.routing_protocols:
                lines.append("show ip ospf neighbor")
            if "bgp" in data.routing_protocols:
                lines.append("show ip bgp summary")
        if OP_VLANS in included:
            lines.append("show vlan brief")
        return _join(lines)


# ============================================================
# Juniper Junos
# ============================================================

class JuniperStrategy:
    """Juniper Junos: configuración con `set`, rollback con `delete`."""

    name = "juniper"
    comment = "#"

    def connect(self, data: ExtractedData, ip: str) -> str:
        return f"ssh admin@{ip}\nPassword: ******"

    def connect_rollback(self, data: ExtractedData) -> str:
        return "exit"

    def privileged(self, data: ExtractedData) -> str:
        return "cli\nedit"

    def privileged_rollback(self, data: ExtractedData) -> str:
        return "exit configuration-mode\nexit"

    def config_mode(self, data: ExtractedData) -> str:
        return "edit"

    def config_mode_rollback(self, data: ExtractedData) -> str:
        return "exit configuration-mode"

    def interfaces(self, data: ExtractedData) -> str:
        lines: List[str] = []
        for intf in data.interfaces:
            if intf.ip:
                prefix = subnet_to_prefix(intf.subnet)
                lines.append(
                    f"set interfaces {intf.name} unit 0 family inet address {intf.ip}/{prefix}"
                )
            else:
                lines.append(f"set interfaces {intf.name} unit 0 family inet")
        return _join(lines)

    def interfaces_rollback(self, data: ExtractedData) -> str:
        return _join(
            [f"delete interfaces {intf.name} unit 0 family inet" for intf in data.interfaces]
        )

    def routing(self, data: ExtractedData) -> str:
        lines: List[str] = []
        for proto in ordered_protocols(data.routing_protocols):
            if proto == "ospf":
                lines.append("set protocols ospf area 0.0.0.0 interface all")
            elif proto == "bgp":
                lines += ["set protocols bgp local-as 65000", "set routing-options router-id 1.1.1.1"]
            else:
                lines.append(f"{self.comment} {proto}: no template available, configure manually")
        return _join(lines)

    def routing_rollback(self, data: ExtractedData) -> str:
        lines: List[str] = []
        for proto in ordered_protocols(data.routing_protocols):
            if proto == "ospf":
                lines.append("delete protocols ospf")
            elif proto == "bgp":
                lines += ["delete protocols bgp", "delete routing-options router-id"]
            else:
                lines.append(f"{self.comment} {proto}: remove configuration manually")
        return _join(lines)

    def vlans(self, data: ExtractedData) -> str:
        return _join([f"set vlans {vlan.name} vlan-id {vlan.id}" for vlan in data.vlans])

    def vlans_rollback(self, data: ExtractedData) -> str:
        return _join([f"delete vlans {vlan.name}" for vlan in data.vlans])

    def save(self, data: ExtractedData) -> str:
        return "commit and-quit"

    def save_rollback(self, data: ExtractedData) -> str:
        return "edit\nrollback 1\ncommit and-quit"

    def verify(self, data: ExtractedData, included: AbstractSet[str]) -> str:
        lines = ["show configuration"]
        if OP_INTERFACES in included:
            lines.append("show interfaces terse")
        if OP_ROUTING in included:
            if "ospf" in data.routing_protocols:
                lines.append("show ospf neighbor")
            if "bgp" in data.routing_protocols:
                lines.append("show bgp summary")
        if OP_VLANS in included:
            lines.append("show vlans")
        return _join(lines)

    def verify_rollback(self, data: ExtractedData) -> str:
        return NO_ROLLBACK


# ============================================================
# Registro
# ============================================================

class StrategyRegistry:
    """
    Mapeo vendor → estrategia, con fallback a una estrategia por defecto.

    El lookup es case-insensitive y tolera espacios alrededor del nombre.
    """

    def __init__(self, default: VendorCommandStrategy) -> None:
        self._default = default
        self._strategies: Dict[str, VendorCommandStrategy] = {}

    def register(self, vendor: str, strategy: VendorCommandStrategy) -> None:
        key = vendor.strip().lower()
        if not key:
            raise ValueError("El nombre de vendor no puede ser vacío")
        self._strategies[key] = strategy

    def resolve(self, vendor: str | None) -> VendorCommandStrategy:
        key = (vendor or "").strip().lower()
        strategy = self._strategies.get(key)
        if strategy is None:
            if key:
                logger.debug(f"Vendor '{vendor}' sin estrategia propia, se usa default")
            return self._default
        return strategy

    @property
    def vendors(self) -> List[str]:
        return sorted(self._strategies)


def build_default_registry() -> StrategyRegistry:
    """Registry con las familias soportadas de fábrica (cisco, juniper, default)."""
    registry = StrategyRegistry(default=DefaultStrategy())
    registry.register("cisco", CiscoStrategy())
    registry.register("juniper", JuniperStrategy())
    return registry


DEFAULT_REGISTRY = build_default_registry()

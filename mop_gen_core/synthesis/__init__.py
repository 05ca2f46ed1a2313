"""
Motor de síntesis de procedimientos.

- `vendors`: estrategias de comandos por familia de fabricante.
- `builder`: orquesta las estrategias en una lista ordenada de pasos.
- `netmask`: conversión máscara → prefijo CIDR.
"""

from .builder import insert_step, remove_step, renumber_steps, synthesize
from .netmask import subnet_to_prefix
from .vendors import (
    DEFAULT_REGISTRY,
    CiscoStrategy,
    DefaultStrategy,
    JuniperStrategy,
    StrategyRegistry,
    build_default_registry,
)

__all__ = [
    "synthesize",
    "renumber_steps",
    "insert_step",
    "remove_step",
    "subnet_to_prefix",
    "StrategyRegistry",
    "DefaultStrategy",
    "CiscoStrategy",
    "JuniperStrategy",
    "DEFAULT_REGISTRY",
    "build_default_registry",
]

"""
mop_gen_core
============

Core de generación de Methods of Procedure (MOP) para equipamiento de red:

- Síntesis de pasos por vendor (`synthesis`)
- Workflow de revisión/aprobación (`workflow`, `db.helpers`)
- Export multi-formato a object storage (`export`)
"""

__version__ = "0.1.0"

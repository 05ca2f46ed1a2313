"""
Interfaces (Protocols) del core de generación de MOPs.

Cualquier implementación concreta (vendors, renderers, storage) se escribe
contra estos contratos:
- VendorCommandStrategy (síntesis)
- DocumentRenderer (export)
- ObjectStorage (publicación de exports)
"""

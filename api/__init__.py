"""
API HTTP para mop-gen-core.

Esta capa expone endpoints REST que usan el core interno (mop_gen_core) para
generar Methods of Procedure desde documentos de equipos de red, manejar su
ciclo de revisión y exportarlas.

La API está diseñada para ser consumida por:
- UI web
- El servicio de extracción (callback de resultados)
- Scripts de automatización
"""

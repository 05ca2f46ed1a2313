"""
mop_gen_core.cli
================

CLI mínima para usar el core sin API ni base de datos:

- `synthesize`: lee un JSON de datos extraídos y escribe los pasos (JSON) a stdout.
- `render`: genera el documento de la MOP en un formato a un archivo local.

Ejemplos
--------
    python -m mop_gen_core.cli synthesize device.json
    python -m mop_gen_core.cli render device.json --format docx -o mop.docx
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .domain_models import MopRecord, parse_extracted_data
from .errors import MopGenError
from .export import SUPPORTED_FORMATS, render
from .synthesis import synthesize

logger = logging.getLogger(__name__)


def _load_payload(path: str):
    text = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    payload = json.loads(text)
    # Acepta tanto el dict de datos como la respuesta completa del servicio
    if isinstance(payload, dict) and isinstance(payload.get("extracted_data"), dict):
        payload = payload["extracted_data"]
    return parse_extracted_data(payload)


def cmd_synthesize(args: argparse.Namespace) -> int:
    data = _load_payload(args.input)
    steps = synthesize(data)
    json.dump([s.to_dict() for s in steps], sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    data = _load_payload(args.input)
    steps = synthesize(data)
    title = args.title or f"{data.vendor or 'Network'} {data.device_type or 'Device'} Configuration MOP"
    mop = MopRecord(
        id="local",
        document_id=Path(args.input).name,
        title=title,
        description=args.description or "",
        status="draft",
        created_at=datetime.now(timezone.utc),
    )

    output = Path(args.output or f"mop.{args.format}")
    output.write_bytes(render(mop, steps, [], args.format))
    print(f"✅ {output} ({len(steps)} pasos)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mop-gen", description="Generación de Methods of Procedure")
    sub = parser.add_subparsers(dest="command", required=True)

    p_syn = sub.add_parser("synthesize", help="Imprimir los pasos de la MOP como JSON")
    p_syn.add_argument("input", help="JSON con los datos extraídos ('-' = stdin)")
    p_syn.set_defaults(func=cmd_synthesize)

    p_render = sub.add_parser("render", help="Generar el documento de la MOP")
    p_render.add_argument("input", help="JSON con los datos extraídos ('-' = stdin)")
    p_render.add_argument("--format", choices=SUPPORTED_FORMATS, default="pdf")
    p_render.add_argument("-o", "--output", default="", help="Archivo destino (default: mop.<formato>)")
    p_render.add_argument("--title", default="", help="Título (default: derivado de vendor/device_type)")
    p_render.add_argument("--description", default="")
    p_render.set_defaults(func=cmd_render)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except MopGenError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

"""Restaura un respaldo JSON de notas (formato de GET /profile/export) en el backend.

Uso típico:
  PYTHONPATH=. python scripts/import_notes.py backup.json \
    --email ana@example.com --password '...' --yes

Características:
  - Inicia sesión con las credenciales dadas; las notas quedan a nombre de ese usuario.
  - Omite notas sin título y las que ya existen con el mismo título y contenido.
  - Dry‑run por defecto (muestra qué se importaría). Confirma con --yes.
"""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from notesapp.core.config import settings
from notesapp.core.logging import setup_logging
from notesapp.infrastructure.remote import RemoteService, build_remote

_log = logging.getLogger("notesapp.scripts.import")


def load_backup(path: Path) -> List[Dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    notes = data.get("notes") if isinstance(data, dict) else data
    if not isinstance(notes, list):
        raise ValueError("El respaldo no contiene una lista 'notes'")
    return notes


def plan_import(remote: RemoteService, notes: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Notas a insertar: con título y no presentes ya (mismo título y contenido)."""
    existing = {(n.title, n.content) for n in remote.list_notes()}
    out: List[Dict[str, str]] = []
    for n in notes:
        title = str(n.get("title") or "")
        content = str(n.get("content") or "")
        if not title.strip() or (title, content) in existing:
            continue
        existing.add((title, content))
        out.append({"title": title, "content": content})
    return out


def apply_import(remote: RemoteService, planned: List[Dict[str, str]]) -> int:
    # Inserta en orden inverso para conservar el orden por updated_at del respaldo
    for n in reversed(planned):
        remote.insert_note(n["title"], n["content"])
    return len(planned)


def main() -> None:
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("backup", type=Path)
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--yes", action="store_true", help="Aplica la importación (por defecto dry-run)")
    args = ap.parse_args()

    setup_logging(settings.log_level)
    remote = build_remote(settings)
    remote.sign_in_with_password(args.email, args.password)
    planned = plan_import(remote, load_backup(args.backup))
    for n in planned:
        print(f"+ {n['title']}")
    if not args.yes:
        print(f"[dry-run] {len(planned)} notas por importar. Usa --yes para aplicar.")
        return
    count = apply_import(remote, planned)
    _log.info("Imported %s notes into backend=%s", count, remote.name())
    print(f"OK: {count} notas importadas")


if __name__ == "__main__":
    main()

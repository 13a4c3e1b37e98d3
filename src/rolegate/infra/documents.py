# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Dict

import yaml


def read_collection(path: Path, key: str) -> Dict[str, Dict[str, Any]]:
    """Load ``{<id>: {...}}`` stored under ``key`` in a YAML document file.

    Missing or non-mapping content yields an empty collection; entries that
    are not mappings are skipped. Unparseable YAML raises ``yaml.YAMLError``
    so a corrupt users file is never read as empty and then overwritten.
    """
    if not path.exists():
        return {}
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    items = (raw.get(key) or {}) if isinstance(raw, dict) else {}
    if not isinstance(items, dict):
        return {}
    return {str(k): dict(v) for k, v in items.items() if isinstance(v, dict)}


def write_collection(path: Path, key: str, items: Dict[str, Dict[str, Any]]) -> None:
    """Atomically replace the YAML document file (temp file + rename)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = yaml.safe_dump({"version": 1, key: items}, sort_keys=False, allow_unicode=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise

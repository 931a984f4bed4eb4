from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from s2m import config


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_run_id(ts: datetime | None = None) -> str:
    """Create a sortable run id (UTC)."""
    t = ts or datetime.now(timezone.utc)
    return t.strftime("%Y%m%dT%H%M%SZ")


def runs_root() -> Path:
    return Path(config.PathsConfig().runs_dir)


def run_dir(run_id: str) -> Path:
    return runs_root() / str(run_id)


def artifacts_dir(run_id: str) -> Path:
    return run_dir(run_id) / "artifacts"


def ensure_run_dir(run_id: str) -> Path:
    d = run_dir(run_id)
    d.mkdir(parents=True, exist_ok=True)
    artifacts_dir(run_id).mkdir(parents=True, exist_ok=True)
    return d


def write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, ensure_ascii=False), encoding="utf-8")


def write_text(run_id: str, rel_name: str, content: str) -> str:
    """Write a text file under the run dir and return its path as string."""
    p = ensure_run_dir(run_id) / rel_name
    p.write_text(content, encoding="utf-8")
    return str(p)


def write_bytes_artifact(run_id: str, rel_name: str, data: bytes) -> str:
    """Write a binary artifact under artifacts/ and return its path as string."""
    ensure_run_dir(run_id)
    p = artifacts_dir(run_id) / rel_name
    p.write_bytes(data)
    return str(p)

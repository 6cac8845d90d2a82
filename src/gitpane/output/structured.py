"""JSON / YAML rendering of parsed models for scripts and pipelines."""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Dict

import yaml

from gitpane.git.models import BranchHead, DetachedHead, Status, UnbornBranch


def _convert(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Status):
        return _status_to_dict(value)
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _convert(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_convert(v) for v in value]
    return value


def _head_to_dict(head: BranchHead) -> Dict[str, Any]:
    if isinstance(head, DetachedHead):
        return {"state": "detached"}
    if isinstance(head, UnbornBranch):
        return {"state": "unborn", "name": head.name}
    return {"state": "branch", "name": head.name}


def _status_to_dict(status: Status) -> Dict[str, Any]:
    return {
        "branch": status.branch,
        "head": _head_to_dict(status.head),
        "upstream": status.upstream,
        "upstream_gone": status.upstream_gone,
        "ahead": status.ahead,
        "behind": status.behind,
        "entries": [_convert(e) for e in status.entries],
    }


def to_dict(model: Any) -> Any:
    """Convert a model (or list of models, or None) to plain data."""
    return _convert(model)


def render_json(model: Any) -> str:
    return json.dumps(to_dict(model), indent=2)


def render_yaml(model: Any) -> str:
    return yaml.safe_dump(to_dict(model), sort_keys=False, allow_unicode=True)


def render(model: Any, fmt: str) -> str:
    """Render *model* as ``json`` or ``yaml``."""
    if fmt == "json":
        return render_json(model)
    if fmt == "yaml":
        return render_yaml(model)
    raise ValueError(f"Unsupported structured format: {fmt}")

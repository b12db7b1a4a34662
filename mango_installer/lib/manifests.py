from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from .pkg import PackageManagerKind


@dataclass(frozen=True)
class FirstOf:
    """Pick the first candidate the repositories know about."""

    label: str
    candidates: Tuple[str, ...]


@dataclass(frozen=True)
class LatestVersioned:
    """Pick `base`, or the highest `base<major>.<minor>` when it is absent."""

    base: str


PackageRef = Union[str, FirstOf, LatestVersioned]


@dataclass(frozen=True)
class DependencySpec:
    required: Tuple[PackageRef, ...]
    optional: Tuple[str, ...] = ()
    patterns: Tuple[str, ...] = field(default=())


def _package_root() -> Path:
    # mango_installer/lib/manifests.py -> mango_installer
    return Path(__file__).resolve().parents[1]


def load_yaml_rel(rel_path: str) -> Dict[str, Any]:
    """Load a YAML file relative to the package root (manifests/...)."""
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML required to load manifests") from e

    p = _package_root() / rel_path.lstrip("/")
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {p}")
    return data


def _parse_ref(entry: Any, *, where: str) -> PackageRef:
    if isinstance(entry, str) and entry.strip():
        return entry.strip()
    if isinstance(entry, dict):
        if "first_of" in entry:
            candidates = entry.get("first_of") or []
            if not isinstance(candidates, list) or not candidates:
                raise ValueError(f"{where}: first_of must be a non-empty list")
            label = str(entry.get("label") or candidates[0])
            return FirstOf(label=label, candidates=tuple(str(c) for c in candidates))
        if "latest_of" in entry:
            return LatestVersioned(base=str(entry["latest_of"]))
    raise ValueError(f"{where}: unsupported package entry {entry!r}")


def _str_list(value: Any, *, where: str) -> Tuple[str, ...]:
    items = value or []
    if not isinstance(items, list):
        raise ValueError(f"{where} must be a list")
    return tuple(str(p).strip() for p in items if str(p).strip())


def parse_dependency_spec(manager: str, raw: Dict[str, Any]) -> DependencySpec:
    where = f"dependencies.{manager}"
    required = raw.get("required") or []
    if not isinstance(required, list) or not required:
        raise ValueError(f"{where}.required must be a non-empty list")
    return DependencySpec(
        required=tuple(_parse_ref(e, where=f"{where}.required") for e in required),
        optional=_str_list(raw.get("optional"), where=f"{where}.optional"),
        patterns=_str_list(raw.get("patterns"), where=f"{where}.patterns"),
    )


def load_dependency_spec(kind: PackageManagerKind) -> DependencySpec:
    manifest = load_yaml_rel("manifests/dependencies.yaml")
    deps = manifest.get("dependencies") or {}
    if not isinstance(deps, dict):
        raise ValueError("manifests/dependencies.yaml: dependencies must be a mapping")
    raw = deps.get(kind.value)
    if not isinstance(raw, dict):
        raise ValueError(f"manifests/dependencies.yaml: no entry for {kind.value}")
    return parse_dependency_spec(kind.value, raw)

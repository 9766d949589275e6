"""Configuration loading for shards (.shards.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigError
from .resolvers import normalize_url

CONFIG_FILENAME = ".shards.yml"
ANALYSIS_ERROR_POLICIES = ("fail", "warn")


@dataclass
class ShardsConfig:
    """Settings for one bundling run, fixed for the lifetime of the run."""

    root: Path
    entrypoints: List[str] = field(default_factory=list)
    third_party_dir: Optional[Path] = None
    redirects: Dict[str, Path] = field(default_factory=dict)
    shared_import: str = "shared.html"
    sharing_threshold: int = 2
    dest_dir: Path = Path("build")
    workdir: Path = Path(".shards/work")
    dep_report: Optional[Path] = None
    strip_excludes: List[str] = field(default_factory=list)
    inline_scripts: bool = True
    inline_css: bool = True
    analyzer: str = "html-imports"
    bundler: str = "html-inliner"
    on_analysis_error: str = "fail"

    def redirect_map(self) -> Dict[str, Path]:
        """Prefix redirects handed to the filesystem resolver."""
        mapping: Dict[str, Path] = {}
        if self.third_party_dir is not None:
            mapping["../"] = self.third_party_dir
        mapping.update(self.redirects)
        return mapping

    def with_overrides(self, **overrides: Any) -> "ShardsConfig":
        """Return a copy with non-``None`` overrides applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self
        if "entrypoints" in values:
            values["entrypoints"] = _unique_urls(str(item) for item in values["entrypoints"])
        if "shared_import" in values:
            values["shared_import"] = normalize_url(str(values["shared_import"]))
        if "strip_excludes" in values:
            values["strip_excludes"] = [normalize_url(str(item)) for item in values["strip_excludes"]]
        for key in ("dest_dir", "workdir", "dep_report", "third_party_dir"):
            if key in values:
                values[key] = Path(values[key]).expanduser().resolve()
        config = replace(self, **values)
        _validate(config)
        return config


def load_config(config_path: Path) -> ShardsConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    base = config_file.parent.resolve()

    if not config_file.exists():
        return _with_defaults(ShardsConfig(root=base), base)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    root_str = _as_str(data.get("root"))
    root = (base / root_str).resolve() if root_str else base

    third_party = _as_str(data.get("third_party_dir"))
    redirects = {
        prefix: _resolve_path(root, target)
        for prefix, target in _as_str_dict(data.get("redirects")).items()
    }

    threshold = data.get("sharing_threshold", 2)
    if isinstance(threshold, bool) or _as_int(threshold) is None:
        raise ConfigError(f"sharing_threshold must be an integer, got {threshold!r}")

    report = _as_str(data.get("dep_report"))
    config = ShardsConfig(
        root=root,
        entrypoints=_unique_urls(_as_str_list(data.get("entrypoints"))),
        third_party_dir=_resolve_path(root, third_party) if third_party else None,
        redirects=redirects,
        shared_import=normalize_url(_as_str(data.get("shared_import")) or "shared.html"),
        sharing_threshold=int(threshold),
        dest_dir=_resolve_path(base, _as_str(data.get("dest_dir")) or "build"),
        workdir=_resolve_path(base, _as_str(data.get("workdir")) or ".shards/work"),
        dep_report=_resolve_path(base, report) if report else None,
        strip_excludes=[normalize_url(item) for item in _as_str_list(data.get("strip_excludes"))],
        inline_scripts=_as_bool(data.get("inline_scripts"), default=True),
        inline_css=_as_bool(data.get("inline_css"), default=True),
        analyzer=_as_str(data.get("analyzer")) or "html-imports",
        bundler=_as_str(data.get("bundler")) or "html-inliner",
        on_analysis_error=(_as_str(data.get("on_analysis_error")) or "fail").lower(),
    )
    _validate(config)
    return config


def _with_defaults(config: ShardsConfig, base: Path) -> ShardsConfig:
    return replace(
        config,
        dest_dir=_resolve_path(base, str(config.dest_dir)),
        workdir=_resolve_path(base, str(config.workdir)),
    )


def _validate(config: ShardsConfig) -> None:
    if config.on_analysis_error not in ANALYSIS_ERROR_POLICIES:
        allowed = ", ".join(ANALYSIS_ERROR_POLICIES)
        raise ConfigError(
            f"on_analysis_error must be one of {allowed}, got {config.on_analysis_error!r}"
        )
    if config.sharing_threshold < 1:
        raise ConfigError(f"sharing_threshold must be at least 1, got {config.sharing_threshold}")
    if not config.shared_import:
        raise ConfigError("shared_import must name a document")
    if config.shared_import in config.entrypoints:
        raise ConfigError(f"shared_import {config.shared_import} collides with an entry point")


def _unique_urls(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(normalize_url(item) for item in items))


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_path(base: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


def _as_str_dict(value: Any) -> Dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(key): str(item) for key, item in value.items() if isinstance(item, str)}


__all__ = ["CONFIG_FILENAME", "ConfigError", "ShardsConfig", "load_config"]

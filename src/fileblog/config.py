"""fileblog configuration loader.

Priority (high → low):
  1. CLI flags              (handled at call site, not in this module)
  2. Environment variables  (FILEBLOG_POSTS_DIR, FILEBLOG_CACHE_PATH,
                             FILEBLOG_USE_CACHE, FILEBLOG_POSTS_PER_PAGE)
  3. Per-project fileblog.yaml
  4. Global ~/.fileblog/config.yaml
  5. Hardcoded defaults

Relative ``posts.dir`` / ``cache.path`` values are resolved against the
directory that holds the YAML file they came from.
All YAML reads use yaml.safe_load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from fileblog.errors import ConfigError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".fileblog"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
PROJECT_CONFIG_NAME: str = "fileblog.yaml"

_KNOWN_SECTIONS: frozenset[str] = frozenset(["posts", "cache"])

_TRUE_STRINGS = frozenset(["1", "true", "yes", "on"])
_FALSE_STRINGS = frozenset(["0", "false", "no", "off", ""])


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class PostsCfg:
    """Where posts live and how they are read (fileblog.yaml: posts:).

    Attributes:
        dir: Directory holding the post files. Required before scanning.
        extension: File extension of posts, including the dot.
        per_page: Page size for pagination.
        published_key: Metadata key whose falsy value hides a post.
        tags_key: Metadata key holding a post's tag list.
        skip_invalid: Skip unreadable/unparsable files instead of aborting.
    """

    dir: Path | None = None
    extension: str = ".md"
    per_page: int = 10
    published_key: str = "published"
    tags_key: str = "tags"
    skip_invalid: bool = False


@dataclass
class CacheCfg:
    """Index cache settings (fileblog.yaml: cache:)."""

    enabled: bool = False
    path: Path | None = None


@dataclass
class FileBlogConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    posts: PostsCfg = field(default_factory=PostsCfg)
    cache: CacheCfg = field(default_factory=CacheCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}', ignored.",
                UserWarning,
                stacklevel=4,
            )


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}.")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}.") from None


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}.")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping.")
    return raw


def _anchor_paths(data: dict[str, Any], base: Path) -> dict[str, Any]:
    """Resolve relative posts.dir / cache.path against *base*."""
    for section, key in (("posts", "dir"), ("cache", "path")):
        sub = data.get(section)
        if isinstance(sub, dict) and sub.get(key):
            p = Path(str(sub[key])).expanduser()
            sub[key] = p if p.is_absolute() else base / p
    return data


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> FileBlogConfig:
    """Build a *FileBlogConfig* from a merged raw YAML dict."""
    cfg = FileBlogConfig()

    if "posts" in data:
        p = data["posts"] or {}
        posts_dir = p.get("dir")
        cfg.posts = PostsCfg(
            dir=Path(posts_dir) if posts_dir else cfg.posts.dir,
            extension=str(p.get("extension", cfg.posts.extension)),
            per_page=_as_int(p.get("per_page", cfg.posts.per_page), "posts.per_page"),
            published_key=str(p.get("published_key", cfg.posts.published_key)),
            tags_key=str(p.get("tags_key", cfg.posts.tags_key)),
            skip_invalid=_as_bool(
                p.get("skip_invalid", cfg.posts.skip_invalid), "posts.skip_invalid"
            ),
        )

    if "cache" in data:
        c = data["cache"] or {}
        cache_path = c.get("path")
        cfg.cache = CacheCfg(
            enabled=_as_bool(c.get("enabled", cfg.cache.enabled), "cache.enabled"),
            path=Path(cache_path) if cache_path else cfg.cache.path,
        )

    return cfg


def _apply_env_overrides(cfg: FileBlogConfig) -> FileBlogConfig:
    """Apply FILEBLOG_* environment variable overrides."""
    if posts_dir := os.environ.get("FILEBLOG_POSTS_DIR"):
        cfg.posts.dir = Path(posts_dir)
    if cache_path := os.environ.get("FILEBLOG_CACHE_PATH"):
        cfg.cache.path = Path(cache_path)
    if (use_cache := os.environ.get("FILEBLOG_USE_CACHE")) is not None:
        cfg.cache.enabled = _as_bool(use_cache, "FILEBLOG_USE_CACHE")
    if per_page := os.environ.get("FILEBLOG_POSTS_PER_PAGE"):
        cfg.posts.per_page = _as_int(per_page, "FILEBLOG_POSTS_PER_PAGE")
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> FileBlogConfig:
    """Load and return a merged *FileBlogConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *fileblog.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If a config file is not a YAML mapping or a value has
            the wrong type.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, _anchor_paths(raw_global, global_path.parent))

    # Layer 2: per-project config
    project_cfg_path = search_dir / PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, _anchor_paths(raw_project, search_dir))

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    return _apply_env_overrides(cfg)


def ensure_project_config(project_dir: Path) -> tuple[Path, bool]:
    """Create ``fileblog.yaml`` in *project_dir* with defaults if missing.

    Returns:
        ``(path, created)``: the config path and whether it was written now.
    """
    target = project_dir / PROJECT_CONFIG_NAME
    if target.exists():
        return target, False

    project_dir.mkdir(parents=True, exist_ok=True)
    content = (
        "# fileblog project configuration.\n"
        "# Relative paths are resolved against this file's directory.\n"
        "\n"
        "posts:\n"
        "  dir: posts\n"
        "  extension: .md\n"
        "  per_page: 10\n"
        "  published_key: published\n"
        "  tags_key: tags\n"
        "\n"
        "cache:\n"
        "  enabled: false\n"
        "  path: .fileblog-cache.json\n"
    )
    target.write_text(content, encoding="utf-8")
    return target, True

"""Typed configuration loading and access.

This module maps the ship.toml structure onto frozen dataclasses. Every
key is optional; a missing file yields the defaults below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_int,
    get_str,
    get_str_list,
    get_table,
)

__all__ = [
    "BuildConfig",
    "ClusterConfig",
    "ConfigError",
    "DEFAULT_CONFIG_FILE",
    "QueryFailurePolicy",
    "RegistryConfig",
    "ShipConfig",
    "load_config",
    "load_config_or_default",
]

DEFAULT_CONFIG_FILE = "ship.toml"

DEFAULT_REGISTRY_NAME = "storeacr"
DEFAULT_NAMESPACE = "pets"
DEFAULT_MANIFEST = "aks-store-quickstart.yaml"
DEFAULT_REFERENCE_WORKLOAD = "order-service"
DEFAULT_ROLLOUT_TIMEOUT_SECONDS = 300

QueryFailurePolicy = Literal["import", "fail"]

# Keys read with get_str; any other value type is a mistake in ship.toml.
_STRING_KEYS = {
    "registry": ("name", "login_server", "on_query_failure"),
    "cluster": ("namespace", "reference_workload", "kubectl_context"),
    "build": ("source_root",),
}


def _typed[T](table: Mapping[str, object], where: str, value: T | None, kind: str) -> T | None:
    """Return ``value``, raising when the key at ``where`` is set but unreadable."""
    key = where.rsplit(".", 1)[-1]
    if value is None and key in table:
        raise ValueError(f"{where} must be {kind}, got {table[key]!r}")
    return value


def _check_strings(section: str, table: Mapping[str, object]) -> None:
    for key in _STRING_KEYS[section]:
        if key in table and not isinstance(table[key], str):
            raise ValueError(f"{section}.{key} must be a string, got {table[key]!r}")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Target registry.

    on_query_failure decides what a failed tag listing means for an import:
    "import" treats the image as missing and imports it anyway, "fail"
    fails that catalog entry.
    """

    name: str = DEFAULT_REGISTRY_NAME
    login_server: str = f"{DEFAULT_REGISTRY_NAME}.azurecr.io"
    on_query_failure: QueryFailurePolicy = "import"
    tolerate_import_errors: bool = False


def _default_manifests() -> tuple[str, ...]:
    return (DEFAULT_MANIFEST,)


@dataclass(frozen=True, slots=True)
class ClusterConfig:
    namespace: str = DEFAULT_NAMESPACE
    manifests: tuple[str, ...] = field(default_factory=_default_manifests)
    reference_workload: str = DEFAULT_REFERENCE_WORKLOAD
    rollout_timeout_seconds: int = DEFAULT_ROLLOUT_TIMEOUT_SECONDS
    kubectl_context: str | None = None


@dataclass(frozen=True, slots=True)
class BuildConfig:
    # Build contexts and manifest paths are relative to this directory.
    source_root: str = "."


@dataclass(frozen=True, slots=True)
class ShipConfig:
    """Main configuration container."""

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    build: BuildConfig = field(default_factory=BuildConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ShipConfig:
        """Create ShipConfig from a mapping (parsed TOML).

        Raises:
            ValueError: If a value is present but has the wrong type or range.
        """
        registry = _typed(data, "registry", get_table(data, "registry"), "a table") or {}
        cluster = _typed(data, "cluster", get_table(data, "cluster"), "a table") or {}
        build = _typed(data, "build", get_table(data, "build"), "a table") or {}
        for section, table in (("registry", registry), ("cluster", cluster), ("build", build)):
            _check_strings(section, table)

        name = get_str(registry, "name") or DEFAULT_REGISTRY_NAME
        policy = get_str(registry, "on_query_failure") or "import"
        if policy not in ("import", "fail"):
            raise ValueError(
                f"registry.on_query_failure must be 'import' or 'fail', got {policy!r}"
            )

        timeout = _typed(
            cluster,
            "cluster.rollout_timeout_seconds",
            get_int(cluster, "rollout_timeout_seconds"),
            "an integer",
        )
        if timeout is not None and timeout <= 0:
            raise ValueError("cluster.rollout_timeout_seconds must be positive")
        tolerate = _typed(
            registry,
            "registry.tolerate_import_errors",
            get_bool(registry, "tolerate_import_errors"),
            "true or false",
        )

        manifests = _typed(
            cluster,
            "cluster.manifests",
            get_str_list(cluster, "manifests"),
            "a list of non-empty strings",
        )
        if manifests is not None and not manifests:
            raise ValueError("cluster.manifests must not be empty")

        return cls(
            registry=RegistryConfig(
                name=name,
                login_server=get_str(registry, "login_server") or f"{name}.azurecr.io",
                on_query_failure="fail" if policy == "fail" else "import",
                tolerate_import_errors=bool(tolerate),
            ),
            cluster=ClusterConfig(
                namespace=get_str(cluster, "namespace") or DEFAULT_NAMESPACE,
                manifests=tuple(manifests) if manifests else _default_manifests(),
                reference_workload=get_str(cluster, "reference_workload")
                or DEFAULT_REFERENCE_WORKLOAD,
                rollout_timeout_seconds=timeout or DEFAULT_ROLLOUT_TIMEOUT_SECONDS,
                kubectl_context=get_str(cluster, "kubectl_context"),
            ),
            build=BuildConfig(source_root=get_str(build, "source_root") or "."),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[ShipConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to ship.toml

    Returns:
        Ok(ShipConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ShipConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[ShipConfig, ConfigError]:
    """Like load_config, but a missing file yields the defaults.

    A file that exists and is broken is still an error.
    """
    if not path.exists():
        return Ok(ShipConfig())
    return load_config(path)

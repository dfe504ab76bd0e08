"""
Elfscope Configuration Management
==================================

Centralized configuration for the elfscope toolchain utility using
Python dataclasses and TOML-based persistence.

Two sections are recognised::

    [global]
    log_level = "INFO"
    max_workers = 4

    [elfscope]
    max_file_size = 268435456
    strict_file_type = false

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Tool-Specific Config ===========================


@dataclass(frozen=False, slots=True)
class InspectorConfig:
    """Configuration for the ELF inspector.

    Controls input limits, how strictly the file header ``e_type`` field
    is validated, and which tables the console dump includes.

    Reference:
        TIS Committee. (1995). Tool Interface Standard (TIS) Executable
        and Linkable Format (ELF) Specification, Version 1.2.
    """

    max_file_size: int = 268_435_456  # 256 MiB
    strict_file_type: bool = False
    show_program_headers: bool = True
    show_section_headers: bool = True


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity and batch parallelism."""

    log_level: str = "INFO"
    log_file: str = ""  # empty disables file logging
    log_json: bool = False
    max_workers: int = 4
    debug: bool = False
    version: str = "0.3.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class ElfscopeConfig:
    """Master configuration aggregating global and inspector settings.

    Usage:
        >>> config = ElfscopeConfig.load()                 # from default path
        >>> config = ElfscopeConfig.load("custom.toml")    # from custom path
        >>> config.elfscope.strict_file_type
        False
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    elfscope: InspectorConfig = field(default_factory=InspectorConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> ElfscopeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.
                  Defaults to ``<project_root>/config.toml``.

        Returns:
            A fully-populated :class:`ElfscopeConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
            tomllib.TOMLDecodeError: If the file is not valid TOML.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            elfscope=cls._build_section(InspectorConfig, raw.get("elfscope", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that newer config
        files keep loading on older releases.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)

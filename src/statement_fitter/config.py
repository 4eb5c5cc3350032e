"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from statement_fitter.fitting.measure import AF1206_LINE_WIDTH_PX


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    revision_model: str = "claude-haiku-4-5-20251001"
    enforcement_model: str = "claude-sonnet-4-5-20250929"
    max_retries: int = 3
    timeout: int = 120

    def __post_init__(self) -> None:
        _check_range("timeout", self.timeout, 1, 600)
        _check_range("max_retries", self.max_retries, 1, 10)


@dataclass(frozen=True)
class FittingConfig:
    line_width_px: float = AF1206_LINE_WIDTH_PX
    character_limit: int = 350
    target_lines: int = 2

    def __post_init__(self) -> None:
        _check_range("line_width_px", self.line_width_px, 100, 2000)
        _check_range("character_limit", self.character_limit, 1, 5000)
        _check_range("target_lines", self.target_lines, 1, 3)


@dataclass(frozen=True)
class RevisionConfig:
    version_count: int = 3
    aggressiveness: int = 50
    temperature: float = 0.8

    def __post_init__(self) -> None:
        _check_range("version_count", self.version_count, 1, 5)
        _check_range("aggressiveness", self.aggressiveness, 0, 100)
        _check_range("temperature", self.temperature, 0.0, 1.0)


@dataclass(frozen=True)
class EnforcementConfig:
    max_retries: int = 2

    def __post_init__(self) -> None:
        # Hard cap lives in CharacterEnforcer; this only bounds the config value.
        _check_range("max_retries", self.max_retries, 0, 3)


@dataclass(frozen=True)
class StoreConfig:
    ttl_days: int = 7
    db_path: str = "~/.statement-fitter/drafts.db"

    def __post_init__(self) -> None:
        _check_range("ttl_days", self.ttl_days, 0, 365)

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    fitting: FittingConfig = field(default_factory=FittingConfig)
    revision: RevisionConfig = field(default_factory=RevisionConfig)
    enforcement: EnforcementConfig = field(default_factory=EnforcementConfig)
    store: StoreConfig = field(default_factory=StoreConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        fitting=FittingConfig(**raw.get("fitting", {})),
        revision=RevisionConfig(**raw.get("revision", {})),
        enforcement=EnforcementConfig(**raw.get("enforcement", {})),
        store=StoreConfig(**raw.get("store", {})),
    )

"""
Configuration management using Dynaconf and Pydantic.

Dynaconf loads settings from files (`settings.toml`, `.secrets.toml`, the
user-scoped `~/.config/id3json/settings.toml`) and `ID3JSON_`-prefixed
environment variables. Pydantic validates the merged data into a typed
`Id3JsonSettings` object.

The `get_settings` function provides a singleton instance of the settings.
The core conversion functions never read it directly; the CLI passes the
relevant values through as keyword arguments.
"""

import json
import os
from pathlib import Path
from typing import Optional

import toml
from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from rich.console import Console

console = Console(stderr=True)

USER_CONFIG_DIR = Path.home() / ".config" / "id3json"
USER_SETTINGS_FILE = USER_CONFIG_DIR / "settings.toml"

LOCAL_SETTINGS_FILE = Path("settings.toml")

settings_loader = Dynaconf(
    envvar_prefix="ID3JSON",
    # Later files override earlier ones
    settings_files=[
        "settings.toml",
        ".secrets.toml",
        str(USER_SETTINGS_FILE),
    ],
    load_dotenv=True,
)

# Keys the loader may carry that are not settings of ours
_FIELDS = (
    "json_indent",
    "sidecar_suffix",
    "art_suffix",
    "batch_art_suffix",
    "audio_match",
    "recurse",
)


class Id3JsonSettings(BaseModel):
    """A Pydantic model that defines and validates all application settings."""

    json_indent: int = Field(default=4, ge=0)
    sidecar_suffix: str = ".json"
    # Single-file and batch modes have always used different art extensions
    art_suffix: str = ".jpg"
    batch_art_suffix: str = ".jpeg"
    audio_match: str = Field(default="mp3", min_length=1)
    recurse: bool = True

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("sidecar_suffix", "art_suffix", "batch_art_suffix")
    @classmethod
    def _suffix_has_dot(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"suffix must look like '.ext', got {v!r}")
        return v


_settings_instance: Optional[Id3JsonSettings] = None


def _normalize_keys(data: dict) -> dict:
    # Dynaconf upper-cases keys; Pydantic fields are lower-case
    lowered = {str(k).lower(): v for k, v in data.items()}
    return {k: lowered[k] for k in _FIELDS if k in lowered}


def get_settings() -> Id3JsonSettings:
    """Get the application settings as a singleton Pydantic model.

    Honors ID3JSON_SETTINGS_PATH when set: a JSON file layered in first,
    used for isolated runs and tests.
    """
    global _settings_instance
    if _settings_instance is None:
        config_dict: dict = {}

        # 1) Explicit JSON settings file
        env_settings_path = os.getenv("ID3JSON_SETTINGS_PATH")
        if env_settings_path:
            p = Path(env_settings_path)
            if p.exists():
                try:
                    config_dict.update(json.loads(p.read_text(encoding="utf-8")) or {})
                except ValueError as e:
                    console.print(f"[yellow]Ignoring malformed settings file {p}: {e}[/yellow]")

        # 2) Dynaconf loader (project + user scope + ID3JSON_* env vars)
        config_dict.update(_normalize_keys(settings_loader.as_dict() or {}))

        # 3) Project-local settings.toml overlay
        ignore_local = os.getenv("ID3JSON_IGNORE_LOCAL_SETTINGS") == "1"
        if (not ignore_local) and LOCAL_SETTINGS_FILE.exists():
            try:
                local_data = toml.loads(LOCAL_SETTINGS_FILE.read_text(encoding="utf-8")) or {}
            except toml.TomlDecodeError as e:
                console.print(f"[yellow]Ignoring malformed {LOCAL_SETTINGS_FILE}: {e}[/yellow]")
                local_data = {}
            if isinstance(local_data, dict):
                config_dict.update(_normalize_keys(local_data))

        try:
            _settings_instance = Id3JsonSettings(**_normalize_keys(config_dict))
        except ValidationError as e:
            console.print(f"[red]Configuration error:[/red]\n{e}")
            raise

    return _settings_instance


def reset_settings():
    """Reset in-memory settings (do not touch on-disk settings)."""
    global _settings_instance
    _settings_instance = None

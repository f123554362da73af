"""Configuration management using TOML."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib
except ImportError:
    import tomli as tomllib


@dataclass
class StorageConfig:
    """Configuration for the S3 storage adapter."""

    endpoint: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    bucket: str | None = None
    region: str | None = None

    # Key layout and upload options
    folder: str = ""
    storage_class: str | None = None

    # Transport
    timeout: int = 300
    max_retries: int = 0

    def validate(self) -> None:
        """Validate configuration."""
        missing = [
            name
            for name in ("endpoint", "access_key", "secret_key", "bucket")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(
                f"Storage config missing required fields: {', '.join(missing)}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StorageConfig":
        """Build configuration from a plain mapping.

        Accepts ``storageClass`` as an alias for ``storage_class`` so that
        registry configs written for the JavaScript server keep working.
        """
        values = dict(data)
        if "storageClass" in values and "storage_class" not in values:
            values["storage_class"] = values.pop("storageClass")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown storage config fields: {', '.join(unknown)}")

        config = cls(**values)
        config.folder = config.folder or ""
        return config

    @classmethod
    def from_file(cls, config_path: str | Path = "storage.toml") -> "StorageConfig":
        """Load configuration from the ``[storage]`` table of a TOML file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {config_path}\n"
                f"Copy storage.toml.example to storage.toml and edit it with your credentials."
            )

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls.from_mapping(data.get("storage", {}))

"""Store configuration with YAML loading capabilities."""

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError
from .services.paths import MAX_DOC_ID, RevisionPolicy

T = TypeVar("T", bound="ConfigModel")

DEFAULT_REPOSITORY_PATH = "/var/dms"
# Directories need the execute bit to be entered
DEFAULT_PERMISSIONS = 0o700


class ConfigModel(BaseModel):
    """Base model with YAML loading/saving capabilities."""

    @classmethod
    def from_yaml(cls: type[T], path: Path) -> T:
        """
        Load and validate configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated configuration model instance

        Raises:
            ConfigError: On file not found, invalid YAML, or validation errors
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            cls._handle_yaml_error(e, path)
        except OSError as e:
            raise ConfigError(f"Error reading configuration file {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid {cls.__name__} configuration: {path.name} is not a mapping")

        try:
            return cls(**data)
        except ValidationError as e:
            cls._handle_validation_error(e, path)

    @classmethod
    def load_or_default(cls: type[T], path: Path | None, **defaults) -> T:
        """
        Load from YAML or create with default values.

        Args:
            path: Optional path to YAML configuration file
            **defaults: Default values if file not provided

        Returns:
            Configuration model instance
        """
        if path and Path(path).exists():
            return cls.from_yaml(path)
        return cls(**defaults)

    def to_yaml(self, path: Path):
        """
        Write configuration to YAML file.

        Args:
            path: Path to write YAML file
        """
        with open(path, "w") as f:
            yaml.safe_dump(
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

    @classmethod
    def _handle_validation_error(cls, error: ValidationError, path: Path):
        """Collect validation errors into one readable ConfigError."""
        lines = [f"Invalid {cls.__name__} configuration: {path.name}"]
        for err in error.errors():
            field_path = ".".join(str(loc) for loc in err["loc"])
            if "missing" in err["type"]:
                lines.append(f"  Missing required field: {field_path}")
            else:
                lines.append(f"  {field_path}: {err['msg']}")
        raise ConfigError("\n".join(lines)) from error

    @classmethod
    def _handle_yaml_error(cls, error: yaml.YAMLError, path: Path):
        """Handle YAML parsing errors."""
        message = f"Invalid YAML syntax in: {path.name}"
        if hasattr(error, "problem_mark"):
            mark = error.problem_mark
            message += f" (line {mark.line + 1}, column {mark.column + 1})"
        raise ConfigError(message) from error


class StoreConfig(ConfigModel):
    """Construction-time options for a DocumentStore.

    Only next_id changes while a store runs; save a snapshot of it between
    runs so numbering continues where it stopped.
    """

    repository_path: Path = Path(DEFAULT_REPOSITORY_PATH)
    """Root directory of the repository."""

    repository_permissions: int = Field(default=DEFAULT_PERMISSIONS, ge=0, le=0o7777)
    """Mode for directories created in the repository."""

    next_id: int = Field(default=1, ge=1, le=MAX_DOC_ID)
    """Id handed to the next added document."""

    revision_policy: RevisionPolicy = RevisionPolicy.LOWEST
    """Revision picked by checkout when none is requested."""

    rollback_on_failure: bool = False
    """Remove directories created by an add that fails part way."""

    @field_validator("repository_permissions", mode="before")
    @classmethod
    def parse_octal(cls, value: Any) -> Any:
        """Accept octal strings such as "0750" or "0o750"."""
        if isinstance(value, str):
            text = value.strip().lower().removeprefix("0o")
            try:
                return int(text, 8)
            except ValueError:
                raise ValueError(f"not an octal permission mode: {value!r}")
        return value

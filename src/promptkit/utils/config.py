"""Configuration management for promptkit."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

USER_CONFIG_FILE = "promptkit.user.yaml"
RUNTIME_CONFIG_FILE = "promptkit.runtime.yaml"


# ============================================================================
# Configuration Models
# ============================================================================


class ValidationConfig(BaseModel):
    """Lint settings."""

    strict: bool = False


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config(BaseModel):
    """
    Main configuration for promptkit.

    Configuration is loaded from the workspace directory:
    1. promptkit.user.yaml - User configuration (optional)
    2. promptkit.runtime.yaml - Runtime state (optional, overrides user)

    Runtime config takes precedence over user config. Pydantic defaults are used
    for fields not specified in config files, so an empty workspace is valid.
    """

    workspace: Path
    plugin_name: str = "promptkit"
    plugin_path: Path = Field(default=Path("plugin"))
    logging_path: Path = Field(default=Path(".logs"))
    claude_home: Path = Field(default_factory=lambda: Path.home() / ".claude")
    variables: dict[str, str] = Field(default_factory=dict)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    @field_validator("plugin_name")
    @classmethod
    def plugin_name_must_be_kebab(cls, v: str) -> str:
        if not v or "/" in v or v.startswith("."):
            raise ValueError(f"plugin_name must be a plain directory name, got: {v}")
        return v

    @field_validator("variables", mode="before")
    @classmethod
    def stringify_variables(cls, v: Any) -> Any:
        """Template variables are text; YAML numbers and booleans become strings."""
        if not isinstance(v, dict):
            return v
        result = {}
        for key, value in v.items():
            if isinstance(value, bool):
                value = "true" if value else "false"
            elif isinstance(value, (int, float)):
                value = str(value)
            result[str(key)] = value
        return result

    @field_validator("claude_home")
    @classmethod
    def expand_claude_home(cls, v: Path) -> Path:
        return v.expanduser()

    @model_validator(mode="after")
    def resolve_paths(self) -> "Config":
        """Resolve relative paths to absolute using workspace."""
        for field_name in ("plugin_path", "logging_path"):
            path = getattr(self, field_name)
            if path.is_absolute():
                raise ValueError(f"{field_name} must be relative, got: {path}")
            setattr(self, field_name, self.workspace / path)
        return self

    @classmethod
    def load(cls, workspace_dir: Path) -> "Config":
        """
        Load configuration from a workspace directory.

        Args:
            workspace_dir: Path to workspace directory

        Returns:
            Config instance with all settings loaded and validated

        Raises:
            FileNotFoundError: If workspace directory doesn't exist
            ValidationError: If configuration is invalid
        """
        if not workspace_dir.is_dir():
            raise FileNotFoundError(f"Workspace not found: {workspace_dir}")

        config_data: dict[str, Any] = {"workspace": workspace_dir.resolve()}

        for filename in (USER_CONFIG_FILE, RUNTIME_CONFIG_FILE):
            config_file = workspace_dir / filename
            if config_file.exists():
                with open(config_file) as f:
                    file_data = yaml.safe_load(f) or {}
                config_data = cls._deep_merge(config_data, file_data)

        # Validate and create Config instance
        return cls.model_validate(config_data)

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """
        Deep merge override dict into base dict.

        Args:
            base: Base dictionary
            override: Override dictionary (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def _set_nested(obj: dict, key: str, value: Any) -> None:
        """Set a nested value in a dict using dot notation."""
        keys = key.split(".")
        for k in keys[:-1]:
            if k not in obj or not isinstance(obj[k], dict):
                obj[k] = {}
            obj = obj[k]
        obj[keys[-1]] = value

    @staticmethod
    def _unset_nested(obj: dict, key: str) -> bool:
        """Remove a nested value using dot notation, pruning emptied parents."""
        keys = key.split(".")
        parents = []
        for k in keys[:-1]:
            if not isinstance(obj.get(k), dict):
                return False
            parents.append((obj, k))
            obj = obj[k]
        if keys[-1] not in obj:
            return False
        del obj[keys[-1]]
        for parent, k in reversed(parents):
            if parent[k]:
                break
            del parent[k]
        return True

    @staticmethod
    def _read_yaml(config_path: Path) -> dict[str, Any]:
        if not config_path.exists():
            return {}
        with open(config_path) as f:
            return yaml.safe_load(f) or {}

    def _set_config_value(self, filename: str, key: str, value: Any) -> None:
        """
        Update a config value in a YAML file and refresh this instance.

        The merged result is validated before anything is written, so an
        invalid value leaves both the file and the in-memory config untouched.

        Args:
            filename: YAML file in the workspace
            key: Config key (supports dot notation for nested values)
            value: New value

        Raises:
            KeyError: If the top-level key is not a config field
            ValidationError: If the new value is invalid
        """
        self._check_key(key)
        data = self._read_yaml(self.workspace / filename)
        self._set_nested(data, key, value)
        self._write_config_file(filename, data)

    def _reset_config_value(self, filename: str, key: str) -> bool:
        """
        Remove a key from a YAML file so the default or lower layer applies.

        Returns:
            True if the key was present in the file

        Raises:
            KeyError: If the top-level key is not a config field
        """
        self._check_key(key)
        data = self._read_yaml(self.workspace / filename)
        if not self._unset_nested(data, key):
            return False
        self._write_config_file(filename, data)
        return True

    def _check_key(self, key: str) -> None:
        top = key.split(".")[0]
        if top not in type(self).model_fields or top == "workspace":
            raise KeyError(key)

    def _write_config_file(self, filename: str, data: dict[str, Any]) -> None:
        """Validate the merged config with new file data, then write and refresh."""
        config_path = self.workspace / filename
        merged: dict[str, Any] = {"workspace": self.workspace}
        for name in (USER_CONFIG_FILE, RUNTIME_CONFIG_FILE):
            file_data = data if name == filename else self._read_yaml(self.workspace / name)
            merged = self._deep_merge(merged, file_data)
        fresh = type(self).model_validate(merged)

        with open(config_path, "w") as f:
            yaml.dump(data, f, sort_keys=False)

        for field_name in type(self).model_fields:
            setattr(self, field_name, getattr(fresh, field_name))

    def get_value(self, key: str) -> Any:
        """
        Read a config value using dot notation.

        Raises:
            KeyError: If the key doesn't exist
        """
        obj: Any = self.model_dump()
        for k in key.split("."):
            if not isinstance(obj, dict) or k not in obj:
                raise KeyError(key)
            obj = obj[k]
        return obj

    def set_user(self, key: str, value: Any) -> None:
        """
        Update a config value in promptkit.user.yaml.

        Args:
            key: Config key (supports dot notation, e.g., "validation.strict")
            value: New value
        """
        self._set_config_value(USER_CONFIG_FILE, key, value)

    def set_runtime(self, key: str, value: Any) -> None:
        """
        Update a runtime value in promptkit.runtime.yaml.

        Args:
            key: Config key (supports dot notation, e.g., "variables.team")
            value: New value
        """
        self._set_config_value(RUNTIME_CONFIG_FILE, key, value)

    def reset_user(self, key: str) -> bool:
        """Remove a key from promptkit.user.yaml. Returns False if it was not set."""
        return self._reset_config_value(USER_CONFIG_FILE, key)

    def reset_runtime(self, key: str) -> bool:
        """Remove a key from promptkit.runtime.yaml. Returns False if it was not set."""
        return self._reset_config_value(RUNTIME_CONFIG_FILE, key)

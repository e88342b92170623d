"""Load and resolve model definitions from YAML files."""

import logging
from pathlib import Path
from typing import Any

import yaml

from crudforge.errors import ConfigurationError
from crudforge.hooks.registry import HookRegistry
from crudforge.hooks.types import HOOK_POINTS, ModelHooks
from crudforge.metadata.fields import FieldDescriptor
from crudforge.metadata.model import ModelDescriptor, define_model

logger = logging.getLogger(__name__)


class ModelLoader:
    """Loads model definitions from ``*.yaml`` files in a directory.

    A file describes one model:

        model: User
        table: users
        fillable: [name, email, password]
        hidden: [password]
        fields:
          - {name: id, type: identifier, primary: true}
          - {name: name, type: string, maxLength: 100}
        hooks:
          beforeCreate: hashPassword

    Files without a ``fields`` list are resolved through the bare config
    path (every fillable field is opaque text). Hook names must already be
    registered in HookRegistry.
    """

    def __init__(self, models_path: Path):
        self.models_path = models_path
        self.models: dict[str, ModelDescriptor] = {}

    def load_all(self) -> None:
        """Load every model file in the directory."""
        if not self.models_path.exists():
            logger.warning("Models directory %s does not exist", self.models_path)
            return

        for yaml_file in sorted(self.models_path.glob("*.yaml")):
            self.load_file(yaml_file)

    def load_file(self, yaml_file: Path) -> ModelDescriptor | None:
        with open(yaml_file) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {yaml_file}: {e}") from e

        if not data or "model" not in data:
            logger.warning("Skipping %s: no 'model' key", yaml_file)
            return None

        model = self.resolve_model(data)
        if model.name in self.models:
            raise ConfigurationError(
                f"Model '{model.name}' is defined more than once ({yaml_file})"
            )
        self.models[model.name] = model
        logger.debug("Loaded model '%s' from %s", model.name, yaml_file)
        return model

    def resolve_model(self, data: dict[str, Any]) -> ModelDescriptor:
        """Resolve a parsed model dict into a ModelDescriptor."""
        name = data["model"]
        hooks = self._resolve_hooks(name, data.get("hooks") or {})

        if "fields" not in data:
            return ModelDescriptor.from_config(
                name,
                {
                    "table_name": data.get("table"),
                    "primary_key": data.get("primaryKey"),
                    "timestamps": data.get("timestamps", True),
                    "fillable": data.get("fillable"),
                    "hidden": data.get("hidden"),
                    "hooks": hooks,
                },
            )

        fields = [FieldDescriptor.from_dict(f) for f in data.get("fields") or []]
        return define_model(
            name,
            fields=fields,
            table_name=data.get("table"),
            primary_key=data.get("primaryKey"),
            timestamps=data.get("timestamps", True),
            fillable=data.get("fillable") or (),
            hidden=data.get("hidden") or (),
            hooks=hooks,
        )

    def _resolve_hooks(self, model_name: str, data: dict[str, str]) -> ModelHooks:
        """Map hook point names to registered hook functions."""
        bound = {}
        for point, hook_name in data.items():
            if point not in HOOK_POINTS:
                raise ConfigurationError(
                    f"Model '{model_name}' uses unknown hook point '{point}'. "
                    f"Valid points: {', '.join(HOOK_POINTS)}"
                )
            try:
                bound[point] = HookRegistry.get(hook_name)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
        return ModelHooks.from_dict(bound)

    def get_model(self, name: str) -> ModelDescriptor | None:
        """Get a resolved model by name."""
        return self.models.get(name)

    def list_models(self) -> list[str]:
        """List all model names."""
        return list(self.models.keys())

"""Device-family table loading and validation from YAML."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from bridgeboot.core.config import family_dir
from bridgeboot.core.errors import FamilyLoadError, FamilyValidationError
from bridgeboot.core.model import DeviceFamily, DeviceType, TransitionStrategy

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys.

    YAML 1.1 booleans (``yes``/``no``/``on``/``off``) still load as bools; every
    family value is a string in the schema, so they fail validation.
    """


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise FamilyValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class FamilyTable:
    families: dict[DeviceType, DeviceFamily]
    warnings: tuple[str, ...] = ()

    def lookup(self, device_type: DeviceType | None) -> DeviceFamily:
        """Return the family entry, falling back to no transition for unlisted types."""
        kind = device_type or DeviceType.UNKNOWN
        family = self.families.get(kind)
        if family is None:
            return DeviceFamily(device_type=kind, strategy=TransitionStrategy.NONE)
        return family


def _load_schema_validator() -> Any:
    schema_text = resources.files("bridgeboot.schemas").joinpath("family.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FamilyLoadError(f"Could not read family file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise FamilyValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise FamilyValidationError(f"Family file {path} must contain a mapping at root")
    return loaded


def _normalize_extension(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip().lstrip(".").lower() or None


def _build_families(doc: dict[str, Any], source: Path | Traversable) -> list[DeviceFamily]:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise FamilyValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    families: list[DeviceFamily] = []
    for type_name, entry in doc["families"].items():
        strategy = TransitionStrategy(entry["strategy"])
        extension = _normalize_extension(entry.get("firmware_extension"))
        if strategy is TransitionStrategy.NONE and extension is not None:
            raise FamilyValidationError(
                f"{source}: family '{type_name}' has no transition but declares a firmware extension"
            )
        families.append(
            DeviceFamily(
                device_type=DeviceType(type_name),
                strategy=strategy,
                firmware_extension=extension,
            )
        )
    return families


def _packaged_family_path() -> Traversable:
    return resources.files("bridgeboot.families").joinpath("default.yaml")


def _iter_user_family_paths() -> list[Path]:
    directory = family_dir()
    if not directory.exists() or not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"})


def load_families() -> FamilyTable:
    families: dict[DeviceType, DeviceFamily] = {}
    warnings: list[str] = []

    packaged = _packaged_family_path()
    for family in _build_families(_read_yaml(packaged), packaged):
        families[family.device_type] = family

    for path in _iter_user_family_paths():
        for family in _build_families(_read_yaml(path), path):
            if family.device_type in families:
                warning = f"User family '{family.device_type.value}' overrides packaged entry"
                LOGGER.warning(warning)
                warnings.append(warning)
            families[family.device_type] = family

    return FamilyTable(families=families, warnings=tuple(warnings))

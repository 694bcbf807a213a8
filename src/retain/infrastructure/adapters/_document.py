"""JSON/YAML document files shared by the file adapters."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class DeckFileError(ValueError):
    """The deck file could not be parsed or does not match the card schema."""


def is_yaml(path: Path) -> bool:
    return path.suffix.lower() in YAML_SUFFIXES


def read_document(path: Path) -> dict[str, Any]:
    """
    Read a mapping from a JSON or YAML file, picked by suffix.

    A missing or empty file reads as an empty mapping.
    """
    if not path.exists():
        logger.warning(f"{path} does not exist, starting empty")
        return {}

    text = path.read_text(encoding="utf-8")
    try:
        document = yaml.safe_load(text) if is_yaml(path) else json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise DeckFileError(f"{path}: could not parse file: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise DeckFileError(f"{path}: expected a mapping at the top level")
    return document


def write_document(path: Path, document: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if is_yaml(path):
        text = yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    path.write_text(text, encoding="utf-8")

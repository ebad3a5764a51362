# yaml_parser.py
"""YAML loading for user-supplied configuration files such as substitution tables."""

from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def normalize_keys_recursive(data: Any) -> Any:
    """Lowercase mapping keys and replace spaces with underscores, at every depth.

    Only keys change; list items and scalar values keep their spelling.
    """
    if isinstance(data, dict):
        return {
            str(key).strip().lower().replace(" ", "_"): normalize_keys_recursive(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [normalize_keys_recursive(item) for item in data]
    return data


def load_yaml_file(
    filepath: str | Path, normalize_keys: bool = True
) -> dict[str, Any] | None:
    """
    Load a YAML file whose root element is a mapping.

    Args:
        filepath: Path to a ``.yaml``/``.yml`` file.
        normalize_keys: Whether to normalize keys with ``normalize_keys_recursive``.

    Returns:
        The parsed mapping, ``{}`` for an empty file, or ``None`` when the file
        is missing, unparsable, not YAML, or not a mapping at the root.
    """
    path = Path(filepath)
    if path.suffix.lower() not in YAML_SUFFIXES:
        logger.error("File specified is not a YAML file", filepath=str(path))
        return None

    try:
        with path.open(encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning("YAML file not found", filepath=str(path))
        return None
    except yaml.YAMLError as e:
        logger.error("Error parsing YAML file", filepath=str(path), error=str(e))
        return None

    if content is None:
        return {}
    if not isinstance(content, dict):
        logger.error(
            "YAML root element must be a mapping",
            filepath=str(path),
            parsed_type=type(content).__name__,
        )
        return None

    return normalize_keys_recursive(content) if normalize_keys else content

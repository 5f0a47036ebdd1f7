"""YAML configuration loading.

Examples:
    ```python
    from mediaservers.core.yaml import load_yaml

    config = load_yaml("config/resolver.yaml")
    ```

See Also:
    [MediaServerResolver.from_yaml()][mediaservers.services.resolver.MediaServerResolver.from_yaml]:
        Validates the returned dictionary as a
        [ResolverConfig][mediaservers.services.resolver.ResolverConfig].
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(config_path: str) -> dict[str, Any]:
    """Load a YAML mapping with ``yaml.safe_load``.

    Args:
        config_path: Path to the YAML file (absolute or relative).

    Returns:
        The parsed mapping, or an empty dict for an empty file.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file contains invalid YAML syntax.
        TypeError: If the document is not a mapping.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise TypeError(f"Config file must contain a mapping, got {type(data).__name__}")
    return data

"""
Tree definition loading.

Reads JSON or YAML files holding either a list of technology definitions,
a `{"technologies": [...]}` mapping, or a flat renderer element list.
"""

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, List

import yaml

from .core.builder import GraphBuilder
from .core.errors import DefinitionLoadError
from .core.graph import TechGraph

logger = logging.getLogger(__name__)

SAMPLE_TREE = "sample_tree.yaml"


def load_definitions(path: Path) -> List[Any]:
    """
    Read raw definitions from a file.

    Raises:
        DefinitionLoadError: if the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DefinitionLoadError(f"Cannot read tree definition {path}: {e}") from e

    return parse_definitions(content, fmt=path.suffix.lower(), source=str(path))


def parse_definitions(content: str, fmt: str = ".json", source: str = "<string>") -> List[Any]:
    """Parse definition text; `fmt` is a file suffix (.json, .yaml, .yml)."""
    try:
        if fmt in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise DefinitionLoadError(f"Cannot parse tree definition {source}: {e}") from e

    if isinstance(data, dict):
        data = data.get("technologies")
    if not isinstance(data, list):
        raise DefinitionLoadError(
            f"Tree definition {source} must be a list or a mapping with a 'technologies' list"
        )
    logger.debug(f"Read {len(data)} definition entries from {source}")
    return data


def is_element_list(definitions: List[Any]) -> bool:
    """True when the entries look like renderer elements rather than definitions."""
    return bool(definitions) and all(
        isinstance(item, dict) and "group" in item for item in definitions
    )


def load_graph(path: Path) -> TechGraph:
    """Load and build a graph, whichever supported shape the file holds."""
    definitions = load_definitions(path)
    builder = GraphBuilder()
    if is_element_list(definitions):
        return builder.build_elements(definitions)
    return builder.build(definitions)


def sample_definitions() -> List[Any]:
    """Definitions of the bundled sample tree."""
    content = resources.files("techtree.data").joinpath(SAMPLE_TREE).read_text(encoding="utf-8")
    return parse_definitions(content, fmt=".yaml", source=SAMPLE_TREE)


def load_sample_graph() -> TechGraph:
    return GraphBuilder().build(sample_definitions())

import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from contentkit.rules.models import Rules

# First ```yaml (or ```yml) fenced block in a markdown document
_YAML_FENCE = re.compile(r"^\s*```ya?ml[^\n]*\n(.*?)^\s*```", re.MULTILINE | re.DOTALL)


def extract_yaml(content: str) -> str:
    """Body of the first yaml fence, or the whole text when there is none."""
    match = _YAML_FENCE.search(content)
    return match.group(1) if match else content


def parse_rules(content: str) -> Rules:
    """
    Parse and validate rules text.
    Raises ValueError on bad YAML or a schema violation.
    """
    try:
        data = yaml.safe_load(extract_yaml(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Rules file is not valid YAML: {e}") from e

    if data is None:
        return Rules()
    if not isinstance(data, dict):
        raise ValueError("Rules file must contain a mapping of sections")

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid rules:\n{e}") from e


def load_rules(path: Path) -> Rules:
    """
    Read and validate the rules file at `path`.
    Raises FileNotFoundError if it is missing.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Rules file not found at: {path}")
    return parse_rules(path.read_text())

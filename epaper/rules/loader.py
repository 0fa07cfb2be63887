import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from epaper.rules.models import Rules

# First ```yaml (or ```yml) block of a markdown document
YAML_FENCE = re.compile(r"^\s*```ya?ml[^\n]*\n(.*?)^\s*```", re.MULTILINE | re.DOTALL)


def extract_yaml(text: str) -> str:
    """Return the fenced YAML block when ``text`` is markdown, else ``text``."""
    match = YAML_FENCE.search(text)
    return match.group(1) if match else text


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    try:
        data = yaml.safe_load(extract_yaml(path.read_text(encoding="utf-8")))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e


def default_rules_path() -> Path:
    """
    Resolve the rules file: $EPAPER_RULES_PATH, then ./rules.yaml,
    then rules.yaml at the repository root.
    """
    if env_path := os.environ.get("EPAPER_RULES_PATH"):
        return Path(env_path)
    cwd_path = Path("rules.yaml").resolve()
    if cwd_path.exists():
        return cwd_path
    return Path(__file__).resolve().parent.parent.parent / "rules.yaml"

"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import ProofsetSettings


def load_config(cli_path: str | None = None) -> ProofsetSettings:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./proofset.yaml"),
        Path.home() / ".proofset" / "config.yaml",
    ]

    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ValueError(f"Invalid config in {path}: expected a mapping")
                raw = _expand_env_vars(raw)
                return ProofsetSettings(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return ProofsetSettings()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `proofset config init`
DEFAULT_CONFIG_TEMPLATE = """\
# proofset.yaml
# The seed password is never read from this file. Pass it with -p,
# answer the prompt (-p -), or set PROOFSET_SEED.

# Secret chain
chain:
  algorithm: "sha256"          # sha256 | sha512
  spacing: "standard"          # standard | legacy (two spaces before the path, v1 output)
  include_full_path: true      # commit dir\\file path as well as the bare filename

# Output files
output:
  base_dir: "."
  details_file: "proofset-details.txt"
  hash_list_file: "proofset-file-details-hash-list.txt"
  simple_file: "proofset-simple.txt"
  manifest_file: "proofset-manifest.yaml"
  write_manifest: true         # public parameters only, never the seed

# Directory walking and hashing
scan:
  ignore_patterns: [".git", "node_modules", "__pycache__", ".venv"]
  max_workers: 8

# File content verification (verify -f <dir>)
match:
  mode: "path"                 # path | hash
  only_matches: false

# Logging
log_level: "warn"              # debug | info | warn | error
log_format: "text"             # text | json
"""

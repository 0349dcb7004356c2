#!/usr/bin/env python3
"""Validate garage YAML files against the schema."""
import sys
from datetime import date
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def validate_garage_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single garage YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=_dates_as_strings(data), schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    return errors


def _dates_as_strings(node):
    """Unquoted dates load as date objects; the schema expects ISO strings."""
    if isinstance(node, dict):
        return {k: _dates_as_strings(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_dates_as_strings(v) for v in node]
    if isinstance(node, date):
        return node.isoformat()
    return node


def main(argv=None):
    """Validate the given garage YAML files."""
    paths = [Path(p) for p in (argv if argv is not None else sys.argv[1:])]
    if not paths:
        print("Usage: validate_yaml.py GARAGE_FILE [GARAGE_FILE ...]")
        return 1

    schema = load_schema()
    all_valid = True
    for filepath in paths:
        if not filepath.exists():
            print(f"FAIL: {filepath.name}")
            print(f"  File not found: {filepath}")
            all_valid = False
            continue
        errors = validate_garage_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())

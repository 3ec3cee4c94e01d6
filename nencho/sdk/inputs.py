"""Loading reconciliation inputs from YAML or JSON files.

Accepted layouts:
- a single input mapping
- a list of input mappings
- a mapping with an 'employees' list

Each entry either carries precomputed `deductions` or raw `evidence`
(see nencho.sdk.declarations); the two cannot be mixed in one entry.

YAML is a superset of JSON, so both are read with yaml.safe_load. Files
must be UTF-8.
"""

from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import ValidationError

from .declarations import InputRecord
from .schemas import EvidenceInput, ReconciliationInput


class InputFileError(Exception):
    """Raised when an input file cannot be parsed into reconciliation inputs."""
    pass


def input_from_mapping(entry: Any) -> InputRecord:
    """Validate one entry as EvidenceInput (if it has 'evidence') or ReconciliationInput.

    Raises:
        pydantic.ValidationError: Entry does not match the schema
    """
    if isinstance(entry, dict) and "evidence" in entry:
        return EvidenceInput.model_validate(entry)
    return ReconciliationInput.model_validate(entry)


def parse_inputs(data: Union[dict, list]) -> list[InputRecord]:
    """Build input records from already-loaded data.

    Raises:
        InputFileError: Unsupported layout or a record fails schema validation
    """
    if isinstance(data, dict) and "employees" in data:
        entries = data["employees"]
    elif isinstance(data, dict):
        entries = [data]
    elif isinstance(data, list):
        entries = data
    else:
        raise InputFileError(f"Expected a mapping or a list, got {type(data).__name__}")

    if not isinstance(entries, list):
        raise InputFileError("'employees' must be a list")

    inputs = []
    for index, entry in enumerate(entries):
        try:
            inputs.append(input_from_mapping(entry))
        except ValidationError as e:
            raise InputFileError(f"Entry {index}: {e}") from e
    return inputs


def load_inputs(path: Path) -> list[InputRecord]:
    """Load reconciliation inputs from a YAML or JSON file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except UnicodeDecodeError as e:
            raise InputFileError(f"{path.name}: not valid UTF-8 ({e.reason} at byte {e.start})") from e
        except yaml.YAMLError as e:
            raise InputFileError(f"{path.name}: {e}") from e

    if data is None:
        raise InputFileError(f"{path.name}: file is empty")
    return parse_inputs(data)

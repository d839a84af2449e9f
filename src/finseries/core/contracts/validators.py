"""
JSON Schema Contract Validators

Validation of raw JSON input against the JSON Schema contracts shipped in
contracts/schema/ next to this module. Uses the jsonschema library
(draft 2020-12).

Schemas:
- raw_series.json   one series as parallel timestamp/value columns
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Loader and cache of JSON Schema files.

    Schemas are looked up in the given directory, by default the package's
    own contracts/schema/.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Load (and cache) a JSON Schema file.

        Args:
            schema_name: Schema name without extension (e.g. 'raw_series')

        Returns:
            The schema as a dict

        Raises:
            FileNotFoundError: If the schema file does not exist
            json.JSONDecodeError: If the file is not valid JSON
            ValueError: If the file is not a valid draft 2020-12 schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Validates documents against one named schema."""

    def __init__(self, schema_name: str, loader: SchemaLoader | None = None):
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: If data violates the schema
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        """All validation errors, in schema order."""
        return self.validator.iter_errors(data)


class RawSeriesValidator(ContractValidator):
    """Validator of the raw_series contract."""

    def __init__(self):
        super().__init__("raw_series")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_raw_series(data: Dict[str, Any]) -> None:
    """
    Validate a raw series document.

    Column lengths are checked by RawSeriesRecord, not by the schema.

    Raises:
        ValidationError: If data violates the raw_series contract
    """
    RawSeriesValidator().validate(data)

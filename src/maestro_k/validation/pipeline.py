"""YAML validation pipeline.

Steps, in order: file existence, YAML syntax, optional JSON Schema check.
Without a schema only the YAML syntax is checked.
"""

import datetime
import functools
import json
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

import yaml
from jsonschema import exceptions as jsonschema_exceptions
from jsonschema.validators import validator_for
from pydantic import BaseModel
from referencing import Registry, Resource, Specification
from referencing.exceptions import NoSuchResource, Unresolvable
from referencing.jsonschema import DRAFT3, DRAFT4, DRAFT202012, specification_with

from maestro_k.errors import (
    EncodingError,
    FileReadError,
    NotFoundError,
    SchemaLoadError,
    SchemaViolation,
    YamlSyntaxError,
)

ROOT_FIELD = "(root)"


class Finding(BaseModel):
    """A single schema violation."""

    field: str  # dotted path, e.g. "databases.0.name"
    description: str


class ValidationReport(BaseModel):
    yaml_path: Path
    schema_path: Path | None = None
    findings: list[Finding] = []

    @property
    def valid(self) -> bool:
        return not self.findings


def check_files(yaml_path: Path | str, schema_path: Path | str | None = None) -> ValidationReport:
    """Validate a YAML file and return every finding.

    Raises NotFoundError, FileReadError, YamlSyntaxError, EncodingError or SchemaLoadError when
    validation cannot run. Schema violations are returned, not raised.
    """
    yaml_path = Path(yaml_path)
    if not yaml_path.exists():
        raise NotFoundError(yaml_path, "YAML")

    if schema_path is not None:
        schema_path = Path(schema_path)
        if not schema_path.exists():
            raise NotFoundError(schema_path, "Schema")
        schema_path = schema_path.resolve()

    document = load_yaml(yaml_path)
    report = ValidationReport(yaml_path=yaml_path, schema_path=schema_path)
    if schema_path is None:
        return report

    instance = json.loads(yaml_to_json(document))
    schema = load_schema(schema_path)
    report.findings = evaluate(instance, schema, schema_path)
    return report


def validate_files(yaml_path: Path | str, schema_path: Path | str | None = None) -> None:
    """Like check_files, but raise SchemaViolation when there are findings."""
    report = check_files(yaml_path, schema_path)
    if not report.valid:
        raise SchemaViolation(report.findings)


def load_yaml(yaml_path: Path):
    # Binary mode lets the YAML reader detect the encoding and report bad bytes itself.
    try:
        with open(yaml_path, "rb") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise YamlSyntaxError(yaml_path, str(e)) from e
    except OSError as e:
        raise FileReadError(yaml_path, e.strerror or str(e)) from e


def yaml_to_json(document) -> str:
    """Encode a parsed YAML tree as JSON.

    YAML dates and timestamps become ISO 8601 strings.
    """
    try:
        return json.dumps(document, default=_encode_temporal, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"failed to convert YAML to JSON: {e}") from e


def _encode_temporal(value):
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def load_schema(schema_path: Path) -> dict | bool:
    try:
        schema = _read_json(schema_path)
    except (OSError, ValueError) as e:
        raise SchemaLoadError(schema_path, str(e)) from e

    if not isinstance(schema, (dict, bool)):
        raise SchemaLoadError(schema_path, "schema must be a JSON object")

    try:
        validator_for(schema).check_schema(schema)
    except jsonschema_exceptions.SchemaError as e:
        raise SchemaLoadError(schema_path, e.message) from e
    return schema


def evaluate(instance, schema: dict | bool, schema_path: Path | None = None) -> list[Finding]:
    """Return all violations in the order the validator reports them.

    When ``schema_path`` is given, relative ``$ref``s are resolved against the
    schema file's location and loaded from disk.
    """
    specification = _specification_of(schema)
    registry = Registry(retrieve=functools.partial(_retrieve_file, specification=specification))
    if schema_path is not None:
        schema = _with_base_uri(schema, schema_path.as_uri(), specification)

    validator = validator_for(schema)(schema, registry=registry)
    try:
        return [
            Finding(field=_field_path(error), description=error.message)
            for error in validator.iter_errors(instance)
        ]
    except Unresolvable as e:
        raise SchemaLoadError(schema_path or "<schema>", f"unresolvable reference: {e}") from e


def _read_json(path: Path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _specification_of(schema) -> Specification:
    dialect = schema.get("$schema", "") if isinstance(schema, dict) else ""
    return specification_with(dialect, default=DRAFT202012)


def _with_base_uri(schema, uri: str, specification: Specification):
    if not isinstance(schema, dict):
        return schema
    id_key = "id" if specification in (DRAFT3, DRAFT4) else "$id"
    if id_key in schema:
        return schema
    return {id_key: uri, **schema}


def _retrieve_file(uri: str, specification: Specification) -> Resource:
    """Load a referenced schema from a ``file://`` URI. Nothing is fetched over the network."""
    parts = urlsplit(uri)
    if parts.scheme != "file":
        raise NoSuchResource(ref=uri)
    try:
        contents = _read_json(Path(url2pathname(parts.path)))
    except (OSError, ValueError) as e:
        raise NoSuchResource(ref=uri) from e
    return Resource.from_contents(contents, default_specification=specification)


def _field_path(error: jsonschema_exceptions.ValidationError) -> str:
    if not error.absolute_path:
        return ROOT_FIELD
    return ".".join(str(part) for part in error.absolute_path)

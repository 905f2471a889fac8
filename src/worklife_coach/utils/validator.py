"""
Validation Module

Validates configuration files and persisted profile records against JSON
schemas, and converts pydantic field errors into coach ValidationErrors.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

import pydantic
import structlog
from jsonschema import Draft7Validator, FormatChecker
from jsonschema import ValidationError as SchemaValidationError

from ..models.core import ActionStep, Challenge, Goal, Mindset, PersonalInfo, Skill, UserProfile
from .errors import ConfigurationError, DataIntegrityError, MissingFieldError, ValidationError

logger = structlog.get_logger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"
USER_PROFILE_SCHEMA = "user_profile_schema.json"

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


class ConfigValidator:
    """Validates JSON documents against the bundled schemas."""

    def __init__(self, schema_dir: Path = SCHEMA_DIR):
        """
        Initialize validator with schema directory.

        Args:
            schema_dir: Path to directory containing JSON schemas
        """
        self.schema_dir = schema_dir
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Load JSON schema from file.

        Args:
            schema_name: Schema filename (e.g., "user_profile_schema.json")

        Returns:
            Loaded schema dictionary

        Raises:
            ConfigurationError: If schema file not found or invalid
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self.schema_dir / schema_name
        if not schema_path.exists():
            logger.error(
                "schema_not_found",
                schema_name=schema_name,
                schema_path=str(schema_path),
            )
            raise ConfigurationError(f"Schema file not found: {schema_path}")

        try:
            with open(schema_path, "r", encoding="utf-8") as f:
                schema = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("schema_invalid_json", schema_name=schema_name, error=str(e))
            raise ConfigurationError(f"Invalid JSON in schema {schema_name}: {e}")

        self._schemas[schema_name] = schema
        logger.debug("schema_loaded", schema_name=schema_name)
        return schema

    def iter_errors(
        self, document: Dict[str, Any], schema_name: str
    ) -> List[SchemaValidationError]:
        schema = self.load_schema(schema_name)
        validator = Draft7Validator(schema, format_checker=FormatChecker())
        return sorted(validator.iter_errors(document), key=lambda e: list(e.path))

    def validate(self, config: Dict[str, Any], schema_name: str) -> None:
        """
        Validate configuration against schema.

        Args:
            config: Configuration dictionary to validate
            schema_name: Schema filename to validate against

        Raises:
            ConfigurationError: If validation fails with detailed error messages
        """
        errors = self.iter_errors(config, schema_name)
        if not errors:
            logger.debug("validation_passed", schema_name=schema_name)
            return

        logger.warning(
            "validation_failed", schema_name=schema_name, error_count=len(errors)
        )
        raise ConfigurationError(
            "\n".join(format_schema_errors(errors, f"Configuration {schema_name}"))
        )

    def validate_file(self, config_path: Path, schema_name: str) -> Dict[str, Any]:
        """
        Load and validate a JSON file.

        Raises:
            ConfigurationError: If file not found, unparseable, or invalid
        """
        if not config_path.exists():
            logger.error("config_file_not_found", config_path=str(config_path))
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in {config_path.name}: {e}\n"
                f"Check for trailing commas, missing quotes, or invalid syntax."
            )

        self.validate(config, schema_name)
        return config


def format_schema_errors(
    errors: List[SchemaValidationError], subject: str
) -> List[str]:
    """
    Format jsonschema errors into readable messages.

    Args:
        errors: List of validation errors from jsonschema
        subject: What was being validated, for the header line

    Returns:
        List of formatted error messages
    """
    messages = [f"[X] {subject} failed validation:"]

    for error in errors:
        path = " -> ".join([str(p) for p in error.absolute_path]) or "(root)"

        if error.validator == "required":
            messages.append(f"  * Missing required field at {path}: {error.message}")
        elif error.validator == "type":
            messages.append(
                f"  * Type mismatch at '{path}': {error.message} "
                f"(expected {error.validator_value})"
            )
        elif error.validator in ("minimum", "maximum"):
            messages.append(f"  * Value out of range at '{path}': {error.message}")
        elif error.validator == "enum":
            messages.append(
                f"  * Invalid value at '{path}': {error.message} "
                f"(allowed: {error.validator_value})"
            )
        else:
            messages.append(f"  * Validation error at '{path}': {error.message}")

    return messages


_default_validator: Optional[ConfigValidator] = None


def get_default_validator() -> ConfigValidator:
    global _default_validator
    if _default_validator is None:
        _default_validator = ConfigValidator()
    return _default_validator


def validate_data_integrity(record: Dict[str, Any]) -> None:
    """
    Structurally check a serialized profile record.

    Checks required sub-records, that user_id is a string, that list-shaped
    fields are arrays, and that progress.last_updated is present.

    Raises:
        DataIntegrityError: If the record is structurally corrupt
    """
    errors = get_default_validator().iter_errors(record, USER_PROFILE_SCHEMA)
    if not errors:
        return

    paths = [".".join(str(p) for p in e.absolute_path) or "(root)" for e in errors]
    logger.error("data_integrity_check_failed", error_paths=paths)
    raise DataIntegrityError(
        "\n".join(format_schema_errors(errors, "Profile record")),
        context={"paths": paths},
    )


def parse_model(
    model_cls: Type[ModelT], data: Union[Dict[str, Any], ModelT]
) -> ModelT:
    """
    Validate data into a model, reporting the first bad field.

    Raises:
        MissingFieldError: Listing every absent required field
        ValidationError: With the dotted field path and offending value
    """
    if isinstance(data, model_cls):
        data = data.model_dump()
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as e:
        missing = [
            ".".join(str(part) for part in err["loc"])
            for err in e.errors()
            if err["type"] == "missing"
        ]
        if missing:
            raise MissingFieldError(missing) from e
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or model_cls.__name__
        raise ValidationError(
            f"Invalid {field}: {first['msg']}", field=field, value=first.get("input")
        ) from e


def validate_personal_info(data: Union[Dict[str, Any], PersonalInfo]) -> PersonalInfo:
    """Age 0-120, years of experience 0-60, non-empty education."""
    info = parse_model(PersonalInfo, data)
    if not info.education.strip():
        raise ValidationError(
            "Education must not be empty", field="education", value=info.education
        )
    return info


def validate_goal(data: Union[Dict[str, Any], Goal]) -> Goal:
    return parse_model(Goal, data)


def validate_challenge(data: Union[Dict[str, Any], Challenge]) -> Challenge:
    return parse_model(Challenge, data)


def validate_skill(data: Union[Dict[str, Any], Skill]) -> Skill:
    return parse_model(Skill, data)


def validate_action_step(data: Union[Dict[str, Any], ActionStep]) -> ActionStep:
    return parse_model(ActionStep, data)


def validate_mindset(data: Union[Dict[str, Any], Mindset]) -> Mindset:
    return parse_model(Mindset, data)


def validate_user_profile(data: Union[Dict[str, Any], UserProfile]) -> UserProfile:
    """
    Validate a complete profile.

    Education may still be empty here: profiles are built up over several
    conversations, and completeness is reported separately.

    Raises:
        ValidationError: For the first invalid field
    """
    return parse_model(UserProfile, data)

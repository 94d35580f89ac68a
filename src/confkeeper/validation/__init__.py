"""
confkeeper.validation - Content and Name Validation
=====================================================

Components:
    - Validator (ABC):            validate(content) -> diagnostics
    - AcceptAllValidator:         accepts everything
    - YamlValidator, PrometheusRulesValidator, PrometheusConfigValidator:
                                  in-process YAML shape checks
    - CommandValidator:           external checker (promtool, amtool)
    - ChainValidator:             sequential composition
    - MockValidator:              deterministic verdicts for tests
    - create_validator():         ValidatorKind → validator chain
    - validate_artifact_name():   name rules per ArtifactGroup

Usage:
    from confkeeper.validation import create_validator, MockValidator
"""

from confkeeper.validation.base import AcceptAllValidator, Validator
from confkeeper.validation.chain import ChainValidator
from confkeeper.validation.command import CommandValidator
from confkeeper.validation.factory import create_validator
from confkeeper.validation.mock import MockValidator
from confkeeper.validation.names import validate_artifact_name, validate_key_name
from confkeeper.validation.structural import (
    PrometheusConfigValidator,
    PrometheusRulesValidator,
    YamlValidator,
)

__all__ = [
    "Validator",
    "AcceptAllValidator",
    "ChainValidator",
    "CommandValidator",
    "MockValidator",
    "PrometheusConfigValidator",
    "PrometheusRulesValidator",
    "YamlValidator",
    "create_validator",
    "validate_artifact_name",
    "validate_key_name",
]

"""
confkeeper.validation.factory - Validator Factory
===================================================

Maps a ValidatorKind to a concrete validator chain:

    PROMETHEUS_CONFIG   → PrometheusConfigValidator → promtool check config
    PROMETHEUS_RULES    → PrometheusRulesValidator  → promtool check rules
    ALERTMANAGER_CONFIG → YamlValidator             → amtool check-config
    YAML                → YamlValidator
    NONE                → AcceptAllValidator

Usage:
    >>> validator = create_validator(ValidatorKind.PROMETHEUS_RULES, ValidatorConfig())
"""

from __future__ import annotations

from typing import Optional

from confkeeper.core.config import ValidatorConfig
from confkeeper.core.enums import ValidatorKind
from confkeeper.core.exceptions import ConfigurationError
from confkeeper.validation.base import AcceptAllValidator, Validator
from confkeeper.validation.chain import ChainValidator
from confkeeper.validation.command import CommandValidator
from confkeeper.validation.structural import (
    PrometheusConfigValidator,
    PrometheusRulesValidator,
    YamlValidator,
)


def create_validator(
    kind: ValidatorKind,
    config: Optional[ValidatorConfig] = None,
) -> Validator:
    """Create the validator chain for ``kind``.

    Args:
        kind: Which family of artifact is being validated.
        config: Tool paths and timeout. Defaults to ValidatorConfig().

    Returns:
        A ready-to-use Validator.

    Raises:
        ConfigurationError: If the kind is not recognized.
    """
    config = config or ValidatorConfig()
    timeout = config.timeout_seconds

    if kind == ValidatorKind.PROMETHEUS_CONFIG:
        return ChainValidator([
            PrometheusConfigValidator(),
            CommandValidator(
                config.promtool_path,
                ["check", "config"],
                name="promtool",
                timeout_seconds=timeout,
            ),
        ])
    if kind == ValidatorKind.PROMETHEUS_RULES:
        return ChainValidator([
            PrometheusRulesValidator(),
            CommandValidator(
                config.promtool_path,
                ["check", "rules"],
                name="promtool",
                timeout_seconds=timeout,
            ),
        ])
    if kind == ValidatorKind.ALERTMANAGER_CONFIG:
        return ChainValidator([
            YamlValidator(),
            CommandValidator(
                config.amtool_path,
                ["check-config"],
                name="amtool",
                timeout_seconds=timeout,
            ),
        ])
    if kind == ValidatorKind.YAML:
        return YamlValidator()
    if kind == ValidatorKind.NONE:
        return AcceptAllValidator()

    raise ConfigurationError(
        message=f"Unknown validator kind: {kind!r}",
        error_code="UNKNOWN_VALIDATOR",
        details={"kind": str(kind)},
    )

"""
confkeeper.validation.structural - YAML Shape Validators
==========================================================

Fast, in-process checks run before any external tool:

    YamlValidator               body must be well-formed YAML
    PrometheusRulesValidator    rules file must define a "groups" list
    PrometheusConfigValidator   prometheus.yml must keep the reserved
                                sections the platform depends on

The reserved prometheus.yml sections are:

    global.scrape_interval
    rule_files
    scrape_configs[0].job_name == "prometheus"
    scrape_configs[1].job_name == "PushGateway"
    scrape_configs[2].job_name == "kubernetes-pods"

Users append their own jobs after those three.
"""

from __future__ import annotations

from typing import Any, NoReturn, Optional

import structlog
import yaml

from confkeeper.core.exceptions import ValidationError
from confkeeper.validation.base import Validator


logger = structlog.get_logger()

RESERVED_SCRAPE_JOBS = ("prometheus", "PushGateway", "kubernetes-pods")

_APPEND_HINT = (
    "Please do a get of the existing Prometheus config file and append to it."
)


def _load_yaml(content: str, validator_name: str) -> Any:
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ValidationError(
            message=f"Unable to parse the provided YAML: {exc}",
            diagnostics=str(exc),
            error_code="INVALID_YAML",
            details={"validator": validator_name},
        ) from exc


class YamlValidator(Validator):
    """Accept any well-formed YAML document."""

    name = "yaml"

    async def validate(self, content: str) -> str:
        _load_yaml(content, self.name)
        return ""


# =============================================================================
# Prometheus Rules
# =============================================================================
class PrometheusRulesValidator(Validator):
    """Basic shape check for a Prometheus rules file.

    Rejects empty documents, documents without a top-level ``groups`` key,
    and documents whose ``groups`` is not a list.
    """

    name = "prometheus_rules_structure"

    async def validate(self, content: str) -> str:
        document = _load_yaml(content, self.name)

        if not document:
            raise ValidationError(
                message="Invalid Rule: it is empty",
                error_code="RULE_EMPTY",
            )
        if not isinstance(document, dict) or "groups" not in document:
            raise ValidationError(
                message="Invalid Rule: does not have root element groups: defined",
                error_code="RULE_GROUPS_NOT_DEFINED",
            )
        if not isinstance(document["groups"], list):
            raise ValidationError(
                message="Invalid Rule: does not have even a single rule group defined",
                error_code="RULE_NO_GROUP",
            )

        logger.debug(
            "rules_structure_valid",
            groups=len(document["groups"]),
        )
        return ""


# =============================================================================
# Prometheus Config
# =============================================================================
class PrometheusConfigValidator(Validator):
    """Reject prometheus.yml bodies that drop a reserved section."""

    name = "prometheus_config_structure"

    async def validate(self, content: str) -> str:
        document = _load_yaml(content, self.name)

        if document is None:
            self._reject("Invalid Prometheus YAML: it is empty.", "CONFIG_EMPTY")
        if not isinstance(document, dict):
            self._reject(
                "Invalid Prometheus YAML: the top level must be a mapping.",
                "CONFIG_NOT_MAPPING",
            )

        global_section = document.get("global")
        if not isinstance(global_section, dict) or "scrape_interval" not in global_section:
            self._reject(
                "Invalid Prometheus YAML: it does not have the mandatory name "
                "global.scrape_interval.",
                "SCRAPE_INTERVAL_NOT_DEFINED",
            )
        if "rule_files" not in document:
            self._reject(
                "Prometheus YAML does not have rule_files defined.",
                "RULE_FILES_NOT_DEFINED",
            )

        scrape_configs = document.get("scrape_configs")
        if not isinstance(scrape_configs, list) or len(scrape_configs) < len(RESERVED_SCRAPE_JOBS):
            self._reject(
                "Prometheus YAML does not have scrape_configs jobs defined.",
                "SCRAPE_JOBS_NOT_DEFINED",
            )

        for index, expected in enumerate(RESERVED_SCRAPE_JOBS):
            job = scrape_configs[index]
            job_name = job.get("job_name") if isinstance(job, dict) else None
            if job_name != expected:
                self._reject(
                    f"Prometheus YAML does not have job "
                    f"scrape_configs[{index}].job_name={expected} defined.",
                    "RESERVED_JOB_NOT_DEFINED",
                    {"index": index, "expected": expected, "found": job_name},
                )
        return ""

    def _reject(
        self,
        message: str,
        error_code: str,
        details: Optional[dict[str, Any]] = None,
    ) -> NoReturn:
        raise ValidationError(
            message=f"{message} {_APPEND_HINT}",
            error_code=error_code,
            details=details,
        )

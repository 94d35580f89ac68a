"""
Tests for confkeeper.validation.structural
============================================

What's Being Tested:
    - YamlValidator accepts well-formed YAML and rejects the rest
    - PrometheusRulesValidator requires a "groups" list
    - PrometheusConfigValidator protects the reserved sections
"""

import pytest
import yaml

from confkeeper.core.exceptions import ValidationError
from confkeeper.validation.structural import (
    RESERVED_SCRAPE_JOBS,
    PrometheusConfigValidator,
    PrometheusRulesValidator,
    YamlValidator,
)


# =============================================================================
# Helpers
# =============================================================================
def _prometheus_config(**overrides) -> dict:
    document = {
        "global": {"scrape_interval": "15s"},
        "rule_files": ["/etc/prometheus/rules/*.rules"],
        "scrape_configs": [
            {"job_name": "prometheus"},
            {"job_name": "PushGateway"},
            {"job_name": "kubernetes-pods"},
            {"job_name": "my-service"},
        ],
    }
    document.update(overrides)
    return document


async def _reject_code(validator, content: str) -> str:
    with pytest.raises(ValidationError) as exc_info:
        await validator.validate(content)
    return exc_info.value.error_code


# =============================================================================
# Tests: YamlValidator
# =============================================================================
class TestYamlValidator:
    async def test_accepts_yaml(self) -> None:
        assert await YamlValidator().validate("route:\n  receiver: team\n") == ""

    async def test_rejects_broken_yaml(self) -> None:
        assert await _reject_code(YamlValidator(), "route: [unclosed") == "INVALID_YAML"


# =============================================================================
# Tests: PrometheusRulesValidator
# =============================================================================
class TestPrometheusRulesValidator:
    async def test_accepts_groups(self) -> None:
        body = yaml.safe_dump({"groups": [{"name": "disk", "rules": []}]})
        assert await PrometheusRulesValidator().validate(body) == ""

    async def test_accepts_empty_group_list(self) -> None:
        assert await PrometheusRulesValidator().validate("groups: []") == ""

    async def test_rejects_empty_document(self) -> None:
        assert await _reject_code(PrometheusRulesValidator(), "") == "RULE_EMPTY"

    async def test_rejects_missing_groups(self) -> None:
        code = await _reject_code(PrometheusRulesValidator(), "rules: []")
        assert code == "RULE_GROUPS_NOT_DEFINED"

    async def test_rejects_scalar_document(self) -> None:
        code = await _reject_code(PrometheusRulesValidator(), "just text")
        assert code == "RULE_GROUPS_NOT_DEFINED"

    async def test_rejects_non_list_groups(self) -> None:
        code = await _reject_code(PrometheusRulesValidator(), "groups: disk")
        assert code == "RULE_NO_GROUP"


# =============================================================================
# Tests: PrometheusConfigValidator
# =============================================================================
class TestPrometheusConfigValidator:
    async def test_accepts_config_with_reserved_sections(self) -> None:
        body = yaml.safe_dump(_prometheus_config())
        assert await PrometheusConfigValidator().validate(body) == ""

    async def test_rejects_empty(self) -> None:
        assert await _reject_code(PrometheusConfigValidator(), "") == "CONFIG_EMPTY"

    async def test_rejects_list_document(self) -> None:
        code = await _reject_code(PrometheusConfigValidator(), "- a\n- b\n")
        assert code == "CONFIG_NOT_MAPPING"

    async def test_requires_scrape_interval(self) -> None:
        body = yaml.safe_dump(_prometheus_config(**{"global": {"evaluation_interval": "1m"}}))
        code = await _reject_code(PrometheusConfigValidator(), body)
        assert code == "SCRAPE_INTERVAL_NOT_DEFINED"

    async def test_requires_rule_files(self) -> None:
        document = _prometheus_config()
        del document["rule_files"]
        code = await _reject_code(PrometheusConfigValidator(), yaml.safe_dump(document))
        assert code == "RULE_FILES_NOT_DEFINED"

    async def test_requires_reserved_job_count(self) -> None:
        body = yaml.safe_dump(_prometheus_config(scrape_configs=[{"job_name": "prometheus"}]))
        code = await _reject_code(PrometheusConfigValidator(), body)
        assert code == "SCRAPE_JOBS_NOT_DEFINED"

    async def test_reserved_jobs_must_be_in_order(self) -> None:
        body = yaml.safe_dump(_prometheus_config(scrape_configs=[
            {"job_name": "prometheus"},
            {"job_name": "kubernetes-pods"},
            {"job_name": "PushGateway"},
        ]))
        with pytest.raises(ValidationError) as exc_info:
            await PrometheusConfigValidator().validate(body)

        exc = exc_info.value
        assert exc.error_code == "RESERVED_JOB_NOT_DEFINED"
        assert exc.details["index"] == 1
        assert exc.details["expected"] == RESERVED_SCRAPE_JOBS[1]
        assert "append" in exc.message

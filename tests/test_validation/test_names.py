"""
Tests for confkeeper.validation.names
=======================================

Artifact names must be valid ConfigMap keys and obey their group's rule.
"""

import pytest

from confkeeper.core.exceptions import InvalidNameError
from confkeeper.core.models import default_groups
from confkeeper.validation.names import (
    MAX_NAME_LENGTH,
    validate_artifact_name,
    validate_key_name,
)

GROUPS = {g.name: g for g in default_groups()}


class TestValidateKeyName:
    @pytest.mark.parametrize("name", ["a.rules", "node_exporter.rules", "x", "a-b.c_d"])
    def test_valid(self, name) -> None:
        validate_key_name(name)

    def test_max_length_allowed(self) -> None:
        validate_key_name("a" * MAX_NAME_LENGTH)

    @pytest.mark.parametrize(
        "name",
        [
            "",
            "a" * (MAX_NAME_LENGTH + 1),
            "a rules",
            "../etc/passwd",
            "a:rules",
            "règles.rules",
            "--",
            ".-.",
        ],
    )
    def test_invalid(self, name) -> None:
        with pytest.raises(InvalidNameError) as exc_info:
            validate_key_name(name)
        assert exc_info.value.name == name


class TestValidateArtifactName:
    def test_suffix_group(self) -> None:
        validate_artifact_name("disk.rules", GROUPS["alertrules"])

    def test_suffix_required(self) -> None:
        with pytest.raises(InvalidNameError) as exc_info:
            validate_artifact_name("disk.yml", GROUPS["alertrules"])
        assert ".rules" in exc_info.value.message

    def test_bare_suffix_rejected(self) -> None:
        with pytest.raises(InvalidNameError):
            validate_artifact_name(".rules", GROUPS["alertrules"])

    def test_fixed_name_group(self) -> None:
        validate_artifact_name("prometheus.yml", GROUPS["prometheus-config"])
        with pytest.raises(InvalidNameError) as exc_info:
            validate_artifact_name("other.yml", GROUPS["prometheus-config"])
        assert exc_info.value.details["group"] == "prometheus-config"

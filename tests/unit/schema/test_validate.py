"""
Tests for attribute validators.
"""

import pytest

from zureform.schema import validate
from zureform.schema.schema import ValueType


class TestCosmosAccountName:
    """Tests for cosmos_account_name."""

    @pytest.mark.parametrize("value", ["abc", "my-account-01", "a" * 50])
    def test_valid(self, value):
        validate.cosmos_account_name(value, "account_name")

    @pytest.mark.parametrize("value", ["ab", "a" * 51, "MyAccount", "under_score", "dot.name", 123])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="3 - 50 characters"):
            validate.cosmos_account_name(value, "account_name")


class TestCosmosEntityName:
    """Tests for cosmos_entity_name."""

    @pytest.mark.parametrize("value", ["a", "appdb", "with space", "x" * 255])
    def test_valid(self, value):
        validate.cosmos_entity_name(value, "name")

    def test_empty(self):
        with pytest.raises(ValueError, match="between 1 and 255"):
            validate.cosmos_entity_name("", "name")

    def test_too_long(self):
        with pytest.raises(ValueError, match="between 1 and 255"):
            validate.cosmos_entity_name("x" * 256, "name")

    @pytest.mark.parametrize("value", ["a/b", "a\\b", "a#b", "a?b"])
    def test_forbidden_characters(self, value):
        with pytest.raises(ValueError, match="cannot contain"):
            validate.cosmos_entity_name(value, "name")


class TestCosmosThroughput:
    """Tests for cosmos_throughput."""

    @pytest.mark.parametrize("value", [400, 500, 10000])
    def test_valid(self, value):
        validate.cosmos_throughput(value, "throughput")

    def test_below_minimum(self):
        with pytest.raises(ValueError, match="minimum of 400"):
            validate.cosmos_throughput(300, "throughput")

    def test_not_increment(self):
        with pytest.raises(ValueError, match="increments of 100"):
            validate.cosmos_throughput(450, "throughput")

    @pytest.mark.parametrize("value", ["400", 400.0, True])
    def test_not_integer(self, value):
        with pytest.raises(ValueError, match="must be an integer"):
            validate.cosmos_throughput(value, "throughput")


class TestResourceGroupName:
    """Tests for resource_group_name."""

    @pytest.mark.parametrize("value", ["rg", "rg-app_01", "rg.(prod)", "x" * 90])
    def test_valid(self, value):
        validate.resource_group_name(value, "resource_group_name")

    def test_blank(self):
        with pytest.raises(ValueError, match="cannot be blank"):
            validate.resource_group_name("", "resource_group_name")

    def test_too_long(self):
        with pytest.raises(ValueError, match="90 characters"):
            validate.resource_group_name("x" * 91, "resource_group_name")

    def test_trailing_period(self):
        with pytest.raises(ValueError, match="period"):
            validate.resource_group_name("rg.", "resource_group_name")

    def test_invalid_characters(self):
        with pytest.raises(ValueError, match="alphanumeric"):
            validate.resource_group_name("rg/app", "resource_group_name")

    def test_schema(self):
        schema = validate.schema_resource_group_name()

        assert schema.type == ValueType.STRING
        assert schema.required is True
        assert schema.force_new is True
        assert schema.check("resource_group_name", "rg.") == [
            "resource_group_name cannot end with a period"
        ]

"""Unit tests for the operation registry and dispatcher."""

import pytest

from core.errors import UpstreamError
from tools.operations import build_registry
from tools.registry import ToolRegistry
from tools.schemas import CheckBlockArgs, CheckIpArgs
from tests.conftest import make_check_payload


@pytest.fixture
def registry(mock_client):
    return build_registry(mock_client, max_tokens=20000)


class TestRegistration:
    def test_four_operations_in_order(self, registry):
        assert [op.name for op in registry.operations()] == [
            "check_ip", "bulk_check", "check_block", "get_blacklist",
        ]

    def test_only_block_and_blacklist_are_guarded(self, registry):
        guarded = {op.name for op in registry.operations() if op.guarded}
        assert guarded == {"check_block", "get_blacklist"}

    def test_duplicate_name_is_rejected(self):
        registry = ToolRegistry()
        registry.register("check_ip", "first", CheckIpArgs, lambda args: "one")

        with pytest.raises(ValueError, match="already registered"):
            registry.register("check_ip", "second", CheckIpArgs, lambda args: "two")


class TestDispatch:
    def test_unknown_operation(self, registry):
        result = registry.dispatch("report_ip", {})
        assert result.is_error is True
        assert result.text == "Unknown operation: report_ip"

    @pytest.mark.parametrize("arguments", [[1, 2], "192.0.2.1", 7])
    def test_non_mapping_arguments_are_an_error_result(self, registry, mock_client, arguments):
        result = registry.dispatch("check_ip", arguments)

        assert result.is_error is True
        assert result.text.startswith("Invalid arguments for check_ip: expected an object")
        mock_client.get_json.assert_not_called()

    def test_none_arguments_mean_no_arguments(self, registry, mock_client, blacklist_payload):
        mock_client.get_json.return_value = blacklist_payload

        result = registry.dispatch("get_blacklist", None)

        assert result.is_error is False
        mock_client.get_json.assert_called_once_with("/blacklist", {"confidenceMinimum": 90})

    def test_defaults_are_applied(self, registry, mock_client):
        mock_client.get_json.return_value = {"data": make_check_payload(ip="192.0.2.1")}

        result = registry.dispatch("check_ip", {"ip_address": "192.0.2.1"})

        assert result.is_error is False
        mock_client.get_json.assert_called_once_with(
            "/check", {"ipAddress": "192.0.2.1", "maxAgeInDays": 30, "verbose": "false"}
        )

    def test_flagged_at_threshold(self, registry, mock_client):
        mock_client.get_json.return_value = {"data": make_check_payload(ip="192.0.2.1", score=75)}

        result = registry.dispatch("check_ip", {"ip_address": "192.0.2.1", "threshold": 75})

        assert "FLAGGED" in result.text

    @pytest.mark.parametrize(
        "name,arguments,field",
        [
            ("check_ip", {"ip_address": "not-an-ip"}, "ip_address"),
            ("check_ip", {"ip_address": "192.0.2.1", "max_age_days": 0}, "max_age_days"),
            ("check_ip", {"ip_address": "192.0.2.1", "max_age_days": 366}, "max_age_days"),
            ("check_ip", {"ip_address": "192.0.2.1", "threshold": 101}, "threshold"),
            ("check_ip", {}, "ip_address"),
            ("bulk_check", {"ip_addresses": []}, "ip_addresses"),
            ("bulk_check", {"ip_addresses": [f"10.0.0.{i}" for i in range(101)]}, "ip_addresses"),
            ("check_block", {"network": "198.51.100.7"}, "network"),
            ("check_block", {"network": "198.51.100.0/24", "confidence_threshold": -1},
             "confidence_threshold"),
            ("get_blacklist", {"confidence_minimum": 24}, "confidence_minimum"),
            ("get_blacklist", {"limit": 500001}, "limit"),
            ("get_blacklist", {"limit": 0}, "limit"),
        ],
    )
    def test_validation_errors_name_the_field_and_skip_network(
        self, registry, mock_client, name, arguments, field
    ):
        result = registry.dispatch(name, arguments)

        assert result.is_error is True
        assert result.text.startswith(f"Invalid arguments for {name}:")
        assert f"  - {field}:" in result.text
        mock_client.get_json.assert_not_called()
        mock_client.get_text.assert_not_called()

    def test_multiple_failing_fields_are_all_listed(self, registry):
        result = registry.dispatch(
            "check_ip", {"ip_address": "192.0.2.1", "max_age_days": 0, "threshold": 200}
        )
        assert "  - max_age_days:" in result.text
        assert "  - threshold:" in result.text

    def test_unknown_argument_is_rejected(self, registry):
        result = registry.dispatch("check_ip", {"ip_address": "192.0.2.1", "max_age_day": 7})
        assert result.is_error is True
        assert "max_age_day" in result.text

    def test_upstream_error_becomes_error_result(self, registry, mock_client):
        mock_client.get_json.side_effect = UpstreamError("AbuseIPDB API error", status_code=401)

        result = registry.dispatch("check_ip", {"ip_address": "192.0.2.1"})

        assert result.is_error is True
        assert result.text == "Error in check_ip: AbuseIPDB API error (HTTP 401)"

    def test_unexpected_exception_becomes_error_result(self, mock_client):
        registry = ToolRegistry()

        def explode(args):
            raise RuntimeError("kaboom")

        registry.register("check_ip", "boom", CheckIpArgs, explode)

        result = registry.dispatch("check_ip", {"ip_address": "192.0.2.1"})

        assert result.is_error is True
        assert "RuntimeError: kaboom" in result.text


class TestTokenBudget:
    def test_oversized_guarded_output_is_withheld(self, mock_client):
        registry = ToolRegistry(max_tokens=10)
        registry.register("check_block", "", CheckBlockArgs, lambda args: "x" * 100, guarded=True)

        result = registry.dispatch("check_block", {"network": "198.51.100.0/24"})

        assert result.is_error is False
        assert "exceeds the limit of 10 tokens" in result.text
        assert "break_token_rule" in result.text

    def test_break_token_rule_overrides(self, mock_client):
        registry = ToolRegistry(max_tokens=10)
        registry.register("check_block", "", CheckBlockArgs, lambda args: "x" * 100, guarded=True)

        result = registry.dispatch(
            "check_block", {"network": "198.51.100.0/24", "break_token_rule": True}
        )

        assert result.text == "x" * 100

    def test_unguarded_output_is_never_withheld(self):
        registry = ToolRegistry(max_tokens=10)
        registry.register("check_ip", "", CheckIpArgs, lambda args: "x" * 100)

        result = registry.dispatch("check_ip", {"ip_address": "192.0.2.1"})

        assert result.text == "x" * 100

    def test_real_blacklist_is_guarded(self, mock_client, blacklist_payload):
        mock_client.get_json.return_value = blacklist_payload
        registry = build_registry(mock_client, max_tokens=50)

        denied = registry.dispatch("get_blacklist", {})
        allowed = registry.dispatch("get_blacklist", {"break_token_rule": True})

        assert "Response too large" in denied.text
        assert allowed.text.startswith("Blacklist Retrieved: 4 entries")

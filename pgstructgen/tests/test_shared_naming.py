import pytest

from pgstructgen.shared.naming import (
    INPUT_SUFFIX,
    NON_RAW_KEYWORDS,
    RUST_KEYWORDS,
    input_struct_name,
    is_valid_field_name,
    is_valid_struct_name,
    row_struct_name,
    sanitize_field_name,
    to_pascal_case,
)


class TestToPascalCase:
    @pytest.mark.parametrize(
        "input_str,expected",
        [
            ("customer_orders", "CustomerOrders"),
            ("users", "Users"),
            ("hello-world", "HelloWorld"),
            ("helloWorld", "HelloWorld"),
            ("order_line_items", "OrderLineItems"),
            ("table_2fa", "Table2fa"),
            ("__leading__trailing__", "LeadingTrailing"),
            ("", ""),
            ("_", ""),
            ("a", "A"),
            ("CustomerOrders", "CustomerOrders"),
            ("HTTPServer", "HTTPServer"),
            ("café_orders", "CaféOrders"),
            ("用户", "用户"),
            ("straße-adressen", "StraßeAdressen"),
            ("123abc", "123abc"),
        ],
    )
    def test_to_pascal_case(self, input_str, expected):
        assert to_pascal_case(input_str) == expected

    @pytest.mark.parametrize(
        "value",
        ["customer_orders", "CustomerOrders", "api_keys", "HTTPServer", "x", "café_orders"],
    )
    def test_to_pascal_case_idempotent(self, value):
        once = to_pascal_case(value)
        assert to_pascal_case(once) == once

    def test_to_pascal_case_deterministic(self):
        result1 = to_pascal_case("customer_orders")
        result2 = to_pascal_case("customer_orders")
        assert result1 == result2 == "CustomerOrders"


class TestStructNames:
    def test_row_struct_name(self):
        assert row_struct_name("customer_orders") == "CustomerOrders"

    def test_input_struct_name(self):
        assert input_struct_name("customer_orders") == "CustomerOrdersInput"

    def test_input_struct_name_uses_suffix(self):
        assert input_struct_name("users") == f"Users{INPUT_SUFFIX}"

    def test_names_share_casing(self):
        table = "audit_log_entries"
        assert input_struct_name(table).startswith(row_struct_name(table))


class TestIsValidStructName:
    @pytest.mark.parametrize("value", ["Users", "CaféOrders", "用户", "Table2fa"])
    def test_valid(self, value):
        assert is_valid_struct_name(value)

    @pytest.mark.parametrize("value", ["", "123abc", "Self", "Order$Items"])
    def test_invalid(self, value):
        assert not is_valid_struct_name(value)


class TestIsValidFieldName:
    @pytest.mark.parametrize("value", ["email", "type", "final", "_hidden", "prénom"])
    def test_valid(self, value):
        assert is_valid_field_name(value)

    @pytest.mark.parametrize(
        "value",
        ["", "_", "2fa_secret", "created-at", "first name", "price$", "self", "crate"],
    )
    def test_invalid(self, value):
        assert not is_valid_field_name(value)


class TestSanitizeFieldName:
    def test_plain_name_unchanged(self):
        assert sanitize_field_name("email") == "email"
        assert sanitize_field_name("prénom") == "prénom"

    def test_keyword_becomes_raw_identifier(self):
        assert sanitize_field_name("type") == "r#type"
        assert sanitize_field_name("match") == "r#match"

    @pytest.mark.parametrize(
        "reserved",
        [
            "abstract",
            "become",
            "box",
            "do",
            "final",
            "gen",
            "macro",
            "override",
            "priv",
            "try",
            "typeof",
            "unsized",
            "virtual",
            "yield",
        ],
    )
    def test_reserved_word_becomes_raw_identifier(self, reserved):
        assert reserved in RUST_KEYWORDS
        assert sanitize_field_name(reserved) == f"r#{reserved}"

    def test_all_raw_capable_keywords_sanitized(self):
        for keyword in RUST_KEYWORDS - NON_RAW_KEYWORDS:
            assert sanitize_field_name(keyword) == f"r#{keyword}"

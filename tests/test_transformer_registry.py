"""Tests for TransformerRegistry."""
from datetime import date

import pytest

from gristsync.transformer.registry import TransformerRegistry


@pytest.fixture
def registry():
    return TransformerRegistry()


class TestTransformerRegistry:
    """Test named transformers."""

    def test_none_serializes(self, registry):
        """Test the default transformer is plain serialization."""
        assert registry.transform(["a", "b"], "NONE") == "a;b"
        assert registry.transform(["a", "b"], None) == "a;b"

    def test_case_insensitive_names(self, registry):
        """Test transformer names ignore case."""
        assert registry.transform("Alice", "uppercase") == "ALICE"
        assert registry.has("trim")

    def test_text_transforms(self, registry):
        """Test text transformers."""
        assert registry.transform("  Bob ", "TRIM") == "Bob"
        assert registry.transform("Bob", "LOWERCASE") == "bob"
        assert registry.transform(12, "STRING") == "12"
        assert registry.transform(None, "UPPERCASE") is None

    def test_number_transforms(self, registry):
        """Test number conversion, leaving bad input unchanged."""
        assert registry.transform("42", "INTEGER") == 42
        assert registry.transform("3.5", "FLOAT") == 3.5
        assert registry.transform("abc", "INTEGER") == "abc"
        assert registry.transform("inf", "INTEGER") == "inf"

    def test_boolean_transform(self, registry):
        """Test boolean conversion."""
        assert registry.transform("yes", "BOOLEAN") is True
        assert registry.transform("0", "BOOLEAN") is False
        assert registry.transform(2, "BOOLEAN") is True
        assert registry.transform("maybe", "BOOLEAN") == "maybe"

    def test_date_transform(self, registry):
        """Test date formatting."""
        assert registry.transform("2024-01-15T10:30:00Z", "DATE") == "2024-01-15"
        assert registry.transform(date(2024, 1, 15), "DATE", format="%d/%m/%Y") == "15/01/2024"
        assert registry.transform("not a date", "DATE") == "not a date"

    def test_json_transform(self, registry):
        """Test JSON text output."""
        assert registry.transform([1, 2], "JSON") == "[1,2]"

    def test_unknown_falls_back(self, registry):
        """Test unknown names use default serialization."""
        assert registry.transform({"x": 1}, "DOES_NOT_EXIST") == '{"x":1}'

    def test_register_custom(self, registry):
        """Test registering a custom transformer."""
        registry.register("double", lambda x, **kw: x * 2)
        assert registry.transform(4, "DOUBLE") == 8
        assert "DOUBLE" in registry.names()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

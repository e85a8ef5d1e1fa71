# tests/utils/test_cache_serializer.py
"""Tests for fanblog/utils/cache_serializer.py module."""

from datetime import UTC, datetime

import pytest

from fanblog.errors import CacheDeserializationError, CacheSerializationError
from fanblog.schemas import Category
from fanblog.utils.cache_serializer import (
    COMPRESSION_MARKER,
    compress,
    decompress,
    deserialize,
    do_compress,
    serialize,
)


class TestSerialize:
    """Tests for serialize function."""

    def test_serialize_dict(self) -> None:
        """Test serializing a dictionary."""
        result = serialize({"name": "test", "value": 123})
        assert isinstance(result, str)
        assert '"name":"test"' in result

    def test_serialize_model(self) -> None:
        """Test pydantic models are dumped in JSON mode."""
        result = serialize(Category(id=3, title="Technology", slug="technology"))
        assert deserialize(result) == {
            "id": 3,
            "title": "Technology",
            "slug": "technology",
            "description": None,
            "count": 0,
        }

    def test_serialize_list_of_models(self) -> None:
        """Test lists of models serialize like the cached category list."""
        cats = [Category(id=1, title="A", slug="a"), Category(id=2, title="B", slug="b")]
        assert [c["slug"] for c in deserialize(serialize(cats))] == ["a", "b"]

    def test_serialize_datetime(self) -> None:
        """Test datetimes are written as ISO strings."""
        result = serialize({"at": datetime(2024, 5, 1, tzinfo=UTC)})
        assert "2024-05-01T00:00:00+00:00" in result

    def test_non_str_keys(self) -> None:
        """Test integer keys are accepted."""
        assert deserialize(serialize({1: "a"})) == {"1": "a"}

    def test_unserializable_raises(self) -> None:
        """Test integers beyond 64 bits raise CacheSerializationError."""
        with pytest.raises(CacheSerializationError):
            serialize({"big": 2**70})


class TestDeserialize:
    def test_invalid_json(self) -> None:
        """Test invalid JSON raises CacheDeserializationError."""
        with pytest.raises(CacheDeserializationError):
            deserialize("{not json")


class TestCompression:
    """Tests for compress, decompress and do_compress."""

    def test_compress_adds_marker(self) -> None:
        """Test compressed payloads start with the marker."""
        assert compress("x" * 2000).startswith(COMPRESSION_MARKER)

    def test_decompress_restores(self) -> None:
        """Test decompress reverses compress."""
        data = '{"body":"' + "lorem ipsum " * 200 + '"}'
        assert decompress(compress(data)) == data

    def test_decompress_plain_passthrough(self) -> None:
        """Test strings without the marker are returned unchanged."""
        assert decompress('{"a":1}') == '{"a":1}'

    def test_decompress_corrupt(self) -> None:
        """Test a corrupt payload raises CacheDeserializationError."""
        with pytest.raises(CacheDeserializationError):
            decompress(COMPRESSION_MARKER + "bm90IGd6aXA=")

    def test_do_compress_threshold(self) -> None:
        """Test only payloads above the threshold are compressed."""
        assert do_compress("x" * 1025, 1024)
        assert not do_compress("x" * 1024, 1024)

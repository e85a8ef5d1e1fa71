"""
Serialization and compression helpers for cached values.

Values are stored as orjson text. Payloads above the configured threshold are
gzipped and base64 encoded behind a short marker so readers can tell them apart.
"""

from base64 import b64decode, b64encode
from binascii import Error as BinasciiError
from gzip import BadGzipFile
from gzip import compress as gzip_compress
from gzip import decompress as gzip_decompress
from typing import Any

from orjson import OPT_NON_STR_KEYS, JSONDecodeError, JSONEncodeError
from orjson import dumps as orjson_dumps
from orjson import loads as orjson_loads
from pydantic import BaseModel

from fanblog.errors import CacheDeserializationError, CacheSerializationError
from fanblog.monitoring import get_logger

logger = get_logger(__name__)

COMPRESSION_MARKER = "\x00GZIP\x00"


def _default(value: object) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return str(value)


def serialize(value: object) -> str:
    """
    Serialize value to a JSON string.

    Args:
        value: Value to serialize. Pydantic models are dumped in JSON mode.

    Returns:
        JSON serialized string.

    Raises:
        CacheSerializationError: If serialization fails.
    """
    try:
        return orjson_dumps(value, default=_default, option=OPT_NON_STR_KEYS).decode("utf-8")
    except (JSONEncodeError, TypeError) as e:
        logger.exception("Serialization failed")
        raise CacheSerializationError from e


def deserialize(value: str) -> Any:
    """
    Deserialize a JSON string.

    Raises:
        CacheDeserializationError: If the payload is not valid JSON.
    """
    try:
        return orjson_loads(value)
    except JSONDecodeError as e:
        logger.exception("Deserialization failed")
        raise CacheDeserializationError from e


def compress(data: str) -> str:
    """Gzip ``data`` and return it base64 encoded behind the marker."""
    try:
        compressed = gzip_compress(data.encode("utf-8"))
    except (OSError, ValueError) as e:
        logger.exception("Compression failed")
        raise CacheSerializationError("Cannot compress value") from e
    return COMPRESSION_MARKER + b64encode(compressed).decode("ascii")


def decompress(data: str) -> str:
    """
    Reverse :func:`compress`.

    Strings without the marker are returned untouched.
    """
    if not data.startswith(COMPRESSION_MARKER):
        return data
    try:
        compressed = b64decode(data[len(COMPRESSION_MARKER) :].encode("ascii"))
        return gzip_decompress(compressed).decode("utf-8")
    except (BadGzipFile, BinasciiError, EOFError, OSError, UnicodeDecodeError) as e:
        logger.exception("Decompression failed")
        raise CacheDeserializationError("Cannot decompress value") from e


def do_compress(data: str, threshold: int) -> bool:
    """Return True when ``data`` is larger than ``threshold`` bytes."""
    return len(data.encode("utf-8")) > threshold

"""JSON encoding and decoding backed by msgspec."""

from pathlib import PurePath
from typing import Any, Literal, Union, overload

import msgspec

from sqlchain.exceptions import SerializationError

__all__ = ("decode_json", "encode_json")


def _enc_hook(value: Any) -> Any:
    """Encode values msgspec does not handle natively."""
    if isinstance(value, PurePath):
        return str(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    msg = f"Cannot encode objects of type {type(value).__name__}"
    raise NotImplementedError(msg)


_encoder = msgspec.json.Encoder(enc_hook=_enc_hook)
_decoder = msgspec.json.Decoder()


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
    """Encode data to JSON.

    Raises:
        SerializationError: If the data contains an unsupported type.

    Returns:
        JSON as text, or bytes when ``as_bytes`` is set.
    """
    try:
        encoded = _encoder.encode(data)
    except (TypeError, NotImplementedError, msgspec.EncodeError) as exc:
        raise SerializationError(str(exc)) from exc
    return encoded if as_bytes else encoded.decode("utf-8")


def decode_json(data: Union[str, bytes]) -> Any:
    """Decode JSON text or bytes.

    Raises:
        SerializationError: If the payload is not valid JSON.

    Returns:
        The decoded Python object.
    """
    try:
        return _decoder.decode(data)
    except msgspec.DecodeError as exc:
        raise SerializationError(str(exc)) from exc

"""CBOR decoding and encoding following the CTAP2 canonical form."""

from __future__ import annotations

from typing import Any

import cbor2

_MAX_NESTED_LEVELS = 4


def _read_head(data: bytes, pos: int) -> tuple[int, int, int]:
    if pos >= len(data):
        raise ValueError("unexpected end of CBOR data")
    initial = data[pos]
    major, info = initial >> 5, initial & 0x1F
    pos += 1
    if info < 24:
        return major, info, pos
    if info <= 27:
        end = pos + (1 << (info - 24))
        if end > len(data):
            raise ValueError("unexpected end of CBOR data")
        return major, int.from_bytes(data[pos:end], "big"), end
    if info == 31:
        raise ValueError("indefinite-length CBOR items are forbidden")
    raise ValueError(f"invalid CBOR additional information {info}")


def _enter(depth: int) -> int:
    depth += 1
    if depth > _MAX_NESTED_LEVELS:
        raise ValueError(
            f"CBOR exceeded max nested level {_MAX_NESTED_LEVELS}"
        )
    return depth


def _skip_item(data: bytes, pos: int, depth: int) -> int:
    """Check one data item for forbidden constructs and return where it ends."""
    start = pos
    major, arg, pos = _read_head(data, pos)
    if major in (0, 1, 7):
        return pos
    if major in (2, 3):
        end = pos + arg
        if end > len(data):
            raise ValueError("unexpected end of CBOR data")
        return end
    if major == 4:
        depth = _enter(depth)
        for _ in range(arg):
            pos = _skip_item(data, pos, depth)
        return pos
    if major == 5:
        depth = _enter(depth)
        seen: set[bytes] = set()
        for _ in range(arg):
            key_start = pos
            pos = _skip_item(data, pos, depth)
            key = data[key_start:pos]
            if key in seen:
                raise ValueError("duplicate CBOR map key")
            seen.add(key)
            pos = _skip_item(data, pos, depth)
        return pos
    raise ValueError(f"CBOR tags are forbidden (at offset {start})")


def unmarshal(data: bytes) -> Any:
    """Decode the first CBOR item in ``data`` under the CTAP2 restrictions.

    Indefinite lengths, tags, duplicate map keys and more than four levels of
    nesting are rejected. Bytes after the first item are ignored.
    """
    raw = bytes(data)
    end = _skip_item(raw, 0, 0)
    try:
        return cbor2.loads(raw[:end])
    except cbor2.CBORError as exc:
        raise ValueError(str(exc)) from exc


def marshal(value: Any) -> bytes:
    """Encode ``value`` using CTAP2 canonical CBOR."""
    return cbor2.dumps(value, canonical=True)
import base64
import io

import pytest

from webauthnkit.encoding import (
    CHALLENGE_LENGTH,
    create_challenge,
    decode_json,
    decode_json_stream,
    decode_url_base64,
    encode_url_base64,
)


def test_base64_in_json_document():
    encoded = base64.urlsafe_b64encode(b"test base64 data").rstrip(b"=").decode()
    raw = '{"string_data": "test string", "encoded_data": "%s"}' % encoded
    got = decode_json(raw)
    assert got["string_data"] == "test string"
    assert decode_url_base64(got["encoded_data"]) == b"test base64 data"


def test_base64_null_in_json_document():
    got = decode_json('{"string_data": "test string", "encoded_data": null}')
    assert got["string_data"] == "test string"
    assert decode_url_base64(got["encoded_data"]) is None


def test_decode_accepts_padding():
    assert decode_url_base64("dGVzdA==") == b"test"


def test_decode_accepts_bytes():
    assert decode_url_base64(b"dGVzdA") == b"test"


def test_decode_rejects_standard_alphabet():
    with pytest.raises(ValueError):
        decode_url_base64("ab+/")


def test_decode_rejects_bad_length():
    with pytest.raises(ValueError):
        decode_url_base64("abcde")


def test_round_trip_all_byte_values():
    data = bytes(range(256))
    assert decode_url_base64(encode_url_base64(data)) == data


def test_create_challenge_length_and_uniqueness():
    first = create_challenge()
    assert len(first) == CHALLENGE_LENGTH == 32
    assert first != create_challenge()


def test_challenge_string_matches_raw_url_encoding():
    challenge = create_challenge()
    expected = base64.urlsafe_b64encode(challenge).rstrip(b"=").decode()
    assert encode_url_base64(challenge) == expected
    assert "=" not in encode_url_base64(challenge)


def test_decode_json_allows_trailing_whitespace():
    assert decode_json('  {"a": 1}\n\n') == {"a": 1}


def test_decode_json_rejects_trailing_garbage():
    with pytest.raises(ValueError) as exc:
        decode_json('{"a": 1}\n\ntrailing\n')
    assert str(exc.value) == "The body contains trailing data"


def test_decode_json_rejects_second_value():
    with pytest.raises(ValueError, match="trailing data"):
        decode_json('{"a": 1} {"b": 2}')


def test_decode_json_stream_bytes():
    assert decode_json_stream(io.BytesIO(b'{"id": "abc"}')) == {"id": "abc"}


def test_decode_json_stream_text_trailing():
    with pytest.raises(ValueError, match="trailing data"):
        decode_json_stream(io.StringIO('[1, 2] 3'))


def test_decode_json_rejects_empty():
    with pytest.raises(ValueError):
        decode_json("")
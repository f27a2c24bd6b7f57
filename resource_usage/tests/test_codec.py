import pytest

from resource_usage import codec
from resource_usage.errors import EncodeError
from resource_usage.types import ScBytes, ScU32, ScVec


def _nested(depth: int):
    v = ScU32(1)
    for _ in range(depth):
        v = ScVec((v,))
    return v


def test_encoding_is_canonical():
    a = codec.encode({"b": 1, "a": 2})
    b = codec.encode({"a": 2, "b": 1})
    assert a == b


def test_lower_tags_variants():
    assert codec.lower(ScU32(4)) == {"type": "u32", "value": 4}
    assert codec.lower(ScVec((ScU32(1),))) == {"type": "vec", "value": [{"type": "u32", "value": 1}]}


def test_decode_inverts_encode():
    raw = codec.encode(ScBytes(b"\x00\x01"))
    assert codec.decode(raw) == {"type": "bytes", "value": b"\x00\x01"}


def test_depth_limit():
    limits = codec.EncodeLimits(depth=10, max_bytes=1 << 20)
    codec.encode(_nested(3), limits)
    with pytest.raises(EncodeError) as ei:
        codec.encode(_nested(20), limits)
    assert ei.value.reason == "depth"
    assert ei.value.code == "ENCODE_ERROR"


def test_size_limit():
    limits = codec.EncodeLimits(depth=10, max_bytes=64)
    with pytest.raises(EncodeError) as ei:
        codec.encode(ScBytes(b"\x00" * 100), limits)
    assert ei.value.reason == "size"
    assert ei.value.data["limit"] == 64
    assert ei.value.data["size"] > 64


def test_unsupported_value():
    with pytest.raises(EncodeError) as ei:
        codec.encode(object())
    assert ei.value.reason == "unsupported"


def test_encoded_len_matches():
    v = ScBytes(b"abc")
    assert codec.encoded_len(v) == len(codec.encode(v))


def test_encoded_len_with_other_encoder():
    limits = codec.EncodeLimits(max_bytes=8)
    assert codec.encoded_len(ScBytes(b"abc"), limits, lambda obj, lim: b"\x01\x02") == 2
    with pytest.raises(EncodeError) as ei:
        codec.encoded_len(ScBytes(b"abc"), limits, lambda obj, lim: b"\x00" * 9)
    assert ei.value.reason == "size"


def test_limits_validated():
    with pytest.raises(ValueError):
        codec.EncodeLimits(depth=0)
    with pytest.raises(ValueError):
        codec.EncodeLimits(max_bytes=0)


def test_decode_rejects_non_bytes():
    with pytest.raises(TypeError):
        codec.decode("abc")

"""Tests for the Shared Key string to sign and HMAC signature."""

import base64
import io

import pytest

from blobauth.exceptions import ConfigurationError, InputError, MalformedKeyError
from blobauth.utils import SharedKeySigner

SCENARIO_STRING_TO_SIGN = (
    "PUT\n\n\n0\n\n\n\n\n\n\n\n\n"
    "x-ms-date:Sat, 02 Nov 2013 15:00:00 GMT\n"
    "x-ms-version:2009-09-19\n"
    "/sampleAccount/samplecontainer\n"
    "restype:container"
)


class TestContentLength:

    def test_put_uses_body_length(self):
        assert SharedKeySigner.content_length("PUT", b"hello") == "5"

    def test_put_without_body_is_zero(self):
        assert SharedKeySigner.content_length("PUT", None) == "0"
        assert SharedKeySigner.content_length("put", b"") == "0"

    def test_put_text_body_counts_utf8_bytes(self):
        assert SharedKeySigner.content_length("PUT", "héllo") == "6"

    def test_put_stream_body(self):
        assert SharedKeySigner.content_length("PUT", io.BytesIO(b"abc")) == "3"

    @pytest.mark.parametrize("body", [(c for c in [b"a"]), [b"a", b"b"], iter([b"abc"])])
    def test_put_unsized_body_rejected(self, body):
        with pytest.raises(InputError) as exc:
            SharedKeySigner.content_length("PUT", body)
        assert exc.value.error_code == "UnsizedBody"

    def test_unsized_body_allowed_for_other_methods(self):
        assert SharedKeySigner.content_length("POST", (c for c in [b"a"])) == ""

    @pytest.mark.parametrize("method", ["GET", "POST", "DELETE", "HEAD", "MERGE"])
    def test_other_methods_are_empty(self, method):
        assert SharedKeySigner.content_length(method, b"a body is present") == ""


class TestStringToSign:

    def test_field_layout(self):
        result = SharedKeySigner.string_to_sign("get", "", "", "/acct/box")
        fields = result.split("\n")

        assert len(fields) == 14
        assert fields[0] == "GET"
        assert fields[1:12] == [""] * 11
        assert fields[13] == "/acct/box"

    def test_content_length_is_fourth_field(self):
        fields = SharedKeySigner.string_to_sign("PUT", "42", "", "/acct/box").split("\n")
        assert fields[3] == "42"
        assert fields[:3] == ["PUT", "", ""]
        assert fields[4:12] == [""] * 8

    def test_scenario_layout(self):
        result = SharedKeySigner.string_to_sign(
            "PUT",
            "0",
            "x-ms-date:Sat, 02 Nov 2013 15:00:00 GMT\nx-ms-version:2009-09-19",
            "/sampleAccount/samplecontainer\nrestype:container",
        )
        assert result == SCENARIO_STRING_TO_SIGN


class TestDecodeKey:

    def test_valid_key(self):
        assert SharedKeySigner.decode_key("YWJj") == b"abc"

    def test_missing_padding_tolerated(self):
        assert SharedKeySigner.decode_key("YWI") == b"ab"
        assert SharedKeySigner.decode_key("YWI=") == b"ab"

    def test_dangling_character_dropped(self):
        assert SharedKeySigner.decode_key("secretKey") == base64.b64decode("secretKe")

    @pytest.mark.parametrize("key", ["", "not base64!", "ab=c", "YW Jj", "A"])
    def test_malformed_key(self, key):
        with pytest.raises(MalformedKeyError) as exc:
            SharedKeySigner.decode_key(key)
        assert isinstance(exc.value, ConfigurationError)
        assert exc.value.error_code == "MalformedKey"


class TestSign:

    def test_known_signature(self):
        signature = SharedKeySigner.sign(SCENARIO_STRING_TO_SIGN, "secretKey")
        assert signature == "h0VRxbQipkWe0762ni41UQrKqV5h/j5gMlJDjb0tvys="

    def test_deterministic(self):
        first = SharedKeySigner.sign(SCENARIO_STRING_TO_SIGN, "c2VjcmV0")
        second = SharedKeySigner.sign(SCENARIO_STRING_TO_SIGN, "c2VjcmV0")
        assert first == second
        assert len(base64.b64decode(first)) == 32

    def test_different_key_changes_signature(self):
        assert SharedKeySigner.sign("x", "YWJj") != SharedKeySigner.sign("x", "YWJk")

    def test_malformed_key_fails(self):
        with pytest.raises(MalformedKeyError):
            SharedKeySigner.sign(SCENARIO_STRING_TO_SIGN, "%%%")

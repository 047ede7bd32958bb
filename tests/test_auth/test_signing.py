"""Tests for the OAuth 1.0a HMAC-SHA1 signing primitives."""

from __future__ import annotations

import base64
import hashlib
import hmac

import pytest

from multiauth.auth.signing import (
    SigningCredentials,
    authorization_header,
    basic_credential,
    decode_form,
    generate_nonce,
    hmac_sha1_signature,
    normalize_url,
    percent_encode,
    sign,
    signature_base_string,
)


# Published example from Twitter's "Creating a signature" guide.
TWITTER_URL = "https://api.twitter.com/1.1/statuses/update.json?include_entities=true"
TWITTER_PARAMS = {"status": "Hello Ladies + Gentlemen, a signed OAuth request!"}
TWITTER_CREDENTIALS = SigningCredentials(
    consumer_key="xvz1evFS4wEEPTGEFPHBog",
    consumer_secret="kAcSOqF21Fu85e7zjz7ZN2U4ZRhfV3WpwPAoE3Z7kBw",
    token="370773112-GmHxMAgYyLbNEtIKZeRNFsMKPR9EyMZeS9weJAEb",
    token_secret="LswwdoUaIvS8ltyTt5jkRh4J50vUPVVHtR2YPi5kE",
)
TWITTER_NONCE = "kYjzVBB8Y0ZFabxSWbWovY3uYSQ2pTgmZeNu2VS4cg"
TWITTER_TIMESTAMP = "1318622958"
TWITTER_BASE_STRING = (
    "POST&https%3A%2F%2Fapi.twitter.com%2F1.1%2Fstatuses%2Fupdate.json&"
    "include_entities%3Dtrue%26oauth_consumer_key%3Dxvz1evFS4wEEPTGEFPHBog%26"
    "oauth_nonce%3DkYjzVBB8Y0ZFabxSWbWovY3uYSQ2pTgmZeNu2VS4cg%26"
    "oauth_signature_method%3DHMAC-SHA1%26oauth_timestamp%3D1318622958%26"
    "oauth_token%3D370773112-GmHxMAgYyLbNEtIKZeRNFsMKPR9EyMZeS9weJAEb%26"
    "oauth_version%3D1.0%26status%3DHello%2520Ladies%2520%252B%2520Gentlemen"
    "%252C%2520a%2520signed%2520OAuth%2520request%2521"
)
TWITTER_SIGNATURE = "hCtSmYh+iHYCEqBWrE7C7hYmtUk="


def _sign_twitter_example() -> dict[str, str]:
    return sign(
        "POST",
        TWITTER_URL,
        TWITTER_PARAMS,
        TWITTER_CREDENTIALS,
        nonce=TWITTER_NONCE,
        timestamp=TWITTER_TIMESTAMP,
    )


# ---------------------------------------------------------------------------
# basic_credential
# ---------------------------------------------------------------------------


class TestBasicCredential:
    def test_prefix_and_encoding(self) -> None:
        expected = base64.b64encode(b"alice:s3cret").decode("ascii")
        assert basic_credential("alice", "s3cret") == f"Basic {expected}"

    def test_non_ascii_is_utf8_encoded(self) -> None:
        expected = base64.b64encode("zoë:pässword".encode("utf-8")).decode("ascii")
        assert basic_credential("zoë", "pässword") == f"Basic {expected}"


# ---------------------------------------------------------------------------
# percent_encode -- RFC 3986
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "encoded"),
    [
        ("abc", "abc"),
        ("hello world", "hello%20world"),
        ("~-._", "~-._"),
        ("a+b", "a%2Bb"),
        ("100%", "100%25"),
        ("foo/bar", "foo%2Fbar"),
        ("a=1&b=2", "a%3D1%26b%3D2"),
        ("naïve", "na%C3%AFve"),
        ("", ""),
    ],
    ids=["plain", "space", "unreserved", "plus", "percent", "slash", "delims", "unicode", "empty"],
)
def test_percent_encode(raw: str, encoded: str) -> None:
    assert percent_encode(raw) == encoded


# ---------------------------------------------------------------------------
# normalize_url
# ---------------------------------------------------------------------------


class TestNormalizeUrl:
    def test_lowercases_scheme_and_host(self) -> None:
        assert normalize_url("HTTPS://API.Example.COM/Path") == "https://api.example.com/Path"

    def test_drops_default_ports(self) -> None:
        assert normalize_url("http://example.com:80/a") == "http://example.com/a"
        assert normalize_url("https://example.com:443/a") == "https://example.com/a"

    def test_keeps_non_default_port(self) -> None:
        assert normalize_url("http://example.com:8080/a") == "http://example.com:8080/a"

    def test_drops_query_and_fragment(self) -> None:
        assert normalize_url("https://example.com/a?b=1#frag") == "https://example.com/a"

    def test_empty_path_becomes_slash(self) -> None:
        assert normalize_url("https://example.com") == "https://example.com/"


# ---------------------------------------------------------------------------
# Signature base string and HMAC-SHA1
# ---------------------------------------------------------------------------


class TestSignatureBaseString:
    def test_known_vector(self) -> None:
        params = {
            **TWITTER_PARAMS,
            "oauth_consumer_key": TWITTER_CREDENTIALS.consumer_key,
            "oauth_nonce": TWITTER_NONCE,
            "oauth_signature_method": "HMAC-SHA1",
            "oauth_timestamp": TWITTER_TIMESTAMP,
            "oauth_token": TWITTER_CREDENTIALS.token,
            "oauth_version": "1.0",
        }
        assert signature_base_string("post", TWITTER_URL, params) == TWITTER_BASE_STRING

    def test_existing_signature_is_excluded(self) -> None:
        with_sig = signature_base_string("GET", "https://e.com/", {"a": "1", "oauth_signature": "x"})
        without = signature_base_string("GET", "https://e.com/", {"a": "1"})
        assert with_sig == without

    def test_parameters_sorted_by_name_then_value(self) -> None:
        base = signature_base_string("GET", "https://e.com/?b=2&a=2", {"a": "1"})
        assert base.endswith(percent_encode("a=1&a=2&b=2"))


class TestHmacSha1:
    def test_matches_stdlib_hmac(self) -> None:
        expected = base64.b64encode(
            hmac.new(b"cs&ts", b"base", hashlib.sha1).digest()
        ).decode("ascii")
        assert hmac_sha1_signature("base", "cs", "ts") == expected

    def test_empty_token_secret_keeps_ampersand(self) -> None:
        expected = base64.b64encode(hmac.new(b"cs&", b"base", hashlib.sha1).digest()).decode("ascii")
        assert hmac_sha1_signature("base", "cs") == expected

    def test_known_vector(self) -> None:
        assert (
            hmac_sha1_signature(
                TWITTER_BASE_STRING,
                TWITTER_CREDENTIALS.consumer_secret,
                TWITTER_CREDENTIALS.token_secret,
            )
            == TWITTER_SIGNATURE
        )


# ---------------------------------------------------------------------------
# sign
# ---------------------------------------------------------------------------


class TestSign:
    def test_known_vector(self) -> None:
        assert _sign_twitter_example()["oauth_signature"] == TWITTER_SIGNATURE

    def test_adds_protocol_parameters(self) -> None:
        signed = sign("GET", "https://e.com/", {}, SigningCredentials("ck", "cs"))
        assert signed["oauth_consumer_key"] == "ck"
        assert signed["oauth_signature_method"] == "HMAC-SHA1"
        assert signed["oauth_version"] == "1.0"
        assert signed["oauth_nonce"]
        assert signed["oauth_timestamp"].isdigit()
        assert "oauth_token" not in signed

    def test_includes_token_when_present(self) -> None:
        signed = sign("GET", "https://e.com/", {}, SigningCredentials("ck", "cs", "tok", "ts"))
        assert signed["oauth_token"] == "tok"

    def test_does_not_mutate_input(self) -> None:
        params = {"status": "hi"}
        sign("POST", "https://e.com/", params, SigningCredentials("ck", "cs"))
        assert params == {"status": "hi"}

    def test_caller_supplied_oauth_params_pass_through(self) -> None:
        signed = sign(
            "POST", "https://e.com/", {"oauth_verifier": "v"}, SigningCredentials("ck", "cs")
        )
        assert signed["oauth_verifier"] == "v"

    def test_none_parameters(self) -> None:
        signed = sign("GET", "https://e.com/", None, SigningCredentials("ck", "cs"))
        assert "oauth_signature" in signed

    def test_nonces_are_unique(self) -> None:
        assert len({generate_nonce() for _ in range(50)}) == 50


# ---------------------------------------------------------------------------
# authorization_header / decode_form
# ---------------------------------------------------------------------------


class TestAuthorizationHeader:
    def test_realm_first_and_only_oauth_params(self) -> None:
        header = authorization_header(
            "twitter", {"status": "x", "oauth_token": "t", "oauth_consumer_key": "k"}
        )
        assert header == 'OAuth realm="twitter", oauth_consumer_key="k", oauth_token="t"'

    def test_values_are_percent_encoded(self) -> None:
        header = authorization_header("r", {"oauth_signature": "a+b/c="})
        assert 'oauth_signature="a%2Bb%2Fc%3D"' in header

    def test_realm_omitted_when_none(self) -> None:
        assert authorization_header(None, {"oauth_token": "t"}) == 'OAuth oauth_token="t"'


class TestDecodeForm:
    def test_token_response(self) -> None:
        assert decode_form("oauth_token=T&oauth_token_secret=S\n") == {
            "oauth_token": "T",
            "oauth_token_secret": "S",
        }

    def test_percent_decoding_and_blank_values(self) -> None:
        assert decode_form("a=hello%20world&b=") == {"a": "hello world", "b": ""}

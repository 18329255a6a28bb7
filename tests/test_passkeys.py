"""Tests for passkey result parsing and signature encoding."""

import json

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature
from eth_abi import decode

from liquid_sdk.errors import PassKeyError, SignatureDecodingError
from liquid_sdk.passkeys import (
    CHALLENGE_KEY,
    P256_N,
    SIGNATURE_WRAPPER_TYPE,
    WEBAUTHN_AUTH_TYPE,
    NativeAuthenticationResult,
    PasskeySignature,
    PasskeySignerAdapter,
    WebAuthenticationResult,
    WebAuthnAuth,
    base64url_encode,
    decode_base64,
    find_challenge_index,
    parse_authentication_result,
    public_key_to_owner,
    to_canonical_base64,
)

from fakes import b64, b64url, make_assertion, make_client_data

CHALLENGE = bytes(range(32))


@pytest.fixture
def private_key():
    return ec.generate_private_key(ec.SECP256R1())


def test_canonical_base64_is_idempotent():
    for value in ["YWJj", "YWI", "YQ", "a-_b", "a+/b==", " YW\nJj "]:
        once = to_canonical_base64(value)
        assert to_canonical_base64(once) == once
        assert len(once) % 4 == 0


def test_base64_and_base64url_decode_to_same_bytes():
    data = bytes(range(250, 256)) + b"\xfb\xff"
    assert decode_base64(b64(data)) == decode_base64(b64url(data)) == data


def test_non_alphabet_characters_are_dropped():
    assert decode_base64("YW\r\nJj\t") == b"abc"


@pytest.mark.parametrize("value", ["", "====", "Y", "YW=J", "!!!"])
def test_invalid_base64_raises(value):
    with pytest.raises(SignatureDecodingError):
        decode_base64(value)


def test_result_shape_detection(private_key):
    web = make_assertion(private_key, b64url(CHALLENGE))
    native = make_assertion(private_key, b64url(CHALLENGE), native=True)

    assert isinstance(parse_authentication_result(web), WebAuthenticationResult)
    assert isinstance(parse_authentication_result(native), NativeAuthenticationResult)


def test_missing_field_raises(private_key):
    native = make_assertion(private_key, b64url(CHALLENGE), native=True)
    del native["signature"]

    with pytest.raises(SignatureDecodingError, match="signature"):
        parse_authentication_result(native)


def test_web_and_native_shapes_normalize_identically(private_key):
    web = make_assertion(private_key, b64url(CHALLENGE))
    response = web["response"]
    native = {
        "credentialId": web["id"],
        "authenticatorData": b64(decode_base64(response["authenticatorData"])),
        "clientDataJSON": b64(decode_base64(response["clientDataJSON"])),
        "signature": b64(decode_base64(response["signature"])),
    }

    adapter = PasskeySignerAdapter()
    assert adapter.normalize(web, CHALLENGE) == adapter.normalize(native, CHALLENGE)


def test_challenge_and_type_indices(private_key):
    signature = PasskeySignerAdapter().normalize(make_assertion(private_key, b64url(CHALLENGE)), CHALLENGE.hex())
    client_data = signature.webauthn.client_data_json.encode()
    index = signature.webauthn.challenge_index

    encoded = base64url_encode(CHALLENGE)
    assert decode_base64(client_data[index:index + len(encoded)].decode()) == CHALLENGE
    assert client_data[signature.webauthn.type_index:].startswith(b'"type":"webauthn.get"')
    assert signature.webauthn.user_verification_required is False


def test_challenge_not_in_client_data():
    with pytest.raises(SignatureDecodingError):
        find_challenge_index(make_client_data(b64url(b"other")), CHALLENGE)


def test_create_type_client_data_is_rejected(private_key):
    assertion = make_assertion(private_key, b64url(CHALLENGE), native=True)
    client_data = json.loads(decode_base64(assertion["clientDataJSON"]))
    client_data["type"] = "webauthn.create"
    assertion["clientDataJSON"] = b64(json.dumps(client_data, separators=(",", ":")).encode())

    with pytest.raises(SignatureDecodingError, match="webauthn.get"):
        PasskeySignerAdapter().normalize(assertion, CHALLENGE)


def test_normalize_is_idempotent(private_key):
    adapter = PasskeySignerAdapter()
    signature = adapter.normalize(make_assertion(private_key, b64url(CHALLENGE)), CHALLENGE)

    assert adapter.normalize(signature) is signature


def test_normalize_requires_challenge(private_key):
    with pytest.raises(SignatureDecodingError):
        PasskeySignerAdapter().normalize(make_assertion(private_key, b64url(CHALLENGE)))


def test_encode_signature_layout(private_key):
    adapter = PasskeySignerAdapter()
    signature = adapter.normalize(make_assertion(private_key, b64url(CHALLENGE)), CHALLENGE)

    encoded = adapter.encode_signature(signature)

    ((owner_index, signature_data),) = decode([SIGNATURE_WRAPPER_TYPE], encoded)
    ((authenticator_data, client_data_json, challenge_index, type_index, r, s),) = decode(
        [WEBAUTHN_AUTH_TYPE], signature_data
    )
    assert owner_index == 0
    assert "0x" + authenticator_data.hex() == signature.webauthn.authenticator_data
    assert client_data_json == signature.webauthn.client_data_json
    assert challenge_index == signature.webauthn.challenge_index - len(CHALLENGE_KEY)
    assert client_data_json[challenge_index:].startswith('"challenge":"' + b64url(CHALLENGE))
    assert type_index == signature.webauthn.type_index
    assert r > 0
    assert 0 < s <= P256_N // 2


def test_high_s_is_normalized():
    high_s = P256_N - 5
    signature = PasskeySignature(
        signature_hex="0x" + encode_dss_signature(7, high_s).hex(),
        webauthn=WebAuthnAuth(
            authenticator_data="0x00",
            client_data_json='{"type":"webauthn.get","challenge":"AQ"}',
            challenge_index=36,
            type_index=1,
        ),
    )

    ((_, signature_data),) = decode([SIGNATURE_WRAPPER_TYPE], PasskeySignerAdapter().encode_signature(signature))
    ((_, _, _, _, r, s),) = decode([WEBAUTHN_AUTH_TYPE], signature_data)
    assert r == 7
    assert s == 5


def test_public_key_to_owner_encodings(private_key):
    public_key = private_key.public_key()
    numbers = public_key.public_numbers()
    expected = numbers.x.to_bytes(32, "big") + numbers.y.to_bytes(32, "big")

    spki = public_key.public_bytes(serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)
    uncompressed = public_key.public_bytes(serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint)

    assert public_key_to_owner(b64(spki)) == expected
    assert public_key_to_owner(b64url(uncompressed)) == expected
    assert public_key_to_owner(b64(expected)) == expected


def test_public_key_to_owner_rejects_garbage():
    with pytest.raises(PassKeyError):
        public_key_to_owner(b64(b"not a key"))


def test_encode_signature_requires_challenge_key():
    der = encode_dss_signature(7, 5).hex()
    signature = PasskeySignature(
        signature_hex="0x" + der,
        webauthn=WebAuthnAuth(
            authenticator_data="0x00",
            client_data_json='{"type":"webauthn.get","nonce":"AQ"}',
            challenge_index=32,
            type_index=1,
        ),
    )

    with pytest.raises(SignatureDecodingError, match="challenge"):
        PasskeySignerAdapter().encode_signature(signature)

"""Signature engine: random tokens, login and write signatures."""

import hashlib
import hmac

from dal_client.signing import (
    build_write_params,
    generate_random_number,
    hmac_sha1_hex,
    login_signature,
    write_signature,
)


def _hmac(message: str, key: str) -> str:
    return hmac.new(key.encode(), message.encode(), hashlib.sha1).hexdigest()


class _ScriptedRandom:
    def __init__(self, draws):
        self._draws = list(draws)

    def randrange(self, stop):
        assert stop == 10
        return self._draws.pop(0)


def test_hmac_sha1_hex_uses_key_argument_as_key():
    assert hmac_sha1_hex("message", key="secret") == _hmac("message", "secret")
    assert len(hmac_sha1_hex("message", key="secret")) == 40


def test_random_number_drops_leading_zeros():
    rng = _ScriptedRandom([0, 0, 3, 0, 1, 2, 3, 4, 5, 6, 7, 8])

    assert generate_random_number(rng) == "3012345678"


def test_random_number_all_zero_draws_yield_empty_token():
    assert generate_random_number(_ScriptedRandom([0] * 12)) == ""


def test_random_number_is_at_most_twelve_digits():
    for _ in range(50):
        token = generate_random_number()
        assert len(token) <= 12
        assert token == "" or (token.isdigit() and token[0] != "0")


def test_login_signature_chains_password_rand_and_url():
    url = "http://dal/login/bob/no"

    rand, signature = login_signature("pw", "bob", url, rand="123")

    first = _hmac("bob", "pw")
    second = _hmac("123", first)
    assert rand == "123"
    assert signature == _hmac(url, second)


def test_write_signature_keeps_parameter_order_and_skips_none_values():
    params = {"GenusName": "GENUS_changed", "Note": None, "Extra": 7}

    signed = write_signature("wtok", "http://dal/update/genus/762", params, rand="475")

    assert signed.param_order == "GenusName,Note,Extra"
    assert signed.rand_num == "475"
    assert signed.signature == _hmac("http://dal/update/genus/762475GENUS_changed7", "wtok")


def test_write_signature_is_reproducible():
    params = {"b": "2", "a": "1"}

    first = write_signature("tok", "http://dal/x", params, rand="99")
    second = write_signature("tok", "http://dal/x", dict(params), rand="99")

    assert first == second
    assert write_signature("tok", "http://dal/x", {"a": "1", "b": "2"}, rand="99") != first


def test_build_write_params_adds_signing_fields_after_caller_params():
    post = build_write_params("tok", "http://dal/add/genus", {"GenusName": "x"}, rand="5")

    assert list(post) == ["GenusName", "rand_num", "url", "param_order", "signature"]
    assert post["url"] == "http://dal/add/genus"
    assert post["param_order"] == "GenusName"
    assert post["signature"] == _hmac("http://dal/add/genus5x", "tok")


def test_build_write_params_sends_none_as_empty_field():
    post = build_write_params("tok", "http://dal/update/genus/1", {"GenusName": "x", "Note": None}, rand="5")

    assert post["Note"] == ""
    assert post["param_order"] == "GenusName,Note"
    assert post["signature"] == _hmac("http://dal/update/genus/15x", "tok")

"""Request signatures for DAL login and write operations.

Login proves knowledge of the password without sending it: the password is
keyed over the username, that digest keys a fresh random number and the
result keys the exact login URL. Writes are signed with the per-session
write token over the URL, the random number and every parameter value in
the order the caller supplied them.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import hmac
import random
from typing import Any, Mapping

RANDOM_NUMBER_DIGITS = 12


@dataclass(frozen=True)
class WriteSignature:
    rand_num: str
    param_order: str
    signature: str


def hmac_sha1_hex(message: str, key: str) -> str:
    return hmac.new(key.encode("utf-8"), message.encode("utf-8"), hashlib.sha1).hexdigest()


def generate_random_number(rng: random.Random | None = None) -> str:
    """Return up to 12 random decimal digits with leading zeros dropped.

    The DAL has always received tokens produced this way, so a run of leading
    zero draws shortens the token and twelve zero draws yield ``""``.
    """
    source = rng or random.SystemRandom()
    digits: list[str] = []
    for _ in range(RANDOM_NUMBER_DIGITS):
        index = source.randrange(10)
        if digits or index != 0:
            digits.append(str(index))
    return "".join(digits)


def login_signature(
    password: str,
    username: str,
    url: str,
    rand: str | None = None,
) -> tuple[str, str]:
    if rand is None:
        rand = generate_random_number()
    password_hash = hmac_sha1_hex(username, key=password)
    rand_hash = hmac_sha1_hex(rand, key=password_hash)
    signature = hmac_sha1_hex(url, key=rand_hash)
    return rand, signature


def write_signature(
    write_token: str,
    url: str,
    params: Mapping[str, Any],
    rand: str | None = None,
) -> WriteSignature:
    if rand is None:
        rand = generate_random_number()

    names_in_order: list[str] = []
    for_signature = url + rand
    for name, value in params.items():
        names_in_order.append(name)
        if value is not None:
            for_signature += str(value)

    return WriteSignature(
        rand_num=rand,
        param_order=",".join(names_in_order),
        signature=hmac_sha1_hex(for_signature, key=write_token),
    )


def build_write_params(
    write_token: str,
    url: str,
    params: Mapping[str, Any] | None,
    rand: str | None = None,
) -> dict[str, Any]:
    supplied = dict(params or {})
    signed = write_signature(write_token, url, supplied, rand=rand)

    # None is signed as nothing but still sent, as an empty field
    post_params: dict[str, Any] = {
        name: "" if value is None else value for name, value in supplied.items()
    }
    post_params["rand_num"] = signed.rand_num
    post_params["url"] = url
    post_params["param_order"] = signed.param_order
    post_params["signature"] = signed.signature
    return post_params

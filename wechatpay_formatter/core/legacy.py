# wechatpay_formatter/core/legacy.py
"""
Helpers for the legacy (APIv2) parameter-signing style:
sort the parameters by key, serialize them query-string-like, append the API key, hash.
Hashing is left to the caller.
"""
import re
from functools import cmp_to_key
from typing import Dict, List, Mapping, Optional

SIGN_KEY = "sign"

_RUN = re.compile(r"\d+|\D")


def _check_str_keys(mapping: Mapping) -> None:
    for key in mapping:
        if not isinstance(key, str):
            raise TypeError(f"Parameter keys must be str, got {type(key).__name__}: {key!r}")


def _runs(key: str) -> List[str]:
    """Split into digit runs and single other characters, whitespace dropped."""
    runs = _RUN.findall(key)
    # leading zeros are skipped only when the key itself starts with a digit
    if runs and runs[0].isdigit():
        runs[0] = runs[0].lstrip("0") or "0"
    return [r for r in runs if not r.isspace()]


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _cmp_digits(a: str, b: str) -> int:
    if a.startswith("0") or b.startswith("0"):
        # fractional part: compare left-aligned
        return _cmp(a, b)
    return _cmp((len(a), a), (len(b), b))


def natural_compare(left: str, right: str) -> int:
    """
    Case-insensitive natural comparison: "rfc1" < "rfc822" < "rfc2086", "a" < "aa" < "b".
    Digit runs compare by value; everything else compares upper-cased, char by char.
    """
    for a, b in zip(_runs(left), _runs(right)):
        if a.isdigit() and b.isdigit():
            result = _cmp_digits(a, b)
        else:
            result = _cmp(a[0].upper(), b[0].upper())
        if result:
            return result
    return _cmp(len(_runs(left)), len(_runs(right)))


def _key_order(left: str, right: str) -> int:
    # keys equal under natural order ("A" vs "a") fall back to code points
    return natural_compare(left, right) or _cmp(left, right)


def ksort(params: Mapping[str, str]) -> Dict[str, str]:
    """Return a new dict with the same entries, keys in natural order. Input is left untouched."""
    _check_str_keys(params)
    for key, value in params.items():
        if not isinstance(value, str):
            raise TypeError(f"Parameter '{key}' must be str, got {type(value).__name__}")
    return {key: params[key] for key in sorted(params, key=cmp_to_key(_key_order))}


def query_string_like(params: Mapping[str, Optional[str]]) -> str:
    """
    `key=value` pairs joined by `&` in insertion order.
    Drops the `sign` entry and any None or "" values; performs no URL encoding.
    """
    _check_str_keys(params)
    pairs = []
    for key, value in params.items():
        if value is not None and not isinstance(value, str):
            raise TypeError(f"Parameter '{key}' must be str or None, got {type(value).__name__}")
        if key == SIGN_KEY or value is None or value == "":
            continue
        pairs.append(f"{key}={value}")
    return "&".join(pairs)


def legacy_signing_string(params: Mapping[str, Optional[str]], api_key: str) -> str:
    """The APIv2 string-to-sign: sorted query-string-like params followed by `&key=<api_key>`."""
    if not api_key:
        raise ValueError("api_key is required")
    survivors = {k: v for k, v in params.items() if v is not None}
    return f"{query_string_like(ksort(survivors))}&key={api_key}"

# wechatpay_formatter/core/types.py
import re
from dataclasses import dataclass
from typing import Dict, Optional, Union

# Values accepted by joined_by_line_feed
Scalar = Optional[Union[str, int, float, bool]]

DEFAULT_SCHEMA = "WECHATPAY2-SHA256-RSA2048"

# header token -> dataclass field, in wire order
AUTHORIZATION_FIELDS = (
    ("mchid", "merchant_id"),
    ("serial_no", "serial_number"),
    ("timestamp", "timestamp"),
    ("nonce_str", "nonce"),
    ("signature", "signature"),
)

_PAIR = re.compile(r'\s*([a-z_]+)="([^"]*)"\s*(?:,|$)')


@dataclass(frozen=True)
class AuthorizationHeader:
    """Metadata carried by the APIv3 `Authorization` request header."""
    merchant_id: str
    nonce: str
    signature: str
    timestamp: str
    serial_number: str
    schema: str = DEFAULT_SCHEMA

    def to_header(self) -> str:
        """Render the header value with the fixed field order."""
        pairs = ",".join(f'{token}="{getattr(self, attr)}"' for token, attr in AUTHORIZATION_FIELDS)
        return f"{self.schema} {pairs}"

    @classmethod
    def parse(cls, value: str) -> "AuthorizationHeader":
        """
        Parse a header value back into its fields.
        Field order is not enforced, but every field must appear exactly once.
        """
        if not isinstance(value, str):
            raise TypeError(f"Authorization value must be str, got {type(value).__name__}")

        schema, sep, rest = value.strip().partition(" ")
        if not sep or not schema or "=" in schema:
            raise ValueError("Authorization value is missing its schema prefix")

        known = dict(AUTHORIZATION_FIELDS)
        found: Dict[str, str] = {}
        pos = 0
        rest = rest.strip()
        while pos < len(rest):
            m = _PAIR.match(rest, pos)
            if m is None:
                raise ValueError(f"Malformed Authorization field near: {rest[pos:pos + 20]!r}")
            token, val = m.group(1), m.group(2)
            if token not in known:
                raise ValueError(f"Unknown Authorization field: {token}")
            if known[token] in found:
                raise ValueError(f"Duplicate Authorization field: {token}")
            found[known[token]] = val
            pos = m.end()

        missing = [token for token, attr in AUTHORIZATION_FIELDS if attr not in found]
        if missing:
            raise ValueError(f"Authorization value missing fields: {', '.join(missing)}")

        return cls(schema=schema, **found)

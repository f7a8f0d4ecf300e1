# wechatpay_formatter/core/canon.py
import math

from wechatpay_formatter.core.types import Scalar, DEFAULT_SCHEMA, AuthorizationHeader
from wechatpay_formatter.utils.logging import get_logger

LINE_FEED = "\n"

logger = get_logger(__name__)


def render_float(value: float) -> str:
    """
    14 significant digits, exponent form as `1.0E+15` / `1.5E-5`,
    `NAN` / `INF` / `-INF` for non-finite values: the remote runtime's float-to-string rules.
    """
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    text = format(value, ".14G")
    if "E" not in text:
        return text
    mantissa, exponent = text.split("E")
    if "." not in mantissa:
        mantissa += ".0"
    exp = int(exponent)
    return f"{mantissa}E{'+' if exp >= 0 else '-'}{abs(exp)}"


def render_scalar(value: Scalar) -> str:
    """
    Render one value the way the remote verifier expects it:
    True -> "1", False/None -> "", numbers in plain decimal, str untouched.
    """
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return "1" if value else ""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return render_float(value)
    raise TypeError(f"Cannot render {type(value).__name__} into a canonical string")


def joined_by_line_feed(*values: Scalar) -> str:
    """Each rendered value followed by exactly one line feed. No arguments gives ""."""
    return "".join(render_scalar(v) + LINE_FEED for v in values)


def request(method: str, uri: str, timestamp: str, nonce: str, body: str) -> str:
    """
    Canonical string of an outbound request.
    `uri` is the path plus query string exactly as sent; `body` is "" when there is none.
    """
    canonical = joined_by_line_feed(method, uri, timestamp, nonce, body)
    logger.debug("canonical request built for %s %s (%d bytes)", method, uri, len(canonical))
    return canonical


def response(timestamp: str, nonce: str, body: str) -> str:
    """Canonical string a client rebuilds to check an inbound response."""
    return joined_by_line_feed(timestamp, nonce, body)


def authorization(
    merchant_id: str,
    nonce: str,
    signature: str,
    timestamp: str,
    serial_number: str,
    schema: str = DEFAULT_SCHEMA,
) -> str:
    """Value of the `Authorization` header. Fields are quoted as-is, never escaped."""
    return AuthorizationHeader(
        merchant_id=merchant_id,
        nonce=nonce,
        signature=signature,
        timestamp=timestamp,
        serial_number=serial_number,
        schema=schema,
    ).to_header()


def parse_authorization(value: str) -> AuthorizationHeader:
    return AuthorizationHeader.parse(value)

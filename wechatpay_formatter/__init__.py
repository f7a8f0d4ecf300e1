# wechatpay_formatter/__init__.py
"""
WeChat Pay formatter — canonical strings, nonces, timestamps and Authorization headers
for signing APIv3 requests and checking responses, plus the legacy APIv2 parameter helpers.

Signing and verification themselves are plugged in by the caller.
"""

__version__ = "0.1.0"

from wechatpay_formatter.core.canon import (
    authorization,
    joined_by_line_feed,
    parse_authorization,
    request,
    response,
)
from wechatpay_formatter.core.entropy import Entropy, nonce, timestamp
from wechatpay_formatter.core.legacy import ksort, legacy_signing_string, query_string_like
from wechatpay_formatter.core.types import AuthorizationHeader
from wechatpay_formatter.chain.outbound import RequestSigner, SignedRequest
from wechatpay_formatter.verify.inbound import InboundResult, ResponseInspector

__all__ = [
    "authorization",
    "joined_by_line_feed",
    "parse_authorization",
    "request",
    "response",
    "Entropy",
    "nonce",
    "timestamp",
    "ksort",
    "legacy_signing_string",
    "query_string_like",
    "AuthorizationHeader",
    "RequestSigner",
    "SignedRequest",
    "InboundResult",
    "ResponseInspector",
]

# wechatpay_formatter/chain/outbound.py
from dataclasses import dataclass
from typing import Callable, Optional

from wechatpay_formatter.core.canon import request
from wechatpay_formatter.core.entropy import Entropy, default_entropy
from wechatpay_formatter.core.types import AuthorizationHeader, DEFAULT_SCHEMA
from wechatpay_formatter.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SignedRequest:
    """Everything a transport needs to send one authenticated request."""
    canonical: str
    header: AuthorizationHeader

    @property
    def authorization(self) -> str:
        return self.header.to_header()


@dataclass
class RequestSigner:
    """
    Builds the canonical request and the matching Authorization header for one merchant.
    The signer callable receives the canonical string and returns a base64 signature;
    key handling stays with whoever supplies it.
    """
    merchant_id: str
    serial_number: str
    signer: Callable[[str], str]
    entropy: Optional[Entropy] = None
    schema: str = DEFAULT_SCHEMA
    nonce_size: int = 32

    def __post_init__(self):
        if not self.merchant_id:
            raise ValueError("merchant_id is required")
        if not self.serial_number:
            raise ValueError("serial_number is required")
        if not callable(self.signer):
            raise TypeError("signer must be callable")
        if self.entropy is None:
            self.entropy = default_entropy

    def authorize(self, method: str, uri: str, body: str = "") -> SignedRequest:
        """
        Fresh nonce + timestamp → canonical request → signature → header.
        `method` is upper-cased; `uri` must already be the on-the-wire path and query.
        """
        ts = str(self.entropy.timestamp())
        nonce = self.entropy.nonce(self.nonce_size)
        canonical = request(method.upper(), uri, ts, nonce, body)

        signature = self.signer(canonical)
        if not signature:
            raise ValueError("signer returned an empty signature")

        header = AuthorizationHeader(
            merchant_id=self.merchant_id,
            nonce=nonce,
            signature=signature,
            timestamp=ts,
            serial_number=self.serial_number,
            schema=self.schema,
        )
        logger.debug("signed %s %s for merchant %s (serial %s)", method.upper(), uri, self.merchant_id, self.serial_number)
        return SignedRequest(canonical=canonical, header=header)

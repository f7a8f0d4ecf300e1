# wechatpay_formatter/verify/inbound.py
import re
from typing import Callable, Dict, List, Mapping, Optional
from dataclasses import dataclass

from wechatpay_formatter.core.canon import response
from wechatpay_formatter.core.entropy import Entropy, default_entropy
from wechatpay_formatter.utils.logging import get_logger

HEADER_TIMESTAMP = "Wechatpay-Timestamp"
HEADER_NONCE = "Wechatpay-Nonce"
HEADER_SERIAL = "Wechatpay-Serial"
HEADER_SIGNATURE = "Wechatpay-Signature"

REQUIRED_HEADERS = (HEADER_TIMESTAMP, HEADER_NONCE, HEADER_SERIAL, HEADER_SIGNATURE)

MAXIMUM_CLOCK_OFFSET = 300

# plain ASCII digits only: no sign, separators or padding
_DIGITS = re.compile(r"[0-9]+")

logger = get_logger(__name__)


@dataclass
class InboundFailure:
    header: str
    message: str
    category: str = "header"  # e.g. "header", "timestamp", "clock", "signature"


@dataclass
class InboundResult:
    is_valid: bool
    message: str = ""
    failures: List[InboundFailure] = None
    canonical: str = ""
    serial: str = ""
    signature: str = ""

    def __post_init__(self):
        if self.failures is None:
            self.failures = []

    @property
    def first_failure(self) -> Optional[InboundFailure]:
        return self.failures[0] if self.failures else None

    def __bool__(self):
        return self.is_valid

    def __str__(self):
        if self.is_valid:
            return "Response is well-formed ✓"
        lines = [f"Response check FAILED ({len(self.failures)} issues):"]
        for f in self.failures:
            lines.append(f"  • [{f.header}] {f.category}: {f.message}")
        return "\n".join(lines)


class ResponseInspector:
    """
    Rebuilds the canonical string of an inbound response from its Wechatpay-* headers.
    Checks header presence and clock offset; the signature itself is checked by
    whatever verifier callable the caller supplies.
    """

    def __init__(self, max_clock_offset: int = MAXIMUM_CLOCK_OFFSET, entropy: Optional[Entropy] = None):
        if max_clock_offset < 0:
            raise ValueError("max_clock_offset must not be negative")
        self.max_clock_offset = max_clock_offset
        self.entropy = entropy or default_entropy

    @staticmethod
    def _lookup(headers: Mapping[str, str]) -> Dict[str, str]:
        lowered = {str(k).lower(): v for k, v in headers.items()}
        return {name: lowered[name.lower()] for name in REQUIRED_HEADERS if name.lower() in lowered}

    def inspect(self, headers: Mapping[str, str], body: str = "") -> InboundResult:
        """Header presence → timestamp shape → clock offset → canonical string."""
        found = self._lookup(headers)
        result = InboundResult(True)

        # 1. Presence
        for name in REQUIRED_HEADERS:
            if not found.get(name):
                result.failures.append(InboundFailure(name, "Missing or empty header", "header"))
                result.is_valid = False

        if not result.is_valid:
            result.message = f"Failed with {len(result.failures)} issues"
            logger.warning("rejected response: %s", result.message)
            return result

        # 2. Timestamp shape and freshness
        raw_ts = found[HEADER_TIMESTAMP]
        if not _DIGITS.fullmatch(str(raw_ts)):
            result.failures.append(InboundFailure(HEADER_TIMESTAMP, f"Not an integer: {raw_ts!r}", "timestamp"))
            result.is_valid = False
        else:
            offset = abs(self.entropy.timestamp() - int(raw_ts))
            if offset > self.max_clock_offset:
                result.failures.append(InboundFailure(
                    HEADER_TIMESTAMP,
                    f"Clock offset {offset}s exceeds {self.max_clock_offset}s",
                    "clock",
                ))
                result.is_valid = False

        if not result.is_valid:
            result.message = f"Failed with {len(result.failures)} issues"
            logger.warning("rejected response: %s", result.message)
            return result

        # 3. Canonical string for the external verifier
        result.canonical = response(raw_ts, found[HEADER_NONCE], body)
        result.serial = found[HEADER_SERIAL]
        result.signature = found[HEADER_SIGNATURE]
        result.message = "Well-formed response"
        return result

    def verify(
        self,
        headers: Mapping[str, str],
        body: str,
        verifier: Callable[[str, str, str], bool],
    ) -> InboundResult:
        """
        Inspect, then hand (canonical, signature, serial) to `verifier`.
        A false return is recorded as a signature failure.
        """
        result = self.inspect(headers, body)
        if not result.is_valid:
            return result

        if not verifier(result.canonical, result.signature, result.serial):
            result.failures.append(InboundFailure(HEADER_SIGNATURE, "Invalid signature", "signature"))
            result.is_valid = False
            result.message = f"Failed with {len(result.failures)} issues"
            logger.warning("rejected response from serial %s: invalid signature", result.serial)
            return result

        result.message = "Valid response"
        return result

# wechatpay_formatter/core/entropy.py
import os
import time
from dataclasses import dataclass
from typing import Callable

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
DEFAULT_NONCE_SIZE = 32


def nonce_length(size: int) -> int:
    """Requested length, with zero/negative sizes floored to abs(size) + 2."""
    return size if size > 0 else abs(size) + 2


@dataclass(frozen=True)
class Entropy:
    """
    The two impure inputs of the formatter: a secure random byte source and a wall clock.
    Swap either one out in tests to get deterministic nonces and timestamps.
    """
    random_bytes: Callable[[int], bytes] = os.urandom
    clock: Callable[[], float] = time.time

    def nonce(self, size: int = DEFAULT_NONCE_SIZE) -> str:
        length = nonce_length(size)
        raw = self.random_bytes(length)
        if len(raw) < length:
            raise RuntimeError(f"Random source returned {len(raw)} of {length} requested bytes")
        return "".join(ALPHABET[b % len(ALPHABET)] for b in raw[:length])

    def timestamp(self) -> int:
        return int(self.clock())


default_entropy = Entropy()


def nonce(size: int = DEFAULT_NONCE_SIZE) -> str:
    """Random `[0-9A-Za-z]` string of `size` chars (abs(size) + 2 when size <= 0)."""
    return default_entropy.nonce(size)


def timestamp() -> int:
    """Current Unix time in whole seconds."""
    return default_entropy.timestamp()

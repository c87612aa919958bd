"""Single-use password reset tokens."""

import hashlib
import secrets
from datetime import datetime
from typing import NamedTuple, Optional

from ..core.config import ResetTokenConfig
from .tokens import Clock, utc_now


class ResetToken(NamedTuple):
    raw: str
    token_hash: str
    expires_at: datetime


class ResetTokenGenerator:
    """Creates reset tokens whose raw value is mailed out and whose hash is stored."""

    def __init__(self, config: ResetTokenConfig, clock: Optional[Clock] = None) -> None:
        self._config = config
        self._clock = clock or utc_now

    def generate(self) -> ResetToken:
        raw = secrets.token_hex(self._config.num_bytes)
        return ResetToken(
            raw=raw,
            token_hash=self.hash_token(raw),
            expires_at=self._clock() + self._config.window,
        )

    @staticmethod
    def hash_token(raw: str) -> str:
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

"""
LR (Lorry Receipt) number generation.
"""

import time
from typing import Optional

from dispatch_backend.app.core.config import settings


def generate_lr_number(now_ms: Optional[int] = None, prefix: Optional[str] = None) -> str:
    """Prefix followed by the current epoch milliseconds, e.g. LR1733040000000."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{prefix or settings.lr_number_prefix}{now_ms}"


def batch_lr_number(batch_prefix: str, index: int) -> str:
    """LR for the parcel at zero-based index within a batch: LR123 → LR123-01, LR123-02, ..."""
    return f"{batch_prefix}-{index + 1:02d}"

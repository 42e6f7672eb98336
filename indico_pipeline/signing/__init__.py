"""Request signing and epoch time helpers."""

from indico_pipeline.signing.signer import sign_request, sort_params
from indico_pipeline.signing.timecodec import (
    EPOCH_ZERO,
    EPOCH_ZERO_UTC,
    LOCAL_TZ,
    from_epoch_seconds,
    to_epoch_seconds,
)

__all__ = [
    "sign_request",
    "sort_params",
    "EPOCH_ZERO",
    "EPOCH_ZERO_UTC",
    "LOCAL_TZ",
    "from_epoch_seconds",
    "to_epoch_seconds",
]

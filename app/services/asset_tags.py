"""Asset tag allocation and QR payload encoding.

Tags look like ``YAMU-CAR-0001``: four characters of the ashram name, the
first three letters of the category and a per-(ashram, category) sequence
number. The sequence lives in process memory; it is never persisted and
never reuses a number, even when an asset later changes category.
"""

import base64
import json
import re
import uuid
from datetime import datetime

from app.models import AssetCategory
from app.models.base import utcnow

_NON_ALNUM = re.compile(r"[^A-Z0-9]")

# Used when an ashram name has no ASCII letters or digits
FALLBACK_SITE_PREFIX = "ASHR"


class AssetTagCounter:
    """Monotonic per-(ashram, category) counters.

    Not safe under true parallelism: the read and the increment are only
    atomic because the service runs on a single event loop.
    """

    def __init__(self) -> None:
        self._counts: dict[tuple[uuid.UUID, AssetCategory], int] = {}

    def next(self, ashram_id: uuid.UUID, category: AssetCategory) -> int:
        key = (ashram_id, category)
        self._counts[key] = self._counts.get(key, 0) + 1
        return self._counts[key]

    def current(self, ashram_id: uuid.UUID, category: AssetCategory) -> int:
        return self._counts.get((ashram_id, category), 0)


def site_prefix(ashram_name: str) -> str:
    return _NON_ALNUM.sub("", ashram_name.upper())[:4] or FALLBACK_SITE_PREFIX


def build_asset_tag(ashram_name: str, category: AssetCategory, sequence: int) -> str:
    return f"{site_prefix(ashram_name)}-{category.value[:3]}-{sequence:04d}"


def encode_qr_payload(
    *,
    ashram_id: uuid.UUID,
    asset_name: str,
    asset_tag: str,
    category: AssetCategory,
    generated_at: datetime | None = None,
) -> str:
    """Serialize the asset identity as unpadded base64url JSON."""
    payload = {
        "ashram_id": str(ashram_id),
        "asset_name": asset_name,
        "asset_tag": asset_tag,
        "category": category.value,
        "generated_at": (generated_at or utcnow()).isoformat(),
    }
    raw = json.dumps(payload, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def decode_qr_payload(qr_code: str) -> dict:
    padded = qr_code + "=" * (-len(qr_code) % 4)
    return json.loads(base64.urlsafe_b64decode(padded.encode()))

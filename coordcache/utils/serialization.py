"""
Value encoding untuk cache entries dan lock tokens.

Encoding harus canonical: dua value yang sama harus menghasilkan
text yang sama persis, karena unlock membandingkan text tersimpan
dengan text dari caller.
"""

import json
from typing import Any, Optional


def encode_value(value: Any) -> str:
    """Serialize value ke canonical JSON text"""
    return json.dumps(value, sort_keys=True, separators=(',', ':'), ensure_ascii=False)


def decode_value(raw: Optional[str]) -> Any:
    """
    Deserialize JSON text.
    Text yang bukan JSON (ditulis client lain) dikembalikan apa adanya.
    """
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pagereflow/utils/encoding.py
"""Character encoding detection for plain-text sources."""

from __future__ import annotations

import logging
from typing import Sequence

import chardet

from pagereflow.constants import DEFAULT_TEXT_FALLBACK_ENCODINGS

logger = logging.getLogger(__name__)


def detect_encoding(
    data: bytes,
    sample_size: int = 8192,
    confidence_threshold: float = 0.7,
) -> str | None:
    """Detect character encoding of binary data using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int, default 8192
        Number of bytes to sample for detection (uses first N bytes)
    confidence_threshold : float, default 0.7
        Minimum confidence level (0.0-1.0) required to trust detection

    Returns
    -------
    str | None
        Detected encoding name, or None if nothing was detected with
        enough confidence

    """
    if not data:
        return None

    result = chardet.detect(data[:sample_size])
    encoding = result.get("encoding") if result else None
    if not encoding:
        logger.debug("chardet: No encoding detected")
        return None

    confidence = result.get("confidence") or 0.0
    logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")
    if confidence < confidence_threshold:
        logger.debug(f"chardet confidence {confidence:.2f} below threshold {confidence_threshold}")
        return None
    return encoding


def decode_text(
    data: bytes,
    fallback_encodings: Sequence[str] = DEFAULT_TEXT_FALLBACK_ENCODINGS,
    use_chardet: bool = True,
) -> str:
    """Decode bytes with chardet detection first, then the fallback list.

    Parameters
    ----------
    data : bytes
        Binary data to decode
    fallback_encodings : sequence of str
        Encodings to try in order when detection fails
    use_chardet : bool, default True
        Whether to attempt chardet-based detection first

    Returns
    -------
    str
        Decoded text. Undecodable input ends up decoded as utf-8 with
        replacement characters.

    """
    if use_chardet:
        detected = detect_encoding(data)
        if detected:
            try:
                return data.decode(detected)
            except (UnicodeDecodeError, LookupError) as e:
                logger.debug(f"Failed to decode with chardet-detected encoding {detected}: {e}")

    for encoding in fallback_encodings:
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug(f"Failed to decode with {encoding}")

    logger.warning("All encoding attempts failed, using utf-8 with error replacement")
    return data.decode("utf-8", errors="replace")

"""
Ranking - reduces the raw per-class output into the top labeled results.
"""
from typing import Sequence

import numpy as np

from core.events import Recognition, RecognitionList
from utils.constants import CONFIDENCE_THRESHOLD, TOP_K, UNKNOWN_LABEL


def rank(
    raw_output,
    labels: Sequence[str],
    threshold: float = CONFIDENCE_THRESHOLD,
    top_k: int = TOP_K,
) -> RecognitionList:
    """
    Pick the most confident classes from a model output.

    Only values strictly above ``threshold`` are kept. Results are sorted
    by confidence, highest first, with ties left in class-index order,
    and cut to ``top_k``. Indices past the end of ``labels`` are reported
    as "Unknown".

    Args:
        raw_output: 1-D sequence of per-class confidences.
        labels: Label table aligned with the output indices.

    Returns:
        Tuple of at most ``top_k`` Recognitions.
    """
    scores = np.asarray(raw_output).ravel()
    if not np.issubdtype(scores.dtype, np.floating):
        scores = scores.astype(np.float64)
    if scores.size == 0 or top_k <= 0:
        return ()

    # Threshold is cast to the output dtype. NaN compares False.
    candidates = np.flatnonzero(scores > scores.dtype.type(threshold))
    order = np.argsort(-scores[candidates], kind="stable")[:top_k]

    results = []
    for index in candidates[order]:
        label = labels[index] if index < len(labels) else UNKNOWN_LABEL
        results.append(Recognition(label=label, confidence=float(scores[index])))
    return tuple(results)

"""
Pipeline stages for the LiveLens Node.

One pass over a frame runs these in order on the scheduler's worker:

    convert (YUV 4:2:0 → RGB) → prepare (resize + normalize) → infer → rank

Stages are plain functions, except inference, which wraps the model.
"""
from .conversion import convert
from .preprocess import prepare
from .ranking import rank
from .inference import TorchClassifier

__all__ = ["convert", "prepare", "rank", "TorchClassifier"]

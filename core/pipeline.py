"""
Recognition Pipeline - one pass from a captured frame to published results.

    PlanarFrame → convert → prepare → infer → rank → RecognitionStore + bus

Stages run back to back on the caller's thread. Per-frame failures never
escape ``process``: the prior results stay published and the failure is
logged and counted.
"""
from typing import Optional, Sequence

from core.bus import EventBus
from core.events import PlanarFrame, RecognitionList, RecognitionsUpdated
from core.protocols import Classifier
from core.results import RecognitionStore
from core.stages.conversion import convert
from core.stages.preprocess import prepare
from core.stages.ranking import rank
from utils.constants import CONFIDENCE_THRESHOLD, TOP_K
from utils.failures import (
    FailureManager, MalformedFrameError, ShapeMismatchError,
    ModelNotLoadedError, ModelExecutionError,
)
from utils.logger import Logger


class RecognitionPipeline:
    """Runs the conversion, inference and ranking stages for single frames."""

    def __init__(
        self,
        classifier: Classifier,
        labels: Sequence[str],
        store: RecognitionStore,
        bus: Optional[EventBus] = None,
        failures: Optional[FailureManager] = None,
        threshold: float = CONFIDENCE_THRESHOLD,
        top_k: int = TOP_K,
    ):
        """
        Args:
            classifier: Model invoker; its ``input_shape`` fixes the resize target.
            labels: Label table aligned with the model output.
            store: Slot the results are published into.
            bus: Optional bus that receives RecognitionsUpdated after each publish.
            failures: Failure tracker shared with the rest of the node.
        """
        self.classifier = classifier
        self.labels = tuple(labels)
        self.store = store
        self.bus = bus
        self.failures = failures or FailureManager()
        self.threshold = threshold
        self.top_k = top_k
        self.logger = Logger("RecognitionPipeline")

        _, self.input_height, self.input_width, _ = classifier.input_shape

    def run(self, frame: PlanarFrame) -> RecognitionList:
        """Run every stage on ``frame`` and return the ranked results. Raises on failure."""
        image = convert(frame)
        tensor = prepare(image, self.input_height, self.input_width)
        scores = self.classifier.infer(tensor)
        return rank(scores, self.labels, self.threshold, self.top_k)

    def process(self, frame: PlanarFrame) -> Optional[RecognitionList]:
        """
        Run a full pass and publish the results.

        Returns:
            The newly published list, or None if the frame was skipped.
        """
        try:
            results = self.run(frame)
        except ModelNotLoadedError:
            self.logger.debug("Model not loaded yet, skipping frame")
            return None
        except MalformedFrameError as e:
            self.failures.record_failure(e)
            return None
        except ShapeMismatchError as e:
            self.failures.record_failure(e)
            return None
        except ModelExecutionError as e:
            self.failures.record_failure(e)
            return None

        self.store.publish(results)
        if self.bus is not None:
            self.bus.publish(RecognitionsUpdated(recognitions=results, frame_timestamp=frame.timestamp))
        return results

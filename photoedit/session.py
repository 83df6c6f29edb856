"""
Editing session: one source image, one parameter set, one result.

The session owns the adjustment parameters, reacts to every change by
recomputing the full pipeline from the untouched source, and hands each
completed result to its listeners.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional, Union

import numpy as np
from PIL import Image

from .config import get_config_value, get_default_config
from .processing import (
    AdjustmentParameters,
    AdjustmentPipeline,
    ColorImage,
    FilterKind,
    FilterSelection,
    PipelineResult,
    PipelineState,
)
from .utils.logging import StructuredLogger

logger = logging.getLogger(__name__)
slog = StructuredLogger(__name__)

ResultListener = Callable[[ColorImage], Any]

RECOMPUTE_POLICIES = ('synchronous', 'manual')


class EditSession:
    """
    Coordinates parameter changes and pipeline recomputation.

    Every mutation triggers a synchronous recompute unless it happens inside
    :meth:`batch` (one recompute at the end) or inside a result listener
    (deferred and coalesced into one follow-up run). With the ``manual``
    recompute policy nothing runs until :meth:`recompute` is called.
    """

    def __init__(self, pipeline: Optional[AdjustmentPipeline] = None,
                 on_result: Optional[ResultListener] = None,
                 config: Optional[Dict[str, Any]] = None):
        """
        Initialize the session

        Args:
            pipeline: Pipeline to run; built from ``config`` when omitted
            on_result: Presenter called with each new result image
            config: Loaded configuration dictionary
        """
        self.config = config if config is not None else get_default_config()
        self.pipeline = pipeline or AdjustmentPipeline.from_config(self.config)

        policy = get_config_value(self.config, 'session.recompute_policy', 'synchronous')
        if policy not in RECOMPUTE_POLICIES:
            logger.warning(f"Unknown recompute policy {policy!r}, using 'synchronous'")
            policy = 'synchronous'
        self.recompute_policy = policy

        self.parameters = AdjustmentParameters()
        self.source_image: Optional[ColorImage] = None
        self.result_image: Optional[ColorImage] = None
        self.last_result: Optional[PipelineResult] = None
        self.state = PipelineState.IDLE

        self._listeners: List[ResultListener] = []
        if on_result is not None:
            self._listeners.append(on_result)

        self._batch_depth = 0
        self._dirty = False
        self._pending_load = False
        self._running = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def has_source(self) -> bool:
        return self.source_image is not None

    @property
    def filter(self) -> FilterSelection:
        return self.parameters.filter

    def add_listener(self, listener: ResultListener) -> None:
        """Register a callable that receives every completed result image"""
        self._listeners.append(listener)

    def remove_listener(self, listener: ResultListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # Image loading

    def select_image(self, source) -> Optional[ColorImage]:
        """
        Ask an image source for a photo and load it.

        Args:
            source: Object with a ``select_image()`` method
                (see :class:`photoedit.io.ImageSource`)

        Returns:
            The new result image, or the current one when selection was cancelled
        """
        return self.load_image(source.select_image())

    def load_image(self, image: Union[ColorImage, Image.Image, np.ndarray, None]) -> Optional[ColorImage]:
        """
        Replace the source image and reset every adjustment.

        ``None`` means the selection was cancelled and leaves the session
        untouched.
        """
        if image is None:
            logger.debug("Image selection cancelled, keeping current session state")
            return self.result_image

        if isinstance(image, Image.Image):
            image = ColorImage.from_pil(image)
        elif not isinstance(image, ColorImage):
            image = ColorImage.from_array(image)

        logger.info(f"Loaded source image {image.width}x{image.height}")
        self.source_image = image
        self.parameters.reset()

        # A fresh image always gets its identity result, whatever the policy
        self._dirty = True
        self._pending_load = True
        if not (self._batch_depth or self._running):
            self._flush()
        return self.result_image

    # Parameter surface

    def set_parameter(self, name: str, value: float) -> float:
        """
        Set one adjustment and recompute.

        Returns:
            The value actually stored after clamping
        """
        stored = self.parameters.set(name, value)
        self._changed()
        return stored

    def get_parameter(self, name: str) -> float:
        return self.parameters.get(name)

    def set_filter(self, kind: Union[FilterKind, str, None],
                   intensity: Optional[float] = None) -> FilterSelection:
        """Select a look filter, optionally with a new intensity"""
        selection = self.parameters.set_filter(kind, intensity)
        self._changed()
        return selection

    def update(self, **values) -> None:
        """
        Set several adjustments with a single recompute.

        ``filter`` and ``filter_intensity`` keywords select the look.
        """
        with self.batch():
            kind = values.pop('filter', None)
            intensity = values.pop('filter_intensity', None)
            if kind is not None or intensity is not None:
                self.set_filter(self.parameters.filter.kind if kind is None else kind, intensity)
            for name, value in values.items():
                self.set_parameter(name, value)

    @contextmanager
    def batch(self):
        """Coalesce every mutation made inside the block into one recompute"""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty and not self._running:
                if self._pending_load or self.recompute_policy == 'synchronous':
                    self._flush()

    def reset_to_defaults(self) -> None:
        """Return every adjustment and the filter to defaults"""
        self.parameters.reset()
        self._changed()

    # Recomputation

    def recompute(self) -> Optional[ColorImage]:
        """
        Run the pipeline for the current source and parameters.

        Returns:
            The new result image, or None when there is no source image or
            when called from a listener (the run is then deferred)
        """
        if self.source_image is None:
            return None

        self._dirty = True
        if self._running:
            return None
        self._flush()
        return self.result_image

    def _changed(self) -> None:
        self._dirty = True
        if self._batch_depth or self._running:
            return
        if self.recompute_policy != 'synchronous':
            return
        self._flush()

    def _flush(self) -> None:
        # Changes made by listeners set _dirty again and loop once more
        while self._dirty:
            self._dirty = False
            self._pending_load = False
            if self.source_image is None:
                return
            self._run()

    def _run(self) -> None:
        self._running = True
        self.state = PipelineState.RUNNING
        try:
            result = self.pipeline.run(self.source_image, self.parameters.snapshot())
            self.last_result = result
            self.result_image = result.image
            self.state = result.state

            slog.debug("Recomputed result",
                       applied=len(result.applied), fallbacks=result.fallbacks,
                       elapsed_ms=round(result.elapsed * 1000, 2))

            for listener in list(self._listeners):
                listener(result.image)
        finally:
            self._running = False
            if self.state is PipelineState.RUNNING:
                self.state = PipelineState.IDLE if self.result_image is None else PipelineState.DONE

    def close(self) -> None:
        """Drop images and listeners"""
        self._listeners.clear()
        self.source_image = None
        self.result_image = None
        self.last_result = None
        self._dirty = False
        self._pending_load = False
        self.state = PipelineState.IDLE

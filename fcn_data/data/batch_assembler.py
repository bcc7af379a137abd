import enum
import logging
import time

import numpy as np
from torchvision import transforms

from ..config import GeometryParams
from ..utils.geometry import compute_geometry
from ..utils.heatmap import CalibrationTable, stack_label, synthesize_heatmap
from .buffers import BatchBuffers
from .catalog import DatasetState, load_catalog
from .image import read_image, resample

logger = logging.getLogger(__name__)


class AssemblerState(enum.Enum):
    IDLE = "idle"
    FILLING = "filling"
    DONE = "done"


class BatchAssembler:
    """
    Fills batches of multi-scale target crops and their heatmap labels.

    For every annotation, one crop per scale index is written at logical
    index item * K + scale_rank of the data buffer, and the matching
    [confidence, weight] label at the same index of the label buffer.
    """

    def __init__(self, config, params=None, transform=None, rng=None, catalog=None):
        self.config = config
        self.params = params if params is not None else GeometryParams()
        self.transform = transform if transform is not None else transforms.ToTensor()
        self.state = AssemblerState.IDLE

        if rng is None:
            rng = np.random.default_rng(config.seed)
        if catalog is None:
            catalog = load_catalog(config.source, config.root_folder)
        self.dataset = DatasetState(catalog, shuffle=config.shuffle, rng=rng)
        if config.shuffle:
            self.dataset.shuffle()
        logger.info("A total of %d images.", len(self.dataset))
        self.dataset.skip(config.rand_skip)

        # the first image must be readable before any batch is requested
        first = self.dataset.current()
        read_image(first.image_path, config.new_height, config.new_width, config.is_color)

        self.calibration = CalibrationTable.from_params(self.params)
        logger.info("output data size: %s", ",".join(str(d) for d in self.data_shape))
        logger.info("output label size: %s", ",".join(str(d) for d in self.label_shape))

    @property
    def num_scales(self):
        return self.params.scale_step_num

    @property
    def data_shape(self):
        roi_w, roi_h = self.params.target_roi_size
        return (self.config.batch_size * self.num_scales, self.config.channels, roi_h, roi_w)

    @property
    def label_shape(self):
        heat_w, heat_h = self.params.target_heatmap_size
        return (self.config.batch_size * self.num_scales, 2, heat_h, heat_w)

    def new_buffers(self):
        return BatchBuffers(self.data_shape, self.label_shape)

    def fill_item(self, buffers, item_id, annotation, image):
        cols, rows = image.shape[1], image.shape[0]
        for s in self.params.scale_indices:
            geometry = compute_geometry(annotation.box, self.params, s, (cols, rows))
            crop = resample(image, geometry.roi, self.params.target_roi_size)
            index = item_id * self.num_scales + self.params.scale_rank(s)
            buffers.write_data(index, self.transform(crop))

            gt = geometry.ground_truth
            confidence, weight = synthesize_heatmap(
                (gt.x, gt.y), self.params.target_heatmap_size,
                self.calibration.ideal_peak(s), self.params)
            buffers.write_label(index, stack_label(confidence, weight))

    def load_batch(self, buffers):
        """Fill every item of buffers, advancing the cursor once per annotation."""
        batch_start = time.perf_counter()
        read_time = 0.0
        trans_time = 0.0

        if self.state is AssemblerState.FILLING:
            raise RuntimeError("load_batch called while a batch is still being filled")
        # the previous batch has been handed over
        self.state = AssemblerState.IDLE

        buffers.reshape(self.data_shape, self.label_shape)
        self.state = AssemblerState.FILLING
        try:
            for item_id in range(self.config.batch_size):
                annotation = self.dataset.current()
                start = time.perf_counter()
                image = read_image(annotation.image_path, is_color=self.config.is_color)
                read_time += time.perf_counter() - start

                start = time.perf_counter()
                self.fill_item(buffers, item_id, annotation, image)
                trans_time += time.perf_counter() - start
                self.dataset.advance()
        except Exception:
            self.state = AssemblerState.IDLE
            raise

        self.state = AssemblerState.DONE
        logger.debug("Prefetch batch: %.2f ms.", (time.perf_counter() - batch_start) * 1000)
        logger.debug("     Read time: %.2f ms.", read_time * 1000)
        logger.debug("Transform time: %.2f ms.", trans_time * 1000)
        return buffers

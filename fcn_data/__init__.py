from .config import GeometryParams, ImageDataConfig
from .errors import CatalogError, ConfigError, DegenerateROIError, FCNDataError, ImageLoadError
from .data.batch_assembler import BatchAssembler
from .data.buffers import BatchBuffers
from .data.fcn_dataset import FCNDataset, make_loader
from .data.prefetch import BatchPrefetcher
from .utils.geometry import Rect, compute_geometry
from .utils.heatmap import CalibrationTable, synthesize_heatmap

__all__ = [
    "GeometryParams",
    "ImageDataConfig",
    "FCNDataError",
    "ConfigError",
    "CatalogError",
    "ImageLoadError",
    "DegenerateROIError",
    "BatchAssembler",
    "BatchBuffers",
    "FCNDataset",
    "make_loader",
    "BatchPrefetcher",
    "Rect",
    "compute_geometry",
    "CalibrationTable",
    "synthesize_heatmap",
]

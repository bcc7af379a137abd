import json
from dataclasses import dataclass, fields
from typing import Optional, Tuple

from .errors import ConfigError

# Geometry used by the wheel detector experiments. These are fixed per
# construction and are not read from the data config file.
TEMPLATE_SIZE = (64, 64)        # width, height
EXPAND_LEFT = 0.5
EXPAND_RIGHT = 0.5
EXPAND_TOP = 1.0
ROI_MULTIPLY = (2.0, 2.0)       # width, height
SCALE_STEP = 1.1
SCALE_STEP_NUM = 5
BLUR_KERNEL = (7, 7)
BLUR_SIGMA = (2.0, 3.0)         # sigma_x, sigma_y


@dataclass(frozen=True)
class GeometryParams:
    template_size: Tuple[int, int] = TEMPLATE_SIZE
    expand_left: float = EXPAND_LEFT
    expand_right: float = EXPAND_RIGHT
    expand_top: float = EXPAND_TOP
    roi_multiply: Tuple[float, float] = ROI_MULTIPLY
    scale_step: float = SCALE_STEP
    scale_step_num: int = SCALE_STEP_NUM
    blur_kernel: Tuple[int, int] = BLUR_KERNEL
    blur_sigma: Tuple[float, float] = BLUR_SIGMA

    def __post_init__(self):
        if self.scale_step_num <= 0 or self.scale_step_num % 2 == 0:
            raise ConfigError("scale_step_num must be a positive odd number, got %d" % self.scale_step_num)
        if self.scale_step <= 0:
            raise ConfigError("scale_step must be positive, got %r" % self.scale_step)
        if any(k <= 0 or k % 2 == 0 for k in self.blur_kernel):
            raise ConfigError("blur_kernel must hold positive odd sizes, got %r" % (self.blur_kernel,))
        # ideal peaks are looked up inside the blurred reference template
        if self.half_scale_range > self.blur_kernel[1] // 2:
            raise ConfigError(
                "scale_step_num=%d needs a reference template taller than %d rows"
                % (self.scale_step_num, self.blur_kernel[1]))
        heat_w, heat_h = self.target_heatmap_size
        if heat_w <= 0 or heat_h <= 0:
            raise ConfigError("roi_multiply %r leaves no room for a heatmap" % (self.roi_multiply,))

    @property
    def half_scale_range(self):
        return (self.scale_step_num - 1) // 2

    @property
    def scale_indices(self):
        return range(-self.half_scale_range, self.half_scale_range + 1)

    def scale_rank(self, scale_index):
        return scale_index + self.half_scale_range

    @property
    def target_wheel_size(self):
        """Unscaled object size (width, height) inside the template."""
        width, height = self.template_size
        return (width / (1.0 + self.expand_left + self.expand_right),
                height / (1.0 + self.expand_top))

    @property
    def target_roi_size(self):
        width, height = self.template_size
        return (int(width * self.roi_multiply[0]), int(height * self.roi_multiply[1]))

    @property
    def target_heatmap_size(self):
        roi_w, roi_h = self.target_roi_size
        return (roi_w - self.template_size[0] + 1, roi_h - self.template_size[1] + 1)


@dataclass
class ImageDataConfig:
    source: str
    root_folder: str = ""
    batch_size: int = 1
    new_height: int = 0
    new_width: int = 0
    is_color: bool = False
    shuffle: bool = False
    rand_skip: int = 0
    seed: Optional[int] = None
    prefetch_count: int = 3

    def __post_init__(self):
        if not self.source:
            raise ConfigError("source (catalog file) is required")
        if not ((self.new_height == 0 and self.new_width == 0) or
                (self.new_height > 0 and self.new_width > 0)):
            raise ConfigError(
                "new_height and new_width must be set at the same time "
                "(got new_height=%d, new_width=%d)" % (self.new_height, self.new_width))
        if self.batch_size <= 0:
            raise ConfigError("Positive batch size required, got %d" % self.batch_size)
        if self.rand_skip < 0:
            raise ConfigError("rand_skip must not be negative, got %d" % self.rand_skip)
        if self.prefetch_count <= 0:
            raise ConfigError("prefetch_count must be positive, got %d" % self.prefetch_count)

    @property
    def channels(self):
        return 3 if self.is_color else 1

    @classmethod
    def from_dict(cls, values):
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError("Unknown config option(s): %s" % ", ".join(unknown))
        return cls(**values)

    @classmethod
    def from_json(cls, path, **overrides):
        with open(path) as fp:
            values = json.load(fp)
        values.update(overrides)
        return cls.from_dict(values)

import math
from dataclasses import dataclass

from ..errors import DegenerateROIError


def round_half_up(value):
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class Rect:
    """Axis aligned box in pixel coordinates, (x, y) is the top-left corner."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self):
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self):
        return self.width * self.height

    def shifted(self, dx, dy):
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def scaled(self, rate):
        return Rect(self.x * rate, self.y * rate, self.width * rate, self.height * rate)

    def rounded(self):
        return Rect(round_half_up(self.x), round_half_up(self.y),
                    round_half_up(self.width), round_half_up(self.height))

    def as_tuple(self):
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class GeometryBundle:
    scale_index: int
    scale_factor: float
    scale: float
    wheel_rect: Rect         # box refined to the template aspect ratio
    scaled_rect: Rect        # wheel_rect scaled about its centre
    expanded_rect: Rect      # scaled_rect with the template context margins
    roi: Rect                # integer valued, clamped to the image
    image_scale_rate: float
    ground_truth: Rect       # expanded_rect in output crop coordinates


def refine_box(box, target_wheel_size):
    # keep the horizontal extent and vertical centre, force the template aspect
    wheel_w, wheel_h = target_wheel_size
    refined_h = box.width / wheel_w * wheel_h
    return Rect(box.x, box.y + (box.height - refined_h) / 2, box.width, refined_h)


def scale_about_center(rect, scale_factor):
    return Rect(rect.x + rect.width * (1 - scale_factor) / 2,
                rect.y + rect.height * (1 - scale_factor) / 2,
                rect.width * scale_factor,
                rect.height * scale_factor)


def expand_box(rect, expand_left, expand_right, expand_top):
    return Rect(rect.x - rect.width * expand_left,
                rect.y - rect.height * expand_top,
                rect.width * (1 + expand_left + expand_right),
                rect.height * (1 + expand_top))


def grow_roi(rect, roi_multiply):
    mul_w, mul_h = roi_multiply
    return Rect(rect.x - (mul_w - 1) / 2 * rect.width,
                rect.y - (mul_h - 1) / 2 * rect.height,
                rect.width * mul_w,
                rect.height * mul_h)


def _clamp_axis(start, length, limit):
    if start < 0:
        length += start
        start = 0
    if start + length > limit - 1:
        start -= start + length - limit + 1
    if start < 0:
        # region is larger than the image along this axis
        start = 0
        length = limit - 1
    return start, length


def clamp_roi(roi, image_size):
    """Pull the ROI inside an image of (width, height) and round it to integers."""
    cols, rows = image_size
    x, width = _clamp_axis(roi.x, roi.width, cols)
    y, height = _clamp_axis(roi.y, roi.height, rows)
    clamped = Rect(x, y, width, height).rounded()
    if clamped.width <= 0 or clamped.height <= 0:
        raise DegenerateROIError(
            "ROI %r collapsed to %r inside a %dx%d image" % (roi.as_tuple(), clamped.as_tuple(), cols, rows))
    return clamped


def compute_geometry(box, params, scale_index, image_size):
    """
    Compute the crop and label geometry of one annotation at one scale step.

    Args:
        box: ground-truth Rect in image coordinates
        params: GeometryParams with the template, expansion and scale constants
        scale_index: signed index into params.scale_indices
        image_size: (width, height) of the decoded image

    Returns:
        GeometryBundle, whose ground_truth is the expanded template box
        expressed in the coordinates of the resampled crop
    """
    wheel_w, wheel_h = params.target_wheel_size
    wheel_rect = refine_box(box, (wheel_w, wheel_h))
    base_scale = wheel_rect.height / wheel_h
    scale_factor = params.scale_step ** scale_index

    scaled_rect = scale_about_center(wheel_rect, scale_factor)
    expanded_rect = expand_box(scaled_rect, params.expand_left, params.expand_right, params.expand_top)
    roi = clamp_roi(grow_roi(expanded_rect, params.roi_multiply), image_size)

    wheel_wrt_roi = expanded_rect.shifted(-roi.x, -roi.y)
    image_scale_rate = params.target_roi_size[0] / roi.width

    return GeometryBundle(
        scale_index=scale_index,
        scale_factor=scale_factor,
        scale=base_scale * scale_factor,
        wheel_rect=wheel_rect,
        scaled_rect=scaled_rect,
        expanded_rect=expanded_rect,
        roi=roi,
        image_scale_rate=image_scale_rate,
        ground_truth=wheel_wrt_roi.scaled(image_scale_rate),
    )


def crop_to_image(rect, roi, image_scale_rate):
    """Map a box from crop coordinates back into image coordinates."""
    return rect.scaled(1.0 / image_scale_rate).shifted(roi.x, roi.y)

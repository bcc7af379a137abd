import logging

import cv2
import numpy as np

from .geometry import round_half_up

logger = logging.getLogger(__name__)


def gaussian_blur(heatmap, params):
    sigma_x, sigma_y = params.blur_sigma
    return cv2.GaussianBlur(heatmap, tuple(params.blur_kernel), sigmaX=sigma_x, sigmaY=sigma_y)


def build_reference_template(params):
    """Blurred impulse the size of the blur kernel, normalized so its centre is 1."""
    k_w, k_h = params.blur_kernel
    template = np.zeros((k_h, k_w), np.float32)
    template[k_h // 2, k_w // 2] = 1.0
    template = gaussian_blur(template, params)
    return template / template[k_h // 2, k_w // 2]


class CalibrationTable:
    """
    Ideal heatmap peak per scale index.

    The peak for scale index s is read from the reference template s rows
    below its centre, so off-centre scales get the decayed response of the
    same discretized blur.
    """

    def __init__(self, template, scale_indices):
        self.template = template
        self.scale_indices = list(scale_indices)
        cy, cx = template.shape[0] // 2, template.shape[1] // 2
        self._peaks = {s: float(template[cy + s, cx]) for s in self.scale_indices}

    @classmethod
    def from_params(cls, params):
        return cls(build_reference_template(params), params.scale_indices)

    def ideal_peak(self, scale_index):
        return self._peaks[scale_index]

    def as_array(self):
        return np.array([self._peaks[s] for s in self.scale_indices], np.float32)

    def __len__(self):
        return len(self._peaks)


def impulse_position(point, heatmap_size):
    """Nearest heatmap pixel to point, clamped onto the grid."""
    width, height = heatmap_size
    col = round_half_up(point[0])
    row = round_half_up(point[1])
    clamped_col = min(max(col, 0), width - 1)
    clamped_row = min(max(row, 0), height - 1)
    if (clamped_col, clamped_row) != (col, row):
        logger.debug("Heatmap impulse (%d, %d) clamped to (%d, %d)", col, row, clamped_col, clamped_row)
    return clamped_col, clamped_row


def synthesize_heatmap(point, heatmap_size, ideal_peak, params):
    """
    Build the confidence and weight maps for a single target.

    Args:
        point: (x, y) of the template corner in crop coordinates
        heatmap_size: (width, height)
        ideal_peak: value the blurred response is rescaled to
        params: GeometryParams providing the blur kernel

    Returns:
        confidence, weight: float32 arrays of shape (height, width)
    """
    width, height = heatmap_size
    col, row = impulse_position(point, heatmap_size)

    confidence = np.zeros((height, width), np.float32)
    confidence[row, col] = 1.0
    confidence = gaussian_blur(confidence, params)
    confidence *= ideal_peak / confidence.max()

    k_w, k_h = params.blur_kernel
    negative_weight = np.float32(k_w * k_h / float(width * height))
    weight = np.where(confidence > 0, np.float32(1.0), negative_weight).astype(np.float32)
    return confidence, weight


def stack_label(confidence, weight):
    return np.stack([confidence, weight], axis=0)

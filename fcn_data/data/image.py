import os

import cv2

from ..errors import DegenerateROIError, ImageLoadError


def read_image(path, new_height=0, new_width=0, is_color=True):
    """
    Decode an image from disk.

    Colour images are returned as RGB (height, width, 3), grayscale ones as
    (height, width). When both new_height and new_width are positive the
    image is resized to that size.
    """
    if not os.path.isfile(path):
        raise ImageLoadError("Could not load %s: file does not exist" % path)
    flags = cv2.IMREAD_COLOR if is_color else cv2.IMREAD_GRAYSCALE
    img = cv2.imread(path, flags)
    if img is None:
        raise ImageLoadError("Could not load %s" % path)
    if is_color:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    if new_height > 0 and new_width > 0:
        img = cv2.resize(img, (new_width, new_height))
    return img


def resample(image, roi, output_size):
    """Crop the integer ROI out of image and resize it to output_size (width, height)."""
    rows, cols = image.shape[:2]
    x, y, w, h = (int(v) for v in roi.as_tuple())
    if w <= 0 or h <= 0:
        raise DegenerateROIError("ROI %r has no area" % (roi.as_tuple(),))
    if x < 0 or y < 0 or x + w > cols or y + h > rows:
        raise DegenerateROIError("ROI %r is outside the %dx%d image" % (roi.as_tuple(), cols, rows))

    patch = image[y:y + h, x:x + w]
    return cv2.resize(patch, tuple(output_size), interpolation=cv2.INTER_LINEAR)

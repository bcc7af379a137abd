import numpy as np
import pytest

from fcn_data.data.image import read_image, resample
from fcn_data.errors import DegenerateROIError, ImageLoadError
from fcn_data.utils.geometry import Rect
from tests.conftest import write_image


def test_read_image_native_size(tmp_path):
    path = write_image(tmp_path / "img.png", 120, 90)
    assert read_image(str(path), is_color=False).shape == (90, 120)
    assert read_image(str(path)).shape == (90, 120, 3)


def test_read_image_resizes_to_new_size(tmp_path):
    path = write_image(tmp_path / "img.png", 120, 90)
    assert read_image(str(path), new_height=50, new_width=80, is_color=False).shape == (50, 80)
    assert read_image(str(path), new_height=50, new_width=80).shape == (50, 80, 3)


def test_read_image_missing_file(tmp_path):
    with pytest.raises(ImageLoadError, match="does not exist"):
        read_image(str(tmp_path / "missing.png"))


def test_resample_output_size():
    image = np.zeros((200, 300), np.uint8)
    crop = resample(image, Rect(10, 20, 150, 100), (96, 64))
    assert crop.shape == (64, 96)


@pytest.mark.parametrize("roi", [
    Rect(10, 10, 0, 20),
    Rect(10, 10, 20, -5),
    Rect(-1, 0, 20, 20),
    Rect(290, 0, 20, 20),
    Rect(0, 190, 20, 20),
])
def test_resample_rejects_bad_roi(roi):
    image = np.zeros((200, 300), np.uint8)
    with pytest.raises(DegenerateROIError):
        resample(image, roi, (96, 64))

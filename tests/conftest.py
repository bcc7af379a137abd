import matplotlib
matplotlib.use("Agg")

import cv2
import numpy as np
import pytest

from fcn_data.config import ImageDataConfig


def write_image(path, width=400, height=400, color=False):
    rng = np.random.default_rng(0)
    shape = (height, width, 3) if color else (height, width)
    img = rng.integers(0, 255, size=shape, dtype=np.uint8)
    cv2.rectangle(img, (100, 100), (150, 150), (255, 255, 255) if color else 255, -1)
    assert cv2.imwrite(str(path), img)
    return path


@pytest.fixture
def dataset_root(tmp_path):
    """One folder with a single usable annotation on a 400x400 image."""
    seq = tmp_path / "seq1"
    seq.mkdir()
    write_image(seq / "img0.png")
    (seq / "label.txt").write_text(
        "img0.png 100 100 50 50\n"
        "img0.png 0 5 50 50\n"
        "img0.png 20 20 8 40\n"
        "img0.png 30\n"
    )
    (tmp_path / "catalog.txt").write_text("seq1\n\n")
    return tmp_path


@pytest.fixture
def make_config(dataset_root):
    def _make(**kwargs):
        values = dict(source=str(dataset_root / "catalog.txt"), root_folder=str(dataset_root), batch_size=1)
        values.update(kwargs)
        return ImageDataConfig(**values)
    return _make

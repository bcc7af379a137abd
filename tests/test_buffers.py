import numpy as np
import pytest
import torch

from fcn_data.data.buffers import BatchBuffers


def test_offsets_follow_item_size():
    buffers = BatchBuffers((10, 1, 4, 6), (10, 2, 3, 3))
    assert buffers.offset(0) == 0
    assert buffers.offset(3) == 3 * 24
    assert buffers.offset(3, buffers.label) == 3 * 18
    with pytest.raises(IndexError):
        buffers.offset(10)


def test_writes_land_at_their_item():
    buffers = BatchBuffers((4, 1, 2, 2), (4, 2, 2, 2))
    buffers.write_data(2, torch.full((1, 2, 2), 5.0))
    buffers.write_label(1, np.ones((2, 2, 2), np.float32))
    assert buffers.data[2].eq(5.0).all()
    assert buffers.data[[0, 1, 3]].eq(0).all()
    assert buffers.label[1].eq(1.0).all()
    with pytest.raises(ValueError):
        buffers.write_data(0, torch.zeros(3))


def test_reshape_keeps_matching_tensors():
    buffers = BatchBuffers((4, 1, 2, 2), (4, 2, 2, 2))
    data = buffers.data
    buffers.reshape((4, 1, 2, 2), (8, 2, 2, 2))
    assert buffers.data is data
    assert tuple(buffers.label.shape) == (8, 2, 2, 2)

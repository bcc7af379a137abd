import numpy as np
import torch


class BatchBuffers:
    """
    Pre-allocated data and label tensors of one batch.

    Items are addressed by their logical index item * K + scale_rank, and
    written through the flat offset of that index.
    """

    def __init__(self, data_shape, label_shape):
        self.data = torch.zeros(data_shape, dtype=torch.float32)
        self.label = torch.zeros(label_shape, dtype=torch.float32)

    def reshape(self, data_shape, label_shape):
        if tuple(self.data.shape) != tuple(data_shape):
            self.data = torch.zeros(data_shape, dtype=torch.float32)
        if tuple(self.label.shape) != tuple(label_shape):
            self.label = torch.zeros(label_shape, dtype=torch.float32)

    @staticmethod
    def _item_count(tensor):
        return int(np.prod(tensor.shape[1:]))

    def offset(self, index, tensor=None):
        tensor = self.data if tensor is None else tensor
        if not 0 <= index < tensor.shape[0]:
            raise IndexError("item %d out of range for %d items" % (index, tensor.shape[0]))
        return index * self._item_count(tensor)

    def _write(self, tensor, index, values):
        values = torch.as_tensor(values, dtype=torch.float32).reshape(-1)
        count = self._item_count(tensor)
        if values.numel() != count:
            raise ValueError("expected %d values for item %d, got %d" % (count, index, values.numel()))
        start = self.offset(index, tensor)
        tensor.view(-1)[start:start + count] = values

    def write_data(self, index, values):
        self._write(self.data, index, values)

    def write_label(self, index, values):
        self._write(self.label, index, values)

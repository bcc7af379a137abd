import itertools

from torch.utils.data import DataLoader, IterableDataset, get_worker_info

from .batch_assembler import BatchAssembler


class FCNDataset(IterableDataset):
    """
    Yields (data, label) batches of multi-scale crops and heatmap labels.

    Each element is already a whole batch, so load it with batch_size=None.
    The catalog cursor belongs to whichever process iterates the dataset,
    hence at most one loader worker.
    """

    def __init__(self, config, params=None, transform=None, num_batches=None, assembler=None):
        self.config = config
        self.num_batches = num_batches
        self.assembler = assembler if assembler is not None else BatchAssembler(config, params, transform)

    def __len__(self):
        if self.num_batches is None:
            raise TypeError("FCNDataset without num_batches has no length")
        return self.num_batches

    def __iter__(self):
        worker_info = get_worker_info()
        if worker_info is not None and worker_info.num_workers > 1:
            raise RuntimeError("FCNDataset needs a single producer, got %d workers" % worker_info.num_workers)

        buffers = self.assembler.new_buffers()
        batches = range(self.num_batches) if self.num_batches is not None else itertools.count()
        for _ in batches:
            self.assembler.load_batch(buffers)
            # buffers are refilled in place, hand out copies
            yield buffers.data.clone(), buffers.label.clone()


def make_loader(dataset, prefetch_count=3):
    """One persistent worker fills up to prefetch_count batches ahead of the consumer."""
    return DataLoader(
        dataset,
        batch_size=None,
        num_workers=1,
        prefetch_factor=prefetch_count,
        persistent_workers=True,
    )

from .fcn_dataset import make_loader


class BatchPrefetcher:
    """
    Fills batches ahead of the consumer in a DataLoader worker process.

    The worker owns its copy of the catalog and cursor while running.
    stop() shuts the worker down, start() launches a new one from the
    dataset's current state.
    """

    def __init__(self, dataset, prefetch_count=3):
        self.dataset = dataset
        self.prefetch_count = prefetch_count
        self._loader = None
        self._iterator = None

    def start(self):
        if self._iterator is not None:
            return
        self._loader = make_loader(self.dataset, self.prefetch_count)
        self._iterator = iter(self._loader)

    def stop(self):
        # dropping the last reference to the loader iterator shuts the worker down
        self._iterator = None
        self._loader = None

    @property
    def running(self):
        return self._iterator is not None

    def get(self):
        """Block until the next (data, label) batch is ready."""
        if self._iterator is None:
            raise RuntimeError("Batch prefetcher is not running")
        return next(self._iterator)

    def __iter__(self):
        return self

    def __next__(self):
        return self.get()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

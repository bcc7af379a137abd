class FCNDataError(Exception):
    """Base class for every error raised while preparing FCN batches."""


class ConfigError(FCNDataError, ValueError):
    pass


class CatalogError(FCNDataError):
    pass


class ImageLoadError(FCNDataError, OSError):
    pass


class DegenerateROIError(FCNDataError, ValueError):
    pass

import logging
import os
from dataclasses import dataclass

import numpy as np

from ..errors import CatalogError
from ..utils.geometry import Rect

logger = logging.getLogger(__name__)

LABEL_FILE = "label.txt"


@dataclass(frozen=True)
class Annotation:
    image_path: str
    box: Rect


def is_valid_box(box):
    return box.x > 0 and box.y > 0 and box.width > 10 and box.height > 10


def read_folder_list(source):
    """Folder names listed in the catalog file, one whitespace separated token each."""
    if not os.path.isfile(source):
        raise CatalogError("Catalog file does not exist: %s" % source)
    with open(source) as fp:
        return fp.read().split()


def read_label_file(folder_path):
    """
    Parse <folder>/label.txt into (filename, Rect) pairs.

    Each line is "filename x y w h". Lines that are too short or hold
    non-numeric coordinates are skipped.
    """
    label_path = os.path.join(folder_path, LABEL_FILE)
    if not os.path.isfile(label_path):
        raise CatalogError("%s does not exist!" % label_path)

    entries = []
    with open(label_path) as fp:
        for line_no, line in enumerate(fp, 1):
            tokens = line.split()
            if len(tokens) < 5:
                if tokens:
                    logger.debug("%s:%d: short line skipped", label_path, line_no)
                continue
            try:
                x, y, w, h = (float(v) for v in tokens[1:5])
            except ValueError:
                logger.debug("%s:%d: malformed coordinates skipped", label_path, line_no)
                continue
            entries.append((tokens[0], Rect(x, y, w, h)))
    return entries


def load_catalog(source, root_folder=""):
    logger.info("Opening file %s", source)
    catalog = []
    dropped = 0
    for folder in read_folder_list(source):
        folder_path = os.path.join(root_folder, folder)
        for filename, box in read_label_file(folder_path):
            if is_valid_box(box):
                catalog.append(Annotation(os.path.join(folder_path, filename), box))
            else:
                dropped += 1
    if dropped:
        logger.info("Dropped %d annotations with degenerate boxes", dropped)
    if not catalog:
        raise CatalogError("No usable annotations found from %s" % source)
    return catalog


class DatasetState:
    """Catalog plus the cursor of the next annotation, owned by one producer."""

    def __init__(self, catalog, shuffle=False, rng=None):
        self.catalog = list(catalog)
        self.cursor = 0
        self.shuffle_on_wrap = shuffle
        self.rng = rng if rng is not None else np.random.default_rng()

    def __len__(self):
        return len(self.catalog)

    def shuffle(self):
        logger.info("Shuffling data")
        order = self.rng.permutation(len(self.catalog))
        self.catalog = [self.catalog[i] for i in order]

    def skip(self, rand_skip):
        if not rand_skip:
            return 0
        skip = int(self.rng.integers(rand_skip))
        logger.info("Skipping first %d data points.", skip)
        if len(self.catalog) <= skip:
            raise CatalogError("Not enough points to skip (%d annotations, skip %d)" % (len(self.catalog), skip))
        self.cursor = skip
        return skip

    def current(self):
        return self.catalog[self.cursor]

    def advance(self):
        """Move to the next annotation, returns True when the cursor wrapped."""
        self.cursor += 1
        if self.cursor < len(self.catalog):
            return False
        logger.info("Restarting data prefetching from start.")
        self.cursor = 0
        if self.shuffle_on_wrap:
            self.shuffle()
        return True

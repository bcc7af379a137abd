import argparse
import logging
import os

import torch
from tqdm import tqdm

from .config import ImageDataConfig
from .data.fcn_dataset import FCNDataset
from .data.prefetch import BatchPrefetcher
from .visualize import show_sample

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Prepare multi-scale crop and heatmap training batches.")
    parser.add_argument("--config", help="JSON file with the image data options")
    parser.add_argument("--source", help="catalog file listing the image folders")
    parser.add_argument("--root-folder", help="folder prepended to every catalog entry")
    parser.add_argument("--batch-size", type=int)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--shuffle", action="store_true", default=None)
    parser.add_argument("--num-batches", type=int, default=1)
    parser.add_argument("--output", help="directory to torch.save the batches into")
    parser.add_argument("--show", action="store_true", help="plot the first item of every batch")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def build_config(args):
    overrides = {
        "source": args.source,
        "root_folder": args.root_folder,
        "batch_size": args.batch_size,
        "seed": args.seed,
        "shuffle": args.shuffle,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if args.config:
        return ImageDataConfig.from_json(args.config, **overrides)
    return ImageDataConfig.from_dict(overrides)


def prepare_batches(config, num_batches, output=None, show=False):
    dataset = FCNDataset(config)
    params = dataset.assembler.params
    if output:
        os.makedirs(output, exist_ok=True)

    saved = []
    with BatchPrefetcher(dataset, config.prefetch_count) as prefetcher:
        for batch_id in tqdm(range(num_batches), desc="Batches"):
            data, label = prefetcher.get()
            if output:
                path = os.path.join(output, f"batch_{batch_id:05d}.pt")
                torch.save({"data": data, "label": label}, path)
                saved.append(path)
            if show:
                show_sample(data, label, item=0, params=params)
    logger.info("Prepared %d batches", num_batches)
    return saved


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='[%(asctime)s] %(levelname)s - %(name)s - %(message)s'
    )
    config = build_config(args)
    prepare_batches(config, args.num_batches, output=args.output, show=args.show)


if __name__ == "__main__":
    main()

"""Color Replacer - batch entry point."""

import argparse
import logging
import sys
from pathlib import Path

from PyQt6.QtCore import QCoreApplication

from color_replace import (
    NothingToExportError,
    ProcessingPipeline,
    export_images,
    load_raster,
    parse_rule,
    save_export,
)
from config_manager import ConfigManager
from models import CONFIG_FILE


def _count(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="color-replacer",
        description="Replace colors in images by tolerance-based rules.",
    )
    parser.add_argument("images", nargs="+", type=Path, help="Images to process")
    parser.add_argument(
        "-r",
        "--rule",
        action="append",
        default=[],
        metavar="SRC:TGT[:TOL]",
        help="Replacement rule, e.g. '#FFFFFF:transparent:20'. "
        "Repeat for several rules; the first matching rule wins.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_FILE,
        help="Configuration file holding saved rules (default: %(default)s)",
    )
    parser.add_argument(
        "--save-rules",
        action="store_true",
        help="Store the --rule arguments in the configuration file",
    )
    parser.add_argument("-o", "--output-dir", help="Directory for the exported file")
    parser.add_argument("--archive-name", help="File name of the ZIP for several images")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)"
    )
    return parser


def main(argv: "list[str] | None" = None) -> int:
    """Process images from the command line and export the results."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)-24s - %(levelname)-8s - %(message)s",
        datefmt="%H:%M:%S",
    )

    config_manager = ConfigManager(args.config)
    config = config_manager.load()

    try:
        rules = [parse_rule(text) for text in args.rule] or list(config.rules)
    except ValueError as e:
        parser.error(str(e))

    if args.save_rules:
        config.rules = rules
        ok, error = config_manager.save(config)
        if ok:
            print(f"✓ Saved {len(rules)} rules to {config_manager.config_path}")
        else:
            print(f"Warning: Could not save rules: {error}")

    output_dir = args.output_dir or config.output_dir
    archive_name = args.archive_name or config.archive_name

    _app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    pipeline = ProcessingPipeline(rules)

    # Image ids are positional so the same file can be given twice
    names: "dict[str, str]" = {}
    for index, path in enumerate(args.images, start=1):
        try:
            buffer = load_raster(path)
        except ValueError as e:
            print(f"✗ {path.name}: {e}")
            continue
        image_id = f"{index}:{path}"
        names[image_id] = path.name
        pipeline.add_image(image_id, buffer)

    print(f"Processing {_count(len(names), 'image')} with {_count(len(rules), 'rule')}...")
    pipeline.wait()

    entries = []
    for result in pipeline.results():
        name = names[result.image_id]
        if result.succeeded:
            print(f"✓ {name}")
            entries.append((name, result.buffer))
        else:
            print(f"✗ {name}: {result.error}")

    try:
        exported = export_images(entries, archive_name=archive_name)
    except NothingToExportError as e:
        print(f"Error: {e}")
        return 1

    path = save_export(exported, output_dir)
    print(f"Saved {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

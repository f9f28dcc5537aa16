"""Command line entry point for PickSort."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from . import KeyValueStore, PickSortSession, SettingsStore
from .io.vocabulary import VocabularyError, load_vocabulary
from .models.base import normalize_location
from .services.catalog import scan_folder


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="PickSort")
    parser.add_argument(
        "--scan",
        type=Path,
        metavar="DIR",
        help="List the images PickSort would show for a folder.",
    )
    parser.add_argument(
        "--image",
        type=Path,
        help="Image whose tags should be changed.",
    )
    parser.add_argument(
        "--add-tag",
        action="append",
        default=[],
        metavar="TAG",
        help="Add a tag to --image. May be repeated.",
    )
    parser.add_argument(
        "--remove-last-tag",
        action="store_true",
        help="Remove the most recently added tag from --image.",
    )
    parser.add_argument(
        "--show-tags",
        action="store_true",
        help="Print every tagged image and its tags.",
    )
    parser.add_argument(
        "--distribute",
        type=Path,
        metavar="DEST",
        help="Copy tagged images into one sub-folder per tag below DEST.",
    )
    parser.add_argument(
        "--vocabulary",
        type=Path,
        metavar="FILE",
        help="Validate a tag vocabulary JSON file and print its entries.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        help="Use an alternative settings file.",
    )
    parser.add_argument(
        "--state",
        type=Path,
        help="Use an alternative file for tags and remembered folders.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log progress to stderr.",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    headless = any(
        (
            args.scan,
            args.image,
            args.add_tag,
            args.remove_last_tag,
            args.show_tags,
            args.distribute,
            args.vocabulary,
        )
    )
    if not headless:
        from .gui import run_app

        run_app(settings_path=args.settings, state_path=args.state)
        return

    if (args.add_tag or args.remove_last_tag) and args.image is None:
        parser.error("--add-tag and --remove-last-tag require --image.")

    store = SettingsStore(args.settings) if args.settings else SettingsStore()
    config = store.load()

    if args.vocabulary:
        try:
            tags = load_vocabulary(args.vocabulary)
        except VocabularyError as exc:
            parser.exit(1, f"error: {exc}\n")
        _dump([{"name": tag.title, "nickname": tag.nickname} for tag in tags])
        return

    if args.scan:
        images = scan_folder(
            args.scan,
            include_raw=config.include_raw,
            include_hidden=config.include_hidden,
        )
        _dump([str(path) for path in images])
        return

    session = PickSortSession(config, KeyValueStore(args.state or store.state_path(config)))
    session.tags.load()

    if args.image is not None:
        image = normalize_location(args.image)
        results = [
            {"tag": tag, "result": session.tags.add_tag(image, tag).value} for tag in args.add_tag
        ]
        if args.remove_last_tag:
            results.append({"tag": None, "result": session.tags.remove_last_tag(image).value})
        _dump(
            {
                "image": str(image),
                "tags": session.tags.tags_for(image).as_list(),
                "results": results,
            }
        )

    if args.show_tags:
        _dump(session.tags.to_payload())

    if args.distribute:
        args.distribute.mkdir(parents=True, exist_ok=True)
        session.select_destination(args.distribute)
        report = session.process()
        if report is not None:
            _dump(report.as_dict())


def _dump(payload: object) -> None:
    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


if __name__ == "__main__":  # pragma: no cover
    main()

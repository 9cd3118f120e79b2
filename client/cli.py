"""Command-line driver for the image mixer workspace.

Run `image-mixer --help` (or `python -m client.cli --help`). The relay
backend must be reachable at IMAGE_MIXER_BACKEND_URL; commands that touch
saved images or drawings also need DATABASE_DIR.
"""

from __future__ import annotations

import argparse
import asyncio
import base64
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from client.capture.camera import CameraCapture, FacingMode
from client.capture.drawing import SavedDrawings
from client.capture.upload import LocalFile
from client.image_collection import ImageCollection
from client.prompt_builder import FigurePrompt
from client.relay_client import RelayClient
from client.workspace import MixerWorkspace
from dal.local_storage_dal import LocalStorageDAL
from utils.database_init import AsyncDatabaseInitializer
from utils.media_validation import parse_data_url


def _storage() -> LocalStorageDAL:
    return LocalStorageDAL(AsyncDatabaseInitializer())


async def _stored_collection() -> ImageCollection:
    collection = ImageCollection(storage=_storage())
    await collection.load()
    return collection


def _write_payload(payload: str, output: Path) -> None:
    output.write_bytes(base64.b64decode(payload))
    print(f"Wrote {output}")


def _report(workspace: MixerWorkspace) -> int:
    if workspace.feedback:
        print(workspace.feedback)
    if workspace.error:
        print(workspace.error, file=sys.stderr)
        return 1
    return 0


async def cmd_mix(args: argparse.Namespace) -> int:
    collection = await _stored_collection() if args.stored else ImageCollection()
    workspace = MixerWorkspace(RelayClient(args.backend), collection=collection)
    if args.files:
        await workspace.add_uploads(LocalFile(Path(name)) for name in args.files)
    workspace.set_prompt(FigurePrompt().build() if args.figure else args.prompt)

    if args.optimize:
        suggestion = await workspace.optimize_prompt()
        if suggestion is None:
            return _report(workspace)
        print(f"Optimized prompt: {suggestion}")
        workspace.accept_optimization()

    payload = await workspace.mix()
    if payload is None:
        return _report(workspace) or 1
    _write_payload(payload, Path(args.output))
    return 0


async def cmd_optimize(args: argparse.Namespace) -> int:
    workspace = MixerWorkspace(RelayClient(args.backend))
    workspace.set_prompt(args.prompt)
    suggestion = await workspace.optimize_prompt()
    if suggestion is not None:
        print(suggestion)
    return _report(workspace)


async def cmd_variations(args: argparse.Namespace) -> int:
    workspace = MixerWorkspace(RelayClient(args.backend))
    workspace.set_prompt(args.prompt)
    for number, candidate in enumerate(await workspace.generate_variations(), start=1):
        print(f"{number}. {candidate}")
    return _report(workspace)


async def cmd_images(args: argparse.Namespace) -> int:
    collection = await _stored_collection()
    if args.action == "add":
        workspace = MixerWorkspace(RelayClient(args.backend), collection=collection)
        await workspace.add_uploads(LocalFile(Path(name)) for name in args.targets)
        return _report(workspace)
    if args.action == "capture":
        workspace = MixerWorkspace(RelayClient(args.backend), collection=collection)
        with CameraCapture(facing_mode=FacingMode(args.facing)) as camera:
            if workspace.start_camera(camera):
                record = await workspace.capture_photo(camera)
                if record is not None:
                    print(f"Captured {record.id}")
        return _report(workspace)
    if args.action == "remove":
        for record_id in args.targets:
            if not await collection.remove(record_id):
                print(f"No image with id {record_id}", file=sys.stderr)
        return 0
    if args.action == "clear":
        await collection.clear()
        return 0
    for record in collection:
        print(f"{record.id}  {record.mime_type}  {len(record.payload)} chars")
    return 0


async def cmd_drawings(args: argparse.Namespace) -> int:
    saved = SavedDrawings(storage=_storage())
    await saved.load()
    if args.action == "delete":
        if not await saved.delete(args.index):
            print(f"No saved drawing at position {args.index}", file=sys.stderr)
            return 1
        return 0
    if args.action == "export":
        if not 0 <= args.index < len(saved):
            print(f"No saved drawing at position {args.index}", file=sys.stderr)
            return 1
        _, payload = parse_data_url(saved.items[args.index])
        _write_payload(payload, Path(args.output))
        return 0
    for index, data_url in enumerate(saved.items):
        print(f"{index}: {len(data_url)} chars")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="image-mixer", description="Mix images with a text instruction.")
    parser.add_argument("--backend", default=None, help="Relay backend URL")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    mix = sub.add_parser("mix", help="Generate one image from source images and a prompt")
    mix.add_argument("files", nargs="*", help="Image files to include")
    prompt_group = mix.add_mutually_exclusive_group(required=True)
    prompt_group.add_argument("-p", "--prompt")
    prompt_group.add_argument("--figure", action="store_true", help="Use the collectible figure prompt")
    mix.add_argument("-o", "--output", default="mixed.png")
    mix.add_argument("--optimize", action="store_true", help="Rewrite the prompt before mixing")
    mix.add_argument("--stored", action="store_true", help="Include the saved image collection")
    mix.set_defaults(handler=cmd_mix)

    optimize = sub.add_parser("optimize", help="Rewrite a prompt to be more descriptive")
    optimize.add_argument("-p", "--prompt", required=True)
    optimize.set_defaults(handler=cmd_optimize)

    variations = sub.add_parser("variations", help="Suggest three alternative prompts")
    variations.add_argument("-p", "--prompt", required=True)
    variations.set_defaults(handler=cmd_variations)

    images = sub.add_parser("images", help="Manage the saved image collection")
    images.add_argument("action", choices=["list", "add", "capture", "remove", "clear"])
    images.add_argument("targets", nargs="*", help="Files to add or ids to remove")
    images.add_argument("--facing", choices=[mode.value for mode in FacingMode], default=FacingMode.ENVIRONMENT.value)
    images.set_defaults(handler=cmd_images)

    drawings = sub.add_parser("drawings", help="Manage saved drawings")
    drawings.add_argument("action", choices=["list", "export", "delete"])
    drawings.add_argument("index", nargs="?", type=int, default=0)
    drawings.add_argument("-o", "--output", default="drawing.png")
    drawings.set_defaults(handler=cmd_drawings)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    try:
        return asyncio.run(args.handler(args))
    except RuntimeError as exc:
        print(exc, file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())

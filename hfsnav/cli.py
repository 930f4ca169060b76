"""Command-line front door for hfsnav.

Parses CLI options, loads the configured volume engine, opens the image
(asking for a partition when the container is ambiguous), and dispatches
one command against the opened volume.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .controller import VolumeController, VolumeRegistry
from .details import describe_volume, format_table_date, size_label, type_creator_label
from .engine import VolumeEngine, load_engine
from .errors import HFSNavError, NameConflict
from .partitions import PartitionResolver
from .runtime import config
from .tree.node_cache import VisibleNode
from .volume_model.paths import ROOT_PATH
from .volume_model.types import PartitionCandidate, TransferMode

logger = logging.getLogger(__name__)

WRITE_COMMANDS = frozenset({"import", "rename", "delete", "mv", "cp", "type-creator"})


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _transfer_mode(value: str) -> TransferMode:
    try:
        return TransferMode.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hfsnav",
        description="Browse and edit classic HFS volume images.",
    )
    parser.add_argument("image", help="Disk image or container file.")
    parser.add_argument("--engine", default=None, help="Volume engine factory as 'module:callable'.")
    parser.add_argument("--read-only", action="store_true", help="Open the volume read-only.")
    parser.add_argument("--partition", type=_positive_int, default=None, help="Partition number to open.")
    parser.add_argument(
        "--mode",
        type=_transfer_mode,
        default=None,
        help="Transfer mode (auto, raw, macbinary, binhex, text); remembered for later runs.",
    )
    parser.add_argument("--yes", "-y", action="store_true", help="Answer yes to replace/delete prompts.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output to stderr.")

    commands = parser.add_subparsers(dest="command", required=True)
    ls_cmd = commands.add_parser("ls", help="List a folder.")
    ls_cmd.add_argument("path", nargs="?", default=ROOT_PATH)
    tree_cmd = commands.add_parser("tree", help="Print a folder recursively.")
    tree_cmd.add_argument("path", nargs="?", default=ROOT_PATH)
    tree_cmd.add_argument("--depth", type=_positive_int, default=None)
    commands.add_parser("info", help="Show volume information.")
    commands.add_parser("partitions", help="List HFS partitions in the container.")
    import_cmd = commands.add_parser("import", help="Copy host files or folders into the volume.")
    import_cmd.add_argument("sources", nargs="+", type=Path)
    import_cmd.add_argument("--to", dest="destination", default=ROOT_PATH)
    export_cmd = commands.add_parser("export", help="Copy a volume entry to the host.")
    export_cmd.add_argument("path")
    export_cmd.add_argument("destination", type=Path)
    rename_cmd = commands.add_parser("rename", help="Rename an entry.")
    rename_cmd.add_argument("path")
    rename_cmd.add_argument("name")
    delete_cmd = commands.add_parser("delete", help="Delete entries.")
    delete_cmd.add_argument("paths", nargs="+")
    mv_cmd = commands.add_parser("mv", help="Move entries into a folder.")
    mv_cmd.add_argument("paths", nargs="+")
    cp_cmd = commands.add_parser("cp", help="Copy entries into a folder.")
    cp_cmd.add_argument("paths", nargs="+")
    tc_cmd = commands.add_parser("type-creator", help="Set a file's type and creator codes.")
    tc_cmd.add_argument("path")
    tc_cmd.add_argument("file_type")
    tc_cmd.add_argument("creator")
    return parser


def _ask_yes_no(prompt: str, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _choose_partition(candidates: list[PartitionCandidate]) -> PartitionCandidate | None:
    """Prompt on stdin for one of several partitions."""
    for candidate in candidates:
        sys.stdout.write(f"{candidate.ordinal:>3}  {candidate.name}\n")
    try:
        answer = input("Open which partition? ").strip()
    except EOFError:
        return None
    for candidate in candidates:
        if answer == str(candidate.ordinal):
            return candidate
    return None


def _resolve_engine(spec: str | None) -> VolumeEngine:
    spec = spec or config.load_engine_spec()
    if spec is None:
        raise SystemExit("No volume engine configured; pass --engine module:factory.")
    return load_engine(spec)


def _node_for(controller: VolumeController, path: str) -> VisibleNode | None:
    if path == ROOT_PATH:
        return None
    return VisibleNode(info=controller.session.attributes(path))


def _entry_line(node: VisibleNode, indent: str = "") -> str:
    info = node.info
    kind = "d" if info.is_directory else "-"
    codes = type_creator_label(info)
    return f"{kind} {size_label(info):>10}  {format_table_date(info.modified):<14}  {codes:<11}  {indent}{info.name}\n"


def _print_tree(controller: VolumeController, node: VisibleNode | None, depth: int, max_depth: int | None) -> None:
    for child in controller.children_of(node):
        sys.stdout.write(_entry_line(child, "  " * depth))
        if child.info.is_directory and (max_depth is None or depth + 1 < max_depth):
            _print_tree(controller, child, depth + 1, max_depth)


def _open(args: argparse.Namespace, engine: VolumeEngine, writable: bool, options: dict) -> tuple[VolumeRegistry, VolumeController | None]:
    registry = VolumeRegistry(engine, choose_partition=_choose_partition)
    image = Path(args.image)
    if args.partition is None:
        return registry, registry.open_file(image, writable=writable, **options)
    session = PartitionResolver(engine).open_first(image, [args.partition], writable=writable)
    return registry, VolumeController(session, **options)


def _run(args: argparse.Namespace, controller: VolumeController) -> None:
    command = args.command
    if command == "ls":
        for child in controller.children_of(_node_for(controller, args.path)):
            sys.stdout.write(_entry_line(child))
    elif command == "tree":
        _print_tree(controller, _node_for(controller, args.path), 0, args.depth)
    elif command == "info":
        for key, value in describe_volume(controller.volume_info()).items():
            sys.stdout.write(f"{key:<22}{value}\n")
    elif command == "import":
        report = controller.import_items(args.sources, args.destination)
        for path in report.written:
            sys.stdout.write(f"imported {path}\n")
        for path in report.skipped:
            sys.stdout.write(f"skipped {path}\n")
    elif command == "export":
        node = _node_for(controller, args.path)
        if node is None:
            raise SystemExit("Cannot export the volume root; export its folders instead.")
        written = controller.export(node, args.destination)
        config.save_last_export_dir(written.parent)
        sys.stdout.write(f"exported {written}\n")
    elif command == "rename":
        node = _node_for(controller, args.path)
        if node is None:
            raise SystemExit("Cannot rename the volume root.")
        controller.rename(node, args.name)
    elif command == "delete":
        nodes = [node for node in (_node_for(controller, path) for path in args.paths) if node is not None]
        deleted = controller.delete(nodes)
        for info in deleted:
            sys.stdout.write(f"deleted {info.path}\n")
    elif command in {"mv", "cp"}:
        if len(args.paths) < 2:
            raise SystemExit(f"{command} needs at least one source and a destination folder.")
        *sources, destination = args.paths
        if command == "mv":
            report = controller.move(sources, destination)
        else:
            report = controller.copy(sources, destination)
        for path in report.written:
            sys.stdout.write(f"{command} {path}\n")
    elif command == "type-creator":
        node = _node_for(controller, args.path)
        if node is None:
            raise SystemExit("The volume root has no type/creator.")
        controller.set_type_creator(node, args.file_type, args.creator)


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and run one command against a volume image."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    image = Path(args.image)
    if not image.exists():
        raise SystemExit(f"Path not found: {image}")

    try:
        engine = _resolve_engine(args.engine)
        if args.command == "partitions":
            for candidate in PartitionResolver(engine).enumerate(image):
                sys.stdout.write(f"{candidate.ordinal:>3}  {candidate.name}  (map index {candidate.map_index})\n")
            return

        if args.mode is not None:
            config.save_transfer_mode(args.mode)
        mode = args.mode or config.load_transfer_mode()
        read_only = args.read_only or config.load_open_read_only()
        wants_write = args.command in WRITE_COMMANDS
        if wants_write and read_only:
            raise SystemExit(f"'{args.command}' needs a writable volume; drop --read-only.")

        def confirm_replace(conflict: NameConflict) -> bool:
            kind = "folder" if conflict.existing_is_directory else "file"
            return _ask_yes_no(f'Replace existing {kind} "{conflict.existing_name}"?', args.yes)

        def confirm_delete(nodes: list[VisibleNode]) -> bool:
            if len(nodes) == 1:
                return _ask_yes_no(f'Permanently delete "{nodes[0].info.name}"?', args.yes)
            return _ask_yes_no(f"Permanently delete {len(nodes)} items?", args.yes)

        options = {
            "transfer_mode": mode,
            "confirm_replace": confirm_replace,
            "confirm_delete": confirm_delete,
        }
        registry, controller = _open(args, engine, wants_write, options)
        if controller is None:
            raise SystemExit("No partition chosen; nothing opened.")
        try:
            _run(args, controller)
        finally:
            controller.close()
            registry.close_all()
    except HFSNavError as exc:
        logger.debug("Command failed", exc_info=True)
        raise SystemExit(f"hfsnav: {exc}") from exc


if __name__ == "__main__":
    main()

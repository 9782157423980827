"""
SRF CLI — inspect and unpack "srf1" resource containers.

Commands:
  srf info     - Show header fields and totals
  srf list     - List every resource and item (number, size, sha256)
  srf extract  - Write item payloads to <dir>/<resource>/<number>.bin
  srf check    - Decode a file and report OK / FAIL
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import re
import sys
from pathlib import Path

# Resource ids usable as a directory name as-is
_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_\-]{1,4}$")

logger = logging.getLogger(__name__)


def _positive_int(raw: str) -> int:
    """argparse type for byte limits: a strictly positive integer."""
    try:
        value = int(raw)
    except ValueError:
        value = -1
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {raw!r}")
    return value


def _max_size(args: argparse.Namespace) -> int:
    """Resolve the reader size limit: --max-size, then SRF_MAX_FILE_SIZE, then default."""
    from srf import SRF_MAX_FILE_SIZE, SRF_MAX_SIZE_ENV

    if getattr(args, "max_size", None) is not None:
        return args.max_size
    raw = os.environ.get(SRF_MAX_SIZE_ENV, "").strip()
    if not raw:
        return SRF_MAX_FILE_SIZE
    try:
        return _positive_int(raw)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {SRF_MAX_SIZE_ENV} {e}", file=sys.stderr)
        sys.exit(1)


def _load(args: argparse.Namespace):
    """Decode args.path, exiting with an error message on failure."""
    from srf import SrfDecodeError, SrfReader

    max_size = _max_size(args)
    logger.info("Decoding %s (limit %d bytes)", args.path, max_size)
    try:
        data = SrfReader.read(args.path, max_size=max_size)
    except (SrfDecodeError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    logger.info(
        "Decoded %s: %d resource(s), %d item(s)", args.path, len(data), data.item_count
    )
    return data


def _dir_name(resource_id: str) -> str:
    """Directory name for a resource: the id itself when safe, else its hex bytes."""
    from srf._format.spec import encode_id

    if _SAFE_ID_RE.match(resource_id) and resource_id not in (".", ".."):
        return resource_id
    return f"hex-{encode_id(resource_id).hex()}"


def _dir_names(resource_ids: list[str]) -> dict[str, str]:
    """Directory names for a set of resources, hex for ids that clash when case-folded."""
    from srf._format.spec import encode_id

    names = {rid: _dir_name(rid) for rid in resource_ids}
    folded: dict[str, list[str]] = {}
    for rid, name in names.items():
        folded.setdefault(name.casefold(), []).append(rid)
    for clashing in folded.values():
        if len(clashing) > 1:
            for rid in clashing:
                names[rid] = f"hex-{encode_id(rid).hex()}"
    return names


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    logging.getLogger("srf").setLevel(level)


def cmd_info(args: argparse.Namespace) -> None:
    """Show header fields and totals for an SRF file."""
    data = _load(args)
    header = data.header
    print(f"{args.path}")
    print(f"  magic:          {header.magic.decode('latin-1')}")
    print(f"  file length:    {header.file_length}")
    print(f"  header length:  {header.header_length}")
    print(f"  resources:      {len(data)}")
    print(f"  items:          {data.item_count}")
    print(f"  payload bytes:  {data.total_size}")


def cmd_list(args: argparse.Namespace) -> None:
    """List every resource and item in an SRF file."""
    data = _load(args)

    if args.json:
        print(json.dumps(data.summary(), indent=2))
        return

    if not len(data):
        print("No resources.")
        return

    print(f"{args.path}: {len(data)} resource(s)\n")
    for entry in data.summary():
        print(f"  {entry['id']!r}  {len(entry['items'])} item(s)")
        for item in entry["items"]:
            print(f"    #{item['number']:<6} {item['size']:>10} bytes  {item['sha256'][:16]}...")


def cmd_extract(args: argparse.Namespace) -> None:
    """Write item payloads to <output>/<resource>/<number>.bin."""
    output = Path(args.output or ".")
    if ".." in output.parts:
        print("Error: Output path must not contain '..' (path traversal)", file=sys.stderr)
        sys.exit(1)

    data = _load(args)
    wanted = args.resource or list(data)
    missing = [rid for rid in wanted if rid not in data]
    if missing:
        print(f"Error: Resource not found: {', '.join(missing)}", file=sys.stderr)
        sys.exit(1)

    names = _dir_names(wanted)
    written = 0
    for rid in wanted:
        resource = data[rid]
        target = output / names[rid]
        target.mkdir(parents=True, exist_ok=True)
        for number in resource.item_numbers:
            (target / f"{number}.bin").write_bytes(resource.items[number])
            written += 1
        logger.info("Extracted %r -> %s (%d item(s))", rid, target, len(resource))
    print(f"Extracted {written} item(s) from {len(wanted)} resource(s) -> {output}")


def cmd_check(args: argparse.Namespace) -> None:
    """Decode a file and report whether it is a valid SRF container."""
    from srf import SrfDecodeError, SrfReader

    try:
        data = SrfReader.read(args.path, max_size=_max_size(args))
    except (SrfDecodeError, ValueError, OSError) as e:
        logger.info("Check failed for %s", args.path)
        print(f"FAIL: {args.path}: {e}")
        sys.exit(1)
    print(f"OK: {args.path} ({len(data)} resource(s), {data.item_count} item(s))")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="srf",
        description="SRF reader — inspect and unpack srf1 resource containers.",
    )
    from srf import __version__
    parser.add_argument("--version", action="version", version=f"srf {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log progress (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--max-size", type=_positive_int,
        help="Refuse files larger than this many bytes (or set SRF_MAX_FILE_SIZE)",
    )
    sub = parser.add_subparsers(dest="command")

    # info
    p_info = sub.add_parser("info", help="Show header fields and totals")
    p_info.add_argument("path", help="Path to .srf file")

    # list
    p_list = sub.add_parser("list", help="List resources and items")
    p_list.add_argument("path", help="Path to .srf file")
    p_list.add_argument("--json", action="store_true", help="Print JSON instead of text")

    # extract
    p_ext = sub.add_parser("extract", help="Write item payloads to files")
    p_ext.add_argument("path", help="Path to .srf file")
    p_ext.add_argument("-o", "--output", help="Output directory (default: current)")
    p_ext.add_argument(
        "-r", "--resource", action="append",
        help="Only extract this resource id (repeatable)",
    )

    # check
    p_check = sub.add_parser("check", help="Validate an SRF file")
    p_check.add_argument("path", help="Path to .srf file")

    args = parser.parse_args(argv)

    if not args.command:
        print("SRF reader — srf1 resource containers")
        print()
        print("Usage:")
        print("  srf info file.srf")
        print("  srf list file.srf [--json]")
        print("  srf extract file.srf -o out/ [-r TEX0]")
        print("  srf check file.srf")
        print()
        print("Run 'srf <command> --help' for details on any command.")
        sys.exit(0)

    _configure_logging(args.verbose)

    commands = {
        "info": cmd_info,
        "list": cmd_list,
        "extract": cmd_extract,
        "check": cmd_check,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()

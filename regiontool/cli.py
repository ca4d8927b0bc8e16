""" Command line interface

    regiontool count WORLD [--decode]
    regiontool scan WORLD [--jobs N]
    regiontool inspect FILE X Z
"""
import argparse
import logging
import sys

from regiontool.world import WorldFolder
from regiontool.region import RegionFile
from regiontool.header import slot_index
from regiontool.error import RegionToolError, RegionFileError, OutOfRange
from regiontool.utils import hexdump, format_timestamp

logger = logging.getLogger(__name__)

HEXDUMP_LINES=16

# ====================================================================
# Subcommands
# ====================================================================
def count(args):
    result = WorldFolder(args.world).count_chunks(decode=args.decode)
    logger.info("Chunk Count: %d", result.present)
    if result.failed:
        logger.info("Failed to decode: %d", result.failed)

    return 0

def scan(args):
    logger.info("Scanning Region files for errors...")
    result = WorldFolder(args.world).scan_files(workers=args.jobs)
    logger.info("Scan Results:\n%s", result)

    return 0

def inspect(args):
    try:
        slot_index(args.x, args.z)
        region = RegionFile.fromFile(args.file)
    except (OutOfRange, RegionFileError) as e:
        logger.error("%s", e)
        return 1

    with region:
        offset, sectors = region.location(args.x, args.z)
        print("Chunk ({},{}) of {}".format(args.x, args.z, region.name))
        print("  location:  sector {}, {} sector(s)".format(offset, sectors))
        print("  timestamp: {}".format(format_timestamp(region.timestamp(args.x, args.z))))
        print("  status:    {}".format(region.status(args.x, args.z)))

        try:
            chunk = region.chunk_at(args.x, args.z)
        except RegionToolError as e:
            print("  error:     {}".format(e))
            return 1

        if chunk is not None:
            print("  length:    {} (compression {})".format(chunk.length, chunk.compression))
            for line in hexdump(chunk.data, maxlines=HEXDUMP_LINES):
                print("  " + line)

    return 0

# ====================================================================
# Entry point
# ====================================================================
def build_parser():
    parser = argparse.ArgumentParser(prog="regiontool", description="Inspect Minecraft Anvil region files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Forces verbose output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("count", help="Return the total number of chunks in the world")
    p.add_argument("world", help="Path to the world folder")
    p.add_argument("--decode", action="store_true", help="Decompress chunks and report failures separately")
    p.set_defaults(func=count)

    p = subparsers.add_parser("scan", help="Scan for errors in the region files")
    p.add_argument("world", help="Path to the world folder")
    p.add_argument("-j", "--jobs", type=int, default=None, help="Number of region files scanned in parallel")
    p.set_defaults(func=scan)

    p = subparsers.add_parser("inspect", help="Show one chunk of a region file")
    p.add_argument("file", help="Path to the region file")
    p.add_argument("x", type=int)
    p.add_argument("z", type=int)
    p.set_defaults(func=inspect)

    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    return args.func(args)

if __name__ == "__main__":
    sys.exit(main())

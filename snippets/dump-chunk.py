""" Dump the first chunk that can be decoded from a region file

    usage: python snippets/dump-chunk.py path/to/r.0.0.mca
"""
import sys

from regiontool.region import RegionFile
from regiontool.utils import hexdump

REGION_FILE=sys.argv[1]

with RegionFile.fromFile(REGION_FILE) as region:
    for chunk in region.chunks():
        print("Chunk {},{} from {}:".format(chunk.x, chunk.z, REGION_FILE))
        for line in hexdump(chunk.data, maxlines=32):
            print(line)
        break

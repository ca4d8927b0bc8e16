import gzip
import os.path
import zlib
from collections import namedtuple

from regiontool.header import REGION_WIDTH, SECTOR_SIZE
from regiontool.error import TruncatedChunk, CorruptPayload, UnsupportedCompression

# ====================================================================
# Constants
# ====================================================================
GZIP=1
ZLIB=2
UNCOMPRESSED=3
EXTERNAL=0x80

CHUNK_HEADER_SIZE=5

DECOMPRESSORS = {
    GZIP: gzip.decompress,
    ZLIB: zlib.decompress,
    UNCOMPRESSED: bytes,
}

ChunkRecord = namedtuple('ChunkRecord', ['x', 'z', 'length', 'compression', 'data', 'timestamp'])

# ====================================================================
# External chunks
# ====================================================================
class ExternalLocator:
    """ Find the `c.<cx>.<cz>.mcc` files holding chunks too large
        for their region file.
    """
    def __init__(self, dirname, rx, rz):
        self._dirname = dirname
        self._rx = rx
        self._rz = rz

    def path(self, x, z):
        cx = REGION_WIDTH*self._rx+x
        cz = REGION_WIDTH*self._rz+z
        return os.path.join(self._dirname, 'c.{}.{}.mcc'.format(cx, cz))

    def read(self, x, z):
        with open(self.path(x, z), 'rb') as f:
            return f.read()

# ====================================================================
# Module functions
# ====================================================================
def decompress(compression, payload, x, z):
    try:
        fct = DECOMPRESSORS[compression]
    except KeyError:
        raise UnsupportedCompression(x, z, compression) from None

    if compression != UNCOMPRESSED and len(payload) == 0:
        raise CorruptPayload(x, z, "empty compressed payload")

    try:
        return fct(payload)
    except (zlib.error, OSError, EOFError) as e:
        raise CorruptPayload(x, z, "can't decompress payload: {err}", err=e) from e

def parse_chunk_data(span, x, z, external=None):
    """ Split the raw sector span of a chunk into its length, compression
        tag and decompressed data
    """
    if len(span) < CHUNK_HEADER_SIZE:
        raise TruncatedChunk(x, z, "only {size} bytes available for the chunk header", size=len(span))

    length = int.from_bytes(span[:4], 'big')
    compression = span[4]
    if length == 0:
        raise CorruptPayload(x, z, "chunk declares a zero length")

    available = len(span)-CHUNK_HEADER_SIZE
    if length-1 > available:
        raise TruncatedChunk(x, z, "chunk length {length} exceeds the {available} bytes available",
                             length=length, available=available)

    if compression & EXTERNAL:
        if external is None:
            raise UnsupportedCompression(x, z, compression,
                "payload stored outside the region file (compression {compression})")
        try:
            payload = external.read(x, z)
        except FileNotFoundError as e:
            raise TruncatedChunk(x, z, "missing external chunk file {path}", path=e.filename) from e
        except OSError as e:
            raise TruncatedChunk(x, z, "can't read external chunk file: {err}", err=e) from e

        return length, compression, decompress(compression & ~EXTERNAL, payload, x, z)

    payload = span[CHUNK_HEADER_SIZE:CHUNK_HEADER_SIZE+length-1]
    return length, compression, decompress(compression, payload, x, z)

def decode_chunk(source, location, x, z, timestamp=0, external=None):
    """ Read and decode the chunk stored at `location`.

        The whole sector span is fetched with a single read. Errors are
        reported as ChunkError subclasses for slot (x,z).
    """
    try:
        span = source.read_at(location.start, location.count*SECTOR_SIZE)
    except OSError as e:
        raise TruncatedChunk(x, z, "can't read chunk sectors: {err}", err=e) from e

    length, compression, data = parse_chunk_data(memoryview(span), x, z, external)

    return ChunkRecord(x, z, length, compression, data, timestamp)

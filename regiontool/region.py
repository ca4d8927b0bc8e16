import os.path
import re
import time
from collections import namedtuple

from regiontool.header import HeaderTable, HEADER_SIZE, SLOT_COUNT, RegionCoordinate, slot_index
from regiontool.sectormap import SectorMap, PRESENT, INVALID
from regiontool.chunk import ExternalLocator, decode_chunk
from regiontool.source import open_source
from regiontool.error import NotARegionFile, ChunkError

# ====================================================================
# Constants
# ====================================================================
REGION_FILENAME=re.compile(r'^r\.(-?\d+)\.(-?\d+)\.mca$')

class ChunkCount(namedtuple('ChunkCount', ['present', 'failed'])):
    __slots__ = ()

    @property
    def decoded(self):
        return self.present-self.failed

# ====================================================================
# Utilities
# ====================================================================
def parse_region_filename(path):
    """ Return the (rx, rz) region coordinates encoded in a
        `r.<rx>.<rz>.mca` file name, or None
    """
    match = REGION_FILENAME.match(os.path.basename(path))
    if match is None:
        return None

    return int(match.group(1)), int(match.group(2))

def _cancel_test(cancel):
    if cancel is None:
        return lambda : False
    if hasattr(cancel, 'is_set'):
        return cancel.is_set

    return cancel

# ====================================================================
# Chunk enumeration
# ====================================================================
class ChunkEnumeration:
    """ Lazy iterator over the non-absent slots of a region.

        Each item is a (RegionCoordinate, result) pair where result is either
        a ChunkRecord or the ChunkError explaining why the slot could not be
        decoded.

        The enumeration stops early when `cancel` is set or `deadline`
        (a time.monotonic() value) has passed. `position` is then the index
        of the next slot to visit, suitable as the `start` argument of
        RegionFile.present_chunks() to resume.
    """
    def __init__(self, region, start=0, cancel=None, deadline=None):
        if not 0 <= start <= SLOT_COUNT:
            raise ValueError("Enumeration start {} is outside the slot range".format(start))

        self._region = region
        self._slots = region.sectormap.slots(start)
        self._cancelled = _cancel_test(cancel)
        self._deadline = deadline

        self.position = start
        self.interrupted = False

    def __iter__(self):
        return self

    def __next__(self):
        if self.interrupted:
            raise StopIteration

        if self._cancelled() or (self._deadline is not None and time.monotonic() >= self._deadline):
            self.interrupted = True
            raise StopIteration

        try:
            coord, status, error = next(self._slots)
        except StopIteration:
            self.position = SLOT_COUNT
            raise

        self.position = coord.index+1
        if status is INVALID:
            return coord, error

        try:
            return coord, self._region._decode(coord.index)
        except ChunkError as e:
            return coord, e

    @property
    def done(self):
        return self.position >= SLOT_COUNT

# ====================================================================
# RegionFile
# ====================================================================
class RegionFile:
    """ A read-only Anvil region file

        The header is parsed once when the file is opened. Chunks are read
        and decompressed on demand.
    """
    def __init__(self, source, *, rx=None, rz=None):
        self._source = source
        self.name = source.name

        if rx is None and source.path is not None:
            rx, rz = parse_region_filename(source.path) or (None, None)

        self.rx = rx
        self.rz = rz

        if rx is not None and source.path is not None:
            self._external = ExternalLocator(os.path.dirname(source.path), rx, rz)
        else:
            self._external = None

        try:
            size = source.size
            data = source.read_at(0, HEADER_SIZE)
        except OSError as e:
            raise NotARegionFile(self.name, e.strerror or e) from e

        self.header = HeaderTable.fromBytes(data, self.name)
        self.sectormap = SectorMap(self.header, size, self.name)

    @classmethod
    def open(cls, source, *, rx=None, rz=None):
        """ Open a region from a path, a bytes-like object,
            a binary file object or a ByteSource
        """
        source = open_source(source)
        try:
            return cls(source, rx=rx, rz=rz)
        except Exception:
            source.close()
            raise

    @classmethod
    def fromFile(cls, path):
        return cls.open(os.fspath(path))

    def close(self):
        self._source.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self):
        return "RegionFile({!r})".format(self.name)

    #------------------------------------
    # Slot metadata
    #------------------------------------
    def location(self, x, z):
        return self.header.location(x, z)

    def timestamp(self, x, z):
        return self.header.timestamp(x, z)

    def status(self, x, z):
        return self.sectormap.status(x, z)

    #------------------------------------
    # Chunk access
    #------------------------------------
    def _decode(self, index):
        coord = RegionCoordinate.fromIndex(index)
        return decode_chunk(self._source,
                            self.header.locations[index],
                            coord.x, coord.z,
                            timestamp=self.header.timestamps[index],
                            external=self._external)

    def chunk_at(self, x, z):
        """ Return the decoded chunk at (x,z), or None if the slot is empty.

            Raise OutOfRange for coordinates outside the region grid and
            a ChunkError subclass if the chunk can't be decoded.
        """
        index = slot_index(x, z)
        status = self.sectormap.status_at(index)
        if status is PRESENT:
            return self._decode(index)
        if status is INVALID:
            raise self.sectormap.error_at(index)

        return None

    class ChunkAccessor:
        def __init__(self, region):
            self._region = region

        def __getitem__(self, idx):
            x, z = idx
            return self._region.chunk_at(x, z)

    @property
    def chunk(self):
        return RegionFile.ChunkAccessor(self)

    def present_chunks(self, *, start=0, cancel=None, deadline=None):
        return ChunkEnumeration(self, start, cancel, deadline)

    def chunks(self):
        """ Iterator over the chunks that can be decoded, in slot order
        """
        for coord, result in self.present_chunks():
            if not isinstance(result, ChunkError):
                yield result

    #------------------------------------
    # Counting
    #------------------------------------
    def count_present(self):
        """ Number of non-absent slots, without reading any chunk data
        """
        return self.sectormap.count(PRESENT)+self.sectormap.count(INVALID)

    def count(self):
        """ Decode every non-absent slot and return the number of
            slots found along with how many of them failed
        """
        present = failed = 0
        for coord, result in self.present_chunks():
            present += 1
            if isinstance(result, ChunkError):
                failed += 1

        return ChunkCount(present, failed)

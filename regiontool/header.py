import struct
from collections import namedtuple

from regiontool.error import OutOfRange, TruncatedHeader

# ====================================================================
# Constants
# ====================================================================
SECTOR_SIZE=4096
HEADER_SECTORS=2
HEADER_SIZE=HEADER_SECTORS*SECTOR_SIZE
REGION_WIDTH=32
SLOT_COUNT=REGION_WIDTH*REGION_WIDTH

# ====================================================================
# Value types
# ====================================================================
class RegionCoordinate(namedtuple('RegionCoordinate', ['x', 'z'])):
    """ Position of a chunk inside the 32x32 grid of a region
    """
    __slots__ = ()

    @classmethod
    def fromIndex(cls, index):
        z, x = divmod(index, REGION_WIDTH)
        return cls(x, z)

    @property
    def index(self):
        return slot_index(self.x, self.z)

class LocationEntry(namedtuple('LocationEntry', ['offset', 'count'])):
    """ Sector offset and sector count of a chunk, as found in the header
    """
    __slots__ = ()

    @property
    def absent(self):
        return self.offset == 0 and self.count == 0

    @property
    def start(self):
        return self.offset*SECTOR_SIZE

    @property
    def stop(self):
        return (self.offset+self.count)*SECTOR_SIZE

# ====================================================================
# Module functions
# ====================================================================
def slot_index(x, z):
    if not (0 <= x < REGION_WIDTH and 0 <= z < REGION_WIDTH):
        raise OutOfRange(x, z)

    return z*REGION_WIDTH+x

def bytes_to_chunk_addr(data, offset):
    """ Decode the 4 bytes location entry found at `offset`

        The first 3 bytes are the big endian sector offset, the last one
        the sector count
    """
    return LocationEntry(int.from_bytes(data[offset:offset+3], 'big'), data[offset+3])

# ====================================================================
# HeaderTable
# ====================================================================
class HeaderTable:
    """ The two 4KiB tables at the start of a region file: chunk locations,
        then chunk timestamps. Both are indexed by slot.
    """
    def __init__(self, locations, timestamps):
        assert len(locations) == SLOT_COUNT
        assert len(timestamps) == SLOT_COUNT

        self.locations = tuple(locations)
        self.timestamps = tuple(timestamps)

    @classmethod
    def fromBytes(cls, data, name="<bytes>"):
        data = memoryview(data)
        if len(data) < HEADER_SIZE:
            raise TruncatedHeader(name, len(data))

        locations = [bytes_to_chunk_addr(data, i*4) for i in range(SLOT_COUNT)]
        timestamps = struct.unpack_from('>{}I'.format(SLOT_COUNT), data, SECTOR_SIZE)

        return cls(locations, timestamps)

    def location(self, x, z):
        return self.locations[slot_index(x, z)]

    def timestamp(self, x, z):
        return self.timestamps[slot_index(x, z)]

    def __len__(self):
        return SLOT_COUNT

    def __iter__(self):
        """ Yield a (coordinate, location, timestamp) tuple for each slot
            in slot order
        """
        for index, (location, timestamp) in enumerate(zip(self.locations, self.timestamps)):
            yield RegionCoordinate.fromIndex(index), location, timestamp

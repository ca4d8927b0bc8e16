import warnings

from regiontool.header import (
    SECTOR_SIZE, HEADER_SECTORS, SLOT_COUNT,
    RegionCoordinate, slot_index,
)
from regiontool.error import InvalidLocation, TruncatedChunk, DuplicatePage

# ====================================================================
# Slot status
# ====================================================================
ABSENT='absent'
PRESENT='present'
INVALID='invalid'

def classify(location, file_length, x, z):
    """ Return the (status, error) pair for one location entry.
        `error` is None unless the slot is INVALID
    """
    offset, count = location
    if offset == 0 and count == 0:
        return ABSENT, None

    if offset < HEADER_SECTORS:
        return INVALID, InvalidLocation(x, z, "sector {offset} is inside the region header", offset=offset)

    if count == 0:
        return INVALID, InvalidLocation(x, z, "zero sector count at sector {offset}", offset=offset)

    if (offset+count)*SECTOR_SIZE > file_length:
        return INVALID, TruncatedChunk(x, z,
            "sectors {offset}+{count} extend past the end of file ({length} bytes)",
            offset=offset, count=count, length=file_length)

    return PRESENT, None

# ====================================================================
# SectorMap
# ====================================================================
class SectorMap:
    """ Per-slot classification of a region header against the actual
        file length. Computed once, then read-only.
    """
    def __init__(self, header, file_length, name=""):
        self.file_length = file_length
        self.name = name

        self._status = []
        self._errors = {}
        for coord, location, _ in header:
            status, error = classify(location, file_length, *coord)
            self._status.append(status)
            if error is not None:
                self._errors[coord.index] = error

        self._locations = header.locations

    #------------------------------------
    # Slot access
    #------------------------------------
    def status(self, x, z):
        return self._status[slot_index(x, z)]

    def error(self, x, z):
        return self.error_at(slot_index(x, z))

    def status_at(self, index):
        return self._status[index]

    def error_at(self, index):
        """ A new copy of the error stored for slot `index`, or None
        """
        error = self._errors.get(index)
        return error.copy() if error is not None else None

    def slots(self, start=0):
        """ Yield (coordinate, status, error) for every non-absent slot,
            starting at slot index `start`
        """
        for index in range(start, SLOT_COUNT):
            status = self._status[index]
            if status is not ABSENT:
                yield RegionCoordinate.fromIndex(index), status, self.error_at(index)

    def count(self, status):
        return self._status.count(status)

    @property
    def aligned(self):
        return self.file_length % SECTOR_SIZE == 0

    @property
    def sector_count(self):
        return -(-self.file_length // SECTOR_SIZE)

    #------------------------------------
    # Sector usage
    #------------------------------------
    def bitmap(self):
        """ Return, for each sector of the file up to the last one in use,
            the tuple of chunks stored there
        """
        pages = []
        for index, status in enumerate(self._status):
            if status is not PRESENT:
                continue

            offset, count = self._locations[index]
            if len(pages) < offset+count:
                pages.extend([()]*(offset+count-len(pages)))

            coord = RegionCoordinate.fromIndex(index)
            for page in range(offset, offset+count):
                pages[page] += (tuple(coord),)

        return pages

    def overlaps(self):
        """ Return a dict mapping each shared sector to its owners
        """
        return { page: owners for page, owners in enumerate(self.bitmap()) if len(owners) > 1 }

    def check(self):
        """ Issue a DuplicatePage warning for each sector used by several chunks.
            Return the number of such sectors.
        """
        overlaps = self.overlaps()
        for page, owners in overlaps.items():
            warnings.warn(DuplicatePage(page, owners, self.name))

        return len(overlaps)

    def unused_sectors(self):
        """ Number of data sectors in the file not referenced by any present chunk
        """
        used = sum(1 for owners in self.bitmap()[HEADER_SECTORS:] if owners)
        return max(0, self.sector_count-HEADER_SECTORS-used)

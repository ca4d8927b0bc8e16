""" Diagnostic statistics over region files
"""
from regiontool.header import SECTOR_SIZE
from regiontool.error import (
    ChunkError, InvalidLocation, TruncatedChunk,
    CorruptPayload, UnsupportedCompression,
)

# ====================================================================
# ScanStatistics
# ====================================================================
class ScanStatistics:
    FIELDS = (
        ('total_chunks', "Total Chunks"),
        ('decoded', "Decoded Chunks"),
        ('failed_to_read', "Failed to Read"),
        ('invalid_location', "Invalid chunk pointers"),
        ('truncated', "Truncated chunks"),
        ('corrupted_compression', "Chunks with corrupted compressed data"),
        ('unsupported_compression', "Chunks with invalid compression method"),
        ('overlapping_sectors', "Sectors shared by several chunks"),
        ('unaligned_files', "Files not a multiple of the sector size"),
    )

    ERRORS = {
        InvalidLocation: 'invalid_location',
        TruncatedChunk: 'truncated',
        CorruptPayload: 'corrupted_compression',
        UnsupportedCompression: 'unsupported_compression',
    }

    def __init__(self, **kwargs):
        for field, _ in self.FIELDS:
            setattr(self, field, kwargs.pop(field, 0))
        self.unused_space = kwargs.pop('unused_space', 0)

        if kwargs:
            raise TypeError("Unexpected statistics: {}".format(", ".join(kwargs)))

    def record(self, result):
        """ Account for one (coordinate, result) item of a chunk enumeration
        """
        self.total_chunks += 1
        if isinstance(result, ChunkError):
            field = self.ERRORS[type(result)]
            setattr(self, field, getattr(self, field)+1)
        else:
            self.decoded += 1

    @property
    def failed(self):
        return self.total_chunks-self.decoded

    def asdict(self):
        result = { field: getattr(self, field) for field, _ in self.FIELDS }
        result['unused_space'] = self.unused_space
        return result

    def __add__(self, other):
        if not isinstance(other, ScanStatistics):
            return NotImplemented

        a, b = self.asdict(), other.asdict()
        return ScanStatistics(**{ k: a[k]+b[k] for k in a })

    def __eq__(self, other):
        if not isinstance(other, ScanStatistics):
            return NotImplemented

        return self.asdict() == other.asdict()

    def __repr__(self):
        return "ScanStatistics({})".format(", ".join("{}={}".format(k, v) for k, v in self.asdict().items()))

    def __str__(self):
        lines = ["{}: {}".format(label, getattr(self, field)) for field, label in self.FIELDS]
        lines.append("Unused space: {} KiB".format(self.unused_space // 1024))
        return "\n".join(lines)

# ====================================================================
# Module functions
# ====================================================================
def scan_region(region, *, cancel=None):
    """ Decode every chunk of `region` and collect statistics
    """
    stats = ScanStatistics()
    sectormap = region.sectormap

    stats.overlapping_sectors = len(sectormap.overlaps())

    stats.unused_space = sectormap.unused_sectors()*SECTOR_SIZE
    stats.unaligned_files = 0 if sectormap.aligned else 1

    for coord, result in region.present_chunks(cancel=cancel):
        stats.record(result)

    return stats

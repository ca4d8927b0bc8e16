# ====================================================================
# Errors
# ====================================================================
class RegionToolError(Exception):
    """ Base class for all errors issued by the regiontool library
    """
    def __init__(self, message, **kwargs):
        super().__init__(message.format(**kwargs))

class OutOfRange(RegionToolError, IndexError):
    def __init__(self, x, z):
        super().__init__("Chunk coordinates ({x},{z}) are outside the region grid", x=x, z=z)
        self.x = x
        self.z = z

#------------------------------------
# File level errors
#------------------------------------
class RegionFileError(RegionToolError):
    pass

class NotARegionFile(RegionFileError):
    def __init__(self, name, reason):
        super().__init__("Can't read region file {name}: {reason}", name=name, reason=reason)

class TruncatedHeader(RegionFileError):
    def __init__(self, name, size):
        super().__init__("Region file {name} is too short for a header ({size} bytes)", name=name, size=size)
        self.size = size

#------------------------------------
# Slot level errors
#------------------------------------
class ChunkError(RegionToolError):
    """ An error attached to one slot of a region file
    """
    def __init__(self, x, z, message, **kwargs):
        super().__init__("Chunk ({x},{z}): " + message, x=x, z=z, **kwargs)
        self.x = x
        self.z = z

    def copy(self):
        """ A fresh instance with the same message and attributes
        """
        result = self.__class__.__new__(self.__class__, *self.args)
        result.__dict__.update(self.__dict__)
        return result

    def __eq__(self, other):
        return type(self) is type(other) and self.args == other.args

    def __hash__(self):
        return hash((type(self), self.args))

class InvalidLocation(ChunkError):
    pass

class TruncatedChunk(ChunkError):
    pass

class CorruptPayload(ChunkError):
    pass

class UnsupportedCompression(ChunkError):
    def __init__(self, x, z, compression, message="unsupported compression type {compression}"):
        super().__init__(x, z, message, compression=compression)
        self.compression = compression

# ====================================================================
# Warnings
# ====================================================================
class RegionToolWarning(UserWarning):
    """ Base class for all warnings issued by the regiontool library
    """
    def __init__(self, message, **kwargs):
        super().__init__(message.format(**kwargs))

class DuplicatePage(RegionToolWarning):
    def __init__(self, page, owners, name=""):
        super().__init__("Page {page} of {name} is used by multiple chunks: {owners}", page=page, name=name, owners=owners)
        self.page = page
        self.owners = owners

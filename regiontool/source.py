""" Positioned read access to the bytes of a region file
"""
import os
import threading

from regiontool.error import NotARegionFile

# ====================================================================
# Byte sources
# ====================================================================
class ByteSource:
    """ Random access, read-only view on the bytes of a container.

        Subclasses must implement `read_at()` without relying on a shared
        file cursor, so concurrent reads from several threads are safe.
    """
    name = "<unknown>"
    path = None

    @property
    def size(self):
        raise NotImplementedError

    def read_at(self, offset, length):
        """ Return up to `length` bytes starting at `offset`.
            Shorter results mean the end of the data was reached.
        """
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

class MemorySource(ByteSource):
    def __init__(self, data, name="<bytes>"):
        self._data = memoryview(data).cast('B')
        self.name = name

    @property
    def size(self):
        return len(self._data)

    def read_at(self, offset, length):
        return bytes(self._data[offset:offset+length])

class FileSource(ByteSource):
    """ A region file opened from the filesystem
    """
    def __init__(self, fileobj, name=None, path=None, owned=False):
        self._file = fileobj
        self._owned = owned
        self._lock = threading.Lock()
        self.name = name or getattr(fileobj, 'name', "<file>")
        self.path = path

        try:
            self._fd = fileobj.fileno()
        except (AttributeError, OSError):
            self._fd = None

        if self._fd is not None:
            self._size = os.fstat(self._fd).st_size
        else:
            self._size = fileobj.seek(0, os.SEEK_END)

    @classmethod
    def fromFile(cls, path):
        path = os.fspath(path)
        return cls(open(path, 'rb'), name=path, path=path, owned=True)

    @property
    def size(self):
        return self._size

    def read_at(self, offset, length):
        if self._fd is not None and hasattr(os, 'pread'):
            return os.pread(self._fd, length, offset)

        with self._lock:
            self._file.seek(offset)
            return self._file.read(length)

    def close(self):
        if self._owned:
            self._file.close()

def open_source(source):
    """ Build a ByteSource from a path, a bytes-like object,
        a binary file object or an existing ByteSource
    """
    if isinstance(source, ByteSource):
        return source

    if isinstance(source, (bytes, bytearray, memoryview)):
        return MemorySource(source)

    try:
        if isinstance(source, (str, os.PathLike)):
            return FileSource.fromFile(source)

        if hasattr(source, 'read') and hasattr(source, 'seek'):
            return FileSource(source)
    except OSError as e:
        raise NotARegionFile(getattr(source, 'name', source), e.strerror or e) from e

    raise TypeError("Cannot read region data from {} ({})".format(source, type(source)))

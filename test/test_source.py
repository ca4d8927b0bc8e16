import unittest
import io
import os
import shutil
import tempfile
import threading

from regiontool.source import *
from regiontool.error import NotARegionFile

DATA=bytes(range(256))*64

class TestMemorySource(unittest.TestCase):
    def test_1(self):
        source = MemorySource(DATA)
        self.assertEqual(source.size, len(DATA))
        self.assertEqual(source.read_at(10, 4), DATA[10:14])

    def test_2(self):
        """ Reads past the end of data are short
        """
        source = MemorySource(DATA)
        self.assertEqual(source.read_at(len(DATA)-2, 10), DATA[-2:])
        self.assertEqual(source.read_at(len(DATA)+10, 10), b"")

    def test_3(self):
        """ Returned bytes are independent copies
        """
        data = bytearray(DATA)
        source = MemorySource(data)
        chunk = source.read_at(0, 4)
        data[0:4] = b"XXXX"
        self.assertEqual(chunk, DATA[:4])

class TestFileSource(unittest.TestCase):
    def setUp(self):
        self.dirname = tempfile.mkdtemp()
        self.path = os.path.join(self.dirname, "r.0.0.mca")
        with open(self.path, 'wb') as f:
            f.write(DATA)

    def tearDown(self):
        shutil.rmtree(self.dirname)

    def test_1(self):
        with FileSource.fromFile(self.path) as source:
            self.assertEqual(source.size, len(DATA))
            self.assertEqual(source.read_at(100, 50), DATA[100:150])
            self.assertEqual(source.path, self.path)

    def test_2(self):
        """ Concurrent reads don't interfere
        """
        errors = []
        with FileSource.fromFile(self.path) as source:
            def worker(offset):
                for _ in range(200):
                    if source.read_at(offset, 256) != DATA[offset:offset+256]:
                        errors.append(offset)

            threads = [threading.Thread(target=worker, args=(i*256,)) for i in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        self.assertEqual(errors, [])

    def test_3(self):
        """ File objects without a file descriptor are supported
        """
        source = FileSource(io.BytesIO(DATA))
        self.assertEqual(source.size, len(DATA))
        self.assertEqual(source.read_at(1000, 3), DATA[1000:1003])

class TestOpenSource(unittest.TestCase):
    def test_1(self):
        self.assertIsInstance(open_source(DATA), MemorySource)
        self.assertIsInstance(open_source(io.BytesIO(DATA)), FileSource)

        source = MemorySource(DATA)
        self.assertIs(open_source(source), source)

    def test_2(self):
        """ Missing files are not region files
        """
        with self.assertRaises(NotARegionFile):
            open_source(os.path.join(tempfile.gettempdir(), "no-such-dir", "r.0.0.mca"))

    def test_3(self):
        with self.assertRaises(TypeError):
            open_source(42)

import unittest
import os.path
import shutil
import tempfile

from regiontool.world import *
from regiontool.region import ChunkCount
from test.data.region import *

R00 = REGION(6*PAGE_SIZE,
  CHUNK(0,0,pageaddr=2,data=CHUNK_DATA(b"0,0", compression=ZLIB)),
  CHUNK(5,1,pageaddr=3,data=CHUNK_DATA(b"5,1", compression=GZIP)),
  CHUNK(31,31,pageaddr=4,data=CHUNK_DATA(b"31,31")),
)

R_10 = REGION(4*PAGE_SIZE,
  CHUNK(31,0,pageaddr=2,data=CHUNK_DATA(b"-1,0")),
  CHUNK(30,0,pageaddr=3,data=b"** BAD CHUNK **"),
  CHUNK(29,0,pageaddr=9,pagecount=1,data=b""),
)

class TestWorldFolder(unittest.TestCase):
    def setUp(self):
        self.dirname = tempfile.mkdtemp()
        regions = os.path.join(self.dirname, 'region')
        os.mkdir(regions)

        FILES = {
          'r.0.0.mca': R00,
          'r.-1.0.mca': R_10,
          'r.5.5.mca': b"\x00"*100,
          'notes.txt': b"not a region",
          'r.0.0.mca.bak': R00,
        }
        for name, data in FILES.items():
            with open(os.path.join(regions, name), 'wb') as f:
                f.write(data)

        self.world = WorldFolder(self.dirname)

    def tearDown(self):
        shutil.rmtree(self.dirname)

    def test_1(self):
        """ Only `r.X.Z.mca` files are region files
        """
        names = [os.path.basename(path) for path in self.world.region_files()]
        self.assertEqual(names, ['r.-1.0.mca', 'r.0.0.mca', 'r.5.5.mca'])

    def test_2(self):
        """ Counting chunks reads only the headers
        """
        with self.assertLogs('regiontool.world', level='ERROR') as cm:
            count = self.world.count_chunks()

        self.assertEqual(count, ChunkCount(6, 0))
        self.assertEqual(len(cm.output), 1)
        self.assertIn('r.5.5.mca', cm.output[0])

    def test_3(self):
        """ Decoding chunks while counting reports failures separately
        """
        with self.assertLogs('regiontool.world', level='ERROR'):
            count = self.world.count_chunks(decode=True)

        self.assertEqual(count, ChunkCount(6, 2))
        self.assertEqual(count.decoded, 4)

    def test_4(self):
        """ Scanning sums statistics over all region files
        """
        for workers in 1, 4:
            with self.assertLogs('regiontool.world', level='ERROR'):
                stats = self.world.scan_files(workers=workers)

            self.assertEqual(stats.total_chunks, 6, workers)
            self.assertEqual(stats.decoded, 4, workers)
            self.assertEqual(stats.truncated, 2, workers)
            self.assertEqual(stats.failed_to_read, 1, workers)

    def test_5(self):
        """ Chunks are found from their world coordinates
        """
        self.assertEqual(self.world.chunk(5,1).data, b"5,1")
        self.assertEqual(self.world.chunk(31,31).data, b"31,31")
        self.assertEqual(self.world.chunk(-1,0).data, b"-1,0")
        self.assertIsNone(self.world.chunk(1,1))

    def test_6(self):
        """ Worlds without region folder have no chunks
        """
        world = WorldFolder(os.path.join(self.dirname, 'region'))
        with self.assertLogs('regiontool.world', level='WARNING'):
            self.assertEqual(world.region_files(), [])

class TestSaveFolder(unittest.TestCase):
    def test_1(self):
        """ Worlds can be located from the Minecraft home directory
        """
        world = WorldFolder.fromSaveFolder(os.path.join('home', '.minecraft'), 'Demo')
        self.assertEqual(world._locator.region(1,-2),
            os.path.join('home', '.minecraft', 'saves', 'Demo', 'region', 'r.1.-2.mca'))

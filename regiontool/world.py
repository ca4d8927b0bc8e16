import os
import os.path
import logging
from concurrent.futures import ThreadPoolExecutor

from regiontool.region import RegionFile, ChunkCount, parse_region_filename
from regiontool.scan import ScanStatistics, scan_region
from regiontool.header import REGION_WIDTH
from regiontool.error import RegionFileError

logger = logging.getLogger(__name__)

# ====================================================================
# Constants
# ====================================================================
SAVES_FOLDER="saves"
REGION_FOLDER="region"

# XXX The MINECRAFT_HOME default value should be platform dependent XXX
MINECRAFT_HOME=os.getenv("MINECRAFT_HOME") or os.path.join(os.path.expanduser("~"), ".minecraft")

# ====================================================================
# Locator
# ====================================================================
def Locator(dirname):
    return type('',(),dict(
        regions=lambda : os.path.join(dirname, REGION_FOLDER),
        region=lambda rx, rz : os.path.join(dirname, REGION_FOLDER, 'r.{}.{}.mca'.format(rx,rz)),
    ))

# ====================================================================
# WorldFolder
# ====================================================================
class WorldFolder:
    def __init__(self, dirname):
        """ Handle the Minecraft world located at dirname
        """
        self._dirname = dirname
        self._locator = Locator(dirname)

    @staticmethod
    def fromSaveFolder(minecrafthome, worldname):
        """ Factory method to open a world from the `saves`
            folder of the given MC directory
        """
        return WorldFolder(os.path.join(minecrafthome, SAVES_FOLDER, worldname))

    @staticmethod
    def fromStandardSaveFolder(worldname):
        """ Factory method to open a world from the `saves`
            folder of the Minecraft directory at the standard
            location
        """
        return WorldFolder.fromSaveFolder(MINECRAFT_HOME, worldname)

    def region_files(self):
        """ Sorted list of the `r.<rx>.<rz>.mca` files of the world
        """
        dirname = self._locator.regions()
        try:
            names = os.listdir(dirname)
        except FileNotFoundError:
            logger.warning("No region folder in %s", self._dirname)
            return []

        return sorted(os.path.join(dirname, name) for name in names if parse_region_filename(name))

    def region(self, rx, rz):
        return RegionFile.fromFile(self._locator.region(rx, rz))

    def chunk(self, cx, cz):
        """ Get a chunk

            cx and cz are the chunk position in the world coordinate system.
            Return None if the chunk was never generated.

            The region is re-opened at each invocation. WorldFolder.region()
            should be prefered when retrieving several chunks from the same
            region
        """
        rx,cx = divmod(cx,REGION_WIDTH)
        rz,cz = divmod(cz,REGION_WIDTH)

        with self.region(rx,rz) as region:
            return region.chunk_at(cx,cz)

    #------------------------------------
    # Whole world operations
    #------------------------------------
    def count_chunks(self, *, decode=False):
        """ Count the chunks of the world

            Unless `decode` is set, only the region headers are read and
            `failed` is always 0.
        """
        present = failed = 0
        for path in self.region_files():
            logger.debug("Counting chunks in %s", path)
            try:
                with RegionFile.fromFile(path) as region:
                    if decode:
                        count = region.count()
                    else:
                        count = ChunkCount(region.count_present(), 0)
            except RegionFileError as e:
                logger.error("Failed to open region file %s: %s", path, e)
                continue

            present += count.present
            failed += count.failed

        return ChunkCount(present, failed)

    def scan_files(self, *, workers=None, cancel=None):
        """ Scan all region files for errors, using a pool of `workers`
            threads, and return the summed statistics
        """
        def scan(path):
            logger.debug("Opening and scanning region file %s", path)
            try:
                with RegionFile.fromFile(path) as region:
                    result = scan_region(region, cancel=cancel)
            except RegionFileError as e:
                logger.error("Failed to open region file %s: %s", path, e)
                return ScanStatistics(failed_to_read=1)

            logger.debug("Statistics for %s:\n%s", path, result)
            return result

        total = ScanStatistics()
        with ThreadPoolExecutor(max_workers=workers) as executor:
            for result in executor.map(scan, self.region_files()):
                total += result

        return total

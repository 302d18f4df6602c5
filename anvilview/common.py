import re
import sys
from typing import Tuple


SECTOR_SIZE = 4096
REGION_WIDTH = 32  # Region is 32x32 chunks
CHUNKS_PER_REGION = REGION_WIDTH**2
HEADER_SIZE = 2 * SECTOR_SIZE  # Location table + timestamp table

# Chunk payload compression tags
COMPRESSION_GZIP = 1
COMPRESSION_ZLIB = 2
COMPRESSION_NONE = 3
COMPRESSION_EXTERNAL = 127

REGION_FILE_RE = re.compile(r'^r\.(-?\d+)\.(-?\d+)\.mca$', re.ASCII)


class AnvilError(Exception):
    pass


class SaveNotFoundError(AnvilError):
    pass


class RegionIOError(AnvilError):
    pass


class FilenameParseError(AnvilError):
    pass


class CorruptChunkData(AnvilError):
    pass


class NBTParseError(AnvilError):
    pass


class IncompatibleCompression(AnvilError):
    def __init__(self, compression: int, message: str = '') -> None:
        super().__init__(message or f'Incompatible compression type {compression}')
        self.compression = compression


class ExternalChunkError(IncompatibleCompression):
    '''Chunk payload lives in a separate .mcc file, which is not read'''

    def __init__(self, filename: str = '') -> None:
        where = f' ({filename})' if filename else ''
        super().__init__(COMPRESSION_EXTERNAL, f'Chunk is stored in an external file{where}')
        self.filename = filename


def log(*args: object) -> None:
    print(*args, file=sys.stderr)


def parse_region_filename(name: str) -> Tuple[int, int]:
    '''Get region coordinates from file name like "r.-1.2.mca"'''
    m = REGION_FILE_RE.match(name)
    if not m:
        raise FilenameParseError(f'Not a region file name: {name}')
    return int(m.group(1)), int(m.group(2))


def region_filename(x: int, z: int) -> str:
    return f'r.{x}.{z}.mca'


def chunk_slot(chunk_x: int, chunk_z: int) -> int:
    # Floor modulo handles negative coordinates
    return (chunk_x % REGION_WIDTH) + REGION_WIDTH * (chunk_z % REGION_WIDTH)


def slot_to_chunk(region_x: int, region_z: int, slot: int) -> Tuple[int, int]:
    '''Absolute chunk coordinates of a region slot'''
    if not 0 <= slot < CHUNKS_PER_REGION:
        raise ValueError(f'Chunk slot out of range: {slot}')
    return (
        region_x * REGION_WIDTH + slot % REGION_WIDTH,
        region_z * REGION_WIDTH + slot // REGION_WIDTH,
    )


def chunk_to_region(chunk_x: int, chunk_z: int) -> Tuple[int, int]:
    return chunk_x // REGION_WIDTH, chunk_z // REGION_WIDTH

from pathlib import Path
import numpy as np
from numpy.typing import NDArray
from typing import List, NamedTuple, Optional, Tuple, Union
from . import chunk
from .common import (
    CHUNKS_PER_REGION, HEADER_SIZE, REGION_WIDTH, SECTOR_SIZE,
    CorruptChunkData, ExternalChunkError, RegionIOError, log, slot_to_chunk,
)


class LocationEntry(NamedTuple):
    # Both in sectors
    sector_offset: int
    sector_count: int

    @property
    def is_absent(self) -> bool:
        return self.sector_offset == 0 and self.sector_count == 0


class ChunkLocations(NamedTuple):
    offsets: NDArray[np.uint32]
    counts: NDArray[np.uint32]

    @property
    def present(self) -> NDArray[np.bool_]:
        return (self.offsets != 0) | (self.counts != 0)


def _check_slot(slot: int) -> None:
    if not 0 <= slot < CHUNKS_PER_REGION:
        raise ValueError(f'Chunk slot out of range: {slot}')


class RegionFile:
    '''Raw contents of a single .mca file

    Data is read with `load()`. Slot lookups only read the loaded buffer,
    so they are safe to call from multiple threads once loading is done.
    '''

    def __init__(self, x: int, z: int, path: Union[str, Path]) -> None:
        self.x = x
        self.z = z
        self.path = Path(path)
        self.data = b''
        self.loaded = False

    def __repr__(self) -> str:
        return f'RegionFile({self.x}, {self.z}, {str(self.path)!r})'

    @classmethod
    def from_bytes(cls, x: int, z: int, data: bytes, path: Union[str, Path] = '') -> 'RegionFile':
        region = cls(x, z, path)
        region.data = bytes(data)
        region.loaded = True
        return region

    def load(self) -> 'RegionFile':
        if self.loaded:
            return self
        try:
            self.data = self.path.read_bytes()
        except OSError as err:
            raise RegionIOError(f'Failed to read region file {self.path}: {err}') from err
        self.loaded = True
        if len(self.data) % SECTOR_SIZE:
            log(f'{self.path}: size {len(self.data)} is not a multiple of {SECTOR_SIZE}, last sector is partial')
        return self

    def chunk_coords(self, slot: int) -> Tuple[int, int]:
        return slot_to_chunk(self.x, self.z, slot)

    def locate(self, slot: int) -> Optional[LocationEntry]:
        _check_slot(slot)
        raw = self.data[slot * 4 : slot * 4 + 4]
        if len(raw) < 4:
            raise RegionIOError(f'Location table of {self.path} is truncated at slot {slot}')
        entry = LocationEntry(
            sector_offset=int.from_bytes(raw[:3], 'big'),
            sector_count=raw[3],
        )
        return None if entry.is_absent else entry

    def payload_range(self, slot: int) -> Optional[range]:
        '''Byte range of chunk sectors, clamped to buffer size'''
        entry = self.locate(slot)
        if entry is None:
            return None
        size = len(self.data)
        begin = entry.sector_offset * SECTOR_SIZE
        end = (entry.sector_offset + entry.sector_count) * SECTOR_SIZE
        return range(min(begin, size), min(end, size))

    def chunk_data(self, slot: int) -> Optional[bytes]:
        rng = self.payload_range(slot)
        if rng is None:
            return None
        return self.data[rng.start:rng.stop]

    def read_payload(self, slot: int) -> Optional[chunk.ChunkPayload]:
        entry = self.locate(slot)
        if entry is None:
            return None
        if entry.sector_offset * SECTOR_SIZE < HEADER_SIZE:
            raise CorruptChunkData(f'Chunk {slot} points into region header (sector {entry.sector_offset})')
        data = self.chunk_data(slot)
        return chunk.parse_payload(data, entry.sector_count * SECTOR_SIZE)

    def decode_chunk(self, slot: int) -> Optional[bytes]:
        '''Decompressed NBT bytes of a chunk, None if chunk is absent'''
        payload = self.read_payload(slot)
        if payload is None:
            return None
        try:
            return chunk.decompress(payload)
        except ExternalChunkError:
            raise ExternalChunkError(str(self.external_chunk_path(slot))) from None

    def external_chunk_path(self, slot: int) -> Path:
        chunk_x, chunk_z = self.chunk_coords(slot)
        return self.path.parent / f'c.{chunk_x}.{chunk_z}.mcc'

    def _header_table(self, index: int) -> NDArray[np.uint32]:
        start = index * SECTOR_SIZE
        if len(self.data) < start + SECTOR_SIZE:
            raise RegionIOError(f'Region header of {self.path} is truncated ({len(self.data)} bytes)')
        table = np.frombuffer(self.data, dtype='>u4', count=CHUNKS_PER_REGION, offset=start)
        return table.astype(np.uint32)

    def locations(self) -> ChunkLocations:
        table = self._header_table(0)
        return ChunkLocations(offsets=table >> 8, counts=table & 0xFF)

    def timestamps(self) -> NDArray[np.uint32]:
        '''Last modification times of chunks (Unix seconds)'''
        return self._header_table(1)

    def present_slots(self) -> List[int]:
        return [int(i) for i in np.flatnonzero(self.locations().present)]

    def chunk_map(self) -> NDArray[np.bool_]:
        '''Chunk presence as 32x32 array indexed by [z, x]'''
        return self.locations().present.reshape(REGION_WIDTH, REGION_WIDTH)


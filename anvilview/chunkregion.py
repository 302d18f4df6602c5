from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional, Tuple
from .common import CHUNKS_PER_REGION, AnvilError, chunk_slot, chunk_to_region, log, slot_to_chunk
from .nbt import parse_nbt
from .region import RegionFile


class ChunkRegion:
    '''All chunks of a region parsed to NBT trees

    Slots that are absent or fail to decode hold None.
    '''

    def __init__(self, x: int, z: int, chunks: List[Optional[Any]], path: Optional[Path] = None) -> None:
        if len(chunks) != CHUNKS_PER_REGION:
            raise ValueError(f'Region must have {CHUNKS_PER_REGION} chunk slots, got {len(chunks)}')
        self.x = x
        self.z = z
        self.path = path
        self.chunks = chunks

    @classmethod
    def from_region(
        cls,
        region: RegionFile,
        parser: Callable[[bytes], Any] = parse_nbt,
    ) -> 'ChunkRegion':
        region.load()
        chunks: List[Optional[Any]] = []
        failed = 0

        for slot in range(CHUNKS_PER_REGION):
            try:
                data = region.decode_chunk(slot)
                chunks.append(None if data is None else parser(data))
            except AnvilError as err:
                failed += 1
                chunks.append(None)
                if failed == 1:
                    log(f'Chunk {slot} of region {region.x},{region.z}: {err}')

        if failed:
            log(f'Skipped {failed} unreadable chunks in {region.path}')

        return cls(region.x, region.z, chunks, region.path)

    def __len__(self) -> int:
        return len(self.chunks)

    def __getitem__(self, index: int) -> Optional[Any]:
        return self.chunks[index]

    def chunk_coords(self, index: int) -> Tuple[int, int]:
        return slot_to_chunk(self.x, self.z, index)

    def get_chunk(self, chunk_x: int, chunk_z: int) -> Optional[Any]:
        '''Chunk by absolute chunk coordinates, which must lie in this region'''
        if chunk_to_region(chunk_x, chunk_z) != (self.x, self.z):
            raise ValueError(f'Chunk {chunk_x},{chunk_z} is outside of region {self.x},{self.z}')
        return self.chunks[chunk_slot(chunk_x, chunk_z)]

    def iter_nonempty(self) -> Iterator[Tuple[int, int, Any]]:
        for index, tree in enumerate(self.chunks):
            if tree is not None:
                chunk_x, chunk_z = self.chunk_coords(index)
                yield chunk_x, chunk_z, tree

    @property
    def chunk_count(self) -> int:
        return sum(tree is not None for tree in self.chunks)

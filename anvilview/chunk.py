import struct
import zlib
from typing import NamedTuple, Optional
from .common import (
    COMPRESSION_EXTERNAL, COMPRESSION_GZIP, COMPRESSION_NONE, COMPRESSION_ZLIB,
    CorruptChunkData, ExternalChunkError, IncompatibleCompression,
)


PAYLOAD_HEADER = struct.Struct('>IB')  # Declared length, compression tag
MAX_CHUNK_SIZE = 64 * 2**20  # Decompressed chunks larger than this are treated as corrupt

# zlib window bits for each supported stream container
_WBITS = {
    COMPRESSION_GZIP: 16 + zlib.MAX_WBITS,
    COMPRESSION_ZLIB: zlib.MAX_WBITS,
}


class ChunkPayload(NamedTuple):
    # Byte count of compression tag + compressed data
    declared_length: int
    compression: int
    data: bytes


def parse_payload(data: bytes, allotted: Optional[int] = None) -> ChunkPayload:
    '''Split raw chunk sectors into payload header and compressed bytes

    `allotted` is the byte size of the sector span reserved for the chunk
    in the location table. A declared length that doesn't fit the span
    means the chunk is corrupt, while one that doesn't fit `data` means
    the file was cut short.
    '''
    if len(data) < PAYLOAD_HEADER.size:
        raise CorruptChunkData(f'Chunk header truncated ({len(data)} bytes)')

    declared_length, compression = PAYLOAD_HEADER.unpack_from(data)
    if declared_length == 0:
        raise CorruptChunkData('Chunk has zero declared length')

    end = 4 + declared_length
    if allotted is not None and end > allotted:
        raise CorruptChunkData(
            f'Declared length {declared_length} exceeds allotted span of {allotted} bytes')
    if end > len(data):
        raise CorruptChunkData(
            f'Chunk data truncated: need {end} bytes, have {len(data)}')

    return ChunkPayload(
        declared_length=declared_length,
        compression=compression,
        data=bytes(data[PAYLOAD_HEADER.size:end]),
    )


def _inflate(data: bytes, wbits: int) -> bytes:
    decomp = zlib.decompressobj(wbits)
    try:
        result = decomp.decompress(data, MAX_CHUNK_SIZE)
    except zlib.error as err:
        raise CorruptChunkData(f'Malformed compressed stream: {err}') from err

    if not decomp.eof:
        if decomp.unconsumed_tail or len(result) >= MAX_CHUNK_SIZE:
            raise CorruptChunkData(f'Decompressed chunk exceeds {MAX_CHUNK_SIZE} bytes')
        raise CorruptChunkData('Compressed stream ended unexpectedly')
    return result


def decompress(payload: ChunkPayload) -> bytes:
    compression = payload.compression

    if compression in _WBITS:
        result = _inflate(payload.data, _WBITS[compression])
    elif compression == COMPRESSION_NONE:
        result = bytes(payload.data)
    elif compression == COMPRESSION_EXTERNAL:
        raise ExternalChunkError()
    else:
        raise IncompatibleCompression(compression)

    if not result:
        raise CorruptChunkData('Chunk decompressed to nothing')
    return result


def decode(data: bytes, allotted: Optional[int] = None) -> bytes:
    '''Get raw NBT bytes from chunk sectors'''
    return decompress(parse_payload(data, allotted))

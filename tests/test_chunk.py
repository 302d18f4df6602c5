import struct
import zlib

import pytest

from anvilview import chunk
from anvilview.common import CorruptChunkData, ExternalChunkError, IncompatibleCompression

from regionutil import pack_payload

RAW = b'\x0a\x00\x00' + b'some chunk bytes ' * 40 + b'\x00'


@pytest.mark.parametrize('compression', [1, 2, 3])
def test_decode_supported_compression(compression):
    assert chunk.decode(pack_payload(RAW, compression)) == RAW


def test_decode_ignores_sector_padding():
    data = pack_payload(RAW, 2)
    assert chunk.decode(data + bytes(4096 - len(data)), allotted=4096) == RAW


def test_parse_payload_fields():
    payload = chunk.parse_payload(pack_payload(b'abc', 3) + b'\x00\x00')
    assert payload == chunk.ChunkPayload(declared_length=4, compression=3, data=b'abc')
    assert len(payload.data) == payload.declared_length - 1


def test_parse_payload_short_header():
    with pytest.raises(CorruptChunkData):
        chunk.parse_payload(b'\x00\x00\x00')


def test_parse_payload_zero_length():
    with pytest.raises(CorruptChunkData):
        chunk.parse_payload(struct.pack('>IB', 0, 2) + b'\x00' * 20)


def test_parse_payload_truncated():
    data = pack_payload(RAW, 3)
    with pytest.raises(CorruptChunkData):
        chunk.parse_payload(data[:-10])


def test_parse_payload_exceeds_allotted_span():
    data = pack_payload(b'x' * 10, 3, declared_length=5000)
    data += bytes(8192 - len(data))
    with pytest.raises(CorruptChunkData, match='allotted'):
        chunk.parse_payload(data, allotted=4096)
    # Same bytes are fine when the span is large enough
    assert chunk.parse_payload(data, allotted=8192).declared_length == 5000


@pytest.mark.parametrize('compression', [0, 4, 5, 126, 128, 255])
def test_unknown_compression(compression):
    with pytest.raises(IncompatibleCompression) as exc_info:
        chunk.decode(pack_payload(RAW, compression))
    assert exc_info.value.compression == compression
    assert not isinstance(exc_info.value, ExternalChunkError)


def test_external_chunk_not_supported():
    with pytest.raises(ExternalChunkError) as exc_info:
        chunk.decode(struct.pack('>IB', 1, 127))
    assert isinstance(exc_info.value, IncompatibleCompression)
    assert exc_info.value.compression == 127


@pytest.mark.parametrize('compression', [1, 2])
def test_malformed_stream(compression):
    body = b'definitely not compressed data'
    data = struct.pack('>IB', len(body) + 1, compression) + body
    with pytest.raises(CorruptChunkData):
        chunk.decode(data)


@pytest.mark.parametrize('compression', [1, 2])
def test_cut_stream(compression):
    full = pack_payload(RAW, compression)
    body = full[5:-8]
    data = struct.pack('>IB', len(body) + 1, compression) + body
    with pytest.raises(CorruptChunkData):
        chunk.decode(data)


def test_empty_result_is_corrupt():
    with pytest.raises(CorruptChunkData):
        chunk.decode(pack_payload(b'', 2))
    with pytest.raises(CorruptChunkData):
        chunk.decode(pack_payload(b'', 3))


def test_oversized_result_is_corrupt(monkeypatch):
    monkeypatch.setattr(chunk, 'MAX_CHUNK_SIZE', 100)
    with pytest.raises(CorruptChunkData, match='exceeds'):
        chunk.decode(pack_payload(b'\x00' * 1000, 2))


def test_trailing_garbage_after_stream():
    body = zlib.compress(RAW) + b'junk'
    data = struct.pack('>IB', len(body) + 1, 2) + body
    assert chunk.decode(data) == RAW


def test_payload_filling_sectors_exactly():
    body = bytes(range(256)) * 15 + bytes(251)
    data = pack_payload(body, 3)
    assert len(data) == 4096
    assert chunk.decode(data, allotted=4096) == body

    with pytest.raises(CorruptChunkData, match='allotted'):
        chunk.parse_payload(pack_payload(body + b'\x00', 3)[:4096] + bytes(10), allotted=4096)

import io
import struct
from typing import Any, List, Optional, Sequence, Union
import nbtlib
from .common import NBTParseError


NBTPath = Union[str, nbtlib.Path, Sequence[Union[str, int]]]

TAG_END = 0
TAG_STRING = 8
TAG_LIST = 9
TAG_COMPOUND = 10

# Payload size of fixed width tags
_FIXED_SIZE = {1: 1, 2: 2, 3: 4, 4: 8, 5: 4, 6: 8}
# Element size of array tags (byte, int, long arrays)
_ARRAY_ITEM_SIZE = {7: 1, 11: 4, 12: 8}
# Smallest possible payload of a list element
_MIN_SIZE = {**_FIXED_SIZE, 7: 4, 8: 2, 9: 5, 10: 1, 11: 4, 12: 4}

MAX_DEPTH = 256  # Nesting limit of compounds and lists

_U8 = struct.Struct('>B')
_U16 = struct.Struct('>H')
_I32 = struct.Struct('>i')


class _Buf:
    __slots__ = ('b', 'o')

    def __init__(self, b: bytes) -> None:
        self.b = b
        self.o = 0

    @property
    def remaining(self) -> int:
        return len(self.b) - self.o

    def skip(self, n: int) -> None:
        if n > self.remaining:
            raise NBTParseError(f'Unexpected end of NBT data at offset {self.o}')
        self.o += n

    def read(self, fmt: struct.Struct) -> int:
        start = self.o
        self.skip(fmt.size)
        return fmt.unpack_from(self.b, start)[0]


def check_nbt(data: bytes) -> None:
    '''Validate structure of uncompressed NBT without building a tree

    nbtlib reads past the end of data as zeros and trusts declared
    lengths, so malformed chunks are rejected here first.
    '''
    buf = _Buf(data)
    if buf.read(_U8) != TAG_COMPOUND:
        raise NBTParseError('NBT root is not a compound')
    buf.skip(buf.read(_U16))

    # None for a compound, [element tag, elements left] for a list
    stack: List[Optional[List[int]]] = [None]
    while stack:
        frame = stack[-1]
        if frame is None:
            tag = buf.read(_U8)
            if tag == TAG_END:
                stack.pop()
                continue
            buf.skip(buf.read(_U16))
        else:
            if frame[1] == 0:
                stack.pop()
                continue
            frame[1] -= 1
            tag = frame[0]

        if tag in _FIXED_SIZE:
            buf.skip(_FIXED_SIZE[tag])
        elif tag in _ARRAY_ITEM_SIZE:
            length = buf.read(_I32)
            if length < 0:
                raise NBTParseError('Negative array length')
            buf.skip(length * _ARRAY_ITEM_SIZE[tag])
        elif tag == TAG_STRING:
            buf.skip(buf.read(_U16))
        elif tag == TAG_LIST:
            item_tag = buf.read(_U8)
            length = buf.read(_I32)
            if length < 0:
                raise NBTParseError('Negative list length')
            if item_tag == TAG_END:
                if length:
                    raise NBTParseError('Non-empty list of end tags')
            elif item_tag not in _MIN_SIZE:
                raise NBTParseError(f'Unknown list element tag {item_tag}')
            elif length * _MIN_SIZE[item_tag] > buf.remaining:
                raise NBTParseError(f'List length {length} exceeds remaining data')
            stack.append([item_tag, length])
        elif tag == TAG_COMPOUND:
            stack.append(None)
        else:
            raise NBTParseError(f'Unknown tag {tag} at offset {buf.o}')

        if len(stack) > MAX_DEPTH:
            raise NBTParseError(f'NBT nested deeper than {MAX_DEPTH} levels')

    if buf.remaining:
        raise NBTParseError(f'{buf.remaining} bytes of trailing data after NBT')


def parse_nbt(data: bytes) -> nbtlib.File:
    '''Parse uncompressed big-endian NBT (as stored in region chunks)'''
    check_nbt(data)
    try:
        return nbtlib.File.parse(io.BytesIO(data))
    except (struct.error, EOFError, KeyError, IndexError, ValueError, TypeError,
            RecursionError, MemoryError, OverflowError) as err:
        # nbtlib has no common exception type for malformed input
        raise NBTParseError(f'Malformed NBT data: {err!r}') from err


def get_path(tree: Any, path: NBTPath) -> Optional[Any]:
    '''Look up a nested tag

    `path` is either a string in nbtlib path syntax (`sections[0].Y`)
    or a sequence of compound keys and list indices.
    '''
    if isinstance(path, str):
        path = nbtlib.Path(path)
    if isinstance(path, nbtlib.Path):
        try:
            return tree[path]
        except (KeyError, IndexError, TypeError):
            return None

    node = tree
    for key in path:
        try:
            node = node[key]
        except (KeyError, IndexError, TypeError):
            return None
    return node

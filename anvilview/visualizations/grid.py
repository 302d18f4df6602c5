from typing import AbstractSet, Iterable, List, NamedTuple, Optional, Tuple
from ..save import SaveIndex


LABEL_STEP = 5  # Axis label spacing
EMPTY_GRID = 'No regions found'


class GridBounds(NamedTuple):
    # Inclusive
    min_x: int
    max_x: int
    min_z: int
    max_z: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_z - self.min_z + 1


class VisGridArguments(NamedTuple):
    occupied: str
    empty: str


def grid_bounds(cells: Iterable[Tuple[int, int]]) -> Optional[GridBounds]:
    cells = list(cells)
    if not cells:
        return None
    xs = [x for x, _ in cells]
    zs = [z for _, z in cells]
    return GridBounds(min(xs), max(xs), min(zs), max(zs))


def _axis_labels(start: int, stop: int) -> str:
    line: List[str] = []
    for x in range(start, stop + 1):
        if x % LABEL_STEP:
            continue
        pos = x - start
        if line and pos <= len(line):
            continue  # Would touch previous label
        line.extend(' ' * (pos - len(line)))
        line.extend(str(x))
    return ''.join(line)


def render_grid(
    cells: AbstractSet[Tuple[int, int]],
    bounds: Optional[GridBounds] = None,
    occupied: str = 'X',
    empty: str = '.',
) -> str:
    '''Draw (x, z) cells as text, one character per cell

    X grows to the right and Z grows downwards. Every 5th coordinate
    gets a label on the top and left sides.
    '''
    if bounds is None:
        bounds = grid_bounds(cells)
        if bounds is None:
            return EMPTY_GRID

    gutter = max(len(str(bounds.min_z)), len(str(bounds.max_z)))
    lines = [(' ' * (gutter + 1) + _axis_labels(bounds.min_x, bounds.max_x)).rstrip()]

    for z in range(bounds.min_z, bounds.max_z + 1):
        label = str(z) if z % LABEL_STEP == 0 else ''
        row = ''.join(
            occupied if (x, z) in cells else empty
            for x in range(bounds.min_x, bounds.max_x + 1)
        )
        lines.append(f'{label:>{gutter}} {row}')

    return '\n'.join(lines)


def visualize_grid(args: VisGridArguments, save: SaveIndex) -> None:
    print(save)
    print(render_grid(save.regions, occupied=args.occupied, empty=args.empty))

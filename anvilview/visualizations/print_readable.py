from datetime import datetime, timezone
import numpy as np
from typing import List, NamedTuple
from ..chunkregion import ChunkRegion
from ..common import REGION_WIDTH, SECTOR_SIZE, log
from ..region import RegionFile
from ..save import SaveIndex
from .grid import GridBounds, grid_bounds, render_grid


class VisRegionArguments(NamedTuple):
    parse: bool
    show_grid: bool


def _format_time(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, timezone.utc).strftime('%Y-%m-%d %H:%M:%S')


def visualize_saves(saves: List[SaveIndex]) -> None:
    if not saves:
        log('No saves found')
    for save in saves:
        print(save.name, len(save.regions), save.root_path, sep='\t')


def visualize_save_info(save: SaveIndex) -> None:
    print(f'Name:      {save.display_name()}')
    print(f'Directory: {save.root_path}')
    print(f'Dimension: {save.dimension}')
    print(f'Regions:   {len(save.regions)}')

    level_data = save.level_data()
    if level_data is not None and 'DataVersion' in level_data:
        print(f'Data version: {level_data["DataVersion"].value}')

    bounds = grid_bounds(save.regions)
    if bounds is not None:
        print(f'Region X {bounds.min_x} ~ {bounds.max_x}, Z {bounds.min_z} ~ {bounds.max_z}')
        print(
            f'Block X {bounds.min_x * 512} ~ {(bounds.max_x + 1) * 512 - 1},',
            f'Z {bounds.min_z * 512} ~ {(bounds.max_z + 1) * 512 - 1}',
        )


def visualize_region(args: VisRegionArguments, region: RegionFile) -> None:
    locations = region.locations()
    present = locations.present
    timestamps = region.timestamps()[present]

    print(f'Region {region.x},{region.z} ({region.path})')
    print(f'File size: {len(region.data):,} bytes ({len(region.data) / SECTOR_SIZE:.1f} sectors)')
    print(f'Chunks: {int(present.sum())}/{present.size}')
    if present.any():
        print(f'Used sectors: {int(locations.counts[present].sum())}')
        stamped = timestamps[timestamps > 0]
        if stamped.size:
            print(f'Modified: {_format_time(int(stamped.min()))} ~ {_format_time(int(stamped.max()))}')

    if args.parse:
        chunk_region = ChunkRegion.from_region(region)
        print(f'Parsed chunks: {chunk_region.chunk_count}')

    if args.show_grid:
        base_x, base_z = region.x * REGION_WIDTH, region.z * REGION_WIDTH
        zs, xs = np.nonzero(region.chunk_map())
        cells = {(base_x + int(x), base_z + int(z)) for x, z in zip(xs, zs)}
        bounds = GridBounds(base_x, base_x + REGION_WIDTH - 1, base_z, base_z + REGION_WIDTH - 1)
        print(render_grid(cells, bounds))

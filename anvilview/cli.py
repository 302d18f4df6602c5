import argparse
import sys
from typing import List, Optional
from .common import AnvilError, chunk_slot, chunk_to_region, log
from .nbt import get_path, parse_nbt
from .save import SaveIndex, list_saves
from .visualizations.grid import VisGridArguments, visualize_grid
from .visualizations.matplotlib_plot import VisPlotArguments, visualize_region_map
from .visualizations.print_as_csv import vis_print_chunks_csv, vis_print_regions_csv
from .visualizations.print_readable import VisRegionArguments, visualize_region, visualize_save_info, visualize_saves


class InvalidOperation(AnvilError):
    pass


def operation_show_chunk(save: SaveIndex, chunk_x: int, chunk_z: int, path: Optional[str]) -> None:
    region = save.load_region(*chunk_to_region(chunk_x, chunk_z))
    data = region.decode_chunk(chunk_slot(chunk_x, chunk_z))
    if data is None:
        raise InvalidOperation(f'Chunk {chunk_x},{chunk_z} is not generated')

    tree = parse_nbt(data)
    if path:
        value = get_path(tree, path)
        if value is None:
            raise InvalidOperation(f'Path "{path}" not found in chunk {chunk_x},{chunk_z}')
        print(value.snbt())
    else:
        for key in sorted(tree.keys()):
            print(key, type(tree[key]).__name__, sep='\t')


def operation_process(args: argparse.Namespace) -> None:
    command: str = args.command

    if command == 'saves':
        visualize_saves(list_saves(args.saves_dir, args.dim))
        return

    save = SaveIndex.from_path(args.world, args.dim)

    if command == 'info':
        visualize_save_info(save)
    elif command == 'grid':
        visualize_grid(VisGridArguments(occupied=args.occupied, empty=args.empty), save)
    elif command == 'csv':
        vis_print_regions_csv(save)
    elif command == 'region':
        region = save.load_region(args.x, args.z)
        if args.csv:
            vis_print_chunks_csv(region)
        else:
            visualize_region(VisRegionArguments(parse=args.parse, show_grid=not args.nogrid), region)
    elif command == 'chunk':
        operation_show_chunk(save, args.x, args.z, args.path)
    elif command == 'plot':
        visualize_region_map(VisPlotArguments(chunks=args.chunks, savefig=args.savefig), save)
    else:
        raise InvalidOperation(f'Unknown command: {command}')


def main(argv: Optional[List[str]] = None) -> int:
    def single_char(s: str) -> str:
        if len(s) != 1:
            raise argparse.ArgumentTypeError('Must be a single character')
        return s


    def add_world_argument(parser: argparse.ArgumentParser) -> None:
        parser.add_argument('world', help='Path to world directory')
        parser.add_argument('--dim', default=0, type=int, help='Numerical ID of target dimension (default is Overworld)')


    parser = argparse.ArgumentParser(description='Inspect region files of a Minecraft world')
    subparsers = parser.add_subparsers(dest='command', required=True, help='Operation')

    parse_saves = subparsers.add_parser('saves', help='List worlds in saves directory')
    parse_saves.add_argument('--saves-dir', default=None, help='Saves directory (default is the launcher one)')
    parse_saves.add_argument('--dim', default=0, type=int, help='Dimension to count regions of')

    parse_info = subparsers.add_parser('info', help='Show world summary')
    add_world_argument(parse_info)

    parse_grid = subparsers.add_parser('grid', help='Print map of region files')
    add_world_argument(parse_grid)
    parse_grid.add_argument('--occupied', type=single_char, default='X', help='Character for existing regions')
    parse_grid.add_argument('--empty', type=single_char, default='.', help='Character for missing regions')

    parse_csv = subparsers.add_parser('csv', help='Print region files as CSV')
    add_world_argument(parse_csv)

    parse_region = subparsers.add_parser('region', help='Show contents of a region file')
    add_world_argument(parse_region)
    parse_region.add_argument('x', type=int, help='Region X')
    parse_region.add_argument('z', type=int, help='Region Z')
    parse_region.add_argument('--parse', action='store_true', help='Decode all chunks and count readable ones')
    parse_region.add_argument('--nogrid', action='store_true', help='Don\'t print chunk map')
    parse_region.add_argument('--csv', action='store_true', help='Print chunk locations as CSV instead')

    parse_chunk = subparsers.add_parser('chunk', help='Print NBT data of a chunk')
    add_world_argument(parse_chunk)
    parse_chunk.add_argument('x', type=int, help='Chunk X')
    parse_chunk.add_argument('z', type=int, help='Chunk Z')
    parse_chunk.add_argument('path', nargs='?', default=None, help='NBT path to print, like "sections[0].Y" (default is list of top level tags)')

    parse_plot = subparsers.add_parser('plot', help='Plot map of region files')
    add_world_argument(parse_plot)
    parse_plot.add_argument('--chunks', action='store_true', help='Color regions by number of generated chunks')
    parse_plot.add_argument('--savefig', default=None, help='Save plot to specified file instead of displaying in a window')

    args = parser.parse_args(argv)
    try:
        operation_process(args)
    except AnvilError as err:
        log(err)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

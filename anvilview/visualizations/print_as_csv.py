from ..region import RegionFile
from ..save import SaveIndex


def vis_print_regions_csv(save: SaveIndex) -> None:
    print('x', 'z', 'file', sep=',')
    for x, z in save.sorted_regions():
        print(x, z, save.region_path(x, z), sep=',')


def vis_print_chunks_csv(region: RegionFile) -> None:
    locations = region.locations()
    timestamps = region.timestamps()

    print('slot', 'chunk_x', 'chunk_z', 'sector_offset', 'sector_count', 'timestamp', sep=',')
    for slot in region.present_slots():
        chunk_x, chunk_z = region.chunk_coords(slot)
        print(
            slot, chunk_x, chunk_z,
            locations.offsets[slot], locations.counts[slot], timestamps[slot],
            sep=',',
        )

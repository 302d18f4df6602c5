import numpy as np
from numpy.typing import NDArray
from typing import NamedTuple, Optional
from ..common import CHUNKS_PER_REGION, AnvilError, log
from ..save import SaveIndex
from .grid import GridBounds, grid_bounds


class VisPlotArguments(NamedTuple):
    chunks: bool
    savefig: Optional[str]


def region_density(save: SaveIndex, bounds: GridBounds, count_chunks: bool) -> NDArray[np.float64]:
    '''Fraction of generated chunks per region, indexed by [z, x]

    Without `count_chunks` every known region counts as full.
    '''
    density = np.zeros((bounds.height, bounds.width), np.float64)
    for x, z in save.regions:
        value = 1.0
        if count_chunks:
            try:
                region = save.load_region(x, z)
                value = region.locations().present.sum() / CHUNKS_PER_REGION
            except AnvilError as err:
                log(err)
                value = 0.0
        density[z - bounds.min_z, x - bounds.min_x] = value
    return density


def visualize_region_map(args: VisPlotArguments, save: SaveIndex) -> None:
    import matplotlib.pyplot as plt

    bounds = grid_bounds(save.regions)
    if bounds is None:
        log('No regions found')
        return

    density = region_density(save, bounds, args.chunks)

    fig, ax = plt.subplots(figsize=(8, 8))
    image = ax.imshow(
        np.ma.masked_equal(density, 0),
        cmap='viridis',
        vmin=0,
        vmax=1,
        origin='upper',
        interpolation='nearest',
        extent=(bounds.min_x - 0.5, bounds.max_x + 0.5, bounds.max_z + 0.5, bounds.min_z - 0.5),
    )
    if args.chunks:
        fig.colorbar(image, ax=ax, label='Generated chunks fraction')

    ax.set_title(f'Regions of {save.name}')
    ax.set_xlabel('Region X')
    ax.set_ylabel('Region Z')
    ax.set_aspect('equal')

    if args.savefig:
        plt.savefig(args.savefig, dpi=150)
    else:
        plt.show()

import os
from pathlib import Path
import uNBT as nbt
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Tuple, Union
from .common import (
    AnvilError, FilenameParseError, RegionIOError, SaveNotFoundError,
    log, parse_region_filename, region_filename,
)
from .region import RegionFile


# Region directory of each dimension, relative to save root
DIMENSION_DIRS: Dict[int, str] = {
    0: 'region',
    -1: 'DIM-1/region',
    1: 'DIM1/region',
}


def dimension_region_dir(dimension: int) -> str:
    try:
        return DIMENSION_DIRS[dimension]
    except KeyError:
        # Modded dimensions follow the same naming
        return f'DIM{dimension}/region'


def scan_region_dir(region_dir: Path) -> FrozenSet[Tuple[int, int]]:
    try:
        entries = list(region_dir.iterdir())
    except OSError as err:
        raise RegionIOError(f'Cannot list region directory {region_dir}: {err}') from err

    regions = set()
    for entry in entries:
        try:
            coords = parse_region_filename(entry.name)
            if not entry.is_file():
                continue
        except FilenameParseError:
            if entry.suffix == '.mca':
                log(f'Skipping badly named region file {entry.name}')
            continue
        except OSError as err:
            log(f'Skipping unreadable entry {entry}: {err}')
            continue
        regions.add(coords)
    return frozenset(regions)


class SaveIndex(NamedTuple):
    '''Region files known to exist in a save (file contents are not read)'''
    name: str
    root_path: Path
    regions: FrozenSet[Tuple[int, int]]
    dimension: int = 0

    @classmethod
    def from_path(cls, path: Union[str, Path], dimension: int = 0) -> 'SaveIndex':
        root = Path(path)
        if not root.exists():
            raise SaveNotFoundError(f'Save not found: {root}')
        regions = scan_region_dir(root / dimension_region_dir(dimension))
        return cls(
            name=root.resolve().name,
            root_path=root,
            regions=regions,
            dimension=dimension,
        )

    def __str__(self) -> str:
        return f'{self.name} [{len(self.regions)} regions]'

    @property
    def region_dir(self) -> Path:
        return self.root_path / dimension_region_dir(self.dimension)

    def region_path(self, x: int, z: int) -> Path:
        return self.region_dir / region_filename(x, z)

    def has_region(self, x: int, z: int) -> bool:
        return (x, z) in self.regions

    def sorted_regions(self) -> List[Tuple[int, int]]:
        # Row order: by z, then x
        return sorted(self.regions, key=lambda xz: (xz[1], xz[0]))

    def load_region(self, x: int, z: int) -> RegionFile:
        if not self.has_region(x, z):
            raise SaveNotFoundError(f'Region {x},{z} not found in save {self.name}')
        return RegionFile(x, z, self.region_path(x, z)).load()

    def level_data(self) -> Optional[nbt.TagCompound]:
        level_file = self.root_path / 'level.dat'
        if not level_file.is_file():
            return None
        try:
            return nbt.read_nbt_file(str(level_file))['Data']
        except (OSError, EOFError, KeyError, ValueError) as err:
            raise RegionIOError(f'Failed to read {level_file}: {err}') from err

    def display_name(self) -> str:
        level_data = self.level_data()
        if level_data is not None and 'LevelName' in level_data:
            return level_data['LevelName'].value
        return self.name


def default_saves_dir() -> Optional[Path]:
    '''Locate the saves directory of the default Minecraft launcher

    Checked in order:
    - %APPDATA%/.minecraft/saves (Windows)
    - ~/Library/Application Support/minecraft/saves (macOS)
    - ~/.minecraft/saves
    '''
    candidates: List[Path] = []
    if 'APPDATA' in os.environ:
        candidates.append(Path(os.environ['APPDATA']) / '.minecraft' / 'saves')
    home = Path.home()
    candidates.append(home / 'Library' / 'Application Support' / 'minecraft' / 'saves')
    candidates.append(home / '.minecraft' / 'saves')

    for path in candidates:
        if path.is_dir():
            return path
    return None


def list_saves(saves_dir: Union[str, Path, None] = None, dimension: int = 0) -> List[SaveIndex]:
    if saves_dir is None:
        saves_dir = default_saves_dir()
        if saves_dir is None:
            raise SaveNotFoundError('Minecraft saves directory not found')
    saves_dir = Path(saves_dir)
    if not saves_dir.is_dir():
        raise SaveNotFoundError(f'Saves directory not found: {saves_dir}')

    saves = []
    for path in sorted(saves_dir.iterdir()):
        if not path.is_dir():
            continue
        try:
            saves.append(SaveIndex.from_path(path, dimension))
        except AnvilError as err:
            log(f'Skipping save {path.name}: {err}')
    return saves


def get_save(name: str, saves_dir: Union[str, Path, None] = None, dimension: int = 0) -> SaveIndex:
    if saves_dir is None:
        saves_dir = default_saves_dir()
        if saves_dir is None:
            raise SaveNotFoundError('Minecraft saves directory not found')
    return SaveIndex.from_path(Path(saves_dir) / name, dimension)

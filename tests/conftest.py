import pytest

from regionutil import build_region, chunk_nbt, pack_payload


@pytest.fixture
def world(tmp_path):
    '''Save with regions (0,0), (1,0), (-1,-1) and some unrelated files.'''
    root = tmp_path / 'New World'
    region_dir = root / 'region'
    region_dir.mkdir(parents=True)

    (region_dir / 'r.0.0.mca').write_bytes(build_region({
        0: pack_payload(chunk_nbt(0, 0)),
        33: pack_payload(chunk_nbt(1, 1), compression=1),
    }))
    (region_dir / 'r.1.0.mca').write_bytes(build_region({
        5: pack_payload(chunk_nbt(37, 0), compression=3),
    }))
    (region_dir / 'r.-1.-1.mca').write_bytes(build_region({}))

    (region_dir / 'r.abc.mca').write_bytes(b'')
    (region_dir / 'notes.txt').write_text('not a region')
    (region_dir / 'r.7.7.mca').mkdir()
    return root


@pytest.fixture
def saves_dir(tmp_path, world):
    '''Saves directory holding `world`, one empty world and one broken one.'''
    saves = world.parent
    (saves / 'Empty World' / 'region').mkdir(parents=True)
    (saves / 'Broken World').mkdir()
    (saves / 'stray.txt').write_text('')
    return saves

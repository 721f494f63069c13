import pytest

from xfskit.disk import Disk, XfsError
from xfskit.inode import (
    add_inode_entry,
    add_root_entry,
    data_blocks,
    find_empty_inode_entry,
    find_inode_entry,
    remove_inode_entry,
    remove_root_entry,
)
from xfskit.layout import (
    BLOCK_SIZE,
    INODE,
    INODE_ENTRY_FILENAME,
    INODE_ENTRY_PERMISSION,
    INODE_ENTRY_SIZE,
    INODE_ENTRY_USERID,
    NO_OF_INODE_BLOCKS,
    ROOTFILE,
    ROOTFILE_ENTRY_FILENAME,
    ROOTFILE_ENTRY_FILESIZE,
    ROOTFILE_ENTRY_FILETYPE,
    ROOTFILE_ENTRY_SIZE,
    FileType,
)


@pytest.fixture
def disk(tmp_path):
    d = Disk(tmp_path / "disk.xfs")
    d.set_defaults(INODE)
    d.set_defaults(ROOTFILE)
    return d


def test_empty_table_first_entry_is_zero(disk):
    assert find_empty_inode_entry(disk) == 0


def test_next_empty_entry_after_adding(disk):
    add_inode_entry(disk, 0, FileType.ROOT, "root", BLOCK_SIZE, [5, -1, -1, -1])
    assert find_empty_inode_entry(disk) == INODE_ENTRY_SIZE


def test_find_entry_by_name(disk):
    add_inode_entry(disk, 0, FileType.ROOT, "root", BLOCK_SIZE, [5])
    add_inode_entry(disk, INODE_ENTRY_SIZE, FileType.DATA, "a.dat", 10, [70, 71])
    assert find_inode_entry(disk, "root") == 0
    assert find_inode_entry(disk, "a.dat") == INODE_ENTRY_SIZE


def test_find_missing_entry(disk):
    assert find_inode_entry(disk, "missing.dat") is None
    assert find_inode_entry(disk, None) is None


def test_data_blocks_round_trip_and_padding(disk):
    add_inode_entry(disk, 32, FileType.EXEC, "p.xsm", 20, [80, 81])
    assert data_blocks(disk, 32) == [80, 81, -1, -1]


def test_ownership_per_file_type(disk):
    base = INODE * BLOCK_SIZE
    add_inode_entry(disk, 0, FileType.ROOT, "root", 1, [5])
    add_inode_entry(disk, 16, FileType.DATA, "d.dat", 1, [70])
    add_inode_entry(disk, 32, FileType.EXEC, "e.xsm", 1, [71])
    assert disk.get_value_at(base + INODE_ENTRY_USERID) == 0
    assert disk.get_value_at(base + INODE_ENTRY_PERMISSION) == 0
    assert disk.get_value_at(base + 16 + INODE_ENTRY_USERID) == 1
    assert disk.get_value_at(base + 16 + INODE_ENTRY_PERMISSION) == 1
    assert disk.get_value_at(base + 32 + INODE_ENTRY_USERID) == 0
    assert disk.get_value_at(base + 32 + INODE_ENTRY_PERMISSION) == -1


def test_root_file_entry_written(disk):
    add_inode_entry(disk, 2 * INODE_ENTRY_SIZE, FileType.DATA, "n.dat", 42, [70])
    start = 2 * ROOTFILE_ENTRY_SIZE
    assert disk.word(ROOTFILE, start + ROOTFILE_ENTRY_FILENAME) == "n.dat"
    assert disk.get_value_at(ROOTFILE * BLOCK_SIZE + start + ROOTFILE_ENTRY_FILESIZE) == 42
    assert disk.get_value_at(ROOTFILE * BLOCK_SIZE + start + ROOTFILE_ENTRY_FILETYPE) == FileType.DATA


def test_add_root_entry_directly(disk):
    add_root_entry(disk, 8, FileType.EXEC, "x.xsm", 7)
    assert disk.word(ROOTFILE, 8 + ROOTFILE_ENTRY_FILENAME) == "x.xsm"
    assert disk.get_value_at(ROOTFILE * BLOCK_SIZE + 8 + ROOTFILE_ENTRY_FILESIZE) == 7


def test_remove_entry_frees_it(disk):
    add_inode_entry(disk, 0, FileType.DATA, "gone.dat", 3, [70])
    remove_inode_entry(disk, 0)
    assert find_inode_entry(disk, "gone.dat") is None
    assert find_empty_inode_entry(disk) == 0
    assert data_blocks(disk, 0) == [-1, -1, -1, -1]
    assert disk.word(ROOTFILE, ROOTFILE_ENTRY_FILENAME) == "-1"
    assert disk.word(ROOTFILE, ROOTFILE_ENTRY_FILESIZE) == "0"


def test_remove_root_entry(disk):
    add_root_entry(disk, 16, FileType.DATA, "r.dat", 9)
    remove_root_entry(disk, 16)
    assert disk.word(ROOTFILE, 16 + ROOTFILE_ENTRY_FILENAME) == "-1"
    assert disk.word(ROOTFILE, 16 + ROOTFILE_ENTRY_FILETYPE) == "-1"


def test_user_table_region_not_searched_by_name(disk):
    disk.set_word(INODE + NO_OF_INODE_BLOCKS - 1, 448 + INODE_ENTRY_FILENAME, "hidden")
    assert find_inode_entry(disk, "hidden") is None


def test_full_table_raises(disk):
    for block in range(INODE, INODE + NO_OF_INODE_BLOCKS):
        for start in range(0, BLOCK_SIZE, INODE_ENTRY_SIZE):
            disk.set_word(block, start + INODE_ENTRY_FILENAME, "f")
    with pytest.raises(XfsError):
        find_empty_inode_entry(disk)
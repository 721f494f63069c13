import pytest

from xfskit.disk import (
    Disk,
    DiskCreateError,
    DiskOpenError,
    XfsError,
    XosFile,
    word_to_int,
)
from xfskit.layout import (
    BLOCK_SIZE,
    DATA_START_BLOCK,
    DISK_FREE_LIST,
    INODE,
    NO_OF_DISK_BLOCKS,
    ROOTFILE,
    TEMP_BLOCK,
    USER_TABLE_WORD,
    WORD_SIZE,
)


@pytest.fixture
def disk(tmp_path):
    created = Disk(tmp_path / "disk.xfs")
    created.create_file(True)
    return created


@pytest.mark.parametrize(
    "text, expected",
    [("42", 42), ("-7", -7), ("abc", 0), ("  12x", 12), ("", 0), ("+5", 5)],
)
def test_word_to_int(text, expected):
    assert word_to_int(text) == expected


def test_missing_disk_raises(tmp_path):
    missing = Disk(tmp_path / "absent.xfs")
    with pytest.raises(DiskOpenError):
        missing.check_exists()
    with pytest.raises(DiskOpenError):
        missing.write_block(0, 0)
    with pytest.raises(DiskOpenError):
        missing.read_block(0, 0)


def test_error_messages():
    assert str(DiskOpenError()) == "Unable to open disk file"
    assert str(DiskCreateError()) == "Failed to create disk file"
    assert issubclass(DiskOpenError, XfsError)


def test_create_in_missing_directory(tmp_path):
    with pytest.raises(DiskCreateError):
        Disk(tmp_path / "nope" / "disk.xfs").create_file(True)


def test_create_without_wipe_keeps_content(tmp_path):
    path = tmp_path / "disk.xfs"
    path.write_bytes(b"abc")
    Disk(path).create_file(False)
    assert path.read_bytes() == b"abc"
    Disk(path).create_file(True)
    assert path.read_bytes() == b""


def test_block_round_trip(disk):
    disk.set_word(10, 0, "MOV R0, 1")
    disk.set_word(10, BLOCK_SIZE - 1, "HALT")
    disk.write_block(10, 100)
    other = Disk(disk.path)
    other.read_block(20, 100)
    assert other.word(20, 0) == "MOV R0, 1"
    assert other.word(20, BLOCK_SIZE - 1) == "HALT"
    assert other.word(20, 1) == ""


def test_long_word_is_cut_to_word_size(disk):
    text = "x" * (WORD_SIZE + 4)
    disk.set_word(10, 0, text)
    disk.write_block(10, 10)
    other = Disk(disk.path)
    other.read_block(10, 10)
    assert other.word(10, 0) == text[: WORD_SIZE - 1]


def test_free_list_defaults_and_allocation(disk):
    disk.set_defaults(DISK_FREE_LIST)
    assert disk.get_value_at(DISK_FREE_LIST * BLOCK_SIZE) == 1
    first = disk.find_free_block()
    second = disk.find_free_block()
    assert first == DATA_START_BLOCK
    assert second == DATA_START_BLOCK + 1
    assert disk.get_value_at(DISK_FREE_LIST * BLOCK_SIZE + first) == 1


def test_free_list_exhaustion(disk):
    disk.set_defaults(DISK_FREE_LIST)
    claimed = {disk.find_free_block() for _ in range(NO_OF_DISK_BLOCKS - DATA_START_BLOCK)}
    assert len(claimed) == NO_OF_DISK_BLOCKS - DATA_START_BLOCK
    with pytest.raises(XfsError):
        disk.find_free_block()


def test_free_blocks_releases_until_sentinel(disk):
    disk.set_defaults(DISK_FREE_LIST)
    first = disk.find_free_block()
    second = disk.find_free_block()
    third = disk.find_free_block()
    disk.free_blocks([first, second, -1, third])
    assert disk.get_value_at(DISK_FREE_LIST * BLOCK_SIZE + first) == 0
    assert disk.get_value_at(DISK_FREE_LIST * BLOCK_SIZE + third) == 1
    assert disk.find_free_block() == first


def test_commit_and_load(disk):
    disk.set_defaults(DISK_FREE_LIST)
    disk.set_defaults(INODE)
    disk.set_defaults(ROOTFILE)
    disk.find_free_block()
    disk.commit(DISK_FREE_LIST)
    disk.commit(INODE)
    loaded = Disk(disk.path)
    loaded.load()
    assert loaded.word(DISK_FREE_LIST, DATA_START_BLOCK) == "1"
    assert loaded.blocks[INODE] == disk.blocks[INODE]
    assert loaded.blocks[ROOTFILE] == disk.blocks[ROOTFILE]


def test_inode_defaults_list_no_files(disk):
    disk.set_defaults(INODE)
    assert disk.list_files() == []


def test_list_files(disk):
    disk.set_defaults(INODE)
    base = INODE * BLOCK_SIZE
    disk.store_string_at(base + 1, "a.dat")
    disk.store_value_at(base + 2, 5)
    disk.store_string_at(base + USER_TABLE_WORD, "kernel")
    assert disk.list_files() == [XosFile("a.dat", 5)]


def test_list_files_needs_disk(tmp_path):
    with pytest.raises(DiskOpenError):
        Disk(tmp_path / "absent.xfs").list_files()


def test_set_defaults_rejects_other_blocks(disk):
    with pytest.raises(ValueError):
        disk.set_defaults(TEMP_BLOCK)
    with pytest.raises(ValueError):
        disk.commit(TEMP_BLOCK)


def test_empty_and_clear(disk):
    disk.set_word(TEMP_BLOCK, 3, "data")
    disk.empty_block(TEMP_BLOCK)
    assert set(disk.blocks[TEMP_BLOCK]) == {""}
    disk.set_defaults(INODE)
    disk.clear()
    assert all(set(block) == {""} for block in disk.blocks)


def test_store_and_get_value(disk):
    disk.store_value_at(BLOCK_SIZE * 3 + 7, -1)
    assert disk.get_value_at(BLOCK_SIZE * 3 + 7) == -1
    assert disk.word(3, 7) == "-1"
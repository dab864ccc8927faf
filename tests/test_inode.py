import pytest

from xostools.disk import (
    BLOCK_SIZE,
    FILETYPE_DATA,
    FILETYPE_EXEC,
    INODE,
    INODE_ENTRY_FILETYPE,
    INODE_ENTRY_SIZE,
    INODE_NUM_DATA_BLOCKS,
    NO_OF_INODE_BLOCKS,
    ROOTFILE,
    ROOTFILE_ENTRY_FILENAME,
    ROOTFILE_ENTRY_FILESIZE,
    ROOTFILE_ENTRY_FILETYPE,
    ROOTFILE_ENTRY_SIZE,
    VirtualDisk,
)
from xostools.inode import (
    add_inode_entry,
    add_root_file_entry,
    find_empty_inode_entry,
    get_data_blocks,
    get_inode_entry,
    remove_inode_entry,
    remove_root_file_entry,
)


@pytest.fixture
def vdisk(tmp_path):
    disk = VirtualDisk(tmp_path / "disk.xfs")
    disk.set_defaults(INODE)
    disk.set_defaults(ROOTFILE)
    return disk


def test_first_empty_entry_is_start(vdisk):
    assert find_empty_inode_entry(vdisk) == 0


def test_add_and_find_entry(vdisk):
    blocks = [70, 71, -1, -1]
    add_inode_entry(vdisk, 0, FILETYPE_EXEC, "prog.xsm", 2 * BLOCK_SIZE, blocks)
    assert get_inode_entry(vdisk, "prog.xsm") == 0
    assert get_data_blocks(vdisk, 0) == blocks
    assert vdisk.get_value_at(INODE * BLOCK_SIZE + INODE_ENTRY_FILETYPE) == FILETYPE_EXEC
    assert find_empty_inode_entry(vdisk) == INODE_ENTRY_SIZE


def test_short_block_list_is_padded(vdisk):
    add_inode_entry(vdisk, 0, FILETYPE_DATA, "a.dat", BLOCK_SIZE, [80])
    assert get_data_blocks(vdisk, 0) == [80] + [-1] * (INODE_NUM_DATA_BLOCKS - 1)


def test_add_writes_root_file_entry(vdisk):
    add_inode_entry(vdisk, INODE_ENTRY_SIZE, FILETYPE_DATA, "a.dat", BLOCK_SIZE, [80])
    base = ROOTFILE * BLOCK_SIZE + ROOTFILE_ENTRY_SIZE
    assert vdisk.blocks[ROOTFILE][ROOTFILE_ENTRY_SIZE + ROOTFILE_ENTRY_FILENAME] == "a.dat"
    assert vdisk.get_value_at(base + ROOTFILE_ENTRY_FILESIZE) == BLOCK_SIZE
    assert vdisk.get_value_at(base + ROOTFILE_ENTRY_FILETYPE) == FILETYPE_DATA


def test_entry_in_second_block(vdisk):
    add_inode_entry(vdisk, BLOCK_SIZE, FILETYPE_DATA, "b.dat", BLOCK_SIZE, [90])
    assert get_inode_entry(vdisk, "b.dat") == BLOCK_SIZE
    assert get_data_blocks(vdisk, BLOCK_SIZE)[0] == 90
    root_index = BLOCK_SIZE // INODE_ENTRY_SIZE * ROOTFILE_ENTRY_SIZE
    assert vdisk.blocks[ROOTFILE][root_index + ROOTFILE_ENTRY_FILENAME] == "b.dat"


def test_remove_entry(vdisk):
    add_inode_entry(vdisk, 0, FILETYPE_EXEC, "prog.xsm", BLOCK_SIZE, [70])
    remove_inode_entry(vdisk, 0)
    assert get_inode_entry(vdisk, "prog.xsm") is None
    assert find_empty_inode_entry(vdisk) == 0
    assert get_data_blocks(vdisk, 0) == [-1] * INODE_NUM_DATA_BLOCKS
    assert vdisk.get_value_at(ROOTFILE * BLOCK_SIZE + ROOTFILE_ENTRY_FILENAME) == -1
    assert vdisk.get_value_at(ROOTFILE * BLOCK_SIZE + ROOTFILE_ENTRY_FILESIZE) == 0


def test_root_file_entry_round_trip(vdisk):
    add_root_file_entry(vdisk, ROOTFILE_ENTRY_SIZE, FILETYPE_DATA, "c.dat", BLOCK_SIZE)
    base = ROOTFILE * BLOCK_SIZE + ROOTFILE_ENTRY_SIZE
    assert vdisk.blocks[ROOTFILE][ROOTFILE_ENTRY_SIZE] == "c.dat"
    remove_root_file_entry(vdisk, ROOTFILE_ENTRY_SIZE)
    assert vdisk.get_value_at(base + ROOTFILE_ENTRY_FILETYPE) == -1
    assert vdisk.get_value_at(base + ROOTFILE_ENTRY_FILESIZE) == 0


def test_full_table_has_no_empty_entry(vdisk):
    count = NO_OF_INODE_BLOCKS * BLOCK_SIZE // INODE_ENTRY_SIZE
    for number in range(count):
        add_inode_entry(
            vdisk, number * INODE_ENTRY_SIZE, FILETYPE_DATA, f"f{number}", 0, []
        )
    assert find_empty_inode_entry(vdisk) is None


def test_unknown_and_missing_names(vdisk):
    assert get_inode_entry(vdisk, None) is None
    assert get_inode_entry(vdisk, "nothing.dat") is None
    assert get_inode_entry(vdisk, "-1") is None
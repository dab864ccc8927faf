import io
import os

import pytest

from xostools.disk import (
    BLOCK_SIZE,
    DATA_START_BLOCK,
    DISK_FREE_LIST,
    FILETYPE_DATA,
    INODE,
    INT4,
    TEMP_BLOCK,
    VirtualDisk,
    XosFile,
)
from xostools.diskfiles import (
    ASSEMBLY_CODE,
    DATA_FILE,
    XfsError,
    add_extension,
    clear_disk_blocks,
    data_file_size,
    delete_file,
    delete_interrupt,
    format_disk,
    write_file_block,
)
from xostools.inode import add_inode_entry, find_empty_inode_entry


@pytest.fixture
def disk(tmp_path):
    virtual = VirtualDisk(tmp_path / "disk.xfs")
    format_disk(virtual, 1)
    return virtual


def read_back(disk, block_no):
    disk.empty_block(TEMP_BLOCK)
    disk.read_block(TEMP_BLOCK, block_no)
    return list(disk.blocks[TEMP_BLOCK])


def test_add_extension():
    assert add_extension("prog", ".xsm") == "prog.xsm"
    assert add_extension("prog.xsm", ".xsm") == "prog.xsm"


def test_add_extension_long_name():
    result = add_extension("abcdefghijklmnop", ".xsm")
    assert result == "abcdefghijk.xsm"
    assert len(result) < 16


def test_data_file_size_counts_trailing_read():
    assert data_file_size(io.StringIO("1\n2\n3\n")) == 4


def test_format_creates_root(disk):
    assert disk.list_files() == [XosFile("root", BLOCK_SIZE)]
    assert disk.find_free_block() == DATA_START_BLOCK


def test_format_without_formatting(tmp_path):
    virtual = VirtualDisk(tmp_path / "plain.xfs")
    format_disk(virtual, 0)
    assert os.path.getsize(tmp_path / "plain.xfs") == 0


def test_write_code_block(disk):
    block = disk.find_free_block()
    filled = write_file_block(disk, io.StringIO("MOV R0, 1\nHALT\n"), block, ASSEMBLY_CODE)
    assert filled is False
    assert read_back(disk, block)[:4] == ["MOV R0,", "1", "HALT", ""]


def test_write_code_header_number(disk):
    block = disk.find_free_block()
    write_file_block(disk, io.StringIO("0\nHALT\n"), block, ASSEMBLY_CODE)
    assert read_back(disk, block)[:3] == ["0", "HALT", ""]


def test_write_data_block(disk):
    block = disk.find_free_block()
    filled = write_file_block(disk, io.StringIO("12\n34\n"), block, DATA_FILE)
    assert filled is False
    assert read_back(disk, block)[:3] == ["12\n", "34\n", ""]


def test_delete_missing_file(disk):
    with pytest.raises(XfsError):
        delete_file(disk, "nothing.dat")


def test_delete_file_frees_block(disk, tmp_path):
    block = disk.find_free_block()
    index = find_empty_inode_entry(disk)
    add_inode_entry(disk, index, FILETYPE_DATA, "a.dat", BLOCK_SIZE, [block])
    disk.commit(INODE)
    disk.commit(DISK_FREE_LIST)
    delete_file(disk, "a.dat")
    assert [f.name for f in disk.list_files()] == ["root"]
    assert disk.get_value_at(DISK_FREE_LIST * BLOCK_SIZE + block) == 0
    reloaded = VirtualDisk(tmp_path / "disk.xfs")
    reloaded.load()
    assert [f.name for f in reloaded.list_files()] == ["root"]


def test_clear_disk_blocks(disk):
    disk.empty_block(TEMP_BLOCK)
    disk.blocks[TEMP_BLOCK][0] = "X"
    disk.write_block(TEMP_BLOCK, 100)
    clear_disk_blocks(disk, 100, 1)
    assert read_back(disk, 100)[0] == ""


def test_delete_interrupt_clears_its_blocks(disk):
    disk.empty_block(TEMP_BLOCK)
    disk.blocks[TEMP_BLOCK][0] = "X"
    disk.write_block(TEMP_BLOCK, INT4)
    disk.write_block(TEMP_BLOCK, INT4 + 1)
    delete_interrupt(disk, 4)
    assert read_back(disk, INT4)[0] == ""
    assert read_back(disk, INT4 + 1)[0] == ""
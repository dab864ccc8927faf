import pytest

from xostools.disk import (
    BLOCK_SIZE,
    DISK_FREE_LIST,
    INIT_BLOCK,
    INT4,
    MEM_OS_STARTUP_CODE,
    MOD0,
    OS_STARTUP_CODE,
    PAGE_SIZE,
    TEMP_BLOCK,
    VirtualDisk,
    XosFile,
    get_value,
)
from xostools.diskfiles import XfsError, format_disk
from xostools.inode import get_data_blocks, get_inode_entry
from xostools.loaders import (
    load_code,
    load_data,
    load_executable,
    load_interrupt,
    load_module,
    load_os,
)


@pytest.fixture
def disk(tmp_path):
    virtual = VirtualDisk(tmp_path / "disk.xfs")
    format_disk(virtual, 1)
    return virtual


def read_back(disk, block_no):
    disk.empty_block(TEMP_BLOCK)
    disk.read_block(TEMP_BLOCK, block_no)
    return list(disk.blocks[TEMP_BLOCK])


def free_count(disk):
    return sum(get_value(word) == 0 for word in disk.blocks[DISK_FREE_LIST])


def test_load_executable(disk, tmp_path):
    source = tmp_path / "prog.xsm"
    source.write_text("MOV R0, 1\nHALT\n")
    name = load_executable(disk, str(source))
    assert name == "prog.xsm"
    assert XosFile("prog.xsm", BLOCK_SIZE) in disk.list_files()
    block = get_data_blocks(disk, get_inode_entry(disk, name))[0]
    assert read_back(disk, block)[:4] == ["MOV R0,", "1", "HALT", ""]


def test_load_executable_twice_keeps_free_list(disk, tmp_path):
    source = tmp_path / "prog.xsm"
    source.write_text("HALT\n")
    load_executable(disk, str(source))
    before = free_count(disk)
    with pytest.raises(XfsError):
        load_executable(disk, str(source))
    assert free_count(disk) == before


def test_load_missing_executable(disk, tmp_path):
    with pytest.raises(XfsError):
        load_executable(disk, str(tmp_path / "missing.xsm"))


def test_load_data(disk, tmp_path):
    source = tmp_path / "notes.dat"
    source.write_text("hello\nworld\n")
    name = load_data(disk, str(source))
    assert XosFile(name, BLOCK_SIZE) in disk.list_files()
    block = get_data_blocks(disk, get_inode_entry(disk, name))[0]
    assert read_back(disk, block)[:3] == ["hello\n", "world\n", ""]


def test_load_os_resolves_labels(disk, tmp_path):
    source = tmp_path / "os.asm"
    source.write_text("start:\nMOV R0, 1\nJMP start\n")
    load_os(disk, str(source))
    words = read_back(disk, OS_STARTUP_CODE)
    assert words[:4] == [
        "MOV R0,",
        "1",
        f"JMP {MEM_OS_STARTUP_CODE * PAGE_SIZE}",
        "",
    ]


def test_load_code_too_large(disk, tmp_path):
    source = tmp_path / "big.xsm"
    source.write_text("HALT\n" * 300)
    with pytest.raises(XfsError):
        load_code(disk, str(source), INIT_BLOCK, 1)
    assert read_back(disk, INIT_BLOCK)[0] == ""


def test_load_code_missing(disk, tmp_path):
    with pytest.raises(XfsError):
        load_code(disk, str(tmp_path / "none.xsm"), INIT_BLOCK, 1)


def test_load_interrupt_block(disk, tmp_path):
    source = tmp_path / "int.asm"
    source.write_text("IRET\n")
    load_interrupt(disk, str(source), 4)
    assert read_back(disk, INT4)[0] == "IRET"


def test_load_module_block(disk, tmp_path):
    source = tmp_path / "mod.asm"
    source.write_text("RET\n")
    load_module(disk, str(source), 0)
    assert read_back(disk, MOD0)[0] == "RET"
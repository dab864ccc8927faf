"""Loading executables, data files and system code onto the disk."""

from __future__ import annotations

import io
import sys
from typing import TextIO

from .asm_labels import LabelError, collect_labels, resolve_lines
from .disk import (
    BLOCK_SIZE,
    CONSOLE_INT,
    CONSOLE_INT_SIZE,
    DISK_FREE_LIST,
    DISKCONTROLLER_INT,
    DISKCONTROLLER_INT_SIZE,
    EX_HANDLER,
    EX_HANDLER_SIZE,
    FILETYPE_DATA,
    FILETYPE_EXEC,
    IDLE_BLOCK,
    INIT_BLOCK,
    INODE,
    INODE_MAX_BLOCK_NUM,
    INT1,
    INT_SIZE,
    LIBRARY_BLOCK,
    MEM_CONSOLE_INT,
    MEM_DISKCONTROLLER_INT,
    MEM_EX_HANDLER,
    MEM_INT1,
    MEM_INT_SIZE,
    MEM_LIBRARY_PAGE,
    MEM_MOD0,
    MEM_MOD_SIZE,
    MEM_OS_STARTUP_CODE,
    MEM_TIMERINT,
    MOD0,
    MOD_SIZE,
    NO_OF_IDLE_BLOCKS,
    NO_OF_INIT_BLOCKS,
    NO_OF_LIBRARY_BLOCKS,
    NO_OF_SHELL_BLOCKS,
    OS_STARTUP_CODE,
    OS_STARTUP_CODE_SIZE,
    PAGE_SIZE,
    SHELL_BLOCK,
    TEMP_BLOCK,
    TIMERINT,
    TIMERINT_SIZE,
    VirtualDisk,
)
from .diskfiles import (
    ASSEMBLY_CODE,
    DATA_FILE,
    XfsError,
    add_extension,
    clear_disk_blocks,
    data_file_size,
    write_file_block,
)
from .inode import add_inode_entry, find_empty_inode_entry, get_inode_entry
from .paths import expand_path


def _read_text(path: str, message: str) -> str:
    try:
        with open(path, encoding="latin-1", newline="\n") as stream:
            return stream.read()
    except OSError as error:
        raise XfsError(message) from error


def _disk_name(path: str, ext: str) -> str:
    return add_extension(path.rsplit("/", 1)[-1][:15], ext)


def _allocate(disk: VirtualDisk, count: int, message: str) -> list[int]:
    blocks = [-1] * INODE_MAX_BLOCK_NUM
    for index in range(count):
        block_no = disk.find_free_block()
        if block_no is None:
            disk.free_blocks(blocks)
            raise XfsError(message)
        blocks[index] = block_no
    return blocks


def _store_file(
    disk: VirtualDisk,
    name: str,
    blocks: list[int],
    count: int,
    file_type: int,
    kind: int,
    stream: TextIO,
) -> None:
    if get_inode_entry(disk, name) is not None:
        disk.free_blocks(blocks)
        raise XfsError(
            "Disk already contains the file with this name. "
            "Try again with a different name."
        )
    index = find_empty_inode_entry(disk)
    if index is None:
        disk.free_blocks(blocks)
        raise XfsError("No free INODE entry found.")
    disk.commit(DISK_FREE_LIST)
    disk.empty_block(TEMP_BLOCK)
    for block_no in blocks[:count]:
        write_file_block(disk, stream, block_no, kind)
    add_inode_entry(disk, index, file_type, name, count * BLOCK_SIZE, blocks)
    disk.commit(INODE)


def load_executable(disk: VirtualDisk, path: str) -> str:
    """Store an executable on the disk and return its name there."""
    name = _disk_name(path, ".xsm")
    path = expand_path(path)
    text = _read_text(path, f"File {path} not found.")
    count = text.count("\n") // (BLOCK_SIZE // 2) + 1
    if count > INODE_MAX_BLOCK_NUM:
        raise XfsError(f"The size of file exceeds {INODE_MAX_BLOCK_NUM} blocks")
    blocks = _allocate(disk, count, "Insufficient disk space!")
    _store_file(
        disk, name, blocks, count, FILETYPE_EXEC, ASSEMBLY_CODE, io.StringIO(text)
    )
    return name


def load_data(disk: VirtualDisk, path: str) -> str:
    """Store a data file on the disk and return its name there."""
    name = _disk_name(path, ".dat")
    path = expand_path(path)
    text = _read_text(path, f"File '{path}' not found.!")
    stream = io.StringIO(text)
    words = data_file_size(stream)
    count = words // BLOCK_SIZE + (1 if words % BLOCK_SIZE else 0)
    if count > INODE_MAX_BLOCK_NUM:
        raise XfsError(
            f"The size of file exceeds {INODE_MAX_BLOCK_NUM} blocks\n"
            f"The file contains {words} words, an xfs file can have only upto "
            f"{INODE_MAX_BLOCK_NUM * BLOCK_SIZE} words"
        )
    stream.seek(0)
    blocks = _allocate(
        disk, count, "Disk does not have enough space to contain the file."
    )
    _store_file(disk, name, blocks, count, FILETYPE_DATA, DATA_FILE, stream)
    return name


def _load_stream(
    disk: VirtualDisk, stream: TextIO, start_block: int, block_count: int
) -> None:
    filled = True
    for block_no in range(start_block, start_block + block_count):
        filled = write_file_block(disk, stream, block_no, ASSEMBLY_CODE)
        if not filled:
            break
    if filled:
        clear_disk_blocks(disk, start_block, block_count)
        raise XfsError(f"Code exceeds {block_count} block")


def load_code(disk: VirtualDisk, path: str, start_block: int, block_count: int) -> None:
    """Store code in a fixed range of disk blocks.

    Code that does not fit is removed again and XfsError is raised.
    """
    text = _read_text(path, f"File {path} not found.")
    _load_stream(disk, io.StringIO(text), start_block, block_count)


def load_code_with_labels(
    disk: VirtualDisk, path: str, start_block: int, block_count: int, mem_page: int
) -> None:
    """Store code whose labels are resolved for the given memory page."""
    path = expand_path(path)
    text = _read_text(path, "Can't open source file.")
    lines = io.StringIO(text).readlines()
    labels = collect_labels(lines)
    resolved = io.StringIO()
    try:
        for line in resolve_lines(lines, labels, mem_page * PAGE_SIZE):
            resolved.write(line + "\n")
    except LabelError as error:
        print(error, file=sys.stderr)
    resolved.seek(0)
    _load_stream(disk, resolved, start_block, block_count)


def load_init(disk: VirtualDisk, path: str) -> None:
    """Store the INIT program."""
    load_code(disk, path, INIT_BLOCK, NO_OF_INIT_BLOCKS)


def load_idle(disk: VirtualDisk, path: str) -> None:
    """Store the idle program."""
    load_code(disk, path, IDLE_BLOCK, NO_OF_IDLE_BLOCKS)


def load_shell(disk: VirtualDisk, path: str) -> None:
    """Store the shell program."""
    load_code(disk, path, SHELL_BLOCK, NO_OF_SHELL_BLOCKS)


def load_library(disk: VirtualDisk, path: str) -> None:
    """Store the library."""
    load_code_with_labels(
        disk, path, LIBRARY_BLOCK, NO_OF_LIBRARY_BLOCKS, MEM_LIBRARY_PAGE
    )


def load_os(disk: VirtualDisk, path: str) -> None:
    """Store the OS startup code."""
    load_code_with_labels(
        disk, path, OS_STARTUP_CODE, OS_STARTUP_CODE_SIZE, MEM_OS_STARTUP_CODE
    )


def load_timer(disk: VirtualDisk, path: str) -> None:
    """Store the timer interrupt routine."""
    load_code_with_labels(disk, path, TIMERINT, TIMERINT_SIZE, MEM_TIMERINT)


def load_disk_interrupt(disk: VirtualDisk, path: str) -> None:
    """Store the disk controller interrupt routine."""
    load_code_with_labels(
        disk, path, DISKCONTROLLER_INT, DISKCONTROLLER_INT_SIZE, MEM_DISKCONTROLLER_INT
    )


def load_console_interrupt(disk: VirtualDisk, path: str) -> None:
    """Store the console interrupt routine."""
    load_code_with_labels(disk, path, CONSOLE_INT, CONSOLE_INT_SIZE, MEM_CONSOLE_INT)


def load_interrupt(disk: VirtualDisk, path: str, number: int) -> None:
    """Store interrupt routine ``number``."""
    load_code_with_labels(
        disk,
        path,
        (number - 1) * INT_SIZE + INT1,
        INT_SIZE,
        (number - 1) * MEM_INT_SIZE + MEM_INT1,
    )


def load_module(disk: VirtualDisk, path: str, number: int) -> None:
    """Store module ``number``."""
    load_code_with_labels(
        disk,
        path,
        number * MOD_SIZE + MOD0,
        MOD_SIZE,
        number * MEM_MOD_SIZE + MEM_MOD0,
    )


def load_exhandler(disk: VirtualDisk, path: str) -> None:
    """Store the exception handler."""
    load_code_with_labels(disk, path, EX_HANDLER, EX_HANDLER_SIZE, MEM_EX_HANDLER)
"""Reports on the disk and copies of its contents to host files."""

from __future__ import annotations

from itertools import takewhile

from .disk import (
    DISK_FREE_LIST,
    INODE,
    NO_OF_DISK_BLOCKS,
    NO_OF_FREE_LIST_BLOCKS,
    NO_OF_INODE_BLOCKS,
    NO_OF_ROOTFILE_BLOCKS,
    ROOTFILE,
    TEMP_BLOCK,
    VirtualDisk,
    get_value,
)
from .diskfiles import XfsError
from .inode import get_data_blocks, get_inode_entry
from .paths import expand_path


def _block_words(disk: VirtualDisk, block_no: int) -> list[str]:
    """Read one disk block through the scratch block and return its words."""
    disk.empty_block(TEMP_BLOCK)
    disk.read_block(TEMP_BLOCK, block_no)
    words = list(disk.blocks[TEMP_BLOCK])
    disk.empty_block(TEMP_BLOCK)
    return words


def _file_blocks(disk: VirtualDisk, name: str) -> list[int]:
    disk.check_exists()
    location = get_inode_entry(disk, name)
    if location is None:
        raise XfsError(f"File '{name}' not found!")
    return list(takewhile(lambda block_no: block_no > 0, get_data_blocks(disk, location)))


def _open_output(path: str):
    try:
        return open(path, "w", encoding="latin-1", newline="\n")
    except OSError as error:
        raise XfsError(f"File '{path}' not found!") from error


def list_files_report(disk: VirtualDisk) -> str:
    """Return the listing of the files on the disk."""
    files = disk.list_files()
    if not files:
        return "The disk contains no files.\n"
    return "".join(f"Filename: {entry.name} Filesize {entry.size}\n" for entry in files)


def file_contents(disk: VirtualDisk, name: str) -> str:
    """Return the non-empty words of a file, one per line."""
    return "".join(
        f"{word}\t\n"
        for block_no in _file_blocks(disk, name)
        for word in _block_words(disk, block_no)
        if word
    )


def copy_blocks_to_file(disk: VirtualDisk, start: int, end: int, path: str) -> None:
    """Write every word of disk blocks ``start`` to ``end`` to a host file."""
    disk.check_exists()
    path = expand_path(path)
    with _open_output(path) as output:
        for block_no in range(start, end + 1):
            for word in _block_words(disk, block_no):
                output.write(f"{word}\n")


def free_list_report(disk: VirtualDisk) -> str:
    """Return the free list entries and the number of free blocks."""
    disk.check_exists()
    lines = []
    free = 0
    for block in disk.blocks[DISK_FREE_LIST : DISK_FREE_LIST + NO_OF_FREE_LIST_BLOCKS]:
        for index, word in enumerate(block):
            lines.append(f"{index} \t - \t {word}  \n")
            if get_value(word) == 0:
                free += 1
    lines.append(f"\nNo of Free Blocks = {free}")
    lines.append(f"\nTotal no of Blocks = {NO_OF_DISK_BLOCKS}\n")
    return "".join(lines)


def dump_root_file(disk: VirtualDisk, path: str) -> None:
    """Copy the root file blocks to a host file."""
    copy_blocks_to_file(disk, ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS - 1, path)


def dump_inode_table(disk: VirtualDisk, path: str) -> None:
    """Copy the inode table blocks to a host file."""
    copy_blocks_to_file(disk, INODE, INODE + NO_OF_INODE_BLOCKS - 1, path)


def export_file(disk: VirtualDisk, name: str, path: str) -> None:
    """Write the contents of a disk file to a host file."""
    blocks = _file_blocks(disk, name)
    path = expand_path(path)
    with _open_output(path) as output:
        for block_no in blocks:
            output.write("".join(word for word in _block_words(disk, block_no) if word))
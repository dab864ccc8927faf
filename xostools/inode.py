"""Entries of the inode table and the root file in the memory copy of the disk."""

from __future__ import annotations

from typing import Sequence

from .disk import (
    BLOCK_SIZE,
    INODE,
    INODE_ENTRY_DATABLOCK,
    INODE_ENTRY_FILENAME,
    INODE_ENTRY_FILESIZE,
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
    get_value,
)


def _entry_offsets():
    """Yield (block, word index of the entry start, relative entry location)."""
    for offset in range(NO_OF_INODE_BLOCKS):
        for start in range(0, BLOCK_SIZE, INODE_ENTRY_SIZE):
            yield INODE + offset, start, offset * BLOCK_SIZE + start


def _root_location(inode_location: int) -> int:
    return inode_location // INODE_ENTRY_SIZE * ROOTFILE_ENTRY_SIZE


def find_empty_inode_entry(disk: VirtualDisk) -> int | None:
    """Return the location of the first unused inode entry, or None."""
    for block_no, start, location in _entry_offsets():
        if get_value(disk.blocks[block_no][start + INODE_ENTRY_FILENAME]) == -1:
            return location
    return None


def add_root_file_entry(
    disk: VirtualDisk, index: int, file_type: int, name: str, size: int
) -> None:
    """Record a file's name, size and type in the root file at ``index``."""
    base = ROOTFILE * BLOCK_SIZE + index
    disk.store_string_at(base + ROOTFILE_ENTRY_FILENAME, name)
    disk.store_value_at(base + ROOTFILE_ENTRY_FILESIZE, size)
    disk.store_value_at(base + ROOTFILE_ENTRY_FILETYPE, file_type)


def add_inode_entry(
    disk: VirtualDisk,
    index: int,
    file_type: int,
    name: str,
    size: int,
    blocks: Sequence[int],
) -> None:
    """Record a file in the inode table at ``index`` and in the root file.

    Missing data block numbers are stored as -1.
    """
    base = INODE * BLOCK_SIZE + index
    disk.store_value_at(base + INODE_ENTRY_FILETYPE, file_type)
    disk.store_string_at(base + INODE_ENTRY_FILENAME, name)
    disk.store_value_at(base + INODE_ENTRY_FILESIZE, size)
    data_blocks = list(blocks)[:INODE_NUM_DATA_BLOCKS]
    data_blocks += [-1] * (INODE_NUM_DATA_BLOCKS - len(data_blocks))
    for offset, block_no in enumerate(data_blocks):
        disk.store_value_at(base + INODE_ENTRY_DATABLOCK + offset, block_no)
    add_root_file_entry(disk, _root_location(index), file_type, name, size)


def remove_root_file_entry(disk: VirtualDisk, location: int) -> None:
    """Mark the root file entry at ``location`` unused."""
    base = ROOTFILE * BLOCK_SIZE + location
    disk.store_value_at(base + ROOTFILE_ENTRY_FILETYPE, -1)
    disk.store_value_at(base + ROOTFILE_ENTRY_FILENAME, -1)
    disk.store_value_at(base + ROOTFILE_ENTRY_FILESIZE, 0)


def remove_inode_entry(disk: VirtualDisk, location: int) -> None:
    """Mark the inode entry at ``location`` and its root file entry unused."""
    base = INODE * BLOCK_SIZE + location
    disk.store_value_at(base + INODE_ENTRY_FILETYPE, -1)
    disk.store_value_at(base + INODE_ENTRY_FILENAME, -1)
    disk.store_value_at(base + INODE_ENTRY_FILESIZE, 0)
    for offset in range(INODE_NUM_DATA_BLOCKS):
        disk.store_value_at(base + INODE_ENTRY_DATABLOCK + offset, -1)
    remove_root_file_entry(disk, _root_location(location))


def get_inode_entry(disk: VirtualDisk, name: str | None) -> int | None:
    """Return the location of the inode entry for a file name, or None."""
    if name is None:
        return None
    for block_no, start, location in _entry_offsets():
        word = disk.blocks[block_no][start + INODE_ENTRY_FILENAME]
        if word == name and get_value(word) != -1:
            return location
    return None


def get_data_blocks(disk: VirtualDisk, location: int) -> list[int]:
    """Return the data block numbers of the inode entry at ``location``."""
    base = INODE * BLOCK_SIZE + location + INODE_ENTRY_DATABLOCK
    return [disk.get_value_at(base + offset) for offset in range(INODE_NUM_DATA_BLOCKS)]
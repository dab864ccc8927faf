"""The XFS disk file and the in-memory copy of its system blocks."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from os import PathLike

# Machine constants.
XSM_WORD_SIZE = 16
XSM_INSTRUCTION_SIZE = 2
XSM_MEMORY_NUMPAGES = 128
XSM_PAGE_SIZE = 512

# Disk geometry.
BLOCK_SIZE = 512
WORD_SIZE = 16
BLOCK_BYTES = BLOCK_SIZE * WORD_SIZE

DISK_NAME = "disk.xfs"
BOOT_BLOCK = 0
DISK_NO_FORMAT = 0
DISK_FORMAT = 1

# Block layout of the disk.
OS_STARTUP_CODE = 0
DISK_FREE_LIST = 2
INODE = 3
ROOTFILE = 5
INIT_BLOCK = 7
SHELL_BLOCK = 9
IDLE_BLOCK = 11
LIBRARY_BLOCK = 13
EX_HANDLER = 15
TIMERINT = 17
DISKCONTROLLER_INT = 19
CONSOLE_INT = 21
INT0 = EX_HANDLER
INT1 = TIMERINT
INT2 = DISKCONTROLLER_INT
INT3 = CONSOLE_INT
INT4 = 23
MOD0 = 53

OS_STARTUP_CODE_SIZE = 2
NO_OF_FREE_LIST_BLOCKS = 1
NO_OF_ROOTFILE_BLOCKS = 1
NO_OF_INIT_BLOCKS = 4
NO_OF_SHELL_BLOCKS = 2
NO_OF_IDLE_BLOCKS = 2
NO_OF_LIBRARY_BLOCKS = 2
EX_HANDLER_SIZE = 2
TIMERINT_SIZE = 2
DISKCONTROLLER_INT_SIZE = 2
CONSOLE_INT_SIZE = 2
INT1_SIZE = TIMERINT_SIZE
INT_SIZE = 2
MOD_SIZE = 2

NO_OF_INODE_BLOCKS = 2
NO_OF_INTERRUPTS = 18
NO_OF_MODULES = 8

DATA_START_BLOCK = 69
NO_OF_DATA_BLOCKS = 187
SWAP_START_BLOCK = 256
NO_OF_SWAP_BLOCKS = 256
NO_OF_DISK_BLOCKS = 512
DISK_SIZE = NO_OF_DISK_BLOCKS * BLOCK_SIZE

# Inode table entries.
INODE_MAX_FILE_NUM = 60
INODE_MAX_BLOCK_NUM = 4
INODE_ENTRY_FILETYPE = 0
INODE_ENTRY_FILENAME = 1
INODE_ENTRY_FILESIZE = 2
INODE_ENTRY_USERID = 3
INODE_ENTRY_PERMISSION = 4
INODE_ENTRY_DATABLOCK = 8
INODE_NUM_DATA_BLOCKS = INODE_MAX_BLOCK_NUM
INODE_ENTRY_SIZE = 16
INODE_SIZE = NO_OF_INODE_BLOCKS * BLOCK_SIZE

FILETYPE_ROOT = 1
FILETYPE_DATA = 2
FILETYPE_EXEC = 3

# Root file entries.
ROOTFILE_ENTRY_FILENAME = 0
ROOTFILE_ENTRY_FILESIZE = 1
ROOTFILE_ENTRY_FILETYPE = 2
ROOTFILE_ENTRY_USERNAME = 3
ROOTFILE_ENTRY_PERMISSION = 4
ROOTFILE_ENTRY_SIZE = 8

# The memory copy holds the system blocks plus one scratch block.
NO_BLOCKS_TO_COPY = 69
EXTRA_BLOCKS = 1
TEMP_BLOCK = 69

# Memory pages the system code is placed in.
MEM_INIT_BASIC_BLOCK = 65
MEM_OS_STARTUP_CODE = 1
MEM_EX_HANDLER = 2
MEM_INT1 = 4
MEM_TIMERINT = 4
MEM_DISKCONTROLLER_INT = 6
MEM_CONSOLE_INT = 8
MEM_MOD0 = 40
MEM_INIT_PAGE = 65
MEM_LIBRARY_PAGE = 63
MEM_INT_SIZE = 2
MEM_MOD_SIZE = 2
PAGE_SIZE = 512

_INTEGER_PREFIX = re.compile(r"\s*([+-]?\d+)")


class DiskError(Exception):
    """An error while using the disk file."""

    default_message = "Disk error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class DiskOpenError(DiskError):
    """The disk file could not be opened."""

    default_message = "Unable to open disk file"


class DiskCreateError(DiskError):
    """The disk file could not be created."""

    default_message = "Failed to create disk file"


@dataclass(frozen=True)
class XosFile:
    """A file listed in the inode table."""

    name: str
    size: int


def get_value(word: str) -> int:
    """Read the integer at the start of a word; 0 if there is none."""
    match = _INTEGER_PREFIX.match(word)
    return int(match.group(1)) if match else 0


def _encode(word: str) -> bytes:
    return word.encode("latin-1", errors="replace")[:WORD_SIZE].ljust(WORD_SIZE, b"\0")


def _decode(chunk: bytes) -> str:
    return chunk.split(b"\0", 1)[0].decode("latin-1")


def _empty_block() -> list[str]:
    return [""] * BLOCK_SIZE


def _table_defaults(entry_size: int, size_field: int) -> list[str]:
    block = ["-1"] * BLOCK_SIZE
    block[size_field::entry_size] = ["0"] * (BLOCK_SIZE // entry_size)
    return block


class VirtualDisk:
    """The disk file together with a memory copy of its system blocks.

    ``blocks`` holds one list of word strings for each block copied into
    memory; the last one is the scratch block ``TEMP_BLOCK``.
    """

    def __init__(self, path: str | PathLike = DISK_NAME):
        self.path = os.fspath(path)
        self.blocks: list[list[str]] = [
            _empty_block() for _ in range(NO_BLOCKS_TO_COPY + EXTRA_BLOCKS)
        ]

    def _open(self, mode: str):
        try:
            return open(self.path, mode)
        except OSError as error:
            raise DiskOpenError() from error

    def read_block(self, virt_block: int, file_block: int) -> None:
        """Copy block ``file_block`` of the disk file into memory block ``virt_block``."""
        with self._open("rb") as stream:
            stream.seek(BLOCK_BYTES * file_block)
            data = stream.read(BLOCK_BYTES)
        block = self.blocks[virt_block]
        starts = range(0, len(data) - WORD_SIZE + 1, WORD_SIZE)
        for index, start in enumerate(starts):
            block[index] = _decode(data[start : start + WORD_SIZE])

    def write_block(self, virt_block: int, file_block: int) -> None:
        """Write memory block ``virt_block`` to block ``file_block`` of the disk file."""
        payload = b"".join(_encode(word) for word in self.blocks[virt_block])
        with self._open("r+b") as stream:
            stream.seek(BLOCK_BYTES * file_block)
            stream.write(payload)

    def create_file(self, format: int) -> None:
        """Create the disk file; with ``DISK_FORMAT`` an existing one is emptied."""
        mode = "wb" if format == DISK_FORMAT else "ab"
        try:
            with open(self.path, mode):
                pass
        except OSError as error:
            raise DiskCreateError() from error

    def check_exists(self) -> None:
        """Raise DiskOpenError unless the disk file can be opened."""
        with self._open("rb"):
            pass

    def empty_block(self, block_no: int) -> None:
        """Set every word of a memory block to the empty string."""
        self.blocks[block_no] = _empty_block()

    def free_blocks(self, blocks) -> None:
        """Mark disk blocks free and blank them on the disk file.

        Stops at the first entry that is -1, 0 or None.  The free list is
        changed in memory only.
        """
        for block_no in blocks:
            if block_no is None or block_no in (-1, 0):
                break
            self.store_value_at(DISK_FREE_LIST * BLOCK_SIZE + block_no, 0)
            self.empty_block(TEMP_BLOCK)
            self.write_block(TEMP_BLOCK, block_no)

    def find_free_block(self) -> int | None:
        """Claim the first free disk block and return its number, or None."""
        free_list = range(DISK_FREE_LIST, DISK_FREE_LIST + NO_OF_FREE_LIST_BLOCKS)
        for offset, block_no in enumerate(free_list):
            block = self.blocks[block_no]
            for index, word in enumerate(block):
                if get_value(word) == 0:
                    block[index] = "1"
                    return offset * BLOCK_SIZE + index
        return None

    def set_defaults(self, structure: int) -> None:
        """Fill the free list, inode table or root file with its initial values."""
        if structure == DISK_FREE_LIST:
            words = [
                "0" if DATA_START_BLOCK <= entry < NO_OF_DISK_BLOCKS else "1"
                for entry in range(NO_OF_FREE_LIST_BLOCKS * BLOCK_SIZE)
            ]
            for offset in range(NO_OF_FREE_LIST_BLOCKS):
                start = offset * BLOCK_SIZE
                self.blocks[DISK_FREE_LIST + offset] = words[start : start + BLOCK_SIZE]
        elif structure == INODE:
            for offset in range(NO_OF_INODE_BLOCKS):
                self.blocks[INODE + offset] = _table_defaults(
                    INODE_ENTRY_SIZE, INODE_ENTRY_FILESIZE
                )
        elif structure == ROOTFILE:
            for offset in range(NO_OF_ROOTFILE_BLOCKS):
                self.blocks[ROOTFILE + offset] = _table_defaults(
                    ROOTFILE_ENTRY_SIZE, ROOTFILE_ENTRY_FILESIZE
                )
        else:
            raise ValueError(f"unknown disk structure {structure}")

    def commit(self, structure: int) -> None:
        """Write a structure's memory copy to the disk file.

        Committing the inode table commits the root file as well.
        """
        if structure == DISK_FREE_LIST:
            blocks = range(DISK_FREE_LIST, DISK_FREE_LIST + NO_OF_FREE_LIST_BLOCKS)
        elif structure == INODE:
            blocks = [
                *range(INODE, INODE + NO_OF_INODE_BLOCKS),
                *range(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS),
            ]
        elif structure == ROOTFILE:
            blocks = range(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS)
        else:
            raise ValueError(f"unknown disk structure {structure}")
        for block_no in blocks:
            self.write_block(block_no, block_no)

    def list_files(self) -> list[XosFile]:
        """Return the files named in the inode table, in table order."""
        self.check_exists()
        files = []
        for block in self.blocks[INODE : INODE + NO_OF_INODE_BLOCKS]:
            for start in range(0, BLOCK_SIZE, INODE_ENTRY_SIZE):
                name = block[start + INODE_ENTRY_FILENAME]
                if get_value(name) != -1:
                    size = get_value(block[start + INODE_ENTRY_FILESIZE])
                    files.append(XosFile(name, size))
        return files

    def load(self) -> None:
        """Read the free list, inode table and root file from the disk file."""
        for first, count in (
            (DISK_FREE_LIST, NO_OF_FREE_LIST_BLOCKS),
            (INODE, NO_OF_INODE_BLOCKS),
            (ROOTFILE, NO_OF_ROOTFILE_BLOCKS),
        ):
            for block_no in range(first, first + count):
                self.read_block(block_no, block_no)

    def clear(self) -> None:
        """Blank the whole memory copy."""
        for block_no in range(len(self.blocks)):
            self.empty_block(block_no)

    def get_value_at(self, address: int) -> int:
        """Return the integer stored at a word address of the memory copy."""
        block_no, index = divmod(address, BLOCK_SIZE)
        return get_value(self.blocks[block_no][index])

    def store_value_at(self, address: int, num: int) -> None:
        """Store an integer at a word address of the memory copy."""
        block_no, index = divmod(address, BLOCK_SIZE)
        self.blocks[block_no][index] = str(num)

    def store_string_at(self, address: int, value: str) -> None:
        """Store a string at a word address of the memory copy."""
        block_no, index = divmod(address, BLOCK_SIZE)
        self.blocks[block_no][index] = value
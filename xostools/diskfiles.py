"""Writing files into disk blocks, formatting and deleting."""

from __future__ import annotations

import string
from typing import TextIO

from .disk import (
    BLOCK_SIZE,
    CONSOLE_INT,
    CONSOLE_INT_SIZE,
    DISK_FREE_LIST,
    DISK_NO_FORMAT,
    DISKCONTROLLER_INT,
    DISKCONTROLLER_INT_SIZE,
    EX_HANDLER,
    EX_HANDLER_SIZE,
    FILETYPE_ROOT,
    INIT_BLOCK,
    INODE,
    INT1,
    INT1_SIZE,
    NO_OF_INIT_BLOCKS,
    NO_OF_ROOTFILE_BLOCKS,
    OS_STARTUP_CODE,
    OS_STARTUP_CODE_SIZE,
    ROOTFILE,
    TEMP_BLOCK,
    TIMERINT,
    TIMERINT_SIZE,
    XSM_WORD_SIZE,
    VirtualDisk,
)
from .inode import add_inode_entry, get_data_blocks, get_inode_entry, remove_inode_entry

ASSEMBLY_CODE = 0
DATA_FILE = 1

_CODE_LINE_LIMIT = 100
_DATA_LINE_LIMIT = 16
_C_WHITESPACE = " \t\n\v\f\r"


class XfsError(Exception):
    """An XFS operation could not be carried out."""


def add_extension(name: str, ext: str) -> str:
    """Give a file name the extension, keeping the result under 16 characters."""
    if len(name) >= 16:
        return name[:11] + ext
    if name[-len(ext):] != ext:
        name += ext
        if len(name) >= 16:
            return name[:11] + ext
    return name


def _read_line(stream: TextIO, size: int) -> tuple[str, bool]:
    """Read at most ``size - 1`` characters of a line; report end of file."""
    limit = size - 1
    text = stream.readline(limit)
    at_end = text == "" or (not text.endswith("\n") and len(text) < limit)
    return text, at_end


def _strtok(text: str, pos: int, delimiters: str) -> tuple[str | None, int]:
    while pos < len(text) and text[pos] in delimiters:
        pos += 1
    if pos >= len(text):
        return None, pos
    end = pos
    while end < len(text) and text[end] not in delimiters:
        end += 1
    return text[pos:end], min(end + 1, len(text))


def _trim(text: str) -> str:
    return text.strip(_C_WHITESPACE)


def _clip(text: str) -> str:
    """Shorten a code line; string literals are cut to fit one word."""
    quote = text.find('"')
    if quote < 0 or len(text) - quote <= 16:
        return text[:31]
    return text[: quote + 14] + '"'


def _code_words(buffer: str) -> list[str]:
    """Split one code line into the words it occupies on disk."""
    if len(buffer) <= 1:
        return []
    if buffer.endswith("\n"):
        buffer = buffer[:-1]
    instr, pos = _strtok(buffer, 0, " ")
    if instr is None:
        return []
    arg1, pos = _strtok(buffer, pos, ",")
    arg2, pos = _strtok(buffer, pos, "")
    name = _trim(instr)
    first = _trim(arg1) if arg1 is not None else None
    second = _trim(arg2) if arg2 is not None else None
    if name[:1] and name[0] in string.digits:
        return [name]
    if first is not None:
        if second is not None:
            first += ","
        return [f"{name} {first}", second if second is not None else ""]
    return [instr, ""]


def _fill_code(words: list[str], stream: TextIO) -> bool:
    count = 0
    previous = ""
    while count < BLOCK_SIZE:
        text, at_end = _read_line(stream, _CODE_LINE_LIMIT)
        if at_end:
            # The word after the code keeps the text of the last read.
            words[count] = text or previous
            return False
        previous = text
        for word in _code_words(_clip(text)):
            if count < BLOCK_SIZE:
                words[count] = word
            count += 1
    return True


def _fill_data(words: list[str], stream: TextIO) -> bool:
    for index in range(BLOCK_SIZE):
        text, at_end = _read_line(stream, _DATA_LINE_LIMIT)
        if at_end:
            words[index] = ""
            return False
        words[index] = text
    return True


def write_file_block(disk: VirtualDisk, stream: TextIO, block_num: int, kind: int) -> bool:
    """Fill one disk block from a stream of code or data.

    Returns True if the block was filled before the stream ended.
    """
    disk.empty_block(TEMP_BLOCK)
    words = disk.blocks[TEMP_BLOCK]
    if kind == ASSEMBLY_CODE:
        filled = _fill_code(words, stream)
    elif kind == DATA_FILE:
        filled = _fill_data(words, stream)
    else:
        raise ValueError(f"unknown file kind {kind}")
    disk.write_block(TEMP_BLOCK, block_num)
    return filled


def data_file_size(stream: TextIO) -> int:
    """Return the number of words a data file takes on the disk."""
    stream.seek(0)
    count = 0
    while True:
        _, at_end = _read_line(stream, XSM_WORD_SIZE)
        count += 1
        if at_end:
            return count


def format_disk(disk: VirtualDisk, format: int) -> None:
    """Create the disk file and, if ``format`` is true, lay out an empty file system."""
    disk.create_file(DISK_NO_FORMAT)
    if not format:
        return
    disk.clear()
    disk.set_defaults(DISK_FREE_LIST)
    disk.commit(DISK_FREE_LIST)
    disk.set_defaults(INODE)
    disk.set_defaults(ROOTFILE)
    root_blocks = [ROOTFILE + offset for offset in range(NO_OF_ROOTFILE_BLOCKS)]
    add_inode_entry(
        disk, 0, FILETYPE_ROOT, "root", NO_OF_ROOTFILE_BLOCKS * BLOCK_SIZE, root_blocks
    )
    disk.commit(INODE)
    disk.commit(ROOTFILE)


def delete_file(disk: VirtualDisk, name: str) -> None:
    """Remove a file from the disk and free its blocks."""
    disk.check_exists()
    location = get_inode_entry(disk, name)
    if location is None:
        raise XfsError(f"File '{name}' not found!")
    disk.free_blocks(get_data_blocks(disk, location))
    remove_inode_entry(disk, location)
    disk.commit(INODE)
    disk.commit(DISK_FREE_LIST)


def clear_disk_blocks(disk: VirtualDisk, start: int, count: int) -> None:
    """Blank ``count`` disk blocks starting at ``start``."""
    disk.empty_block(TEMP_BLOCK)
    for block_no in range(start, start + count):
        disk.write_block(TEMP_BLOCK, block_no)


def delete_init(disk: VirtualDisk) -> None:
    """Remove the INIT code from the disk."""
    clear_disk_blocks(disk, INIT_BLOCK, NO_OF_INIT_BLOCKS)


def delete_os(disk: VirtualDisk) -> None:
    """Remove the OS startup code from the disk."""
    clear_disk_blocks(disk, OS_STARTUP_CODE, OS_STARTUP_CODE_SIZE)


def delete_timer(disk: VirtualDisk) -> None:
    """Remove the timer interrupt routine from the disk."""
    clear_disk_blocks(disk, TIMERINT, TIMERINT_SIZE)


def delete_disk_interrupt(disk: VirtualDisk) -> None:
    """Remove the disk controller interrupt routine from the disk."""
    clear_disk_blocks(disk, DISKCONTROLLER_INT, DISKCONTROLLER_INT_SIZE)


def delete_console_interrupt(disk: VirtualDisk) -> None:
    """Remove the console interrupt routine from the disk."""
    clear_disk_blocks(disk, CONSOLE_INT, CONSOLE_INT_SIZE)


def delete_interrupt(disk: VirtualDisk, number: int) -> None:
    """Remove interrupt routine ``number`` from the disk."""
    clear_disk_blocks(disk, (number - 1) * INT1_SIZE + INT1, INT1_SIZE)


def delete_exhandler(disk: VirtualDisk) -> None:
    """Remove the exception handler from the disk."""
    clear_disk_blocks(disk, EX_HANDLER, EX_HANDLER_SIZE)
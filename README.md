# xostools

A Python library for the XOS teaching operating system. It works with
`disk.xfs`, the XFS disk image of the XSM machine: it creates and formats
the image, loads executables, data files and system code onto it, removes
them again, and reports on or exports what it holds. It also carries a few
helpers for compiling SPL programs to XSM assembly.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Working with a disk image

```python
from xostools.disk import VirtualDisk
from xostools.diskfiles import format_disk, delete_file
from xostools.loaders import load_executable, load_data, load_os, load_interrupt
from xostools.browse import list_files_report, file_contents, export_file

disk = VirtualDisk("disk.xfs")        # the default path is "disk.xfs"
format_disk(disk, True)               # create the file and lay out an empty file system

name = load_executable(disk, "program.xsm")   # returns the name on the disk
load_data(disk, "numbers.dat")
load_os(disk, "os_startup.xsm")
load_interrupt(disk, "int7.xsm", 7)

print(list_files_report(disk))
print(file_contents(disk, name))
export_file(disk, "numbers.dat", "out.dat")
delete_file(disk, "numbers.dat")
```

To work with an existing image, call `disk.load()` first; it reads the free
list, inode table and root file into the memory copy.

### Modules

- `xostools.disk` – the `VirtualDisk` class: the disk file plus a memory
  copy of its system blocks (`read_block`, `write_block`, `create_file`,
  `find_free_block`, `free_blocks`, `set_defaults`, `commit`, `list_files`,
  `load`, `clear`, ...), the disk layout constants, `XosFile`, and the
  errors `DiskError`, `DiskOpenError` and `DiskCreateError`.
- `xostools.inode` – finding, adding and removing entries of the inode
  table and the root file.
- `xostools.diskfiles` – `format_disk`, `delete_file`, writing code or data
  into a block (`write_file_block`), `clear_disk_blocks` and the
  `delete_init`, `delete_os`, `delete_timer`, `delete_disk_interrupt`,
  `delete_console_interrupt`, `delete_interrupt` and `delete_exhandler`
  helpers. Failures raise `XfsError`.
- `xostools.loaders` – `load_executable` and `load_data` store files named
  in the inode table; `load_init`, `load_idle`, `load_shell`, `load_library`,
  `load_os`, `load_timer`, `load_disk_interrupt`, `load_console_interrupt`,
  `load_interrupt`, `load_module` and `load_exhandler` store code in its
  fixed blocks. Library, OS, interrupt, exception handler and module code
  has its jump and call labels resolved to absolute addresses for the
  memory page it is loaded into. Code that does not fit its blocks is
  removed again and `XfsError` is raised.
- `xostools.browse` – `list_files_report`, `file_contents`,
  `free_list_report`, `copy_blocks_to_file`, `dump_root_file`,
  `dump_inode_table` and `export_file`.
- `xostools.asm_labels` – label resolution for XSM assembly:
  `collect_labels`, `resolve_lines` and `resolve_file`; an unknown label
  raises `LabelError`.

Host paths given to the loaders and export functions may start with an
environment variable, as in `$HOME/programs/a.xsm`.

## SPL helpers

- `xostools.registers` – `register_name` gives the assembly name of a
  register number (`register_name(24) == "BP"`), and `is_allowed_register`
  tells whether a program may use a register (R0 to R15).
- `xostools.paths` – `expand_path`, `remove_extension` and
  `output_file_name` (`output_file_name("prog.spl") == "prog.xsm"`).
- `xostools.spl_labels` – `LabelRegistry` makes fresh `_L<n>` labels,
  records declared labels (redeclaring one raises `SplError`) and keeps the
  stack of enclosing loops used by `break` and `continue`.

## What is not included

The package has no command-line program: there is no interactive shell or
command runner for the disk image; use the functions above from Python.
It has no SPL parser and no SPL code generator either, so it cannot turn
SPL source into XSM assembly on its own.
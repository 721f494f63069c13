# xfskit

Tools for `disk.xfs`, the disk image of the XSM teaching machine. xfskit
formats the image. It loads OS startup code, interrupt routines, the
exception handler, modules, the INIT, shell, idle and library programs,
executables and data files onto the image. It can also list and remove
files and export file contents and raw blocks to ordinary files.

It also provides machine-side building blocks:

- `Word`: a 16-character machine word.
- `Memory`: paged memory with page-table address translation.
- `RegisterFile`: the machine's register file.
- `MachineDisk`: an in-memory copy of the disk that is written back to its file.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The command interface

```
xfs-interface
```

With no arguments, `xfs-interface` prints a banner and starts a `# ` prompt. Where Python's `readline` module is available, the prompt has tab completion for:

- commands
- `load` options
- `--int=` values
- module numbers
- `dump` options
- file names on the disk

The prompt ends on `exit` or end of input.

If you give arguments, they are joined into one command, which runs once:

```
xfs-interface fdisk
xfs-interface load --os os_startup.xsm
xfs-interface load --int=timer timer.xsm
xfs-interface load --int=7 int7.xsm
xfs-interface load --exhandler exhandler.xsm
xfs-interface load --module 0 mod0.xsm
xfs-interface load --init init.xsm
xfs-interface load --exec prog.xsm
xfs-interface load --data notes.dat
xfs-interface ls
xfs-interface cat notes.dat
xfs-interface export notes.dat out.txt
xfs-interface rm prog.xsm
xfs-interface df
xfs-interface copy 3 4 inode.txt
xfs-interface dump --rootfile
xfs-interface dump --inodeusertable
xfs-interface run commands.txt
```

Type `help` for the full list of commands.

**The disk image.** The image is always `disk.xfs` in the current directory. Run `fdisk` first to create and format it.

**Error messages.** Errors such as a missing file, a full disk or a duplicate name are printed as messages. They do not stop the interface.

**Executable and data files.**
- Names are at most 12 characters.
- Names must end in `.xsm` for `--exec` or `.dat` for `--data`.
- A file may take up to 4 blocks of 512 words.
- A file named `root` cannot be removed.

**Labels.** Code loaded with `--os`, `--exhandler`, `--int` or `--module` may use labels (`loop:` lines). Targets of `JMP`, `CALL`, `JZ` and `JNZ` that name a label are replaced by absolute addresses, computed from the memory page the code is placed in. An undefined label stops the load.

**Region size.** Code that does not fit its fixed region is not kept: the region is blanked and an error is reported.

**Dump output.** `dump` writes `rootfile.txt` or `inodeusertable.txt` in the current directory.

**Environment variables in paths.** In UNIX paths, a first component such as `$HOME` is replaced by the value of that environment variable.

## Using it from Python

```python
from xfskit.disk import Disk
from xfskit.filesystem import FileSystem
from xfskit.layout import region, interrupt_region, module_region

fs = FileSystem(Disk("disk.xfs"))
fs.format(True)
fs.load_region(region("os"), "os_startup.xsm")
fs.load_region(interrupt_region(7), "int7.xsm")
fs.load_region(module_region(0), "mod0.xsm")
fs.load_data("notes.dat")
for entry in fs.files():
    print(entry.name, entry.size)
```

`FileSystem` methods raise `xfskit.disk.XfsError` on failure. Reports from `list_files`, `cat` and `free_list_report` go to the `out` stream given to `FileSystem`, which is standard output by default.

The lower layers can be used on their own:

| Name | What it does |
| --- | --- |
| `xfskit.labels.resolve_labels(lines, base_address)` | Rewrites label references in assembly lines. |
| `xfskit.inode` | Reads and edits inode-table and root-file entries of a `Disk`. |
| `xfskit.word.Word` | Holds one machine word, read as a number or a string. |
| `xfskit.memory.Memory` | Maps logical addresses through a page table. Raises `PageFault`, `WriteViolation` or `IllegalPage` when translation fails. |
| `xfskit.registers.RegisterFile` | Holds the registers `R0`–`R19`, `P0`–`P3`, `BP`, `SP`, `IP`, `PTBR`, `PTLR`, `EIP`, `EC`, `EPN` and `EMA`. Names are looked up without regard to case. |
| `xfskit.storage.MachineDisk` | Loads a whole disk file into words. Its `close()` writes it back to the file. |

## What xfskit does not do

xfskit does not run XSM programs. It has no instruction decoder or executor and no machine debugger. It has no timer, disk or console interrupt handling. The word, memory, register and disk-store classes hold machine state, but nothing steps through instructions with them.
"""Block layout of the XFS disk and the memory pages its system code is loaded to."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

XSM_WORD_SIZE = 16
XSM_MEMORY_NUMPAGES = 128
XSM_PAGE_SIZE = 512
XSM_INSTRUCTION_SIZE = 2

BLOCK_SIZE = 512
WORD_SIZE = 16

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
INT1 = TIMERINT
MOD0 = 53

OS_STARTUP_CODE_SIZE = 1
NO_OF_FREE_LIST_BLOCKS = 1
NO_OF_ROOTFILE_BLOCKS = 1
NO_OF_INIT_BLOCKS = 2
NO_OF_SHELL_BLOCKS = 2
NO_OF_IDLE_BLOCKS = 2
NO_OF_LIBRARY_BLOCKS = 2
EX_HANDLER_SIZE = 2
TIMERINT_SIZE = 2
DISKCONTROLLER_INT_SIZE = 2
CONSOLE_INT_SIZE = 2
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

# Word offset within the inode region where the user table begins.
USER_TABLE_WORD = 960

ROOTFILE_ENTRY_FILENAME = 0
ROOTFILE_ENTRY_FILESIZE = 1
ROOTFILE_ENTRY_FILETYPE = 2
ROOTFILE_ENTRY_USERNAME = 3
ROOTFILE_ENTRY_PERMISSION = 4
ROOTFILE_ENTRY_SIZE = 8

XFS_NUM_BLOCKS = 512
TEMP_BLOCK = 69
INPUT_FILESIZE = 200

MEM_OS_STARTUP_CODE = 1
MEM_EX_HANDLER = 2
MEM_INT1 = 4
MEM_TIMERINT = 4
MEM_DISKCONTROLLER_INT = 6
MEM_CONSOLE_INT = 8
MEM_MOD0 = 40
MEM_INIT_PAGE = 65
MEM_LIBRARY_PAGE = 63
MEM_INIT_BASIC_BLOCK = 65
MEM_INT_SIZE = 2
MEM_MOD_SIZE = 2


class FileType(enum.IntEnum):
    """Kinds of file recorded in the inode table."""

    ROOT = 1
    DATA = 2
    EXEC = 3


@dataclass(frozen=True)
class CodeRegion:
    """A fixed run of disk blocks holding system code.

    ``mem_page`` is the memory page the code runs from; it is set for code
    whose labels are resolved against that page, and ``None`` otherwise.
    """

    disk_block: int
    num_blocks: int
    mem_page: int | None = None
    name: str = field(default="", compare=False)

    @property
    def labelled(self) -> bool:
        return self.mem_page is not None


_REGIONS = {
    "os": CodeRegion(OS_STARTUP_CODE, OS_STARTUP_CODE_SIZE, MEM_OS_STARTUP_CODE, "os"),
    "exhandler": CodeRegion(EX_HANDLER, EX_HANDLER_SIZE, MEM_EX_HANDLER, "exhandler"),
    "timer": CodeRegion(TIMERINT, TIMERINT_SIZE, MEM_TIMERINT, "timer"),
    "disk": CodeRegion(DISKCONTROLLER_INT, DISKCONTROLLER_INT_SIZE, MEM_DISKCONTROLLER_INT, "disk"),
    "console": CodeRegion(CONSOLE_INT, CONSOLE_INT_SIZE, MEM_CONSOLE_INT, "console"),
    "init": CodeRegion(INIT_BLOCK, NO_OF_INIT_BLOCKS, None, "init"),
    "shell": CodeRegion(SHELL_BLOCK, NO_OF_SHELL_BLOCKS, None, "shell"),
    "idle": CodeRegion(IDLE_BLOCK, NO_OF_IDLE_BLOCKS, None, "idle"),
    "library": CodeRegion(LIBRARY_BLOCK, NO_OF_LIBRARY_BLOCKS, None, "library"),
}


def region(name: str) -> CodeRegion:
    """Return the named system code region."""
    try:
        return _REGIONS[name]
    except KeyError:
        raise ValueError(f"unknown code region {name!r}") from None


def interrupt_region(number: int) -> CodeRegion:
    """Return the region of interrupt routine ``number`` (1 to 18)."""
    if not 1 <= number <= NO_OF_INTERRUPTS:
        raise ValueError(f"interrupt number {number} out of range")
    return CodeRegion(
        (number - 1) * INT_SIZE + INT1,
        INT_SIZE,
        (number - 1) * MEM_INT_SIZE + MEM_INT1,
        f"int{number}",
    )


def module_region(number: int) -> CodeRegion:
    """Return the region of module ``number``."""
    if not 0 <= number <= NO_OF_MODULES:
        raise ValueError(f"module number {number} out of range")
    return CodeRegion(
        number * MOD_SIZE + MOD0,
        MOD_SIZE,
        number * MEM_MOD_SIZE + MEM_MOD0,
        f"mod{number}",
    )
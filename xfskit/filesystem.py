"""Operations that move files and system code between UNIX and the XFS disk."""

from __future__ import annotations

import io
import math
import sys
from typing import Iterable, TextIO

from xfskit.disk import Disk, XfsError, XosFile, word_to_int
from xfskit.inode import (
    add_inode_entry,
    data_blocks,
    find_empty_inode_entry,
    find_inode_entry,
    remove_inode_entry,
)
from xfskit.labels import LabelError, resolve_labels
from xfskit.layout import (
    BLOCK_SIZE,
    DISK_FREE_LIST,
    INODE,
    INODE_MAX_BLOCK_NUM,
    INODE_NUM_DATA_BLOCKS,
    NO_OF_DISK_BLOCKS,
    NO_OF_FREE_LIST_BLOCKS,
    NO_OF_INODE_BLOCKS,
    NO_OF_ROOTFILE_BLOCKS,
    ROOTFILE,
    TEMP_BLOCK,
    USER_TABLE_WORD,
    XSM_PAGE_SIZE,
    CodeRegion,
    FileType,
)
from xfskit.textio import (
    add_extension,
    count_data_words,
    expand_path,
    pack_assembly_block,
    pack_data_block,
)

_ENCODING = "latin-1"
_INITIAL_USERS = ("kernel", "-1", "root", "452")


def _open_text(path: str, mode: str) -> TextIO:
    return open(path, mode, encoding=_ENCODING, newline="")


class FileSystem:
    """The XFS file system kept on a disk file."""

    def __init__(self, disk: Disk, out: TextIO | None = None) -> None:
        self.disk = disk
        self.out = out if out is not None else sys.stdout

    def format(self, wipe: bool) -> None:
        """Create the disk file; with ``wipe`` lay down an empty file system."""
        self.disk.create_file(False)
        if not wipe:
            return
        disk = self.disk
        disk.clear()
        disk.set_defaults(DISK_FREE_LIST)
        disk.commit(DISK_FREE_LIST)
        disk.set_defaults(INODE)
        disk.set_defaults(ROOTFILE)

        root_blocks = [ROOTFILE + i for i in range(NO_OF_ROOTFILE_BLOCKS)]
        root_blocks += [-1] * (INODE_NUM_DATA_BLOCKS - len(root_blocks))
        add_inode_entry(
            disk, 0, FileType.ROOT, "root", NO_OF_ROOTFILE_BLOCKS * BLOCK_SIZE, root_blocks
        )

        base = INODE * BLOCK_SIZE + USER_TABLE_WORD
        for offset, text in enumerate(_INITIAL_USERS):
            disk.store_string_at(base + offset, text)

        disk.commit(INODE)
        disk.commit(ROOTFILE)

    def files(self) -> list[XosFile]:
        """Return every file on the disk."""
        return self.disk.list_files()

    def list_files(self) -> list[XosFile]:
        """Print the name and size of every file, and return them."""
        files = self.files()
        if not files:
            print("The disk contains no files.", file=self.out)
        for entry in files:
            print(f"Filename: {entry.name} \t Filesize {entry.size}", file=self.out)
        return files

    def _locate(self, name: str) -> int:
        self.disk.check_exists()
        location = find_inode_entry(self.disk, name)
        if location is None:
            raise XfsError(f"File '{name}' not found!")
        return location

    def _file_blocks(self, location: int) -> Iterable[int]:
        for block in data_blocks(self.disk, location):
            if block <= 0:
                return
            yield block

    def _read_temp(self, block: int) -> list[str]:
        self.disk.empty_block(TEMP_BLOCK)
        self.disk.read_block(TEMP_BLOCK, block)
        words = list(self.disk.blocks[TEMP_BLOCK])
        self.disk.empty_block(TEMP_BLOCK)
        return words

    def cat(self, name: str) -> list[str]:
        """Print the non-empty words of a file, and return them."""
        location = self._locate(name)
        shown = []
        for block in self._file_blocks(location):
            for text in self._read_temp(block):
                if text:
                    self.out.write(f"{text}\t\n")
                    shown.append(text)
        return shown

    def export(self, name: str, unix_path: str) -> None:
        """Write every word of a file, one per line, to a UNIX file."""
        location = self._locate(name)
        unix_path = expand_path(unix_path)
        try:
            handle = _open_text(unix_path, "w")
        except OSError as exc:
            raise XfsError(f"File '{unix_path}' not found!") from exc
        with handle:
            for block in self._file_blocks(location):
                for text in self._read_temp(block):
                    handle.write(f"{text}\n")

    def clear_blocks(self, start: int, count: int) -> None:
        """Blank ``count`` disk blocks from ``start``."""
        self.disk.empty_block(TEMP_BLOCK)
        for block in range(start, start + count):
            self.disk.write_block(TEMP_BLOCK, block)

    def copy_blocks(self, start: int, end: int, path: str) -> None:
        """Write the words of blocks ``start`` to ``end`` to a UNIX file."""
        self.disk.check_exists()
        path = expand_path(path)
        try:
            handle = _open_text(path, "w")
        except OSError as exc:
            raise XfsError(f"File '{path}' not found!") from exc
        with handle:
            for block in range(start, end + 1):
                self.disk.empty_block(TEMP_BLOCK)
                self.disk.read_block(TEMP_BLOCK, block)
                for text in self.disk.blocks[TEMP_BLOCK]:
                    handle.write(f"{text}\n")

    def free_list_report(self) -> int:
        """Print the disk free list and return the number of free blocks."""
        self.disk.check_exists()
        free = 0
        for offset in range(NO_OF_FREE_LIST_BLOCKS):
            for index, text in enumerate(self.disk.blocks[DISK_FREE_LIST + offset]):
                self.out.write(f"{index} \t - \t {text}  \n")
                if word_to_int(text) == 0:
                    free += 1
        self.out.write(f"\nNo of Free Blocks = {free}")
        self.out.write(f"\nTotal no of Blocks = {NO_OF_DISK_BLOCKS}\n")
        return free

    def _write_words(self, words: list[str], block: int) -> None:
        self.disk.empty_block(TEMP_BLOCK)
        for index, text in enumerate(words[:BLOCK_SIZE]):
            self.disk.set_word(TEMP_BLOCK, index, text)
        self.disk.write_block(TEMP_BLOCK, block)

    def _load_code_stream(self, stream: TextIO, start: int, count: int) -> None:
        full = False
        for block in range(start, start + count):
            words, full = pack_assembly_block(stream)
            self._write_words(words, block)
            if not full:
                break
        if full:
            self.clear_blocks(start, count)
            raise XfsError(f"Code exceeds {count} block")

    def load_code(self, path: str, start: int, count: int) -> None:
        """Load assembly code from a UNIX file into ``count`` blocks from ``start``."""
        path = expand_path(path)
        try:
            handle = _open_text(path, "r")
        except OSError as exc:
            raise XfsError(f"File {path} not found.") from exc
        with handle:
            self._load_code_stream(handle, start, count)

    def load_code_with_labels(self, path: str, start: int, count: int, mem_page: int) -> None:
        """Load assembly code after resolving its labels for memory page ``mem_page``."""
        path = expand_path(path)
        try:
            with _open_text(path, "r") as handle:
                lines = handle.read().splitlines()
        except OSError as exc:
            raise XfsError("Can't open source file.") from exc
        try:
            resolved = resolve_labels(lines, mem_page * XSM_PAGE_SIZE)
        except LabelError as exc:
            raise XfsError(str(exc)) from exc
        text = "".join(f"{line}\n" for line in resolved)
        self._load_code_stream(io.StringIO(text), start, count)

    def load_region(self, code_region: CodeRegion, path: str) -> None:
        """Load system code into its fixed region of the disk."""
        if code_region.labelled:
            self.load_code_with_labels(
                path, code_region.disk_block, code_region.num_blocks, code_region.mem_page
            )
        else:
            self.load_code(path, code_region.disk_block, code_region.num_blocks)

    def delete_region(self, code_region: CodeRegion) -> None:
        """Blank a system code region."""
        self.clear_blocks(code_region.disk_block, code_region.num_blocks)

    def _allocate(self, count: int, message: str) -> list[int]:
        allocated: list[int] = []
        for _ in range(count):
            try:
                allocated.append(self.disk.find_free_block())
            except XfsError:
                self.disk.free_blocks(allocated)
                raise XfsError(message) from None
        return allocated

    def _reserve_entry(self, filename: str, allocated: list[int]) -> int:
        if find_inode_entry(self.disk, filename) is not None:
            self.disk.free_blocks(allocated)
            raise XfsError(
                "Disk already contains the file with this name. "
                "Try again with a different name."
            )
        try:
            return find_empty_inode_entry(self.disk)
        except XfsError:
            self.disk.free_blocks(allocated)
            raise XfsError("No free INODE entry found.") from None

    @staticmethod
    def _xfs_name(path: str, ext: str) -> str:
        return add_extension(path.rpartition("/")[2][:15], ext)

    def load_data(self, path: str) -> None:
        """Store a UNIX data file on the disk as a data file."""
        filename = self._xfs_name(path, ".dat")
        path = expand_path(path)
        try:
            handle = _open_text(path, "r")
        except OSError as exc:
            raise XfsError(f"File '{path}' not found.!") from exc
        with handle:
            num_words = count_data_words(handle)
            num_blocks = math.ceil(num_words / BLOCK_SIZE)
            if num_blocks > INODE_MAX_BLOCK_NUM:
                raise XfsError(
                    f"The size of file exceeds {INODE_MAX_BLOCK_NUM} blocks\n"
                    f"The file contains {num_words} words, an xfs file can have only "
                    f"upto {INODE_MAX_BLOCK_NUM * BLOCK_SIZE} words"
                )
            handle.seek(0)
            allocated = self._allocate(
                num_blocks, "Disk does not have enough space to contain the file."
            )
            index = self._reserve_entry(filename, allocated)
            self.disk.commit(DISK_FREE_LIST)
            for block in allocated:
                words, _ = pack_data_block(handle)
                self._write_words(words, block)
        add_inode_entry(self.disk, index, FileType.DATA, filename, num_words, allocated)
        self.disk.commit(INODE)

    def load_executable(self, path: str) -> None:
        """Store a UNIX assembly file on the disk as an executable file."""
        filename = self._xfs_name(path, ".xsm")
        path = expand_path(path)
        try:
            handle = _open_text(path, "r")
        except OSError as exc:
            raise XfsError(f"File {path} not found.") from exc
        with handle:
            num_lines = handle.read().count("\n")
            num_blocks = num_lines // (BLOCK_SIZE // 2) + 1
            if num_blocks > INODE_MAX_BLOCK_NUM:
                raise XfsError(f"The size of file exceeds {INODE_MAX_BLOCK_NUM} blocks")
            handle.seek(0)
            allocated = self._allocate(num_blocks, "Insufficient disk space!")
            index = self._reserve_entry(filename, allocated)
            self.disk.commit(DISK_FREE_LIST)
            for block in allocated:
                words, _ = pack_assembly_block(handle)
                self._write_words(words, block)
        add_inode_entry(self.disk, index, FileType.EXEC, filename, num_lines * 2, allocated)
        self.disk.commit(INODE)

    def delete_file(self, name: str) -> None:
        """Remove a data or executable file and free its blocks."""
        if name == "root":
            raise XfsError("Root file cannot be deleted")
        location = self._locate(name)
        self.disk.free_blocks(data_blocks(self.disk, location))
        remove_inode_entry(self.disk, location)
        self.disk.commit(INODE)
        self.disk.commit(DISK_FREE_LIST)

    def dump_root_file(self, path: str) -> None:
        """Copy the root file to a UNIX file."""
        self.copy_blocks(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS - 1, path)

    def dump_inode_table(self, path: str) -> None:
        """Copy the inode table and user table to a UNIX file."""
        self.copy_blocks(INODE, INODE + NO_OF_INODE_BLOCKS - 1, path)
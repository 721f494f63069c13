"""The machine's main memory and its page-table address translation."""

from __future__ import annotations

from xfskit.layout import XSM_INSTRUCTION_SIZE, XSM_MEMORY_NUMPAGES, XSM_PAGE_SIZE
from xfskit.word import Word

XSM_MEMORY_SIZE = XSM_PAGE_SIZE * XSM_MEMORY_NUMPAGES


class TranslationError(Exception):
    """A logical address that cannot be turned into a physical one."""


class WriteViolation(TranslationError):
    """A write to a page that is not writable."""


class PageFault(TranslationError):
    """An access to a page that is not in memory."""

    def __init__(self, page: int) -> None:
        super().__init__(f"Page fault at page {page}")
        self.page = page


class IllegalPage(TranslationError):
    """An address outside the logical address space."""


def page_of(address: int) -> int:
    """Return the page holding ``address``, or -1 for a negative address."""
    if address < 0:
        return -1
    return address // XSM_PAGE_SIZE


class Memory:
    """Word-addressed memory of ``XSM_MEMORY_SIZE`` words."""

    def __init__(self) -> None:
        self._words = [Word() for _ in range(XSM_MEMORY_SIZE)]

    def is_valid(self, address: int) -> bool:
        return 0 <= address < XSM_MEMORY_SIZE

    def word(self, address: int) -> Word:
        """Return the word at a physical address."""
        if not self.is_valid(address):
            raise IndexError(f"Illegal memory access at {address}")
        return self._words[address]

    def page(self, page: int) -> list[Word]:
        """Return the words of a page; changes to them change memory."""
        if not 0 <= page < XSM_MEMORY_NUMPAGES:
            raise IndexError(f"No such page: {page}")
        start = page * XSM_PAGE_SIZE
        return self._words[start : start + XSM_PAGE_SIZE]

    def translate_page(self, ptbr: int, ptlr: int, page: int, write: bool) -> int:
        """Return the physical page of a logical page through the page table."""
        if page < 0 or page >= ptlr:
            raise IllegalPage(f"Page {page} outside logical address space")
        entry = page * 2 + ptbr
        target = self.word(entry).as_int()
        info = self.word(entry + 1).as_str()
        if len(info) > 1 and info[1] == "0":
            raise PageFault(page)
        if write and len(info) > 2 and info[2] == "0":
            raise WriteViolation(f"Page {page} is not writable")
        return target

    def translate_address(self, ptbr: int, ptlr: int, address: int, write: bool) -> int:
        """Return the physical address of a logical address."""
        target = self.translate_page(ptbr, ptlr, page_of(address), write)
        return target * XSM_PAGE_SIZE + address % XSM_PAGE_SIZE

    def raw_instruction(self, address: int) -> str:
        """Return the text of the instruction starting at ``address``."""
        return "".join(
            self.word(address + offset).as_str() for offset in range(XSM_INSTRUCTION_SIZE)
        )
"""The machine's register file."""

from __future__ import annotations

from xfskit.word import Word

REGISTER_NAMES = (
    *(f"R{n}" for n in range(20)),
    "P0", "P1", "P2", "P3",
    "BP", "SP", "IP",
    "PTBR", "PTLR", "EIP", "EC", "EPN", "EMA",
)

XSM_NUM_REG = len(REGISTER_NAMES)
REG_COUNT = 20
REG_PORT_LOW = 20
REG_PORT_HIGH = 23
REG_KERN_LOW = 27
REG_KERN_HIGH = 32

_CODES = {name: code for code, name in enumerate(REGISTER_NAMES)}


class RegisterFile:
    """The machine registers, looked up by name without regard to case."""

    def __init__(self) -> None:
        self._registers = [Word() for _ in REGISTER_NAMES]

    def __len__(self) -> int:
        return len(self._registers)

    def code(self, name: str) -> int:
        """Return the index of a register; KeyError if there is none."""
        try:
            return _CODES[name.upper()]
        except KeyError:
            raise KeyError(f"No such register: {name}") from None

    def get(self, name: str) -> Word:
        return self._registers[self.code(name)]

    def names(self) -> tuple[str, ...]:
        return REGISTER_NAMES

    def get_int(self, name: str) -> int:
        return self.get(name).as_int()

    def get_str(self, name: str) -> str:
        return self.get(name).as_str()

    def store_int(self, name: str, value: int) -> None:
        self.get(name).store_int(value)

    def store_str(self, name: str, value: str) -> None:
        self.get(name).store_str(value)

    def user_accessible(self, name: str) -> bool:
        """True if the register may be used in user mode."""
        try:
            code = self.code(name)
        except KeyError:
            return False
        if REG_PORT_LOW <= code <= REG_PORT_HIGH:
            return False
        # Only the lowest kernel register is withheld from user mode.
        return code != REG_KERN_LOW
"""Command interpreter for managing an XFS disk from UNIX."""

from __future__ import annotations

import os
import posixpath
import sys
from typing import Sequence, TextIO

from xfskit.disk import DISK_NAME, Disk, XfsError, word_to_int
from xfskit.filesystem import FileSystem
from xfskit.layout import NO_OF_INTERRUPTS, NO_OF_MODULES, interrupt_region, module_region, region

try:
    import readline as _readline
except ImportError:  # pragma: no cover - platforms without readline
    _readline = None

_SPACE = " \t\n\v\f\r"
_COMPLETER_DELIMS = " \t\n\"\\'`@$><=;|&{("
_MAX_NAME = 12
_MAX_PATH = 100
_MAX_COPY_PATH = 50

BANNER = 'Unix-XFS Interace Version 2.0. \nType "help" for getting a list of commands.'

HELP_TEXT = (
    " fdisk \n\t Format the disk with XFS filesystem\n"
    " run <pathname> \n\t Executes the set of xfs-interface commands sequentially \n"
    " load --exec <pathname> \n\t Loads an executable file to XFS disk \n"
    " load --data <pathname> \n\t Loads a data file to XFS disk \n"
    " load --init <pathname> \n\t Loads INIT code to XFS disk \n"
    " load --os <pathname> \n\t Loads OS startup code to XFS disk \n"
    " load --idle <pathname> \n\t Loads Idle code to XFS disk \n"
    " load --shell <pathname> \n\t Loads Shell code to XFS disk \n"
    " load --library <pathname> \n\t Loads Library code to XFS disk \n"
    " load --int=timer <pathname>\n\t Loads Timer Interrupt routine to XFS disk \n"
    " load --int=disk <pathname>\n\t Loads Disk Controller Interrupt routine to XFS disk \n"
    " load --int=console <pathname>\n\t Loads Console Interrupt routine to XFS disk \n"
    " load --int=[4-18] <pathname>\n\t Loads the specified Interrupt routine to XFS disk \n"
    " load --exhandler <pathname> \n\t Loads exception handler routine to XFS disk \n"
    " load --module [0-7] <pathname>\n\t Loads the specified Module to XFS disk \n"
    " export <xfs_filename> <pathname>\n\t Exports a data file from XFS disk to UNIX file system\n"
    " rm <xfs_filename>\n\t Removes a file from XFS disk \n"
    " ls \n\t List all files\n"
    " df \n\t Display free list and free space\n"
    " cat <xfs_filename> \n\t to display contents of a file\n"
    " copy <start_blocks> <end_block> <unix_filename> \n\t Copies contents of specified range of blocks to a UNIX file.\n"
    " dump --inodeusertable\n\t Copies the contents of inode table and the user table to an external UNIX file named inodeusertable.txt\n"
    " dump --rootfile \n\t Copies the contents of root file to an external UNIX file named rootfile.txt\n"
    " exit \n\t Exit the interface\n"
)

COMMANDS = ("fdisk", "run", "load", "export", "rm", "ls", "df", "cat", "copy", "dump", "exit", "help")
OPTIONS = (
    "--int=", "--exec", "--data", "--init", "--os", "--idle",
    "--shell", "--library", "--exhandler", "--module",
)
INTERRUPTS = tuple(str(n) for n in range(4, NO_OF_INTERRUPTS + 1)) + ("timer", "disk", "console")
MODULES = tuple(str(n) for n in range(8))
DUMP_OPTIONS = ("--inodeusertable", "--rootfile")

_SIMPLE_LOADS = {
    "--init": "init",
    "--shell": "shell",
    "--library": "library",
    "--idle": "idle",
    "--os": "os",
    "--exhandler": "exhandler",
}
_NAMED_INTERRUPTS = {"timer": "timer", "disk": "disk", "console": "console"}


def strip_white(text: str) -> str:
    """Strip leading and trailing whitespace."""
    return text.strip(_SPACE)


def _matching(choices: Sequence[str], text: str) -> list[str]:
    return [choice for choice in choices if choice.startswith(text)]


def command_candidates(text: str) -> list[str]:
    """Commands beginning with ``text``."""
    return _matching(COMMANDS, text)


def option_candidates(text: str) -> list[str]:
    """Options of ``load`` beginning with ``text``."""
    return _matching(OPTIONS, text)


def interrupt_candidates(text: str) -> list[str]:
    """Values of ``--int=`` beginning with ``text``."""
    return _matching(INTERRUPTS, text)


def module_candidates(text: str) -> list[str]:
    """Module numbers beginning with ``text``."""
    return _matching(MODULES, text)


def dump_candidates(text: str) -> list[str]:
    """Options of ``dump`` beginning with ``text``."""
    return _matching(DUMP_OPTIONS, text)


def _tokens(command: str) -> list[str]:
    return [token for token in command.split(" ") if token]


def _extension_ok(name: str, ext: str) -> bool:
    dot = name.rfind(".")
    return dot >= 0 and name[dot:] == ext


def _basename(path: str) -> str:
    stripped = path.rstrip("/")
    return posixpath.basename(stripped) if stripped else path


class Shell:
    """Reads and runs XFS interface commands."""

    def __init__(self, filesystem: FileSystem, out: TextIO | None = None) -> None:
        self.filesystem = filesystem
        self.out = out if out is not None else sys.stdout
        self._matches: list[str] = []

    def _say(self, text: str) -> None:
        print(text, file=self.out)

    def run_command(self, command: str) -> None:
        """Run one command line."""
        tokens = _tokens(command)
        if not tokens:
            return
        name, args = tokens[0], tokens[1:]
        try:
            self._dispatch(name, args)
        except XfsError as exc:
            self._say(str(exc))

    def _dispatch(self, name: str, args: list[str]) -> None:
        arg = lambda n: args[n] if len(args) > n else None  # noqa: E731
        fs = self.filesystem
        if name == "help":
            self.out.write(HELP_TEXT)
        elif name == "fdisk":
            self._say('Formatting Complete. "disk.xfs" created.')
            fs.format(True)
        elif name == "run":
            self.run_script(arg(0) or "")
        elif name == "load":
            self._load(arg(0), arg(1), arg(2))
        elif name == "rm":
            if arg(0) is None:
                self._say('Missing <xfs_filename> for rm. See "help" for more information.')
            else:
                fs.delete_file(arg(0))
        elif name == "export":
            if arg(1) is None:
                self._say('Missing <pathname> for export. See "help" for more information.')
            else:
                fs.export(arg(0), arg(1))
        elif name == "ls":
            fs.list_files()
        elif name == "df":
            fs.free_list_report()
        elif name == "cat":
            if arg(0) is None:
                self._say('Missing <xfs_filename> for cat. See "help" for more information.')
            else:
                fs.cat(arg(0))
        elif name == "copy":
            if len(args) < 3:
                self._say('Insufficient arguments for "copy". See "help" for more information.')
            else:
                fs.copy_blocks(word_to_int(args[0]), word_to_int(args[1]), args[2][:_MAX_COPY_PATH])
        elif name == "dump":
            option = arg(0) or ""
            if option == "--inodeusertable":
                fs.dump_inode_table("inodeusertable.txt")
            elif option == "--rootfile":
                fs.dump_root_file("rootfile.txt")
            else:
                self._say(f'Invalid argument "{option}" for dump. See "help" for more information.')
        elif name == "exit":
            raise SystemExit(0)
        else:
            self._say(f'Unknown command "{name}". See "help" for more information.')

    def _load(self, option: str | None, target: str | None, extra: str | None) -> None:
        if target is None or option is None:
            self._say('Missing <pathname> for load. See "help" for more information.')
            return
        option, _, int_type = option.partition("=")
        path = target[:_MAX_PATH]
        fs = self.filesystem

        if option in ("--exec", "--data"):
            ext = ".xsm" if option == "--exec" else ".dat"
            if len(_basename(path)) > _MAX_NAME:
                self._say("Filename is more than 12 characters long.")
            elif not _extension_ok(path, ext):
                self._say(f'Filename does not have "{ext}" extension.')
            elif option == "--exec":
                fs.load_executable(path)
            else:
                fs.load_data(path)
        elif option in _SIMPLE_LOADS:
            fs.load_region(region(_SIMPLE_LOADS[option]), path)
        elif option == "--int":
            if int_type in _NAMED_INTERRUPTS:
                fs.load_region(region(_NAMED_INTERRUPTS[int_type]), path)
                return
            number = word_to_int(int_type)
            if 4 <= number <= NO_OF_INTERRUPTS:
                fs.load_region(interrupt_region(number), path)
            else:
                self._say('Invalid argument for "--int=".')
        elif option == "--module":
            number = word_to_int(target)
            if not 0 <= number <= NO_OF_MODULES:
                self._say('Invalid argument for "--module=".')
            elif extra is None:
                self._say('Missing <pathname> for load. See "help" for more information.')
            else:
                fs.load_region(module_region(number), extra)
        else:
            self._say(f'Invalid argument "{option}" for load. See "help" for more information.')

    def run_script(self, path: str) -> None:
        """Run every line of a file as a command."""
        try:
            handle = open(path, encoding="latin-1", newline="")
        except OSError:
            self._say(f"Unable to open file : {path}.")
            return
        with handle:
            for line in handle:
                self.run_command(line[:-1] if line.endswith("\n") else line)

    def candidates(self, line: str, start: int, text: str) -> list[str]:
        """Completions of ``text``, which begins at ``start`` in ``line``."""
        context = _tokens(line[:start])
        if not context:
            return command_candidates(text)
        head = context[0]
        if head == "load":
            if start >= 6 and line[start - 6 : start] == "--int=":
                return interrupt_candidates(text)
            if len(context) > 1 and context[1] == "--module":
                return module_candidates(text)
            return option_candidates(text)
        if head in ("export", "cat", "rm"):
            try:
                files = self.filesystem.files()
            except XfsError:
                return []
            return [entry.name for entry in files if entry.name.startswith(text)]
        if head == "dump":
            return dump_candidates(text)
        return []

    def _line_context(self, text: str) -> tuple[str, int]:
        if _readline is not None:
            buffer = _readline.get_line_buffer()
            if buffer:
                return buffer, _readline.get_begidx()
        return text, 0

    def complete(self, text: str, state: int) -> str | None:
        """Completer in the form readline expects: the ``state``-th match."""
        if state == 0:
            line, start = self._line_context(text)
            self._matches = self.candidates(line, start, text)
        return self._matches[state] if state < len(self._matches) else None

    def loop(self) -> None:
        """Read commands from the terminal until ``exit`` or end of input."""
        if _readline is not None:
            _readline.set_completer(self.complete)
            _readline.set_completer_delims(_COMPLETER_DELIMS)
            _readline.parse_and_bind("tab: complete")
        while True:
            try:
                line = input("# ")
            except EOFError:
                break
            command = strip_white(line)
            if not command:
                continue
            if command == "exit":
                break
            self.run_command(command)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the arguments as one command, or start the interactive shell."""
    args = list(sys.argv[1:] if argv is None else argv)
    disk = Disk(DISK_NAME)
    if os.path.exists(DISK_NAME):
        try:
            disk.load()
        except XfsError as exc:
            print(exc)
    shell = Shell(FileSystem(disk))
    if args:
        shell.run_command(" ".join(args))
    else:
        print(BANNER)
        shell.loop()
    return 0
"""System call numbers, a dispatcher and the process-listing call."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict

from dynaquantum.proc import Proc, ProcState, ProcTable

Handler = Callable[[Proc], int]


class Syscall(IntEnum):
    FORK = 1
    EXIT = 2
    WAIT = 3
    PIPE = 4
    READ = 5
    KILL = 6
    EXEC = 7
    FSTAT = 8
    CHDIR = 9
    DUP = 10
    GETPID = 11
    SBRK = 12
    SLEEP = 13
    UPTIME = 14
    OPEN = 15
    WRITE = 16
    MKNOD = 17
    UNLINK = 18
    LINK = 19
    MKDIR = 20
    CLOSE = 21
    GETPROCS = 22
    YIELD = 23


@dataclass(frozen=True)
class UProc:
    """User-visible snapshot of one process."""

    pid: int
    ppid: int
    state: str
    name: str
    time_quantum: int
    execution_count: int


def getprocs(table, limit):
    """Return snapshots of at most ``limit`` processes in use, in slot order."""
    if limit < 0:
        raise ValueError("limit must not be negative")
    snapshots = []
    for proc in table.procs:
        if len(snapshots) >= limit:
            break
        if proc.state is ProcState.UNUSED:
            continue
        snapshots.append(
            UProc(
                pid=proc.pid,
                ppid=proc.parent.pid if proc.parent is not None else 0,
                state=proc.state.name,
                name=proc.name,
                time_quantum=proc.time_quantum,
                execution_count=proc.execution_count,
            )
        )
    return snapshots


class SyscallDispatcher:
    """Routes system call numbers to handlers acting on a process table."""

    def __init__(self, table):
        self.table: ProcTable = table
        self._handlers: Dict[int, Handler] = {
            Syscall.FORK: self._sys_fork,
            Syscall.EXIT: self._sys_exit,
            Syscall.GETPID: lambda proc: proc.pid,
            Syscall.UPTIME: lambda proc: self.table.ticks,
            Syscall.YIELD: self._sys_yield,
        }

    def _sys_fork(self, proc: Proc) -> int:
        try:
            return self.table.fork(proc)
        except RuntimeError:
            return -1

    def _sys_exit(self, proc: Proc) -> int:
        self.table.exit(proc)
        return 0

    def _sys_yield(self, proc: Proc) -> int:
        self.table.yield_cpu(proc)
        return 0

    def register(self, number, handler):
        """Bind ``handler(proc) -> int`` to a positive call number."""
        number = int(number)
        if number <= 0:
            raise ValueError(f"system call numbers start at 1, got {number}")
        self._handlers[number] = handler

    def dispatch(self, proc, number):
        """Run call ``number`` for ``proc`` and return its result, -1 if unknown."""
        handler = self._handlers.get(number) if number > 0 else None
        if handler is None:
            self.table.console.append(
                f"{proc.pid} {proc.name}: unknown sys call {number}"
            )
            result = -1
        else:
            result = handler(proc)
        if proc.killed and proc.state is not ProcState.ZOMBIE:
            self.table.exit(proc)
        return result
"""Process table with a dynamic time-quantum scheduler.

The table models a single CPU.  ``schedule_pass`` is a generator: every
process it yields has just been switched to and is ``RUNNING``; the caller
acts for that process (ticks, sleeps, exits, yields) and then resumes the
generator, which plays the part of the context switch back to the scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterator, Optional

NPROC = 64
NOFILE = 16
NCPU = 8
MAXARG = 32
DEFAULT_TIME_QUANTUM = 5
THRESHOLD = 10
BASE_QUANTUM = 5
MAX_QUANTUM = 20
MIN_QUANTUM = 1
CPU_TICK_LIMIT = 500
PROC_NAME_MAX = 15

CPU_LIMIT_CHANNEL = "cpu_limit"


class KernelPanic(RuntimeError):
    """An unrecoverable inconsistency in the process table."""


class ProcState(IntEnum):
    UNUSED = 0
    EMBRYO = 1
    SLEEPING = 2
    RUNNABLE = 3
    RUNNING = 4
    ZOMBIE = 5

    @property
    def label(self) -> str:
        """Six-character label used in process listings."""
        return _DUMP_LABELS[self]


_DUMP_LABELS = {
    ProcState.UNUSED: "unused",
    ProcState.EMBRYO: "embryo",
    ProcState.SLEEPING: "sleep ",
    ProcState.RUNNABLE: "runble",
    ProcState.RUNNING: "run   ",
    ProcState.ZOMBIE: "zombie",
}


@dataclass(eq=False)
class Proc:
    """Per-process state, including the dynamic scheduling counters."""

    pid: int = 0
    state: ProcState = ProcState.UNUSED
    parent: Optional["Proc"] = field(default=None, repr=False)
    chan: Any = field(default=None, repr=False)
    killed: bool = False
    name: str = ""
    open_files: list = field(default_factory=list)
    cwd: Optional[str] = None
    time_quantum: int = DEFAULT_TIME_QUANTUM
    execution_count: int = 0
    last_runtime: int = 0
    total_cpu_ticks: int = 1


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def dynamic_quantum(execution_count, total_cpu_ticks):
    """Quantum = BASE + execution_count * BASE / ticks (integer division)."""
    ticks = total_cpu_ticks or 1
    return BASE_QUANTUM + _trunc_div(execution_count * BASE_QUANTUM, ticks)


class ProcTable:
    """A fixed-size table of process slots driven by a single CPU."""

    def __init__(self, size=NPROC):
        if size <= 0:
            raise ValueError("process table needs at least one slot")
        self._procs: list[Proc] = [Proc() for _ in range(size)]
        self._nextpid = 1
        self._announced = False
        self.initproc: Optional[Proc] = None
        self.current: Optional[Proc] = None
        self.ticks = 0
        self.console: list[str] = []

    @property
    def procs(self) -> tuple[Proc, ...]:
        return tuple(self._procs)

    def _cprintf(self, message: str) -> None:
        self.console.append(message)

    def allocproc(self):
        """Claim an unused slot as an embryo; None when the table is full."""
        for index, slot in enumerate(self._procs):
            if slot.state is ProcState.UNUSED:
                proc = Proc(pid=self._nextpid, state=ProcState.EMBRYO)
                self._nextpid += 1
                self._procs[index] = proc
                return proc
        return None

    def userinit(self):
        """Create the first user process and make it runnable."""
        proc = self.allocproc()
        if proc is None:
            raise KernelPanic("userinit: out of memory?")
        self.initproc = proc
        proc.name = "initcode"
        proc.cwd = "/"
        proc.state = ProcState.RUNNABLE
        return proc

    def fork(self, parent):
        """Copy ``parent`` into a new runnable process and return its pid."""
        child = self.allocproc()
        if child is None:
            raise RuntimeError("fork: no free process slot")
        child.parent = parent
        child.open_files = list(parent.open_files[:NOFILE])
        child.cwd = parent.cwd
        child.name = parent.name[:PROC_NAME_MAX]
        child.state = ProcState.RUNNABLE
        return child.pid

    def _wakeup1(self, chan: Any) -> None:
        for proc in self._procs:
            if proc.state is ProcState.SLEEPING and proc.chan == chan:
                proc.state = ProcState.RUNNABLE

    def exit(self, proc):
        """Turn ``proc`` into a zombie and hand its children to init."""
        if proc is self.initproc:
            raise KernelPanic("init exiting")
        proc.open_files.clear()
        proc.cwd = None
        if proc.parent is not None:
            self._wakeup1(proc.parent)
        for other in self._procs:
            if other.parent is proc:
                other.parent = self.initproc
                if other.state is ProcState.ZOMBIE and self.initproc is not None:
                    self._wakeup1(self.initproc)
        proc.state = ProcState.ZOMBIE

    def wait(self, proc):
        """Reap a zombie child of ``proc`` and return its pid.

        Returns None after putting ``proc`` to sleep when it has children
        but none has exited yet; raises ChildProcessError when it has no
        children or has been killed.
        """
        have_kids = False
        for index, child in enumerate(self._procs):
            if child.parent is not proc:
                continue
            have_kids = True
            if child.state is ProcState.ZOMBIE:
                self._procs[index] = Proc()
                return child.pid
        if not have_kids or proc.killed:
            raise ChildProcessError(f"pid {proc.pid} has no children to wait for")
        self.sleep(proc, proc)
        return None

    def sleep(self, proc, chan):
        """Put ``proc`` to sleep on ``chan``."""
        if proc is None:
            raise KernelPanic("sleep")
        proc.chan = chan
        proc.state = ProcState.SLEEPING

    def wakeup(self, chan):
        """Make every process sleeping on ``chan`` runnable."""
        self._wakeup1(chan)

    def kill(self, pid):
        """Mark the process with ``pid`` killed, waking it if asleep."""
        for proc in self._procs:
            if proc.state is not ProcState.UNUSED and proc.pid == pid:
                proc.killed = True
                if proc.state is ProcState.SLEEPING:
                    proc.state = ProcState.RUNNABLE
                return
        raise ProcessLookupError(f"no process with pid {pid}")

    def yield_cpu(self, proc):
        """Give up the CPU voluntarily for one scheduling round."""
        proc.last_runtime = 0
        proc.state = ProcState.RUNNABLE

    def schedule_pass(self) -> Iterator[Proc]:
        """Run one sweep over the table, yielding each process switched to.

        A process still RUNNING when the generator resumes is preempted
        back to RUNNABLE.
        """
        if not self._announced:
            self._announced = True
            self._cprintf(
                f"Dynamic Quantum Scheduler active! Formula: "
                f"Q = {BASE_QUANTUM} + (EC * {BASE_QUANTUM} / Ticks)"
            )
        self.current = None
        for proc in self._procs:
            if proc.state is not ProcState.RUNNABLE:
                continue
            if proc.total_cpu_ticks > CPU_TICK_LIMIT:
                self._cprintf(f"Sleeping PID {proc.pid} — exceeded allowed CPU ticks")
                proc.state = ProcState.SLEEPING
                proc.chan = CPU_LIMIT_CHANNEL
                continue
            self._cprintf(
                f"Scheduling PID {proc.pid} | Time Quantum: {proc.time_quantum} "
                f"| Execution Count: {proc.execution_count} "
                f"| Total Ticks: {proc.total_cpu_ticks}"
            )
            if proc.total_cpu_ticks == 0:
                proc.total_cpu_ticks = 1
            proc.execution_count += 1
            proc.time_quantum = dynamic_quantum(proc.execution_count, proc.total_cpu_ticks)

            self.current = proc
            proc.chan = None
            proc.state = ProcState.RUNNING
            yield proc
            if proc.state is ProcState.RUNNING:
                proc.state = ProcState.RUNNABLE
            self.current = None

    def timer_tick(self, proc=None):
        """Handle a timer interrupt; True if ``proc`` lost the CPU."""
        self.ticks += 1
        if proc is None or proc.state is not ProcState.RUNNING:
            return False
        proc.total_cpu_ticks += 1
        if proc.killed:
            self.exit(proc)
            return True
        if proc.time_quantum > 0:
            proc.time_quantum -= 1
        if proc.time_quantum <= 0:
            self.yield_cpu(proc)
            return True
        return False

    def procdump(self):
        """Return one listing line per slot in use."""
        return [
            f"{proc.pid} {proc.state.label} {proc.name}"
            for proc in self._procs
            if proc.state is not ProcState.UNUSED
        ]
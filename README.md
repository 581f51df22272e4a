# dynaquantum

A small simulation of a single-CPU process table with a dynamic
time-quantum scheduler. It also has a separate calculator for round-robin
scheduling in which the quantum grows.

## What is inside

### `dynaquantum.proc`

`ProcTable(size=64)` is a fixed number of `Proc` slots. Each slot is in
one of the `ProcState` states: `UNUSED`, `EMBRYO`, `SLEEPING`, `RUNNABLE`,
`RUNNING` or `ZOMBIE`.

- `allocproc()` claims a free slot as an embryo. It returns `None` when
  the table is full.
- `userinit()` creates the first process, named `initcode`, and makes it
  runnable.
- `fork(parent)` returns the new child's pid. It raises `RuntimeError`
  when no slot is free.
- `exit(proc)` turns the process into a zombie and hands its children to
  init.
- `wait(proc)` reaps a zombie child and returns its pid.
  - If the process has children but none has exited yet, it puts the
    process to sleep and returns `None`.
  - If the process has no children, or has been killed, it raises
    `ChildProcessError`.
- `sleep(proc, chan)` and `wakeup(chan)` put processes to sleep on a
  channel and wake them again.
- `kill(pid)` marks a process killed and wakes it if it is asleep. It
  raises `ProcessLookupError` for an unknown pid.
- `yield_cpu(proc)` makes a process runnable again.
- `schedule_pass()` is a generator that makes one sweep over the table:
  - Each runnable process gets its quantum from
    `dynamic_quantum(execution_count, total_cpu_ticks)`. The quantum is
    `5 + execution_count * 5 / total_cpu_ticks`, using integer division
    that truncates toward zero. A tick count of 0 is treated as 1.
  - The process is set `RUNNING` and yielded. When the generator is
    resumed, a process that is still `RUNNING` goes back to `RUNNABLE`.
  - A process with more than 500 CPU ticks is put to sleep on the
    `"cpu_limit"` channel instead of being run.
- `timer_tick(proc)` handles one timer interrupt:
  - It counts the tick and charges it to the running process.
  - It takes one unit off that process's quantum.
  - It returns `True` when the process lost the CPU, either because its
    quantum ran out or because it had been killed and has now exited.
- `procdump()` returns one line per slot in use, in the form
  `"<pid> <state> <name>"`.
- Scheduler messages are collected in `table.console`.
- Broken invariants raise `KernelPanic`, for example init exiting.

### `dynaquantum.syscalls`

- `Syscall` holds the call numbers, from `FORK = 1` to `YIELD = 23`.
- `SyscallDispatcher(table)` has handlers for `FORK`, `EXIT`, `GETPID`,
  `UPTIME` and `YIELD`.
  - `register(number, handler)` binds further handlers. Each handler is a
    `handler(proc) -> int`.
  - `dispatch(proc, number)` returns the handler's result. For an unknown
    number it logs a message to the console and returns `-1`.
  - A process that has been killed is exited after the call.
- `getprocs(table, limit)` returns up to `limit` `UProc` snapshots, in
  slot order. Each snapshot holds pid, ppid, state name, name, quantum and
  execution count.

### `dynaquantum.modrr`

`custom_scheduler(processes, base_quantum)` runs a round-robin simulation
over a list of `Process` records:

- It sorts the list by arrival time.
- Each time a process is scheduled, its quantum comes from
  `calculate_time_quantum(base, scheduled_count, total_execution_time)`.
- It fills in each process's start, wait and turnaround times.
- It raises `ValueError` when the base quantum is below 1 or a process
  has no burst time.

`format_process_details(processes)` renders the result table, followed by
the average wait time and the average turnaround time.

## Installation

```
pip install .
```

## Command line

```
dynaquantum-rr
```

The command asks, on standard input, for:

1. the number of processes;
2. each process's burst time and arrival time;
3. the base time quantum.

It then prints the result table and the averages. On invalid input it
prints an error and exits with status 1.

## Library use

```python
from dynaquantum.proc import ProcTable

table = ProcTable(64)
init = table.userinit()
child_pid = table.fork(init)
for proc in table.schedule_pass():
    table.timer_tick(proc)
print(table.procdump())
```

```python
from dynaquantum.modrr import Process, custom_scheduler, format_process_details

procs = [Process(pid=1, burst_time=10, arrival_time=0),
         Process(pid=2, burst_time=4, arrival_time=2)]
custom_scheduler(procs, 3)
print(format_process_details(procs))
```

## What this package does not do

The process table models scheduling state only:

- There is no memory management, file system, program loading (`exec`),
  pipes or device I/O.
- Open files and the working directory are plain values that are copied
  and cleared.
- The dispatcher has built-in handlers only for fork, exit, getpid,
  uptime and yield. Any other call number returns `-1` unless you
  register a handler for it.

## Running the tests

```
pip install .[test]
pytest
```
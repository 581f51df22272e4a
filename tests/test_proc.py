import pytest

from dynaquantum.proc import (
    BASE_QUANTUM,
    CPU_TICK_LIMIT,
    DEFAULT_TIME_QUANTUM,
    KernelPanic,
    ProcState,
    ProcTable,
    dynamic_quantum,
)


@pytest.fixture
def table():
    return ProcTable(8)


def _child(table, parent):
    pid = table.fork(parent)
    return next(p for p in table.procs if p.pid == pid)


def test_allocproc_initial_fields(table):
    proc = table.allocproc()
    assert proc.state is ProcState.EMBRYO
    assert proc.pid == 1
    assert proc.time_quantum == DEFAULT_TIME_QUANTUM
    assert proc.execution_count == 0
    assert proc.last_runtime == 0
    assert proc.total_cpu_ticks == 1


def test_allocproc_full_returns_none():
    small = ProcTable(2)
    assert small.allocproc() is not None
    assert small.allocproc() is not None
    assert small.allocproc() is None


def test_pids_strictly_increase(table):
    pids = [table.allocproc().pid for _ in range(4)]
    assert pids == sorted(set(pids))


def test_userinit(table):
    init = table.userinit()
    assert table.initproc is init
    assert init.name == "initcode"
    assert init.cwd == "/"
    assert init.state is ProcState.RUNNABLE


def test_fork_copies_parent(table):
    init = table.userinit()
    init.open_files.append("console")
    child = _child(table, init)
    assert child.parent is init
    assert child.name == init.name
    assert child.cwd == init.cwd
    assert child.open_files == init.open_files
    assert child.open_files is not init.open_files
    assert child.state is ProcState.RUNNABLE


def test_fork_without_slot_raises():
    small = ProcTable(1)
    init = small.userinit()
    with pytest.raises(RuntimeError):
        small.fork(init)


def test_exit_of_init_panics(table):
    init = table.userinit()
    with pytest.raises(KernelPanic, match="init exiting"):
        table.exit(init)


def test_exit_reparents_children_to_init(table):
    init = table.userinit()
    middle = _child(table, init)
    grandchild = _child(table, middle)
    table.exit(middle)
    assert middle.state is ProcState.ZOMBIE
    assert middle.cwd is None
    assert grandchild.parent is init
    assert table.wait(init) == middle.pid
    assert all(p.pid != middle.pid for p in table.procs)


def test_wait_without_children_raises(table):
    init = table.userinit()
    with pytest.raises(ChildProcessError):
        table.wait(init)


def test_wait_sleeps_until_child_exits(table):
    init = table.userinit()
    child = _child(table, init)
    assert table.wait(init) is None
    assert init.state is ProcState.SLEEPING
    assert init.chan is init
    table.exit(child)
    assert init.state is ProcState.RUNNABLE
    assert table.wait(init) == child.pid


def test_wait_when_killed_raises(table):
    init = table.userinit()
    _child(table, init)
    init.killed = True
    with pytest.raises(ChildProcessError):
        table.wait(init)


def test_kill_wakes_sleeper(table):
    init = table.userinit()
    child = _child(table, init)
    table.sleep(child, "disk")
    table.kill(child.pid)
    assert child.killed is True
    assert child.state is ProcState.RUNNABLE


def test_kill_unknown_pid_raises(table):
    table.userinit()
    with pytest.raises(ProcessLookupError):
        table.kill(999)


def test_wakeup_only_matching_channel(table):
    init = table.userinit()
    a = _child(table, init)
    b = _child(table, init)
    table.sleep(a, "disk")
    table.sleep(b, "pipe")
    table.wakeup("disk")
    assert a.state is ProcState.RUNNABLE
    assert b.state is ProcState.SLEEPING


def test_sleep_without_process_panics(table):
    with pytest.raises(KernelPanic):
        table.sleep(None, "disk")


def test_schedule_pass_announces_and_runs_in_order(table):
    init = table.userinit()
    a = _child(table, init)
    b = _child(table, init)
    seen = []
    for proc in table.schedule_pass():
        assert proc.state is ProcState.RUNNING
        assert table.current is proc
        assert proc.time_quantum == dynamic_quantum(proc.execution_count, proc.total_cpu_ticks)
        seen.append(proc.pid)
    assert seen == [init.pid, a.pid, b.pid]
    assert table.console[0] == "Dynamic Quantum Scheduler active! Formula: Q = 5 + (EC * 5 / Ticks)"
    assert [p.execution_count for p in (init, a, b)] == [1, 1, 1]


def test_schedule_pass_announces_once(table):
    table.userinit()
    list(table.schedule_pass())
    list(table.schedule_pass())
    banners = [line for line in table.console if line.startswith("Dynamic Quantum")]
    assert len(banners) == 1


def test_schedule_pass_preempts_running(table):
    init = table.userinit()
    list(table.schedule_pass())
    assert init.state is ProcState.RUNNABLE
    assert table.current is None


def test_scheduler_sleeps_process_over_tick_limit(table):
    init = table.userinit()
    init.total_cpu_ticks = CPU_TICK_LIMIT + 1
    assert list(table.schedule_pass()) == []
    assert init.state is ProcState.SLEEPING
    assert init.chan == "cpu_limit"
    assert any(line.startswith(f"Sleeping PID {init.pid}") for line in table.console)


def test_scheduler_logs_scheduling_line(table):
    init = table.userinit()
    list(table.schedule_pass())
    assert any(line.startswith(f"Scheduling PID {init.pid} |") for line in table.console)


def test_timer_tick_expires_quantum(table):
    table.userinit()
    gen = table.schedule_pass()
    proc = next(gen)
    quantum = proc.time_quantum
    start_ticks = proc.total_cpu_ticks
    results = [table.timer_tick(proc) for _ in range(quantum)]
    assert results[-1] is True
    assert not any(results[:-1])
    assert proc.state is ProcState.RUNNABLE
    assert proc.last_runtime == 0
    assert proc.total_cpu_ticks == start_ticks + quantum
    assert table.ticks == quantum
    with pytest.raises(StopIteration):
        next(gen)


def test_timer_tick_exits_killed_process(table):
    init = table.userinit()
    _child(table, init)
    gen = table.schedule_pass()
    next(gen)
    child = next(gen)
    child.killed = True
    assert table.timer_tick(child) is True
    assert child.state is ProcState.ZOMBIE


def test_timer_tick_ignores_idle_process(table):
    init = table.userinit()
    assert table.timer_tick(init) is False
    assert table.timer_tick(None) is False
    assert init.total_cpu_ticks == 1
    assert table.ticks == 2


def test_procdump_lists_used_slots(table):
    init = table.userinit()
    assert table.procdump() == [f"{init.pid} runble initcode"]


@pytest.mark.parametrize("ticks", [1, 3, 10, 500])
def test_dynamic_quantum_base_without_executions(ticks):
    assert dynamic_quantum(0, ticks) == BASE_QUANTUM


@pytest.mark.parametrize("count", [0, 1, 4, 9])
def test_dynamic_quantum_zero_ticks_treated_as_one(count):
    assert dynamic_quantum(count, 0) == dynamic_quantum(count, 1)


def test_dynamic_quantum_grows_with_execution_count():
    values = [dynamic_quantum(count, 7) for count in range(30)]
    assert values == sorted(values)
    assert values[-1] > values[0]
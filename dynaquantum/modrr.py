"""Simulation of round robin with a quantum that grows with scheduling frequency."""

from __future__ import annotations

import argparse
import re
import sys
from collections import deque
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Process:
    """One simulated process and the times computed for it."""

    pid: int
    burst_time: int
    arrival_time: int
    remaining_time: Optional[int] = None
    wait_time: int = 0
    turnaround_time: int = 0
    start_time: int = 0
    scheduled_count: int = 0
    _started: bool = field(default=False, repr=False, compare=False)

    def __post_init__(self):
        if self.remaining_time is None:
            self.remaining_time = self.burst_time


def calculate_time_quantum(base_quantum, scheduled_count, total_execution_time):
    """Base quantum scaled up by how often the process has been scheduled."""
    if total_execution_time == 0:
        return float(base_quantum)
    return base_quantum + (scheduled_count / total_execution_time) * base_quantum


def custom_scheduler(processes, base_quantum):
    """Run the simulation, sorting ``processes`` by arrival and filling in times."""
    processes.sort(key=lambda p: p.arrival_time)
    if not processes:
        return processes
    if base_quantum < 1:
        raise ValueError("base quantum must be at least 1")
    for proc in processes:
        if proc.remaining_time <= 0:
            raise ValueError(f"process {proc.pid} has no burst time to run")

    ready: deque = deque()
    current_time = 0
    completed = 0
    total_execution_time = 0.0

    while completed < len(processes):
        for proc in processes:
            if (
                proc.arrival_time <= current_time
                and proc.remaining_time > 0
                and not any(queued is proc for queued in ready)
            ):
                ready.append(proc)

        if not ready:
            current_time += 1
            continue

        proc = ready.popleft()
        if not proc._started:
            proc._started = True
            proc.start_time = current_time
        proc.scheduled_count += 1

        quantum = calculate_time_quantum(
            base_quantum, proc.scheduled_count, total_execution_time
        )
        execution_time = min(int(quantum), proc.remaining_time)
        proc.remaining_time -= execution_time
        total_execution_time += execution_time
        current_time += execution_time

        if proc.remaining_time == 0:
            completed += 1
            proc.turnaround_time = current_time - proc.arrival_time
            proc.wait_time = proc.turnaround_time - proc.burst_time
        else:
            ready.append(proc)
    return processes


def _hundredths(value: int) -> str:
    whole, frac = divmod(value, 100)
    return f"{whole}.{frac:02d}"


def format_process_details(processes):
    """Render the result table followed by average wait and turnaround."""
    lines = ["Process ID\tBurst Time\tArrival Time\tStart Time\tWait Time\tTurnaround Time"]
    lines.extend(
        "\t\t".join(
            str(v)
            for v in (p.pid, p.burst_time, p.arrival_time, p.start_time,
                      p.wait_time, p.turnaround_time)
        )
        for p in processes
    )
    text = "\n".join(lines) + "\n"
    if processes:
        count = len(processes)
        avg_wait = int(sum(p.wait_time for p in processes) / count * 100)
        avg_turnaround = int(sum(p.turnaround_time for p in processes) / count * 100)
        text += f"\nAverage Wait Time: {_hundredths(avg_wait)}\n"
        text += f"Average Turnaround Time: {_hundredths(avg_turnaround)}\n"
    return text


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _ask(prompt: str) -> int:
    sys.stdout.write(prompt)
    sys.stdout.flush()
    return _atoi(sys.stdin.readline())


def main(argv=None):
    """Read processes interactively, simulate them and print the results."""
    parser = argparse.ArgumentParser(
        description="Simulate round robin with a dynamic time quantum."
    )
    parser.parse_args(argv)

    count = _ask("Enter the number of processes: ")
    processes = []
    for pid in range(1, count + 1):
        burst = _ask(f"Enter burst time for process {pid}: ")
        arrival = _ask(f"Enter arrival time for process {pid}: ")
        processes.append(Process(pid=pid, burst_time=burst, arrival_time=arrival))
    base_quantum = _ask("Enter the base time quantum: ")

    try:
        custom_scheduler(processes, base_quantum)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    sys.stdout.write(format_process_details(processes))
    return 0
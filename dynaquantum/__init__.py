"""Process-table simulation with a dynamic time-quantum scheduler, and a round-robin calculator."""

__version__ = "0.1.0"
__all__ = ["proc", "syscalls", "modrr"]
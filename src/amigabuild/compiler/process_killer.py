"""
Kill a process together with everything it spawned.

Two strategies share one `kill_tree(pid)` operation: the native taskkill
utility on Windows (children are not killed with their parent there) and a
psutil walk of the descendants elsewhere. Both are best effort: they never
raise, whatever state the tree is in.
"""
import platform
import subprocess
from typing import Callable, Optional, Protocol
import psutil

TASK_KILL = "C:\\Windows\\System32\\taskkill.exe"


class ProcessTreeKiller(Protocol):
    def kill_tree(self, pid: int) -> None:
        ...


class TaskkillTreeKiller:
    def __init__(self, log: Optional[Callable[[str], None]] = None):
        self.log = log

    def kill_tree(self, pid: int) -> None:
        try:
            subprocess.run(
                [TASK_KILL, "/F", "/T", "/PID", str(pid)],
                capture_output=True,
                check=False,
            )
        except OSError as e:
            if self.log:
                self.log(f"taskkill failed for {pid}: {e}")


class PsutilTreeKiller:
    def __init__(self, log: Optional[Callable[[str], None]] = None, grace_seconds: float = 1.0):
        self.log = log
        self.grace_seconds = grace_seconds

    def kill_tree(self, pid: int) -> None:
        try:
            parent = psutil.Process(pid)
            children = parent.children(recursive=True)
        except psutil.Error as e:
            # Already gone
            self._log(f"Cannot inspect process {pid}: {e}")
            return

        # Children first so nothing gets re-parented mid-way
        for child in reversed(children):
            try:
                child.terminate()
            except psutil.Error:
                pass

        try:
            _, alive = psutil.wait_procs(children, timeout=self.grace_seconds)
        except psutil.Error as e:
            self._log(f"Waiting for children of {pid} failed: {e}")
            alive = children

        for child in alive:
            try:
                child.kill()
            except psutil.Error:
                pass

        # The root is reaped by whoever spawned it, so no wait here
        try:
            parent.kill()
        except psutil.Error as e:
            self._log(f"Error killing process {pid}: {e}")

    def _log(self, msg: str):
        if self.log:
            self.log(msg)


def default_tree_killer(log: Optional[Callable[[str], None]] = None) -> ProcessTreeKiller:
    """Picks the strategy for the running platform."""
    if platform.system() == "Windows":
        return TaskkillTreeKiller(log)
    return PsutilTreeKiller(log)

"""Chromium process tree termination."""

import subprocess

import psutil

from ..constants import PREWARM_TERMINATE_TIMEOUT_SECS

import logging
logger = logging.getLogger(__name__)


def _signal_all(procs: list[psutil.Process], kill: bool = False) -> None:
    for p in procs:
        try:
            if kill:
                p.kill()
            else:
                p.terminate()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue


def terminate_process_tree(
    proc: subprocess.Popen,
    timeout: float = PREWARM_TERMINATE_TIMEOUT_SECS,
) -> None:
    """
    Terminate a launched process and every descendant it spawned.

    Chromium forks zygote, GPU and renderer helpers, so signalling only the
    top-level pid can leave orphans behind. Sends SIGTERM to the whole tree,
    waits up to `timeout`, SIGKILLs survivors, then reaps `proc`.
    A process that already exited is not an error.

    Args:
        proc: Process returned by launch_chrome_process
        timeout: Seconds to wait after each signal round
    """
    try:
        parent = psutil.Process(proc.pid)
        tree = [parent] + parent.children(recursive=True)
    except psutil.NoSuchProcess:
        tree = []

    _signal_all(tree)
    _, alive = psutil.wait_procs(tree, timeout=timeout)
    if alive:
        logger.debug("Killing %d process(es) that ignored SIGTERM", len(alive))
        _signal_all(alive, kill=True)
        psutil.wait_procs(alive, timeout=timeout)

    try:
        proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning("Process %s did not exit after kill", proc.pid)


def is_process_running(pid: int) -> bool:
    """Return True if pid exists and is not a zombie."""
    try:
        return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return False


__all__ = [
    "terminate_process_tree",
    "is_process_running",
]

"""Starting commands detached from the compositor, and open-file limits."""

from __future__ import annotations

import logging
import os
import resource
import shlex
import signal

log = logging.getLogger(__name__)

_original_nofile: tuple[int, int] | None = None


def increase_nofile_limit() -> None:
    """Raise the soft limit on open files to the hard limit."""
    global _original_nofile
    try:
        _original_nofile = resource.getrlimit(resource.RLIMIT_NOFILE)
    except (OSError, ValueError):
        log.exception("Failed to bump max open files limit: getrlimit(NOFILE) failed")
        return

    hard = _original_nofile[1]
    try:
        resource.setrlimit(resource.RLIMIT_NOFILE, (hard, hard))
    except (OSError, ValueError):
        log.exception("Failed to bump max open files limit: setrlimit(NOFILE) failed")
        log.info("Running with %d max open files", _original_nofile[0])


def restore_nofile_limit() -> None:
    """Put back the open-file limit saved by :func:`increase_nofile_limit`."""
    if _original_nofile is None or _original_nofile[0] == 0:
        return
    try:
        resource.setrlimit(resource.RLIMIT_NOFILE, _original_nofile)
    except (OSError, ValueError):
        log.exception(
            "Failed to restore max open files limit: setrlimit(NOFILE) failed"
        )


def _detach_and_exec(argv: list[str]) -> None:
    restore_nofile_limit()
    os.setsid()
    signal.pthread_sigmask(signal.SIG_SETMASK, set())
    try:
        grandchild = os.fork()
    except OSError:
        log.error("unable to fork()")
        return
    if grandchild == 0:
        try:
            os.execvp(argv[0], argv)
        finally:
            os._exit(0)


def spawn_async_no_shell(command: str) -> None:
    """Run *command*, split by shell quoting rules but without a shell.

    The command is started through a double fork so that it is reparented
    to init and never becomes a zombie. Commands that cannot be parsed are
    logged and ignored.
    """
    try:
        argv = shlex.split(command)
    except ValueError as exc:
        log.warning("%s", exc)
        return
    if not argv:
        log.warning("Text was empty (or contained only whitespace)")
        return

    try:
        child = os.fork()
    except OSError:
        log.error("unable to fork()")
        return
    if child == 0:
        try:
            _detach_and_exec(argv)
        finally:
            os._exit(0)
    os.waitpid(child, 0)
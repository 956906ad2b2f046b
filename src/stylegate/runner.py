"""Runner: resolves task names to :class:`StyleTask` instances and drives their steps."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from stylegate import log
from stylegate.config import Config
from stylegate.errors import ConfigError
from stylegate.files import BufferedFile, iter_source_paths
from stylegate.run import Invocation, RunChannel
from stylegate.task import StyleTask
from stylegate.tools.registry import Toolchain

FUNCS = ("lint", "nest", "compress", "build")
BUILD_STEPS = ("lint", "nest", "compress")
WATCH_STEPS = ("lint", "nest")

Snapshot = dict[Path, float]


class Runner:
    """Run one function (``lint``/``nest``/``compress``/``build``) over several tasks.

    Usage::

        runner = Runner(cfg, tools)
        channel = runner.run(["app", "admin"], "build")
        if channel.failed:
            ...
    """

    def __init__(self, cfg: Config, tools: Toolchain) -> None:
        self.cfg = cfg
        self.tools = tools
        self._tasks: dict[str, StyleTask] = {}

    def task_names(self, names: list[str] | tuple[str, ...]) -> list[str]:
        """Return *names*, or every configured task when empty."""
        selected = list(names) or sorted(self.cfg.tasks)
        if not selected:
            raise ConfigError("No tasks configured. Add a 'tasks' section to stylegate.json.")
        return selected

    def task(self, name: str) -> StyleTask:
        if name not in self._tasks:
            self._tasks[name] = StyleTask.from_config(name, self.cfg, self.tools)
        return self._tasks[name]

    def run(self, names: list[str] | tuple[str, ...], func: str) -> RunChannel:
        if func not in FUNCS:
            raise ValueError(f"Unknown function: {func}")
        selected = self.task_names(names)
        tasks = [self.task(name) for name in selected]

        requested = tuple(f"{name}:{func}" for name in selected)
        invocation = Invocation(requested=requested)

        channel = RunChannel()
        for task in tasks:
            self.run_task(task, func, invocation, channel.child())
            if channel.failed:
                break
        return channel

    def run_task(self, task: StyleTask, func: str, invocation: Invocation, channel: RunChannel) -> int:
        """Run *func* on one task and return how many files were written."""
        if func == "build":
            steps = BUILD_STEPS
            invocation = invocation.child(task.label(func))
        else:
            steps = (func,)
        return self._run_steps(task, steps, invocation, channel)

    def _run_steps(
        self,
        task: StyleTask,
        steps: tuple[str, ...],
        invocation: Invocation,
        channel: RunChannel,
    ) -> int:
        written = 0
        for step in steps:
            label = task.label(step)
            started = time.monotonic()
            if step == "lint":
                if task.lint(invocation, channel):
                    log.success(f"{label}: no lint errors")
            elif task.lint_failed:
                log.warn(f"{label}: skipped, fix lint errors first")
            else:
                outputs = task.compile(step == "compress", invocation, channel)
                count = sum(1 for record in outputs if isinstance(record, BufferedFile))
                written += count
                if not channel.ended:
                    elapsed = time.monotonic() - started
                    log.success(f"{label}: wrote {count} file(s) in {elapsed:.2f}s")
            if channel.failed or channel.ended:
                break
        return written

    # ── watch ────────────────────────────────────────────────────

    def snapshot(self, task: StyleTask) -> Snapshot:
        """Modification times of every file in the task's source set."""
        snap: Snapshot = {}
        for path, _base in iter_source_paths(task.options.src, task.options.cwd):
            try:
                snap[path] = path.stat().st_mtime
            except OSError:
                continue
        return snap

    def watch_cycle(self, task: StyleTask) -> RunChannel:
        """Rebuild after a change. Watcher-triggered runs were not requested, so
        lint errors stay advisory and do not stop the watcher."""
        channel = RunChannel()
        invocation = Invocation(requested=(), stack=(task.label("watch"),))
        self._run_steps(task, WATCH_STEPS, invocation, channel)
        return channel

    def watch(
        self,
        names: list[str] | tuple[str, ...],
        *,
        sleep: Callable[[float], None] = time.sleep,
        max_cycles: int = 0,
    ) -> None:
        """Poll source sets and re-run lint + nest for tasks whose files changed.

        ``max_cycles`` bounds the number of polls (0 = until interrupted).
        """
        tasks = [self.task(name) for name in self.task_names(names)]
        snapshots = {task.name: self.snapshot(task) for task in tasks}
        log.info(f"Watching {', '.join(t.name for t in tasks)} (Ctrl+C to stop)")

        cycles = 0
        while not max_cycles or cycles < max_cycles:
            cycles += 1
            sleep(self.cfg.poll_interval)
            for task in tasks:
                current = self.snapshot(task)
                if current == snapshots[task.name]:
                    continue
                snapshots[task.name] = current
                log.info(f"{task.name}: change detected")
                self.watch_cycle(task)

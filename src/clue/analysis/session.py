"""Analysis session - run the extractor and swap its result into the model.

Lifecycle:
1. ``run()`` loads the persisted result when there is one.
2. Otherwise the extractor process writes its messages to a temporary file.
   Stdout lines are forwarded as progress, stderr is logged.
3. On exit status 0 the messages are resolved into a staging model, which
   then replaces the content of the session model and is saved.

Only one extractor runs per session. A failed or cancelled run leaves the
model exactly as it was.
"""

from __future__ import annotations

import asyncio
import contextlib
import tempfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from clue.analysis.extractor import ExtractorCommand, build_command
from clue.analysis.repository import read_repository
from clue.config.models import ClueConfig
from clue.core.errors import AnalysisError
from clue.core.logging import clear_run_id, get_logger, set_run_id
from clue.extract.messages import read_output_file
from clue.model.models import ClassifiedModel
from clue.model.store import load_into, save_result
from clue.resolve.patterns import get_profile
from clue.resolve.resolver import EntityResolver, ResolutionStats

log = get_logger("analysis")

AnalysisStatus = Literal["ok", "loaded", "failed", "cancelled"]


@dataclass
class AnalysisOutcome:
    """Result of one ``run()`` or ``analyze()`` call."""

    status: AnalysisStatus
    returncode: int | None = None
    stats: ResolutionStats | None = None
    stderr: str = ""
    warnings: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status in ("ok", "loaded")


class AnalysisSession:
    """Owns the extractor process for one model."""

    def __init__(
        self,
        model: ClassifiedModel,
        config: ClueConfig,
        repo_root: Path,
        *,
        on_progress: Callable[[str], None] | None = None,
    ) -> None:
        self._model = model
        self._config = config
        self._repo_root = repo_root.resolve()
        self._on_progress = on_progress
        self._proc: asyncio.subprocess.Process | None = None
        self._running = False
        self._cancelled = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def analysis_root(self) -> Path:
        return (self._repo_root / self._config.extractor.root_dir).resolve()

    async def run(self, *, reanalyze: bool = False) -> AnalysisOutcome:
        """Load the persisted result, or analyze and save when there is none.

        Args:
            reanalyze: Ignore the persisted result. It is overwritten only
                when the new run succeeds.
        """
        if not reanalyze and self._model.result_path is not None and load_into(self._model):
            log.info("result_loaded", path=str(self._model.result_path))
            return AnalysisOutcome(status="loaded")

        outcome = await self.analyze()
        if outcome.status == "ok" and self._model.result_path is not None:
            save_result(self._model)
        return outcome

    async def analyze(self) -> AnalysisOutcome:
        """Run the extractor once and resolve its output.

        Raises:
            AnalysisError: Another run is in progress, the extractor cannot be
                started, or its output is not a message document.
        """
        if self._running:
            raise AnalysisError.already_running()
        self._running = True
        self._cancelled = False
        set_run_id()
        backend = self._config.extractor.backend
        try:
            with tempfile.TemporaryDirectory(prefix="clue-") as tmp:
                output_path = Path(tmp) / f"{backend}.json"
                command = build_command(self._config.extractor, self.analysis_root, output_path)
                log.info("extractor_started", backend=backend, root=str(self.analysis_root))
                returncode, stderr = await self._run_process(command)

                if self._cancelled:
                    log.info("analysis_cancelled", backend=backend)
                    return AnalysisOutcome(status="cancelled", returncode=returncode, stderr=stderr)
                if returncode != 0:
                    log.warning("extractor_failed", backend=backend, returncode=returncode)
                    return AnalysisOutcome(status="failed", returncode=returncode, stderr=stderr)

                output = read_output_file(output_path, root=self._repo_root)

            staging = ClassifiedModel()
            stats = EntityResolver(staging, get_profile(backend)).resolve(output)
            staging.repository = read_repository(self._repo_root)
            self._model.replace_with(staging)
            return AnalysisOutcome(
                status="ok",
                returncode=returncode,
                stats=stats,
                stderr=stderr,
                warnings=stats.warnings,
            )
        finally:
            self._running = False
            self._proc = None
            clear_run_id()

    def cancel(self) -> bool:
        """Kill the running extractor. Returns False when nothing runs."""
        if not self._running:
            return False
        self._cancelled = True
        self._kill()
        return True

    def _kill(self) -> None:
        proc = self._proc
        if proc is not None and proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()

    async def _run_process(self, command: ExtractorCommand) -> tuple[int, str]:
        try:
            proc = await asyncio.create_subprocess_exec(
                *command.argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=command.cwd,
            )
        except FileNotFoundError as e:
            raise AnalysisError.extractor_not_found(command.executable) from e
        self._proc = proc
        if self._cancelled:
            self._kill()

        stderr_lines: list[str] = []

        async def pump_stdout() -> None:
            assert proc.stdout is not None
            async for raw in proc.stdout:
                line = raw.decode(errors="replace").rstrip()
                if line and self._on_progress is not None:
                    self._on_progress(line)

        async def pump_stderr() -> None:
            assert proc.stderr is not None
            async for raw in proc.stderr:
                line = raw.decode(errors="replace").rstrip()
                stderr_lines.append(line)
                log.debug("extractor_stderr", line=line)

        try:
            await asyncio.gather(pump_stdout(), pump_stderr())
            returncode = await proc.wait()
        except asyncio.CancelledError:
            self._cancelled = True
            self._kill()
            with contextlib.suppress(ProcessLookupError, asyncio.CancelledError):
                await proc.wait()
            raise
        return returncode, "\n".join(stderr_lines)

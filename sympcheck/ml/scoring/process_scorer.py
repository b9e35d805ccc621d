"""
Scoring strategy that shells out to an external prediction script.
"""
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

from sympcheck.core.exceptions import ScoringCollaboratorError
from sympcheck.ml.scoring.base import ScoringStrategy

logger = logging.getLogger(__name__)


class ProcessScoringStrategy(ScoringStrategy):
    """Runs ``<python> <script> '<json symptom list>'`` and parses stdout as JSON."""

    name = "process"

    def __init__(self, script_path: str, python_executable: str = "python",
                 timeout: Optional[float] = None):
        self.script_path = script_path
        self.python_executable = python_executable
        self.timeout = timeout

    def build_command(self, symptoms: List[str]) -> List[str]:
        return [self.python_executable, self.script_path, json.dumps(symptoms)]

    async def score(self, symptoms: List[str]) -> Dict[str, Any]:
        cmd = self.build_command(symptoms)
        proc = None
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Scoring script timed out after {self.timeout}s")
            if proc:
                proc.kill()
                await proc.wait()
            raise ScoringCollaboratorError(
                f"Scoring script timed out after {self.timeout} seconds"
            ) from None
        except OSError as e:
            raise ScoringCollaboratorError(f"Failed to start scoring script: {e}") from e

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")

        if stderr:
            logger.debug(f"Scoring script stderr: {stderr[:500]}")

        if proc.returncode != 0:
            raise ScoringCollaboratorError(
                f"Scoring script failed with exit code {proc.returncode}: {stderr.strip()[:500]}"
            )

        try:
            payload = json.loads(stdout)
        except ValueError as e:
            raise ScoringCollaboratorError(f"Failed to parse scoring output: {e}") from e

        if not isinstance(payload, dict):
            raise ScoringCollaboratorError("Scoring output is not a JSON object")

        return payload

    def get_metadata(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "script_path": self.script_path,
            "python_executable": self.python_executable,
            "timeout": self.timeout,
        }

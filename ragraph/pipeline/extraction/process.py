"""
Subprocess Relation Extractor
=============================

Runs an external program, writes the document on its stdin and reads the
extraction contract from its stdout:

    {"tokens": ["..."], "triplets": [{"subject": "...", "predicate": "...", "object": "..."}]}
"""

import asyncio
import json
from typing import List, Sequence

import structlog

from ragraph.exceptions import DependencyError
from ragraph.models import Extraction
from ragraph.pipeline.extraction.base import RelationExtractor

log = structlog.get_logger()


class SubprocessExtractor(RelationExtractor):
    """
    Out-of-process extractor.

    Args:
        command: argv of the extractor program (e.g. ["python3", "extract_triplets.py"])
        timeout_s: Seconds before the process is killed
    """

    name = "subprocess"

    def __init__(self, command: Sequence[str], timeout_s: float = 30.0):
        if not command:
            raise ValueError("command must not be empty")
        self.command: List[str] = list(command)
        self.timeout_s = timeout_s

    async def extract(self, text: str) -> Extraction:
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise DependencyError(f"Cannot start extractor {self.command[0]!r}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(text.encode("utf-8")),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise DependencyError(f"Extractor timed out after {self.timeout_s}s") from e
        finally:
            # Also reached on cancellation; the child must not outlive the call
            if process.returncode is None:
                process.kill()
                await process.wait()

        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()[:200]
            raise DependencyError(f"Extractor exited with code {process.returncode}: {detail}")

        try:
            payload = json.loads(stdout.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DependencyError(f"Extractor returned invalid JSON: {e}") from e

        extraction = Extraction.from_payload(payload)
        log.debug(
            "Subprocess extraction done",
            tokens=len(extraction.tokens),
            triplets=len(extraction.triplets),
        )
        return extraction

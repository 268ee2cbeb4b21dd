"""Decoded pool record source backed by a JSON-lines file.

Each line holds one already-decoded DEX pool record as a JSON object, the
same nested shape the stream decoder produces (bytes fields as 0x hex).
Use "-" to read from stdin.

Reads never block the event loop: a piped stdin is consumed through an
asyncio ``StreamReader``, regular files line by line in the default executor.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import AsyncIterator

import orjson

logger = logging.getLogger(__name__)

# Upper bound for one record line on a pipe (large price tables)
_MAX_LINE_BYTES = 16 * 1024 * 1024


class JsonLinesRecordSource:
    """Async iterator over decoded records stored one per line."""

    def __init__(self, path: str | Path):
        """
        Args:
            path: File path, or "-" for stdin
        """
        self.path = str(path)
        self.lines_read = 0
        self.records_read = 0
        self.errors = 0

    def _parse(self, line: str) -> dict | None:
        try:
            record = orjson.loads(line)
        except orjson.JSONDecodeError as e:
            self.errors += 1
            logger.error(f"Failed to parse record on line {self.lines_read}: {e}")
            return None

        if not isinstance(record, dict):
            self.errors += 1
            logger.error(f"Line {self.lines_read} is not a JSON object, skipping")
            return None
        return record

    async def _pipe_lines(self, stream) -> AsyncIterator[str] | None:
        """Attach a StreamReader to a pipe, or None if ``stream`` is not one."""
        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader(limit=_MAX_LINE_BYTES)
        try:
            transport, _ = await loop.connect_read_pipe(
                lambda: asyncio.StreamReaderProtocol(reader), stream
            )
        except (ValueError, OSError, NotImplementedError):
            # Regular file redirected to stdin, or no pipe support
            return None

        async def lines() -> AsyncIterator[str]:
            try:
                while True:
                    raw = await reader.readline()
                    if not raw:
                        break
                    yield raw.decode("utf-8")
            finally:
                transport.close()

        return lines()

    async def _file_lines(self, stream) -> AsyncIterator[str]:
        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, stream.readline)
            if not line:
                break
            yield line

    async def _lines(self) -> AsyncIterator[str]:
        if self.path == "-":
            lines = await self._pipe_lines(sys.stdin)
            if lines is None:
                lines = self._file_lines(sys.stdin)
            async for line in lines:
                yield line
            return

        stream = open(self.path, encoding="utf-8")
        try:
            async for line in self._file_lines(stream):
                yield line
        finally:
            stream.close()

    async def __aiter__(self) -> AsyncIterator[dict]:
        async for line in self._lines():
            self.lines_read += 1
            line = line.strip()
            if not line:
                continue

            record = self._parse(line)
            if record is None:
                continue

            self.records_read += 1
            yield record

        logger.info(
            f"Record source exhausted: {self.records_read} records, "
            f"{self.errors} errors ({self.path})"
        )

import asyncio
import logging
import multiprocessing
from multiprocessing.pool import Pool
import pathlib
from typing import Awaitable

from ..detect.lines import read_lines

logger = logging.getLogger(__name__)


def read_lines_for_path(path: str):
    return read_lines(pathlib.Path(path))


class Processor:
    """Runs per-file work in a process pool and exposes the results as awaitables."""

    def __init__(self, concurrency: int | None = None):
        if concurrency is None:
            concurrency = multiprocessing.cpu_count()

        self._concurrency = concurrency
        self._pool: Pool = Pool(self._concurrency)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self._pool.close()

    @property
    def concurrency(self):
        return self._concurrency

    def read_lines(self, path: str) -> Awaitable[list[str]]:
        """Read the normalized lines of a file.

        The awaitable raises OSError when the file cannot be read."""
        logger.debug(f"Starting line loading for: {path}")

        async def log_and_read():
            result = await self._evaluate(read_lines_for_path, path)
            logger.debug(f"Completed line loading for: {path} ({len(result)} lines)")
            return result

        return log_and_read()

    def _evaluate(self, func, *args):
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        self._pool.apply_async(func, args=args,
                               callback=lambda v: loop.call_soon_threadsafe(future.set_result, v),
                               error_callback=lambda e: loop.call_soon_threadsafe(future.set_exception, e))

        return future

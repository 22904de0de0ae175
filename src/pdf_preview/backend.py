"""Lazy, single-flight loading of the PDF rendering engine.

The engine (PyMuPDF) is imported on first use and shared by every conversion
for the rest of the process. All engine calls run on one dedicated worker
thread, so the event loop never blocks on rendering and the engine is never
entered from two threads at once.
"""
import asyncio
import importlib
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .exceptions import BackendLoadError

logger = logging.getLogger(__name__)

ENGINE_MODULE = "pymupdf"
WORKER_THREAD_PREFIX = "pdf-preview-worker"


def import_engine() -> Any:
    """Import the rendering engine module."""
    return importlib.import_module(ENGINE_MODULE)


@dataclass
class RenderBackend:
    """A loaded rendering engine plus the worker its calls run on."""
    engine: Any
    executor: ThreadPoolExecutor
    version: str = "unknown"

    async def run(self, fn: Callable, *args, **kwargs) -> Any:
        """Run *fn* on the engine worker and await its result."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, lambda: fn(*args, **kwargs))


def configure_engine(engine: Any) -> str:
    """Prepare a freshly imported engine for use and return its version.

    MuPDF prints parse warnings to stderr by default; failures reach us as
    Python exceptions, so the stderr stream is switched off.
    """
    tools = getattr(engine, "TOOLS", None)
    if tools is None or not hasattr(engine, "open"):
        raise BackendLoadError(f"Module '{getattr(engine, '__name__', engine)}' is not a usable PDF engine")
    tools.mupdf_display_errors(False)
    return str(getattr(engine, "VersionBind", "unknown"))


@dataclass
class BackendLoader:
    """Owns the process's RenderBackend and guards its one-time initialization.

    The first caller of ensure_ready() starts the load; callers arriving while
    it is in flight await the same future. Success is cached, failure is not.
    """
    load: Callable[[], Any] = import_engine
    _backend: Optional[RenderBackend] = field(default=None, init=False, repr=False)
    _pending: Optional[asyncio.Future] = field(default=None, init=False, repr=False)

    @property
    def is_loaded(self) -> bool:
        return self._backend is not None

    async def ensure_ready(self) -> RenderBackend:
        """Return the loaded backend, loading it if necessary.

        Raises:
            BackendLoadError: If the engine cannot be imported or configured
        """
        if self._backend is not None:
            return self._backend

        if self._pending is None:
            logger.debug("Starting rendering engine load")
            self._pending = asyncio.ensure_future(self._load_once())
        else:
            logger.debug("Rendering engine load already in flight, waiting")

        # shield: one waiter going away must not cancel the shared load
        return await asyncio.shield(self._pending)

    async def _load_once(self) -> RenderBackend:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=WORKER_THREAD_PREFIX)
        loaded = False
        try:
            loop = asyncio.get_running_loop()
            engine = await loop.run_in_executor(executor, self.load)
            version = await loop.run_in_executor(executor, configure_engine, engine)
            loaded = True
        except BackendLoadError:
            raise
        except Exception as e:
            logger.error(f"Rendering engine failed to load: {e}")
            raise BackendLoadError(f"Failed to load PDF engine: {e}") from e
        finally:
            self._pending = None
            # covers cancellation too, which bypasses the except clauses
            if not loaded:
                executor.shutdown(wait=False)

        self._backend = RenderBackend(engine=engine, executor=executor, version=version)
        logger.info(f"Rendering engine ready ({ENGINE_MODULE} {version})")
        return self._backend


_default_loader: Optional[BackendLoader] = None


def get_default_loader() -> BackendLoader:
    """Return the process-wide loader used when callers do not supply one."""
    global _default_loader
    if _default_loader is None:
        _default_loader = BackendLoader()
    return _default_loader

"""Multi-threaded progressive renderer.

This module runs the path integrator over the whole image again and again,
folding every new sample into the 8-bit pixel buffer as a running average so
the picture refines while it is on screen. It supports:
- A fixed pool of worker threads, each owning an interleaved set of columns
  (worker k renders x = k, k + num_threads, ...)
- Primary ray caching during the first pass
- Cooperative cancellation through the session's running flag
- A "samples so far" counter for the display

The running average is kept in linear space. The stored 8-bit value is
decoded (RGB raised to 2.2), weighted by the number of passes it already
holds, combined with the new sample and encoded again (RGB raised to 1/2.2).
Alpha is averaged without gamma.

Example:
    >>> from spherepath.core.progressive import ProgressiveRenderer, RenderSession
    >>> from spherepath.scene.sphere_room import create_sphere_room_scene
    >>>
    >>> session = RenderSession(width=120, height=60, num_samples=16, seed=1)
    >>> scene = create_sphere_room_scene(session.width, session.height)
    >>> with ProgressiveRenderer(scene, session) as renderer:
    ...     renderer.start()
    ...     # Display renderer.pixels.data while the workers run
    ...     renderer.join()
"""

import logging
import threading
from dataclasses import dataclass, field
from types import TracebackType

import numpy as np
import numpy.typing as npt

from spherepath.core.integrator import MAX_DEPTH, radiance
from spherepath.core.pixels import PixelBuffer
from spherepath.scene.manager import Scene

logger = logging.getLogger(__name__)

# Display gamma applied to the stored RGB channels
GAMMA = 2.2


@dataclass
class RenderSession:
    """Settings and cancellation state of one render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of passes over the image.
        num_threads: Number of worker threads.
        max_depth: Maximum path length.
        seed: Seed for the per-worker random generators. None draws fresh
            entropy from the operating system.
        running: Cleared to ask the workers to stop.
    """

    width: int = 1200
    height: int = 600
    num_samples: int = 2048
    num_threads: int = 2
    max_depth: int = MAX_DEPTH
    seed: int | None = None
    running: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if self.num_samples <= 0:
            raise ValueError(f"num_samples must be positive, got {self.num_samples}")
        if self.num_threads <= 0:
            raise ValueError(f"num_threads must be positive, got {self.num_threads}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        self.running.set()

    @property
    def is_running(self) -> bool:
        """Whether the workers should keep going."""
        return self.running.is_set()

    def stop(self) -> None:
        """Ask the workers to stop after their current row."""
        self.running.clear()

    def spawn_generators(self) -> list[np.random.Generator]:
        """Create one independent random generator per worker."""
        seeds = np.random.SeedSequence(self.seed).spawn(self.num_threads)
        return [np.random.default_rng(s) for s in seeds]


def blend_sample(
    stored: npt.ArrayLike, sample: npt.ArrayLike, pass_index: int
) -> npt.NDArray[np.float64]:
    """Fold a new radiance sample into a stored display color.

    Args:
        stored: Current display colors as RGBA floats in [0, 1], shape (..., 4).
            They hold the average of pass_index earlier samples.
        sample: New linear radiance samples, shape (..., 4).
        pass_index: Number of samples already averaged into stored.

    Returns:
        The updated display colors (not yet clamped or quantized).
    """
    color = np.array(stored, dtype=np.float64)
    color[..., :3] = color[..., :3] ** GAMMA
    color = (color * pass_index + np.asarray(sample, dtype=np.float64)) / (pass_index + 1)
    color[..., :3] = np.maximum(color[..., :3], 0.0) ** (1.0 / GAMMA)
    return color


def worker_columns(start_x: int, width: int, num_threads: int) -> npt.NDArray[np.intp]:
    """Columns owned by the worker starting at start_x."""
    return np.arange(start_x, width, num_threads, dtype=np.intp)


def render_worker(
    scene: Scene,
    pixels: PixelBuffer,
    session: RenderSession,
    start_x: int,
    rng: np.random.Generator,
    progress: list[int],
) -> None:
    """Accumulate num_samples passes over the columns owned by one worker.

    The first pass computes and caches each pixel's primary ray; later
    passes reuse the cache. Each row of the worker's columns is traced as a
    single batch. The running flag is checked before every pass and every
    row.

    Args:
        scene: The scene to render; its camera cache must be allocated.
        pixels: The shared output buffer.
        session: Render settings and cancellation flag.
        start_x: First owned column, also the worker index.
        rng: The worker's random generator.
        progress: Shared per-worker list of completed passes; only
            progress[start_x] is written.
    """
    camera = scene.camera
    columns = worker_columns(start_x, session.width, session.num_threads)
    u = columns / session.width

    for i in range(session.num_samples):
        if not session.is_running:
            break
        for y in range(session.height):
            if not session.is_running:
                break
            if columns.size == 0:
                continue
            if i == 0:
                camera.cache_rays(camera.get_ray(u, y / session.height), columns, y)

            sample = radiance(
                camera.get_cached_rays(columns, y), scene, rng, max_depth=session.max_depth
            )
            stored = pixels.get_row(y, start_x, session.num_threads)
            pixels.set_row(y, blend_sample(stored, sample, i), start_x, session.num_threads)
        else:
            progress[start_x] = i + 1
            logger.debug("Worker %d finished pass %d/%d", start_x, i + 1, session.num_samples)


class ProgressiveRenderer:
    """A multi-threaded renderer that accumulates samples into a pixel buffer.

    The renderer owns the worker threads. The pixel buffer can be read at any
    time, and sample_count reports how many passes every worker has
    completed.

    Attributes:
        scene: The scene being rendered.
        session: Render settings and cancellation flag.
    """

    def __init__(
        self, scene: Scene, session: RenderSession | None = None, pixels: PixelBuffer | None = None
    ) -> None:
        """Initialize the renderer and allocate the camera's ray cache.

        Args:
            scene: The scene to render.
            session: Render settings. Defaults to RenderSession().
            pixels: Output buffer. Allocated when None.

        Raises:
            ValueError: If the pixel buffer does not match the session size.
        """
        self.scene = scene
        self.session = session if session is not None else RenderSession()
        if pixels is None:
            pixels = PixelBuffer(self.session.width, self.session.height)
        elif (pixels.width, pixels.height) != (self.session.width, self.session.height):
            raise ValueError(
                f"Pixel buffer is {pixels.width}x{pixels.height}, "
                f"session is {self.session.width}x{self.session.height}"
            )
        self._pixels = pixels
        self.scene.camera.allocate_ray_cache(self.session.width, self.session.height)

        self._progress = [0] * self.session.num_threads
        self._threads: list[threading.Thread] = []
        self._errors: list[BaseException] = []
        self._errors_lock = threading.Lock()

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.session.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.session.height

    @property
    def pixels(self) -> PixelBuffer:
        """The shared output buffer."""
        return self._pixels

    @property
    def sample_count(self) -> int:
        """Number of passes completed by every worker."""
        return min(self._progress)

    @property
    def target_samples(self) -> int:
        """Number of passes the render aims for."""
        return self.session.num_samples

    @property
    def started(self) -> bool:
        return bool(self._threads)

    @property
    def is_alive(self) -> bool:
        """Whether any worker thread is still running."""
        return any(thread.is_alive() for thread in self._threads)

    def _run_worker(self, start_x: int, rng: np.random.Generator) -> None:
        try:
            render_worker(self.scene, self._pixels, self.session, start_x, rng, self._progress)
        except Exception as e:
            logger.exception("Render worker %d failed", start_x)
            with self._errors_lock:
                self._errors.append(e)
            self.session.stop()

    def start(self) -> None:
        """Spawn the worker threads.

        Raises:
            RuntimeError: If the renderer was already started.
        """
        if self.started:
            raise RuntimeError("ProgressiveRenderer can only be started once")

        session = self.session
        session.running.set()
        for start_x, rng in enumerate(session.spawn_generators()):
            thread = threading.Thread(
                target=self._run_worker,
                args=(start_x, rng),
                name=f"render-worker-{start_x}",
                daemon=True,
            )
            self._threads.append(thread)

        logger.info(
            "Rendering %dx%d with %d samples on %d threads",
            session.width,
            session.height,
            session.num_samples,
            session.num_threads,
        )
        for thread in self._threads:
            thread.start()

    def stop(self) -> None:
        """Ask the workers to stop. Use join() to wait for them."""
        if self.session.is_running and self.is_alive:
            logger.info("Stopping render at %d samples", self.sample_count)
        self.session.stop()

    def _join_threads(self, timeout: float | None = None) -> None:
        for thread in self._threads:
            thread.join(timeout)

    def join(self, timeout: float | None = None) -> None:
        """Wait for the workers to finish.

        Args:
            timeout: Seconds to wait for each thread, or None to wait forever.

        Raises:
            RuntimeError: If a worker raised; the original exception is
                chained as the cause.
        """
        self._join_threads(timeout)
        with self._errors_lock:
            error = self._errors[0] if self._errors else None
        if error is not None:
            raise RuntimeError(f"Render worker failed: {error}") from error
        if not self.is_alive:
            logger.info("Render finished with %d samples", self.sample_count)

    def render(self) -> PixelBuffer:
        """Render all passes, blocking until done.

        Returns:
            The filled pixel buffer.
        """
        self.start()
        self.join()
        return self._pixels

    def __enter__(self) -> "ProgressiveRenderer":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.stop()
        if exc_type is None:
            self.join()
        else:
            self._join_threads()

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count}/{self.target_samples})"
        )

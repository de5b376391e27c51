# configloader/config/holder.py

"""
Process-wide access to a loaded Configuration.

ConfigHolder is a caller-owned handle that loads the configuration at most
once; a default holder backs the module-level initialize()/get_current()
functions. Configuration can also travel through contextvars contexts,
which avoids the global holder entirely.
"""

import contextvars
import logging
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator, Optional, Tuple

from configloader.errors import ConfigNotInitializedError
from .loaders import LoadOptions, load_configuration
from .models import Configuration

logger = logging.getLogger(__name__)


class HolderState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class ConfigHolder:
    """
    Holds a single Configuration, loaded at most once.

    The first call to initialize() runs the loader; every later call, whether
    concurrent or sequential, returns without loading again. A failed load is
    final: the holder stays empty until reset() is called.
    """

    def __init__(self, loader: Callable[[LoadOptions], Configuration] = load_configuration):
        self._loader = loader
        self._lock = threading.Lock()
        self._consumed = False
        self._state = HolderState.UNINITIALIZED
        self._instance: Optional[Configuration] = None

    @property
    def state(self) -> HolderState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is HolderState.READY

    def initialize(self, options: LoadOptions) -> None:
        """
        Loads the configuration with the given options, unless a load was already attempted.

        Raises:
            ConfigLoaderError: If this call performed the load and it failed.
        """
        with self._lock:
            if self._consumed:
                return
            self._consumed = True
            self._state = HolderState.INITIALIZING
            try:
                config = self._loader(options)
            except Exception:
                self._state = HolderState.FAILED
                logger.debug("Configuration initialization failed; holder stays empty.")
                raise
            self._instance = config
            self._state = HolderState.READY
        logger.info(f"Configuration initialized ({options.file_name}).")

    def get_current(self) -> Configuration:
        """
        Returns the loaded configuration.

        Raises:
            ConfigNotInitializedError: If initialize() has not succeeded.
        """
        instance = self._instance
        if instance is None:
            raise ConfigNotInitializedError(
                "configloader: configuration has not been initialized. Call initialize() first."
            )
        return instance

    def reset(self) -> None:
        """Returns the holder to its uninitialized state. Meant for test teardown."""
        with self._lock:
            self._consumed = False
            self._instance = None
            self._state = HolderState.UNINITIALIZED


# --- Default holder ---
_default_holder = ConfigHolder()


def default_holder() -> ConfigHolder:
    return _default_holder


def initialize(options: LoadOptions) -> None:
    """Initializes the process-wide configuration. Safe to call more than once."""
    _default_holder.initialize(options)


def get_current() -> Configuration:
    """Returns the process-wide configuration; raises ConfigNotInitializedError if there is none."""
    return _default_holder.get_current()


def reset() -> None:
    _default_holder.reset()


# --- Context propagation ---
# Private variable, so no other module can shadow or overwrite the binding
_current_config: contextvars.ContextVar[Configuration] = contextvars.ContextVar("configloader_configuration")


def attach_to_context(ctx: contextvars.Context, config: Configuration) -> contextvars.Context:
    """
    Returns a copy of ctx that carries config. ctx itself is not modified.

    Run code inside the returned context with ctx.run(func, ...) so that
    from_context() called there finds the configuration.
    """
    derived = ctx.copy()
    derived.run(_current_config.set, config)
    return derived


def from_context(ctx: Optional[contextvars.Context] = None) -> Tuple[Optional[Configuration], bool]:
    """
    Looks up the configuration carried by ctx (the current context if omitted).

    Returns:
        (config, True) if one is attached, (None, False) otherwise.
    """
    if ctx is None:
        config = _current_config.get(None)
    else:
        config = ctx.get(_current_config)
    return config, config is not None


@contextmanager
def use_configuration(config: Configuration) -> Iterator[Configuration]:
    """Binds config in the current context for the duration of the with-block."""
    token = _current_config.set(config)
    try:
        yield config
    finally:
        _current_config.reset(token)

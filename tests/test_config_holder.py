# tests/test_config_holder.py

import contextvars
import threading
import time
import pytest
from datetime import timedelta
from pathlib import Path

import configloader
from configloader.config.holder import (
    ConfigHolder,
    HolderState,
    attach_to_context,
    from_context,
    get_current,
    initialize,
    reset,
    use_configuration,
)
from configloader.config.loaders import LoadOptions
from configloader.config.models import ApplicationConfig, Configuration
from configloader.errors import (
    ConfigDecodeError,
    ConfigLoaderError,
    ConfigNotInitializedError,
    ConfigParseError,
)

# --- Test Fixtures ---

@pytest.fixture(autouse=True)
def clean_default_holder():
    """Every test starts and ends with an uninitialized default holder."""
    reset()
    yield
    reset()


@pytest.fixture
def options(tmp_path: Path) -> LoadOptions:
    (tmp_path / "test-config.yaml").write_text(
        """
application:
  name: "Mi App de Prueba"
  environment: "testing"
  port: 9090
database:
  host: "db-test-host"
  max_connections: 20
  max_connection_life_time: "15m"
google_oauth2:
  client_id: "client-id-de-prueba"
""",
        encoding="utf-8",
    )
    return LoadOptions(config_name="test-config", config_type="yaml", config_paths=[tmp_path])


@pytest.fixture
def bad_options(tmp_path: Path) -> LoadOptions:
    (tmp_path / "bad-config.yaml").write_text(
        'application:\n  name: "App Rota"\n  port: [9090\n', encoding="utf-8"
    )
    return LoadOptions(config_name="bad-config", config_type="yaml", config_paths=[tmp_path])


class CountingLoader:
    """Loader stand-in that records how often it runs."""

    def __init__(self, result=None, error=None, delay=0.0):
        self.calls = 0
        self.result = result if result is not None else Configuration(application=ApplicationConfig(name="counted"))
        self.error = error
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self, options):
        with self._lock:
            self.calls += 1
        time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result

# --- Test Cases: default holder ---

def test_initialize_and_get_current(options):
    initialize(options)

    config = get_current()
    assert config.application.name == "Mi App de Prueba"
    assert config.application.environment == "testing"
    assert config.database.host == "db-test-host"
    assert config.database.max_connections == 20
    assert config.database.max_connection_life_time == timedelta(minutes=15)
    assert config.oauth2.client_id == "client-id-de-prueba"


def test_get_current_returns_same_instance(options):
    initialize(options)
    assert get_current() is get_current()


def test_initialize_error_on_malformed_file(bad_options):
    with pytest.raises(ConfigParseError):
        initialize(bad_options)


def test_get_current_raises_if_not_initialized():
    with pytest.raises(ConfigNotInitializedError):
        get_current()


def test_not_initialized_is_not_a_loader_error():
    """The misuse signal must not be swallowed by handlers for recoverable load errors."""
    assert not issubclass(ConfigNotInitializedError, ConfigLoaderError)
    assert issubclass(ConfigNotInitializedError, RuntimeError)


def test_failed_initialize_is_permanent(bad_options, options):
    with pytest.raises(ConfigParseError):
        initialize(bad_options)

    # Later calls are no-ops, even with good options
    initialize(options)
    initialize(bad_options)
    with pytest.raises(ConfigNotInitializedError):
        get_current()
    assert configloader.default_holder().state is HolderState.FAILED


def test_reset_allows_new_initialization(bad_options, options):
    with pytest.raises(ConfigParseError):
        initialize(bad_options)
    reset()
    initialize(options)
    assert get_current().application.port == 9090


def test_package_level_shims(options):
    configloader.initialize(options)
    assert configloader.get_current() is configloader.default_holder().get_current()

# --- Test Cases: ConfigHolder ---

def test_holder_state_transitions(options):
    observed = []

    def loader(opts):
        observed.append(holder.state)
        return configloader.load_configuration(opts, environ={})

    holder = ConfigHolder(loader=loader)
    assert holder.state is HolderState.UNINITIALIZED
    assert not holder.is_ready

    holder.initialize(options)

    assert observed == [HolderState.INITIALIZING]
    assert holder.state is HolderState.READY
    assert holder.is_ready


def test_holder_loads_only_once_sequentially(options):
    loader = CountingLoader()
    holder = ConfigHolder(loader=loader)

    for _ in range(5):
        holder.initialize(options)

    assert loader.calls == 1
    assert holder.get_current().application.name == "counted"


def test_holder_loads_only_once_concurrently(options):
    loader = CountingLoader(delay=0.05)
    holder = ConfigHolder(loader=loader)
    barrier = threading.Barrier(16)
    errors = []
    seen = []

    def worker():
        barrier.wait()
        try:
            holder.initialize(options)
            seen.append(holder.get_current())
        except Exception as e:  # Collected for the assertion below
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert loader.calls == 1
    assert errors == []
    assert len(seen) == 16
    assert all(config is loader.result for config in seen)


def test_holder_concurrent_failure_surfaces_once(options):
    loader = CountingLoader(error=ConfigDecodeError("bad value"), delay=0.05)
    holder = ConfigHolder(loader=loader)
    barrier = threading.Barrier(8)
    errors = []

    def worker():
        barrier.wait()
        try:
            holder.initialize(options)
        except ConfigLoaderError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert loader.calls == 1
    assert len(errors) == 1
    assert holder.state is HolderState.FAILED
    with pytest.raises(ConfigNotInitializedError):
        holder.get_current()


def test_holders_are_independent(options):
    first = ConfigHolder(loader=CountingLoader())
    second = ConfigHolder(loader=CountingLoader())
    first.initialize(options)

    assert first.is_ready
    assert second.state is HolderState.UNINITIALIZED
    with pytest.raises(ConfigNotInitializedError):
        second.get_current()

# --- Test Cases: context propagation ---

def test_attach_and_read_from_context():
    config = Configuration(application=ApplicationConfig(name="ctx"))
    base = contextvars.copy_context()

    derived = attach_to_context(base, config)

    found, ok = from_context(derived)
    assert ok is True
    assert found is config
    # The source context is left untouched
    assert from_context(base) == (None, False)


def test_from_context_without_attachment():
    assert from_context(contextvars.Context()) == (None, False)
    assert from_context() == (None, False)


def test_code_run_in_derived_context_sees_configuration():
    config = Configuration(application=ApplicationConfig(name="ctx"))
    derived = attach_to_context(contextvars.copy_context(), config)

    found, ok = derived.run(from_context)

    assert ok is True
    assert found is config
    # Nothing leaked into the caller's context
    assert from_context() == (None, False)


def test_use_configuration_binds_for_block():
    config = Configuration(application=ApplicationConfig(name="scoped"))

    with use_configuration(config) as bound:
        assert bound is config
        assert from_context() == (config, True)

    assert from_context() == (None, False)

"""Tests for the settings iterator."""

import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from kfsettings.config.iterator import SettingsIterator
from kfsettings.config.settings import Settings
from kfsettings.core.errors import GroupNotFoundError, InvalidArgumentError, LoadError


CONFIG = (
    "[server]\nhost=localhost\nport=8080\n"
    "[empty]\n"
    "[many]\na=1\nb=2\nc=3\nd=4\ne=5\n"
)


@pytest.fixture
def config_file(tmp_path):
    """Create a configuration file with several groups."""
    path = tmp_path / "cfg.ini"
    path.write_text(CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def iterator(config_file):
    """Create an iterator over the server group."""
    it = SettingsIterator(config_file, "server")
    yield it
    it.cleanup()


class TestInit:
    """Tests for creating an iterator."""

    def test_reads_key_list(self, iterator):
        """The key list should be fetched in file order."""
        assert iterator.key_names == ("host", "port")
        assert iterator.position == -1

    def test_embeds_settings(self, iterator, config_file):
        """The iterator should expose its settings store."""
        assert isinstance(iterator.settings, Settings)
        assert iterator.settings.group_name == "server"
        assert iterator.settings.file_path == config_file

    def test_empty_group(self, config_file, capsys):
        """A group without keys should raise GroupNotFoundError."""
        with pytest.raises(GroupNotFoundError):
            SettingsIterator(config_file, "empty")

        err = capsys.readouterr().err
        assert "[WARNING]" in err
        assert f"Failed to retrieve keys of group empty from {config_file}" in err

    def test_missing_group(self, config_file):
        """A group that does not exist should raise GroupNotFoundError."""
        with pytest.raises(GroupNotFoundError) as excinfo:
            SettingsIterator(config_file, "client")
        assert "client" in str(excinfo.value)

    def test_group_not_found_is_key_error(self, config_file):
        """GroupNotFoundError should be catchable as KeyError."""
        with pytest.raises(KeyError):
            SettingsIterator(config_file, "client")

    def test_load_error_propagates(self, tmp_path):
        """A store load failure should surface unchanged."""
        with pytest.raises(LoadError):
            SettingsIterator(tmp_path / "missing.ini", "server")

    def test_invalid_argument_propagates(self, config_file):
        """Argument errors from the store should surface unchanged."""
        with pytest.raises(InvalidArgumentError):
            SettingsIterator(config_file, "")


class TestNext:
    """Tests for advancing the cursor."""

    def test_server_scenario(self, iterator):
        """Two keys give two successful steps, then False."""
        assert iterator.next() is True
        assert iterator.current_name() in ("host", "port")
        assert iterator.next() is True
        assert iterator.next() is False

    @pytest.mark.parametrize("group,count", [("server", 2), ("many", 5)])
    def test_exactly_n_steps(self, config_file, group, count):
        """next should succeed once per key."""
        with SettingsIterator(config_file, group) as it:
            steps = 0
            while it.next():
                steps += 1
            assert steps == count

    def test_exhaustion_is_idempotent(self, iterator):
        """next should keep returning False once exhausted."""
        while iterator.next():
            pass
        for _ in range(3):
            assert iterator.next() is False
        assert iterator.current_name() == "port"

    def test_names_in_order(self, config_file):
        """Keys should be visited in file order."""
        names = []
        with SettingsIterator(config_file, "many") as it:
            while it.next():
                names.append(it.current_name())
        assert names == ["a", "b", "c", "d", "e"]

    def test_no_keys_never_advances(self, iterator):
        """With an empty key list next should always return False."""
        iterator.key_names = ()
        assert iterator.next() is False
        assert iterator.next() is False
        assert iterator.position == -1


    def test_indented_keys_are_visited(self, tmp_path):
        """Keys written with leading whitespace should each be visited."""
        path = tmp_path / "indented.ini"
        path.write_text("[server]\nhost=localhost\n  port=8080\n", encoding="utf-8")

        with SettingsIterator(path, "server") as it:
            assert it.key_names == ("host", "port")
            assert dict(it) == {"host": "localhost", "port": "8080"}


class TestCurrent:
    """Tests for reading the current entry."""

    def test_name_and_value_pair(self, iterator):
        """current_value should belong to current_name."""
        expected = {"host": "localhost", "port": "8080"}
        while iterator.next():
            assert iterator.current_value() == expected[iterator.current_name()]

    def test_value_matches_store(self, iterator):
        """current_value should agree with a direct store lookup."""
        iterator.settings.set("port", "9090")
        while iterator.next():
            name = iterator.current_name()
            assert iterator.current_value() == iterator.settings.get(name)

    def test_name_before_next(self, iterator):
        """Reading before the first step should raise RuntimeError."""
        with pytest.raises(RuntimeError):
            iterator.current_name()
        with pytest.raises(RuntimeError):
            iterator.current_value()

    def test_value_of_removed_key(self, iterator, config_file):
        """A key that disappeared should read as None."""
        iterator.next()
        iterator.next()
        assert iterator.current_name() == "port"

        config_file.write_text("[server]\nhost=localhost\n", encoding="utf-8")
        iterator.settings.reload()

        assert iterator.current_value() is None

    def test_key_list_is_not_refreshed(self, iterator):
        """Keys added after creation should not be visited."""
        iterator.settings.set("user", "admin")
        names = []
        while iterator.next():
            names.append(iterator.current_name())
        assert names == ["host", "port"]


class TestIteration:
    """Tests for the for-loop interface."""

    def test_yields_pairs(self, iterator):
        """Iterating should yield (name, value) tuples."""
        assert list(iterator) == [("host", "localhost"), ("port", "8080")]

    def test_consumes_cursor(self, iterator):
        """A for loop should continue from the current position."""
        iterator.next()
        assert list(iterator) == [("port", "8080")]
        assert list(iterator) == []

    def test_set_and_save_while_iterating(self, iterator, config_file):
        """Values changed through the store should be saved."""
        for name, value in iterator:
            iterator.settings.set(name, value.upper())
        iterator.settings.save()

        with SettingsIterator(config_file, "server") as fresh:
            assert dict(fresh) == {"host": "LOCALHOST", "port": "8080"}


class TestCleanup:
    """Tests for releasing an iterator."""

    def test_cleanup_releases_everything(self, config_file):
        """cleanup should drop the key list and the store."""
        it = SettingsIterator(config_file, "server")
        it.cleanup()
        assert it.key_names is None
        assert it.settings.key_file is None

    def test_cleanup_twice(self, config_file):
        """A second cleanup should do nothing."""
        it = SettingsIterator(config_file, "server")
        it.cleanup()
        it.cleanup()

    def test_next_after_cleanup(self, config_file):
        """Advancing a cleaned-up iterator should raise RuntimeError."""
        it = SettingsIterator(config_file, "server")
        it.cleanup()
        with pytest.raises(RuntimeError):
            it.next()

    def test_context_manager(self, config_file):
        """Leaving a with block should clean up."""
        with SettingsIterator(config_file, "server") as it:
            assert it.next()
        assert it.key_names is None

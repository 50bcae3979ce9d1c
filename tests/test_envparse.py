"""Tests for commander.lib.envparse module."""

import pytest

from commander.lib.envparse import check_value, load_env, set_key, unset_key


class TestLoadEnv:
    """Test the safe .env parser."""

    def test_parses_quoted_and_bare_values(self, tmp_path):
        path = tmp_path / "settings.env"
        path.write_text('# comment\n\nGIT_NAME="Ada Lovelace"\nGIT_DIR=/srv/code\nGIT_EMAIL=\'a@b.c\'\n')
        assert load_env(str(path)) == {
            "GIT_NAME": "Ada Lovelace",
            "GIT_DIR": "/srv/code",
            "GIT_EMAIL": "a@b.c",
        }

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_env(str(tmp_path / "nope.env"))

    def test_rejects_command_substitution(self, tmp_path):
        path = tmp_path / "settings.env"
        path.write_text('GIT_NAME="$(whoami)"\n')
        with pytest.raises(ValueError, match="Forbidden"):
            load_env(str(path))

    def test_rejects_lowercase_key(self, tmp_path):
        path = tmp_path / "settings.env"
        path.write_text("git_name=Ada\n")
        with pytest.raises(ValueError, match="Invalid key"):
            load_env(str(path))


class TestCheckValue:
    """Test value checks used before writing."""

    @pytest.mark.parametrize("value", ["a;b", "a|b", "`x`", "${HOME}", 'say "hi"', "two\nlines"])
    def test_rejected(self, value):
        with pytest.raises(ValueError):
            check_value(value)

    def test_accepted(self):
        check_value("https://www.toptal.com/developers/gitignore/api/")


class TestSetAndUnsetKey:
    """Test writing env files."""

    def test_set_appends(self, tmp_path):
        path = tmp_path / "settings.env"
        set_key(str(path), "GIT_NAME", "Ada")
        set_key(str(path), "GIT_DIR", "/srv/code")
        assert path.read_text() == 'GIT_NAME="Ada"\nGIT_DIR="/srv/code"\n'

    def test_set_replaces_in_place(self, tmp_path):
        path = tmp_path / "settings.env"
        path.write_text('# mine\nGIT_NAME="Ada"\nGIT_DIR="/x"\n')
        set_key(str(path), "GIT_NAME", "Grace")
        assert path.read_text() == '# mine\nGIT_NAME="Grace"\nGIT_DIR="/x"\n'

    def test_set_round_trips_through_load(self, tmp_path):
        path = tmp_path / "settings.env"
        set_key(str(path), "GIT_NAME", "Ada Lovelace")
        assert load_env(str(path)) == {"GIT_NAME": "Ada Lovelace"}

    def test_set_invalid_key(self, tmp_path):
        with pytest.raises(ValueError):
            set_key(str(tmp_path / "settings.env"), "bad-key", "x")

    def test_unset_removes_line(self, tmp_path):
        path = tmp_path / "settings.env"
        path.write_text('GIT_NAME="Ada"\nGIT_DIR="/x"\n')
        assert unset_key(str(path), "GIT_NAME") is True
        assert path.read_text() == 'GIT_DIR="/x"\n'

    def test_unset_last_line_empties_file(self, tmp_path):
        path = tmp_path / "settings.env"
        path.write_text('GIT_NAME="Ada"\n')
        unset_key(str(path), "GIT_NAME")
        assert path.read_text() == ""

    def test_unset_missing(self, tmp_path):
        assert unset_key(str(tmp_path / "settings.env"), "GIT_NAME") is False

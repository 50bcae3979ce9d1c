"""Tests for shell completion script generation."""

import pytest

from commander.cli import build_parser, main
from commander.lib.completion import SHELLS, command_tree, generate_completion


@pytest.fixture
def parser():
    return build_parser()


class TestCommandTree:
    """Test the command path map built from the parser."""

    def test_top_level_commands_and_flags(self, parser):
        words = command_tree(parser)["sc"]
        for word in ("git", "env", "welcome", "completions", "--verbose", "-v", "--no-color"):
            assert word in words

    def test_nested_subcommands(self, parser):
        tree = command_tree(parser)
        assert {"list", "fetch"} <= set(tree["sc git ignore"])
        assert {"status", "update", "add-commit", "clone", "list", "new", "ignore"} <= set(tree["sc git"])

    def test_alias_has_same_flags(self, parser):
        tree = command_tree(parser)
        assert tree["sc git add-commit"] == tree["sc git update"]
        assert "--update-only" in tree["sc git update"]

    def test_positional_choices_listed(self, parser):
        assert set(SHELLS) <= set(command_tree(parser)["sc completions"])


class TestGenerateCompletion:
    """Test the rendered scripts."""

    def test_bash(self, parser):
        script = generate_completion("bash", parser)
        assert script.startswith("_sc_completions() {")
        assert script.endswith("complete -F _sc_completions sc")
        assert '"sc git ignore") candidates="-h --help list fetch" ;;' in script

    def test_zsh(self, parser):
        script = generate_completion("zsh", parser)
        assert script.startswith("#compdef sc")
        assert '"sc git ignore") candidates=(-h --help list fetch) ;;' in script
        assert "compadd -a candidates" in script

    def test_fish(self, parser):
        script = generate_completion("fish", parser)
        assert "complete -c sc -f" in script
        assert "complete -c sc -n '__sc_path_is \"sc git ignore\"' -a 'list fetch'" in script
        assert "complete -c sc -n '__sc_path_is \"sc git update\"' -l update-only" in script
        assert "complete -c sc -n '__sc_path_is \"sc git update\"' -s u" in script

    def test_every_shell_renders_without_placeholders(self, parser):
        for shell in SHELLS:
            assert "%(" not in generate_completion(shell, parser)

    def test_unknown_shell(self, parser):
        with pytest.raises(ValueError, match="Unknown shell: tcsh"):
            generate_completion("tcsh", parser)


class TestCompletionsCommand:
    """Test `sc completions <shell>`."""

    def test_prints_script(self, capsys):
        assert main(["completions", "bash"]) == 0
        assert "complete -F _sc_completions sc" in capsys.readouterr().out

    def test_rejects_unknown_shell(self):
        with pytest.raises(SystemExit):
            main(["completions", "tcsh"])

"""End-to-end tests running the minish program with piped input."""

import os
import subprocess
import sys

import pytest

from minish.cli import configure_logging, main


def run_minish(script: str, cwd, env=None, args=()):
    return subprocess.run(
        [sys.executable, "-m", "minish", *args],
        input=script,
        capture_output=True,
        text=True,
        cwd=cwd,
        env=env,
        timeout=30,
    )


class TestPipedInput:
    """Test a non-interactive session fed through a pipe."""

    def test_three_commands_in_order_without_prompts(self, tmp_path):
        cwd = os.path.realpath(tmp_path)
        proc = run_minish(
            "pwd\n/bin/sh -c 'echo from-child'\n?\n",
            cwd=tmp_path,
        )
        assert proc.returncode == 0
        assert proc.stdout == (
            f"{cwd}\n"
            "from-child\n"
            "exit - exit the command shell\n"
            "? - show this help menu\n"
            "pwd - prints working directory\n"
            "cd - changes directory\n"
        )
        assert proc.stderr == ""

    def test_child_output_is_not_reordered(self, tmp_path):
        cwd = os.path.realpath(tmp_path)
        proc = run_minish("pwd\n/bin/sh -c 'echo middle'\npwd\n", cwd=tmp_path)
        assert proc.stdout == f"{cwd}\nmiddle\n{cwd}\n"

    def test_missing_program_then_continue(self, tmp_path):
        cwd = os.path.realpath(tmp_path)
        proc = run_minish("/no/such/program\npwd\n", cwd=tmp_path)
        assert proc.returncode == 0
        assert proc.stdout == f"{cwd}\n"
        assert proc.stderr == "minish: /no/such/program: No such file or directory\n"

    def test_cd_home(self, tmp_path):
        home = tmp_path / "home"
        home.mkdir()
        env = dict(os.environ, HOME=str(home))
        proc = run_minish("cd\npwd\n", cwd=tmp_path, env=env)
        assert proc.stdout == os.path.realpath(home) + "\n"

    def test_cd_without_home(self, tmp_path):
        env = {k: v for k, v in os.environ.items() if k != "HOME"}
        proc = run_minish("cd\npwd\n", cwd=tmp_path, env=env)
        assert proc.stdout == os.path.realpath(tmp_path) + "\n"
        assert proc.stderr == "minish: cd: HOME not set\n"

    def test_exit_status_zero(self, tmp_path):
        proc = run_minish("exit\n/bin/sh -c 'echo unreachable'\n", cwd=tmp_path)
        assert proc.returncode == 0
        assert proc.stdout == ""

    def test_failing_child_does_not_change_shell_status(self, tmp_path):
        proc = run_minish("/bin/sh -c 'exit 9'\n", cwd=tmp_path)
        assert proc.returncode == 0

    def test_empty_input(self, tmp_path):
        proc = run_minish("", cwd=tmp_path)
        assert proc.returncode == 0
        assert proc.stdout == ""
        assert proc.stderr == ""

    def test_undecodable_directory_name(self, tmp_path):
        os.mkdir(os.path.join(os.fsencode(tmp_path), b"dir\xff"))
        env = dict(os.environ, PYTHONIOENCODING="utf-8:strict")
        proc = subprocess.run(
            [sys.executable, "-m", "minish"],
            input=b"cd dir\xff\npwd\n/bin/sh -c 'echo still-alive'\n",
            capture_output=True,
            cwd=tmp_path,
            env=env,
            timeout=30,
        )
        assert proc.returncode == 0
        assert proc.stderr == b""
        assert proc.stdout == os.fsencode(os.path.realpath(tmp_path)) + b"/dir\xff\nstill-alive\n"

    def test_undecodable_path_in_error_message(self, tmp_path):
        env = dict(os.environ, PYTHONIOENCODING="utf-8:strict")
        proc = subprocess.run(
            [sys.executable, "-m", "minish"],
            input=b"cd gone\xff\npwd\n",
            capture_output=True,
            cwd=tmp_path,
            env=env,
            timeout=30,
        )
        assert proc.returncode == 0
        assert proc.stderr.startswith(b"minish: cd: gone")
        assert proc.stderr.endswith(b": No such file or directory\n")
        assert proc.stdout == os.fsencode(os.path.realpath(tmp_path)) + b"\n"

    def test_default_line_limit(self, tmp_path):
        proc = run_minish("cd " + "x" * 5000 + "\npwd\n", cwd=tmp_path)
        assert proc.returncode == 0
        assert proc.stderr == "minish: line too long (max 4096 bytes)\n"
        assert proc.stdout == os.path.realpath(tmp_path) + "\n"


class TestArguments:
    """Test the command-line surface."""

    def test_rejects_arguments(self, capsys):
        assert main(["-c", "pwd"]) == 2
        assert capsys.readouterr().err == "usage: minish\n"

    def test_rejects_arguments_end_to_end(self, tmp_path):
        proc = run_minish("", cwd=tmp_path, args=("script.sh",))
        assert proc.returncode == 2


class TestLogging:
    """Test log configuration."""

    def test_debug_logging_goes_to_stderr(self, tmp_path):
        env = dict(os.environ, MINISH_LOG_LEVEL="debug")
        proc = run_minish("pwd\n", cwd=tmp_path, env=env)
        assert proc.returncode == 0
        assert "minish.shell: DEBUG: builtin pwd" in proc.stderr

    @pytest.mark.parametrize("value", ["WARNING", "bogus"])
    def test_configure_logging_accepts_names(self, value, monkeypatch):
        import logging

        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        configure_logging(value)
        assert calls[0]["level"] == logging.WARNING

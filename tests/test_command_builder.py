"""Tests for chained command composition."""

from cliharness.exec import RunOptions, SpawnOptions, build_command


class TestBuildCommand:

    def test_command_only(self):
        assert build_command("echo hi") == "echo hi"
        assert build_command("echo hi", RunOptions()) == "echo hi"

    def test_pre_and_post(self):
        options = RunOptions(pre="cd /tmp", post="cd -")
        assert build_command("ls", options) == "cd /tmp && ls && cd -"

    def test_pre_only(self):
        assert build_command("false", RunOptions(pre="echo start")) == "echo start && false"

    def test_post_only(self):
        assert build_command("make", RunOptions(post="echo done")) == "make && echo done"

    def test_empty_steps_leave_no_chain_artifacts(self):
        assert build_command("ls", RunOptions(pre="", post="")) == "ls"

    def test_spawn_options_are_run_options(self):
        options = SpawnOptions(pre="a", post="c", output_file_name="out.txt")
        assert build_command("b", options) == "a && b && c"

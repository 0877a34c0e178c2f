"""Tests for argv parsing and command classification."""

import pytest

from git_together.classifier import (
    Invocation,
    Passthrough,
    SignoffCommand,
    Trigger,
    TriggerAction,
    classify,
    parse_invocation,
)

TRIGGERS = ("with", "together")


def is_signoff_cmd(cmd: str) -> bool:
    return cmd in ("commit", "merge", "revert", "ci")


def run_classify(args):
    return classify(parse_invocation(args), args, TRIGGERS, is_signoff_cmd)


class TestParseInvocation:
    """Test suite for finding the subcommand."""

    @pytest.mark.parametrize(
        "args,expected",
        [
            ([], Invocation((), "", ())),
            (["status"], Invocation((), "status", ())),
            (["commit", "-m", "msg"], Invocation((), "commit", ("-m", "msg"))),
            (["--no-pager", "log", "-1"], Invocation(("--no-pager",), "log", ("-1",))),
            (["-C", "sub", "commit"], Invocation(("-C", "sub"), "commit", ())),
            (["-c", "user.name=x", "commit", "-v"], Invocation(("-c", "user.name=x"), "commit", ("-v",))),
            (["--git-dir", "commit", "status"], Invocation(("--git-dir", "commit"), "status", ())),
            (["--git-dir=.git", "commit"], Invocation(("--git-dir=.git",), "commit", ())),
            (["--version"], Invocation((), "--version", ())),
            (["-p", "--help", "commit"], Invocation(("-p",), "--help", ("commit",))),
            (["--bare", "-p"], Invocation(("--bare", "-p"), "", ())),
            (["-C"], Invocation(("-C",), "", ())),
        ],
    )
    def test_partition(self, args, expected):
        assert parse_invocation(args) == expected

    def test_repeated_subcommand_name(self):
        """Only the first bare token is the subcommand."""
        invocation = parse_invocation(["commit", "-m", "commit"])
        assert invocation.command_args == ("-m", "commit")

    def test_global_scope_flag_is_stripped(self):
        invocation = parse_invocation(["--no-pager", "--global", "with", "jh"])
        assert invocation == Invocation(("--no-pager",), "with", ("jh",), use_global_scope=True)

    def test_global_scope_flag_after_subcommand_is_kept(self):
        """A --global after the subcommand is an argument of the subcommand."""
        invocation = parse_invocation(["commit", "-m", "--global"])
        assert invocation == Invocation((), "commit", ("-m", "--global"))

        invocation = parse_invocation(["config", "--global", "user.name", "Me"])
        assert invocation == Invocation((), "config", ("--global", "user.name", "Me"))

    def test_global_scope_flag_as_option_value(self):
        invocation = parse_invocation(["-C", "--global", "status"])
        assert invocation == Invocation(("-C", "--global"), "status", ())


class TestClassify:
    """Test suite for classify."""

    @pytest.mark.parametrize(
        "args,expected",
        [
            (["with"], Trigger(TriggerAction.SHOW)),
            (["together"], Trigger(TriggerAction.SHOW)),
            (["with", "--list"], Trigger(TriggerAction.LIST)),
            (["with", "--clear"], Trigger(TriggerAction.CLEAR)),
            (["with", "--version"], Trigger(TriggerAction.VERSION)),
            (["with", "jh"], Trigger(TriggerAction.ACTIVATE, ("jh",))),
            (["with", "jh", "nn"], Trigger(TriggerAction.ACTIVATE, ("jh", "nn"))),
            (["--global", "with", "jh"], Trigger(TriggerAction.ACTIVATE, ("jh",))),
            (["with", "--list", "jh"], Trigger(TriggerAction.ACTIVATE, ("--list", "jh"))),
        ],
    )
    def test_trigger(self, args, expected):
        assert run_classify(args) == expected

    def test_commit_message_that_looks_like_global_flag(self):
        assert run_classify(["commit", "-m", "--global"]) == SignoffCommand((), "commit", ("-m", "--global"))

    def test_commit(self):
        assert run_classify(["-C", "sub", "commit", "-m", "msg"]) == SignoffCommand(
            ("-C", "sub"), "commit", ("-m", "msg"), solo=False
        )

    def test_alias(self):
        assert run_classify(["ci", "-am", "msg"]) == SignoffCommand((), "ci", ("-am", "msg"))

    def test_revert(self):
        assert run_classify(["revert", "HEAD"]).solo is False

    def test_merge_is_solo(self):
        assert run_classify(["merge", "feature"]).solo is True

    def test_amend_is_solo(self):
        assert run_classify(["commit", "--amend", "--no-edit"]).solo is True

    @pytest.mark.parametrize(
        "args",
        [[], ["status"], ["--version"], ["log", "--", "commit"], ["-c", "commit", "status"]],
    )
    def test_passthrough(self, args):
        assert run_classify(args) == Passthrough(tuple(args))

    def test_passthrough_keeps_global_flag(self):
        """Arguments git-together does not handle reach git unchanged."""
        args = ["config", "--global", "user.name", "Me"]
        assert run_classify(args) == Passthrough(tuple(args))

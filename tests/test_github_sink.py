from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path

from _testutil import ensure_repo_on_path


class TestActionsFileSink(unittest.TestCase):
    def setUp(self) -> None:
        ensure_repo_on_path()

    def test_heredoc_entries_are_appended(self) -> None:
        from esc_action.github import ActionsFileSink

        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "output"
            env = Path(td) / "env"
            out.write_text("EXISTING=1\n", encoding="utf-8")
            sink = ActionsFileSink(output_path=out, env_path=env, delimiter_factory=lambda: "EOF_X")

            sink.publish([("A", "x=y"), ("B", "multi\nline")])

            self.assertEqual(
                out.read_text(encoding="utf-8"),
                "EXISTING=1\nA<<EOF_X\nx=y\nEOF_X\nB<<EOF_X\nmulti\nline\nEOF_X\n",
            )
            self.assertEqual(
                env.read_text(encoding="utf-8"),
                "A<<EOF_X\nx=y\nEOF_X\nB<<EOF_X\nmulti\nline\nEOF_X\n",
            )

    def test_rejected_entry_leaves_files_untouched(self) -> None:
        from esc_action.errors import SinkError
        from esc_action.github import ActionsFileSink

        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "output"
            env = Path(td) / "env"
            sink = ActionsFileSink(output_path=out, env_path=env, delimiter_factory=lambda: "EOF_X")

            with self.assertRaises(SinkError):
                sink.publish([("A", "fine"), ("B", "contains EOF_X")])

            self.assertFalse(out.exists())
            self.assertFalse(env.exists())

    def test_unwritable_file_raises_sink_error(self) -> None:
        from esc_action.errors import SinkError
        from esc_action.github import ActionsFileSink

        with tempfile.TemporaryDirectory() as td:
            missing_dir = Path(td) / "missing" / "output"
            sink = ActionsFileSink(output_path=missing_dir, env_path=Path(td) / "env")
            with self.assertRaises(SinkError) as ctx:
                sink.publish([("A", "v")])
            self.assertIn("GITHUB_OUTPUT", str(ctx.exception))

    def test_delimiter_collision_is_rejected(self) -> None:
        from esc_action.errors import SinkError
        from esc_action.github.files import format_file_entry

        with self.assertRaises(SinkError):
            format_file_entry("A", "prefix EOF_X suffix", "EOF_X")
        with self.assertRaises(SinkError):
            format_file_entry("A\nB", "v", "EOF_X")

    def test_default_delimiter_is_unique(self) -> None:
        from esc_action.github.files import DELIMITER_PREFIX, _new_delimiter

        a, b = _new_delimiter(), _new_delimiter()
        self.assertTrue(a.startswith(DELIMITER_PREFIX))
        self.assertNotEqual(a, b)

    def test_from_env_and_require_configured(self) -> None:
        from esc_action.errors import NotConfiguredError
        from esc_action.github import ActionsFileSink

        sink = ActionsFileSink.from_env({"GITHUB_OUTPUT": "/tmp/o"})
        self.assertEqual(sink.output_path, Path("/tmp/o"))
        self.assertIsNone(sink.env_path)
        with self.assertRaises(NotConfiguredError) as ctx:
            sink.require_configured()
        self.assertIn("GITHUB_ENV", str(ctx.exception))


class TestWorkflowCommands(unittest.TestCase):
    def setUp(self) -> None:
        ensure_repo_on_path()

    def test_commands_in_actions(self) -> None:
        from esc_action.github import WorkflowCommands

        buf = io.StringIO()
        cmds = WorkflowCommands(stream=buf, env={"GITHUB_ACTIONS": "true"})
        cmds.add_mask("s3cr%t")
        cmds.warning("line1\nline2")
        with cmds.group("G"):
            cmds.info("hello")
        self.assertEqual(
            buf.getvalue().splitlines(),
            ["::add-mask::s3cr%25t", "::warning::line1%0Aline2", "::group::G", "hello", "::endgroup::"],
        )

    def test_multiline_mask_registers_each_line(self) -> None:
        from esc_action.github import WorkflowCommands

        buf = io.StringIO()
        WorkflowCommands(stream=buf, env={"GITHUB_ACTIONS": "true"}).add_mask("a\n\nb")
        self.assertEqual(buf.getvalue().splitlines(), ["::add-mask::a", "::add-mask::b"])

    def test_mask_is_not_echoed_outside_actions(self) -> None:
        from esc_action.github import WorkflowCommands

        buf = io.StringIO()
        WorkflowCommands(stream=buf, env={}).add_mask("s3cret")
        self.assertEqual(buf.getvalue(), "")

    def test_local_output_uses_prefix(self) -> None:
        from esc_action.github import WorkflowCommands

        buf = io.StringIO()
        cmds = WorkflowCommands(stream=buf, env={})
        cmds.info("done")
        cmds.warning("careful")
        cmds.debug("hidden")
        self.assertEqual(buf.getvalue().splitlines(), ["[ESC_ACTION][OK] done", "[ESC_ACTION][WARN] careful"])

    def test_format_command_properties(self) -> None:
        from esc_action.github.commands import format_command

        self.assertEqual(format_command("error", "m", {"file": "a:b,c"}), "::error file=a%3Ab%2Cc::m")


if __name__ == "__main__":
    unittest.main()

from unittest.mock import patch

from term_chat.commands.documents import sanitize_title, walk_directory
from term_chat.core.prompts import README_PROMPT, REPORT_PROMPT, TITLE_PROMPT
from term_chat.core.providers import AnthropicRequest, ResponsesRequest
from .test_base import BaseTermChatTest


class TestDocCommand(BaseTermChatTest):
    def setUp(self):
        super().setUp()
        self.transcript.add_user_message("How do I reverse a list?")
        self.transcript.add_assistant_message("Use reversed() or slicing.")

    def test_sanitize_title(self):
        self.assertEqual(sanitize_title('New/Report "Q1"'), "New_Report_Q1")
        self.assertEqual(sanitize_title("a\\b c"), "a_b_c")

    @patch("term_chat.commands.documents.confirm_action", return_value=True)
    def test_doc_saves_report_under_title(self, _):
        self.mock_client.complete.side_effect = ["# Lists\n\nReverse them.", 'New/Report "Q1"']

        self.chat_cli.handle_command(":doc")

        target = self.tmp_path / "reports" / "New_Report_Q1.md"
        self.assertTrue(target.exists())
        self.assertEqual(
            target.read_text(encoding="utf-8"), 'New/Report "Q1"\n\n# Lists\n\nReverse them.'
        )

        report_request, title_request = [c[0][0] for c in self.mock_client.complete.call_args_list]
        self.assertIsInstance(report_request, ResponsesRequest)
        self.assertFalse(report_request.stream)
        self.assertEqual(report_request.model, self.config.report_model)
        self.assertEqual(report_request.input[0], {"role": "developer", "content": REPORT_PROMPT})
        self.assertEqual(
            [m["role"] for m in report_request.input], ["developer", "user", "assistant"]
        )
        self.assertEqual(title_request.model, self.config.title_model)
        self.assertEqual(title_request.input[0]["content"], TITLE_PROMPT)
        self.assertEqual(title_request.input[1], {"role": "user", "content": "# Lists\n\nReverse them."})

    @patch("term_chat.commands.documents.confirm_action", return_value=True)
    def test_doc_does_not_touch_the_conversation(self, _):
        before = self.current()
        self.mock_client.complete.side_effect = ["report", "Title"]
        self.chat_cli.handle_command(":doc")
        self.assertEqual(self.current(), before)

    @patch("term_chat.commands.documents.confirm_action", return_value=True)
    def test_doc_without_report_content(self, confirm):
        self.mock_client.complete.return_value = None

        self.chat_cli.handle_command(":doc")

        self.assertIn("No content received in the document report.", self.printed())
        self.assertEqual(self.mock_client.complete.call_count, 1)
        self.assertFalse((self.tmp_path / "reports").exists())
        confirm.assert_not_called()

    @patch("term_chat.commands.documents.confirm_action", return_value=True)
    def test_doc_title_falls_back(self, _):
        self.mock_client.complete.side_effect = ["the report", None]
        self.chat_cli.handle_command(":doc")
        target = self.tmp_path / "reports" / "Report.md"
        self.assertEqual(target.read_text(encoding="utf-8"), "Report\n\nthe report")

    @patch("term_chat.commands.documents.confirm_action", return_value=False)
    def test_doc_declined(self, _):
        self.mock_client.complete.side_effect = ["the report", "Title"]
        self.chat_cli.handle_command(":doc")
        self.assertFalse((self.tmp_path / "reports").exists())
        self.assertIn("Document not saved.", self.printed())

    @patch("term_chat.commands.documents.confirm_action", return_value=True)
    def test_doc_with_claude_and_no_openai(self, _):
        self.config.openai_enabled = False
        self.transcript.model = "claude-3-5-sonnet-latest"
        self.mock_client.complete.side_effect = ["the report", "Title"]

        self.chat_cli.handle_command(":doc")

        report_request = self.mock_client.complete.call_args_list[0][0][0]
        self.assertIsInstance(report_request, AnthropicRequest)
        self.assertEqual(report_request.model, "claude-3-5-sonnet-latest")
        self.assertEqual(report_request.system, REPORT_PROMPT)


class TestReadmeCommand(BaseTermChatTest):
    def setUp(self):
        super().setUp()
        self.project = self.tmp_path / "project"
        (self.project / "src").mkdir(parents=True)
        (self.project / "node_modules").mkdir()
        (self.project / ".git").mkdir()
        (self.project / "src" / "main.py").write_text("print('hi')", encoding="utf-8")
        (self.project / "src" / "notes.txt").write_text("notes", encoding="utf-8")
        (self.project / "setup.cfg").write_text("[metadata]", encoding="utf-8")
        (self.project / "node_modules" / "dep.py").write_text("x = 1", encoding="utf-8")
        (self.project / ".git" / "config.py").write_text("y = 2", encoding="utf-8")
        (self.project / ".hidden.py").write_text("z = 3", encoding="utf-8")

    def test_walk_filters_extensions_and_excluded_dirs(self):
        files, failures = walk_directory(self.project, {"py", "cfg"})
        paths = [path for path, _ in files]
        self.assertEqual(
            paths, [str(self.project / "setup.cfg"), str(self.project / "src" / "main.py")]
        )
        self.assertEqual(failures, [])

    def test_walk_without_extensions_takes_everything(self):
        files, _ = walk_directory(self.project, set())
        self.assertEqual(len(files), 3)

    def test_walk_reports_binary_files(self):
        (self.project / "src" / "blob.py").write_bytes(b"\xff\xfe\x00bad")
        files, failures = walk_directory(self.project, {"py"})
        self.assertEqual([p for p, _ in failures], [str(self.project / "src" / "blob.py")])
        self.assertEqual(len(files), 1)

    @patch("term_chat.commands.documents.confirm_action", return_value=True)
    def test_readme_saves_generated_document(self, _):
        self.mock_client.complete.return_value = "# Project\n\nâ€¢ point"

        with patch("builtins.input", return_value="PROJECT"):
            self.chat_cli.handle_command(f":readme {self.project} .py")

        target = self.tmp_path / "readmes" / "PROJECT.md"
        self.assertEqual(target.read_text(encoding="utf-8"), "# Project\n\n- point")

        request = self.mock_client.complete.call_args[0][0]
        self.assertEqual(request.model, self.config.readme_model)
        self.assertEqual(request.input[0], {"role": "developer", "content": README_PROMPT})
        main = self.project / "src" / "main.py"
        self.assertEqual(request.input[1]["content"], f"{main}\n\n:::\n\nprint('hi')")
        self.assertEqual(len(request.input), 2)
        self.assertIn("Files used:", self.printed())

    def test_readme_missing_directory(self):
        self.chat_cli.handle_command(f":readme {self.tmp_path / 'nowhere'}")
        self.assertIn("not found", self.printed())
        self.mock_client.complete.assert_not_called()

    def test_readme_without_arguments(self):
        self.chat_cli.handle_command(":readme")
        self.assertIn("Usage: readme <directory> [extensions...]", self.printed())

    def test_readme_no_matching_files(self):
        self.chat_cli.handle_command(f":readme {self.project} rs")
        self.assertIn("No matching files found", self.printed())
        self.mock_client.complete.assert_not_called()

    @patch("term_chat.commands.documents.confirm_action", return_value=True)
    def test_readme_empty_filename(self, confirm):
        self.mock_client.complete.return_value = "# Project"
        with patch("builtins.input", return_value=""):
            self.chat_cli.handle_command(f":readme {self.project} py")
        self.assertIn("Invalid filename. Document not saved.", self.printed())
        self.assertFalse((self.tmp_path / "readmes").exists())
        confirm.assert_not_called()

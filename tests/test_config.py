import json
import os
from unittest.mock import patch

from term_chat.core.config import (
    DEFAULT_MODEL,
    Config,
    delete_config,
    load_config,
    resolve_api_keys,
    write_config,
)
from .test_base import TEST_MODELS, BaseTermChatTest


class TestConfig(BaseTermChatTest):
    def test_runtime_fields_are_not_persisted(self):
        config = Config(model="gpt-4o", all_models=["gpt-4o"], anthropic_enabled=True)
        data = config.to_dict()
        for name in ("all_models", "openai_enabled", "anthropic_enabled"):
            self.assertNotIn(name, data)
        self.assertEqual(data["model"], "gpt-4o")
        self.assertEqual(data["request_timeout"], 120.0)

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"model": "o1", "enable_streaming": True, "colour": "red"})
        self.assertEqual(config.model, "o1")
        self.assertTrue(config.enable_streaming)

    def test_write_then_load(self):
        write_config(Config(model="gpt-4o-mini", enable_streaming=True), ask=False)
        config = load_config(TEST_MODELS, openai_enabled=True, anthropic_enabled=True)
        self.assertEqual(config.model, "gpt-4o-mini")
        self.assertTrue(config.enable_streaming)
        self.assertEqual(config.all_models, TEST_MODELS)
        self.assertTrue(config.anthropic_enabled)

    def test_invalid_model_falls_back(self):
        write_config(Config(model="gpt-2"), ask=False)
        config = load_config(TEST_MODELS)
        self.assertEqual(config.model, DEFAULT_MODEL)
        self.assertIn("Invalid model found in config", self.printed())

    def test_fallback_without_default_model(self):
        write_config(Config(model="gpt-2"), ask=False)
        config = load_config(["claude-3-haiku"], openai_enabled=False, anthropic_enabled=True)
        self.assertEqual(config.model, "claude-3-haiku")

    def test_unreadable_file_uses_defaults(self):
        Config.CONFIG_PATH.parent.mkdir(parents=True)
        Config.CONFIG_PATH.write_text("{broken", encoding="utf-8")
        config = load_config(TEST_MODELS)
        self.assertEqual(config.model, DEFAULT_MODEL)
        self.assertIn("Failed to load config. Using default values.", self.printed())

    def test_non_object_file_uses_defaults(self):
        Config.CONFIG_PATH.parent.mkdir(parents=True)
        for content in ("[]", "null", '"gpt-4o"'):
            Config.CONFIG_PATH.write_text(content, encoding="utf-8")
            config = load_config(TEST_MODELS)
            self.assertEqual(config.model, DEFAULT_MODEL)
        self.assertIn("Failed to load config. Using default values.", self.printed())

    def test_from_dict_rejects_non_objects(self):
        with self.assertRaises(ValueError):
            Config.from_dict([])

    @patch("term_chat.core.config.questionary")
    def test_missing_file_declined_uses_defaults(self, questionary):
        questionary.confirm.return_value.ask.return_value = False
        config = load_config(TEST_MODELS)
        self.assertEqual(config, Config(all_models=TEST_MODELS))
        self.assertFalse(Config.CONFIG_PATH.exists())

    @patch("term_chat.core.config.questionary")
    def test_missing_file_runs_interview(self, questionary):
        questionary.select.return_value.ask.return_value = "gpt-4o"
        # set up?, streaming, markdown, boxes, custom prompt, save?
        questionary.confirm.return_value.ask.side_effect = [True, False, True, False, False, True]
        config = load_config(TEST_MODELS)
        self.assertEqual(config.model, "gpt-4o")
        saved = json.loads(Config.CONFIG_PATH.read_text(encoding="utf-8"))
        self.assertEqual(saved["model"], "gpt-4o")
        self.assertTrue(saved["preview_md"])

    def test_document_model(self):
        config = Config()
        self.assertEqual(config.document_model("report", "claude-3-haiku"), "o3-mini")
        self.assertEqual(config.document_model("title", "claude-3-haiku"), "gpt-4o")
        config.openai_enabled = False
        self.assertEqual(config.document_model("readme", "claude-3-haiku"), "claude-3-haiku")

    def test_delete_config(self):
        self.assertFalse(delete_config())
        write_config(Config(), ask=False)
        self.assertTrue(delete_config())
        self.assertFalse(Config.CONFIG_PATH.exists())


class TestApiKeys(BaseTermChatTest):
    def setUp(self):
        super().setUp()
        home = patch("term_chat.core.config.Path.home", return_value=self.tmp_path)
        home.start()
        self.addCleanup(home.stop)

    def test_keys_from_environment(self):
        env = {"OPENAI_API_KEY": "sk-o", "ANTHROPIC_API_KEY": "sk-a"}
        with patch.dict(os.environ, env):
            self.assertEqual(resolve_api_keys(), ("sk-o", "sk-a"))

    def test_key_from_zshrc(self):
        (self.tmp_path / ".zshrc").write_text('export OPENAI_API_KEY="sk-zsh"\n', encoding="utf-8")
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_api_keys(), ("sk-zsh", None))

    def test_no_keys_exits(self):
        with patch.dict(os.environ, {}, clear=True), patch("sys.stderr"):
            with self.assertRaises(SystemExit) as cm:
                resolve_api_keys()
        self.assertEqual(cm.exception.code, 1)

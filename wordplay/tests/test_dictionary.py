"""
Tests for the word list, settings and CLI.
"""

import pytest

from ..cli import main
from ..config import Settings
from ..dictionary import WordList


class TestWordList:

    def test_case_insensitive(self):
        words = WordList(["cat"])

        assert words.is_valid_word("CAT")
        assert words.is_valid_word("Cat")
        assert "cat" in words

    def test_single_letters_invalid(self):
        assert not WordList(["a"]).is_valid_word("a")
        assert not WordList().is_valid_word("")

    def test_default_words_loaded(self):
        words = WordList()

        assert words.is_loaded
        assert words.is_valid_word("at")
        assert not words.is_valid_word("xq")

    def test_empty_list_not_loaded(self):
        assert not WordList([]).is_loaded

    def test_from_file(self, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("# comment\nzebra\n\nQUIZ\n", encoding="utf-8")

        words = WordList.from_file(path)

        assert len(words) == 2
        assert words.is_valid_word("ZEBRA")


class TestSettings:

    def test_defaults(self, monkeypatch):
        for var in ["WORDPLAY_ENV", "ALLOWED_ORIGINS", "WORDPLAY_TURN_TIMER", "WORDPLAY_WORDLIST"]:
            monkeypatch.delenv(var, raising=False)

        settings = Settings.from_env()

        assert settings.is_development
        assert settings.allowed_origins == ["*"]
        assert settings.turn_timer_seconds == 0

    def test_from_env(self, monkeypatch, tmp_path):
        path = tmp_path / "words.txt"
        path.write_text("ZEBRA\n", encoding="utf-8")
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
        monkeypatch.setenv("WORDPLAY_TURN_TIMER", "30")
        monkeypatch.setenv("WORDPLAY_WORDLIST", str(path))
        monkeypatch.setenv("WORDPLAY_LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.allowed_origins == ["https://a.example", "https://b.example"]
        assert settings.turn_timer_seconds == 30
        assert settings.log_level == "DEBUG"
        assert settings.load_dictionary().is_valid_word("zebra")


class TestCLI:

    def test_check(self, capsys, monkeypatch):
        monkeypatch.delenv("WORDPLAY_WORDLIST", raising=False)

        with pytest.raises(SystemExit) as exc:
            main(["check", "cat", "xq"])

        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert "CAT: valid" in out
        assert "XQ: invalid" in out

    def test_layout(self, capsys):
        main(["layout"])

        out = capsys.readouterr().out
        assert "st" in out
        assert out.count("tw") == 8

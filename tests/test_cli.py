"""
Tests for the malarkey command-line interface.
"""
import argparse
import json

import pytest

from malarkey.cli import main, non_negative_int, parse_args, positive_int, read_sources
from malarkey.services.chain import Chain
from tests.conftest import DOLLAR_SENTENCES


class TestArgumentTypes:
    """Test suite for the integer argument types."""

    def test_non_negative_int(self):
        assert non_negative_int("0") == 0
        assert non_negative_int("12") == 12

    @pytest.mark.parametrize("value", ["-1", "x", "1.5"])
    def test_non_negative_int_rejects(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            non_negative_int(value)

    def test_positive_int_rejects_zero(self):
        with pytest.raises(argparse.ArgumentTypeError):
            positive_int("0")


class TestParseArgs:
    """Test suite for parse_args."""

    def test_defaults(self):
        args = parse_args(["generate-text", "--source", "a.txt"])

        assert args.command == "generate-text"
        assert args.source == ["a.txt"]
        assert args.lookback == 2
        assert args.sentences is None
        assert args.unserialize is False

    def test_single_dash_options(self):
        args = parse_args(["generate-text", "-source", "a.txt", "-sentences", "3", "-lookback", "4"])

        assert args.sentences == 3
        assert args.lookback == 4

    def test_repeated_sources(self):
        args = parse_args(["generate-chain", "--source", "a.txt", "--source", "b.txt"])

        assert args.source == ["a.txt", "b.txt"]

    def test_source_required(self):
        with pytest.raises(SystemExit):
            parse_args(["generate-text"])

    def test_negative_words(self):
        with pytest.raises(SystemExit):
            parse_args(["generate-text", "--source", "a.txt", "--words", "-2"])


class TestReadSources:
    """Test suite for read_sources."""

    def test_joins_files(self, tmp_path):
        first = tmp_path / "a.txt"
        second = tmp_path / "b.txt"
        first.write_text("one", encoding="utf-8")
        second.write_text("two", encoding="utf-8")

        assert read_sources([str(first), str(second)]) == "one\ntwo"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="does not exist"):
            read_sources([str(tmp_path / "missing.txt")])


class TestMain:
    """Test suite for main()."""

    def test_generate_one_word(self, dollar_file, capsys):
        assert main(["generate-text", "--source", str(dollar_file), "--words", "1"]) == 0

        assert capsys.readouterr().out == "I'd\n"

    def test_generate_sentence(self, dollar_file, capsys):
        code = main(["generate-text", "--source", str(dollar_file), "--sentences", "1", "--seed", "8"])

        assert code == 0
        assert capsys.readouterr().out.strip() in DOLLAR_SENTENCES

    def test_seed_is_deterministic(self, corpus_file, capsys):
        argv = ["generate-text", "--source", str(corpus_file), "--words", "30", "--seed", "5"]

        main(argv)
        first = capsys.readouterr().out
        main(argv)

        assert capsys.readouterr().out == first

    def test_zero_limit(self, dollar_file, capsys):
        assert main(["generate-text", "--source", str(dollar_file), "--paragraphs", "0"]) == 0

        assert capsys.readouterr().out == "\n"

    def test_log_performance(self, dollar_file, capsys):
        argv = ["generate-text", "--source", str(dollar_file), "--words", "3", "--log-performance"]

        assert main(argv) == 0
        assert capsys.readouterr().out.startswith("I'd buy th")

    def test_generate_chain_to_stdout(self, dollar_file, capsys):
        assert main(["generate-chain", "--source", str(dollar_file)]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["format"] == "malarkey.chain"
        assert payload["coherence"] == 2

    def test_chain_file_round_trip(self, dollar_file, tmp_path, capsys):
        chain_file = tmp_path / "dollar.chain"

        assert main(["generate-chain", "--source", str(dollar_file), "--output", str(chain_file)]) == 0
        assert len(Chain.deserialize(chain_file.read_bytes())) == 13

        code = main(["generate-text", "--source", str(chain_file), "--unserialize", "--sentences", "1"])

        assert code == 0
        assert capsys.readouterr().out.strip() in DOLLAR_SENTENCES

    def test_unserialize_garbage(self, dollar_file):
        assert main(["generate-text", "--source", str(dollar_file), "--unserialize", "--words", "1"]) == 1

    def test_unserialize_needs_one_source(self, dollar_file):
        argv = ["generate-text", "--source", str(dollar_file), "--source", str(dollar_file), "--unserialize"]

        assert main(argv) == 1

    def test_missing_source(self, tmp_path):
        assert main(["generate-text", "--source", str(tmp_path / "missing.txt")]) == 1

    def test_lookback_too_large(self, dollar_file):
        assert main(["generate-text", "--source", str(dollar_file), "--lookback", "100"]) == 1

    def test_lookback_option(self, corpus_file, capsys):
        assert main(["generate-text", "--source", str(corpus_file), "--lookback", "1", "--words", "12"]) == 0

        assert len(capsys.readouterr().out.split()) == 12

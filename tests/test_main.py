"""Tests for the CLI entry point and exit codes."""
import json
from unittest.mock import patch

import pytest

import main
from core.exceptions import ConfigurationError
from tests.helpers import FakeEmbeddingClient


def _fake_clients(fixtures_vectors, *providers, **kwargs):
    return [FakeEmbeddingClient(fixtures_vectors, provider=p, **kwargs) for p in providers]


@pytest.fixture
def patched_fixtures(small_fixtures):
    with patch("main.load_fixtures", return_value=small_fixtures):
        yield small_fixtures


class TestArgs:
    def test_defaults(self):
        args = main.build_parser().parse_args([])
        assert args.providers is None
        assert args.batch_size == 10
        assert args.format == "text"
        assert not args.keep_going

    @pytest.mark.parametrize("value", ["0", "-3", "ten"])
    def test_batch_size_must_be_positive(self, value, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main.main(["--batch-size", value])

        assert exc_info.value.code == 2
        assert "--batch-size" in capsys.readouterr().err

    def test_repeatable_provider(self):
        args = main.build_parser().parse_args(["--provider", "openai", "--provider", "voyage"])
        assert args.providers == ["openai", "voyage"]


class TestMain:
    """Exit codes and output."""

    def test_no_credentials_exit_non_zero(self, patched_fixtures, capsys):
        with patch("main.create_embedding_clients", side_effect=ConfigurationError("Set at least one of OPENAI_API_KEY")):
            code = main.main(["--no-progress"])

        assert code == 1
        captured = capsys.readouterr()
        assert "OPENAI_API_KEY" in captured.err
        assert captured.out == ""

    def test_bad_fixtures_exit_non_zero(self, tmp_path, capsys):
        corpus = tmp_path / "corpus.json"
        corpus.write_text("[]", encoding="utf-8")

        code = main.main(["--corpus", str(corpus), "--queries", str(corpus), "--no-progress"])

        assert code == 1
        assert capsys.readouterr().out == ""

    def test_completed_report_exit_zero(self, patched_fixtures, small_vectors, capsys):
        clients = _fake_clients(small_vectors, "OpenAI", "Voyage AI")
        with patch("main.create_embedding_clients", return_value=clients):
            code = main.main(["--no-progress"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Overall Metrics:" in out
        assert "Result: DRAW" in out

    def test_json_format(self, patched_fixtures, small_vectors, capsys):
        with patch("main.create_embedding_clients", return_value=_fake_clients(small_vectors, "OpenAI")):
            code = main.main(["--no-progress", "--format", "json"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["results"][0]["provider"] == "OpenAI"
        assert data["verdict"] is None

    def test_provider_failure_exit_non_zero(self, patched_fixtures, small_vectors, capsys):
        clients = _fake_clients(small_vectors, "OpenAI", fail_on_role="document")
        with patch("main.create_embedding_clients", return_value=clients), \
                patch.object(main.settings, "retry_max_retries", 0):
            code = main.main(["--no-progress"])

        assert code == 1
        captured = capsys.readouterr()
        assert "document embedding failed" in captured.err
        assert captured.out == ""

    def test_keep_going_reports_survivors(self, patched_fixtures, small_vectors, capsys):
        clients = [
            FakeEmbeddingClient(small_vectors, provider="OpenAI", fail_on_role="query"),
            FakeEmbeddingClient(small_vectors, provider="Voyage AI"),
        ]
        with patch("main.create_embedding_clients", return_value=clients), \
                patch.object(main.settings, "retry_max_retries", 0):
            code = main.main(["--no-progress", "--keep-going"])

        assert code == 1
        captured = capsys.readouterr()
        assert "Voyage AI" in captured.out
        assert "query embedding failed" in captured.err

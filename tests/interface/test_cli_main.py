import pytest

from context_fusion.application.dto.context_dto import ContextBundle
from context_fusion.domain.errors import RetrievalError
from context_fusion.domain.types import Result
from context_fusion.interface.cli import main as cli


class FakeUseCase:
    def __init__(self, result):  # type: ignore[no-untyped-def]
        self.result = result
        self.requests: list = []

    def execute(self, req):  # type: ignore[no-untyped-def]
        self.requests.append(req)
        return self.result


def install(monkeypatch, result):  # type: ignore[no-untyped-def]
    uc = FakeUseCase(result)
    captured: dict = {}

    def fake_builder(settings, max_context_tokens=None):  # type: ignore[no-untyped-def]
        captured["max_context_tokens"] = max_context_tokens
        return uc

    monkeypatch.setattr(cli, "build_context_use_case", fake_builder)
    return uc, captured


def test_cli_prints_context(monkeypatch, capsys):
    bundle = ContextBundle(
        text='<context source="A">\nx\n</context>', blocks=1, used_tokens=9, candidate_count=3
    )
    uc, captured = install(monkeypatch, Result.success(bundle))

    code = cli.main(
        ["--question", "pto?", "--keyword", "pto", "--keyword", "carry-over", "--max-tokens", "500"]
    )

    assert code == 0
    out = capsys.readouterr().out
    assert '<context source="A">' in out
    assert "blocks=1" in out
    req = uc.requests[0]
    assert req.question == "pto?"
    assert req.keywords == ("pto", "carry-over")
    assert req.should_search is True
    assert captured["max_context_tokens"] == 500


def test_cli_reports_declined(monkeypatch, capsys):
    uc, _ = install(monkeypatch, Result.success(ContextBundle.empty("not_requested")))
    assert cli.main(["--question", "hi", "--no-search"]) == 0
    assert "reason=not_requested" in capsys.readouterr().out
    assert uc.requests[0].should_search is False


def test_cli_failure_exit_code(monkeypatch, capsys):
    install(monkeypatch, Result.failure(RetrievalError("index missing")))
    assert cli.main(["--question", "q"]) == 1
    assert "RetrievalError: index missing" in capsys.readouterr().err


def test_cli_requires_question():
    with pytest.raises(SystemExit):
        cli.main([])

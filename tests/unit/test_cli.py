import json

import pytest

from job_tracker.__main__ import create_parser, main
from job_tracker.utils.logging import reset_logging


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for var in ("JOB_TRACKER_LOG_FILE", "JOB_TRACKER_DB_PATH"):
        monkeypatch.delenv(var, raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def run(tmp_path, capsys):
    db = tmp_path / "cli.db"

    def _run(*args: str) -> tuple[int, str]:
        capsys.readouterr()
        exit_code = main(["--log-level", "WARNING", "--db", str(db), *args])
        return exit_code, capsys.readouterr().out

    return _run


def test_cli_without_command_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "job-tracker" in capsys.readouterr().out


def test_cli_parser_supports_record_subcommands() -> None:
    parser = create_parser()

    add_args = parser.parse_args(
        ["add", "Dev", "--company", "Acme", "--tag", "remote", "--tag", "python"]
    )
    assert add_args.job_name == "Dev"
    assert add_args.company_name == "Acme"
    assert add_args.tags == ["remote", "python"]

    update_args = parser.parse_args(["update", "abc", "--status", "rejected"])
    assert update_args.id == "abc"
    assert update_args.job_name is None
    assert update_args.status == "rejected"

    assert parser.parse_args(["delete", "a", "b"]).ids == ["a", "b"]


def test_cli_reschedule_rejects_invalid_hour() -> None:
    with pytest.raises(SystemExit):
        create_parser().parse_args(["reschedule", "24", "0"])


def test_cli_add_then_list_and_show(run) -> None:
    exit_code, out = run("add", "Flutter Developer", "--company", "Acme")
    assert exit_code == 0
    record_id = out.strip()

    exit_code, out = run("list", "--search", "acme")
    assert exit_code == 0
    assert "Flutter Developer @ Acme" in out
    assert "1 of 1 applications" in out

    exit_code, out = run("show", record_id)
    assert exit_code == 0
    shown = json.loads(out)
    assert shown["id"] == record_id
    assert shown["status"] == "applied"


def test_cli_add_refuses_duplicate_without_force(run) -> None:
    run("add", "Backend Engineer")

    exit_code, out = run("add", "backend  engineer")
    assert exit_code == 1
    assert "Possible duplicates" in out

    exit_code, _ = run("add", "backend  engineer", "--force")
    assert exit_code == 0

    exit_code, out = run("list")
    assert "2 of 2 applications" in out


def test_cli_duplicates_exit_code(run) -> None:
    run("add", "Flutter Developer", "--company", "Acme")

    assert run("duplicates", "Fluter Developer", "--company", "acme")[0] == 1
    assert run("duplicates", "Product Manager")[0] == 0


def test_cli_update_and_list_by_status(run) -> None:
    _, out = run("add", "Dev")
    record_id = out.strip()

    exit_code, _ = run("update", record_id, "--status", "Interview Scheduled")
    assert exit_code == 0

    _, out = run("list", "--filter", "interviews")
    assert "Interview Scheduled" in out
    assert "1 of 1 applications" in out

    assert run("update", "missing-id", "--notes", "x")[0] == 1


def test_cli_list_rejects_unknown_sort(run) -> None:
    assert run("list", "--sort", "bySalary")[0] == 1


def test_cli_delete_and_stats(run) -> None:
    first = run("add", "A", "--status", "accepted")[1].strip()
    second = run("add", "B", "--status", "rejected")[1].strip()
    run("add", "C")

    exit_code, out = run("stats")
    assert exit_code == 0
    assert "Total: 3" in out
    assert "Success rate: 50.0%" in out
    assert "Overall success rate: 33.3%" in out
    assert "Unknown: 1/3 (33.3%)" in out

    exit_code, out = run("delete", first, second)
    assert exit_code == 0
    assert "Deleted 2" in out

    assert run("delete", "missing-id")[0] == 1
    _, out = run("list")
    assert "1 of 1 applications" in out


def test_cli_reschedule_counts_follow_ups(run) -> None:
    run("add", "A", "--follow-up", "2099-01-01")
    run("add", "B")

    exit_code, out = run("reschedule", "8", "15")
    assert exit_code == 0
    assert "Rescheduled 1" in out

import random

import pytest

from ts_refactor.config import Settings
from ts_refactor.errors import ConfigError, MissingCredentialError
from ts_refactor.orchestrator import MigrationOrchestrator
from ts_refactor.pipeline import SummaryAggregator

from conftest import FALLBACK, PRIMARY, FakeOpenAI, rate_limit_error, status_error

PLAIN = "export function greet(name) {\n  return 'hi ' + name;\n}\n"
COMPONENT = (
    "import React from 'react';\n"
    "export default class Button extends React.Component {\n"
    "  render() { return null; }\n"
    "}\n"
)


def write(root, relative, content):
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_orchestrator(tmp_path, settings, responder, sleep, **kwargs):
    fake = FakeOpenAI(responder)
    orchestrator = MigrationOrchestrator(
        project_path=tmp_path,
        settings=settings,
        openai_client=fake,
        sleep=sleep,
        **kwargs,
    )
    return orchestrator, fake


def test_plain_script_and_rate_limited_component(tmp_path, settings, sleep):
    write(tmp_path, "a.js", PLAIN)
    b = "import React from 'react';\nclass B extends React.Component {}\n"
    write(tmp_path, "b.js", b)

    def responder(model, messages):
        if "class B extends React.Component" in messages[-1]["content"] and model == PRIMARY:
            return rate_limit_error()
        return f"// migrated by {model}\n"

    orchestrator, fake = make_orchestrator(tmp_path, settings, responder, sleep, report=False)

    summary = orchestrator.run()

    assert (tmp_path / "a.ts").read_text(encoding="utf-8") == f"// migrated by {PRIMARY}\n"
    assert not (tmp_path / "a.js").exists()
    assert (tmp_path / "b.tsx").read_text(encoding="utf-8") == f"// migrated by {FALLBACK}\n"
    assert not (tmp_path / "b.js").exists()
    assert (summary.attempted, summary.succeeded, summary.failed) == (2, 2, 0)
    assert summary.fallback_used == 1
    assert summary.model_successes == {PRIMARY: 1, FALLBACK: 1}
    assert fake.completions.models_called().count(FALLBACK) == 1


def test_test_files_are_skipped_without_calls(tmp_path, settings, sleep):
    write(tmp_path, "Button.test.js", COMPONENT)
    write(tmp_path, "__tests__/helper.js", PLAIN)

    orchestrator, fake = make_orchestrator(tmp_path, settings, lambda m, msgs: "x", sleep)

    summary = orchestrator.run()

    assert fake.completions.calls == []
    assert summary == SummaryAggregator().snapshot()
    assert (tmp_path / "Button.test.js").exists()
    assert not (tmp_path / ".refactor").exists()


def test_failed_files_are_recorded_once_and_left_alone(tmp_path, settings, sleep):
    bad = write(tmp_path, "lib/bad.js", PLAIN)
    write(tmp_path, "lib/good.js", "export const ok = true;\n")

    def responder(model, messages):
        if "greet" in messages[-1]["content"]:
            return status_error(500)
        return "export const ok: boolean = true;\n"

    orchestrator, _ = make_orchestrator(tmp_path, settings, responder, sleep, report=False)

    summary = orchestrator.run()

    assert summary.failed_files == [str(bad.resolve())]
    assert bad.read_text(encoding="utf-8") == PLAIN
    assert not (tmp_path / "lib" / "bad.ts").exists()
    assert (tmp_path / "lib" / "good.ts").exists()
    assert summary.attempted == summary.succeeded + summary.failed == 2


def test_attempted_equals_succeeded_plus_failed_on_random_tree(tmp_path, settings, sleep):
    rng = random.Random(7)
    names = []
    for i in range(30):
        depth = rng.randint(0, 3)
        relative = "/".join(f"dir{rng.randint(0, 2)}" for _ in range(depth))
        name = f"{relative}/file{i}.js" if relative else f"file{i}.js"
        names.append(name)
        write(tmp_path, name, PLAIN if rng.random() < 0.5 else COMPONENT)

    outcomes = {}

    def responder(model, messages):
        key = (model, messages[-1]["content"])
        if key not in outcomes:
            outcomes[key] = rng.choice(["ok", "ok", status_error(500), rate_limit_error(), ""])
        return outcomes[key]

    orchestrator, _ = make_orchestrator(tmp_path, settings, responder, sleep, report=False)

    summary = orchestrator.run()

    assert summary.attempted == len(names)
    assert summary.attempted == summary.succeeded + summary.failed
    assert len(summary.failed_files) == summary.failed
    assert len(set(summary.failed_files)) == summary.failed
    assert sum(summary.model_successes.values()) == summary.succeeded
    for failed in summary.failed_files:
        assert (tmp_path / failed).exists()


def test_post_write_delay_between_files(tmp_path, settings, sleep):
    write(tmp_path, "one.js", PLAIN)
    write(tmp_path, "two.js", PLAIN)

    orchestrator, _ = make_orchestrator(
        tmp_path,
        settings.with_overrides(post_write_delay=0.25),
        lambda m, msgs: "export {};\n",
        sleep,
        report=False,
    )

    orchestrator.run()

    assert sleep.calls == [0.25, 0.25]


def test_run_report_written(tmp_path, settings, sleep):
    write(tmp_path, "src/index.js", PLAIN)

    orchestrator, _ = make_orchestrator(tmp_path, settings, lambda m, msgs: "export {};\n", sleep)

    orchestrator.run()

    report = tmp_path / ".refactor" / "reports" / "migration.md"
    assert report.exists()
    text = report.read_text(encoding="utf-8")
    assert "`src/index.js`" in text
    assert "Session Complete" in text


def test_progress_callback(tmp_path, settings, sleep):
    write(tmp_path, "a.js", PLAIN)
    write(tmp_path, "sub/b.js", PLAIN)
    seen = []

    orchestrator, _ = make_orchestrator(
        tmp_path,
        settings,
        lambda m, msgs: "export {};\n",
        sleep,
        report=False,
        on_progress=lambda path, index: seen.append(index),
    )

    orchestrator.run()

    assert seen == [1, 2]


def test_dry_run_needs_no_credentials(tmp_path, sleep):
    write(tmp_path, "a.js", PLAIN)

    orchestrator = MigrationOrchestrator(project_path=tmp_path, settings=Settings(), dry_run=True, sleep=sleep)
    summary = orchestrator.run()

    assert summary.attempted == 0
    assert (tmp_path / "a.js").exists()
    assert not (tmp_path / ".refactor").exists()


def test_missing_api_key_is_fatal(tmp_path):
    with pytest.raises(MissingCredentialError):
        MigrationOrchestrator(project_path=tmp_path, settings=Settings(api_key=None))


def test_missing_project_is_rejected(tmp_path, settings):
    with pytest.raises(ConfigError):
        MigrationOrchestrator(project_path=tmp_path / "nope", settings=settings)

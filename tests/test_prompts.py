import pytest

from ts_refactor.errors import ConfigError
from ts_refactor.prompts import (
    COMPONENT_TEMPLATE,
    SCRIPT_TEMPLATE,
    PromptLoader,
    PromptSet,
    parse_frontmatter,
)
from ts_refactor.prompts.templates import SYSTEM_PROMPT


def test_render_appends_source_after_instructions():
    messages = COMPONENT_TEMPLATE.render("class A extends React.Component {}")

    assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert messages[1]["role"] == "user"
    assert messages[1]["content"].startswith("Refactor the following legacy React class component")
    assert messages[1]["content"].endswith("Legacy code:\nclass A extends React.Component {}")


def test_source_with_braces_is_not_formatted():
    messages = SCRIPT_TEMPLATE.render("const x = `${a}` + '{0}';")

    assert messages[1]["content"].endswith("const x = `${a}` + '{0}';")


def test_prompt_set_selects_by_classification():
    prompts = PromptSet()

    assert prompts.for_file(True) is COMPONENT_TEMPLATE
    assert prompts.for_file(False) is SCRIPT_TEMPLATE


def test_parse_frontmatter():
    frontmatter, body = parse_frontmatter("---\ntemperature: 0.4\nsystem: Be brief.\n---\nDo it.\n")

    assert frontmatter == {"temperature": 0.4, "system": "Be brief."}
    assert body == "Do it.\n"


def test_parse_without_frontmatter():
    assert parse_frontmatter("Just text") == ({}, "Just text")


def test_malformed_frontmatter_is_ignored():
    frontmatter, body = parse_frontmatter("---\n: [unclosed\n---\nBody\n")

    assert frontmatter == {}
    assert body == "Body\n"


def test_loader_without_directory_uses_builtins():
    prompts = PromptLoader(None).load()

    assert prompts == PromptSet()


def test_loader_applies_overrides(tmp_path):
    (tmp_path / "component.md").write_text(
        "---\nsystem: Custom system.\ntemperature: 0.7\n---\nUse hooks everywhere.\n",
        encoding="utf-8",
    )

    loader = PromptLoader(tmp_path)
    prompts = loader.load()

    assert prompts.component.instructions == "Use hooks everywhere."
    assert prompts.component.system == "Custom system."
    assert prompts.component.temperature == 0.7
    assert prompts.script is SCRIPT_TEMPLATE
    assert loader.list_overrides() == ["component"]


def test_empty_override_is_rejected(tmp_path):
    (tmp_path / "script.md").write_text("---\ntemperature: 0.1\n---\n   \n", encoding="utf-8")

    with pytest.raises(ConfigError, match="no instructions"):
        PromptLoader(tmp_path).load()


def test_bad_temperature_is_rejected(tmp_path):
    (tmp_path / "script.md").write_text("---\ntemperature: warm\n---\nConvert.\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid temperature"):
        PromptLoader(tmp_path).load()

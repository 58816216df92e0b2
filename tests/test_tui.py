from metacat.cli.common.output import CONFIRM_STYLE, PICK_STYLE, prompt_style
from metacat.cli.tui import _MAX_FIELD_NAME_WIDTH, _field_choice_title, _truncate
from metacat.core.responses import FieldResponse


def test_field_choice_title_aligns_type_column():
    first = _field_choice_title(FieldResponse(name="id", type="INTEGER"), name_width=8)
    second = _field_choice_title(
        FieldResponse(name="email", type="VARCHAR"), name_width=8
    )

    assert first.startswith("id")
    assert second.startswith("email")
    assert first.index("INTEGER") == second.index("VARCHAR")


def test_field_choice_title_lists_existing_tags():
    rendered = _field_choice_title(
        FieldResponse(name="email", type="VARCHAR", tags=("PII", "SENSITIVE")),
        name_width=5,
    )

    assert rendered.endswith("[PII, SENSITIVE]")


def test_field_choice_title_truncates_long_names():
    long_name = "x" * (_MAX_FIELD_NAME_WIDTH + 10)
    rendered = _field_choice_title(
        FieldResponse(name=long_name, type="STRING"),
        name_width=_MAX_FIELD_NAME_WIDTH,
    )

    assert "..." in rendered
    assert "STRING" in rendered
    assert _truncate(long_name, _MAX_FIELD_NAME_WIDTH).endswith("...")
    assert _truncate("short", _MAX_FIELD_NAME_WIDTH) == "short"


def test_prompt_styles_use_their_accent():
    pick = dict(PICK_STYLE.style_rules)
    confirm = dict(CONFIRM_STYLE.style_rules)

    assert pick["pointer"] == "bold ansicyan"
    assert confirm["answer"] == "bold ansiyellow"
    assert dict(prompt_style("ansigreen").style_rules)["selected"] == "ansigreen"

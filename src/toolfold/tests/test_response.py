"""Tests for response helpers, the response builder, presenters and post-processing."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel

from toolfold import create_tool
from toolfold.foundation.errors import ErrorCode
from toolfold.response import (
    Presenter,
    PresenterValidationError,
    ResponseBuilder,
    ToolResponse,
    apply_egress_guard,
    error,
    post_process_result,
    required,
    response,
    success,
    tool_error,
)


class ProjectView(BaseModel):
    id: str
    name: str


# ═════════════════════════════════════════════════════════════════════════════
# Helpers
# ═════════════════════════════════════════════════════════════════════════════


def test_success_text_and_json() -> None:
    assert success("created").text == "created"
    assert success("").text == "OK"
    assert success({"id": "p1"}).text == '{\n  "id": "p1"\n}'
    assert not success("x").is_error


def test_success_handles_models_sets_and_fallbacks() -> None:
    assert success(ProjectView(id="p1", name="Apollo")).text == '{\n  "id": "p1",\n  "name": "Apollo"\n}'
    assert success({"tags": {"a"}}).text == '{\n  "tags": [\n    "a"\n  ]\n}'
    assert success({1: object}).text.startswith('{\n  "1": "<class')


def test_error_response() -> None:
    assert error("Project <p9> not found").text == (
        "<tool_error>\n<message>Project &lt;p9&gt; not found</message>\n</tool_error>"
    )
    assert error("gone", ErrorCode.NOT_FOUND).text.startswith('<tool_error code="NOT_FOUND">')
    assert error("gone").is_error


def test_required_response() -> None:
    resp = required("name")
    assert resp.is_error
    assert 'code="MISSING_REQUIRED_FIELD"' in resp.text
    assert '<message>Required field "name" is missing.</message>' in resp.text


def test_tool_error_renders_recovery_details() -> None:
    resp = tool_error(
        "ProjectNotFound",
        "No project 'p9'",
        suggestion="List projects first",
        available_actions=["projects.list"],
        details={"workspace": "w1"},
        retry_after=2,
    )
    assert resp.is_error
    assert resp.text.split("\n") == [
        '<tool_error code="ProjectNotFound" severity="error">',
        "<message>No project 'p9'</message>",
        "<recovery>List projects first</recovery>",
        "<available_actions>",
        "  <action>projects.list</action>",
        "</available_actions>",
        "<details>",
        '  <detail key="workspace">w1</detail>',
        "</details>",
        "<retry_after>2 seconds</retry_after>",
        "</tool_error>",
    ]


def test_warning_severity_is_not_an_error() -> None:
    assert not tool_error(ErrorCode.DEPRECATED, "Use projects_list", severity="warning").is_error


def test_wire_shape() -> None:
    assert success("hi").to_wire() == {"content": [{"type": "text", "text": "hi"}]}
    assert error("no").to_wire()["isError"] is True
    parsed = ToolResponse.model_validate({"content": [{"type": "text", "text": "x"}], "isError": True})
    assert parsed.is_error and parsed.text == "x"


# ═════════════════════════════════════════════════════════════════════════════
# ResponseBuilder
# ═════════════════════════════════════════════════════════════════════════════


def test_builder_block_order() -> None:
    built = (
        response({"total": 3})
        .text("Showing page 1")
        .hint("Amounts are in cents.")
        .rules(["Never show internal IDs."])
        .suggest("billing_refund", "Refund disputed charges")
        .build()
    )
    assert [c.text for c in built.content] == [
        '{\n  "total": 3\n}',
        "Showing page 1",
        "💡 Amounts are in cents.",
        "[DOMAIN RULES]:\n- Never show internal IDs.",
        "[SYSTEM HINT]: Based on the current state, recommended next tools:\n  → billing_refund: Refund disputed charges",
    ]
    assert not built.is_error


def test_empty_builder() -> None:
    assert response().build().text == "OK"
    assert len(ResponseBuilder().data("done").build().content) == 1


# ═════════════════════════════════════════════════════════════════════════════
# Presenter
# ═════════════════════════════════════════════════════════════════════════════


def test_presenter_strips_unknown_fields_per_item() -> None:
    presenter = Presenter("Project", ProjectView)
    built = presenter.make([{"id": "p1", "name": "Apollo", "secret": "x"}]).build()
    assert built.content[0].text == '[\n  {\n    "id": "p1",\n    "name": "Apollo"\n  }\n]'


def test_presenter_rules_and_hints() -> None:
    presenter = Presenter(
        "Project",
        ProjectView,
        rules=lambda data, ctx: ["Results are truncated." if len(data) > 1 else None, f"Viewer: {ctx}"],
        hints=["Use projects_create to add one."],
    )
    built = presenter.make([{"id": "p1", "name": "Apollo"}], "ada").build()
    assert [c.text for c in built.content[1:]] == [
        "💡 Use projects_create to add one.",
        "[DOMAIN RULES]:\n- Viewer: ada",
    ]


def test_presenter_without_schema_passes_data_through() -> None:
    assert Presenter("Raw", rules=["Be brief."]).make("ok").build().content[0].text == "ok"


def test_presenter_rejects_bad_handler_output() -> None:
    with pytest.raises(PresenterValidationError, match="Presenter 'Project' rejected handler output") as exc:
        Presenter("Project", ProjectView).make({"id": "p1"})
    assert exc.value.issues[0].path == ("name",)


# ═════════════════════════════════════════════════════════════════════════════
# Post-processing
# ═════════════════════════════════════════════════════════════════════════════


def test_tool_response_is_returned_unchanged() -> None:
    resp = success("done")
    assert post_process_result(resp) is resp


def test_wire_shaped_mapping_is_validated() -> None:
    resp = post_process_result({"content": [{"type": "text", "text": "raw"}], "isError": True})
    assert resp.text == "raw" and resp.is_error


def test_non_text_blocks_are_kept() -> None:
    image = {"type": "image", "data": "aGk=", "mimeType": "image/png"}
    resp = post_process_result({"content": [{"type": "text", "text": "chart"}, image]})
    assert resp.text == "chart"
    assert resp.content[1] == image
    assert resp.to_wire() == {"content": [{"type": "text", "text": "chart"}, image]}


def test_extra_wire_fields_are_kept() -> None:
    wire = {
        "content": [{"type": "text", "text": "x", "annotations": {"priority": 1}}],
        "structuredContent": {"a": 1},
        "_meta": {"trace": "t1"},
        "custom": True,
    }
    resp = post_process_result(wire)
    assert resp.structured_content == {"a": 1}
    assert resp.meta == {"trace": "t1"}
    assert resp.to_wire() == wire


def test_mapping_without_list_content_is_data() -> None:
    assert post_process_result({"content": "draft"}).text == '{\n  "content": "draft"\n}'


def test_builder_wins_over_presenter() -> None:
    presenter = Presenter("Project", ProjectView)
    assert post_process_result(response("built"), presenter).text == "built"


def test_presenter_applies_to_raw_values() -> None:
    presenter = Presenter("Project", ProjectView, hints=["Hi"])
    resp = post_process_result({"id": "p1", "name": "Apollo", "secret": "x"}, presenter)
    assert "secret" not in resp.text
    assert resp.content[-1].text == "💡 Hi"


def test_fallback_text_and_json() -> None:
    assert post_process_result("").text == "OK"
    assert post_process_result("hello").text == "hello"
    assert post_process_result([1, 2]).text == "[\n  1,\n  2\n]"
    assert post_process_result(None).text == "null"


@pytest.mark.asyncio
async def test_presenter_failure_propagates_from_execute() -> None:
    def leaky(ctx: Any, args: dict[str, Any]) -> dict[str, str]:
        return {"id": "p1"}

    tool = create_tool("projects").action("get", leaky, presenter=Presenter("Project", ProjectView))
    with pytest.raises(PresenterValidationError):
        await tool.execute(None, {"action": "get"})


# ═════════════════════════════════════════════════════════════════════════════
# Payload limit
# ═════════════════════════════════════════════════════════════════════════════


def test_within_limit_is_the_same_object() -> None:
    resp = success("A" * 1024)
    assert apply_egress_guard(resp, 1024) is resp
    assert apply_egress_guard(success("A" * 500), 100).text == "A" * 500


def test_oversized_text_is_cut_with_notice() -> None:
    guarded = apply_egress_guard(success("ABCDEF" * 500), 2048)
    assert guarded.text.startswith("ABCDEF")
    assert "pagination (limit/offset)" in guarded.text
    assert len(guarded.text.encode()) <= 2048


def test_blocks_that_fit_are_kept_whole() -> None:
    resp = ToolResponse.of_text("Small block", "X" * 5000, "never shown")
    guarded = apply_egress_guard(resp, 2048)
    assert guarded.content[0].text == "Small block"
    assert "SYSTEM INTERVENTION" in guarded.content[1].text
    assert len(guarded.content) == 2


def test_multibyte_characters_are_not_split() -> None:
    guarded = apply_egress_guard(success("Hello 世界! " * 200), 1024)
    assert "�" not in guarded.text
    assert "SYSTEM INTERVENTION" in guarded.text


def test_error_flag_and_other_blocks_survive_truncation() -> None:
    image = {"type": "image", "data": "aGk=", "mimeType": "image/png"}
    resp = ToolResponse(content=({"type": "text", "text": "E" * 3000}, image), is_error=True)
    guarded = apply_egress_guard(resp, 1024)
    assert guarded.is_error
    assert guarded.content[1] == image
    assert not apply_egress_guard(success("D" * 3000), 1024).is_error

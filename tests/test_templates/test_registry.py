"""Tests for the template registry and built-in templates."""

from __future__ import annotations

import pytest

from herald.errors.delivery_errors import TemplateNotFoundError
from herald.templates.defaults import BUILTIN_TEMPLATES
from herald.templates.registry import Template, TemplateField, TemplateRegistry


def _template(name: str = "custom", title: str = "Hello {who}") -> Template:
    return Template(
        name=name,
        title=title,
        color="#112233",
        fields=(TemplateField("Who", "{who}", inline=True),),
        footer="bye",
    )


class TestTemplateRegistry:
    def test_register_and_get(self) -> None:
        reg = TemplateRegistry()
        t = _template()
        reg.register(t)
        assert reg.get("custom") is t
        assert "custom" in reg
        assert len(reg) == 1

    def test_get_unknown_raises(self) -> None:
        reg = TemplateRegistry()
        with pytest.raises(TemplateNotFoundError, match="nope") as exc_info:
            reg.get("nope")
        assert exc_info.value.template_type == "nope"
        assert exc_info.value.code == "template-not-found"

    def test_find_unknown_returns_none(self) -> None:
        assert TemplateRegistry().find("nope") is None

    def test_register_twice_keeps_latest(self) -> None:
        reg = TemplateRegistry()
        reg.register(_template(title="first"))
        reg.register(_template(title="second"))
        assert len(reg) == 1
        assert reg.get("custom").title == "second"

    def test_list_in_registration_order(self) -> None:
        reg = TemplateRegistry([_template("a"), _template("b")])
        assert [t.name for t in reg.list()] == ["a", "b"]

    def test_template_is_frozen(self) -> None:
        t = _template()
        with pytest.raises(AttributeError):
            t.title = "changed"  # type: ignore[misc]


class TestTemplateSerialization:
    def test_round_trip_dict(self) -> None:
        t = _template()
        rebuilt = Template.from_dict("custom", t.to_dict())
        assert rebuilt == t

    def test_from_dict_defaults(self) -> None:
        t = Template.from_dict("bare", {"title": "Only a title"})
        assert t.fields == ()
        assert t.footer is None
        assert t.color == 0


class TestBuiltinTemplates:
    def test_all_business_types_present(self) -> None:
        names = {t.name for t in BUILTIN_TEMPLATES}
        assert names == {"maintenance", "feature", "security", "update", "event", "promotion"}

    def test_maintenance_layout(self) -> None:
        reg = TemplateRegistry(BUILTIN_TEMPLATES)
        t = reg.get("maintenance")
        assert t.color == "#ff9900"
        assert [f.value for f in t.fields] == ["{startTime}", "{endTime}", "{reason}", "{impact}"]
        assert t.fields[0].inline is True
        assert t.fields[2].inline is False

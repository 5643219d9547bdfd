"""Tests for manifest models: flag descriptions, examples, lookups, scalars."""

import pytest

from k2saddons.addons.constraints import NumberRange, UnknownConstraint, ValidationSet
from k2saddons.addons.models import (
    Addon,
    AddonCmd,
    AddonMetadata,
    AddonSpec,
    CliConfig,
    CliExample,
    CliFlag,
    EnabledAddons,
    ParameterMapping,
    ScriptConfig,
    format_examples,
)
from k2saddons.addons.scalars import ScalarKind, scalar_kind, scalar_to_text
from k2saddons.core.errors import UnknownConstraintKindError


class TestFullDescription:
    def test_description_only(self):
        assert CliFlag("ingress", description="Ingress controller").full_description() == (
            "Ingress controller"
        )

    def test_description_and_constraint(self):
        flag = CliFlag(
            "ingress",
            description="Ingress controller",
            constraints=ValidationSet(("none", "nginx")),
        )
        assert flag.full_description() == "Ingress controller [none|nginx]"

    def test_constraint_only(self):
        assert CliFlag("replicas", constraints=NumberRange(1, 10)).full_description() == "[1,10]"

    def test_neither(self):
        assert CliFlag("x").full_description() == ""

    def test_idempotent(self):
        flag = CliFlag("x", description="d", constraints=NumberRange(1, 2))
        assert flag.full_description() == flag.full_description()

    def test_unknown_constraint_raises(self):
        flag = CliFlag("x", description="d", constraints=UnknownConstraint("regex"))
        with pytest.raises(UnknownConstraintKindError):
            flag.full_description()


class TestExamples:
    def test_without_comment(self):
        assert str(CliExample("k2s addons enable dashboard")) == "  k2s addons enable dashboard\n"

    def test_with_comment(self):
        ex = CliExample("k2s addons enable dashboard -i nginx", comment="with ingress")
        assert str(ex) == "  // with ingress\n  k2s addons enable dashboard -i nginx\n"

    def test_joined_with_blank_line(self):
        text = format_examples([CliExample("a"), CliExample("b", comment="c")])
        assert text == "  a\n\n  // c\n  b\n"

    def test_empty(self):
        assert CliConfig().examples_text == ""


class TestLookups:
    def _addon(self):
        cli = CliConfig(flags=(CliFlag("ingress", default="none"), CliFlag("metrics", default=False)))
        script = ScriptConfig(
            "Enable.ps1", (ParameterMapping("ingress", "Ingress"),)
        )
        return Addon(
            api_version="v1",
            kind="AddonManifest",
            directory=None,
            metadata=AddonMetadata("dashboard", "Dashboard"),
            spec=AddonSpec({"enable": AddonCmd(script=script, cli=cli)}),
        )

    def test_name(self):
        assert self._addon().name == "dashboard"

    def test_command(self):
        addon = self._addon()
        assert addon.command("enable").script.sub_path == "Enable.ps1"
        assert addon.command("disable") is None

    def test_flag(self):
        cli = self._addon().command("enable").cli
        assert cli.flag("metrics").default is False
        assert cli.flag("missing") is None

    def test_mapping_for(self):
        script = self._addon().command("enable").script
        assert script.mapping_for("ingress").script_parameter_name == "Ingress"
        assert script.mapping_for("metrics") is None

    def test_flag_kind_follows_default(self):
        assert CliFlag("a", default="x").kind is ScalarKind.STRING
        assert CliFlag("a", default=3).kind is ScalarKind.INTEGER
        assert CliFlag("a", default=0.5).kind is ScalarKind.FLOAT
        assert CliFlag("a", default=True).kind is ScalarKind.BOOLEAN
        assert CliFlag("a").kind is None

    def test_enabled_addons(self):
        enabled = EnabledAddons(("dashboard",))
        assert enabled.is_enabled("dashboard")
        assert not enabled.is_enabled("metrics")


class TestScalars:
    def test_bool_is_not_integer(self):
        assert scalar_kind(False) is ScalarKind.BOOLEAN

    def test_non_scalar(self):
        assert scalar_kind([1]) is None
        assert scalar_kind(None) is None

    @pytest.mark.parametrize(
        "value,text",
        [(True, "true"), (False, "false"), (10, "10"), (10.0, "10"), (2.5, "2.5"), ("x", "x")],
    )
    def test_to_text(self, value, text):
        assert scalar_to_text(value) == text

    def test_to_text_rejects_non_scalar(self):
        with pytest.raises(TypeError):
            scalar_to_text({"a": 1})

"""Tests for platform_cli.cli.forms."""

import pytest

from platform_cli.cli.forms import (
    ArrayField,
    BooleanField,
    Field,
    Form,
    InvalidValueError,
    MissingValueError,
    OptionsField,
    UrlField,
)


@pytest.fixture
def form():
    """A small form with one conditional branch per type."""
    return Form.from_dict(
        {
            "kind": OptionsField("Kind", options=["a", "b"], required=True),
            "name": Field("Name", conditions={"kind": ["a"]}, required=True),
            "enabled": BooleanField("Enabled", conditions={"kind": ["a"]}),
            "tags": ArrayField("Tags", conditions={"kind": ["b"]}, default=["*"]),
            "note": Field("Note"),
        }
    )


class TestFormResolve:
    """Tests for Form.resolve."""

    def test_resolves_applicable_fields(self, form):
        """Fields whose conditions hold are resolved, defaults filled in."""
        result = form.resolve({"kind": "a", "name": "x"})
        assert result == {"kind": "a", "name": "x", "enabled": True}

    def test_unmet_condition_omits_supplied_value(self, form):
        """A supplied value for an inapplicable field is dropped."""
        result = form.resolve({"kind": "b", "name": "ignored", "enabled": "no"})
        assert "name" not in result
        assert "enabled" not in result
        assert result["tags"] == ["*"]

    def test_condition_without_resolved_dependency(self):
        """A condition on a field with no value is unmet."""
        form = Form.from_dict(
            {
                "kind": OptionsField("Kind", options=["a"]),
                "name": Field("Name", conditions={"kind": ["a"]}, required=True),
            }
        )
        assert form.resolve({"name": "x"}) == {}

    def test_missing_required_field(self, form):
        """A required field with no value and no default fails."""
        with pytest.raises(MissingValueError) as exc_info:
            form.resolve({"kind": "a"})
        assert exc_info.value.key == "name"

    def test_optional_field_omitted(self, form):
        """An optional field without value or default is left out."""
        result = form.resolve({"kind": "b"})
        assert "note" not in result

    def test_invalid_value_names_field(self, form):
        """Validation errors identify the field and the input."""
        with pytest.raises(InvalidValueError) as exc_info:
            form.resolve({"kind": "c"})
        assert exc_info.value.key == "kind"
        assert exc_info.value.value == "c"
        assert "kind" in str(exc_info.value)

    def test_no_partial_result_on_failure(self, form):
        """A later invalid field aborts the whole form."""
        with pytest.raises(InvalidValueError):
            form.resolve({"kind": "a", "name": "x", "enabled": "maybe"})

    def test_defaults_are_copies(self, form):
        """Mutating a resolved default does not change the field default."""
        result = form.resolve({"kind": "b"})
        result["tags"].append("extra")
        assert form.get_field("tags").default == ["*"]

    def test_prompter_used_for_missing_values(self, form):
        """The prompter supplies values that were not given."""
        asked = []

        def prompter(field):
            asked.append(field.key)
            return {"name": "prompted"}.get(field.key)

        result = form.resolve({"kind": "a"}, prompter=prompter)
        assert result["name"] == "prompted"
        assert result["enabled"] is True
        assert asked == ["name", "enabled", "note"]

    def test_prompted_values_are_validated(self, form):
        """Prompted values go through the same validation."""

        def prompter(field):
            return "bogus" if field.key == "enabled" else None

        with pytest.raises(InvalidValueError):
            form.resolve({"kind": "a", "name": "x"}, prompter=prompter)

    def test_partial_uses_context_for_conditions(self, form):
        """Partial mode evaluates conditions against existing values."""
        result = form.resolve({"enabled": "off"}, partial=True, context={"kind": "a"})
        assert result == {"enabled": False}

    def test_partial_skips_defaults_and_required(self, form):
        """Partial mode only returns supplied values."""
        assert form.resolve({}, partial=True, context={"kind": "a"}) == {}

    def test_partial_respects_conditions(self, form):
        """Partial mode still drops fields that do not apply."""
        result = form.resolve({"tags": "x"}, partial=True, context={"kind": "a"})
        assert result == {}


class TestFormDefinition:
    """Tests for building forms."""

    def test_keys_assigned(self, form):
        """Fields get their machine key from the form."""
        assert form.get_field("enabled").key == "enabled"
        assert form.get_field("enabled").option_name == "enabled"

    def test_duplicate_key_rejected(self):
        """Keys must be unique."""
        form = Form()
        form.add_field("a", Field("A"))
        with pytest.raises(ValueError):
            form.add_field("a", Field("A again"))

    def test_condition_must_reference_earlier_field(self):
        """Conditions can only depend on fields declared before."""
        form = Form()
        with pytest.raises(ValueError):
            form.add_field("b", Field("B", conditions={"a": ["x"]}))

    def test_order_preserved(self, form):
        """Iteration follows declaration order."""
        assert [f.key for f in form] == ["kind", "name", "enabled", "tags", "note"]
        assert len(form) == 5
        assert "tags" in form


class TestNormalizerOrder:
    """The normalizer always runs before the validator."""

    def test_validator_sees_normalized_value(self):
        """The validator receives the normalizer's output."""
        seen = []

        def validator(value):
            seen.append(value)
            return True

        field = Field("F", normalizer=str.upper, validator=validator, key="f")
        assert field.process("abc") == "ABC"
        assert seen == ["ABC"]

    def test_normalizer_can_make_value_valid(self):
        """A value only valid after normalization is accepted."""
        field = Field(
            "F",
            normalizer=lambda v: v.replace("-", ""),
            validator=str.isdigit,
            key="f",
        )
        assert field.process("12-34") == "1234"


class TestBooleanField:
    """Tests for BooleanField."""

    @pytest.mark.parametrize("token", ["true", "Yes", "y", "ON", "1"])
    def test_truthy_tokens(self, token):
        """Truthy tokens coerce to True."""
        assert BooleanField("B", key="b").process(token) is True

    @pytest.mark.parametrize("token", ["false", "No", "n", "off", "0"])
    def test_falsy_tokens(self, token):
        """Falsy tokens coerce to False."""
        assert BooleanField("B", key="b").process(token) is False

    @pytest.mark.parametrize("token", ["maybe", "", "2", "truthy"])
    def test_rejects_other_tokens(self, token):
        """Anything else is rejected."""
        with pytest.raises(InvalidValueError):
            BooleanField("B", key="b").process(token)

    def test_default_true(self):
        """Booleans default to true unless told otherwise."""
        assert BooleanField("B").default is True
        assert BooleanField("B", default=False).default is False

    def test_format_value(self):
        """Booleans render as true/false."""
        field = BooleanField("B")
        assert field.format_value(True) == "true"
        assert field.format_value(False) == "false"


class TestOptionsField:
    """Tests for OptionsField."""

    def test_accepts_option(self):
        """Allowed values pass."""
        assert OptionsField("O", options=["x", "y"], key="o").process(" y ") == "y"

    def test_rejects_other_values(self):
        """Values outside the allow-list fail with the list in the reason."""
        with pytest.raises(InvalidValueError) as exc_info:
            OptionsField("O", options=["x", "y"], key="o").process("z")
        assert "x, y" in exc_info.value.reason


class TestArrayField:
    """Tests for ArrayField."""

    def test_splits_delimited_string(self):
        """Commas and whitespace both separate items, order kept."""
        field = ArrayField("A", key="a")
        assert field.process("b, a,c  d") == ["b", "a", "c", "d"]

    def test_accepts_list(self):
        """Lists of strings pass through."""
        assert ArrayField("A", key="a").process(["x", "y"]) == ["x", "y"]

    def test_rejects_non_string_items(self):
        """Items must be strings."""
        with pytest.raises(InvalidValueError):
            ArrayField("A", key="a").process(["x", 1])

    def test_rejects_other_types(self):
        """Mappings and numbers are not arrays."""
        with pytest.raises(InvalidValueError):
            ArrayField("A", key="a").process({"x": 1})
        with pytest.raises(InvalidValueError):
            ArrayField("A", key="a").process(3)

    def test_format_value(self):
        """Arrays render joined by commas."""
        assert ArrayField("A").format_value(["a", "b"]) == "a, b"


class TestUrlField:
    """Tests for UrlField."""

    def test_accepts_absolute_url(self):
        """http(s) URLs with a host pass."""
        field = UrlField("U", key="u")
        assert field.process("https://example.com/hook") == "https://example.com/hook"

    @pytest.mark.parametrize(
        "value", ["example.com/hook", "/hook", "ftp://example.com", "https://"]
    )
    def test_rejects_invalid_url(self, value):
        """Relative, host-less and non-http URLs fail."""
        with pytest.raises(InvalidValueError):
            UrlField("U", key="u").process(value)

    def test_check_returns_reason(self):
        """check() reports the error instead of raising."""
        field = UrlField("U", key="u")
        assert field.check("https://example.com") is True
        assert field.check("nope") == "Invalid URL"

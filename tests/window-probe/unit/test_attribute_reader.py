"""
Unit tests for named attribute queries.
"""

import pytest
from fixtures.scripted_source import ScriptedAttributeSource

from window_probe.constants import Attribute
from window_probe.errors import MalformedRequestError, TransientFailureError
from window_probe.models.attributes import AttributeResult, Point, Size
from window_probe.services.attribute_reader import AttributeReader, AttributeSource


def reader_for(**attributes) -> AttributeReader:
    names = {getattr(Attribute, key.upper()): value for key, value in attributes.items()}
    return AttributeReader(ScriptedAttributeSource(names), handle="w1")


class TestNamedQueries:

    def test_string_attributes(self):
        reader = reader_for(title="Library", role="AXWindow", subrole="AXUnknown")
        assert reader.title() == "Library"
        assert reader.role() == "AXWindow"
        assert reader.subrole() == "AXUnknown"

    def test_numeric_attributes(self):
        reader = reader_for(window_id=42, pid=4242, level=0)
        assert reader.window_id() == 42
        assert reader.pid() == 4242
        assert reader.level() == 0

    def test_unsupported_attribute_is_none(self):
        assert reader_for().title() is None

    def test_transient_failure_raises(self):
        source = ScriptedAttributeSource()
        source.script(Attribute.TITLE, AttributeResult.transient())
        with pytest.raises(TransientFailureError):
            AttributeReader(source, "w1").title()

    def test_wrong_type_is_none(self):
        reader = reader_for(title=42, window_id="42")
        assert reader.title() is None
        assert reader.window_id() is None

    def test_bool_is_not_a_number(self):
        assert reader_for(window_id=True).window_id() is None

    def test_negative_window_id_is_none(self):
        assert reader_for(window_id=-1).window_id() is None
        assert reader_for(window_id=0).window_id() == 0

    @pytest.mark.parametrize("value", [(800, 600), [800, 600], {"width": 800, "height": 600}, Size(width=800, height=600)])
    def test_size_shapes(self, value):
        assert reader_for(size=value).size() == Size(width=800, height=600)

    def test_position(self):
        assert reader_for(position=(10, -20)).position() == Point(x=10, y=-20)

    @pytest.mark.parametrize("value", ["800x600", (800,), {"width": -1, "height": 5}])
    def test_malformed_size_is_none(self, value):
        assert reader_for(size=value).size() is None

    def test_flags_default_to_false_when_unknown(self):
        reader = reader_for()
        assert reader.is_minimized() is False
        assert reader.is_fullscreen() is False
        assert reader.app_is_running() is None

    def test_flags(self):
        reader = reader_for(minimized=True, fullscreen=True, is_application_running=False)
        assert reader.is_minimized() is True
        assert reader.is_fullscreen() is True
        assert reader.app_is_running() is False

    def test_element_attributes(self):
        reader = reader_for(parent="app", children=["a", "b"], windows=["w1"], focused_window="w1", close_button="btn")
        assert reader.parent() == "app"
        assert reader.children() == ["a", "b"]
        assert reader.windows() == ["w1"]
        assert reader.focused_window() == "w1"
        assert reader.close_button() == "btn"

    def test_queries_pass_handle_through(self):
        source = ScriptedAttributeSource()
        source.script(Attribute.TITLE, "first", handle="w1")
        source.script(Attribute.TITLE, "second", handle="w2")

        assert AttributeReader(source, "w1").title() == "first"
        assert AttributeReader(source, "w2").title() == "second"
        assert ("w1", Attribute.TITLE) in source.calls


class TestMalformedRequests:

    @pytest.mark.parametrize("name", ["", None, 3])
    def test_invalid_attribute_name(self, name):
        with pytest.raises(MalformedRequestError):
            reader_for().attribute(name)

    def test_source_must_answer_with_attribute_result(self):
        class BrokenSource:
            def get_attribute(self, handle, name):
                return "AXWindow"

        with pytest.raises(MalformedRequestError):
            AttributeReader(BrokenSource(), "w1").role()

    def test_scripted_source_satisfies_protocol(self):
        assert isinstance(ScriptedAttributeSource(), AttributeSource)

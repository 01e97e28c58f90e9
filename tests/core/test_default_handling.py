"""
Test module for netlog.core.defaults
"""

from unittest.mock import patch

from netlog.core.defaults import apply_defaults
from netlog.core.resolver import Phase
from netlog.models.fields import FieldDescriptor, HeaderSource, SpecialSource


def fallback(request, response, record):
    return "from-fallback"


class TestApplyDefaults:

    def test_non_mandatory_absent_field_left_alone(self):
        descriptor = FieldDescriptor(name="ip", source=HeaderSource(name="x-forwarded-for"), fallback=fallback)
        record, queue = {}, {}

        apply_defaults(descriptor, record, queue, Phase.PRE)

        assert record == {}
        assert queue == {}

    def test_mandatory_with_value_left_alone(self):
        descriptor = FieldDescriptor(name="ip", source=HeaderSource(name="x"), mandatory=True, default="-")
        record, queue = {"ip": "10.0.0.1"}, {}

        apply_defaults(descriptor, record, queue, Phase.PRE)

        assert record == {"ip": "10.0.0.1"}
        assert queue == {}

    def test_default_written_immediately(self):
        descriptor = FieldDescriptor(
            name="ip", source=HeaderSource(name="x"), mandatory=True, default="-", fallback=fallback
        )
        record, queue = {}, {}

        apply_defaults(descriptor, record, queue, Phase.PRE)

        assert record == {"ip": "-"}
        assert queue == {}

    def test_falsy_default_still_applies(self):
        descriptor = FieldDescriptor(name="size", source=HeaderSource(name="content-length"),
                                     mandatory=True, default=0)
        record = {}

        apply_defaults(descriptor, record, {}, Phase.POST)

        assert record == {"size": 0}

    def test_fallback_queued_without_default(self):
        descriptor = FieldDescriptor(name="ip", source=HeaderSource(name="x"), mandatory=True, fallback=fallback)
        record, queue = {}, {}

        with patch("netlog.core.defaults.logger") as mock_logger:
            apply_defaults(descriptor, record, queue, Phase.POST)

        assert record == {}
        assert queue == {"ip": fallback}
        mock_logger.info.assert_called_once_with("falling_back_for_field", field="ip", phase="post")

    def test_missing_fallback_queued_as_none(self):
        descriptor = FieldDescriptor(name="status", source=SpecialSource(), mandatory=True)
        queue = {}

        apply_defaults(descriptor, {}, queue, Phase.PRE)

        assert queue == {"status": None}

    def test_later_fallback_replaces_queued_one(self):
        def other(request, response, record):
            return "other"

        queue = {}
        first = FieldDescriptor(name="ip", source=HeaderSource(name="a"), mandatory=True, fallback=fallback)
        second = FieldDescriptor(name="ip", source=HeaderSource(name="b"), mandatory=True, fallback=other)

        apply_defaults(first, {}, queue, Phase.PRE)
        apply_defaults(second, {}, queue, Phase.PRE)

        assert queue == {"ip": other}

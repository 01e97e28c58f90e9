"""
Test module for netlog.core.resolver
"""

import pytest

from netlog.core.context import ContextAdapter
from netlog.core.resolver import PRE_TIME_DEFAULT, UNRESOLVED, Phase, resolve_source
from netlog.models.fields import (
    FieldDescriptor,
    FieldSource,
    HeaderSource,
    SelfSource,
    SpecialSource,
    StaticSource,
    TimeSource,
)


@pytest.fixture
def contexts(make_request, make_response):
    request = make_request(headers={"x-forwarded-for": "10.0.0.1"}, method="GET")
    response = make_response(headers={"content-type": "text/plain"}, status_code=204)
    return ContextAdapter(request), ContextAdapter(response)


def resolve(descriptor, phase, contexts, record=None):
    request, response = contexts
    return resolve_source(descriptor, phase, request, response, record if record is not None else {})


class TestHeaderAndFieldSources:

    def test_header_reads_request_in_pre(self, contexts):
        descriptor = FieldDescriptor(name="ip", source=HeaderSource(name="x-forwarded-for"))

        assert resolve(descriptor, Phase.PRE, contexts) == "10.0.0.1"

    def test_header_reads_response_in_post(self, contexts):
        descriptor = FieldDescriptor(name="ct", source=HeaderSource(name="content-type"))

        assert resolve(descriptor, Phase.POST, contexts) == "text/plain"
        assert resolve(descriptor, Phase.PRE, contexts) is None

    def test_field_reads_request_in_pre(self, contexts):
        descriptor = FieldDescriptor(name="method", source=FieldSource(name="method"))

        assert resolve(descriptor, Phase.PRE, contexts) == "GET"

    def test_field_reads_response_in_post(self, contexts):
        descriptor = FieldDescriptor(name="status", source=FieldSource(name="status_code"))

        assert resolve(descriptor, Phase.POST, contexts) == 204
        assert resolve(descriptor, Phase.PRE, contexts) is None

    def test_header_without_capability_reads_empty(self):
        descriptor = FieldDescriptor(name="ip", source=HeaderSource(name="x-forwarded-for"))
        request, response = ContextAdapter(object()), ContextAdapter(object())

        assert resolve_source(descriptor, Phase.PRE, request, response, {}) == ""


class TestStaticSource:

    def test_static_written_in_pre(self, contexts):
        descriptor = FieldDescriptor(name="type", source=StaticSource(value="request"))

        assert resolve(descriptor, Phase.PRE, contexts) == "request"

    def test_static_not_written_in_post(self, contexts):
        descriptor = FieldDescriptor(name="type", source=StaticSource(value="request"))

        assert resolve(descriptor, Phase.POST, contexts) is UNRESOLVED


class TestTimeSource:

    def test_pre_function_receives_hosts_and_record(self, contexts):
        seen = []

        def pre(request, response, record):
            seen.append((request, response, record))
            return "2024-01-01T00:00:00+00:00"

        descriptor = FieldDescriptor(name="received", source=TimeSource(pre=pre))
        record = {"existing": 1}

        assert resolve(descriptor, Phase.PRE, contexts, record) == "2024-01-01T00:00:00+00:00"
        request, response = contexts
        assert seen == [(request.target, response.target, record)]

    def test_missing_pre_function_defaults(self, contexts):
        descriptor = FieldDescriptor(name="received", source=TimeSource())

        assert resolve(descriptor, Phase.PRE, contexts) == PRE_TIME_DEFAULT == -1

    def test_post_function(self, contexts):
        descriptor = FieldDescriptor(
            name="duration",
            source=TimeSource(post=lambda req, res, rec: rec["end"] - rec["start"])
        )

        assert resolve(descriptor, Phase.POST, contexts, {"start": 10, "end": 25}) == 15

    def test_missing_post_function_writes_nothing(self, contexts):
        descriptor = FieldDescriptor(name="duration", source=TimeSource(pre=lambda *a: 1))

        assert resolve(descriptor, Phase.POST, contexts) is UNRESOLVED


class TestDeferredSources:

    @pytest.mark.parametrize("phase", [Phase.PRE, Phase.POST])
    def test_self_reference_unresolved(self, contexts, phase):
        descriptor = FieldDescriptor(name="remote_host", source=SelfSource(name="remote_ip"))

        assert resolve(descriptor, phase, contexts, {"remote_ip": "1.2.3.4"}) is UNRESOLVED

    @pytest.mark.parametrize("phase", [Phase.PRE, Phase.POST])
    def test_special_unresolved(self, contexts, phase):
        descriptor = FieldDescriptor(name="status", source=SpecialSource(), fallback=lambda *a: 500)

        assert resolve(descriptor, phase, contexts) is UNRESOLVED

    def test_unresolved_is_falsy_marker(self):
        assert not UNRESOLVED
        assert repr(UNRESOLVED) == "UNRESOLVED"

"""Tests for the interpolation engine: tree walk, caching and scoping."""

from collections import namedtuple
from unittest import mock

import pytest

from interp import Agent, InterpolationConfig
from interp.engine import NodeKind, classify
from interp.errors import (
    ExtensionError,
    TemplatingSyntaxError,
    UndefinedVariableError,
)


PLAIN = {
    "url": "https://example.com/feed",
    "count": 3,
    "ratio": 0.5,
    "enabled": True,
    "missing": None,
    "headers": {"Accept": "text/html"},
    "tags": ["a", 1, {"nested": "b"}],
    "pair": ("x", 2),
}


def test_classify():
    assert classify("x") is NodeKind.TEXT
    assert classify({}) is NodeKind.MAPPING
    assert classify([]) is NodeKind.SEQUENCE
    assert classify(()) is NodeKind.SEQUENCE
    assert classify(b"raw") is NodeKind.SCALAR
    assert classify(None) is NodeKind.SCALAR


def test_options_without_templates_are_unchanged(make_agent):
    agent = make_agent(PLAIN)
    assert agent.interpolated() == PLAIN


def test_interpolation_renders_every_string_leaf(make_agent):
    agent = make_agent({
        "message": "Hello {{ name }}",
        "nested": {"list": ["{{ name | upper }}", 7, "{{ count + 1 }}"]},
    })

    result = agent.interpolated({"name": "ada", "count": 1})

    assert result == {
        "message": "Hello ada",
        "nested": {"list": ["ADA", 7, "2"]},
    }


def test_interpolation_does_not_mutate_options(make_agent):
    options = {"a": ["{{ x }}"], "b": "{{ x }}"}
    agent = make_agent(options)

    result = agent.interpolated({"x": "1"})

    assert options == {"a": ["{{ x }}"], "b": "{{ x }}"}
    assert result is not options
    assert result["a"] is not options["a"]


def test_key_order_is_preserved(make_agent):
    agent = make_agent({"z": "1", "a": "2", "m": "3"})
    assert list(agent.interpolated()) == ["z", "a", "m"]


def test_tuples_stay_tuples(make_agent):
    agent = make_agent({"pair": ("{{ 1 }}", "b")})
    assert agent.interpolated()["pair"] == ("1", "b")


Endpoint = namedtuple("Endpoint", ["host", "path"])


def test_namedtuples_keep_their_type(make_agent):
    agent = make_agent({"endpoint": Endpoint("{{ 1 }}.example", "/feed")})

    endpoint = agent.interpolated()["endpoint"]
    assert type(endpoint) is Endpoint
    assert endpoint.host == "1.example"
    assert endpoint.path == "/feed"


def test_repeated_interpolation_hits_cache(make_agent):
    agent = make_agent({"a": "{{ 'x' | upper }}", "b": ["{{ 2 * 2 }}"]})

    with mock.patch.object(
        Agent, "interpolate_string", autospec=True, side_effect=Agent.interpolate_string
    ) as spy:
        first = agent.interpolated()
        assert spy.call_count == 2

        second = agent.interpolated()
        assert spy.call_count == 2

    assert first == second == {"a": "X", "b": ["4"]}
    assert agent.interpolation_cache.hits == 1
    assert agent.interpolation_cache.misses == 1


def test_cache_is_keyed_by_subject(make_agent):
    agent = make_agent({"greeting": "hi {{ name }}"})

    assert agent.interpolated({"name": "a"}) == {"greeting": "hi a"}
    assert agent.interpolated({"name": "b"}) == {"greeting": "hi b"}
    assert agent.interpolated({"name": "a"}) == {"greeting": "hi a"}
    assert len(agent.interpolation_cache) == 2


def test_cache_sees_option_changes(make_agent):
    agent = make_agent({"v": "one"})
    assert agent.interpolated() == {"v": "one"}

    agent.options = {"v": "two"}
    assert agent.interpolated() == {"v": "two"}


def test_cache_is_per_agent(make_agent):
    first = make_agent({"v": "{{ 1 }}"})
    second = make_agent({"v": "{{ 1 }}"})

    first.interpolated()
    assert len(second.interpolation_cache) == 0


def test_interpolate_arbitrary_configuration(make_agent):
    agent = make_agent()
    assert agent.interpolate(["{{ a }}", {"b": "{{ a }}!"}], {"a": "x"}) == ["x", {"b": "x!"}]


def test_interpolate_string_skips_cache(make_agent):
    agent = make_agent()
    assert agent.interpolate_string("{{ a }}-{{ b }}", {"a": 1, "b": 2}) == "1-2"
    assert len(agent.interpolation_cache) == 0


def test_interpolate_with_spans_several_calls(make_agent):
    agent = make_agent({"title": "{{ title }}"})

    with agent.interpolate_with({"title": "event"}):
        assert agent.interpolated() == {"title": "event"}
        assert agent.interpolate_string("[{{ title }}]") == "[event]"
        assert agent.interpolation_context.depth == 1

    assert agent.interpolation_context.depth == 0


def test_local_variables(make_agent):
    agent = make_agent({"page": "{{ _page_ }}"})

    with agent.interpolation_context.stack():
        agent.interpolation_context["_page_"] = 2
        assert agent.interpolated() == {"page": "2"}


def test_stack_restored_after_failure(make_agent):
    agent = make_agent({"bad": "{{ title | regex_replace('(', '') }}"})

    with pytest.raises(ExtensionError):
        agent.interpolated({"title": "x"})

    assert agent.interpolation_context.depth == 0
    assert agent.interpolate_string("{{ 'ok' }}") == "ok"
    with pytest.raises(UndefinedVariableError):
        agent.interpolate_string("{{ title }}")


def test_failure_aborts_whole_tree(make_agent):
    agent = make_agent({"good": "fine", "bad": "{{ broken"})

    with pytest.raises(TemplatingSyntaxError):
        agent.interpolated()
    assert len(agent.interpolation_cache) == 0


def test_undefined_variables_render_empty_when_not_strict(make_agent):
    agent = make_agent(
        {"title": "[{{ title }}]", "deep": "[{{ event.payload.id }}]"},
        config=InterpolationConfig(strict_undefined=False),
    )
    assert agent.interpolated() == {"title": "[]", "deep": "[]"}


def test_trailing_newline_is_kept(make_agent):
    agent = make_agent({"body": "line\n"})
    assert agent.interpolated() == {"body": "line\n"}


def test_context_is_created_once(make_agent):
    agent = make_agent()
    assert agent.interpolation_context is agent.interpolation_context
    assert agent.interpolation_context.agent is agent

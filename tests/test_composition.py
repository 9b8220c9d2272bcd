# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for middleware ordering, subgroup isolation and idempotent compose."""

import pytest

from route_groups import Group, define


def make_tracer(name, trace):
    def middleware(next_handler):
        def handler(request):
            trace.append(f"{name}:in")
            result = next_handler(request)
            trace.append(f"{name}:out")
            return result

        return handler

    middleware.__name__ = name
    return middleware


def make_counter(name, counts):
    """Middleware counting how many times it is applied."""

    def middleware(next_handler):
        counts[name] = counts.get(name, 0) + 1
        return next_handler

    middleware.__name__ = name
    return middleware


def endpoint(trace, label="handler"):
    def handler(request):
        trace.append(label)
        return label

    handler.__name__ = label
    return handler


def test_single_unit_without_middleware_is_unchanged():
    trace = []
    unit = define("/hello", endpoint(trace))
    group = Group().register(unit)
    (composed,) = group.compose()
    assert composed is unit
    assert composed.handler is unit.handler


def test_two_middleware_compose_as_nested_calls():
    def m1(next_handler):
        return lambda request: ("m1", next_handler(request))

    def m2(next_handler):
        return lambda request: ("m2", next_handler(request))

    def base(request):
        return "base"

    group = Group().attach_middleware(m1, m2).register("/x", base)
    (unit,) = group.compose()
    assert unit.handler("req") == m1(m2(base))("req") == ("m1", ("m2", "base"))
    assert unit.layers == ("m1", "m2")


@pytest.mark.parametrize("split", [0, 1, 2, 3])
def test_order_follows_registration_order(split):
    trace = []
    names = ["a", "b", "c"]
    group = Group()
    # attach middleware in two batches around the route registration
    if names[:split]:
        group.attach_middleware(*[make_tracer(n, trace) for n in names[:split]])
    group.register("/x", endpoint(trace))
    if names[split:]:
        group.attach_middleware(*[make_tracer(n, trace) for n in names[split:]])

    (unit,) = group.compose()
    assert unit.handler("req") == "handler"
    assert trace == ["a:in", "b:in", "c:in", "handler", "c:out", "b:out", "a:out"]


def test_middleware_attached_after_routes_still_applies():
    trace = []
    group = Group().register("/x", endpoint(trace)).attach_middleware(make_tracer("late", trace))
    group.compose()[0].handler(None)
    assert trace == ["late:in", "handler", "late:out"]


def test_subgroup_middleware_never_reaches_siblings_or_parent():
    trace = []
    left = Group("left").attach_middleware(make_tracer("left", trace))
    left.register("/left", endpoint(trace, "left_handler"))
    right = Group("right").attach_middleware(make_tracer("right", trace))
    right.register("/right", endpoint(trace, "right_handler"))

    parent = Group("parent").register(left, "/own", endpoint(trace, "own"), right)
    table = parent.compose()

    assert table.paths() == ["/left", "/own", "/right"]

    table.get("/own").handler(None)
    assert trace == ["own"]

    trace.clear()
    table.get("/left").handler(None)
    assert trace == ["left:in", "left_handler", "left:out"]

    trace.clear()
    table.get("/right").handler(None)
    assert trace == ["right:in", "right_handler", "right:out"]


def test_parent_middleware_wraps_subgroup_units_outside():
    trace = []
    inner = Group("inner").attach_middleware(make_tracer("inner", trace))
    inner.register("/deep", endpoint(trace, "deep"))
    middle = Group("middle").attach_middleware(make_tracer("middle", trace))
    middle.register(inner, "/mid", endpoint(trace, "mid"))
    root = Group("root").attach_middleware(make_tracer("root", trace))
    root.register(middle, "/top", endpoint(trace, "top"))

    table = root.compose()

    table.get("/deep").handler(None)
    assert trace == [
        "root:in",
        "middle:in",
        "inner:in",
        "deep",
        "inner:out",
        "middle:out",
        "root:out",
    ]
    assert table.get("/deep").layers == ("root", "middle", "inner")

    trace.clear()
    table.get("/mid").handler(None)
    assert trace == ["root:in", "middle:in", "mid", "middle:out", "root:out"]

    trace.clear()
    table.get("/top").handler(None)
    assert trace == ["root:in", "top", "root:out"]


def test_compose_is_idempotent():
    counts = {}
    group = Group().attach_middleware(make_counter("once", counts))
    group.register("/a", endpoint([], "a"), "/b", endpoint([], "b"))

    first = group.compose()
    second = group.compose()

    assert first is second
    assert counts == {"once": 2}


def test_compile_after_compose_does_not_rewrap():
    trace = []
    group = Group().attach_middleware(make_tracer("mw", trace))
    group.register("/x", endpoint(trace))
    group.compose()
    mux = group.compile()
    mux.dispatch("/x")
    assert trace == ["mw:in", "handler", "mw:out"]


def test_subgroup_shared_by_two_parents_is_wrapped_once():
    counts = {}
    trace = []
    shared = Group("shared").attach_middleware(make_counter("shared", counts))
    shared.register("/shared", endpoint(trace, "shared_handler"))

    first = Group("first").attach_middleware(make_tracer("first", trace)).register(shared)
    second = Group("second").register(shared)

    first.compose()[0].handler(None)
    second.compose()[0].handler(None)

    assert counts == {"shared": 1}
    assert trace == ["first:in", "shared_handler", "first:out", "shared_handler"]


def test_registering_subgroup_composes_it():
    sub = Group("sub").register("/s", endpoint([]))
    Group("parent").register(sub)
    assert sub.composed


def test_subgroup_units_are_copied_not_shared():
    sub = Group("sub").register("/s", endpoint([]))
    parent = Group("parent").register(sub)
    parent.register("/p", endpoint([]))
    assert [unit.path for unit in sub.units] == ["/s"]
    assert [unit.path for unit in parent.units] == ["/s", "/p"]


def test_composed_units_do_not_share_metadata():
    unit = define("/a", endpoint([]), meta_owner="core")
    sub = Group("sub").attach_middleware(make_counter("sub", {})).register(unit)
    parent = Group("parent").attach_middleware(make_counter("parent", {})).register(sub)
    (composed,) = parent.compose()

    with pytest.raises(TypeError):
        composed.metadata["leak"] = True
    assert composed.metadata is not unit.metadata
    assert dict(composed.metadata) == dict(unit.metadata) == {"owner": "core"}

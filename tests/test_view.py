from typing import Any, cast, override

import pytest
from trellis.component import Component
from trellis.errors import EvaluationError, ExpressionSyntaxError, TemplateError
from trellis.testing import HeadlessComponent, HeadlessRenderer
from trellis.view import StaleItemsWarning, View


def build(
	renderer: HeadlessRenderer, template: dict[str, Any], *scopes: Any, tag: str = "div"
) -> HeadlessComponent:
	root = View(tag, template).build_component(list(scopes), renderer.create_component)
	root.update()
	return cast(HeadlessComponent, root)


def texts(components: list[HeadlessComponent]) -> list[Any]:
	return [c.attributes.get("text") for c in components]


# =============================================================================
# Template compilation
# =============================================================================


class TestTemplate:
	def test_directives_are_grouped(self):
		view = View(
			"div#main",
			{
				"once:title": "t",
				"bind:text": "{{ a }}",
				"on:click": "{{ f(event) }}",
				"if": "{{ show }}",
				"span": {},
				"p": None,
			},
		)
		assert set(view.once) == {"title"}
		assert set(view.bind) == {"text"}
		assert set(view.on) == {"click"}
		assert view.for_each is None
		assert [child.tag for child in view.children] == ["span", "p"]
		assert view.descriptor.id == "main"

	def test_for_each_directive(self):
		view = View("li", {"forEach:item": "{{ items }}"})
		assert view.for_each is not None
		assert view.for_each.name == "item"

	def test_condition_defaults_to_true(self):
		assert View("div").condition([]) is True

	def test_child_must_be_a_mapping(self):
		with pytest.raises(TemplateError, match="must map to a template"):
			View("div", {"span": 5})

	def test_keys_must_be_strings(self):
		with pytest.raises(TemplateError):
			View("div", cast(dict[str, Any], {1: "x"}))

	@pytest.mark.parametrize("key", ["bind:", "once: ", "on:", "forEach:"])
	def test_directive_needs_a_name(self, key: str):
		with pytest.raises(TemplateError, match="missing a name"):
			View("div", {key: "{{ a }}"})

	def test_single_for_each(self):
		with pytest.raises(TemplateError, match="more than one forEach"):
			View("li", {"forEach:a": "{{ xs }}", "forEach:b": "{{ ys }}"})

	def test_bad_child_descriptor(self):
		with pytest.raises(TemplateError) as info:
			View("div", {".card": {}})
		assert any("'.card'" in note for note in info.value.__notes__)

	def test_nested_syntax_error_names_the_path(self):
		with pytest.raises(ExpressionSyntaxError) as info:
			View("div", {"ul": {"li": {"bind:text": "{{ a b }}"}}})
		notes = info.value.__notes__
		assert any("'li'" in note and "bind:text" in note for note in notes)
		assert any("'div'" in note and "'ul'" in note for note in notes)


# =============================================================================
# Root component
# =============================================================================


class TestRoot:
	def test_root_receives_once_attributes(self, renderer: HeadlessRenderer):
		root = build(renderer, {"once:title": "Hello {{ name }}"}, {"name": "Ada"})
		assert root.attributes == {"title": "Hello Ada"}

	def test_root_must_not_iterate(self, renderer: HeadlessRenderer):
		view = View("li", {"forEach:item": "{{ items }}"})
		with pytest.raises(TemplateError, match="must not iterate"):
			view.build_component([{"items": [1]}], renderer.create_component)

	def test_root_condition_must_hold(self, renderer: HeadlessRenderer):
		view = View("div", {"if": "{{ show }}"})
		with pytest.raises(TemplateError, match="exactly one component"):
			view.build_component([{"show": False}], renderer.create_component)
		assert renderer.created == []

	def test_component_is_last_in_its_context(self, renderer: HeadlessRenderer):
		scope = {"a": 1}
		root = build(renderer, {}, scope)
		assert root.context == [scope, root]

	def test_component_attributes_are_visible_after_scopes(
		self, renderer: HeadlessRenderer
	):
		root = build(renderer, {"span": {"bind:text": "{{ tag }}"}}, {"other": 1})
		assert texts(root.find_all("span")) == ["span"]

	def test_scope_shadows_component_attributes(self, renderer: HeadlessRenderer):
		root = build(renderer, {"span": {"bind:text": "{{ tag }}"}}, {"tag": "mine"})
		assert texts(root.find_all("span")) == ["mine"]


# =============================================================================
# Bindings, once and events
# =============================================================================


class TestDirectives:
	def test_bind_is_reapplied_on_update(self, renderer: HeadlessRenderer):
		scope = {"name": "a"}
		root = build(renderer, {"span": {"bind:text": "{{ name }}"}}, scope)
		(span,) = root.find_all("span")
		assert span.attributes["text"] == "a"

		scope["name"] = "b"
		root.update()

		assert root.find_all("span") == [span]
		assert span.attributes["text"] == "b"

	def test_bind_keeps_raw_values(self, renderer: HeadlessRenderer):
		items = [1, 2]
		root = build(renderer, {"bind:data": "{{ items }}"}, {"items": items})
		assert root.attributes["data"] is items

	def test_once_is_applied_at_creation_only(self, renderer: HeadlessRenderer):
		scope = {"name": "a"}
		root = build(renderer, {"span": {"once:title": "{{ name }}"}}, scope)
		(span,) = root.find_all("span")

		scope["name"] = "b"
		root.update()

		assert span.attributes["title"] == "a"

	def test_event_handler_sees_the_event(self, renderer: HeadlessRenderer):
		calls: list[Any] = []

		def clicked(event: Any) -> str:
			calls.append(event)
			return "handled"

		root = build(
			renderer,
			{"button": {"on:click": "{{ clicked(event) }}"}},
			{"clicked": clicked},
		)
		(button,) = root.find_all("button")

		assert button.dispatch("click", {"x": 3}) == ["handled"]
		assert calls == [{"x": 3}]

	def test_event_scope_is_innermost(self, renderer: HeadlessRenderer):
		root = build(
			renderer,
			{"button": {"on:click": "{{ event.x }}"}},
			{"event": {"x": "outer"}},
		)
		(button,) = root.find_all("button")
		assert button.dispatch("click", {"x": "inner"}) == ["inner"]

	def test_event_handler_sees_item_scope(self, renderer: HeadlessRenderer):
		picked: list[Any] = []
		root = build(
			renderer,
			{
				"li": {
					"forEach:item": "{{ items }}",
					"on:click": "{{ pick(item) }}",
				}
			},
			{"items": ["a", "b"], "pick": picked.append},
		)
		root.find_all("li")[1].dispatch("click")
		assert picked == ["b"]


# =============================================================================
# Conditions
# =============================================================================


class TestConditions:
	def test_condition_flip_rebuilds(self, renderer: HeadlessRenderer):
		scope = {"visible": True}
		root = build(renderer, {"p": {"if": "{{ visible }}"}}, scope)
		(first,) = root.find_all("p")

		scope["visible"] = False
		root.update()
		assert root.find_all("p") == []

		scope["visible"] = True
		root.update()
		(second,) = root.find_all("p")
		assert second is not first

	def test_unchanged_condition_keeps_instance(self, renderer: HeadlessRenderer):
		scope = {"visible": True, "label": "before"}
		root = build(
			renderer, {"p": {"if": "{{ visible }}", "bind:text": "{{ label }}"}}, scope
		)
		(first,) = root.find_all("p")

		scope["label"] = "after"
		root.update()

		assert root.find_all("p") == [first]
		assert first.attributes["text"] == "after"

	def test_siblings_keep_instances_and_order(self, renderer: HeadlessRenderer):
		scope = {"show": False}
		root = build(
			renderer,
			{"h1": {}, "p": {"if": "{{ show }}"}, "footer": {}},
			scope,
		)
		h1, footer = root.children

		scope["show"] = True
		root.update()

		assert [c.tag for c in cast(list[HeadlessComponent], root.children)] == [
			"h1",
			"p",
			"footer",
		]
		assert root.children[0] is h1
		assert root.children[2] is footer


# =============================================================================
# forEach
# =============================================================================


class TestForEach:
	template: dict[str, Any] = {
		"li": {"forEach:item": "{{ items }}", "bind:text": "{{ item }}"}
	}

	def test_one_component_per_item(self, renderer: HeadlessRenderer):
		root = build(renderer, self.template, {"items": ["a", "b", "c"]})
		assert texts(root.find_all("li")) == ["a", "b", "c"]

	def test_same_list_keeps_instances(self, renderer: HeadlessRenderer):
		root = build(renderer, self.template, {"items": ["a", "b"]})
		before = root.find_all("li")
		root.update()
		assert root.find_all("li") == before

	def test_new_list_rebuilds(self, renderer: HeadlessRenderer):
		scope = {"items": ["a", "b"]}
		root = build(renderer, self.template, scope)
		before = root.find_all("li")

		scope["items"] = ["a", "b"]
		root.update()

		after = root.find_all("li")
		assert texts(after) == ["a", "b"]
		assert all(new is not old for new, old in zip(after, before))

	def test_length_change_rebuilds(self, renderer: HeadlessRenderer):
		items = ["a", "b"]
		root = build(renderer, self.template, {"items": items})
		items.append("c")
		root.update()
		assert texts(root.find_all("li")) == ["a", "b", "c"]

	def test_in_place_replacement_warns(self, renderer: HeadlessRenderer):
		items = ["a", "b"]
		root = build(renderer, self.template, {"items": items})
		items[0] = "z"
		with pytest.warns(StaleItemsWarning):
			root.update()
		assert texts(root.find_all("li")) == ["a", "b"]

	def test_item_condition_reevaluated_on_same_list(self, renderer: HeadlessRenderer):
		rows = [{"done": False, "t": "a"}, {"done": True, "t": "b"}]
		root = build(
			renderer,
			{
				"li": {
					"forEach:row": "{{ rows }}",
					"if": "{{ row.done }}",
					"bind:text": "{{ row.t }}",
				}
			},
			{"rows": rows},
		)
		assert texts(root.find_all("li")) == ["b"]

		rows[0]["done"] = True
		root.update()

		assert texts(root.find_all("li")) == ["a", "b"]

	def test_none_list_is_empty(self, renderer: HeadlessRenderer):
		root = build(renderer, self.template, {"items": None})
		assert root.find_all("li") == []

	def test_range_items(self, renderer: HeadlessRenderer):
		root = build(renderer, self.template, {"items": range(3)})
		assert texts(root.find_all("li")) == [0, 1, 2]

	def test_non_iterable_list(self, renderer: HeadlessRenderer):
		view = View("ul", self.template)
		root = view.build_component([{"items": 5}], renderer.create_component)
		with pytest.raises(EvaluationError, match="expected an iterable"):
			root.update()

	def test_item_shadows_outer_scope(self, renderer: HeadlessRenderer):
		root = build(renderer, self.template, {"items": ["inner"], "item": "outer"})
		assert texts(root.find_all("li")) == ["inner"]

	def test_nested_lists(self, renderer: HeadlessRenderer):
		rows = [{"cells": [1, 2]}, {"cells": [3]}]
		root = build(
			renderer,
			{
				"tr": {
					"forEach:row": "{{ rows }}",
					"td": {"forEach:cell": "{{ row.cells }}", "bind:text": "{{ cell }}"},
				}
			},
			{"rows": rows},
			tag="table",
		)
		trs = root.find_all("tr")
		assert [texts(tr.find_all("td")) for tr in trs] == [[1, 2], [3]]

		rows[1]["cells"] = [4, 5, 6]
		root.update()

		assert root.find_all("tr") == trs
		assert [texts(tr.find_all("td")) for tr in trs] == [[1, 2], [4, 5, 6]]


# =============================================================================
# Renderer capabilities
# =============================================================================


class Leaf(Component):
	"""Component that can only hold attributes."""

	def __init__(self) -> None:
		super().__init__()
		self.attributes: dict[str, Any] = {}

	@override
	def set_attribute(self, name: str, value: Any) -> None:
		self.attributes[name] = value


def test_leaf_components_need_no_child_support(renderer: HeadlessRenderer):
	leaves: list[Leaf] = []

	def create(tag: str) -> Component:
		if tag == "span":
			leaf = Leaf()
			leaves.append(leaf)
			return leaf
		return renderer.create_component(tag)

	scope = {"v": 1}
	root = View("div", {"span": {"bind:value": "{{ v }}"}}).build_component(
		[scope], create
	)
	root.update()
	scope["v"] = 2
	root.update()

	(leaf,) = leaves
	assert leaf.attributes == {"value": 2}


def test_missing_capability_surfaces():
	root = View("div", {"span": {}}).build_component([{}], lambda tag: Leaf())
	with pytest.raises(NotImplementedError, match="Leaf does not implement clear_child"):
		root.update()

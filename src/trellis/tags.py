from __future__ import annotations

import re
from dataclasses import dataclass

from trellis.errors import TemplateError

# tag#id.class-a class-b$name, every part optional
_TAG = re.compile(
	r"^(?P<tag>[A-Za-z][\w-]*)?"
	r"(?:#(?P<id>[\w-]+))?"
	r"(?:\.(?P<classes>[^#$]+))?"
	r"(?:\$(?P<name>[\w-]+))?$"
)


@dataclass(frozen=True, slots=True)
class TagDescriptor:
	tag: str | None
	id: str | None
	classes: tuple[str, ...]
	name: str | None

	def __str__(self) -> str:
		out = self.tag or ""
		if self.id:
			out += f"#{self.id}"
		if self.classes:
			out += "." + " ".join(self.classes)
		if self.name:
			out += f"${self.name}"
		return out


def parse_tag(text: str) -> TagDescriptor:
	"""Parse a compact tag descriptor such as ``"div#main.card wide$form"``.

	Classes are separated by spaces after the single ``.``. A descriptor
	without a tag refers to an existing element by id, so at least one of tag
	or id is required.
	"""
	found = _TAG.match(text.strip())
	if found is None:
		raise TemplateError(f"Malformed tag descriptor {text!r}")
	tag, id_, classes, name = found.group("tag", "id", "classes", "name")
	if not tag and not id_:
		raise TemplateError(f"Tag descriptor {text!r} needs a tag name or an id")
	return TagDescriptor(
		tag=tag,
		id=id_,
		classes=tuple(classes.split()) if classes else (),
		name=name,
	)


__all__ = ["TagDescriptor", "parse_tag"]

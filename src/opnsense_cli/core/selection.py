"""Selection fields: enumerated values the API encodes three different ways.

Depending on endpoint and firmware, a field such as ``action`` arrives as

* a plain string (``"pass"``),
* a list whose first element is authoritative (``["pass"]``),
* an option map, one entry flagged selected::

    {"pass": {"value": "Pass", "selected": 1},
     "block": {"value": "Block", "selected": 0}}

Raw values are parsed into the explicit variants below at the boundary and
resolved to a concrete ``(key, label)`` from there.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, NamedTuple, Union

from pydantic import BaseModel, Field


class Resolved(NamedTuple):
    key: str
    label: str


EMPTY = Resolved("", "")


class SelectionOption(BaseModel):
    """One candidate of an option map."""

    label: str | None = None
    selected: bool = False


class ScalarSelection(BaseModel):
    kind: Literal["scalar"] = "scalar"
    value: str

    def resolve(self) -> Resolved:
        return Resolved(self.value, self.value)


class ListSelection(BaseModel):
    kind: Literal["list"] = "list"
    items: list[str] = Field(default_factory=list)

    def resolve(self) -> Resolved:
        if not self.items:
            return EMPTY
        return Resolved(self.items[0], self.items[0])


class OptionMapSelection(BaseModel):
    kind: Literal["options"] = "options"
    options: dict[str, SelectionOption] = Field(default_factory=dict)

    def selected(self) -> tuple[str, SelectionOption] | None:
        # First flagged entry in mapping order wins
        for key, option in self.options.items():
            if option.selected:
                return key, option
        return None

    def resolve(self) -> Resolved:
        match = self.selected()
        if match is None:
            return EMPTY
        key, option = match
        return Resolved(key, option.label or "")

    def labels(self) -> dict[str, str]:
        return {
            key: option.label
            for key, option in self.options.items()
            if option.label is not None
        }


Selection = Annotated[
    Union[ScalarSelection, ListSelection, OptionMapSelection],
    Field(discriminator="kind"),
]


def _parse_option(raw: Any) -> SelectionOption:
    if not isinstance(raw, dict):
        return SelectionOption()
    label = raw.get("value")
    return SelectionOption(
        label=None if label is None else str(label),
        selected=raw.get("selected") == 1,
    )


def parse_selection(raw: Any) -> Selection | None:
    """Parse a raw field into its selection variant, or None if unrecognized."""
    if isinstance(raw, str):
        return ScalarSelection(value=raw)
    if isinstance(raw, list):
        return ListSelection(items=[str(item) for item in raw])
    if isinstance(raw, dict):
        return OptionMapSelection(
            options={str(key): _parse_option(value) for key, value in raw.items()}
        )
    return None


def resolve_selection(raw: Any, want_label: bool = False) -> str:
    """Resolve a raw selection field to its key, or its display label.

    Returns an empty string when nothing is selected or the shape is
    unrecognized; absence of a selection is an ordinary state.
    """
    selection = parse_selection(raw)
    if selection is None:
        return ""
    if isinstance(selection, OptionMapSelection):
        match = selection.selected()
        if match is None:
            return ""
        key, option = match
        if want_label and option.label is not None:
            return option.label
        return key
    return selection.resolve().key


def selection_options(raw: Any) -> dict[str, str]:
    """All ``key -> label`` pairs offered by an option map."""
    selection = parse_selection(raw)
    if isinstance(selection, OptionMapSelection):
        return selection.labels()
    return {}

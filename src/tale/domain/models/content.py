from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from tale.domain.errors import SaveError
from tale.domain.models.instruction import Instruction


COLOURS = {
    "positive": "#10b981",
    "negative": "#ef4444",
    "discovery": "#3b82f6",
    "quest": "#3b82f6",
    "effect": "#a855f7",
    "item": "#ffeb3b",
    "player": "#e0b0ff",
    "npc": "#888888",
    "speech": "#a8d4f0",
    "faction": "#f59e0b",
}
ERROR_COLOUR = "#ff4444"


@dataclass(frozen=True)
class InlineContent:
    text: str
    color: Optional[str] = None
    hover_text: Optional[str] = None

    def to_dict(self) -> dict:
        row: dict[str, Any] = {"type": "text", "text": self.text}
        if self.color is not None:
            row["color"] = self.color
        if self.hover_text is not None:
            row["hoverText"] = self.hover_text
        return row


@dataclass(frozen=True)
class Paragraph:
    parts: tuple[InlineContent, ...] = ()

    @property
    def plain_text(self) -> str:
        return "".join(part.text for part in self.parts)

    def to_dict(self) -> dict:
        return {"type": "paragraph", "content": [part.to_dict() for part in self.parts]}


@dataclass(frozen=True)
class Speech:
    text: str
    color: Optional[str] = None

    def to_dict(self) -> dict:
        row: dict[str, Any] = {"type": "speech", "text": self.text}
        if self.color is not None:
            row["color"] = self.color
        return row


@dataclass(frozen=True)
class SceneOption:
    action: Instruction
    label: Optional[str] = None
    disabled: bool = False

    def to_dict(self) -> dict:
        row: dict[str, Any] = {"type": "button", "action": self.action.to_pair()}
        if self.label is not None:
            row["label"] = self.label
        if self.disabled:
            row["disabled"] = True
        return row


Fragment = Union[str, InlineContent]
Content = Union[InlineContent, Paragraph, Speech]


def colour(text: str, color: str) -> InlineContent:
    return InlineContent(text=text, color=color)


def highlight(text: str, color: str, hover_text: Optional[str] = None) -> InlineContent:
    return InlineContent(text=text, color=color, hover_text=hover_text)


def speech(text: str, color: Optional[str] = None) -> Speech:
    return Speech(text=text, color=color)


def p(*parts: Fragment) -> Paragraph:
    if not parts:
        raise ValueError("p() requires at least one content argument")
    return Paragraph(tuple(InlineContent(text=part) if isinstance(part, str) else part for part in parts))


def is_content(value: object) -> bool:
    return isinstance(value, (InlineContent, Paragraph, Speech))


def fragment_text(fragment: Fragment) -> str:
    return fragment if isinstance(fragment, str) else fragment.text


def _inline_from_dict(row: Mapping[str, Any]) -> InlineContent:
    return InlineContent(
        text=str(row.get("text", "")),
        color=row.get("color"),
        hover_text=row.get("hoverText"),
    )


def content_from_dict(row: Mapping[str, Any]) -> Content:
    kind = row.get("type") if isinstance(row, Mapping) else None
    if kind == "text":
        return _inline_from_dict(row)
    if kind == "paragraph":
        return Paragraph(tuple(_inline_from_dict(part) for part in row.get("content") or []))
    if kind == "speech":
        return Speech(text=str(row.get("text", "")), color=row.get("color"))
    raise SaveError(f"Unknown scene content item: {row!r}")


def option_from_dict(row: Mapping[str, Any]) -> SceneOption:
    if not isinstance(row, Mapping) or "action" not in row:
        raise SaveError(f"Unknown scene option item: {row!r}")
    return SceneOption(
        action=Instruction.coerce(row["action"]),
        label=row.get("label"),
        disabled=bool(row.get("disabled", False)),
    )

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tale.domain.models.content import InlineContent, Paragraph, SceneOption, Speech


_BORDER_FRAME = "yellow"
_BORDER_STATUS = "green"
_BORDER_OPTIONS = "cyan"
_STATUS_STATS = ("Energy", "Mood", "Hunger", "Stress")


def _ornate_title(title: str) -> str:
    core = str(title or "").strip() or "Panel"
    return f"[bold yellow]{core}[/bold yellow]"


def _inline_text(part: InlineContent) -> Text:
    return Text(part.text, style=part.color or "")


def content_renderable(item) -> Text:
    if isinstance(item, Paragraph):
        line = Text()
        for part in item.parts:
            line.append_text(_inline_text(part))
        return line
    if isinstance(item, Speech):
        return Text(f"“{item.text}”", style=f"italic {item.color or ''}".strip())
    if isinstance(item, InlineContent):
        return _inline_text(item)
    return Text(str(item))


def option_label(option: SceneOption) -> str:
    return option.label or option.action.name


def render_status(console: Console, game) -> None:
    header = Table.grid(padding=(0, 1))
    header.add_column(style="bold yellow", justify="right")
    header.add_column(style="white")
    location = game.location_definition
    header.add_row("Location", location.name)
    header.add_row("Time", game.date.strftime("%A %d %B %Y, %H:%M"))
    header.add_row("Player", game.player.name)
    header.add_row("Stats", "  ".join(f"{name} {int(game.player.stat(name))}" for name in _STATUS_STATS))
    if game.npcs_present:
        present = []
        for npc_id in game.npcs_present:
            definition = game.npc_definition(npc_id)
            npc = game.get_npc(npc_id)
            present.append((definition.name if npc.name_known else definition.uname) or npc_id)
        header.add_row("Here", ", ".join(present))
    console.print(Panel.fit(header, title=_ornate_title("Status"), border_style=_BORDER_STATUS))


def render_frame(console: Console, game) -> None:
    rows = [content_renderable(item) for item in game.scene.content]
    if not rows:
        rows = [Text(game.location_definition.description or "Nothing happens.", style="dim")]
    title = game.location_definition.name
    if game.scene.npc and not game.scene.hide_npc_image:
        definition = game.npc_definition(game.scene.npc)
        npc = game.get_npc(game.scene.npc)
        title = f"{title} · {(definition.name if npc.name_known else definition.uname) or game.scene.npc}"
    console.print(Panel(Group(*rows), title=_ornate_title(title), border_style=_BORDER_FRAME))


def render_choices(console: Console, labels, disabled=()) -> None:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column(style="bold cyan", justify="right")
    table.add_column()
    for index, label in enumerate(labels, start=1):
        style = "dim strike" if index - 1 in disabled else ""
        table.add_row(str(index), Text(str(label), style=style))
    console.print(Panel.fit(table, title=_ornate_title("Choices"), border_style=_BORDER_OPTIONS))


def render_message(console: Console, title: str, lines, border_style: str = _BORDER_FRAME) -> None:
    rows = [str(line) for line in lines if str(line).strip()]
    body = "\n".join(rows) if rows else "No updates."
    console.print(Panel.fit(body, title=_ornate_title(title), border_style=border_style))

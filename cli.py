"""
cli.py — Rich terminal inspector for the AR projection engine.

Features:
  • Feed position, heading, or raw magnetometer vectors by hand
  • Load a media JSON file and page through it like a media library
  • Tables for every projected marker, the "close by" strip and the overlay
  • View / edit any config parameter (engine rebuilt on change)
"""

import asyncio
import os

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.columns import Columns
from rich import box
from rich.markup import escape

from config import set_param
from geo import within_box
from heading import HeadingTracker
from media_source import MediaLibrary, load_assets_json
from projection import ProjectionEngine, paint_order
from session import ARSession
from state import Classification, GeoPoint

console = Console()

BANNER = """
╔══════════════════════════════════════════════════════════════╗
║            ECHOES  —  AR memory overlay inspector            ║
║        bearing · distance · heading → screen markers         ║
╚══════════════════════════════════════════════════════════════╝
"""

HELP_TEXT = """
[bold cyan]═══════════════════════════  COMMAND REFERENCE  ══════════════════════════[/bold cyan]

[bold yellow]INPUTS[/bold yellow]
  pos <lat> <lon>      Push a position update
  heading <deg>        Push a resolved heading (degrees, 0 = north)
  mag <x> <y> \\[z]      Push a raw magnetometer vector

[bold yellow]MEDIA[/bold yellow]
  load \\[path]          Load assets from JSON (default: media_file param)
  more                 Page in the next batch of media
  revisits             Memories captured near the current position

[bold yellow]OUTPUT[/bold yellow]
  markers              Every in-range marker with its classification
  near                 "Close by" strip (nearest first)
  visible              AR overlay markers (paint order)
  status               Position, heading, counts

[bold yellow]SYSTEM[/bold yellow]
  params               Show all config parameters
  set <key> <value>    Change a parameter
  help                 Show this help
  clear                Clear terminal
  exit                 Leave the inspector

[bold cyan]══════════════════════════════════════════════════════════════════════════[/bold cyan]
"""

CLASS_COLORS = {
    Classification.NEAR:        "green",
    Classification.FAR_VISIBLE: "cyan",
    Classification.FAR_HIDDEN:  "dim",
}


class InspectorCLI:

    def __init__(self, config: dict, session: ARSession, library: MediaLibrary = None):
        self.config = config
        self.session = session
        self.library = library
        self._running = False

    # =====================================================================
    # MAIN ENTRY
    # =====================================================================

    async def run(self):
        console.print(BANNER, style="bold cyan")
        console.print("[dim]Type [bold]help[/bold] for all commands.[/dim]\n")
        self._running = True

        while self._running:
            try:
                view = self.session.view
                where = (f"{view.position.latitude:.5f},{view.position.longitude:.5f}"
                         if view.position else "no fix")
                prompt_str = (
                    f"[cyan]{where}[/cyan] "
                    f"[dim]hdg={view.heading_deg:.0f}° "
                    f"markers={len(self.session.markers)}[/dim] "
                    f"[bold]>[/bold] "
                )
                cmd = await asyncio.get_running_loop().run_in_executor(
                    None,
                    lambda: console.input(prompt_str).strip()
                )

                if not cmd:
                    continue

                await self._dispatch(cmd)

            except (EOFError, KeyboardInterrupt):
                console.print("\n[dim]Goodbye.[/dim]")
                break

        self.session.close()

    # =====================================================================
    # COMMAND DISPATCHER
    # =====================================================================

    async def _dispatch(self, cmd: str):
        parts = cmd.split()
        base = parts[0].lower() if parts else ""
        args = parts[1:]

        handlers = {
            "help":      self._cmd_help,
            "pos":       self._cmd_pos,
            "heading":   self._cmd_heading,
            "mag":       self._cmd_mag,
            "load":      self._cmd_load,
            "more":      self._cmd_more,
            "revisits":  self._cmd_revisits,
            "markers":   self._cmd_markers,
            "near":      self._cmd_near,
            "visible":   self._cmd_visible,
            "status":    self._cmd_status,
            "params":    self._cmd_params,
            "set":       self._cmd_set,
            "clear":     self._cmd_clear,
            "exit":      self._cmd_exit,
        }

        if base not in handlers:
            console.print(f"[red]Unknown command: '{escape(base)}'. Type [bold]help[/bold].[/red]")
            return
        try:
            await handlers[base](args)
        except (ValueError, KeyError, OSError) as e:
            console.print(f"[red]{escape(base)}: {escape(str(e))}[/red]")

    # =====================================================================
    # INPUTS
    # =====================================================================

    async def _cmd_pos(self, args):
        if len(args) != 2:
            raise ValueError("usage: pos <lat> <lon>")
        self.session.on_position(GeoPoint(float(args[0]), float(args[1])))
        self._print_summary()

    async def _cmd_heading(self, args):
        if len(args) != 1:
            raise ValueError("usage: heading <deg>")
        self.session.on_heading(float(args[0]))
        self._print_summary()

    async def _cmd_mag(self, args):
        if len(args) not in (2, 3):
            raise ValueError("usage: mag <x> <y> [z]")
        self.session.on_heading_vector([float(a) for a in args])
        self._print_summary()

    # =====================================================================
    # MEDIA
    # =====================================================================

    async def _cmd_load(self, args):
        path = args[0] if args else self.config.get("media_file", "")
        if not path:
            raise ValueError("no path given and media_file param is empty")
        position = self.session.view.position
        if position is None:
            raise ValueError("set a position first (pos <lat> <lon>)")

        assets = load_assets_json(path)
        self.library = MediaLibrary(
            assets,
            page_size=self.config["media_page_size"],
            tolerance_deg=self.config["location_match_tol_deg"],
        )
        added = self.library.load_more(position)
        self.session.set_markers(self.library.markers)
        console.print(f"[green]✓ {len(assets)} assets read, {len(added)} markers in range[/green]")

    async def _cmd_more(self, args):
        if self.library is None:
            raise ValueError("no media loaded (use load)")
        if not self.library.has_next_page:
            console.print("[dim]No more media.[/dim]")
            return
        added = self.library.load_more(self.session.view.position)
        self.session.set_markers(self.library.markers)
        console.print(f"[green]✓ {len(added)} new markers "
                      f"({len(self.library.markers)} total)[/green]")

    async def _cmd_revisits(self, args):
        revisit = self.session.revisit
        position = self.session.view.position
        if revisit is None or position is None:
            console.print("[dim]Revisit monitor inactive or no position.[/dim]")
            return
        hits = [m for m in self.session.markers
                if m.location is not None
                and within_box(position, m.location, revisit.tolerance)]
        if not hits:
            console.print("[dim]Nothing captured here yet.[/dim]")
        for m in hits:
            console.print(f"  [magenta]{escape(m.id)}[/magenta] {m.media_type} [dim]{escape(str(m.media_ref))}[/dim]")

    # =====================================================================
    # OUTPUT
    # =====================================================================

    async def _cmd_markers(self, args):
        self._print_table("All markers", self.session.view.projection)

    async def _cmd_near(self, args):
        self._print_table("Close by", self.session.split.near)

    async def _cmd_visible(self, args):
        self._print_table("AR overlay", paint_order(self.session.split.visible))

    async def _cmd_status(self, args):
        v = self.session.view
        eng = self.session.engine
        if v.position:
            pos_text = (f"Lat:  [cyan]{v.position.latitude:.6f}[/cyan]\n"
                        f"Lon:  [cyan]{v.position.longitude:.6f}[/cyan]")
        else:
            pos_text = "[dim]No position yet[/dim]"
        pos_panel = Panel(pos_text, title="Position", border_style="blue")

        heading_panel = Panel(
            f"Heading: [cyan]{v.heading_deg:.1f}°[/cyan]\n"
            f"FOV:     {eng.fov:.0f}°  ({eng.width:.0f}×{eng.height:.0f}px)",
            title="Camera", border_style="cyan"
        )

        counts = {c: 0 for c in Classification}
        for p in v.projection:
            counts[p.classification] += 1
        count_panel = Panel(
            f"Candidates: {len(self.session.markers)}\n"
            f"In range:   {len(v.projection)}\n"
            + "\n".join(f"[{CLASS_COLORS[c]}]{c.value:<12}[/{CLASS_COLORS[c]}] {n}"
                        for c, n in counts.items())
            + f"\nRecomputes: {v.recompute_count}",
            title="Markers", border_style="green"
        )

        console.print(Columns([pos_panel, heading_panel]))
        console.print(count_panel)

    # =====================================================================
    # PARAMS
    # =====================================================================

    async def _cmd_params(self, args):
        table = Table(box=box.SIMPLE, show_header=True)
        table.add_column("Key", style="cyan", width=30)
        table.add_column("Value", style="white", width=20)
        for k, v in self.config.items():
            table.add_row(k, str(v))
        console.print(table)

    async def _cmd_set(self, args):
        if len(args) != 2:
            raise ValueError("usage: set <key> <value>")
        key, val = args
        ok, msg = set_param(self.config, key, val)
        style = "green" if ok else "red"
        console.print(f"[{style}]{escape(msg)}[/{style}]")
        if ok:
            self._rebuild()

    def _rebuild(self):
        """Apply new params. Heading offset/smoothing take effect from the next sample."""
        self.session.engine = ProjectionEngine(self.config)
        self.session.tracker = HeadingTracker(self.config)
        if self.library is not None:
            self.library.page_size = self.config["media_page_size"]
            self.library.tolerance = self.config["location_match_tol_deg"]
        self.session.recompute()

    # =====================================================================
    # MISC
    # =====================================================================

    async def _cmd_help(self, args):
        console.print(HELP_TEXT)

    async def _cmd_clear(self, args):
        os.system("clear" if os.name == "posix" else "cls")

    async def _cmd_exit(self, args):
        console.print("[dim]Goodbye.[/dim]")
        self._running = False

    # =====================================================================
    # UTILS
    # =====================================================================

    def _print_summary(self):
        split = self.session.split
        console.print(
            f"[cyan]{len(split.visible)} in view[/cyan]  "
            f"[green]{len(split.near)} close by[/green]  "
            f"[dim]{len(self.session.view.projection)} in range[/dim]"
        )

    @staticmethod
    def _print_table(title: str, projected):
        projected = list(projected)
        if not projected:
            console.print(f"[dim]{title}: nothing to show.[/dim]")
            return
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Id", style="white")
        table.add_column("Class")
        table.add_column("Dist (m)", justify="right")
        table.add_column("Bearing", justify="right")
        table.add_column("Offset", justify="right")
        table.add_column("Screen", justify="right")
        table.add_column("Scale", justify="right")
        for p in projected:
            color = CLASS_COLORS[p.classification]
            screen = ("—" if p.screen_x is None
                      else f"{p.screen_x:.0f},{p.screen_y:.0f}")
            table.add_row(
                escape(p.marker.id),
                f"[{color}]{p.classification.value}[/{color}]",
                f"{p.distance_m:.1f}",
                f"{p.bearing_deg:.1f}°",
                f"{p.angular_offset_deg:+.1f}°",
                screen,
                f"{p.scale:.2f}",
            )
        console.print(table)

import os
import sys
import time
import warnings
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")

import PIL.Image
import pygame
from matplotlib import colormaps

from mandelview import (
    InteractionController,
    PanelState,
    PointerEvent,
    RenderScheduler,
    SurfaceSize,
    ViewState,
    Viewport,
    parse_hex_color,
    present,
    quality_label,
    render_frame,
    write_snapshot,
)
from mandelview.colors import BLACK, HEATMAP
from mandelview.controller import DRAG_MAX_ITERATIONS
from mandelview.export import DEFAULT_SNAPSHOT_NAME
from mandelview.renderer import RESAMPLE_FILTERS
from mandelview.viewport import (
    DEFAULT_CENTER_X,
    DEFAULT_CENTER_Y,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_SCALE,
    DEFAULT_ZOOM,
)


def select_device() -> str:
    """First visible GPU with memory growth enabled, else the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError:
        # memory growth is fixed once the runtime is initialized
        return '/CPU:0'
    return '/GPU:0'


DEVICE = select_device()
log("TensorFlow %s, rendering on %s" % (tf.__version__, DEVICE))

from argparse import ArgumentParser

FONT_SIZE = 16
PADDING = 10
PANEL_ALPHA = 240
PANEL_BACKGROUND = (15, 15, 30)
PANEL_BORDER = (0, 191, 255)
BUTTON_TEXT = (0, 223, 255)
LABEL_TEXT = (255, 255, 255)
INSTRUCTION_TEXT = (204, 238, 255)

INSTRUCTIONS = [
    "Drag          Pan",
    "Wheel         Zoom at cursor",
    "I / +         Zoom in",
    "[ / ]         Quality down/up",
    "R / 0         Reset view",
    "S             Download PNG",
    "H             Instructions",
    "Q / Esc       Quit",
]


@dataclass(frozen=True)
class ViewerConfig:
    width: int
    height: int
    view: ViewState
    drag_iterations: int
    palette: str
    inside_color: tuple[int, int, int]
    resample: str
    snapshot_path: Path | None
    image_format: str | None


def build_parser():
    parser = ArgumentParser(description='Interactive Mandelbrot set explorer.')

    parser.add_argument('--width', type=int,
                        dest='width', help='width of the window (or snapshot) in pixels',
                        metavar='WIDTH', default=1280)

    parser.add_argument('--height', type=int,
                        dest='height', help='height of the window (or snapshot) in pixels',
                        metavar='HEIGHT', default=800)

    parser.add_argument('--x-center', type=float,
                        dest='x_center', help='x coordinate in the complex plane at the center of the view',
                        metavar='X_CENTER', default=DEFAULT_CENTER_X)

    parser.add_argument('--y-center', type=float,
                        dest='y_center', help='y coordinate in the complex plane at the center of the view',
                        metavar='Y_CENTER', default=DEFAULT_CENTER_Y)

    parser.add_argument('--zoom', type=float,
                        dest='zoom', help='pixels per unit of the complex plane',
                        metavar='ZOOM', default=DEFAULT_ZOOM)

    parser.add_argument('--scale', type=float,
                        dest='scale', help='fraction of the native resolution actually computed, in (0, 1]',
                        metavar='SCALE', default=DEFAULT_SCALE)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration budget at full quality',
                        metavar='MAX_ITERATIONS', default=DEFAULT_MAX_ITERATIONS)

    parser.add_argument('--drag-iterations', type=int,
                        dest='drag_iterations', help='iteration budget while dragging',
                        metavar='DRAG_ITERATIONS', default=DRAG_MAX_ITERATIONS)

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='"heatmap" or a matplotlib colormap name (e.g. "viridis", "inferno")',
                        metavar='COLORMAP', default=HEATMAP)

    parser.add_argument('--inside-color', type=str, default='#000000',
                        help='Hex color for points inside the Mandelbrot set.')

    parser.add_argument('--resample', choices=sorted(RESAMPLE_FILTERS), default='nearest',
                        help='Filter used to stretch the downscaled raster over the surface.')

    parser.add_argument('--snapshot', type=str, dest='snapshot',
                        help='Render a single frame to this file and exit without opening a window.')

    parser.add_argument('--format', type=str,
                        dest='format', help='image format for --snapshot. Any extension supported by Pillow.',
                        metavar='FORMAT')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def resolve_viewer_config(opt, parser: ArgumentParser) -> ViewerConfig:
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if not opt.zoom > 0:
        parser.error("--zoom must be positive.")
    if not 0 < opt.scale <= 1:
        parser.error("--scale must lie in (0, 1].")
    if opt.max_iterations <= 0:
        parser.error("--max-iterations must be positive.")
    if opt.drag_iterations <= 0:
        parser.error("--drag-iterations must be positive.")

    palette = opt.colormap
    if palette != HEATMAP and palette not in colormaps:
        parser.error(f"Unknown colormap '{palette}'.")

    try:
        inside_color = parse_hex_color(opt.inside_color)
    except ValueError:
        print(f"Invalid inside_color '{opt.inside_color}', defaulting to black.")
        inside_color = BLACK

    snapshot_path: Path | None = None
    image_format: str | None = None
    if opt.snapshot:
        snapshot_path = Path(opt.snapshot).expanduser()
        if opt.format:
            image_format = opt.format.lower().lstrip(".") or "png"
            suffix = snapshot_path.suffix
            expected_suffix = f".{image_format}"
            if suffix:
                if suffix.lower() != expected_suffix.lower():
                    parser.error(f"--snapshot extension {suffix} does not match --format {image_format}.")
            else:
                snapshot_path = snapshot_path.with_suffix(expected_suffix)
        elif not snapshot_path.suffix:
            snapshot_path = snapshot_path.with_suffix(".png")
        if snapshot_path.exists() and snapshot_path.is_dir():
            parser.error("--snapshot must point to a file, not a directory.")
        snapshot_path = snapshot_path.resolve()
    elif opt.format:
        parser.error("--format is only valid with --snapshot.")

    view = ViewState(
        center_x=opt.x_center,
        center_y=opt.y_center,
        zoom=opt.zoom,
        scale=opt.scale,
        max_iterations=opt.max_iterations,
    )

    return ViewerConfig(
        width=opt.width,
        height=opt.height,
        view=view,
        drag_iterations=opt.drag_iterations,
        palette=palette,
        inside_color=inside_color,
        resample=opt.resample,
        snapshot_path=snapshot_path,
        image_format=image_format,
    )


def render_presented(config: ViewerConfig, view: ViewState, surface: SurfaceSize) -> PIL.Image.Image:
    """Render ``view`` and stretch it over ``surface``."""

    started = time.perf_counter()
    buffer = render_frame(
        view,
        surface,
        palette=config.palette,
        inside_color=config.inside_color,
        device=DEVICE,
    )
    image = present(buffer, surface, config.resample)
    log("rendered %dx%d -> %dx%d in %.1f ms (zoom=%.6g, center=(%.6g, %.6g), iterations=%d)" % (
        buffer.width, buffer.height, surface.width, surface.height,
        (time.perf_counter() - started) * 1000.0,
        view.zoom, view.center_x, view.center_y, view.max_iterations,
    ))
    return image


def run_snapshot(config: ViewerConfig) -> Path:
    surface = SurfaceSize(config.width, config.height)
    image = render_presented(config, config.view, surface)
    return write_snapshot(image, config.snapshot_path, config.image_format)


class ExplorerWindow:
    """pygame host: turns window events into controller calls and presents frames."""

    def __init__(self, config: ViewerConfig):
        self.config = config
        self.viewport = Viewport(config.view)
        self.scheduler = RenderScheduler()
        self.controller = InteractionController(
            self.viewport,
            self.scheduler,
            full_iterations=config.view.max_iterations,
            drag_iterations=config.drag_iterations,
        )
        self.panel = PanelState(time.monotonic())
        self.buttons: list[tuple[pygame.Rect, str]] = []
        self.panel_rect: pygame.Rect | None = None
        self.pointer_over_panel = False
        self.presented: PIL.Image.Image | None = None
        self.frame_surface = None
        self.needs_redraw = True
        self.running = True
        self.rendered_frames = 0

        self.screen = None
        self.clock = None
        self.font = None

    @property
    def surface_size(self) -> SurfaceSize:
        width, height = self.screen.get_size()
        return SurfaceSize(width, height)

    def open_display(self):
        pygame.init()
        self.screen = pygame.display.set_mode((self.config.width, self.config.height), pygame.RESIZABLE)
        pygame.display.set_caption("Mandelbrot Explorer")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", FONT_SIZE)
        self.controller.resize(self.surface_size)

    def run(self):
        self.open_display()
        try:
            while self.running:
                for event in pygame.event.get():
                    self._handle_event(event)
                if self.panel.tick(time.monotonic()):
                    self.needs_redraw = True
                self._render_if_needed()
                self._draw_if_needed()
                self.clock.tick(60)
        finally:
            log("rendered %d frames, %d superseded requests dropped" % (
                self.rendered_frames, self.scheduler.superseded))
            pygame.quit()

    # Events

    def _handle_event(self, event):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.VIDEORESIZE:
            self.controller.resize(self.surface_size)
        elif event.type == pygame.WINDOWLEAVE:
            self.controller.handle(PointerEvent("leave", 0, 0))
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if not self._click_panel(event.pos):
                self.controller.handle(PointerEvent("down", *event.pos))
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.controller.handle(PointerEvent("up", *event.pos))
        elif event.type == pygame.MOUSEMOTION:
            self._track_panel_hover(event.pos)
            self.controller.handle(PointerEvent("move", *event.pos))
        elif event.type == pygame.MOUSEWHEEL:
            # pygame reports wheel-up as positive y; a positive delta zooms out
            x, y = pygame.mouse.get_pos()
            self.controller.handle(PointerEvent("wheel", x, y, delta_y=-event.y))
        elif event.type == pygame.KEYDOWN:
            self._handle_key(event)

    def _handle_key(self, event):
        if event.key in (pygame.K_ESCAPE, pygame.K_q):
            self.running = False
        elif event.key in (pygame.K_i, pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self._run_action("zoom_in")
        elif event.key in (pygame.K_r, pygame.K_0):
            self._run_action("reset")
        elif event.key == pygame.K_LEFTBRACKET:
            self._run_action("quality_down")
        elif event.key == pygame.K_RIGHTBRACKET:
            self._run_action("quality_up")
        elif event.key == pygame.K_s:
            self._run_action("export")
        elif event.key == pygame.K_h:
            self._run_action("instructions")

    def _run_action(self, action: str):
        if action == "zoom_in":
            self.controller.zoom_in()
        elif action == "reset":
            self.controller.reset()
        elif action == "quality_down":
            self.controller.step_quality(-1)
        elif action == "quality_up":
            self.controller.step_quality(1)
        elif action == "export":
            self._export()
        elif action == "instructions":
            self.panel.toggle_instructions()
        self.needs_redraw = True

    def _export(self):
        if self.presented is None:
            return
        path = write_snapshot(self.presented, DEFAULT_SNAPSHOT_NAME)
        print("saved %s" % path)

    def _click_panel(self, pos) -> bool:
        if not self.panel.visible or self.panel_rect is None or not self.panel_rect.collidepoint(pos):
            return False
        for rect, action in self.buttons:
            if rect.collidepoint(pos):
                self._run_action(action)
                break
        return True

    def _track_panel_hover(self, pos):
        if self.panel.pointer_moved(pos[0], pos[1], self.surface_size):
            self.needs_redraw = True
        over = bool(self.panel.visible and self.panel_rect is not None and self.panel_rect.collidepoint(pos))
        if self.pointer_over_panel and not over:
            self.panel.pointer_left(time.monotonic())
        self.pointer_over_panel = over

    # Rendering

    def _render_if_needed(self):
        ticket = self.scheduler.take()
        if ticket is None:
            return
        surface = self.surface_size
        image = render_presented(self.config, self.viewport.snapshot(), surface)
        self.presented = image
        self.frame_surface = pygame.image.frombuffer(image.tobytes(), image.size, "RGBA")
        self.rendered_frames += 1
        self.needs_redraw = True

    def _draw_if_needed(self):
        if not self.needs_redraw:
            return
        self.screen.fill((0, 0, 0))
        if self.frame_surface is not None:
            self.screen.blit(self.frame_surface, (0, 0))
        if self.panel.visible:
            self._draw_panel()
        else:
            self.panel_rect = None
            self.buttons = []
        pygame.display.flip()
        self.needs_redraw = False

    def _draw_panel(self):
        entries = [
            (quality_label(self.viewport.scale), None),
            ("[-] Quality", "quality_down"),
            ("[+] Quality", "quality_up"),
            ("Zoom In", "zoom_in"),
            ("Reset View", "reset"),
            ("Download PNG", "export"),
            ("Instructions", "instructions"),
        ]
        lines = [(text, action, LABEL_TEXT if action is None else BUTTON_TEXT) for text, action in entries]
        if self.panel.show_instructions:
            lines.extend((text, None, INSTRUCTION_TEXT) for text in INSTRUCTIONS)

        rendered = [(self.font.render(text, True, color), action) for text, action, color in lines]
        line_height = self.font.get_linesize()
        width = max(surf.get_width() for surf, _ in rendered) + PADDING * 2
        height = line_height * len(rendered) + PADDING * 2

        background = pygame.Surface((width, height), pygame.SRCALPHA)
        background.fill(PANEL_BACKGROUND + (PANEL_ALPHA,))
        self.screen.blit(background, (PADDING, PADDING))
        self.panel_rect = pygame.Rect(PADDING, PADDING, width, height)
        pygame.draw.rect(self.screen, PANEL_BORDER, self.panel_rect, width=1, border_radius=8)

        self.buttons = []
        y = PADDING * 2
        for surf, action in rendered:
            self.screen.blit(surf, (PADDING * 2, y))
            if action is not None:
                self.buttons.append((pygame.Rect(PADDING * 2, y, surf.get_width(), line_height), action))
            y += line_height


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    config = resolve_viewer_config(opt, parser)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    if config.snapshot_path is not None:
        path = run_snapshot(config)
        print("saved %s" % path)
        return

    ExplorerWindow(config).run()


if __name__ == '__main__':
    main()

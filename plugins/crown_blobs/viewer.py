"""
Interactive Pygame Viewer for Blob Hotspots

Hosts a Simulation in a pygame window: forwards pointer motion and
clicks to the simulation, steps it once per display frame, and draws it
through the Renderer.

Controls:
  Mouse       Hover to reveal labels, click a blob to navigate
  SPACE       Pause / Resume
  R           Reset layout
  P           Cycle pointer force policy (attraction / clustering)
  L           Cycle label style (curved / tooltip)
  J           Toggle click ripple
  S           Save screenshot
  H           Toggle HUD overlay
  Q / ESC     Quit
"""

import os
import time
import numpy as np
import pygame

from .simulator import Simulation
from .renderer import Renderer, LABEL_ORDER
from .forces import POLICY_ORDER
from .presets import get_preset
from .surfaces import DrawingSurface


class PygameSurface(DrawingSurface):
    """DrawingSurface adapter over a pygame Surface."""

    def __init__(self, surface):
        self.surface = surface
        self._fonts = {}

    def _font(self, size):
        font = self._fonts.get(size)
        if font is None:
            font = pygame.font.SysFont("menlo", size)
            self._fonts[size] = font
        return font

    def clear(self, color):
        self.surface.fill(color)

    def polygon(self, points, color):
        pts = [(float(x), float(y)) for x, y in points]
        if len(pts) >= 3:
            pygame.draw.polygon(self.surface, color, pts)

    def rect(self, x, y, width, height, color):
        overlay = pygame.Surface((int(width), int(height)), pygame.SRCALPHA)
        overlay.fill(color)
        self.surface.blit(overlay, (int(x), int(y)))

    def text(self, string, position, color, size):
        rendered = self._font(size).render(string, True, color[:3])
        if len(color) == 4 and color[3] < 255:
            rendered.set_alpha(color[3])
        rect = rendered.get_rect(center=(int(position[0]), int(position[1])))
        self.surface.blit(rendered, rect)


class Viewer:
    def __init__(self, width=1280, height=800, preset="portfolio",
                 navigator=None, seed=None, options=None):
        self.canvas_w = width
        self.canvas_h = height
        self.running = True
        self.paused = False
        self.show_hud = True
        self.fps_history = []
        self.preset_key = preset

        self.simulation = Simulation(preset, width, height,
                                     navigator=navigator, seed=seed)
        self.simulation.configure(**(options or {}))
        self.renderer = Renderer(self.simulation)

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return

        sim = self.simulation
        stats = sim.stats
        opts = sim.options
        preset = get_preset(self.preset_key)
        name = preset["name"] if preset else self.preset_key

        line = (f"{name}  |  Frame: {stats['frame']:,}  |  "
                f"Policy: {opts['force_policy']}  |  Labels: {opts['label_style']}  |  "
                f"Ripple: {'on' if opts['ripple'] else 'off'}  |  FPS: {fps:.0f}")
        if stats["hovered"]:
            line += f"  |  -> {stats['hovered']}"
        if self.paused:
            line = "[PAUSED]  " + line

        padding = 6
        bg_height = 24
        bg_surface = pygame.Surface((self.canvas_w, bg_height), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, 0))

        text_surface = self.hud_font.render(line, True, (210, 215, 225))
        screen.blit(text_surface, (padding + 4, padding))

    def _save_screenshot(self, screen):
        screenshots_dir = os.path.join(
            os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
            "screenshots"
        )
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"blobs_{self.preset_key}_{timestamp}.png")
        latest_path = os.path.join(screenshots_dir, "latest.png")
        pygame.image.save(screen, path)
        pygame.image.save(screen, latest_path)
        print(f"Screenshot saved: {path}")

    def _handle_event(self, event, screen):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            self._handle_keydown(event, screen)
        elif event.type == pygame.MOUSEMOTION:
            self.simulation.on_pointer_move(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.simulation.on_click(event.pos)
        elif event.type == pygame.VIDEORESIZE:
            self.canvas_w, self.canvas_h = event.w, event.h
            self.simulation.width, self.simulation.height = event.w, event.h

    def run(self):
        """Main viewer loop."""
        pygame.init()

        screen = pygame.display.set_mode((self.canvas_w, self.canvas_h), pygame.RESIZABLE)
        pygame.display.set_caption("Blob Hotspots")
        clock = pygame.time.Clock()

        self.hud_font = pygame.font.SysFont("menlo", 13)
        surface = PygameSurface(screen)

        while self.running:
            frame_start = time.time()

            for event in pygame.event.get():
                self._handle_event(event, screen)

            if self.paused:
                self.simulation.refresh_hover()
            else:
                self.simulation.step()

            self.renderer.draw(surface)

            # FPS
            frame_time = time.time() - frame_start
            self.fps_history.append(frame_time)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)

            self._draw_hud(screen, avg_fps)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()

    def _cycle(self, order, current):
        idx = order.index(current) if current in order else -1
        return order[(idx + 1) % len(order)]

    def _handle_keydown(self, event, screen):
        key = event.key
        sim = self.simulation

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.paused = not self.paused

        elif key == pygame.K_r:
            sim.reset()

        elif key == pygame.K_p:
            sim.set_force_policy(self._cycle(POLICY_ORDER, sim.options["force_policy"]))

        elif key == pygame.K_l:
            sim.set_label_style(self._cycle(LABEL_ORDER, sim.options["label_style"]))

        elif key == pygame.K_j:
            sim.set_ripple(not sim.options["ripple"])

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_s:
            self._save_screenshot(screen)

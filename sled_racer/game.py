"""Pygame front-end: drawing, screens, and the frame loop."""

from __future__ import annotations

import logging
import math
import random
from typing import Optional

import pygame

from .clock import WorldClock
from .config import GameConfig, RenderingConfig, TouchConfig
from .input import InputProvider, InputState, PointerInput, TextEntry, TouchControls, finger_pos, hit_button
from .leaderboard import LeaderboardEntry, LeaderboardStore, LeaderboardSubmitter, achievement_for, mask_email
from .simulation import Simulation
from .state import SimulationState, is_finite

logger = logging.getLogger(__name__)


def _lerp_color(a: tuple[int, int, int], b: tuple[int, int, int], t: float) -> tuple[int, int, int]:
    return (
        int(a[0] + (b[0] - a[0]) * t),
        int(a[1] + (b[1] - a[1]) * t),
        int(a[2] + (b[2] - a[2]) * t),
    )


class Renderer:
    """Draws the slope, sled, HUD and overlay widgets onto one surface."""

    def __init__(self, surface: pygame.Surface, config: RenderingConfig, clock: WorldClock) -> None:
        self.surface = surface
        self.cfg = config
        self.clock = clock
        self.font = pygame.font.Font(None, 22)
        self.large_font = pygame.font.Font(None, 40)
        self.background = self._build_background()

    def _build_background(self) -> pygame.Surface:
        width, height = self.surface.get_size()
        background = pygame.Surface((width, height * 2))
        for row in range(height * 2):
            t = (row % height) / max(1, height)
            pygame.draw.line(background, _lerp_color(self.cfg.sky_top, self.cfg.sky_bottom, t), (0, row), (width, row))
        for base in (height, height * 2):
            pygame.draw.polygon(
                background,
                self.cfg.mountain_color,
                [(0, base), (width // 2, base - height // 2), (width, base)],
            )
            pygame.draw.polygon(
                background,
                self.cfg.mountain_shadow,
                [(width // 4, base), (width // 2 + 50, base - height * 2 // 3), (width, base)],
            )
        for _ in range(40):
            tx = random.uniform(0, width)
            ty = random.uniform(0, height * 2 - 20)
            pygame.draw.rect(background, (139, 69, 19), pygame.Rect(int(tx) - 5, int(ty), 10, 20))
            pygame.draw.ellipse(background, (34, 139, 34), pygame.Rect(int(tx) - 10, int(ty) - 22, 20, 25))
        return background

    def draw(self, state: SimulationState) -> None:
        offset = state.offset if is_finite(state.offset) else 0.0
        self._draw_background(offset)
        self._draw_track(state, offset)
        self._draw_obstacles(state, offset)
        self._draw_player(state)
        self._draw_particles(state)
        self._draw_hud(state)

    def _draw_background(self, offset: float) -> None:
        height = self.surface.get_height()
        scroll = (offset * 0.5) % (height * 2)
        self.surface.blit(self.background, (0, -scroll))
        self.surface.blit(self.background, (0, -scroll + height * 2))

    def _draw_track(self, state: SimulationState, offset: float) -> None:
        height = self.surface.get_height()
        visible = [
            seg
            for seg in state.segments
            if is_finite(seg.x, seg.y, seg.w) and -self.cfg.visible_margin * 4 < seg.y - offset < height + self.cfg.visible_margin * 4
        ]
        if len(visible) < 2:
            return
        for seg_a, seg_b in zip(visible, visible[1:]):
            quad = [
                (seg_a.left, seg_a.y - offset),
                (seg_a.right, seg_a.y - offset),
                (seg_b.right, seg_b.y - offset),
                (seg_b.left, seg_b.y - offset),
            ]
            pygame.draw.polygon(self.surface, self.cfg.track_color, quad)
        left_edge = [(seg.left, seg.y - offset) for seg in visible]
        right_edge = [(seg.right, seg.y - offset) for seg in visible]
        pygame.draw.lines(self.surface, self.cfg.edge_color, False, left_edge, 3)
        pygame.draw.lines(self.surface, self.cfg.edge_color, False, right_edge, 3)

    def _draw_obstacles(self, state: SimulationState, offset: float) -> None:
        height = self.surface.get_height()
        for obs in state.obstacles:
            if not is_finite(obs.x, obs.y):
                continue
            screen_y = obs.y - offset
            if not -self.cfg.visible_margin < screen_y < height + self.cfg.visible_margin:
                continue
            body = pygame.Rect(0, 0, int(obs.w), int(obs.h))
            body.center = (int(obs.x), int(screen_y))
            pygame.draw.rect(self.surface, self.cfg.obstacle_color, body)
            pygame.draw.circle(self.surface, self.cfg.wheel_color, (int(obs.x - 4), int(screen_y + 5)), 2)
            pygame.draw.circle(self.surface, self.cfg.wheel_color, (int(obs.x + 4), int(screen_y + 5)), 2)

    def _draw_player(self, state: SimulationState) -> None:
        player = state.player
        left = int(player.x - player.w / 2)
        top = int(player.y - player.h / 2)
        pygame.draw.rect(self.surface, self.cfg.sled_color, pygame.Rect(left + 2, top + 4, 12, 16))
        pygame.draw.rect(self.surface, self.cfg.sled_accent, pygame.Rect(left + 4, top + 6, 8, 4))
        pygame.draw.circle(self.surface, self.cfg.wheel_color, (left + 4, top + 20), 2)
        pygame.draw.circle(self.surface, self.cfg.wheel_color, (left + 12, top + 20), 2)

    def _draw_particles(self, state: SimulationState) -> None:
        for particle in state.particles:
            pygame.draw.circle(self.surface, self.cfg.particle_color, (int(particle.x), int(particle.y)), 2)

    def _draw_hud(self, state: SimulationState) -> None:
        width, _ = self.surface.get_size()
        seconds = state.score // self.clock.cfg.ticks_per_second
        lines: list[tuple[str, tuple[int, int, int]]] = [
            (f"Time: {seconds}s", self.cfg.score_color),
            (f"Score: {state.score}", self.cfg.ui_color),
        ]

        left = self.clock.easy_seconds_left(state.tick)
        bar_color = self.cfg.easy_color
        progress = 0.0
        if left > 0:
            easy_total = self.clock.cfg.easy_mode_ticks / self.clock.cfg.ticks_per_second
            progress = 1.0 - left / easy_total
            if left <= self.cfg.danger_seconds:
                bar_color = self.cfg.danger_color
                lines.append((f"DANGER ZONE! {left}s", bar_color))
            elif left <= self.cfg.warning_seconds:
                bar_color = self.cfg.warning_color
                lines.append((f"WARNING! Hard in {left}s", bar_color))
            else:
                lines.append((f"EASY MODE ({left}s)", bar_color))
        else:
            bar_color = self.cfg.danger_color
            progress = min(1.0, state.speed / self.cfg.max_speed_display)
            lines.append(("HARD MODE", bar_color))
            lines.append((f"Speed: {state.speed:.1f}", self.cfg.ui_color))

        panel = pygame.Surface((200, 30 + len(lines) * 20), pygame.SRCALPHA)
        panel.fill((0, 0, 0, 150))
        self.surface.blit(panel, (width - 210, 10))
        for idx, (text, color) in enumerate(lines):
            surf = self.font.render(text, True, color)
            rect = surf.get_rect()
            rect.topright = (width - 20, 16 + idx * 20)
            self.surface.blit(surf, rect)

        bar_y = 18 + len(lines) * 20
        pygame.draw.rect(self.surface, (50, 50, 50), pygame.Rect(width - 190, bar_y, 160, 8), border_radius=4)
        pygame.draw.rect(
            self.surface,
            bar_color,
            pygame.Rect(width - 190, bar_y, int(160 * progress), 8),
            border_radius=4,
        )

    def button(self, rect: pygame.Rect, label: str, color: tuple[int, int, int]) -> None:
        pygame.draw.rect(self.surface, color, rect, border_radius=8)
        pygame.draw.rect(self.surface, (255, 255, 255), rect, 2, border_radius=8)
        surf = self.font.render(label, True, (20, 20, 20))
        self.surface.blit(surf, surf.get_rect(center=rect.center))

    def draw_touch_controls(self, controls: TouchControls, held: set[str], config: TouchConfig) -> None:
        for name, rect in controls.buttons.items():
            pad = pygame.Surface(rect.size, pygame.SRCALPHA)
            color = config.held_color if name in held else config.idle_color
            pygame.draw.rect(pad, color, pad.get_rect(), border_radius=10)
            pygame.draw.rect(pad, (255, 255, 255, 100), pad.get_rect(), 2, border_radius=10)
            self.surface.blit(pad, rect.topleft)
            label = self.large_font.render(TouchControls.LABELS[name], True, (255, 255, 255))
            self.surface.blit(label, label.get_rect(center=rect.center))

    def overlay(self, alpha: int) -> None:
        shade = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)
        shade.fill((0, 0, 0, alpha))
        self.surface.blit(shade, (0, 0))

    def centered(self, text: str, y: int, color: tuple[int, int, int], large: bool = False) -> None:
        font = self.large_font if large else self.font
        surf = font.render(text, True, color)
        rect = surf.get_rect(center=(self.surface.get_width() // 2, y))
        self.surface.blit(surf, rect)


class SledGame:
    """High-level game orchestration."""

    PLAYING = "playing"
    CRASHED = "crashed"
    EMAIL = "email"
    LEADERBOARD = "leaderboard"

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        input_provider: Optional[InputProvider] = None,
        store: Optional[LeaderboardStore] = None,
    ) -> None:
        pygame.init()
        pygame.font.init()

        self.config = config or GameConfig()
        self.screen = pygame.display.set_mode(self.config.canvas_size)
        pygame.display.set_caption("Sled Racer")

        self.clock = pygame.time.Clock()
        self.simulation = Simulation(self.config)
        self.renderer = Renderer(self.screen, self.config.render, self.simulation.clock)
        self.touch = TouchControls(self.config.canvas_size, self.config.touch)
        self.input_provider = input_provider or PointerInput(self.touch)
        self.store = store or LeaderboardStore(self.config.leaderboard)
        self.submitter = LeaderboardSubmitter(self.store)
        self.email = TextEntry(self.config.leaderboard.max_email_length)
        self.message = ""
        self.crash_frames = 0
        self.rows: list[LeaderboardEntry] = []
        self.menu_buttons: dict[str, pygame.Rect] = {}
        self.running = True
        self.screen_state = self.PLAYING

    @property
    def pointer(self) -> Optional[PointerInput]:
        return self.input_provider if isinstance(self.input_provider, PointerInput) else None

    def reset(self) -> None:
        self.simulation.reset()
        self.submitter.reset()
        self.email.clear()
        self.message = ""
        self.crash_frames = 0
        self.menu_buttons = {}
        if self.pointer is not None:
            self.pointer.release_all()
        self.screen_state = self.PLAYING

    def run(self) -> None:
        while self.running:
            self.clock.tick(self.config.target_fps)
            self._handle_events(pygame.event.get())

            inputs = self.input_provider.poll() if self.screen_state == self.PLAYING else InputState()
            event = self.simulation.step(inputs)
            if event is not None:
                self.screen_state = self.CRASHED
            if self.simulation.crashed:
                self.crash_frames += 1

            self._poll_submission()
            self.renderer.draw(self.simulation.state)
            if self.screen_state == self.PLAYING:
                held = self.pointer.held if self.pointer is not None else set()
                self.renderer.draw_touch_controls(self.touch, held, self.config.touch)
            elif self.screen_state == self.CRASHED:
                self._draw_crash_screen()
            elif self.screen_state == self.EMAIL:
                self._draw_email_screen()
            elif self.screen_state == self.LEADERBOARD:
                self._draw_leaderboard()
            pygame.display.flip()

        pygame.quit()

    def _handle_events(self, events: list[pygame.event.Event]) -> None:
        for event in events:
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION, pygame.FINGERUP):
                if self.pointer is not None:
                    self.pointer.handle_event(event)
                if event.type == pygame.FINGERDOWN and self.screen_state != self.PLAYING:
                    self._menu_click(finger_pos(event, self.config.canvas_size))
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self.screen_state != self.PLAYING:
                    self._menu_click(event.pos)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif self.screen_state == self.CRASHED:
                    if event.key == pygame.K_SPACE:
                        self.reset()
                    elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                        self._open_email()
                elif self.screen_state == self.EMAIL:
                    if event.key == pygame.K_SPACE and not self.email.text:
                        self.reset()
                    elif self.email.handle_key(event.key, event.unicode):
                        self._submit()
                elif self.screen_state == self.LEADERBOARD and event.key == pygame.K_SPACE:
                    self.reset()

    def _menu_click(self, pos: tuple[float, float]) -> None:
        name = hit_button(self.menu_buttons, pos)
        if name is None:
            return
        # cleared until the next redraw so a tap's synthetic mouse click is not handled twice
        self.menu_buttons = {}
        if self.screen_state == self.CRASHED:
            if name == "save":
                self._open_email()
            elif name == "restart":
                self.reset()
        elif self.screen_state == self.EMAIL:
            if name == "submit":
                self._submit()
            elif name == "skip":
                self.reset()
        elif self.screen_state == self.LEADERBOARD and name == "play_again":
            self.reset()

    def _open_email(self) -> None:
        self.email.clear()
        self.message = ""
        self.screen_state = self.EMAIL

    def _submit(self) -> None:
        if self.submitter.busy:
            return
        address = self.email.text.strip()
        if not address:
            self.message = "Please enter your email"
            return
        state = self.simulation.state
        logger.debug("Submitting score %d for %s", state.score, mask_email(address))
        self.submitter.submit(address, state.score, self.simulation.survival_seconds)

    def _poll_submission(self) -> None:
        status = self.submitter.poll()
        if self.screen_state != self.EMAIL:
            return
        if status == LeaderboardSubmitter.DONE:
            self.rows = self.store.top(8)
            self.screen_state = self.LEADERBOARD
        elif status == LeaderboardSubmitter.FAILED:
            self.message = self.submitter.error or "Failed to submit score"
            self.submitter.reset()

    def _place_button(self, name: str, label: str, center: tuple[int, int], size: tuple[int, int], color: tuple[int, int, int]) -> None:
        rect = pygame.Rect(0, 0, *size)
        rect.center = center
        self.menu_buttons[name] = rect
        self.renderer.button(rect, label, color)

    def _draw_crash_screen(self) -> None:
        width, height = self.screen.get_size()
        self.renderer.overlay(min(180, self.crash_frames * 3))
        pulse = 1 + math.sin(self.crash_frames * 0.2) * 0.1
        mid = height // 2
        self.renderer.centered("CRASHED!", int(mid - 80 * pulse), (255, 255, 0), large=True)
        seconds = self.simulation.survival_seconds
        self.renderer.centered(f"Survival Time: {seconds} seconds", mid - 10, (255, 255, 255))
        self.renderer.centered(achievement_for(seconds), mid + 15, (255, 215, 0))

        self.menu_buttons = {}
        self._place_button("save", "Save to leaderboard (ENTER)", (width // 2, mid + 90), (240, 40), (100, 255, 100))
        self._place_button("restart", "Restart (SPACE)", (width // 2, mid + 135), (160, 24), (220, 220, 220))

    def _draw_email_screen(self) -> None:
        width, _ = self.screen.get_size()
        self.renderer.overlay(200)
        seconds = self.simulation.survival_seconds
        self.renderer.centered("SAVE YOUR SCORE!", 190, (255, 215, 0), large=True)
        self.renderer.centered(f"You survived {seconds} seconds!", 225, (255, 255, 255))
        self.renderer.centered(f"Score: {self.simulation.state.score}", 250, (255, 255, 255))
        self.renderer.centered("Enter your email to join the leaderboard:", 300, (255, 255, 255))

        box = pygame.Rect(width // 2 - 150, 315, 300, 32)
        pygame.draw.rect(self.screen, (255, 255, 255), box, border_radius=5)
        text = self.email.text or "Enter your email..."
        surf = self.renderer.font.render(text, True, (50, 50, 50))
        self.screen.blit(surf, (box.x + 8, box.y + 8))

        if self.message:
            self.renderer.centered(self.message, 365, (255, 100, 100))
        if self.submitter.busy:
            self.renderer.centered("Submitting...", 390, (100, 200, 255))

        self.menu_buttons = {}
        self._place_button("submit", "Submit (ENTER)", (width // 2, 430), (200, 30), (100, 255, 100))
        self._place_button("skip", "Skip (SPACE)", (width // 2, 470), (120, 22), (220, 220, 220))

    def _draw_leaderboard(self) -> None:
        width, height = self.screen.get_size()
        self.renderer.overlay(200)
        self.renderer.centered("LEADERBOARD", 110, (255, 215, 0), large=True)
        medals = [(255, 215, 0), (192, 192, 192), (205, 127, 50)]
        for idx, entry in enumerate(self.rows):
            color = medals[idx] if idx < len(medals) else (255, 255, 255)
            line = f"#{idx + 1}  {mask_email(entry.email):<22} {entry.survival_time:>4}s {entry.score:>7}"
            surf = self.renderer.font.render(line, True, color)
            self.screen.blit(surf, (40, 160 + idx * 25))

        self.menu_buttons = {}
        self._place_button("play_again", "Play Again (SPACE)", (width // 2, height - 55), (200, 30), (255, 100, 100))

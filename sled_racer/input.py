"""Input abstractions for the sled racer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Protocol

import pygame

from .config import TouchConfig


@dataclass(frozen=True)
class InputState:
    """What the rider asks of the sled for one tick."""

    steer: int = 0  # -1 (left), 0, +1 (right)
    brake: bool = False
    boost: bool = False


class InputProvider(Protocol):
    """Anything the frame loop can ask for the rider's controls."""

    def poll(self) -> InputState:
        """Return the controls held right now."""


def merge_inputs(primary: InputState, secondary: InputState) -> InputState:
    """Combine two control sources; ``primary`` wins on steering."""
    return InputState(
        steer=primary.steer or secondary.steer,
        brake=primary.brake or secondary.brake,
        boost=primary.boost or secondary.boost,
    )


def hit_button(buttons: Mapping[str, pygame.Rect], pos: tuple[float, float]) -> Optional[str]:
    """Name of the first button under ``pos``, if any."""
    for name, rect in buttons.items():
        if rect.collidepoint(int(pos[0]), int(pos[1])):
            return name
    return None


class KeyboardInput(InputProvider):
    """Default keyboard controller (arrows or WASD)."""

    def poll(self) -> InputState:
        pressed = pygame.key.get_pressed()
        steer = 0
        if pressed[pygame.K_LEFT] or pressed[pygame.K_a]:
            steer = -1
        elif pressed[pygame.K_RIGHT] or pressed[pygame.K_d]:
            steer = 1
        brake = bool(pressed[pygame.K_DOWN] or pressed[pygame.K_s])
        boost = bool(pressed[pygame.K_UP] or pressed[pygame.K_w])
        return InputState(steer=steer, brake=brake, boost=boost)


class TouchControls:
    """Layout of the steer pads (bottom left) and boost/brake pads (bottom right)."""

    LABELS = {"left": "<", "right": ">", "boost": "^", "brake": "v"}

    def __init__(self, canvas_size: tuple[int, int], config: Optional[TouchConfig] = None) -> None:
        self.cfg = config or TouchConfig()
        self.canvas_size = canvas_size
        width, height = canvas_size
        size, margin, gap = self.cfg.button_size, self.cfg.margin, self.cfg.gap
        bottom = height - size - margin
        self.buttons = {
            "left": pygame.Rect(margin, bottom, size, size),
            "right": pygame.Rect(margin + size + gap, bottom, size, size),
            "boost": pygame.Rect(width - size - margin, bottom - size - gap, size, size),
            "brake": pygame.Rect(width - size - margin, bottom, size, size),
        }

    def held(self, points: Iterable[tuple[float, float]]) -> set[str]:
        names = set()
        for pos in points:
            name = hit_button(self.buttons, pos)
            if name is not None:
                names.add(name)
        return names

    def state_at(self, points: Iterable[tuple[float, float]]) -> InputState:
        """Controls pressed by pointers at ``points``; left beats right."""
        held = self.held(points)
        steer = -1 if "left" in held else (1 if "right" in held else 0)
        return InputState(steer=steer, brake="brake" in held, boost="boost" in held)


class PointerInput(InputProvider):
    """Keyboard controls plus the on-screen pads under the mouse or fingers.

    Finger positions arrive as normalised ``FINGER*`` events and are kept by
    id until lifted, so several pads can be held at once.
    """

    def __init__(self, controls: TouchControls, base: Optional[InputProvider] = None) -> None:
        self.controls = controls
        self.base = base or KeyboardInput()
        self.fingers: dict[int, tuple[float, float]] = {}
        self.held: set[str] = set()

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION):
            self.fingers[event.finger_id] = finger_pos(event, self.controls.canvas_size)
        elif event.type == pygame.FINGERUP:
            self.fingers.pop(event.finger_id, None)

    def release_all(self) -> None:
        self.fingers.clear()
        self.held = set()

    def poll(self) -> InputState:
        points = list(self.fingers.values())
        if pygame.mouse.get_pressed()[0]:
            points.append(pygame.mouse.get_pos())
        self.held = self.controls.held(points)
        return merge_inputs(self.base.poll(), self.controls.state_at(points))


def finger_pos(event: pygame.event.Event, canvas_size: tuple[int, int]) -> tuple[float, float]:
    return (event.x * canvas_size[0], event.y * canvas_size[1])


class TextEntry:
    """Single-line printable text buffer for the e-mail prompt."""

    def __init__(self, max_length: int = 50) -> None:
        self.max_length = max_length
        self.text = ""

    def handle_key(self, key: int, unicode: str = "") -> bool:
        """Apply one key press; return True when Enter asks to submit."""
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            return True
        if key == pygame.K_BACKSPACE:
            self.text = self.text[:-1]
            return False
        if len(unicode) == 1 and 32 <= ord(unicode) <= 126 and len(self.text) < self.max_length:
            self.text += unicode
        return False

    def clear(self) -> None:
        self.text = ""

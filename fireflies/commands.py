"""Text command interface: ``color ...`` and ``speed ...``."""

import math
from typing import Optional

from .colors import ColorMode


def _parse_float(text: str) -> Optional[float]:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_color(args, rainbow_speed: float) -> Optional[ColorMode]:
    """
    Parse the arguments of a ``color`` command.

    Accepted forms: ``leader``, ``random``, ``hue <value>``,
    ``rainbow [<speed>]``. Anything else yields None.
    """
    if not args:
        return None

    predicate = args[0].lower()
    if predicate == "leader":
        return ColorMode.leader()
    if predicate == "random":
        return ColorMode.random()
    if predicate == "hue":
        hue = _parse_float(args[1]) if len(args) > 1 else None
        return ColorMode.fixed_hue(hue) if hue is not None else None
    if predicate == "rainbow":
        if len(args) > 1:
            speed = _parse_float(args[1])
            if speed is None:
                return None
            return ColorMode.rainbow(speed)
        return ColorMode.rainbow(rainbow_speed)
    return None


class CommandInterpreter:
    """Applies chat-style commands to a running simulation."""

    def __init__(self, simulation):
        self.simulation = simulation

    def execute(self, text: str) -> bool:
        """
        Run one command line.

        Unknown commands and malformed arguments are ignored.

        Returns:
            True if the simulation state changed
        """
        words = text.strip().split()
        if not words:
            return False

        name, args = words[0].lower(), words[1:]

        if name == "color":
            mode = parse_color(args, self.simulation.state.rainbow_speed)
            if mode is None:
                return False
            self.simulation.set_color_mode(mode)
            print(f"[Cmd] Color mode: {mode}")
            return True

        if name == "speed":
            value = _parse_float(args[0]) if args else None
            if value is None or not self.simulation.set_max_speed(value):
                return False
            print(f"[Cmd] Max speed: {value:g}")
            return True

        return False

"""touchgestures CLI.

Usage:
    touchgestures replay     Replay a touch recording through recognizers
    touchgestures validate   Check a recognizer document
    touchgestures defaults   Print the default thresholds as YAML
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
import yaml

from touchgestures.config import GestureConfig
from touchgestures.errors import GestureError
from touchgestures.long_press import LongPressRecognizer
from touchgestures.pan import PanRecognizer
from touchgestures.recognizer import Recognizer
from touchgestures.rotate import RotateRecognizer
from touchgestures.swipe import SwipeRecognizer
from touchgestures.tap import TapRecognizer

app = typer.Typer(
    name="touchgestures",
    help="👆 Touch gesture recognition for recorded touch streams.",
    add_completion=False,
)


def describe(recognizer: Recognizer) -> str:
    """One line summarizing an action firing."""
    x, y = recognizer.current_location
    text = f"{str(recognizer.tag):14s} {recognizer.state.name:9s} at ({x:.0f}, {y:.0f})"

    if isinstance(recognizer, TapRecognizer):
        text += f" taps={recognizer.number_of_taps}"
    elif isinstance(recognizer, LongPressRecognizer):
        text += f" touches={recognizer.number_of_touches}"
    elif isinstance(recognizer, PanRecognizer):
        text += (
            f" translation=({recognizer.translation_x:.1f}, {recognizer.translation_y:.1f})"
            f" velocity=({recognizer.x_velocity:.0f}, {recognizer.y_velocity:.0f})"
        )
    elif isinstance(recognizer, SwipeRecognizer):
        direction = recognizer.recognized_direction
        text += f" direction={direction.name if direction else '-'}"
    elif isinstance(recognizer, RotateRecognizer):
        text += f" rotation={recognizer.rotation_in_degrees:.1f}° total={recognizer.cumulative_rotation:.3f}rad"
    return text


def _load_set(config: Optional[str]):
    from touchgestures.factory import build_recognizer_set, load_recognizer_set

    if config is None:
        return build_recognizer_set()

    path = Path(config)
    if not path.exists():
        typer.echo(f"❌ Config not found: {config}", err=True)
        raise typer.Exit(1)
    try:
        return load_recognizer_set(path)
    except GestureError as e:
        typer.echo(f"❌ Invalid config: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def replay(
    recording: str = typer.Argument(..., help="Path to recording file"),
    config: Optional[str] = typer.Option(None, help="Recognizer document (YAML)"),
    log_level: str = typer.Option("warning", help="Log level"),
):
    """Replay a recorded touch session through the recognizers."""
    from touchgestures.recorder import TouchPlayer

    logging.basicConfig(level=log_level.upper(), format="%(name)s %(levelname)s %(message)s")

    path = Path(recording)
    if not path.exists():
        typer.echo(f"❌ Recording not found: {recording}", err=True)
        raise typer.Exit(1)

    recognizers = _load_set(config)
    player = TouchPlayer.load(path)
    typer.echo(f"▶️  Replaying {path.name} ({player.sample_count} samples, {player.duration:.0f}ms)")

    action_count = 0

    def on_action(recognizer: Recognizer):
        nonlocal action_count
        action_count += 1
        typer.echo(f"   {recognizers.scheduler.now:8.0f}ms  {describe(recognizer)}")

    for recognizer in recognizers:
        recognizer.set_action_listener(on_action)

    player.replay(recognizers)
    typer.echo(f"\n✅ Replay complete. {action_count} actions fired.")


@app.command()
def validate(
    config: str = typer.Argument(..., help="Recognizer document (YAML)"),
):
    """Build the recognizers a document describes and list them."""
    recognizers = _load_set(config)
    typer.echo(f"✅ {len(recognizers)} recognizers:")
    for recognizer in recognizers:
        line = f"   {str(recognizer.tag):14s} {recognizer.kind}"
        if recognizer.require_failure is not None:
            line += f"  (requires failure of {recognizer.require_failure.tag})"
        typer.echo(line)


@app.command()
def defaults():
    """Print the default gesture thresholds as YAML."""
    typer.echo(yaml.dump(GestureConfig().to_dict(), default_flow_style=False, sort_keys=False), nl=False)


def main():
    app()


if __name__ == "__main__":
    main()

"""Discovery and control of ALSA and PulseAudio playback devices."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

ALSA = "alsa"
PULSEAUDIO = "pulseaudio"
CARDS_PATH = "/proc/asound/cards"
AMIXER = "/usr/bin/amixer"
PACTL = "/usr/bin/pactl"

_PACKAGES = {AMIXER: "alsa-utils", PACTL: "pulseaudio-utils"}
_MUTE_WORDS = {"on": "no", "off": "yes"}
_ALSA_ACTIONS = {"mute": "toggle", "volume-down": "5%-", "volume-up": "5%+"}
_PULSE_ACTIONS = {
    "mute": ("set-sink-mute", "toggle"),
    "volume-down": ("set-sink-volume", "-5%"),
    "volume-up": ("set-sink-volume", "+5%"),
}

Runner = Callable[[Sequence[str]], str]


@dataclass
class SoundDevice:
    """One playback device as shown in the device selection list."""

    device: str
    kind: str
    name: str = ""
    volume: str = ""
    muted: str = ""

    @property
    def label(self) -> str:
        """The ``device:type`` form used on the command line."""
        return f"{self.device}:{self.kind}"


def _run(argv: Sequence[str]) -> str:
    env = dict(os.environ, LANGUAGE="C")
    try:
        completed = subprocess.run(
            list(argv), capture_output=True, text=True, env=env, check=False
        )
    except FileNotFoundError as exc:
        package = _PACKAGES.get(argv[0], argv[0])
        raise RuntimeError(
            f"Be sure the package {package} is installed onto your system."
        ) from exc
    return completed.stdout


def _amixer_get(device: str) -> list[str]:
    return [AMIXER, "-D", device, "get", "Master", "playback"]


def parse_amixer_output(text: str) -> tuple[str, str] | None:
    """Read volume and mute state from ``amixer get Master playback``.

    Returns ``(volume, muted)`` with *muted* as ``"yes"`` or ``"no"``, or
    ``None`` when the output mentions no playback control at all.
    """
    state = None
    for line in text.splitlines():
        if "playback" not in line.lower():
            continue
        if state is None:
            state = ("", "")
        if "[" not in line:
            continue
        rest = line.split("[", 1)[1]
        volume = rest[:4].split("]", 1)[0]
        muted = rest.rsplit("[", 1)[-1].split("]", 1)[0]
        state = (volume, _MUTE_WORDS.get(muted, muted))
    return state


def parse_alsa_cards(text: str) -> list[SoundDevice]:
    """Parse the two-line records of ``/proc/asound/cards``."""
    lines = text.splitlines()
    devices = []
    for first, second in zip(lines[0::2], lines[1::2]):
        fields = first.split()
        if not fields:
            continue
        description = second.strip().rsplit(" ", 1)[0]
        devices.append(
            SoundDevice(
                device=f"hw:{fields[0]}",
                kind=ALSA,
                name=f"({ALSA}) {description}"[:79],
            )
        )
    return devices


def parse_pactl_sinks(text: str) -> list[SoundDevice]:
    """Parse the output of ``pactl list sinks``."""
    sinks: list[SoundDevice] = []
    current = None
    for line in text.splitlines():
        lower = line.lower()
        if lower.startswith("sink #"):
            fields = line[6:].split()
            current = SoundDevice(device=fields[0] if fields else "", kind=PULSEAUDIO)
            sinks.append(current)
            continue
        if current is None:
            continue
        if "alsa.card_name" in lower and "=" in line:
            current.name = f"({PULSEAUDIO}) {line.split('=', 1)[1].strip()}"
        elif "mute:" in lower:
            current.muted = line.split(":", 1)[1].strip()
        elif "volume:" in lower and "base" not in lower:
            head = line[: line.rfind("%") + 1]
            current.volume = head.rsplit(" ", 1)[-1]
    return sinks


def list_sound_devices(run: Runner | None = None) -> list[SoundDevice]:
    """List the default ALSA device, every ALSA card and every PulseAudio sink.

    *run* takes an argument vector and returns the command's output; by
    default the command is started with ``LANGUAGE=C``.
    """
    run = run or _run
    default = SoundDevice("default", ALSA, f"({ALSA}) default sound device")
    state = parse_amixer_output(run(_amixer_get("default")))
    if state is not None:
        default.volume, default.muted = state
    devices = [default]

    try:
        cards_text = Path(CARDS_PATH).read_text()
    except OSError as exc:
        raise OSError(exc.errno, f"Cannot read {CARDS_PATH}") from exc
    for card in parse_alsa_cards(cards_text):
        state = parse_amixer_output(run(_amixer_get(card.device)))
        if state is None:
            continue
        card.volume, card.muted = state
        devices.append(card)

    devices.extend(parse_pactl_sinks(run([PACTL, "list", "sinks"])))
    return devices


def control_command(device: SoundDevice, action: str) -> list[str]:
    """Build the command that mutes or changes the volume of *device*.

    *action* is ``"mute"``, ``"volume-down"`` or ``"volume-up"``.
    """
    if device.kind == ALSA:
        if action not in _ALSA_ACTIONS:
            raise ValueError(f"unknown action: {action}")
        return [AMIXER, "-q", "-D", device.device, "set", "Master", "playback",
                _ALSA_ACTIONS[action]]
    if action not in _PULSE_ACTIONS:
        raise ValueError(f"unknown action: {action}")
    command, argument = _PULSE_ACTIONS[action]
    return [PACTL, command, device.device, argument]


def find_device(devices: Sequence[SoundDevice], option: str) -> int | None:
    """Return the index of the device named ``device:type`` by *option*."""
    if ":" not in option:
        raise ValueError("audio device must be given as device:type")
    wanted = option.lower()
    for index, device in enumerate(devices):
        if device.label.lower() == wanted:
            return index
    return None
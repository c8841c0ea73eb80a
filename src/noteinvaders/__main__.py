"""Entry point for `python -m noteinvaders` or the `noteinvaders` console script."""

import argparse
import logging

from noteinvaders.app import App
from noteinvaders.midi_input import MidiInput
from noteinvaders.models import GameMode, NoteMode


def main() -> None:
    parser = argparse.ArgumentParser(description="Note Invaders: shoot down notes and chords with your keyboard")
    parser.add_argument("--soundfont", default=None, help="SoundFont (.sf2) used for sound cues")
    parser.add_argument("--midi-port", type=int, default=None, help="Index of the MIDI input port (default: first)")
    parser.add_argument("--list-ports", action="store_true", help="List MIDI input ports and exit")
    parser.add_argument(
        "--mode",
        choices=[m.name.lower() for m in GameMode],
        default="classic",
        help="Game mode preselected on the title screen",
    )
    parser.add_argument("--chords", action="store_true", help="Preselect chord mode")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_ports:
        for i, name in enumerate(MidiInput.list_ports()):
            print(f"{i}: {name}")
        return

    app = App(
        soundfont=args.soundfont,
        midi_port=args.midi_port,
        game_mode=GameMode[args.mode.upper()],
        note_mode=NoteMode.CHORD if args.chords else NoteMode.SINGLE,
    )
    app.run()


if __name__ == "__main__":
    main()

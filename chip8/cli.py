# Command line entry point: chip8 ROM [options]

import argparse
import logging
import sys

from .config import Config, Quirks, load_keymap
from .constants import CPU_HZ, SCALE, TONE_HZ
from .driver import Driver
from .errors import Chip8Error
from .interpreter import Interpreter


def build_parser():
    parser = argparse.ArgumentParser(
        prog="chip8",
        description="CHIP-8 virtual machine",
    )
    parser.add_argument("rom", help="program image to load at 0x200")
    parser.add_argument("--cpu-hz", type=int, default=CPU_HZ, metavar="HZ",
                        help="instructions per second (default: %(default)s)")
    parser.add_argument("--scale", type=int, default=SCALE, metavar="N",
                        help="window pixels per CHIP-8 pixel (default: %(default)s)")
    parser.add_argument("--tone", type=int, default=TONE_HZ, metavar="HZ",
                        help="buzzer frequency (default: %(default)s)")
    parser.add_argument("--keymap", metavar="FILE",
                        help="JSON object mapping key names to hex keys 0-F")
    parser.add_argument("--legacy-quirks", action="store_true",
                        help="SUPER-CHIP shift/logic/load-store behaviour instead of COSMAC VIP")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--headless", action="store_true",
                        help="run without a window, audio or keyboard")
    parser.add_argument("--max-cycles", type=int, default=None, metavar="N",
                        help="stop a headless run after N ticks")
    return parser


def config_from_args(args):
    config = Config(cpu_hz=args.cpu_hz, scale=args.scale, tone_hz=args.tone)
    if args.keymap:
        config.keymap = load_keymap(args.keymap)
    if args.legacy_quirks:
        config.quirks = Quirks.legacy()
    return config


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        config = config_from_args(args)
    except (OSError, ValueError) as e:
        print("Error: %s" % e, file=sys.stderr)
        return 2

    vm = Interpreter(quirks=config.quirks)
    try:
        vm.load_rom(args.rom)
        if args.headless:
            Driver(vm).run(max_ticks=args.max_cycles, cpu_hz=config.cpu_hz)
            error = None
        else:
            from .window import run_window
            error = run_window(vm, config)
    except Chip8Error as e:
        error = e

    if error is not None:
        print("Emulation error: %s" % error, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
pygame front end for the octavm CHIP-8 interpreter
"""

import argparse
import threading

import pygame

from octavm import Keypad, Machine, MachineConfig, read_rom, RomError
from octavm.logging import ConsoleLogger
from octavm.rendering import chip8_display_to_rgb, create_color_scheme

# COSMAC VIP layout on the left side of a QWERTY keyboard
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


class FrameBuffer:
    """Latest frame handed from the machine thread to the pygame thread."""

    def __init__(self):
        self._lock = threading.Lock()
        self._frame = None
        self._debug = ""

    def __call__(self, display, debug):
        with self._lock:
            self._frame = display
            self._debug = debug

    def latest(self):
        with self._lock:
            return self._frame, self._debug


def draw_overlay_text(surface, text, position, font, text_color=(255, 80, 80)):
    """Draw a line of text over the display"""
    if text:
        surface.blit(font.render(text, True, text_color), position)


def run_emulator(rom_filename, config: MachineConfig, show_debug=True):
    """Main front end loop: pygame events feed the keypad, frames are drawn at 60 FPS"""
    logger = ConsoleLogger("octavm")

    try:
        program = read_rom(rom_filename)
    except (OSError, RomError) as e:
        logger.error(f"Cannot load {rom_filename}: {e}")
        return 1
    logger.info(f"Loaded: {rom_filename} ({len(program)} bytes)")

    keypad = Keypad()
    frames = FrameBuffer()
    machine = Machine(program, config=config, keypad=keypad, renderer=frames, logger=logger)

    pygame.init()
    scale = config.scale
    screen = pygame.display.set_mode((64 * scale, 32 * scale))
    pygame.display.set_caption(f"octavm - {rom_filename}")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 18)
    on_color, off_color = create_color_scheme(config.color_scheme)

    thread = machine.start()

    while not machine.halted:
        clock.tick(60)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                machine.stop()
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    machine.stop()
                elif event.key == pygame.K_F1:
                    show_debug = not show_debug
                elif event.key in KEY_MAP:
                    keypad.press(KEY_MAP[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    keypad.release(KEY_MAP[event.key])

        display, debug = frames.latest()
        if display is not None:
            rgb = chip8_display_to_rgb(display, scale, on_color, off_color)
            # surfarray expects (width, height, 3)
            pygame.surfarray.blit_array(screen, rgb.swapaxes(0, 1))
            if show_debug:
                draw_overlay_text(screen, debug, (5, 32 * scale - 20), font)
            pygame.display.flip()

    thread.join(timeout=1.0)
    pygame.quit()

    if machine.fault is not None:
        logger.error(f"Machine stopped on fault: {machine.fault}")
        return 1
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run a CHIP-8 ROM")
    parser.add_argument("rom", help="Path to the ROM file")
    parser.add_argument("--config", help="JSON machine configuration")
    parser.add_argument("--hz", type=int, help="Instructions per second")
    parser.add_argument("--seed", type=int, help="Random seed for CXNN")
    parser.add_argument("--scale", type=int, help="Pixel scale")
    parser.add_argument("--raw-shift-flag", action="store_true",
                        help="8XYE stores the raw 0x80 bit in VF")
    args = parser.parse_args(argv)

    config = MachineConfig.load(args.config) if args.config else MachineConfig()
    if args.hz is not None:
        config.instruction_frequency = args.hz
    if args.seed is not None:
        config.seed = args.seed
    if args.scale is not None:
        config.scale = args.scale
    if args.raw_shift_flag:
        config.raw_shift_flag = True

    return run_emulator(args.rom, config)


if __name__ == "__main__":
    raise SystemExit(main())

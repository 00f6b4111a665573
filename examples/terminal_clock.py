"""
Headless run of a small program that counts seconds with the delay timer,
printing the display as text each time it changes.
"""

import time

from octavm import Machine, display_to_text
from octavm.logging import ConsoleLogger

PROGRAM = [
    0x6A00,  # 200: VA = 0, seconds counter
    0x00E0,  # 202: clear
    0xA300,  # 204: I = 0x300
    0xFA33,  # 206: BCD of VA at 0x300
    0xF265,  # 208: V0..V2 = hundreds, tens, ones
    0x6300,  # 20A: V3 = x
    0x6400,  # 20C: V4 = y
    0xF129,  # 20E: I = glyph for tens
    0xD345,  # 210: draw
    0x7305,  # 212: x += 5
    0xF229,  # 214: I = glyph for ones
    0xD345,  # 216: draw
    0x653C,  # 218: V5 = 60
    0xF515,  # 21A: delay = V5
    0xF507,  # 21C: V5 = delay
    0x3500,  # 21E: skip jump once delay reaches 0
    0x121C,  # 220: poll again
    0x7A01,  # 222: VA += 1
    0x1202,  # 224: redraw
]


def main(seconds: float = 3.0):
    logger = ConsoleLogger("clock")
    program = b"".join(word.to_bytes(2, "big") for word in PROGRAM)

    def render(display, debug):
        print(display_to_text(display, on_char="#", off_char="."))
        print(debug)

    machine = Machine(program, renderer=render, logger=logger)
    thread = machine.start()
    time.sleep(seconds)
    machine.stop()
    thread.join()


if __name__ == "__main__":
    main()

"""Machine configuration for the CHIP-8 interpreter."""

import json
from dataclasses import dataclass, asdict

from octavm.constants import INSTRUCTION_FREQUENCY, TIMER_FREQUENCY


@dataclass
class MachineConfig:
    """Interpreter settings.

    Attributes:
        instruction_frequency: Target instructions per second; sets the pacing sleep
        timer_frequency: Delay/sound timer rate in Hz (60 on real hardware)
        seed: Seed for the CXNN random byte generator
        raw_shift_flag: Store the raw 0x80 mask in VF for 8XYE instead of 0/1
        color_scheme: Color scheme used by the front end
        scale: Pixel upscaling factor used by the front end
    """
    instruction_frequency: int = INSTRUCTION_FREQUENCY
    timer_frequency: int = TIMER_FREQUENCY
    seed: int = 0
    raw_shift_flag: bool = False
    color_scheme: str = "classic"
    scale: int = 8

    def __post_init__(self):
        if self.instruction_frequency <= 0:
            raise ValueError(f"instruction_frequency must be positive, got {self.instruction_frequency}")
        if self.timer_frequency <= 0:
            raise ValueError(f"timer_frequency must be positive, got {self.timer_frequency}")

    @property
    def pacing_interval(self) -> float:
        """Seconds to sleep between ticks."""
        return 1.0 / self.instruction_frequency

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'MachineConfig':
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        return cls(**known)

    def save(self, path: str) -> None:
        """Save configuration to JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> 'MachineConfig':
        """Load configuration from JSON file."""
        with open(path, 'r') as f:
            return cls.from_dict(json.load(f))

"""
Configuration dataclasses for the tuner pipeline.

These immutable config objects hold the fixed constants of the gate,
estimator and range filter so a session can be built from a single value
and tests can swap in narrower or wider settings.
"""

from dataclasses import dataclass

MIN_SENSITIVITY: int = 1
MAX_SENSITIVITY: int = 100

MIN_FREQUENCY: float = 27.5
"""A0 — lowest piano key."""

MAX_FREQUENCY: float = 4186.0
"""C8 — highest piano key."""


@dataclass(frozen=True)
class TunerConfig:
    """
    Configuration for a tuner session.

    Attributes:
        min_threshold: RMS gate threshold at sensitivity 100 (most sensitive).
        max_threshold: RMS gate threshold at sensitivity 0 (least sensitive).
        yin_threshold: Absolute threshold on the cumulative mean normalized
            difference. Lower = stricter periodicity requirement.
        min_frequency: Lowest frequency reported as a note, in Hz.
        max_frequency: Highest frequency reported as a note, in Hz.
        default_sensitivity: Sensitivity a new session starts with (1–100).
        block_size: Samples per analysis block for hosts that cut blocks
            themselves (file host, CLI). The core accepts any length.
        fixed_threshold: When set, the gate uses this RMS threshold and
            ignores sensitivity entirely.

    Example:
        >>> config = TunerConfig(yin_threshold=0.1, block_size=4096)
        >>> session = TunerSession(config)
    """

    min_threshold: float = 0.0005
    max_threshold: float = 0.01
    yin_threshold: float = 0.15
    min_frequency: float = MIN_FREQUENCY
    max_frequency: float = MAX_FREQUENCY
    default_sensitivity: float = 50
    block_size: int = 2048
    fixed_threshold: float | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.min_threshold < 0:
            raise ValueError(f"min_threshold must be non-negative, got {self.min_threshold}")
        if self.max_threshold < self.min_threshold:
            raise ValueError(
                f"max_threshold ({self.max_threshold}) must be >= "
                f"min_threshold ({self.min_threshold})"
            )
        if not 0.0 < self.yin_threshold < 1.0:
            raise ValueError(f"yin_threshold must be in (0, 1), got {self.yin_threshold}")
        if self.min_frequency <= 0:
            raise ValueError(f"min_frequency must be positive, got {self.min_frequency}")
        if self.max_frequency <= self.min_frequency:
            raise ValueError(
                f"max_frequency ({self.max_frequency}) must be greater than "
                f"min_frequency ({self.min_frequency})"
            )
        if not MIN_SENSITIVITY <= self.default_sensitivity <= MAX_SENSITIVITY:
            raise ValueError(
                f"default_sensitivity must be in [{MIN_SENSITIVITY}, {MAX_SENSITIVITY}], "
                f"got {self.default_sensitivity}"
            )
        if self.block_size < 6:
            raise ValueError(f"block_size must be at least 6, got {self.block_size}")
        if self.fixed_threshold is not None and self.fixed_threshold < 0:
            raise ValueError(f"fixed_threshold must be non-negative, got {self.fixed_threshold}")


# Pre-defined configurations

DEFAULT_CONFIG = TunerConfig()
"""Sensitivity-driven gate between 0.0005 and 0.01, YIN threshold 0.15, A0–C8."""

LEGACY_GATE_CONFIG = TunerConfig(fixed_threshold=0.002)
"""Fixed 0.002 RMS gate. The sensitivity slider has no effect."""

HIGH_RESOLUTION_CONFIG = TunerConfig(block_size=4096)
"""Longer blocks for the bottom octave, where a period nears half a 2048 block."""

"""eth2fuzz: run Rust fuzzing engines against Eth2 state-transition targets."""

__version__ = "0.1.0"

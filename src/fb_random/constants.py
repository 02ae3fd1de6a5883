"""Constant values used across the file-backed random source."""

# Bytes consumed from the backing file per request, whatever the bit width
CHUNK_BYTES = 4

# Inclusive bounds on the bit width of a single request
MIN_BITS = 1
MAX_BITS = 32

# java.util.Random linear congruential generator
LCG_MULTIPLIER = 0x5DEECE66D
LCG_ADDEND = 0xB
LCG_MASK = (1 << 48) - 1

# Fixed seed of the fallback generator. Equal to the multiplier, so the
# scrambled internal state starts at zero.
FALLBACK_SEED = 0x5DEECE66D

# Environment variables read by the CLI
ENV_FILE = "FB_RANDOM_FILE"
ENV_LOG_LEVEL = "FB_RANDOM_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

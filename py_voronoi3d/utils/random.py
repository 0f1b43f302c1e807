"""
Process-wide default random source.

Generators accept an explicit AleaPRNG; when none is passed they fall back
to the instance managed here, seeded from settings.default_seed.
"""

from typing import Optional

from ..core.alea_prng import AleaPRNG

# Global PRNG instance
_prng: Optional[AleaPRNG] = None


def set_random_seed(seed: str) -> None:
    """Reseed the default PRNG."""
    global _prng
    _prng = AleaPRNG(seed)


def get_prng() -> AleaPRNG:
    """
    Get the default PRNG, creating it on first use.

    Returns:
        AleaPRNG instance
    """
    global _prng
    if _prng is None:
        from ..config import settings
        _prng = AleaPRNG(settings.default_seed)
    return _prng

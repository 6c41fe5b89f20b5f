from math import floor
from typing import Dict, Tuple

from ..models.pokemon import STAT_KEYS

DEFAULT_IV = 31
MAX_EV = 252


def _calc_hp(base: int, iv: int, ev: int, level: int) -> int:
    # Shedinja: siempre 1 PS
    if base == 1:
        return 1
    return floor(((2 * base + iv + floor(ev / 4)) * level) / 100) + level + 10


def _calc_other(base: int, iv: int, ev: int, level: int, nature_mult: float) -> int:
    return floor((floor(((2 * base + iv + floor(ev / 4)) * level) / 100) + 5) * nature_mult)


def base_stat_total(stats: Dict[str, int]) -> int:
    return sum(int(stats.get(k, 0)) for k in STAT_KEYS)


def stat_range(base: int, stat: str, level: int = 100) -> Tuple[int, int]:
    """(mínimo, máximo) a un nivel: 0 IV/0 EV/naturaleza negativa vs 31 IV/252 EV/positiva."""
    if stat == "HP":
        return _calc_hp(base, 0, 0, level), _calc_hp(base, DEFAULT_IV, MAX_EV, level)
    return _calc_other(base, 0, 0, level, 0.9), _calc_other(base, DEFAULT_IV, MAX_EV, level, 1.1)


def stat_ranges(stats: Dict[str, int], level: int = 100) -> Dict[str, Tuple[int, int]]:
    return {k: stat_range(stats[k], k, level) for k in STAT_KEYS if k in stats}

from __future__ import annotations
import logging
from typing import List, Optional
from .beatmap import Beatmap, EffectFlags, TimeSignature, TimingPoint
from .util.bits import has_flag
from .util.number import is_nan, to_flags, to_number

logger = logging.getLogger(__name__)

def timing_bank_name(index) -> str:
    """Bank index of a timing point → name; "none" and unknown indices display as "normal"."""
    if not is_nan(index):
        if index == 2:
            return "soft"
        if index == 3:
            return "drum"
    return "normal"

def _field(split: List[str], i: int) -> Optional[str]:
    return split[i] if i < len(split) else None

def parse_timing_point(line: str, beatmap: Beatmap) -> Optional[TimingPoint]:
    """
    time,beatLength,meter,sampleSet,sampleIndex,volume,uninherited,effects
    Only the first two fields are required.
    """
    split = [s.strip() for s in line.split(",")]
    if len(split) < 2:
        logger.debug("timing point dropped, too few fields: %r", line)
        return None

    time = to_number(split[0])
    beat_length = to_number(split[1])
    speed_multiplier = 100.0 / -beat_length if beat_length < 0 else 1

    time_signature = TimeSignature.SIMPLE_QUADRUPLE.value
    meter = _field(split, 2)
    if meter is not None:
        time_signature = TimeSignature.SIMPLE_QUADRUPLE.value if meter[:1] == "0" else to_number(meter)

    sample_set = beatmap.general.get("SampleSet", 0)
    if _field(split, 3) is not None:
        sample_set = to_number(split[3])

    custom_sample_bank = 0
    if _field(split, 4) is not None:
        custom_sample_bank = to_number(split[4])

    sample_volume = 100
    if _field(split, 5) is not None:
        sample_volume = to_number(split[5])

    timing_change = True
    if _field(split, 6) is not None:
        timing_change = split[6][:1] == "1"

    kiai_mode = False
    omit_first_bar_line = False
    if _field(split, 7) is not None:
        effects = to_flags(to_number(split[7]))
        kiai_mode = has_flag(effects, EffectFlags.KIAI)
        omit_first_bar_line = has_flag(effects, EffectFlags.OMIT_FIRST_BAR_LINE)

    point = TimingPoint(
        time=time,
        speed_multiplier=speed_multiplier,
        kiai_mode=kiai_mode,
        omit_first_bar_line=omit_first_bar_line,
        sample_bank=timing_bank_name(sample_set),
        sample_volume=sample_volume,
        custom_sample_bank=custom_sample_bank,
    )
    if timing_change:
        point.beat_length = beat_length
        point.time_signature = time_signature

    beatmap.timing_points.append(point)
    return point

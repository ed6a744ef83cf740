from __future__ import annotations
import logging
import math
from typing import List, Optional
from .beatmap import (
    Beatmap, Circle, HitObject, HitObjectType, PathType, SampleBankInfo,
    SampleInfo, Slider, Vector2,
)
from .errors import MalformedRecord
from .samples import convert_sound_type, read_custom_sample_banks
from .util.bits import clear_flag, extract_field, has_flag
from .util.number import is_nan, to_flags, to_number

logger = logging.getLogger(__name__)

MAX_REPEAT_COUNT = 9000
COLLINEAR_EPSILON = 0.001

def path_type_from_code(code: str) -> PathType:
    if code == "C":
        return PathType.CATMULL
    if code == "B":
        return PathType.BEZIER
    if code == "L":
        return PathType.LINEAR
    if code == "P":
        return PathType.PERFECT_CURVE
    return PathType.CATMULL

def is_collinear(p: List[Vector2]) -> bool:
    """Cross product of (p1 - p0) and (p2 - p0) is (almost) zero."""
    cross = (p[1].y - p[0].y) * (p[2].x - p[0].x) - (p[1].x - p[0].x) * (p[2].y - p[0].y)
    return abs(cross) <= COLLINEAR_EPSILON

def parse_curve(token: str):
    """ "P|x:y|x:y" → (PathType, [Vector2, ...]) """
    ptype, *point_tokens = [s.strip() for s in token.split("|")]
    path_type = path_type_from_code(ptype)

    points: List[Vector2] = []
    for t in point_tokens:
        xy = [s.strip() for s in t.split(":")]
        points.append(Vector2(to_number(xy[0]), to_number(xy[1] if len(xy) > 1 else None)))

    # a perfect circle can't pass through three points on one line
    if len(points) == 3 and path_type is PathType.PERFECT_CURVE and is_collinear(points):
        path_type = PathType.LINEAR
    return path_type, points

def _field(split: List[str], i: int) -> Optional[str]:
    return split[i] if i < len(split) else None

class HitObjectDecoder:
    """
    x,y,time,type,hitSound,objectParams...,hitSample

    Circles and sliders are produced; spinners and holds are recognised
    but yield nothing.
    """

    def __init__(self, max_repeat_count: int = MAX_REPEAT_COUNT, start_time_offset=0):
        self.max_repeat_count = int(max_repeat_count)
        self.start_time_offset = start_time_offset

    def decode(self, line: str, beatmap: Beatmap, line_no: Optional[int] = None) -> Optional[HitObject]:
        split = [s.strip() for s in line.split(",")]

        pos = Vector2(to_number(_field(split, 0)), to_number(_field(split, 1)))

        type_bits = to_flags(to_number(_field(split, 3)))
        combo_offset = extract_field(type_bits, HitObjectType.COMBO_OFFSET)
        type_bits = clear_flag(type_bits, HitObjectType.COMBO_OFFSET)
        combo = has_flag(type_bits, HitObjectType.NEW_COMBO)
        type_bits = clear_flag(type_bits, HitObjectType.NEW_COMBO)

        sound_type = to_flags(to_number(_field(split, 4)))
        bank_info = SampleBankInfo()

        result: Optional[HitObject] = None
        if has_flag(type_bits, HitObjectType.CIRCLE):
            result = Circle(pos=pos, combo=combo, combo_offset=combo_offset)
            if len(split) > 5:
                read_custom_sample_banks(split[5], bank_info)
        elif has_flag(type_bits, HitObjectType.SLIDER):
            result = Slider(pos=pos, combo=combo, combo_offset=combo_offset)
            self._decode_slider(result, split, sound_type, bank_info, line, line_no)
        elif has_flag(type_bits, HitObjectType.SPINNER):
            pass
        elif has_flag(type_bits, HitObjectType.HOLD):
            pass

        if result is None:
            logger.debug("hit object skipped (type bits %d): %r", type_bits, line)
            return None

        result.start_time = to_number(_field(split, 2)) + self.start_time_offset
        if result.samples is None:
            result.samples = convert_sound_type(sound_type, bank_info)

        beatmap.hit_objects.append(result)
        return result

    def _decode_slider(self, slider: Slider, split: List[str], sound_type: int,
                       bank_info: SampleBankInfo, line: str, line_no: Optional[int]) -> None:
        path_type, points = parse_curve(_field(split, 5) or "")

        repeat_count = to_number(_field(split, 6))
        if repeat_count > self.max_repeat_count:
            raise MalformedRecord("Repeat count is way too high", line_no=line_no, line=line)
        if not math.isfinite(repeat_count):
            repeat_count = 1
        # the raw field counts the first span as a repeat; fractions are truncated
        slider.repeat_count = max(0, int(repeat_count) - 1)

        length = 0
        if len(split) > 7:
            length = to_number(split[7])

        if len(split) > 10:
            read_custom_sample_banks(split[10], bank_info)

        nodes = slider.node_count

        node_bank_infos = [bank_info.copy() for _ in range(nodes)]
        if len(split) > 9 and split[9]:
            sets = [s.strip() for s in split[9].split("|")]
            for i, token in enumerate(sets[:nodes]):
                read_custom_sample_banks(token, node_bank_infos[i])

        node_sound_types = [sound_type] * nodes
        if len(split) > 8 and split[8]:
            adds = [s.strip() for s in split[8].split("|")]
            for i, token in enumerate(adds[:nodes]):
                sound = to_number(token)
                node_sound_types[i] = 0 if is_nan(sound) else sound

        node_samples: List[List[SampleInfo]] = [
            convert_sound_type(node_sound_types[i], node_bank_infos[i]) for i in range(nodes)
        ]

        slider.points = points
        slider.length = length
        slider.path_type = path_type
        slider.node_samples = node_samples
        # played when the slider ends
        slider.samples = node_samples[-1]

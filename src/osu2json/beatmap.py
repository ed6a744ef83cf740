from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum, IntFlag
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]

# --- legacy enums / packed bit constants ---

class SampleSet(IntEnum):
    NONE = 0
    NORMAL = 1
    SOFT = 2
    DRUM = 3

# names as written in [General] SampleSet
SAMPLE_SET_NAMES = {
    "None": SampleSet.NONE,
    "Normal": SampleSet.NORMAL,
    "Soft": SampleSet.SOFT,
    "Drum": SampleSet.DRUM,
}

class TimeSignature(IntEnum):
    SIMPLE_TRIPLE = 3
    SIMPLE_QUADRUPLE = 4

class EffectFlags(IntFlag):
    NONE = 0
    KIAI = 1 << 0
    OMIT_FIRST_BAR_LINE = 1 << 3

class HitObjectType(IntFlag):
    CIRCLE = 1 << 0
    SLIDER = 1 << 1
    NEW_COMBO = 1 << 2
    SPINNER = 1 << 3
    COMBO_OFFSET = 1 << 4 | 1 << 5 | 1 << 6   # 3-bit colour skip
    HOLD = 1 << 7

class SoundType(IntFlag):
    NONE = 0
    NORMAL = 1 << 0   # always played
    WHISTLE = 1 << 1
    FINISH = 1 << 2
    CLAP = 1 << 3

class PathType(Enum):
    CATMULL = "Catmull"
    BEZIER = "Bezier"
    LINEAR = "Linear"
    PERFECT_CURVE = "PerfectCurve"

def _compact(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}

# --- samples ---

@dataclass
class SampleBankInfo:
    normal: Optional[str] = None      # None = defer to the timing point bank
    add: Optional[str] = None
    custom_sample_bank: Optional[Number] = None
    volume: Optional[Number] = None
    filename: Optional[str] = None

    def copy(self) -> "SampleBankInfo":
        return replace(self)

@dataclass
class SampleInfo:
    filename: Optional[str] = None
    bank: Optional[str] = None
    name: Optional[str] = None
    volume: Optional[Number] = None
    custom_sample_bank: Optional[Number] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.filename:
            return {"filename": self.filename}
        return _compact({
            "bank": self.bank,
            "name": self.name,
            "volume": self.volume,
            "customSampleBank": self.custom_sample_bank,
        })

# --- timing ---

@dataclass
class TimingPoint:
    time: Number
    speed_multiplier: Number
    kiai_mode: bool
    omit_first_bar_line: bool
    sample_bank: str
    sample_volume: Number
    custom_sample_bank: Number
    beat_length: Optional[Number] = None      # only on uninherited points
    time_signature: Optional[Number] = None   # only on uninherited points

    @property
    def uninherited(self) -> bool:
        return self.beat_length is not None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "time": self.time,
            "beatLength": self.beat_length,
            "timeSignature": self.time_signature,
            "speedMultiplier": self.speed_multiplier,
            "kiaiMode": self.kiai_mode,
            "omitFirstBarLine": self.omit_first_bar_line,
            "sampleBank": self.sample_bank,
            "sampleVolume": self.sample_volume,
            "customSampleBank": self.custom_sample_bank,
        })

# --- hit objects ---

@dataclass
class Vector2:
    x: Number
    y: Number

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y}

@dataclass
class HitObject:
    pos: Vector2
    combo: bool = False
    combo_offset: int = 0
    start_time: Number = 0
    samples: Optional[List[SampleInfo]] = None

    kind = "hitobject"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "pos": self.pos.to_dict(),
            "combo": self.combo,
            "comboOffset": self.combo_offset,
            "startTime": self.start_time,
            "samples": [s.to_dict() for s in (self.samples or [])],
        }

@dataclass
class Circle(HitObject):
    kind = "circle"

@dataclass
class Slider(HitObject):
    points: List[Vector2] = field(default_factory=list)
    length: Number = 0
    path_type: PathType = PathType.CATMULL
    repeat_count: int = 0                      # spans after the first
    node_samples: List[List[SampleInfo]] = field(default_factory=list)

    kind = "slider"

    @property
    def node_count(self) -> int:
        return self.repeat_count + 2

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out.update({
            "points": [p.to_dict() for p in self.points],
            "length": self.length,
            "pathType": self.path_type.value,
            "repeatCount": self.repeat_count,
            "nodeSamples": [[s.to_dict() for s in node] for node in self.node_samples],
        })
        return out

# --- document ---

def default_general() -> Dict[str, Any]:
    return {
        "AudioFilename": "",
        "AudioLeadIn": 0,
        "PreviewTime": 0,
        "Countdown": 0,
        "SampleSet": SampleSet.NONE,
        "StackLeniency": 0,
        "Mode": 0,
        "LetterboxInBreaks": 0,
        "WidescreenStoryboard": 0,
    }

def default_difficulty() -> Dict[str, Number]:
    return {
        "HPDrainRate": 0,
        "CircleSize": 0,
        "OverallDifficulty": 0,
        "ApproachRate": 0,
    }

@dataclass
class Beatmap:
    general: Dict[str, Any] = field(default_factory=default_general)
    difficulty: Dict[str, Number] = field(default_factory=default_difficulty)
    timing_points: List[TimingPoint] = field(default_factory=list)
    hit_objects: List[HitObject] = field(default_factory=list)

    @property
    def sample_set(self) -> SampleSet:
        return SampleSet(self.general.get("SampleSet", SampleSet.NONE))

    def to_dict(self) -> Dict[str, Any]:
        general = dict(self.general)
        general["SampleSet"] = int(self.sample_set)
        return {
            "general": general,
            "difficulty": dict(self.difficulty),
            "timingPoints": [tp.to_dict() for tp in self.timing_points],
            "hitObjects": [ho.to_dict() for ho in self.hit_objects],
        }

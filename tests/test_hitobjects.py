import pytest

from osu2json.beatmap import Beatmap, Circle, PathType, SampleInfo, Slider, Vector2
from osu2json.errors import MalformedRecord
from osu2json.hitobjects import HitObjectDecoder, is_collinear, parse_curve


def _decode(line, **kwargs):
    bm = Beatmap()
    obj = HitObjectDecoder(**kwargs).decode(line, bm, line_no=7)
    return obj, bm


def test_circle():
    obj, bm = _decode("256,192,1000,5,0,0:0:0:0:")
    assert isinstance(obj, Circle)
    assert obj.pos == Vector2(256, 192)
    assert obj.combo is True
    assert obj.combo_offset == 0
    assert obj.start_time == 1000
    assert obj.samples == [SampleInfo(name="hitnormal", volume=0, custom_sample_bank=0)]
    assert bm.hit_objects == [obj]


def test_circle_combo_offset_and_sounds():
    obj, _ = _decode("10,20,500,101,6,2:3:1:80:")
    # 101 = offset 6 << 4 | new combo | circle
    assert obj.combo_offset == 6
    assert obj.combo
    assert [(s.bank, s.name) for s in obj.samples] == [
        ("soft", "hitnormal"), ("drum", "hitfinish"), ("drum", "hitwhistle")]
    assert obj.samples[0].volume == 80


def test_circle_without_bank_token():
    obj, _ = _decode("10,20,500,1,8")
    assert [s.name for s in obj.samples] == ["hitnormal", "hitclap"]
    assert obj.samples[0].bank is None


def test_single_span_slider():
    obj, _ = _decode("100,100,1500,2,2,P|150:150|200:100,1,100")
    assert isinstance(obj, Slider)
    assert obj.path_type is PathType.PERFECT_CURVE
    assert obj.points == [Vector2(150, 150), Vector2(200, 100)]
    assert obj.repeat_count == 0
    assert obj.length == 100
    assert len(obj.node_samples) == 2
    assert obj.samples == obj.node_samples[-1]
    assert [s.name for s in obj.samples] == ["hitnormal", "hitwhistle"]


def test_slider_with_node_overlays():
    line = "300,200,2000,38,0,B|350:250|400:200,3,140,2|0|8|4,1:2|0:0|3:0|2:3,0:0:0:0:"
    obj, _ = _decode(line)
    assert obj.combo and obj.combo_offset == 2
    assert obj.path_type is PathType.BEZIER
    assert obj.repeat_count == 2
    assert len(obj.node_samples) == obj.repeat_count + 2

    names = [[(s.bank, s.name) for s in node] for node in obj.node_samples]
    assert names == [
        [("normal", "hitnormal"), ("soft", "hitwhistle")],
        [(None, "hitnormal")],
        [("drum", "hitnormal"), (None, "hitclap")],
        [("soft", "hitnormal"), ("drum", "hitfinish")],
    ]
    # node tokens without index/volume keep the object-level ones
    assert all(s.volume == 0 and s.custom_sample_bank == 0 for node in obj.node_samples for s in node)
    assert obj.samples == obj.node_samples[-1]


def test_fewer_overlay_tokens_than_nodes_keep_defaults():
    obj, _ = _decode("0,0,0,2,4,L|10:10,2,50,2,3:0,1:1:0:30:")
    assert len(obj.node_samples) == 3
    assert [s.name for s in obj.node_samples[0]] == ["hitnormal", "hitwhistle"]
    assert obj.node_samples[0][0].bank == "drum"
    for node in obj.node_samples[1:]:
        assert [(s.bank, s.name) for s in node] == [("normal", "hitnormal"), ("normal", "hitfinish")]
        assert node[0].volume == 30


def test_non_numeric_node_sound_is_zero():
    obj, _ = _decode("0,0,0,2,8,L|10:10,1,50,x|2")
    assert [s.name for s in obj.node_samples[0]] == ["hitnormal"]
    assert [s.name for s in obj.node_samples[1]] == ["hitnormal", "hitwhistle"]


def test_node_filename_overrides_node():
    obj, _ = _decode("0,0,0,2,0,L|10:10,1,50,0|0,0:0:0:0:a.wav|1:1")
    assert obj.node_samples[0] == [SampleInfo(filename="a.wav")]
    assert obj.node_samples[1][0].bank == "normal"


def test_collinear_perfect_curve_becomes_linear():
    path_type, points = parse_curve("P|0:0|1:1|2:2")
    assert path_type is PathType.LINEAR
    assert len(points) == 3
    path_type, _ = parse_curve("P|0:0|1:1|2:0")
    assert path_type is PathType.PERFECT_CURVE


def test_collinear_check_only_for_three_points():
    path_type, _ = parse_curve("P|0:0|1:1|2:2|3:3")
    assert path_type is PathType.PERFECT_CURVE
    path_type, _ = parse_curve("B|0:0|1:1|2:2")
    assert path_type is PathType.BEZIER


def test_is_collinear_tolerance():
    assert is_collinear([Vector2(0, 0), Vector2(100, 0), Vector2(200, 0.000001)])
    assert not is_collinear([Vector2(0, 0), Vector2(100, 0), Vector2(200, 1)])


def test_unknown_path_code_is_catmull():
    path_type, _ = parse_curve("Z|1:1")
    assert path_type is PathType.CATMULL


def test_repeat_count_over_limit_is_fatal():
    with pytest.raises(MalformedRecord) as exc:
        _decode("0,0,0,2,0,L|10:10,9001,50")
    assert exc.value.line_no == 7


def test_repeat_count_limit_is_inclusive():
    obj, _ = _decode("0,0,0,2,0,L|10:10,9000,50")
    assert obj.repeat_count == 8999
    assert len(obj.node_samples) == 9001


def test_configurable_repeat_limit():
    with pytest.raises(MalformedRecord):
        _decode("0,0,0,2,0,L|10:10,11,50", max_repeat_count=10)


def test_zero_and_bad_repeat_counts_clamp():
    obj, _ = _decode("0,0,0,2,0,L|10:10,0,50")
    assert obj.repeat_count == 0
    obj, _ = _decode("0,0,0,2,0,L|10:10,many,50")
    assert obj.repeat_count == 0
    assert len(obj.node_samples) == 2


def test_slider_without_length_or_path():
    obj, _ = _decode("0,0,0,2,0")
    assert obj.path_type is PathType.CATMULL
    assert obj.points == []
    assert obj.length == 0


def test_spinner_and_hold_produce_nothing():
    for line in ("256,192,3000,12,0,4000,0:0:0:0:", "64,192,3000,128,0,3500:0:0:0:0:"):
        obj, bm = _decode(line)
        assert obj is None
        assert bm.hit_objects == []


def test_unknown_type_bits_produce_nothing():
    obj, bm = _decode("1,2,3,4,0")
    assert obj is None
    assert bm.hit_objects == []
    obj, bm = _decode("garbage")
    assert obj is None


def test_start_time_offset():
    obj, _ = _decode("0,0,1000,1,0", start_time_offset=-20)
    assert obj.start_time == 980


def test_slider_to_dict_shape():
    obj, _ = _decode("0,0,10,2,0,P|0:0|1:1|2:2,1,70")
    d = obj.to_dict()
    assert d["kind"] == "slider"
    assert d["pathType"] == "Linear"
    assert d["repeatCount"] == 0
    assert d["points"][2] == {"x": 2, "y": 2}
    assert d["samples"] == d["nodeSamples"][-1]


def test_fractional_repeat_count_is_truncated():
    obj, _ = _decode("0,0,0,2,0,L|10:10,2.5,50")
    assert obj.repeat_count == 1
    assert obj.node_count == 3
    assert len(obj.node_samples) == 3


def test_record_with_circle_bit_and_slider_fields_is_a_circle():
    obj, _ = _decode("256,256,1000,1,0,0:0:0:0:,1,70,8|0,0|0,0:0|0:0,0:0:0:0:")
    assert isinstance(obj, Circle)
    assert not isinstance(obj, Slider)
    assert obj.pos == Vector2(256, 256)
    assert obj.start_time == 1000
    assert obj.samples == [SampleInfo(name="hitnormal", volume=0, custom_sample_bank=0)]


def test_same_record_with_slider_bit_has_two_nodes():
    obj, _ = _decode("256,256,1000,2,0,L|300:256,1,70,8|0,0:0|0:0,0:0:0:0:")
    assert isinstance(obj, Slider)
    assert obj.repeat_count == 0
    assert len(obj.node_samples) == 2
    assert [s.name for s in obj.node_samples[0]] == ["hitnormal", "hitclap"]
    assert obj.samples == obj.node_samples[-1]

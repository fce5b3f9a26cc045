"""
Macro object loader tests.
"""

import unittest

from decompscene.errors import AmbiguousResolutionError
from decompscene.loaders.macro_object_loader import (
    evaluate_preset_param,
    load_macro_objects,
    load_macro_presets,
    lookup_preset,
    parse_macro_objects,
    parse_macro_presets,
)

PRESETS = """
struct MacroPreset MacroObjectPresets[] = {
    /* macro_yellow_coin     */ { bhvYellowCoin, MODEL_YELLOW_COIN, 0 },
    /* macro_goomba_triplet  */ { bhvGoombaTripletSpawner, MODEL_NONE, 0x2 },
    /* macro_coin_ring       */ { bhvCoinFormation, MODEL_NONE, COIN_FORMATION_FLAG_RING | COIN_FORMATION_FLAG_VERTICAL },
    /* macro_red_coin        */ { bhvRedCoin, MODEL_RED_COIN, RED_COIN_PARAM },
};
"""

MACROS = """
const MacroObject bob_seg7_macro_objs[] = {
    MACRO_OBJECT(/*preset*/ macro_yellow_coin, /*yaw*/ 0, /*pos*/ 100, 200, 300),
    MACRO_OBJECT_WITH_BHV_PARAM(/*preset*/ macro_goomba_triplet, /*yaw*/ 90, /*pos*/ -10, 0, 10, /*bhvParam*/ 0x1),
    MACRO_OBJECT(/*preset*/ macro_unknown_thing, /*yaw*/ 0, /*pos*/ 0, 0, 0),
    MACRO_OBJECT(/*preset*/ macro_coin_ring, /*yaw*/ 45, /*pos*/ 1, 2, 3),
    MACRO_OBJECT_END(),
};
"""


class PresetTest(unittest.TestCase):

    def test_parse_presets(self):
        presets = parse_macro_presets(PRESETS)
        self.assertEqual(len(presets), 4)
        coin = presets["macro_yellow_coin"]
        self.assertEqual((coin.behavior, coin.model, coin.param), ("bhvYellowCoin", "MODEL_YELLOW_COIN", 0))
        self.assertEqual(presets["macro_goomba_triplet"].param, 2)

    def test_or_expression_is_not_evaluated(self):
        presets = parse_macro_presets(PRESETS)
        self.assertEqual(presets["macro_coin_ring"].param, 0)
        self.assertEqual(evaluate_preset_param("0x1 | 0x2"), 0)

    def test_symbol_param_is_zero(self):
        self.assertEqual(parse_macro_presets(PRESETS)["macro_red_coin"].param, 0)

    def test_lookup_unknown_raises(self):
        with self.assertRaises(AmbiguousResolutionError):
            lookup_preset({}, "macro_nothing")


class MacroObjectsTest(unittest.TestCase):

    def setUp(self):
        self.objects = parse_macro_objects(MACROS, parse_macro_presets(PRESETS))

    def test_unknown_presets_dropped(self):
        self.assertEqual(len(self.objects), 3)
        self.assertTrue(all(o.source == "macro" for o in self.objects))

    def test_textual_order(self):
        self.assertEqual([o.behavior for o in self.objects],
                         ["bhvYellowCoin", "bhvGoombaTripletSpawner", "bhvCoinFormation"])

    def test_fields(self):
        coin = self.objects[0]
        self.assertEqual(coin.model_name, "MODEL_YELLOW_COIN")
        self.assertEqual(coin.position, (100, 200, 300))

    def test_yaw_is_degrees(self):
        self.assertEqual(self.objects[1].ry, 90)
        self.assertEqual(self.objects[2].ry, 45)

    def test_instance_param_ored_with_preset(self):
        self.assertEqual(self.objects[1].params, 0x3)


def test_file_wrappers(tmp_path):
    presets_path = tmp_path / "macro_presets.inc.c"
    presets_path.write_text(PRESETS)
    macro_path = tmp_path / "macro.inc.c"
    macro_path.write_text(MACROS)

    presets = load_macro_presets(presets_path)
    assert len(presets) == 4
    assert len(load_macro_objects(macro_path, presets)) == 3
    assert load_macro_presets(tmp_path / "absent.inc.c") == {}
    assert load_macro_objects(tmp_path / "absent.inc.c", presets) == []

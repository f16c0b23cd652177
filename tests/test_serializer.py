import json
from dataclasses import dataclass

import numpy as np

from devconsole import diagnostics
from devconsole.serializer import ValueKind, classify, stringify


@dataclass
class _Point:
    x: int
    y: int


class _Unprintable:
    def __str__(self):
        raise RuntimeError("no text for you")


def test_text_and_numbers_are_coerced():
    assert stringify("ready") == "ready"
    assert stringify(42) == "42"
    assert stringify(2.5) == "2.5"
    assert stringify(np.float32(1.5)) == "1.5"
    assert stringify(None) == "None"


def test_structured_values_are_pretty_printed():
    value = {"fps": 60, "layers": ["bg", "ui"]}
    assert stringify(value) == json.dumps(value, indent=2)
    assert stringify(np.arange(3)) == json.dumps([0, 1, 2], indent=2)
    assert stringify(_Point(1, 2)) == json.dumps({"x": 1, "y": 2}, indent=2)


def test_classification_is_explicit():
    assert classify("a") is ValueKind.TEXTUAL
    assert classify(True) is ValueKind.NUMERIC
    assert classify([1]) is ValueKind.STRUCTURED
    assert classify(object()) is ValueKind.UNSERIALIZABLE


def test_cyclic_structure_falls_back_to_plain_text():
    value = {"name": "loop"}
    value["self"] = value

    text = stringify(value)

    assert text == str(value)
    assert diagnostics.fault_counts()["serialization"] == 1


def test_non_serialisable_member_falls_back_to_plain_text():
    value = {"handle": object()}
    assert stringify(value) == str(value)


def test_value_without_text_form_never_raises():
    text = stringify(_Unprintable())
    assert text.startswith("<") and "_Unprintable" in text

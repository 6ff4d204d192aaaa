"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.
"""

from abc import ABC
from typing import Sequence, Union
from ..environment import Environment

NATIVE_DATA = Union[None, bool, int, float, str]

class QuillValue(ABC):
	""" Root for classes that implement specialized run-time data structures """

VALUE = Union[NATIVE_DATA, QuillValue]
ARGS = Sequence[VALUE]
ENV = Environment

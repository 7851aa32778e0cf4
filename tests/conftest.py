import os
import pytest

from utils import PrefixMap, Resolver

EX = "http://example.org/zoo#"
ROOT = os.path.join(os.path.dirname(__file__), "..")
TEMPLATES = os.path.join(ROOT, "templates")
STATIC = os.path.join(ROOT, "static")


@pytest.fixture
def prefix_map():
    return PrefixMap({"owl": "http://www.w3.org/2002/07/owl#"}, default=EX)


@pytest.fixture
def resolver(prefix_map):
    return Resolver(prefix_map, {EX + "Dog": "Dog", EX + "hasPart": "has part"})

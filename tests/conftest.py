import pytest

from index_export.index import InMemoryIndex


@pytest.fixture
def pets_index():
    """d1: cat x2, d2: cat x1, d3: dog x1."""
    return InMemoryIndex(["cat cat", "cat", "dog"], ids=["d1", "d2", "d3"])

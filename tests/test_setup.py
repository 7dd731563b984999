"""
Verify project setup is correct.
"""

import pipetemplate


def test_version_exists():
    """Package has version."""
    assert hasattr(pipetemplate, "__version__")
    assert pipetemplate.__version__ == "0.1.0"
